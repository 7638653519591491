import os


class Config:
	API_TITLE = "Provenance API - Image Metadata"
	API_VERSION = "0.1.0"

	LOG_LEVEL = os.environ.get("PROVENANCE_LOG_LEVEL", "INFO").upper()

	# Upload limits
	MAX_UPLOAD_MB = float(os.environ.get("PROVENANCE_MAX_UPLOAD_MB", "25"))
	MAX_UPLOAD_BYTES = int(MAX_UPLOAD_MB * 1024 * 1024)

	# CORS (adjust origins in production)
	CORS_ORIGINS = [o.strip() for o in os.environ.get("PROVENANCE_CORS_ORIGINS", "*").split(",") if o.strip()]

	@classmethod
	def validate(cls):
		"""Validate configuration on startup"""
		errors = []

		if cls.LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
			errors.append(f"Unknown log level: {cls.LOG_LEVEL}")

		if cls.MAX_UPLOAD_BYTES <= 0:
			errors.append("PROVENANCE_MAX_UPLOAD_MB must be positive")

		if not cls.CORS_ORIGINS:
			errors.append("PROVENANCE_CORS_ORIGINS must list at least one origin")

		return errors

	@classmethod
	def get_summary(cls):
		"""Get configuration summary for logging"""
		return {
			"log_level": cls.LOG_LEVEL,
			"max_upload_bytes": cls.MAX_UPLOAD_BYTES,
			"cors_origins": cls.CORS_ORIGINS,
		}
