import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from provenance_api.config import Config
from provenance_api.routers.metadata import router as metadata_router

logging.basicConfig(
	level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
	format="[%(asctime)s] %(levelname)s in %(module)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
	for error in Config.validate():
		logger.warning("Configuration error: %s", error)
	logger.info("Starting with settings: %s", Config.get_summary())

	app = FastAPI(title=Config.API_TITLE, version=Config.API_VERSION)

	app.add_middleware(
		CORSMiddleware,
		allow_origins=Config.CORS_ORIGINS,
		allow_credentials=False,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	# Routers
	app.include_router(metadata_router)

	return app


app = create_app()


if __name__ == "__main__":
	# Local dev server: uvicorn provenance_api.main:app --reload
	import uvicorn

	uvicorn.run("provenance_api.main:app", host="0.0.0.0", port=8000, reload=True)
