from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from provenance_api.services.byte_reader import Rational
from provenance_api.services.formatting import (
	build_camera_label,
	describe_color_space,
	describe_exposure_program,
	describe_orientation,
	format_aperture,
	format_date,
	format_dimensions,
	format_exposure,
	format_focal_length,
	format_iso,
	format_white_balance,
	plain_number,
	stringify_raw,
	to_float,
	to_int,
	to_text,
)
from provenance_api.services.tags import GPS, IMAGE, IOP, PHOTO, THUMBNAIL
from provenance_api.services.tiff_decoder import TagDictionary

STATUS_INFO = "info"
STATUS_WARNING = "warning"
STATUS_ERROR = "error"

DETAILS_STRIPPED = "EXIF metadata appears to be stripped from the image."
DETAILS_NO_GPS = "EXIF metadata was found, but no GPS coordinates were embedded."
DETAILS_WITH_GPS = "Camera metadata and GPS coordinates were detected in the image."
DETAILS_NO_BLOCK = (
	"EXIF may be absent due to social platform scrubbing, screenshots, AI/graphics output, "
	"or export settings that remove metadata."
)


@dataclass(frozen=True)
class MetadataEntry:
	label: str
	value: str
	tone: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		result: Dict[str, Any] = {"label": self.label, "value": self.value}
		if self.tone is not None:
			result["tone"] = self.tone
		return result


@dataclass(frozen=True)
class MetadataGroup:
	title: str
	entries: Tuple[MetadataEntry, ...]

	def to_dict(self) -> Dict[str, Any]:
		return {"title": self.title, "entries": [e.to_dict() for e in self.entries]}


@dataclass(frozen=True)
class MetadataSummary:
	status: str
	exif_stripped: bool
	gps_data: bool
	details: str
	entries: Tuple[MetadataEntry, ...] = field(default_factory=tuple)
	groups: Tuple[MetadataGroup, ...] = field(default_factory=tuple)
	big_endian: Optional[bool] = None
	error: Optional[str] = None
	raw: Optional[TagDictionary] = None

	def to_dict(self, include_raw: bool = False) -> Dict[str, Any]:
		"""Serialize to the camelCase contract consumed by the UI layer."""
		result: Dict[str, Any] = {
			"status": self.status,
			"exifStripped": self.exif_stripped,
			"gpsData": self.gps_data,
			"details": self.details,
			"entries": [e.to_dict() for e in self.entries],
			"groups": [g.to_dict() for g in self.groups],
		}
		if self.big_endian is not None:
			result["bigEndian"] = self.big_endian
		if self.error is not None:
			result["error"] = self.error
		if include_raw:
			result["raw"] = _sanitize(self.raw.namespaces) if self.raw is not None else None
		return result


@dataclass(frozen=True)
class Coordinates:
	latitude: float
	longitude: float
	display_latitude: str
	display_longitude: str

	@property
	def text(self) -> str:
		return f"{self.display_latitude}, {self.display_longitude}"


def empty_summary(details: str, error: Optional[str] = None) -> MetadataSummary:
	return MetadataSummary(
		status=STATUS_ERROR,
		exif_stripped=True,
		gps_data=False,
		details=details,
		entries=(
			MetadataEntry("EXIF Data", "Missing", "error"),
			MetadataEntry("Endianness", "Unknown", "neutral"),
			MetadataEntry("GPS", "Not embedded", "warning"),
		),
		error=error,
	)


def has_meaningful_exif(tags: TagDictionary) -> bool:
	return len(tags.get(IMAGE)) + len(tags.get(PHOTO)) + len(tags.get(GPS)) > 0


def to_decimal_degrees(values: Any, ref: Any) -> Optional[float]:
	"""[deg, min, sec] -> signed decimal degrees rounded to 6 places."""
	if not isinstance(values, list) or not values:
		return None
	parts = [to_float(v) for v in values[:3]]
	if any(p is None for p in parts):
		return None
	parts += [0.0] * (3 - len(parts))
	degrees, minutes, seconds = parts
	sign = -1 if to_text(ref) in ("S", "W") else 1
	decimal = sign * (degrees + minutes / 60 + seconds / 3600)
	if not math.isfinite(decimal):
		return None
	return round(decimal, 6)


def format_coordinate(decimal: float, ref: Any, axis: str) -> str:
	absolute = abs(decimal)
	degrees = math.floor(absolute)
	minutes_float = (absolute - degrees) * 60
	minutes = math.floor(minutes_float)
	seconds = (minutes_float - minutes) * 60
	if axis == "lat":
		default_direction = "S" if decimal < 0 else "N"
	else:
		default_direction = "W" if decimal < 0 else "E"
	direction = to_text(ref) or default_direction
	formatted_seconds = f"{seconds:.1f}" if seconds >= 10 else f"{seconds:.2f}"
	return f"{decimal:.6f}° {direction} ({degrees}° {minutes}' {formatted_seconds}\")"


def build_gps_coordinates(gps: Dict[str, Any]) -> Optional[Coordinates]:
	latitude = to_decimal_degrees(gps.get("GPSLatitude"), gps.get("GPSLatitudeRef"))
	longitude = to_decimal_degrees(gps.get("GPSLongitude"), gps.get("GPSLongitudeRef"))
	if latitude is None or longitude is None:
		return None
	return Coordinates(
		latitude=latitude,
		longitude=longitude,
		display_latitude=format_coordinate(latitude, gps.get("GPSLatitudeRef"), "lat"),
		display_longitude=format_coordinate(longitude, gps.get("GPSLongitudeRef"), "lon"),
	)


def build_gps_timestamp(gps: Dict[str, Any]) -> Optional[str]:
	stamp = gps.get("GPSTimeStamp")
	date = to_text(gps.get("GPSDateStamp"))
	if not isinstance(stamp, list) or not date:
		return None
	parts = [to_float(v) or 0.0 for v in stamp[:3]]
	parts += [0.0] * (3 - len(parts))
	return f"{date} {':'.join(f'{math.floor(p):02d}' for p in parts)} UTC"


def build_gps_altitude(gps: Dict[str, Any]) -> Optional[str]:
	altitude = _scalar(gps.get("GPSAltitude"))
	if altitude is None:
		return None
	ref = to_int(gps.get("GPSAltitudeRef"))
	if not ref:
		return f"{altitude:.1f} m"
	return f"{altitude:.1f} m ({'Below' if ref == 1 else 'Above'} sea level)"


def summarize(tags: TagDictionary) -> MetadataSummary:
	"""Turn a decoded tag dictionary into the authenticity summary. Pure and deterministic."""
	image = tags.get(IMAGE)
	photo = tags.get(PHOTO)
	gps = tags.get(GPS)
	thumbnail = tags.get(THUMBNAIL)
	iop = tags.get(IOP)

	has_exif = has_meaningful_exif(tags)
	coordinates = build_gps_coordinates(gps)
	gps_timestamp = build_gps_timestamp(gps)
	gps_altitude = build_gps_altitude(gps)
	gps_data = bool(coordinates or gps_altitude or gps_timestamp)

	capture_date = format_date(photo.get("DateTimeOriginal")) or format_date(image.get("DateTime"))
	camera_label = build_camera_label(image.get("Make"), image.get("Model"))
	lens_label = to_text(photo.get("LensModel")) or to_text(photo.get("LensMake"))
	exposure = format_exposure(photo.get("ExposureTime"))
	aperture = format_aperture(photo.get("FNumber"))
	iso_value = photo.get("ISOSpeedRatings")
	iso_setting = format_iso(iso_value if iso_value is not None else photo.get("ISOSpeed"))
	focal_length = format_focal_length(photo.get("FocalLength"))
	white_balance = format_white_balance(photo.get("WhiteBalance"))
	software = to_text(image.get("Software"))
	dimensions = format_dimensions(
		_first_present(image.get("ImageWidth"), photo.get("PixelXDimension")),
		_first_present(image.get("ImageLength"), photo.get("PixelYDimension")),
	)
	orientation = to_int(image.get("Orientation"))
	color_space = to_int(photo.get("ColorSpace"))

	if coordinates:
		location = coordinates.text
	else:
		location = "GPS metadata found" if gps_data else "Not embedded"

	if tags.big_endian is None:
		endianness = "Unknown"
	else:
		endianness = "Big-endian" if tags.big_endian else "Little-endian"

	entries = [
		MetadataEntry("EXIF Data", "Present" if has_exif else "Missing", "success" if has_exif else "error"),
		MetadataEntry("Endianness", endianness, "neutral"),
		MetadataEntry("GPS", location, "success" if gps_data else "warning"),
	]
	if camera_label:
		entries.append(MetadataEntry("Camera", camera_label))
	if capture_date:
		entries.append(MetadataEntry("Captured", capture_date))
	highlight = " • ".join(part for part in (exposure, aperture, iso_setting) if part)
	if highlight:
		entries.append(MetadataEntry("Exposure", highlight))
	if dimensions:
		entries.append(MetadataEntry("Resolution", dimensions))

	groups: List[MetadataGroup] = []

	image_group: List[MetadataEntry] = []
	if camera_label:
		image_group.append(MetadataEntry("Camera", camera_label))
	if to_text(image.get("Make")):
		image_group.append(MetadataEntry("Make", to_text(image.get("Make"))))
	if to_text(image.get("Model")):
		image_group.append(MetadataEntry("Model", to_text(image.get("Model"))))
	if lens_label:
		image_group.append(MetadataEntry("Lens", lens_label))
	if software:
		image_group.append(MetadataEntry("Software", software))
	if dimensions:
		image_group.append(MetadataEntry("Resolution", dimensions))
	if orientation is not None:
		image_group.append(MetadataEntry("Orientation", describe_orientation(orientation)))
	if color_space is not None:
		image_group.append(MetadataEntry("Color Space", describe_color_space(color_space)))
	if capture_date:
		image_group.append(MetadataEntry("Timestamp", capture_date))
	_add_group(groups, "Image", image_group)

	photo_group: List[MetadataEntry] = []
	if exposure:
		photo_group.append(MetadataEntry("Exposure Time", exposure))
	if aperture:
		photo_group.append(MetadataEntry("Aperture", aperture))
	if iso_setting:
		photo_group.append(MetadataEntry("ISO", iso_setting))
	if focal_length:
		photo_group.append(MetadataEntry("Focal Length", focal_length))
	if white_balance:
		photo_group.append(MetadataEntry("White Balance", white_balance))
	program = to_int(photo.get("ExposureProgram"))
	if program is not None:
		photo_group.append(MetadataEntry("Exposure Program", describe_exposure_program(program)))
	bias = _scalar(photo.get("ExposureBiasValue"))
	if bias is not None:
		photo_group.append(MetadataEntry("Exposure Bias", f"{'+' if bias > 0 else ''}{plain_number(bias)} EV"))
	distance = _scalar(photo.get("SubjectDistance"))
	if distance is not None:
		photo_group.append(MetadataEntry("Subject Distance", f"{distance:.2f} m"))
	_add_group(groups, "Photo", photo_group)

	gps_group: List[MetadataEntry] = []
	if coordinates:
		gps_group.append(MetadataEntry("Latitude", coordinates.display_latitude))
		gps_group.append(MetadataEntry("Longitude", coordinates.display_longitude))
	if gps_altitude:
		gps_group.append(MetadataEntry("Altitude", gps_altitude))
	if gps_timestamp:
		gps_group.append(MetadataEntry("Timestamp", gps_timestamp))
	direction = _scalar(gps.get("GPSImgDirection"))
	if direction is not None:
		ref = to_text(gps.get("GPSImgDirectionRef")) or ""
		gps_group.append(MetadataEntry("Image Direction", f"{direction:.1f}° {ref}".strip()))
	_add_group(groups, "GPS Info", gps_group)

	thumbnail_group: List[MetadataEntry] = []
	thumb_dimensions = format_dimensions(thumbnail.get("ImageWidth"), thumbnail.get("ImageLength"))
	if thumb_dimensions:
		thumbnail_group.append(MetadataEntry("Resolution", thumb_dimensions))
	thumb_orientation = to_int(thumbnail.get("Orientation"))
	if thumb_orientation is not None:
		thumbnail_group.append(MetadataEntry("Orientation", describe_orientation(thumb_orientation)))
	compression = to_int(thumbnail.get("Compression"))
	if compression is not None:
		thumbnail_group.append(MetadataEntry("Compression", f"Type {compression}"))
	_add_group(groups, "Thumbnail", thumbnail_group)

	iop_group: List[MetadataEntry] = []
	if iop.get("InteroperabilityIndex"):
		iop_group.append(MetadataEntry("Index", stringify_raw(iop.get("InteroperabilityIndex"))))
	if iop.get("RelatedImageFileFormat"):
		iop_group.append(MetadataEntry("Related Format", stringify_raw(iop.get("RelatedImageFileFormat"))))
	related_width = to_int(iop.get("RelatedImageWidth"))
	related_length = to_int(iop.get("RelatedImageLength"))
	if related_width is not None and related_length is not None:
		iop_group.append(MetadataEntry("Related Resolution", f"{related_width} × {related_length}px"))
	_add_group(groups, "Iop", iop_group)

	if not has_exif:
		status, details = STATUS_ERROR, DETAILS_STRIPPED
	elif gps_data:
		status, details = STATUS_INFO, DETAILS_WITH_GPS
	else:
		status, details = STATUS_WARNING, DETAILS_NO_GPS

	return MetadataSummary(
		status=status,
		exif_stripped=not has_exif,
		gps_data=gps_data,
		details=details,
		entries=tuple(entries),
		groups=tuple(groups),
		big_endian=tags.big_endian,
		raw=tags,
	)


def _scalar(value: Any) -> Optional[float]:
	if isinstance(value, list):
		return None
	return to_float(value)


def _first_present(*values: Any) -> Any:
	for value in values:
		if value is not None:
			return value
	return None


def _add_group(groups: List[MetadataGroup], title: str, entries: List[MetadataEntry]) -> None:
	if entries:
		groups.append(MetadataGroup(title, tuple(entries)))


def _sanitize(value: Any) -> Any:
	"""JSON-safe copy of decoded tag values."""
	if isinstance(value, Rational):
		return value.value
	if isinstance(value, bytes):
		return stringify_raw(value)
	if isinstance(value, dict):
		return {k: _sanitize(v) for k, v in value.items()}
	if isinstance(value, list):
		return [_sanitize(v) for v in value]
	if isinstance(value, float) and not math.isfinite(value):
		return None
	return value
