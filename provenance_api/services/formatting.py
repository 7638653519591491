from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

from provenance_api.services.byte_reader import Rational

ORIENTATIONS = {
	1: "Normal (0°)",
	2: "Mirrored horizontal",
	3: "Rotated 180°",
	4: "Mirrored vertical",
	5: "Mirrored + rotated 90° CW",
	6: "Rotated 90° CW",
	7: "Mirrored + rotated 90° CCW",
	8: "Rotated 90° CCW",
}

COLOR_SPACES = {
	1: "sRGB",
	65535: "Uncalibrated",
}

EXPOSURE_PROGRAMS = {
	0: "Not defined",
	1: "Manual",
	2: "Program AE",
	3: "Aperture priority",
	4: "Shutter priority",
	5: "Creative",
	6: "Action",
	7: "Portrait",
	8: "Landscape",
}

WHITE_BALANCE = {
	0: "Auto",
	1: "Manual",
}

EXIF_DATETIME = "%Y:%m:%d %H:%M:%S"


def _round_half_up(x: float, digits: int = 0) -> float:
	scale = 10 ** digits
	return math.floor(x * scale + 0.5) / scale


def to_float(x: Any) -> Optional[float]:
	"""Numeric view of a decoded tag value; rationals divide, zero denominators give None."""
	if x is None or isinstance(x, (bool, str, bytes)):
		return None
	if isinstance(x, Rational):
		return x.value
	if isinstance(x, list):
		return to_float(x[0]) if x else None
	try:
		value = float(x)
	except (TypeError, ValueError):
		return None
	return value if math.isfinite(value) else None


def to_int(x: Any) -> Optional[int]:
	if isinstance(x, bool):
		return None
	if isinstance(x, int):
		return x
	if isinstance(x, list) and x:
		return to_int(x[0])
	return None


def to_text(x: Any) -> Optional[str]:
	if isinstance(x, str):
		x = x.strip()
		return x or None
	return None


def plain_number(value: float, digits: int = 2) -> str:
	rounded = _round_half_up(value, digits)
	if rounded == int(rounded):
		return str(int(rounded))
	return f"{rounded:.{digits}f}".rstrip("0").rstrip(".")


def format_exposure(value: Any) -> Optional[str]:
	seconds = to_float(value)
	if not seconds or seconds <= 0:
		return None
	reciprocal = 1 / seconds
	if reciprocal > 1:
		rounded = _round_half_up(reciprocal)
		if abs(reciprocal - rounded) < 0.01:
			return f"1/{int(rounded)}s"
	return f"{seconds:.4f}s"


def format_aperture(value: Any) -> Optional[str]:
	f_number = to_float(value)
	if not f_number or f_number <= 0:
		return None
	return f"ƒ/{_round_half_up(f_number, 1):.1f}"


def format_iso(value: Any) -> Optional[str]:
	iso = to_float(value)
	if not iso or iso <= 0:
		return None
	return f"ISO {int(_round_half_up(iso))}"


def format_focal_length(value: Any) -> Optional[str]:
	length = to_float(value)
	if not length or length <= 0:
		return None
	return f"{plain_number(length, 1)}mm"


def format_white_balance(value: Any) -> Optional[str]:
	mode = to_int(value)
	if mode is None:
		return None
	return WHITE_BALANCE.get(mode, f"Mode {mode}")


def format_dimensions(width: Any, height: Any) -> Optional[str]:
	w = to_int(width)
	h = to_int(height)
	if not w or not h:
		return None
	return f"{w} × {h}px"


def describe_orientation(value: int) -> str:
	return ORIENTATIONS.get(value, f"Orientation {value}")


def describe_color_space(value: int) -> str:
	return COLOR_SPACES.get(value, f"Color Space {value}")


def describe_exposure_program(value: int) -> str:
	return EXPOSURE_PROGRAMS.get(value, f"Program {value}")


def format_date(value: Any) -> Optional[str]:
	text = to_text(value)
	if not text:
		return None
	try:
		stamp = datetime.strptime(text[:19], EXIF_DATETIME)
	except ValueError:
		return None
	hour = stamp.hour % 12 or 12
	meridiem = "AM" if stamp.hour < 12 else "PM"
	return f"{stamp.strftime('%b')} {stamp.day}, {stamp.year}, {hour}:{stamp.minute:02d} {meridiem}"


def build_camera_label(make: Any, model: Any) -> Optional[str]:
	make_str = to_text(make)
	model_str = to_text(model)
	if make_str and model_str:
		if model_str.lower().startswith(make_str.lower()):
			return model_str
		return f"{make_str} {model_str}"
	return model_str or make_str


def stringify_raw(value: Any) -> str:
	if value is None:
		return "—"
	if isinstance(value, str):
		return value
	if isinstance(value, Rational):
		ratio = value.value
		return "—" if ratio is None else stringify_raw(ratio)
	if isinstance(value, bool):
		return str(value)
	if isinstance(value, int):
		return str(value)
	if isinstance(value, float):
		return str(int(value)) if value.is_integer() else f"{value:.2f}"
	if isinstance(value, list):
		return ", ".join(stringify_raw(item) for item in value)
	if isinstance(value, bytes):
		preview = value[:16].hex()
		return f"0x{preview}{'…' if len(value) > 16 else ''}"
	return str(value)
