from __future__ import annotations

from typing import Dict

import piexif

IMAGE = "Image"
PHOTO = "Photo"
GPS = "GPSInfo"
THUMBNAIL = "Thumbnail"
IOP = "Iop"

# Namespace -> piexif tag table. IFD1 (thumbnail) shares the IFD0 tag space.
_PIEXIF_TABLES: Dict[str, str] = {
	IMAGE: "Image",
	PHOTO: "Exif",
	GPS: "GPS",
	THUMBNAIL: "Image",
	IOP: "Interop",
}

# Interoperability tags piexif does not name.
_EXTRA_NAMES: Dict[str, Dict[int, str]] = {
	IOP: {
		0x0002: "InteroperabilityVersion",
		0x1000: "RelatedImageFileFormat",
		0x1001: "RelatedImageWidth",
		0x1002: "RelatedImageLength",
	},
}

EXIF_POINTER = piexif.ImageIFD.ExifTag
GPS_POINTER = piexif.ImageIFD.GPSTag
INTEROP_POINTER = piexif.ExifIFD.InteroperabilityTag

# Sub-IFD pointers each namespace may hold.
SUB_IFD_POINTERS: Dict[str, Dict[int, str]] = {
	IMAGE: {EXIF_POINTER: PHOTO, GPS_POINTER: GPS},
	PHOTO: {INTEROP_POINTER: IOP},
}

# Directory chained through a namespace's next-IFD offset.
NEXT_IFD: Dict[str, str] = {IMAGE: THUMBNAIL}


def tag_name(namespace: str, tag_id: int) -> str:
	extra = _EXTRA_NAMES.get(namespace, {})
	if tag_id in extra:
		return extra[tag_id]
	table = piexif.TAGS.get(_PIEXIF_TABLES.get(namespace, ""), {})
	info = table.get(tag_id)
	if info:
		return info["name"]
	return f"0x{tag_id:04X}"


def is_pointer(namespace: str, tag_id: int) -> bool:
	return tag_id in SUB_IFD_POINTERS.get(namespace, {})
