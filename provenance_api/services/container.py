from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

JPEG_SOI = b"\xff\xd8"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
APP1_MARKER = 0xE1
EXIF_CHUNK = b"eXIf"


class ContainerType(str, Enum):
	JPEG = "jpeg"
	PNG = "png"


@dataclass(frozen=True)
class RawBlock:
	data: bytes
	container: ContainerType


def locate(data: bytes) -> Optional[RawBlock]:
	"""
	Find the embedded EXIF block of a JPEG (first APP1 segment) or PNG (eXIf chunk).
	Returns None for unknown containers and for truncated or malformed streams.
	"""
	if len(data) < 4:
		return None
	if data[:2] == JPEG_SOI:
		payload = _from_jpeg(data)
		return RawBlock(payload, ContainerType.JPEG) if payload is not None else None
	if data[:8] == PNG_SIGNATURE:
		payload = _from_png(data)
		return RawBlock(payload, ContainerType.PNG) if payload is not None else None
	return None


def _from_jpeg(data: bytes) -> Optional[bytes]:
	offset = 2
	while offset + 4 < len(data):
		if data[offset] != 0xFF:
			logger.debug("JPEG marker walk lost sync at offset %d", offset)
			break
		marker = data[offset + 1]
		(size,) = struct.unpack_from(">H", data, offset + 2)
		if size < 2:
			break
		if marker == APP1_MARKER:
			start = offset + 4
			end = start + size - 2
			if end <= len(data):
				return data[start:end]
			break
		offset += 2 + size
	return None


def _from_png(data: bytes) -> Optional[bytes]:
	offset = len(PNG_SIGNATURE)
	while offset + 8 <= len(data):
		(length,) = struct.unpack_from(">I", data, offset)
		chunk_type = data[offset + 4:offset + 8]
		start = offset + 8
		end = start + length
		if end > len(data):
			logger.debug("PNG chunk %r runs past end of buffer", chunk_type)
			break
		if chunk_type == EXIF_CHUNK:
			return data[start:end]
		# data + CRC
		offset = end + 4
	return None
