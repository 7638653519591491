from __future__ import annotations

import io
import struct

import piexif
import pytest
from PIL import Image


def _pack_ifd(entries, order, base, next_ifd=0):
	"""
	Pack one IFD placed at absolute offset `base`, followed by its out-of-line data.
	Entries are (tag, type_code, count, value); an int value is written verbatim into
	the value/offset slot, bytes longer than 4 are stored after the directory.
	"""
	data_start = base + 2 + 12 * len(entries) + 4
	body = struct.pack(order + "H", len(entries))
	data = b""
	for tag, type_code, count, value in entries:
		if isinstance(value, int):
			slot = struct.pack(order + "I", value)
		elif len(value) <= 4:
			slot = value.ljust(4, b"\x00")
		else:
			slot = struct.pack(order + "I", data_start + len(data))
			data += value
		body += struct.pack(order + "HHI", tag, type_code, count) + slot
	return body + struct.pack(order + "I", next_ifd) + data


def _build_tiff(entries, order="<", next_ifd=0, tail=b""):
	marker = b"II" if order == "<" else b"MM"
	return marker + struct.pack(order + "HI", 42, 8) + _pack_ifd(entries, order, 8, next_ifd) + tail


def _jpeg_with_exif(exif_dict):
	buf = io.BytesIO()
	Image.new("RGB", (16, 16), (200, 120, 40)).save(buf, format="JPEG", exif=piexif.dump(exif_dict))
	return buf.getvalue()


def _png_with_exif(exif_dict=None):
	buf = io.BytesIO()
	img = Image.new("RGB", (16, 16), (40, 120, 200))
	if exif_dict is None:
		img.save(buf, format="PNG")
	else:
		img.save(buf, format="PNG", exif=piexif.dump(exif_dict))
	return buf.getvalue()


@pytest.fixture
def pack_ifd():
	return _pack_ifd


@pytest.fixture
def build_tiff():
	return _build_tiff


@pytest.fixture
def jpeg_with_exif():
	return _jpeg_with_exif


@pytest.fixture
def png_with_exif():
	return _png_with_exif


@pytest.fixture
def pittsburgh_gps():
	return {
		piexif.GPSIFD.GPSLatitudeRef: b"N",
		piexif.GPSIFD.GPSLatitude: ((40, 1), (26, 1), (46, 1)),
		piexif.GPSIFD.GPSLongitudeRef: b"W",
		piexif.GPSIFD.GPSLongitude: ((79, 1), (56, 1), (55, 1)),
	}


@pytest.fixture
def camera_exif(pittsburgh_gps):
	return {
		"0th": {
			piexif.ImageIFD.Make: b"Canon",
			piexif.ImageIFD.Model: b"Canon EOS 5D",
			piexif.ImageIFD.Orientation: 6,
			piexif.ImageIFD.Software: b"Firmware 1.0",
		},
		"Exif": {
			piexif.ExifIFD.ExposureTime: (1, 100),
			piexif.ExifIFD.FNumber: (28, 10),
			piexif.ExifIFD.ISOSpeedRatings: 200,
			piexif.ExifIFD.FocalLength: (50, 1),
			piexif.ExifIFD.DateTimeOriginal: b"2023:06:03 14:05:00",
			piexif.ExifIFD.ExposureProgram: 2,
			piexif.ExifIFD.ColorSpace: 1,
			piexif.ExifIFD.WhiteBalance: 0,
		},
		"GPS": pittsburgh_gps,
	}
