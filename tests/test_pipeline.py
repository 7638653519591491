import asyncio
import struct

import pytest

from provenance_api.services import exif_pipeline
from provenance_api.services.exif_pipeline import extract_summary, summarize_upload
from provenance_api.services.summary import DETAILS_NO_BLOCK, DETAILS_STRIPPED


def test_unrecognised_bytes_are_stripped_without_error():
	summary = extract_summary(b"BM\x00\x00\x00\x00 not an image we read")
	assert summary.exif_stripped is True
	assert summary.status == "error"
	assert summary.error is None
	assert summary.details == DETAILS_NO_BLOCK


def test_jpeg_with_xmp_app1_is_stripped_without_error():
	payload = b"http://ns.adobe.com/xap/1.0/\x00<x:xmpmeta xmlns:x='adobe:ns:meta/'/>"
	data = b"\xff\xd8\xff\xe1" + struct.pack(">H", len(payload) + 2) + payload + b"\xff\xd9"
	summary = extract_summary(data)
	assert summary.exif_stripped is True
	assert summary.error is None
	assert summary.details == DETAILS_STRIPPED


def test_png_without_exif_is_stripped(png_with_exif):
	summary = extract_summary(png_with_exif())
	assert summary.exif_stripped is True
	assert summary.error is None


def test_camera_jpeg(jpeg_with_exif, camera_exif):
	summary = extract_summary(jpeg_with_exif(camera_exif))
	assert summary.status == "info"
	assert summary.gps_data is True
	assert summary.big_endian is True
	coords = summary.raw.get("GPSInfo")
	assert coords["GPSLatitudeRef"] == "N"
	headline = {e.label: e.value for e in summary.entries}
	assert headline["Camera"] == "Canon EOS 5D"
	assert headline["GPS"] == "40.446111° N (40° 26' 46.0\"), -79.948611° W (79° 56' 55.0\")"
	assert headline["Exposure"] == "1/100s • ƒ/2.8 • ISO 200"
	assert headline["Captured"] == "Jun 3, 2023, 2:05 PM"


def test_camera_png(png_with_exif, camera_exif):
	summary = extract_summary(png_with_exif(camera_exif))
	assert summary.status == "info"
	assert [g.title for g in summary.groups] == ["Image", "Photo", "GPS Info"]


def test_exif_without_gps_is_warning(jpeg_with_exif, camera_exif):
	del camera_exif["GPS"]
	summary = extract_summary(jpeg_with_exif(camera_exif))
	assert summary.status == "warning"
	assert summary.gps_data is False


def test_unexpected_failure_becomes_error_summary(monkeypatch, jpeg_with_exif, camera_exif):
	def boom(block):
		raise RuntimeError("decoder exploded")

	monkeypatch.setattr(exif_pipeline, "decode", boom)
	summary = extract_summary(jpeg_with_exif(camera_exif))
	assert summary.status == "error"
	assert summary.exif_stripped is True
	assert summary.error == "decoder exploded"
	assert summary.details == "decoder exploded"


class _Upload:
	def __init__(self, data=None, failure=None):
		self.filename = "upload.jpg"
		self._data = data
		self._failure = failure

	async def read(self):
		if self._failure:
			raise self._failure
		return self._data


def test_summarize_upload_reads_bytes(jpeg_with_exif, camera_exif):
	summary = asyncio.run(summarize_upload(_Upload(jpeg_with_exif(camera_exif))))
	assert summary.status == "info"


def test_summarize_upload_read_failure():
	summary = asyncio.run(summarize_upload(_Upload(failure=OSError("stream closed"))))
	assert summary.status == "error"
	assert summary.error == "stream closed"


@pytest.mark.parametrize("cut", [3, 10, 40, 200])
def test_truncated_files_never_raise(jpeg_with_exif, camera_exif, cut):
	data = jpeg_with_exif(camera_exif)
	summary = extract_summary(data[:cut])
	assert summary.error is None
	assert summary.exif_stripped is True
