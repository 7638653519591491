from __future__ import annotations

import logging

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from provenance_api.services.container import locate
from provenance_api.services.summary import DETAILS_NO_BLOCK, MetadataSummary, empty_summary, summarize
from provenance_api.services.tiff_decoder import decode

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "Unexpected error while extracting EXIF metadata."


def extract_summary(data: bytes) -> MetadataSummary:
	"""
	bytes -> located block -> tag dictionary -> summary.
	Never raises: any failure becomes an error summary carrying the message.
	"""
	try:
		block = locate(bytes(data))
		if block is None:
			return empty_summary(DETAILS_NO_BLOCK)
		tags = decode(block)
		logger.debug("Decoded %s block: %s", block.container.value, {k: len(v) for k, v in tags.namespaces.items()})
		return summarize(tags)
	except Exception as e:
		message = str(e) or UNEXPECTED_ERROR
		logger.warning("EXIF extraction failed: %s", message)
		return empty_summary(message, message)


async def summarize_upload(upload: UploadFile) -> MetadataSummary:
	try:
		data = await upload.read()
	except Exception as e:
		message = str(e) or UNEXPECTED_ERROR
		logger.warning("Could not read upload %s: %s", upload.filename, message)
		return empty_summary(message, message)
	return await run_in_threadpool(extract_summary, data)
