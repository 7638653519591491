from __future__ import annotations

from typing import List

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from provenance_api.config import Config
from provenance_api.services.exif_pipeline import summarize_upload


router = APIRouter(prefix="/metadata", tags=["metadata"])


def _check_size(upload: UploadFile) -> None:
	size = upload.size
	if size is not None and size > Config.MAX_UPLOAD_BYTES:
		raise HTTPException(
			status_code=413,
			detail=f"{upload.filename or 'upload'} exceeds the {Config.MAX_UPLOAD_BYTES} byte limit",
		)


@router.post("/exif", summary="Extract and summarize EXIF metadata from an uploaded JPEG or PNG")
async def extract_exif(
	file: UploadFile = File(...),
	raw: bool = Query(False, description="Include the decoded tag dictionary"),
):
	_check_size(file)
	summary = await summarize_upload(file)
	return summary.to_dict(include_raw=raw)


@router.post("/exif/batch", summary="Summarize EXIF metadata for several uploads")
async def extract_exif_batch(
	files: List[UploadFile] = File(...),
	raw: bool = Query(False, description="Include the decoded tag dictionaries"),
):
	for f in files:
		_check_size(f)
	results = []
	for f in files:
		summary = await summarize_upload(f)
		results.append({"filename": f.filename or "image", "summary": summary.to_dict(include_raw=raw)})
	return {"num_files": len(files), "results": results}
