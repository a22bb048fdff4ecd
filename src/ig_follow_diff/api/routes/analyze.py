"""Analysis of uploaded export archives."""

import logging

from fastapi import APIRouter, File, HTTPException, Request, UploadFile

from ...errors import ArchiveError, ConfigurationError
from ...processing import PathPatterns, ZipExportArchive, analyze_archive

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/analyze")
async def analyze_upload(request: Request, file: UploadFile = File(...)):
    """Analyze an uploaded export ZIP and return the relationship report."""
    config = request.app.state.config
    limit = config.api.max_upload_mb * 1024 * 1024

    data = await file.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"Upload exceeds {config.api.max_upload_mb} MB",
        )

    try:
        patterns = PathPatterns.from_config(config.locator)
    except ConfigurationError as e:
        logger.error(f"Path patterns unavailable: {e.message}")
        raise HTTPException(status_code=500, detail="Server path patterns are not configured")

    name = file.filename or "upload.zip"
    try:
        archive = ZipExportArchive.from_bytes(data, name=name)
    except ArchiveError as e:
        raise HTTPException(status_code=400, detail=e.message)

    try:
        result = await analyze_archive(archive, patterns)
    finally:
        archive.close()

    logger.info(
        "Analyzed uploaded archive",
        extra={"extra_fields": {"archive": name, "size_bytes": len(data)}},
    )
    return result.to_dict()
