"""
Log Routes Module

This module defines the FastAPI routes for uploading log files and
downloading every stored log as a single ZIP archive.

Features:
- Multipart log upload
- Daily partitioning
- Archive download
- Error handling

Endpoints:
- POST /upload: store each uploaded part under today's directory
- GET /download: ZIP archive of the whole storage root

Dependencies:
- FastAPI for routing
- Starlette for streaming responses
- logging for tracking

Author: Logdrop Development Team
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from pathlib import Path
import asyncio
import logging

from logdrop.shared.errors import BadRequestError
from .archive import archive_filename, build_archive, iter_archive
from .models import ErrorResponse, UploadResponse
from .upload_service import LogUploadService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_storage_root(request: Request) -> Path:
    """Storage root configured on the running application."""
    return request.app.state.storage_root


def get_upload_service(storage_root: Path = Depends(get_storage_root)) -> LogUploadService:
    return LogUploadService(storage_root)


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def upload_log(
    request: Request,
    upload_service: LogUploadService = Depends(get_upload_service)
):
    """
    Store uploaded log files.

    Every part must carry a field name and a file name. Parts are written
    in the order received; if any part fails, files already written for
    this request are removed before the error is returned.

    Returns:
        UploadResponse: Success acknowledgement

    Raises:
        BadRequestError: Malformed or empty upload
        InternalError: Filesystem failures
    """
    try:
        form = await request.form()
    except Exception as e:
        detail = getattr(e, "detail", None) or str(e)
        raise BadRequestError(f"Failed to read multipart field: {detail}")

    try:
        saved = await upload_service.save_form(form)
    finally:
        await form.close()

    logger.info(f"Stored {len(saved)} file(s) from upload request")
    return UploadResponse()


@router.get(
    "/download",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"application/zip": {}}},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
async def download_logs(request: Request, storage_root: Path = Depends(get_storage_root)):
    """
    Download every stored log as a ZIP archive.

    The archive is fully built before the response starts, so failures
    surface as error responses rather than truncated downloads.

    Raises:
        NotFoundError: Storage root does not exist
        InternalError: Archive construction failed
    """
    spool_bytes = request.app.state.archive_spool_bytes
    loop = asyncio.get_event_loop()
    archive = await loop.run_in_executor(None, lambda: build_archive(storage_root, spool_bytes))

    filename = archive_filename()
    logger.info(f"Serving archive {filename}")

    return StreamingResponse(
        iter_archive(archive),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        background=BackgroundTask(archive.close)
    )
