"""
Processed-file endpoints.

Download of conversion outputs, record lookup, and the cleanup trigger.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from docpress.api.dependencies import get_lifecycle
from docpress.api.schemas.exceptions import NotFoundError
from docpress.api.schemas.responses import (
    CleanupResponse,
    ErrorResponse,
    ProcessedFileResponse,
)
from docpress.core import exceptions as core_exceptions
from docpress.files.lifecycle import FileLifecycle

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/download/{filename}",
    response_class=FileResponse,
    responses={404: {"model": ErrorResponse}},
)
async def download_file(
    filename: str,
    lifecycle: FileLifecycle = Depends(get_lifecycle),
) -> FileResponse:
    """
    Stream a processed file.

    The file is deleted a few seconds after the response body has been
    sent. If the client disconnects first, the deletion is skipped and the
    cleanup sweep reclaims the file once it expires.
    """
    try:
        path = lifecycle.resolve_for_download(filename)
    except core_exceptions.NotFoundError as e:
        raise NotFoundError(detail=e.handle) from e

    # A deferred deletion or sweep may reclaim the file after resolution
    try:
        stat_result = path.stat()
    except FileNotFoundError as e:
        raise NotFoundError(detail=filename) from e

    return FileResponse(
        path,
        stat_result=stat_result,
        media_type="application/octet-stream",
        filename=path.name,
        background=BackgroundTask(lifecycle.schedule_deletion, path),
    )


@router.get(
    "/files/{file_id}",
    response_model=ProcessedFileResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_file(
    file_id: str,
    lifecycle: FileLifecycle = Depends(get_lifecycle),
) -> ProcessedFileResponse:
    """Return the stored record for a processed file."""
    record = lifecycle.store.get(file_id)
    if record is None:
        raise NotFoundError(message=f"Processed file not found: {file_id}")
    return ProcessedFileResponse.from_record(record)


@router.post("/cleanup", response_model=CleanupResponse)
def cleanup(lifecycle: FileLifecycle = Depends(get_lifecycle)) -> CleanupResponse:
    """Remove every expired processed file and its record."""
    result = lifecycle.sweep_expired()
    return CleanupResponse(cleaned=result.cleaned)
