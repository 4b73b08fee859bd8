"""
Pydantic response schemas for API endpoints.

All API responses conform to these schemas for consistent output.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from docpress.files.models import FileStatus, OperationType, ProcessedFile


class ProcessedFileResponse(BaseModel):
    """Response model for a stored processed file."""

    id: str = Field(..., description="File ID")
    original_name: str = Field(..., serialization_alias="originalName")
    processed_name: str = Field(..., serialization_alias="processedName")
    file_size: int = Field(..., serialization_alias="fileSize")
    operation: OperationType = Field(..., description="Producing operation")
    status: FileStatus = Field(..., description="Processing status")
    download_url: str | None = Field(None, serialization_alias="downloadUrl")
    expires_at: datetime = Field(..., serialization_alias="expiresAt")
    created_at: datetime = Field(..., serialization_alias="createdAt")
    metadata: dict[str, Any] | None = Field(None, description="Operation metadata")

    @classmethod
    def from_record(cls, record: ProcessedFile) -> "ProcessedFileResponse":
        return cls(**record.model_dump())


class CleanupResponse(BaseModel):
    """Response model for a cleanup sweep."""

    cleaned: int = Field(..., ge=0, description="Number of expired files removed")


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""

    status: str = Field(..., description="Overall status")
    version: str = Field(..., description="Service version")
    timestamp: str = Field(..., description="ISO timestamp of the check")
    tracked_files: int = Field(..., description="Processed files currently tracked")
    pending_deletions: int = Field(..., description="Deferred deletions not yet run")


class ErrorDetail(BaseModel):
    type: str
    message: str
    detail: str | None = None


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    error: ErrorDetail
