"""
Pydantic models for processed files.

Defines the processed-file record, the draft accepted by the store, and the
handles and results passed between the lifecycle manager and the route layer.
"""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


def ensure_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class OperationType(str, Enum):
    """Transformations that can produce a processed file."""

    MERGE = "merge"
    SPLIT = "split"
    COMPRESS = "compress"
    IMAGE_TO_PDF = "image-to-pdf"
    PDF_TO_IMAGE = "pdf-to-image"
    REORDER = "reorder"
    WORD_TO_EXCEL = "word-to-excel"
    EXCEL_TO_WORD = "excel-to-word"
    DOC_TO_PDF = "doc-to-pdf"
    EXCEL_TO_CSV = "excel-to-csv"
    CSV_TO_EXCEL = "csv-to-excel"


class FileStatus(str, Enum):
    """Processing status of a processed file."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ProcessedFileDraft(BaseModel):
    """Fields supplied by the caller when creating a record."""

    original_name: str = Field(description="Name of the uploaded source file")
    processed_name: str = Field(description="Display name of the output file")
    file_size: int = Field(ge=0, description="Size of the output in bytes")
    operation: OperationType = Field(description="Operation that produced the file")
    expires_at: datetime = Field(description="When the file becomes eligible for cleanup")
    status: FileStatus = Field(default=FileStatus.PROCESSING, description="Processing status")
    download_url: str | None = Field(
        default=None, description="Download location; None until downloadable"
    )
    metadata: dict[str, Any] | None = Field(
        default=None, description="Opaque operation metadata"
    )

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        """Treat a missing or empty status as processing."""
        if v is None or v == "":
            return FileStatus.PROCESSING
        return v

    @field_validator("metadata", mode="before")
    @classmethod
    def empty_metadata_is_none(cls, v):
        """Store empty metadata as None."""
        if not v:
            return None
        return v

    @field_validator("expires_at")
    @classmethod
    def expires_at_is_aware(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class ProcessedFile(ProcessedFileDraft):
    """Complete processed-file record as held by the store."""

    id: str = Field(description="Unique UUID for the record")
    created_at: datetime = Field(description="When the record was created")

    @field_validator("created_at")
    @classmethod
    def created_at_is_aware(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def check_expiry_after_creation(self) -> "ProcessedFile":
        """Reject records that expire at or before creation."""
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be later than created_at")
        return self

    def is_expired(self, as_of: datetime) -> bool:
        """Return True if the record expired strictly before as_of."""
        return self.expires_at < ensure_utc(as_of)


# Fields the store never overwrites on update
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "expires_at"})


class TransformResult(BaseModel):
    """Output reported by a conversion operation."""

    output_path: Path = Field(description="Where the output file was written")
    size_bytes: int = Field(ge=0, description="Size of the output in bytes")


class ArtifactRegistration(BaseModel):
    """Request to register a finished output file."""

    processed_name: str = Field(description="Display name of the output file")
    size_bytes: int = Field(ge=0, description="Size of the output in bytes")
    operation: OperationType = Field(description="Operation that produced the file")
    output_path: Path = Field(description="Physical location of the output file")
    original_name: str | None = Field(
        default=None, description="Source file name (defaults to processed_name)"
    )
    metadata: dict[str, Any] | None = Field(default=None, description="Opaque metadata")


class PublicHandle(BaseModel):
    """Handle returned to callers after registration."""

    id: str
    filename: str
    size: int
    download_url: str = Field(serialization_alias="downloadUrl")
    expires_at: datetime = Field(serialization_alias="expiresAt")


class SweepResult(BaseModel):
    """Result of a cleanup sweep."""

    cleaned: int = Field(default=0, ge=0, description="Records processed by the sweep")
