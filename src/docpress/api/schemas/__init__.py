"""
Pydantic schemas for API responses and errors.
"""

from docpress.api.schemas.exceptions import (
    APIException,
    NotFoundError,
    TransformFailedError,
)
from docpress.api.schemas.responses import (
    CleanupResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ProcessedFileResponse,
)

__all__ = [
    # Exceptions
    "APIException",
    "NotFoundError",
    "TransformFailedError",
    # Responses
    "CleanupResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "ProcessedFileResponse",
]
