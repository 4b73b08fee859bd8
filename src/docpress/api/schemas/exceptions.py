"""
Exception classes for API error handling.
"""


class APIException(Exception):
    """
    Base exception for API errors.

    All API exceptions should inherit from this class to ensure
    consistent error response formatting.
    """

    status_code: int = 500
    error_type: str = "api_error"
    message: str = "An error occurred"
    detail: str | None = None

    def __init__(
        self,
        message: str | None = None,
        detail: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message or self.message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(APIException):
    """Exception raised when a requested file is missing or expired."""

    status_code = 404
    error_type = "not_found"
    message = "File not found or expired"


class TransformFailedError(APIException):
    """Exception raised when a conversion fails before producing output."""

    status_code = 500
    error_type = "transform_failed"
    message = "Failed to process file"
