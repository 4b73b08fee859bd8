"""
Middleware for the docpress API.
"""

from docpress.api.middleware.cors import add_cors_middleware
from docpress.api.middleware.logging import RequestLoggingMiddleware

__all__ = [
    "add_cors_middleware",
    "RequestLoggingMiddleware",
]
