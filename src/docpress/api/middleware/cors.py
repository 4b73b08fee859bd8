"""
CORS middleware configuration.

Lets the browser front-end call the API from its dev server origin.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

DEFAULT_ALLOW_METHODS: list[str] = ["GET", "POST", "OPTIONS"]

DEFAULT_ALLOW_HEADERS: list[str] = [
    "accept",
    "accept-language",
    "content-language",
    "content-type",
    "x-request-id",
]

# Browsers only see these on cross-origin downloads when exposed
DEFAULT_EXPOSE_HEADERS: list[str] = [
    "content-disposition",
    "content-length",
    "x-request-id",
]


def add_cors_middleware(
    app: FastAPI,
    *,
    allow_origins: list[str],
    allow_methods: list[str] | None = None,
    allow_headers: list[str] | None = None,
    expose_headers: list[str] | None = None,
    max_age: int = 600,
) -> None:
    """
    Add CORS middleware to the FastAPI application.

    Args:
        app: FastAPI application instance
        allow_origins: Allowed origins
        allow_methods: Allowed HTTP methods
        allow_headers: Allowed request headers
        expose_headers: Headers exposed to browsers
        max_age: Cache time for preflight requests (seconds)
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=False,
        allow_methods=allow_methods or DEFAULT_ALLOW_METHODS,
        allow_headers=allow_headers or DEFAULT_ALLOW_HEADERS,
        expose_headers=expose_headers or DEFAULT_EXPOSE_HEADERS,
        max_age=max_age,
    )
