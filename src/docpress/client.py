"""
HTTP client for a running docpress server.

Used by the cleanup worker to trigger sweeps remotely.
"""

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from docpress.core.exceptions import DocpressError
from docpress.files.models import SweepResult

DEFAULT_BASE_URL = "http://127.0.0.1:5000"

RETRYABLE_STATUS_CODES = (502, 503, 504)


class ServerUnavailableError(DocpressError):
    """Raised when the server cannot be reached or keeps failing."""


class DocpressClient:
    """Minimal client for the docpress maintenance endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def cleanup(self) -> SweepResult:
        """
        Ask the server to sweep expired files.

        Returns:
            SweepResult reported by the server

        Raises:
            ServerUnavailableError: If the request fails after retries
        """
        try:
            response = self._post_with_retry("/api/cleanup")
        except httpx.HTTPError as e:
            raise ServerUnavailableError(
                f"Cleanup request failed: {e}", details={"base_url": self._base_url}
            ) from e
        return SweepResult.model_validate(response.json())

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((httpx.TransportError, httpx.HTTPStatusError)),
        reraise=True,
    )
    def _post_with_retry(self, path: str) -> httpx.Response:
        """POST with retries on connection errors and 502/503/504."""
        response = self._client.post(path)
        if response.status_code in RETRYABLE_STATUS_CODES:
            response.raise_for_status()
        elif response.is_error:
            # Not retried
            raise httpx.HTTPError(f"Server returned {response.status_code} for {path}")
        return response

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
