"""
Health check endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from docpress.api.dependencies import get_lifecycle
from docpress.api.schemas.responses import HealthResponse
from docpress.files.lifecycle import FileLifecycle
from docpress.version import __version__

router = APIRouter()


@router.get("", response_model=HealthResponse)
@router.get("/", response_model=HealthResponse)
async def health_check(lifecycle: FileLifecycle = Depends(get_lifecycle)) -> HealthResponse:
    """
    Report service status.

    Healthy while the output directory exists; degraded otherwise.
    """
    status = "healthy" if lifecycle.output_dir.is_dir() else "degraded"
    return HealthResponse(
        status=status,
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        tracked_files=lifecycle.store.count(),
        pending_deletions=lifecycle.pending_deletions,
    )


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness check; always succeeds while the process is up."""
    return {
        "alive": "true",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
