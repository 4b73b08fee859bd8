"""Pytest configuration and fixtures."""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator

import pytest

# Keep the background sweep loop out of API tests
os.environ.setdefault("DP_CLEANUP_INTERVAL_SECONDS", "0")

from docpress.files import (  # noqa: E402
    ArtifactRegistration,
    DeferredTaskScheduler,
    FileLifecycle,
    OperationType,
    ProcessedFileDraft,
    ProcessedFileStore,
)

T0 = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def output_dir(temp_dir: Path) -> Path:
    """Directory holding processed files."""
    path = temp_dir / "output"
    path.mkdir()
    return path


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> ProcessedFileStore:
    return ProcessedFileStore(clock=clock)


@pytest.fixture
def lifecycle(store: ProcessedFileStore, output_dir: Path, clock: FakeClock) -> FileLifecycle:
    """Lifecycle manager whose deferred deletions run immediately."""
    return FileLifecycle(
        store,
        output_dir,
        ttl=timedelta(minutes=15),
        grace_seconds=0,
        scheduler=DeferredTaskScheduler(),
        clock=clock,
    )


@pytest.fixture
def make_draft(clock: FakeClock):
    """Factory for drafts expiring 15 minutes after the fake clock."""

    def _make(**overrides) -> ProcessedFileDraft:
        fields = {
            "original_name": "report.pdf",
            "processed_name": "merged_document.pdf",
            "file_size": 2048,
            "operation": OperationType.MERGE,
            "expires_at": clock() + timedelta(minutes=15),
        }
        fields.update(overrides)
        return ProcessedFileDraft(**fields)

    return _make


@pytest.fixture
def write_output(output_dir: Path):
    """Write a file into the output directory and return its registration."""

    def _write(
        name: str = "output-1.pdf",
        content: bytes = b"%PDF-1.4 test",
        operation: OperationType = OperationType.MERGE,
        metadata: dict | None = None,
    ) -> ArtifactRegistration:
        path = output_dir / name
        path.write_bytes(content)
        return ArtifactRegistration(
            processed_name=f"processed-{name}",
            size_bytes=len(content),
            operation=operation,
            output_path=path,
            metadata=metadata,
        )

    return _write
