"""
Processed-file lifecycle management.

Registers output files produced by conversions, resolves download handles,
deletes downloaded files after a grace period, and sweeps expired records
together with their backing files.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable

from docpress.core.exceptions import NotFoundError, ReclaimWarning, TransformFailure

from .models import (
    ArtifactRegistration,
    FileStatus,
    OperationType,
    ProcessedFileDraft,
    PublicHandle,
    SweepResult,
    TransformResult,
)
from .scheduler import DeferredTaskScheduler
from .store import ProcessedFileStore

logger = logging.getLogger(__name__)

DOWNLOAD_URL_PREFIX = "/api/download/"


def download_url_for(path: Path) -> str:
    """Public download URL for a file in the output directory."""
    return f"{DOWNLOAD_URL_PREFIX}{Path(path).name}"


def is_safe_basename(name: str) -> bool:
    """Allow only simple file names (no directories)."""
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name or "\x00" in name:
        return False
    return name == Path(name).name


class FileLifecycle:
    """
    Processed-file lifecycle manager.

    Owns the output files once they are registered. Handles:
    - Registering conversion outputs with a fixed TTL
    - Resolving download handles to physical files
    - Deleting downloaded files after a grace delay
    - Sweeping expired records and their files

    The manager has no timer of its own for sweeps; an external trigger
    (the API lifespan loop or POST /api/cleanup) calls sweep_expired().
    """

    def __init__(
        self,
        store: ProcessedFileStore,
        output_dir: Path,
        *,
        ttl: timedelta = timedelta(minutes=15),
        grace_seconds: float = 5.0,
        scheduler: DeferredTaskScheduler | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the lifecycle manager.

        Args:
            store: Store holding processed-file records
            output_dir: Directory holding output files
            ttl: Lifetime of a registered file
            grace_seconds: Delay between a finished download and deletion
            scheduler: Runner for deferred deletions
            clock: Callable returning the current aware datetime (default:
                the store clock). Expiry is computed from this clock and
                created_at from the store clock, so the two must agree.
        """
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        if grace_seconds < 0:
            raise ValueError("grace_seconds cannot be negative")

        self._store = store
        self._output_dir = Path(output_dir)
        self._ttl = ttl
        self._grace_seconds = grace_seconds
        self._scheduler = scheduler or DeferredTaskScheduler()
        self._clock = clock or store.clock

        self._output_dir.mkdir(parents=True, exist_ok=True)

    @property
    def store(self) -> ProcessedFileStore:
        return self._store

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def grace_seconds(self) -> float:
        return self._grace_seconds

    @property
    def pending_deletions(self) -> int:
        """Deferred deletions scheduled but not yet run."""
        return self._scheduler.pending

    def register_artifact(self, registration: ArtifactRegistration) -> PublicHandle:
        """
        Record a finished output file and hand out its download handle.

        Args:
            registration: Output file details reported by the conversion

        Returns:
            PublicHandle with id, filename, size, download URL and expiry

        Raises:
            ValueError: If the output is not a regular file directly inside
                the output directory
        """
        output_path = self._locate_output(registration.output_path)
        expires_at = self._clock() + self._ttl
        record = self._store.create(
            ProcessedFileDraft(
                original_name=registration.original_name or registration.processed_name,
                processed_name=registration.processed_name,
                file_size=registration.size_bytes,
                operation=registration.operation,
                status=FileStatus.COMPLETED,
                download_url=download_url_for(output_path),
                expires_at=expires_at,
                metadata=registration.metadata,
            )
        )

        logger.info(
            f"Registered {record.operation.value} output {record.download_url}",
            extra={
                "event": "file_registered",
                "file_id": record.id,
                "operation": record.operation.value,
                "size_bytes": record.file_size,
            },
        )

        return PublicHandle(
            id=record.id,
            filename=record.processed_name,
            size=record.file_size,
            download_url=record.download_url,
            expires_at=record.expires_at,
        )

    def run_transform(
        self,
        operation: OperationType,
        transform: Callable[[], TransformResult],
        *,
        processed_name: str,
        original_name: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> PublicHandle:
        """
        Run a conversion and register its output.

        Args:
            operation: Operation being performed
            transform: Callable producing the output file
            processed_name: Display name for the output
            original_name: Name of the source file
            metadata: Opaque metadata stored with the record

        Returns:
            PublicHandle for the registered output

        Raises:
            TransformFailure: If the transform raised or its output is not a
                file in the output directory; no record is created
        """
        try:
            result = transform()
        except Exception as e:
            logger.error(f"{operation.value} failed: {e}")
            raise TransformFailure(
                f"Failed to run {operation.value}", operation=operation.value, cause=e
            ) from e

        registration = ArtifactRegistration(
            processed_name=processed_name,
            original_name=original_name,
            size_bytes=result.size_bytes,
            operation=operation,
            output_path=result.output_path,
            metadata=metadata,
        )
        try:
            return self.register_artifact(registration)
        except ValueError as e:
            logger.error(f"{operation.value} produced an unusable output: {e}")
            raise TransformFailure(
                f"Failed to register {operation.value} output",
                operation=operation.value,
                cause=e,
            ) from e

    def resolve_for_download(self, handle: str) -> Path:
        """
        Map a download handle to the file it names.

        The handle is the file name from the download URL; the full URL is
        accepted too. Resolution checks the output directory, not the store.

        Args:
            handle: Download file name or URL

        Returns:
            Path to an existing file inside the output directory

        Raises:
            NotFoundError: If no such file exists
        """
        name = handle.removeprefix(DOWNLOAD_URL_PREFIX) if handle else ""
        if not is_safe_basename(name):
            raise NotFoundError(handle=handle)

        path = self._output_dir / name
        if not path.is_file():
            raise NotFoundError(handle=handle)
        return path

    def schedule_deletion(self, path: Path) -> None:
        """Delete path after the grace delay. Failures are only logged."""
        self._scheduler.schedule(self._grace_seconds, lambda: self._remove_file(path))

    def sweep_expired(self, now: datetime | None = None) -> SweepResult:
        """
        Remove every expired record and its backing file.

        File deletion errors are logged and skipped so one bad file never
        blocks the rest of the batch. Errors listing expired records
        propagate.

        Args:
            now: Reference time (default: the lifecycle clock)

        Returns:
            SweepResult with the number of records processed
        """
        now = now or self._clock()
        expired = self._store.list_expired(now)

        cleaned = 0
        for record in expired:
            if record.download_url:
                name = Path(record.download_url).name
                if is_safe_basename(name):
                    self._remove_file(self._output_dir / name, file_id=record.id)
            self._store.delete(record.id)
            cleaned += 1

        if cleaned:
            logger.info(
                f"Swept {cleaned} expired file(s)",
                extra={"event": "sweep_completed", "cleaned": cleaned},
            )
        return SweepResult(cleaned=cleaned)

    def shutdown(self) -> None:
        """Cancel pending deferred deletions."""
        cancelled = self._scheduler.cancel_all()
        if cancelled:
            logger.info(f"Cancelled {cancelled} pending deletion(s)")

    def _locate_output(self, output_path: Path) -> Path:
        """Resolve an output path, relative paths against the output directory."""
        path = Path(output_path)
        if not path.is_absolute():
            path = self._output_dir / path
        path = path.resolve()
        if path.parent != self._output_dir.resolve() or not path.is_file():
            raise ValueError(
                f"Output must be a file directly inside {self._output_dir}: {output_path}"
            )
        return path

    def _remove_file(self, path: Path, file_id: str | None = None) -> bool:
        """Delete a physical file. Returns True if a file was removed."""
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            warning = ReclaimWarning(path, file_id=file_id, cause=e)
            logger.warning(str(warning), extra={"event": "reclaim_failed", **warning.details})
            return False
