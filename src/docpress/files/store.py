"""
In-memory processed-file store.

Keeps ProcessedFile records for the lifetime of the process. The store knows
nothing about files on disk; physical cleanup belongs to FileLifecycle.
"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from .models import IMMUTABLE_FIELDS, ProcessedFile, ProcessedFileDraft, ensure_utc

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ProcessedFileStore:
    """
    Thread-safe registry of processed-file records.

    Every operation runs under a single lock. Records handed out are copies,
    so callers can only change stored state through update().
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        """
        Initialize an empty store.

        Args:
            clock: Callable returning the current aware datetime (default: UTC now)
        """
        self._clock = clock or utc_now
        self._records: dict[str, ProcessedFile] = {}
        self._lock = threading.RLock()

    @property
    def clock(self) -> Callable[[], datetime]:
        """Clock used for created_at and default expiry checks."""
        return self._clock

    def create(self, draft: ProcessedFileDraft) -> ProcessedFile:
        """
        Insert a new record built from a draft.

        Args:
            draft: Caller-supplied fields

        Returns:
            The stored record with id and created_at assigned
        """
        with self._lock:
            record = ProcessedFile(
                **draft.model_dump(),
                id=str(uuid.uuid4()),
                created_at=self._clock(),
            )
            self._records[record.id] = record
            logger.debug(
                "Processed file created",
                extra={"event": "file_created", "file_id": record.id},
            )
            return record.model_copy(deep=True)

    def get(self, file_id: str) -> ProcessedFile | None:
        """Return the record for file_id, expired or not."""
        with self._lock:
            record = self._records.get(file_id)
            return record.model_copy(deep=True) if record else None

    def update(self, file_id: str, fields: dict[str, Any]) -> ProcessedFile | None:
        """
        Merge fields into an existing record.

        id, created_at and expires_at are never overwritten; attempts to
        change them are dropped. Unknown field names are ignored. The merged
        record is validated before it replaces the stored one.

        Args:
            file_id: Record to update
            fields: Partial field values

        Returns:
            The updated record, or None if file_id is unknown

        Raises:
            pydantic.ValidationError: If a value has the wrong type
        """
        with self._lock:
            existing = self._records.get(file_id)
            if existing is None:
                return None

            ignored = IMMUTABLE_FIELDS.intersection(fields)
            if ignored:
                logger.warning(
                    f"Ignoring immutable fields on update of {file_id}: {sorted(ignored)}"
                )
            changes = {
                key: value
                for key, value in fields.items()
                if key in ProcessedFile.model_fields and key not in IMMUTABLE_FIELDS
            }

            updated = ProcessedFile.model_validate({**existing.model_dump(), **changes})
            self._records[file_id] = updated
            return updated.model_copy(deep=True)

    def delete(self, file_id: str) -> bool:
        """Remove a record. Returns False if it did not exist."""
        with self._lock:
            return self._records.pop(file_id, None) is not None

    def list_expired(self, as_of: datetime | None = None) -> list[ProcessedFile]:
        """
        Snapshot of records whose expires_at is strictly before as_of.

        Args:
            as_of: Reference time (default: the store clock); naive values are UTC

        Returns:
            Copies of the expired records in insertion order
        """
        as_of = ensure_utc(as_of or self._clock())
        with self._lock:
            return [
                record.model_copy(deep=True)
                for record in self._records.values()
                if record.is_expired(as_of)
            ]

    def count(self) -> int:
        """Number of records currently held."""
        with self._lock:
            return len(self._records)

    def __len__(self) -> int:
        return self.count()
