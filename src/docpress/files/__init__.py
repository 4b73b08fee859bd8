"""
Docpress Files Module.

Tracks processed output files, hands out download handles, and reclaims
storage when files are downloaded or expire.
"""

from .models import (
    ArtifactRegistration,
    FileStatus,
    OperationType,
    ProcessedFile,
    ProcessedFileDraft,
    PublicHandle,
    SweepResult,
    TransformResult,
)
from .store import ProcessedFileStore
from .scheduler import DeferredTaskScheduler
from .lifecycle import FileLifecycle

__all__ = [
    # Models
    "ProcessedFile",
    "ProcessedFileDraft",
    "ArtifactRegistration",
    "TransformResult",
    "PublicHandle",
    "SweepResult",
    "OperationType",
    "FileStatus",
    # Store
    "ProcessedFileStore",
    # Lifecycle
    "DeferredTaskScheduler",
    "FileLifecycle",
]
