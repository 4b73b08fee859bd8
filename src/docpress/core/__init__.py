"""
Docpress core module.

Exception hierarchy shared by the files, API and CLI layers.
"""

from docpress.core.exceptions import (
    ConfigurationError,
    DocpressError,
    NotFoundError,
    ReclaimWarning,
    TransformFailure,
)

__all__ = [
    "DocpressError",
    "NotFoundError",
    "TransformFailure",
    "ReclaimWarning",
    "ConfigurationError",
]
