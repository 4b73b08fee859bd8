"""
API route handlers.
"""

from docpress.api.routes import files, health

__all__ = [
    "files",
    "health",
]
