"""
Docpress API Module.

REST API for downloading processed files and triggering cleanup.
"""

from docpress.api.app import create_app

__all__ = ["create_app"]
