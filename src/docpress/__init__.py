"""
Docpress - processed-file lifecycle server for document conversions.

Tracks the output of PDF and office conversions, serves them for download,
and reclaims them after download or expiry.
"""

from docpress.version import __version__

# API module is available but not exported by default
# Import explicitly: from docpress.api import create_app

__all__ = ["__version__"]
