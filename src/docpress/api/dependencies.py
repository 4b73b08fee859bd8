"""
Request dependencies for route handlers.
"""

from fastapi import Request

from docpress.files.lifecycle import FileLifecycle


def get_lifecycle(request: Request) -> FileLifecycle:
    """Lifecycle manager created by the application lifespan."""
    return request.app.state.lifecycle
