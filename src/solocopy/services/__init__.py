"""Pre-flight path validation services."""

from .path_service import PathService

__all__ = ["PathService"]
