"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/path_service.py
Pre-flight validation of the source and destination roots.
The engine assumes two disjoint trees; everything here runs before it starts.
"""
import logging
from pathlib import Path
from typing import Tuple

from solocopy.core.exceptions import InvalidPathError

logger = logging.getLogger(__name__)


class PathService:
    """
    Validates and prepares the two roots of a sync run.
    Raises InvalidPathError for anything the engine cannot work with.
    """

    @staticmethod
    def validate_source(source_dir: str) -> Path:
        path = Path(source_dir)
        if not path.exists():
            raise InvalidPathError(f"Source directory not found: {source_dir}")
        if not path.is_dir():
            raise InvalidPathError(f"Source path is not a directory: {source_dir}")
        return path.resolve()

    @staticmethod
    def prepare_destination(destination_dir: str) -> Path:
        """Creates the destination (with parents) if absent."""
        path = Path(destination_dir)
        if path.exists():
            if not path.is_dir():
                raise InvalidPathError(f"Destination path is not a directory: {destination_dir}")
            return path.resolve()

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InvalidPathError(f"Cannot create destination directory {destination_dir}: {e}") from e
        logger.debug(f"Created destination directory: {path}")
        return path.resolve()

    @staticmethod
    def is_subpath(parent: Path, child: Path) -> bool:
        """True if child is parent itself or lies anywhere below it."""
        try:
            child.relative_to(parent)
            return True
        except ValueError:
            return False

    @classmethod
    def validate_roots(cls, source_dir: str, destination_dir: str) -> Tuple[Path, Path]:
        """
        Full pre-flight check. Returns resolved (source, destination).
        The destination is created if it does not exist yet.
        """
        source = cls.validate_source(source_dir)
        # overlap is checked before the destination is created
        destination = Path(destination_dir).resolve()

        if source == destination:
            raise InvalidPathError("Source and destination directories cannot be the same")

        if cls.is_subpath(source, destination) or cls.is_subpath(destination, source):
            raise InvalidPathError("Source and destination directories must not be nested within each other")

        return source, cls.prepare_destination(destination_dir)
