"""
SoloCopy: content-aware deduplicating copier.

Core features:
- Copies a source tree into a destination directory, skipping content already present
- Size fast path, xxHash64 partial pre-filter, 128-bit full-content confirmation
- Parallel scanning, hashing and copying on a fixed-size worker pool
- Permission bits and timestamps preserved, name collisions resolved as name_1.ext, name_2.ext, ...
- CLI interface for headless/server usage
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("solocopy")
except Exception:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli

    with open("pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from solocopy.commands import SyncCommand
from solocopy.core import SyncParams, SyncStats, FullHashAlgorithm, FileRecord, CopyTask, CopyResult
from solocopy.utils.convert_utils import ConvertUtils
from solocopy.services import PathService

__all__ = [
    "SyncCommand",
    "SyncParams",
    "SyncStats",
    "FullHashAlgorithm",
    "FileRecord",
    "CopyTask",
    "CopyResult",
    "ConvertUtils",
    "PathService",
    "__version__",
]
