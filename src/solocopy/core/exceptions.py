"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/exceptions.py
Error taxonomy for the sync engine.

Per-file errors (HashComputationError, CopyError, FilesystemError) are recovered
locally and folded into run statistics. InvalidPathError is raised before the
engine starts and aborts the whole run.
"""


class SoloCopyError(Exception):
    """Base class for all SoloCopy errors."""


class HashComputationError(SoloCopyError):
    """The digest context failed while fingerprinting a file."""


class CopyError(SoloCopyError):
    """Copying the bytes of a single task failed."""


class FilesystemError(CopyError):
    """Bytes were copied, but permissions or timestamps could not be applied."""


class InvalidPathError(SoloCopyError):
    """Source or destination root is unusable (missing, not a directory, overlapping)."""
