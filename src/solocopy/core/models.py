"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for scanning, planning and copying.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from solocopy.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class FullHashAlgorithm(Enum):
    """
    Algorithm used for the authoritative (full-content) fingerprint.
    Both produce 16-byte digests and are interchangeable as duplicate keys.
    """
    BLAKE2B = "blake2b"
    XXH128 = "xxh128"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            FullHashAlgorithm.BLAKE2B: "BLAKE2b-128",
            FullHashAlgorithm.XXH128: "xxh3-128",
        }
        return mapping.get(self, self.value)

    @property
    def description(self) -> str:
        mapping = {
            FullHashAlgorithm.BLAKE2B: "Cryptographic 128-bit digest (default)",
            FullHashAlgorithm.XXH128: "Fast non-cryptographic 128-bit digest",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    SCAN = "Scanning"
    PARTIAL = "Partial Hash"
    FULL = "Full Hash"
    COPY = "Copying"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """A regular file found by the scanner, keyed later by its exact byte size."""
    path: str
    size: int

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


# size -> files of exactly that size, one index per tree
SizeIndex = Dict[int, List[FileRecord]]


def count_files(index: SizeIndex) -> int:
    """Total number of records held by a size index."""
    return sum(len(records) for records in index.values())


@dataclass
class ScanResult:
    """Output of a single tree scan."""
    index: SizeIndex = field(default_factory=dict)
    symlinks: int = 0
    non_regular: int = 0
    errors: int = 0

    @property
    def file_count(self) -> int:
        return count_files(self.index)


@dataclass(frozen=True)
class CopyTask:
    """
    One planned copy. `destination` is the preferred target path;
    the executor picks a free name next to it if it is already taken.
    """
    source: str
    destination: str


@dataclass
class CopyResult:
    task: CopyTask
    final_path: Optional[str] = None
    bytes_copied: int = 0
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self):
        status = "ok" if self.ok else f"failed: {self.error}"
        return f"<CopyResult {self.task.source} -> {self.final_path} ({status})>"


@dataclass
class PlanResult:
    """Copy plan produced by the dedup planner together with planning counters."""
    tasks: List[CopyTask] = field(default_factory=list)
    duplicates: int = 0
    hash_errors: int = 0
    fast_path: int = 0      # admitted by unique size, never hashed
    partial_only: int = 0   # admitted by unique partial fingerprint
    full_hashed: int = 0    # went through full-content confirmation


@dataclass
class SyncStats:
    """
    Statistics collected during one sync run.
    """
    source_files: int = 0
    destination_files: int = 0
    copied: int = 0
    bytes_copied: int = 0
    failed: int = 0
    duplicates: int = 0
    hash_errors: int = 0
    source_symlinks: int = 0
    source_non_regular: int = 0
    destination_symlinks: int = 0
    destination_non_regular: int = 0
    scan_errors: int = 0
    total_time: float = 0.0
    failures: List[CopyResult] = field(default_factory=list)

    def print_summary(self) -> str:
        lines = [
            "Sync Statistics:",
            f"Total Execution Time: {ConvertUtils.seconds_to_human(self.total_time)}\n",
            f"Files in source directory: {self.source_files}",
            f"Files in destination directory (before copy): {self.destination_files}",
            f"Files copied: {self.copied} ({ConvertUtils.bytes_to_human(self.bytes_copied)})",
            f"Duplicate files skipped: {self.duplicates}",
            f"Symbolic links skipped: {self.source_symlinks}",
            f"Non-regular files skipped: {self.source_non_regular}",
        ]
        if self.hash_errors:
            lines.append(f"Files skipped (unreadable): {self.hash_errors}")
        if self.scan_errors:
            lines.append(f"Scan errors: {self.scan_errors}")
        if self.failed:
            lines.append(f"Copy failures: {self.failed}")
        return "\n".join(lines)


"""
DTO for sync parameters with built-in validation.
Interface-agnostic: used by both the CLI and library callers.
"""

MAX_WORKERS = 32


def default_workers() -> int:
    return max(1, min(MAX_WORKERS, os.cpu_count() or 1))


@dataclass
class SyncParams:
    """Parameters for a sync operation with validation."""
    source_dir: str
    destination_dir: str
    workers: int = field(default_factory=default_workers)
    full_hash: FullHashAlgorithm = FullHashAlgorithm.BLAKE2B

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.source_dir:
            raise ValueError("Source directory cannot be empty")

        if not self.destination_dir:
            raise ValueError("Destination directory cannot be empty")

        if self.workers < 1:
            raise ValueError("Number of workers must be at least 1")

        if isinstance(self.full_hash, str):
            self.full_hash = FullHashAlgorithm(self.full_hash)
