"""
Core sync engine: scanner, hasher, duplicate registry, planner and copy executor.

This package contains the performance-critical foundation of SoloCopy:
- TreeScannerImpl: directory traversal into size buckets, symlinks and special files skipped
- HasherImpl: xxHash64 partial fingerprints and 128-bit full fingerprints
- DuplicateRegistryImpl: per-size locked fingerprint sets with atomic register-or-reject
- DedupPlannerImpl: size fast path, partial pre-filter and full confirmation
- CopyExecutorImpl: parallel streamed copy with metadata transfer and collision-safe naming
- Models: FileRecord, CopyTask, PlanResult, SyncStats and configuration objects

All components are pure Python with no UI dependencies.
"""

from .exceptions import (
    SoloCopyError, HashComputationError, CopyError, FilesystemError, InvalidPathError)
from .models import (
    FileRecord, SizeIndex, ScanResult, CopyTask, CopyResult, PlanResult,
    SyncStats, SyncParams, FullHashAlgorithm, Stage, count_files)
from .hasher import (
    HasherImpl, BufferConfig, XXHash64AlgorithmImpl, XXH3_128AlgorithmImpl,
    Blake2bAlgorithmImpl, algorithm_for)
from .scanner import TreeScannerImpl
from .registry import DuplicateRegistryImpl
from .planner import DedupPlannerImpl
from .copier import CopyExecutorImpl, unique_destination

__all__ = [
    "SoloCopyError",
    "HashComputationError",
    "CopyError",
    "FilesystemError",
    "InvalidPathError",
    "FileRecord",
    "SizeIndex",
    "ScanResult",
    "CopyTask",
    "CopyResult",
    "PlanResult",
    "SyncStats",
    "SyncParams",
    "FullHashAlgorithm",
    "Stage",
    "count_files",
    "HasherImpl",
    "BufferConfig",
    "XXHash64AlgorithmImpl",
    "XXH3_128AlgorithmImpl",
    "Blake2bAlgorithmImpl",
    "algorithm_for",
    "TreeScannerImpl",
    "DuplicateRegistryImpl",
    "DedupPlannerImpl",
    "CopyExecutorImpl",
    "unique_destination",
]
