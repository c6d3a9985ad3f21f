"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the sync engine.
These protocols enforce structural typing using Python's `typing.Protocol` so that
components can be swapped (e.g. another digest, an in-memory registry for tests)
without touching the rest of the pipeline.

Key Components:
---------------
- HashAlgorithm: Standardized interface for incremental digests (xxHash, BLAKE2b, ...).
- Hasher: Interface for computing partial and full fingerprints of a file.
- TreeScanner: Interface for walking a tree and building a size index.
- DuplicateRegistry: Interface for the concurrency-safe fingerprint store.
- DedupPlanner: Interface for turning two size indices into a copy plan.
- CopyExecutor: Interface for executing copy tasks.
"""

from typing import Protocol, Iterable, List, Optional, Callable
from solocopy.core.models import (
    CopyResult,
    CopyTask,
    PlanResult,
    ScanResult,
    SizeIndex,
)

ProgressCallback = Callable[[str, int, Optional[int]], None]


# ===== Interfaces =====

class HashState(Protocol):
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like BLAKE2b or xxHash
    without affecting the rest of the deduplication logic.
    """
    digest_size: int

    def new(self) -> HashState:
        """Returns a fresh incremental hash state."""
        ...


class Hasher(Protocol):
    """Interface for fingerprinting files."""
    def partial_fingerprint(self, path: str) -> bytes: ...
    def full_fingerprint(self, path: str) -> bytes: ...


class TreeScanner(Protocol):
    """
    Interface for scanning a directory tree and collecting regular files by size.
    """
    def scan(self, progress_callback: Optional[ProgressCallback] = None) -> ScanResult:
        """
        Scan the configured root.

        Args:
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            ScanResult with the size index and skip counters.
        """
        ...


class DuplicateRegistry(Protocol):
    """
    Interface for the store of full fingerprints already accounted for, per size.
    """
    def try_register(self, size: int, fingerprint: bytes) -> bool:
        """Atomically record the fingerprint; False if it was already present."""
        ...

    def contains(self, size: int, fingerprint: bytes) -> bool:
        """Non-mutating probe."""
        ...

    def ensure_seeded(self, size: int, loader: Callable[[], Iterable[bytes]]) -> None:
        """Load pre-existing fingerprints for a size exactly once."""
        ...


class DedupPlanner(Protocol):
    """
    Interface for the duplicate-detection stage.

    Decides for every source file whether its content is already present at the
    destination (or already accepted earlier in the run) and emits copy tasks for the rest.
    """
    def plan(
        self,
        source_index: SizeIndex,
        destination_index: SizeIndex,
        destination_root: str,
        progress_callback: Optional[ProgressCallback] = None
    ) -> PlanResult:
        ...


class CopyExecutor(Protocol):
    """Interface for executing planned copy tasks."""
    def execute(self, task: CopyTask) -> CopyResult: ...

    def execute_all(
        self,
        tasks: List[CopyTask],
        workers: int = 1,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[CopyResult]:
        ...
