"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/planner.py
Duplicate detection: turns the source and destination size indices into a copy plan.

PIPELINE
--------
Size fast path   : a size held by exactly one source file and no destination file
                   is copied without reading a single byte
Partial hash     : xxHash64 of the first/last 64 KiB for every other source file
Partial-only     : no destination file of that size and a partial fingerprint shared
                   with no other source file -> content is unique, admit without a full read
Full hash        : everything else is confirmed with the 128-bit full fingerprint and
                   admitted through DuplicateRegistry.try_register(), the single atomic
                   accept/reject point shared by all workers

Destination fingerprints are computed lazily, once per size, and only for sizes
that also occur on the source side.

Counters are returned by the workers as per-file outcomes and tallied by the
calling thread; no shared counter is incremented concurrently.
"""

import os
import time
import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple, TypeVar

from solocopy.core.exceptions import HashComputationError
from solocopy.core.hasher import HasherImpl
from solocopy.core.interfaces import DedupPlanner, DuplicateRegistry, Hasher, ProgressCallback
from solocopy.core.models import CopyTask, FileRecord, PlanResult, SizeIndex, Stage
from solocopy.core.registry import DuplicateRegistryImpl

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class Outcome(Enum):
    ADMITTED_PARTIAL = "admitted-partial"
    ADMITTED_FULL = "admitted-full"
    DUPLICATE = "duplicate"
    ERROR = "error"


class DedupPlannerImpl(DedupPlanner):
    """
    Multi-stage duplicate detection across two trees.
    Uses an injected Hasher and DuplicateRegistry for flexibility and testability.
    """

    def __init__(
        self,
        hasher: Optional[Hasher] = None,
        registry: Optional[DuplicateRegistry] = None,
        workers: int = 1
    ):
        self.hasher = hasher or HasherImpl()
        self.registry = registry or DuplicateRegistryImpl()
        self.workers = max(1, workers)

    def plan(
        self,
        source_index: SizeIndex,
        destination_index: SizeIndex,
        destination_root: str,
        progress_callback: Optional[ProgressCallback] = None
    ) -> PlanResult:
        """
        Decides for every source file whether to copy it.
        Args:
            source_index: size -> source records
            destination_index: size -> destination records (top level of the destination)
            destination_root: directory the copies are written to
            progress_callback: (stage, current, total) reports per stage
        Returns:
            PlanResult with copy tasks and planning counters
        """
        start_time = time.time()
        result = PlanResult()
        candidates: List[FileRecord] = []

        for size, records in source_index.items():
            if len(records) == 1 and not destination_index.get(size):
                result.tasks.append(self._make_task(records[0], destination_root))
                result.fast_path += 1
            else:
                candidates.extend(records)

        logger.debug(f"Size fast path admitted {result.fast_path} files, {len(candidates)} need hashing")
        if not candidates:
            return result

        # Partial fingerprints for every candidate
        partials = self._run_parallel(
            self._safe_partial, candidates, Stage.PARTIAL.value, progress_callback
        )

        hashed: List[Tuple[FileRecord, bytes]] = []
        for record, partial in zip(candidates, partials):
            if partial is None:
                result.hash_errors += 1
            else:
                hashed.append((record, partial))

        partial_counts = Counter((record.size, partial) for record, partial in hashed)

        def decide(item: Tuple[FileRecord, bytes]) -> Outcome:
            record, partial = item
            destination_files = destination_index.get(record.size, [])
            if not destination_files and partial_counts[(record.size, partial)] == 1:
                return Outcome.ADMITTED_PARTIAL
            return self._confirm_full(record, destination_files)

        outcomes = self._run_parallel(decide, hashed, Stage.FULL.value, progress_callback)

        for (record, _), outcome in zip(hashed, outcomes):
            if outcome == Outcome.ADMITTED_PARTIAL:
                result.partial_only += 1
                result.tasks.append(self._make_task(record, destination_root))
            elif outcome == Outcome.ADMITTED_FULL:
                result.full_hashed += 1
                result.tasks.append(self._make_task(record, destination_root))
            elif outcome == Outcome.DUPLICATE:
                result.full_hashed += 1
                result.duplicates += 1
            else:
                result.hash_errors += 1

        logger.debug(
            f"Planning finished in {time.time() - start_time:.2f}s: {len(result.tasks)} tasks, "
            f"{result.duplicates} duplicates, {result.hash_errors} unreadable"
        )
        return result

    def _confirm_full(self, record: FileRecord, destination_files: List[FileRecord]) -> Outcome:
        """Full-content confirmation plus atomic admission through the registry."""
        if destination_files:
            self.registry.ensure_seeded(
                record.size, lambda: self._destination_fingerprints(destination_files)
            )

        try:
            fingerprint = self.hasher.full_fingerprint(record.path)
        except (OSError, HashComputationError) as e:
            logger.warning(f"Skipping {record.path}: full hash failed: {e}")
            return Outcome.ERROR

        if self.registry.try_register(record.size, fingerprint):
            return Outcome.ADMITTED_FULL

        logger.debug(f"Duplicate content, skipping: {record.path}")
        return Outcome.DUPLICATE

    def _destination_fingerprints(self, records: List[FileRecord]) -> Iterator[bytes]:
        for record in records:
            try:
                yield self.hasher.full_fingerprint(record.path)
            except (OSError, HashComputationError) as e:
                logger.warning(f"Cannot fingerprint destination file {record.path}: {e}")

    def _safe_partial(self, record: FileRecord) -> Optional[bytes]:
        try:
            return self.hasher.partial_fingerprint(record.path)
        except (OSError, HashComputationError) as e:
            logger.warning(f"Skipping {record.path}: partial hash failed: {e}")
            return None

    def _run_parallel(
        self,
        func: Callable[[T], R],
        items: Sequence[T],
        stage: str,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[R]:
        """Maps func over items on the worker pool; results keep the order of items."""
        total = len(items)
        if self.workers == 1 or total <= 1:
            ordered = []
            for done, item in enumerate(items, 1):
                ordered.append(func(item))
                if progress_callback:
                    progress_callback(stage, done, total)
            return ordered

        results: Dict[int, R] = {}
        with ThreadPoolExecutor(max_workers=min(self.workers, total)) as pool:
            futures = {pool.submit(func, item): i for i, item in enumerate(items)}
            for done, future in enumerate(as_completed(futures), 1):
                results[futures[future]] = future.result()
                if progress_callback:
                    progress_callback(stage, done, total)
        return [results[i] for i in range(total)]

    @staticmethod
    def _make_task(record: FileRecord, destination_root: str) -> CopyTask:
        return CopyTask(source=record.path, destination=os.path.join(destination_root, record.name))
