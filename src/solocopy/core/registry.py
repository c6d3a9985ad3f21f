"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/registry.py
Concurrency-safe store of full fingerprints per file size.

Each size has its own lock, so workers deciding about unrelated sizes never
wait on each other. The global lock only protects creation of new size buckets.
"""

import logging
import threading
from typing import Callable, Dict, Iterable, Set

from solocopy.core.interfaces import DuplicateRegistry

logger = logging.getLogger(__name__)


class _SizeBucket:
    __slots__ = ("lock", "fingerprints", "seeded")

    def __init__(self):
        self.lock = threading.Lock()
        self.fingerprints: Set[bytes] = set()
        self.seeded = False


class DuplicateRegistryImpl(DuplicateRegistry):
    """
    Maps size -> set of full fingerprints already present at the destination
    or already accepted for copying in this run. Entries are never removed.
    """

    def __init__(self):
        self._buckets: Dict[int, _SizeBucket] = {}
        self._guard = threading.Lock()

    def _bucket(self, size: int) -> _SizeBucket:
        bucket = self._buckets.get(size)
        if bucket is None:
            with self._guard:
                bucket = self._buckets.get(size)
                if bucket is None:
                    bucket = _SizeBucket()
                    self._buckets[size] = bucket
        return bucket

    def try_register(self, size: int, fingerprint: bytes) -> bool:
        """
        Records the fingerprint if absent. Returns True for the single caller that
        inserted it, False for every other caller with the same (size, fingerprint).
        """
        bucket = self._bucket(size)
        with bucket.lock:
            if fingerprint in bucket.fingerprints:
                return False
            bucket.fingerprints.add(fingerprint)
            return True

    def contains(self, size: int, fingerprint: bytes) -> bool:
        bucket = self._buckets.get(size)
        if bucket is None:
            return False
        with bucket.lock:
            return fingerprint in bucket.fingerprints

    def ensure_seeded(self, size: int, loader: Callable[[], Iterable[bytes]]) -> None:
        """
        Runs loader() once per size and records everything it yields.
        Callers for the same size block until seeding is done.
        """
        bucket = self._bucket(size)
        with bucket.lock:
            if bucket.seeded:
                return
            loaded = 0
            for fingerprint in loader():
                bucket.fingerprints.add(fingerprint)
                loaded += 1
            bucket.seeded = True
        logger.debug(f"Seeded registry for size {size} with {loaded} destination fingerprints")

    def is_seeded(self, size: int) -> bool:
        bucket = self._buckets.get(size)
        return bucket is not None and bucket.seeded

    def fingerprint_count(self, size: int) -> int:
        bucket = self._buckets.get(size)
        if bucket is None:
            return 0
        with bucket.lock:
            return len(bucket.fingerprints)
