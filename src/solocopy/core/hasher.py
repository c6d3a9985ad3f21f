"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file fingerprinting using pluggable hash algorithms.

Two independent tiers are computed:
- partial fingerprint: xxHash64 over the first and last 64 KiB (8 bytes), a cheap pre-filter
- full fingerprint: 128-bit digest over the entire content (16 bytes), the duplicate key

Open/read failures propagate as OSError; failures of the digest itself are raised
as HashComputationError. Callers skip the file in both cases.
"""

import hashlib
import logging
import mmap
import os
from typing import Optional

import xxhash

from solocopy.core.exceptions import HashComputationError
from solocopy.core.interfaces import Hasher, HashAlgorithm, HashState
from solocopy.core.models import FullHashAlgorithm

logger = logging.getLogger(__name__)


# =============================
# Buffer sizing
# =============================
class BufferConfig:
    PAGE_MULTIPLIER = 256
    MAX_BUFFER_SIZE = 8 * 1024 * 1024
    DEFAULT_PAGE_SIZE = 4096

    @staticmethod
    def get_page_size() -> int:
        """Memory page size of the running system."""
        try:
            page_size = os.sysconf("SC_PAGE_SIZE")
            if page_size > 0:
                return page_size
        except (AttributeError, ValueError, OSError):
            pass  # sysconf is unavailable on Windows
        return getattr(mmap, "PAGESIZE", BufferConfig.DEFAULT_PAGE_SIZE) or BufferConfig.DEFAULT_PAGE_SIZE

    @staticmethod
    def get_optimal_buffer_size(page_size: Optional[int] = None) -> int:
        """256 pages, capped at 8 MiB. Shared by full hashing and copying."""
        page_size = page_size or BufferConfig.get_page_size()
        return min(page_size * BufferConfig.PAGE_MULTIPLIER, BufferConfig.MAX_BUFFER_SIZE)


# =============================
# Algorithms
# =============================
# Use the same way to implement and use any other hashing algorithm
class XXHash64AlgorithmImpl(HashAlgorithm):
    digest_size = 8

    def new(self) -> HashState:
        return xxhash.xxh64()


class XXH3_128AlgorithmImpl(HashAlgorithm):
    digest_size = 16

    def new(self) -> HashState:
        return xxhash.xxh3_128()


class Blake2bAlgorithmImpl(HashAlgorithm):
    digest_size = 16

    def new(self) -> HashState:
        return hashlib.blake2b(digest_size=self.digest_size)


def algorithm_for(kind: FullHashAlgorithm) -> HashAlgorithm:
    """Maps the configured full-hash algorithm to its implementation."""
    if kind == FullHashAlgorithm.XXH128:
        return XXH3_128AlgorithmImpl()
    return Blake2bAlgorithmImpl()


# =============================
# Hasher
# =============================
class HasherImpl(Hasher):
    """
    Computes partial and full fingerprints with injected algorithms.
    Stateless apart from configuration, so one instance is shared by all workers.
    """
    PARTIAL_WINDOW = 64 * 1024

    def __init__(
        self,
        full_algorithm: Optional[HashAlgorithm] = None,
        partial_algorithm: Optional[HashAlgorithm] = None,
        buffer_size: Optional[int] = None
    ):
        self.full_algorithm = full_algorithm or Blake2bAlgorithmImpl()
        self.partial_algorithm = partial_algorithm or XXHash64AlgorithmImpl()
        self.buffer_size = buffer_size or BufferConfig.get_optimal_buffer_size()

    def partial_fingerprint(self, path: str) -> bytes:
        """Fingerprint of the first and last 64 KiB; reads only what the file has."""
        window = self.PARTIAL_WINDOW
        with open(path, "rb") as f:
            head = f.read(window)
            f.seek(0, os.SEEK_END)
            size = f.tell()
            f.seek(max(0, size - window))
            tail = f.read(window)

        return self._digest(self.partial_algorithm, path, head, tail)

    def full_fingerprint(self, path: str) -> bytes:
        """Streams the whole file through the full-content algorithm."""
        try:
            state = self.full_algorithm.new()
        except Exception as e:
            raise HashComputationError(f"Cannot create digest for {path}: {e}") from e

        with open(path, "rb") as f:
            while True:
                chunk = f.read(self.buffer_size)
                if not chunk:
                    break
                try:
                    state.update(chunk)
                except Exception as e:
                    raise HashComputationError(f"Digest update failed for {path}: {e}") from e

        try:
            return state.digest()
        except Exception as e:
            raise HashComputationError(f"Digest finalization failed for {path}: {e}") from e

    @staticmethod
    def _digest(algorithm: HashAlgorithm, path: str, *chunks: bytes) -> bytes:
        try:
            state = algorithm.new()
            for chunk in chunks:
                state.update(chunk)
            return state.digest()
        except Exception as e:
            raise HashComputationError(f"Digest failed for {path}: {e}") from e
