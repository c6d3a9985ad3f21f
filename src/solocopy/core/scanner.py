"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Walks a directory tree and groups regular files by exact byte size.
Features:
- Recursive (source) or top-level only (destination) traversal with os.scandir
- Symlinks are counted and never followed; FIFOs, sockets and devices are counted and skipped
- Size retrieval is spread over worker threads, each building a private index,
  merged by key once all workers finish
"""

import os
import stat
import time
import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

from solocopy.core.interfaces import TreeScanner, ProgressCallback
from solocopy.core.models import FileRecord, ScanResult, SizeIndex, Stage

logger = logging.getLogger(__name__)


class TreeScannerImpl(TreeScanner):
    """
    Scans one tree and returns a size index plus skip counters.

    Attributes:
        root_dir: Root directory to scan
        recursive: Descend into subdirectories (False inspects only directly-contained entries)
        workers: Number of threads used for size retrieval
    """

    def __init__(self, root_dir: str, recursive: bool = True, workers: int = 1):
        self.root_dir = root_dir
        self.recursive = recursive
        self.workers = max(1, workers)

    def scan(self, progress_callback: Optional[ProgressCallback] = None) -> ScanResult:
        """
        Two passes: classify every entry, then stat the regular files in parallel.
        Returns a ScanResult whose index maps size -> records.
        """
        logger.debug(f"Scanning {self.root_dir} (recursive={self.recursive}, workers={self.workers})")
        start_time = time.time()

        result = ScanResult()
        candidates = self._collect(result)

        if progress_callback:
            progress_callback(Stage.SCAN.value, len(candidates), None)

        sized, stat_errors = self._index_sizes(candidates)
        result.index = sized
        result.errors += stat_errors

        if progress_callback:
            progress_callback(Stage.SCAN.value, len(candidates), len(candidates))

        logger.debug(
            f"Scan of {self.root_dir} finished in {time.time() - start_time:.2f}s: "
            f"{result.file_count} files, {result.symlinks} symlinks, "
            f"{result.non_regular} non-regular, {result.errors} errors"
        )
        return result

    def _collect(self, result: ScanResult) -> List[str]:
        """Classifies entries; returns paths of regular files."""
        candidates = []
        pending = [self.root_dir]

        while pending:
            directory = pending.pop()
            try:
                with os.scandir(directory) as it:
                    entries = list(it)
            except OSError as e:
                logger.warning(f"Cannot read directory {directory}: {e}")
                result.errors += 1
                continue

            for entry in entries:
                try:
                    if entry.is_symlink():
                        logger.debug(f"Skipping symbolic link: {entry.path}")
                        result.symlinks += 1
                        continue
                    if entry.is_dir(follow_symlinks=False):
                        if self.recursive:
                            pending.append(entry.path)
                        continue
                    if entry.is_file(follow_symlinks=False):
                        candidates.append(entry.path)
                        continue
                except OSError as e:
                    logger.debug(f"Could not classify {entry.path}: {e}")
                    result.errors += 1
                    continue

                logger.debug(f"Skipping non-regular entry: {entry.path}")
                result.non_regular += 1

        return candidates

    def _index_sizes(self, paths: List[str]) -> Tuple[SizeIndex, int]:
        """Stats files on worker threads and merges their private indices."""
        if not paths:
            return {}, 0

        workers = min(self.workers, len(paths))
        chunks = [paths[i::workers] for i in range(workers)]

        if workers == 1:
            partials = [self._index_chunk(chunks[0])]
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                partials = list(pool.map(self._index_chunk, chunks))

        merged: Dict[int, List[FileRecord]] = defaultdict(list)
        errors = 0
        for local_index, local_errors in partials:
            for size, records in local_index.items():
                merged[size].extend(records)
            errors += local_errors
        return dict(merged), errors

    @staticmethod
    def _index_chunk(paths: List[str]) -> Tuple[Dict[int, List[FileRecord]], int]:
        local_index: Dict[int, List[FileRecord]] = defaultdict(list)
        errors = 0
        for path in paths:
            try:
                st = os.lstat(path)
            except OSError as e:
                logger.debug(f"Could not get size of {path}: {e}")
                errors += 1
                continue
            # the entry may have been replaced since it was classified
            if not stat.S_ISREG(st.st_mode):
                logger.debug(f"No longer a regular file: {path}")
                errors += 1
                continue
            local_index[st.st_size].append(FileRecord(path=path, size=st.st_size))
        return local_index, errors
