"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/copier.py
Executes copy tasks: streamed byte copy, permission/mtime transfer, collision-safe naming.

Destination names are claimed with exclusive creation ("xb"), trying
name.ext, name_1.ext, name_2.ext, ... so an existing file is never overwritten,
including by another worker of the same run. Ownership and ACLs are not copied.
"""

import os
import shutil
import stat
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import BinaryIO, Iterator, List, Optional, Tuple

from solocopy.core.exceptions import CopyError, FilesystemError
from solocopy.core.hasher import BufferConfig
from solocopy.core.interfaces import CopyExecutor, ProgressCallback
from solocopy.core.models import CopyResult, CopyTask, Stage

logger = logging.getLogger(__name__)


def candidate_names(path: str) -> Iterator[str]:
    """Yields path, then stem_1.ext, stem_2.ext, ... in the same directory."""
    directory, name = os.path.split(path)
    stem, ext = os.path.splitext(name)
    yield path
    suffix = 1
    while True:
        yield os.path.join(directory, f"{stem}_{suffix}{ext}")
        suffix += 1


def unique_destination(directory: str, name: str) -> str:
    """First candidate for `name` inside `directory` that does not exist right now."""
    return next(
        candidate for candidate in candidate_names(os.path.join(directory, name))
        if not os.path.lexists(candidate)
    )


class CopyExecutorImpl(CopyExecutor):
    """
    Copies files using the same page-multiple buffer as full hashing.
    Per-task failures are returned in the CopyResult, never raised.
    """

    def __init__(self, buffer_size: Optional[int] = None):
        self.buffer_size = buffer_size or BufferConfig.get_optimal_buffer_size()

    def execute(self, task: CopyTask) -> CopyResult:
        result = CopyResult(task=task)
        try:
            src_stat = os.stat(task.source)
            with open(task.source, "rb") as src:
                final_path, dst = self._claim_destination(task.destination)
                result.final_path = final_path
                with dst:
                    result.bytes_copied = self._stream(src, dst, final_path)
        except CopyError as e:
            logger.warning(f"Copy failed {task.source} -> {result.final_path}: {e}")
            result.error = e
            return result
        except OSError as e:
            logger.warning(f"Cannot copy {task.source}: {e}")
            if result.final_path:
                self._remove_partial(result.final_path)
                result.final_path = None
            result.error = CopyError(f"Cannot copy {task.source}: {e}")
            return result

        try:
            self._copy_metadata(src_stat, final_path)
        except FilesystemError as e:
            logger.warning(f"Copied {task.source} but metadata transfer failed: {e}")
            result.error = e
            return result

        logger.debug(f"Copied {task.source} -> {final_path} ({result.bytes_copied} bytes)")
        return result

    def execute_all(
        self,
        tasks: List[CopyTask],
        workers: int = 1,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[CopyResult]:
        """Runs every task; one failure never affects its siblings."""
        total = len(tasks)
        results: List[CopyResult] = []
        if not tasks:
            return results

        with ThreadPoolExecutor(max_workers=max(1, min(workers, total))) as pool:
            futures = [pool.submit(self.execute, task) for task in tasks]
            for done, future in enumerate(as_completed(futures), 1):
                results.append(future.result())
                if progress_callback:
                    progress_callback(Stage.COPY.value, done, total)
        return results

    @staticmethod
    def _claim_destination(preferred: str) -> Tuple[str, BinaryIO]:
        """Opens the first free candidate name with exclusive creation."""
        for candidate in candidate_names(preferred):
            try:
                return candidate, open(candidate, "xb")
            except FileExistsError:
                continue

    def _stream(self, src: BinaryIO, dst: BinaryIO, final_path: str) -> int:
        try:
            shutil.copyfileobj(src, dst, self.buffer_size)
            return dst.tell()
        except OSError as e:
            dst.close()
            self._remove_partial(final_path)
            raise CopyError(f"Byte copy to {final_path} failed: {e}") from e

    @staticmethod
    def _remove_partial(path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            logger.debug(f"Could not remove partial copy {path}: {e}")

    @staticmethod
    def _copy_metadata(src_stat: os.stat_result, path: str) -> None:
        """Permission bits and access/modification times."""
        try:
            os.chmod(path, stat.S_IMODE(src_stat.st_mode))
            os.utime(path, ns=(src_stat.st_atime_ns, src_stat.st_mtime_ns))
        except OSError as e:
            raise FilesystemError(f"Cannot apply permissions/timestamps to {path}: {e}") from e
