"""
Unified command orchestrator for a sync run.
This is the SINGLE source of truth for business logic, used by the CLI and by library callers.
"""
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from solocopy.core.copier import CopyExecutorImpl
from solocopy.core.hasher import BufferConfig, HasherImpl, algorithm_for
from solocopy.core.models import CopyResult, PlanResult, ScanResult, SyncParams, SyncStats
from solocopy.core.planner import DedupPlannerImpl
from solocopy.core.registry import DuplicateRegistryImpl
from solocopy.core.scanner import TreeScannerImpl
from solocopy.services.path_service import PathService

logger = logging.getLogger(__name__)


class SyncCommand:
    """
    Orchestrates the entire sync workflow:
    1. Validate roots (destination created if missing)
    2. Scan destination (top level only) and source (recursive) concurrently
    3. Plan copies with the dedup planner
    4. Execute the plan on the worker pool

    Usage:
        params = SyncParams(source_dir="/mnt/old-backup", destination_dir="/mnt/merged")
        command = SyncCommand()
        stats = command.execute(params, progress_callback=cli_progress_printer)
    """

    def __init__(self):
        self._plan: Optional[PlanResult] = None
        self._results: List[CopyResult] = []

    def execute(
            self,
            params: SyncParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> SyncStats:
        """
        Execute a sync run with given parameters.

        Args:
            params: Validated sync parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            SyncStats for the run

        Raises:
            InvalidPathError: If the roots are unusable or overlap
        """
        start_time = time.time()
        source_root, destination_root = PathService.validate_roots(
            params.source_dir, params.destination_dir
        )
        logger.debug(f"Sync {source_root} -> {destination_root} with {params.workers} workers")

        # Step 1: both scans touch disjoint trees, run them side by side
        destination_scanner = TreeScannerImpl(str(destination_root), recursive=False, workers=params.workers)
        source_scanner = TreeScannerImpl(str(source_root), recursive=True, workers=params.workers)
        with ThreadPoolExecutor(max_workers=2) as pool:
            destination_future = pool.submit(destination_scanner.scan)
            source_future = pool.submit(source_scanner.scan, progress_callback)
            destination_scan = destination_future.result()
            source_scan = source_future.result()

        # Step 2: decide what to copy
        buffer_size = BufferConfig.get_optimal_buffer_size()
        hasher = HasherImpl(full_algorithm=algorithm_for(params.full_hash), buffer_size=buffer_size)
        planner = DedupPlannerImpl(hasher=hasher, registry=DuplicateRegistryImpl(), workers=params.workers)
        self._plan = planner.plan(
            source_scan.index,
            destination_scan.index,
            str(destination_root),
            progress_callback=progress_callback
        )

        # Step 3: copy
        executor = CopyExecutorImpl(buffer_size=buffer_size)
        self._results = executor.execute_all(
            self._plan.tasks,
            workers=params.workers,
            progress_callback=progress_callback
        )

        stats = self._collect_stats(source_scan, destination_scan, self._plan, self._results)
        stats.total_time = time.time() - start_time
        return stats

    @staticmethod
    def _collect_stats(
            source_scan: ScanResult,
            destination_scan: ScanResult,
            plan: PlanResult,
            results: List[CopyResult]
    ) -> SyncStats:
        failures = [r for r in results if not r.ok]
        return SyncStats(
            source_files=source_scan.file_count,
            destination_files=destination_scan.file_count,
            copied=sum(1 for r in results if r.ok),
            bytes_copied=sum(r.bytes_copied for r in results if r.ok),
            failed=len(failures),
            duplicates=plan.duplicates,
            hash_errors=plan.hash_errors,
            source_symlinks=source_scan.symlinks,
            source_non_regular=source_scan.non_regular,
            destination_symlinks=destination_scan.symlinks,
            destination_non_regular=destination_scan.non_regular,
            scan_errors=source_scan.errors + destination_scan.errors,
            failures=failures,
        )

    def get_plan(self) -> Optional[PlanResult]:
        """Copy plan of the last execution."""
        return self._plan

    def get_results(self) -> List[CopyResult]:
        """Copy results of the last execution."""
        return self._results.copy()  # Return copy to prevent external mutation
