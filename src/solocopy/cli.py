#!/usr/bin/env python3
"""
SoloCopy CLI: command line interface for deduplicating copies.
Copies every file of the source tree whose content is not already present at the
top level of the destination, and never copies the same content twice in one run.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import Optional, NoReturn
import logging

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

logging.basicConfig(
    level=logging.ERROR,
    format=LOG_FORMAT
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from solocopy.core.exceptions import InvalidPathError
from solocopy.core.models import SyncParams, SyncStats, FullHashAlgorithm, default_workers
from solocopy.commands import SyncCommand
from solocopy.aliases import (
    FULL_HASH_ALIASES, FULL_HASH_CHOICES, FULL_HASH_HELP_TEXT,
    WORKERS_HELP_TEXT, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments. argparse exits with code 2 on usage errors."""
        parser = argparse.ArgumentParser(
            prog="solocopy",
            description="SoloCopy: copy a directory tree without creating duplicate content",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Required arguments
        parser.add_argument(
            "source",
            type=str,
            help="Source directory (scanned recursively)"
        )
        parser.add_argument(
            "destination",
            type=str,
            help="Destination directory (created if missing)"
        )

        # Engine options
        parser.add_argument(
            "--workers", "-w",
            type=int,
            default=default_workers(),
            metavar='N',
            help=WORKERS_HELP_TEXT
        )
        parser.add_argument(
            "--full-hash",
            choices=FULL_HASH_CHOICES,
            default="blake2b",
            type=str,
            dest="full_hash",
            help=FULL_HASH_HELP_TEXT
        )

        # Output options
        output = parser.add_mutually_exclusive_group()
        output.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress the summary (errors are still printed)"
        )
        output.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress and debug logging"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.workers < 1:
            self.error_exit("--workers must be at least 1")

        if not os.path.exists(args.source):
            self.error_exit(f"Source directory not found: {args.source}")
        if not os.path.isdir(args.source):
            self.error_exit(f"Source path is not a directory: {args.source}")

        if os.path.exists(args.destination) and not os.path.isdir(args.destination):
            self.error_exit(f"Destination path is not a directory: {args.destination}")

    def create_params(self, args: argparse.Namespace) -> SyncParams:
        """Create SyncParams from CLI arguments."""
        try:
            return SyncParams(
                source_dir=args.source,
                destination_dir=args.destination,
                workers=args.workers,
                full_hash=FULL_HASH_ALIASES.get(args.full_hash, FullHashAlgorithm.BLAKE2B),
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
            if current == total:
                sys.stderr.write("\n")
            sys.stderr.flush()
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files found...")
            sys.stderr.flush()

    def run_sync(self, params: SyncParams) -> SyncStats:
        """Execute the sync workflow."""
        command = SyncCommand()
        if self.verbose:
            print(f"Full hash: {params.full_hash.display_name}, workers: {params.workers}")

        try:
            return command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except InvalidPathError as e:
            self.error_exit(str(e))

    def output_results(self, stats: SyncStats) -> None:
        """Print the run summary."""
        if self.quiet:
            return

        print()
        print(stats.print_summary())

        if stats.failures:
            print(f"\nFailed to copy {len(stats.failures)} file(s):")
            for result in stats.failures[:5]:  # Show first 5 errors
                print(f"  • {result.task.source}: {result.error}")
            if len(stats.failures) > 5:
                print(f"  ...and {len(stats.failures) - 5} more files")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"Warning: {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        self.validate_args(args)
        params = self.create_params(args)

        if not self.quiet:
            print(f"Syncing {params.source_dir} -> {params.destination_dir}")

        stats = self.run_sync(params)
        self.output_results(stats)

        if stats.failed:
            self.warning(f"{stats.failed} file(s) could not be copied completely")

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\nCompleted in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
