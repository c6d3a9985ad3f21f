"""
Unit tests for TreeScannerImpl.
Verifies size bucketing, recursion modes, symlink/special-file handling and error tolerance.
"""
import os
import sys
import pytest
from pathlib import Path
from unittest import mock
from solocopy.core.models import count_files
from solocopy.core.scanner import TreeScannerImpl


class TestTreeScannerImpl:
    """Test tree scanning into size buckets."""

    def test_groups_files_by_exact_size(self, source_tree, roots):
        source, _ = roots
        result = TreeScannerImpl(str(source)).scan()

        assert set(result.index.keys()) == {1024, 2048, 1500}
        assert len(result.index[1024]) == 2
        assert len(result.index[2048]) == 1
        assert result.file_count == 4
        assert all(r.size == size for size, records in result.index.items() for r in records)

    def test_recursive_scan_includes_nested_files(self, source_tree, roots):
        source, _ = roots
        result = TreeScannerImpl(str(source), recursive=True).scan()

        paths = {r.path for records in result.index.values() for r in records}
        assert str(source_tree["x_b"]) in paths

    def test_top_level_scan_ignores_subdirectories(self, source_tree, roots):
        """Destination-style scan: only directly-contained entries are indexed."""
        source, _ = roots
        result = TreeScannerImpl(str(source), recursive=False).scan()

        paths = {r.path for records in result.index.values() for r in records}
        assert str(source_tree["x_b"]) not in paths
        assert str(source_tree["x_a"]) in paths
        assert result.file_count == 3
        # directories are traversal markers, not skipped entries
        assert result.non_regular == 0

    def test_zero_byte_files_are_indexed(self, temp_dir):
        (temp_dir / "empty1").write_bytes(b"")
        (temp_dir / "empty2").write_bytes(b"")
        result = TreeScannerImpl(str(temp_dir)).scan()
        assert len(result.index[0]) == 2

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlinks_are_counted_and_never_indexed(self, temp_dir):
        real = temp_dir / "real.txt"
        real.write_bytes(b"content")
        (temp_dir / "link.txt").symlink_to(real)
        subdir = temp_dir / "sub"
        subdir.mkdir()
        (subdir / "inner.txt").write_bytes(b"inner!!")
        (temp_dir / "dirlink").symlink_to(subdir, target_is_directory=True)

        result = TreeScannerImpl(str(temp_dir)).scan()

        paths = {r.path for records in result.index.values() for r in records}
        assert result.symlinks == 2
        assert str(temp_dir / "link.txt") not in paths
        # the directory symlink is not followed: inner.txt is indexed once
        assert sum(1 for p in paths if p.endswith("inner.txt")) == 1

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs not supported")
    def test_fifo_is_counted_as_non_regular(self, temp_dir):
        os.mkfifo(temp_dir / "pipe")
        (temp_dir / "file.txt").write_bytes(b"x")

        result = TreeScannerImpl(str(temp_dir)).scan()
        assert result.non_regular == 1
        assert result.file_count == 1

    def test_parallel_size_retrieval_merges_all_workers(self, temp_dir):
        for i in range(50):
            (temp_dir / f"f{i}.bin").write_bytes(b"z" * (i % 5 + 1))

        single = TreeScannerImpl(str(temp_dir), workers=1).scan()
        parallel = TreeScannerImpl(str(temp_dir), workers=8).scan()

        assert count_files(parallel.index) == 50
        assert {s: sorted(r.path for r in recs) for s, recs in single.index.items()} == \
               {s: sorted(r.path for r in recs) for s, recs in parallel.index.items()}

    def test_empty_directory(self, temp_dir):
        result = TreeScannerImpl(str(temp_dir)).scan()
        assert result.index == {}
        assert result.file_count == 0

    def test_unreadable_directory_is_counted_not_fatal(self, temp_dir):
        (temp_dir / "ok.txt").write_bytes(b"fine")
        broken = temp_dir / "broken"
        broken.mkdir()

        real_scandir = os.scandir

        def flaky_scandir(path):
            if str(path) == str(broken):
                raise PermissionError("denied")
            return real_scandir(path)

        with mock.patch("solocopy.core.scanner.os.scandir", side_effect=flaky_scandir):
            result = TreeScannerImpl(str(temp_dir)).scan()

        assert result.errors == 1
        assert result.file_count == 1

    def test_file_vanishing_before_stat_is_counted(self, temp_dir):
        (temp_dir / "stays.txt").write_bytes(b"stays")
        (temp_dir / "goes.txt").write_bytes(b"goes")

        real_lstat = os.lstat

        def flaky_lstat(path, *args, **kwargs):
            if str(path).endswith("goes.txt"):
                raise FileNotFoundError(path)
            return real_lstat(path, *args, **kwargs)

        with mock.patch("solocopy.core.scanner.os.lstat", side_effect=flaky_lstat):
            result = TreeScannerImpl(str(temp_dir)).scan()

        assert result.file_count == 1
        assert result.errors == 1

    def test_progress_callback_reports_scanning(self, source_tree, roots):
        source, _ = roots
        events = []
        TreeScannerImpl(str(source)).scan(progress_callback=lambda s, c, t: events.append((s, c, t)))

        assert events
        assert all(stage == "Scanning" for stage, _, _ in events)
        assert events[-1] == ("Scanning", 4, 4)

    def test_scan_does_not_modify_tree(self, source_tree, roots):
        source, _ = roots
        before = sorted((p, p.stat().st_mtime_ns) for p in Path(source).rglob("*"))
        TreeScannerImpl(str(source), workers=4).scan()
        after = sorted((p, p.stat().st_mtime_ns) for p in Path(source).rglob("*"))
        assert before == after
