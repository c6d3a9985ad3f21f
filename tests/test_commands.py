"""
Integration tests for SyncCommand: the orchestration layer between the CLI and the core.
Exercises scan → plan → copy end to end on real directory trees.
"""
import os
import sys
import pytest
from pathlib import Path
from solocopy import SyncCommand, SyncParams, FullHashAlgorithm
from solocopy.core.exceptions import InvalidPathError


def destination_contents(destination: Path):
    return sorted(p.read_bytes() for p in destination.iterdir() if p.is_file())


class TestSyncScenarios:

    @pytest.mark.parametrize("workers", [1, 4])
    def test_duplicates_in_source_copied_once(self, source_tree, roots, workers):
        """A, B identical (1024 bytes 'X'), C 2048 bytes 'Y' → 2 of those copied, 1 skipped."""
        source, destination = roots
        stats = SyncCommand().execute(
            SyncParams(source_dir=str(source), destination_dir=str(destination), workers=workers)
        )

        assert stats.copied == 3  # X once, Y, unique
        assert stats.duplicates == 1
        assert stats.source_files == 4
        assert destination_contents(destination) == sorted([b"X" * 1024, b"Y" * 2048, b"U" * 1500])

    def test_content_present_at_destination_is_skipped(self, roots):
        source, destination = roots
        (source / "d.txt").write_bytes(b"already there")
        (source / "e.txt").write_bytes(b"brand new!!!!")
        (destination / "old_name.txt").write_bytes(b"already there")

        stats = SyncCommand().execute(SyncParams(str(source), str(destination)))

        assert stats.copied == 1
        assert stats.duplicates == 1
        assert stats.destination_files == 1
        assert not (destination / "d.txt").exists()
        assert (destination / "e.txt").read_bytes() == b"brand new!!!!"

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlinks_are_counted_and_not_copied(self, roots):
        source, destination = roots
        (source / "real.txt").write_bytes(b"real")
        (source / "link.txt").symlink_to(source / "real.txt")

        command = SyncCommand()
        stats = command.execute(SyncParams(str(source), str(destination)))

        assert stats.source_symlinks == 1
        assert stats.copied == 1
        assert all(not t.source.endswith("link.txt") for t in command.get_plan().tasks)
        assert not (destination / "link.txt").exists()

    def test_name_collision_gets_suffix(self, roots):
        source, destination = roots
        (source / "report.txt").write_bytes(b"new quarterly numbers")
        (destination / "report.txt").write_bytes(b"old")

        stats = SyncCommand().execute(SyncParams(str(source), str(destination)))

        assert stats.copied == 1
        assert (destination / "report.txt").read_bytes() == b"old"
        assert (destination / "report_1.txt").read_bytes() == b"new quarterly numbers"

    def test_same_basename_from_different_subdirectories(self, roots):
        source, destination = roots
        for name in ("a", "b", "c"):
            sub = source / name
            sub.mkdir()
            (sub / "IMG_0001.jpg").write_bytes(f"picture from {name}".encode())

        stats = SyncCommand().execute(SyncParams(str(source), str(destination), workers=3))

        assert stats.copied == 3
        names = sorted(p.name for p in destination.iterdir())
        assert names == ["IMG_0001.jpg", "IMG_0001_1.jpg", "IMG_0001_2.jpg"]

    def test_rerun_is_idempotent(self, source_tree, roots):
        source, destination = roots
        first = SyncCommand().execute(SyncParams(str(source), str(destination)))
        before = destination_contents(destination)

        second = SyncCommand().execute(SyncParams(str(source), str(destination)))

        assert first.copied == 3
        assert second.copied == 0
        assert second.duplicates == 4
        assert destination_contents(destination) == before

    def test_no_two_identical_files_after_run(self, roots, make_variants):
        source, destination = roots
        make_variants(source, 200 * 1024, 3, prefix="large")
        for i in range(6):
            sub = source / f"s{i % 2}"
            sub.mkdir(exist_ok=True)
            (sub / f"dup{i}.bin").write_bytes(b"same" * 300)

        SyncCommand().execute(SyncParams(str(source), str(destination), workers=4))

        contents = destination_contents(destination)
        assert len(contents) == len(set(contents))
        assert len(contents) == 4

    def test_xxh128_full_hash(self, source_tree, roots):
        source, destination = roots
        stats = SyncCommand().execute(
            SyncParams(str(source), str(destination), full_hash=FullHashAlgorithm.XXH128)
        )
        assert stats.copied == 3
        assert stats.duplicates == 1

    def test_destination_created_when_missing(self, source_tree, roots, temp_dir):
        source, _ = roots
        target = temp_dir / "new" / "target"
        stats = SyncCommand().execute(SyncParams(str(source), str(target)))

        assert target.is_dir()
        assert stats.copied == 3

    def test_copied_files_keep_mtime(self, roots):
        source, destination = roots
        src = source / "dated.txt"
        src.write_bytes(b"dated")
        os.utime(src, (1_600_000_000, 1_600_000_000))

        SyncCommand().execute(SyncParams(str(source), str(destination)))
        assert int((destination / "dated.txt").stat().st_mtime) == 1_600_000_000

    def test_stats_and_results_are_consistent(self, source_tree, roots):
        source, destination = roots
        command = SyncCommand()
        stats = command.execute(SyncParams(str(source), str(destination)))

        results = command.get_results()
        assert len(results) == stats.copied + stats.failed
        assert stats.bytes_copied == 1024 + 2048 + 1500
        assert stats.total_time >= 0
        assert "Files copied: 3" in stats.print_summary()

    def test_progress_callback_receives_stages(self, source_tree, roots):
        source, destination = roots
        stages = set()
        SyncCommand().execute(
            SyncParams(str(source), str(destination)),
            progress_callback=lambda s, c, t: stages.add(s)
        )
        assert {"Scanning", "Partial Hash", "Full Hash", "Copying"} <= stages


class TestSyncValidation:

    def test_missing_source_raises(self, temp_dir):
        with pytest.raises(InvalidPathError, match="not found"):
            SyncCommand().execute(SyncParams(str(temp_dir / "nope"), str(temp_dir / "dst")))

    def test_same_roots_raise(self, roots):
        source, _ = roots
        with pytest.raises(InvalidPathError, match="cannot be the same"):
            SyncCommand().execute(SyncParams(str(source), str(source)))

    def test_nested_roots_raise(self, roots):
        source, _ = roots
        with pytest.raises(InvalidPathError, match="nested"):
            SyncCommand().execute(SyncParams(str(source), str(source / "inside")))

    def test_params_validation(self, roots):
        source, destination = roots
        with pytest.raises(ValueError):
            SyncParams(str(source), str(destination), workers=0)
        with pytest.raises(ValueError):
            SyncParams("", str(destination))
        assert SyncParams(str(source), str(destination), full_hash="xxh128").full_hash == FullHashAlgorithm.XXH128
