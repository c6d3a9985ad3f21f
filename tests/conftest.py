"""
Shared fixtures for sync engine tests.
Creates isolated source/destination trees with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so 'solocopy' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def roots(temp_dir):
    """Empty source and destination roots side by side (never nested)."""
    source = temp_dir / "source"
    destination = temp_dir / "destination"
    source.mkdir()
    destination.mkdir()
    return source, destination


@pytest.fixture
def source_tree(roots) -> Dict[str, Path]:
    """
    Source tree for sync scenarios:
    - 2 identical files of 1024 bytes ('X'), one of them in a subdirectory
    - 1 unique file of 2048 bytes ('Y')
    - 1 unique file of 1500 bytes with a size nobody else has
    """
    source, _ = roots
    files = {}

    content_x = b"X" * 1024
    files["x_a"] = source / "a.bin"
    files["x_a"].write_bytes(content_x)

    nested = source / "nested" / "deeper"
    nested.mkdir(parents=True)
    files["x_b"] = nested / "b.bin"
    files["x_b"].write_bytes(content_x)

    files["y"] = source / "c.bin"
    files["y"].write_bytes(b"Y" * 2048)

    files["unique"] = source / "unique.txt"
    files["unique"].write_bytes(b"U" * 1500)

    return files


def write_same_size_variants(directory: Path, size: int, count: int, prefix: str = "v") -> list:
    """Files of identical size whose content differs only in the middle."""
    paths = []
    for i in range(count):
        content = bytearray(b"M" * size)
        content[size // 2] = i % 256
        path = directory / f"{prefix}{i}.bin"
        path.write_bytes(bytes(content))
        paths.append(path)
    return paths


@pytest.fixture
def make_variants():
    """Factory fixture for same-size files that differ only in the middle byte."""
    return write_same_size_variants
