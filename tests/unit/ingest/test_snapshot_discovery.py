"""Unit tests for snapshot discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import DockstatIoError
from ingest.snapshot_discovery import discover_snapshot_files
from tests.fixture_paths import fixture_path


def test_discover_snapshot_files_matches_pattern_only() -> None:
    """Discovery should skip files that do not match the glob."""
    paths = discover_snapshot_files(fixture_path("station_status"), "*.json.gz")

    assert [path.name for path in paths] == [
        "station_status_20231114T221320.json.gz",
        "station_status_20231114T221425.json.gz",
    ]


def test_discover_snapshot_files_sorts_by_name(tmp_path: Path) -> None:
    """Sorted discovery should return file-name order."""
    for name in ("c.json.gz", "a.json.gz", "b.json.gz"):
        (tmp_path / name).write_bytes(b"")

    paths = discover_snapshot_files(tmp_path, "*.json.gz", sort_by_name=True)

    assert [path.name for path in paths] == ["a.json.gz", "b.json.gz", "c.json.gz"]


def test_discover_snapshot_files_returns_each_file_once(tmp_path: Path) -> None:
    """Unsorted discovery should still list every match exactly once."""
    for name in ("c.json.gz", "a.json.gz", "b.json.gz"):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "nested.json.gz").mkdir()

    paths = discover_snapshot_files(tmp_path, "*.json.gz", sort_by_name=False)

    assert sorted(path.name for path in paths) == ["a.json.gz", "b.json.gz", "c.json.gz"]


def test_discover_snapshot_files_raises_for_missing_directory(tmp_path: Path) -> None:
    """Discovery should fail when the directory does not exist."""
    missing_dir = tmp_path / "does-not-exist"

    with pytest.raises(DockstatIoError):
        discover_snapshot_files(missing_dir, "*.json.gz")

    assert missing_dir.exists() is False


def test_discover_snapshot_files_raises_when_nothing_matches(tmp_path: Path) -> None:
    """An empty input directory should fail rather than write an empty file."""
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

    with pytest.raises(DockstatIoError):
        discover_snapshot_files(tmp_path, "*.json.gz")
