"""Snapshot file discovery.

This module enumerates the gzip snapshot files a run will convert.
"""

from __future__ import annotations

from pathlib import Path

from core.errors import DockstatIoError


def discover_snapshot_files(
    input_dir: Path,
    pattern: str,
    sort_by_name: bool = True,
) -> list[Path]:
    """List snapshot files matching a glob pattern.

    Args:
        input_dir: Directory holding snapshot files.
        pattern: Glob pattern relative to ``input_dir``.
        sort_by_name: Return files in file-name order when true,
            otherwise in filesystem enumeration order.

    Returns:
        Each matching regular file exactly once.

    Raises:
        DockstatIoError: If the directory is missing or has no matches.
    """
    if not input_dir.is_dir():
        raise DockstatIoError(
            f"Failed to read snapshots at {input_dir}: directory does not exist. "
            "Provide an existing snapshot directory."
        )
    matches = [path for path in input_dir.glob(pattern) if path.is_file()]
    if sort_by_name:
        matches.sort(key=lambda path: path.name)
    if not matches:
        raise DockstatIoError(
            f"No snapshot files matching '{pattern}' found under {input_dir}."
        )
    return matches
