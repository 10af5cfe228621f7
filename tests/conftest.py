"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src and repository root to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture(autouse=True)
def _clear_dockstat_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer DOCKSTAT_* settings out of config-dependent tests."""
    for name in (
        "DOCKSTAT_INPUT_DIR",
        "DOCKSTAT_INPUT_PATTERN",
        "DOCKSTAT_OUTPUT_PATH",
        "DOCKSTAT_ID_MAP_PATH",
        "DOCKSTAT_PROFILE",
        "DOCKSTAT_COMPRESSION",
        "DOCKSTAT_SORT_SNAPSHOTS",
        "DOCKSTAT_SEED_ID_MAP",
    ):
        monkeypatch.delenv(name, raising=False)
