"""Builders for in-memory station status snapshot payloads."""

from __future__ import annotations

import gzip
import json
from pathlib import Path
from typing import Any


def station_payload(
    station_id: str,
    status: str = "active",
    bikes: int = 5,
    ebikes: int = 2,
    disabled: int = 1,
    docks: int = 10,
) -> dict[str, Any]:
    """Build one raw GBFS station object with realistic extra fields."""
    return {
        "station_id": station_id,
        "legacy_id": station_id,
        "station_status": status,
        "is_installed": 1,
        "is_renting": 1,
        "is_returning": 1,
        "eightd_has_available_keys": False,
        "last_reported": 1699999900,
        "num_bikes_available": bikes,
        "num_ebikes_available": ebikes,
        "num_bikes_disabled": disabled,
        "num_docks_available": docks,
        "num_docks_disabled": 0,
    }


def snapshot_payload(last_updated: int, stations: list[dict[str, Any]]) -> dict[str, Any]:
    """Build a full station_status document."""
    return {"last_updated": last_updated, "ttl": 5, "data": {"stations": stations}}


def compress_payload(payload: Any) -> bytes:
    """Gzip a JSON payload the way snapshot files are stored."""
    return gzip.compress(json.dumps(payload).encode("utf-8"))


def write_snapshot_file(directory: Path, name: str, payload: Any) -> Path:
    """Write a gzip snapshot file and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    snapshot_path = directory / name
    snapshot_path.write_bytes(compress_payload(payload))
    return snapshot_path
