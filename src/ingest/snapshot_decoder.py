"""Station status snapshot decoding.

This module turns one gzip-compressed GBFS ``station_status`` document
into a typed snapshot. Fields the pipeline does not emit are tolerated
and dropped; required fields are checked strictly.
"""

from __future__ import annotations

import gzip
import json
import zlib
from pathlib import Path
from typing import Any

from core.constants import UINT16_MAX
from core.errors import DockstatDecodeError, DockstatIoError
from core.types import Snapshot, StationRecord

_COUNT_FIELDS = (
    "num_bikes_available",
    "num_ebikes_available",
    "num_bikes_disabled",
    "num_docks_available",
)


def read_snapshot(snapshot_path: Path) -> Snapshot:
    """Read and decode one snapshot file.

    Args:
        snapshot_path: Gzip JSON snapshot path.

    Returns:
        Decoded snapshot.

    Raises:
        DockstatIoError: If the file cannot be read.
        DockstatDecodeError: If the content is malformed.
    """
    try:
        blob = snapshot_path.read_bytes()
    except OSError as error:
        raise DockstatIoError(
            f"Failed to read snapshot at {snapshot_path}: {error}."
        ) from error
    return decode_snapshot(blob, str(snapshot_path))


def decode_snapshot(blob: bytes, source_uri: str) -> Snapshot:
    """Decode a compressed snapshot blob.

    Args:
        blob: Gzip-compressed JSON bytes.
        source_uri: Origin used in error messages and on the snapshot.

    Returns:
        Snapshot with every station record in document order.

    Raises:
        DockstatDecodeError: If decompression, JSON parsing, or
            document shape validation fails.
    """
    payload = _parse_document(_decompress(blob, source_uri), source_uri)
    if not isinstance(payload, dict):
        raise DockstatDecodeError(
            f"Invalid snapshot at {source_uri}: expected a JSON object at top level."
        )
    last_updated = _require_int(payload, "last_updated", source_uri)
    data = payload.get("data")
    if not isinstance(data, dict):
        raise DockstatDecodeError(
            f"Invalid snapshot at {source_uri}: missing object field 'data'."
        )
    stations = data.get("stations")
    if not isinstance(stations, list):
        raise DockstatDecodeError(
            f"Invalid snapshot at {source_uri}: missing list field 'data.stations'."
        )
    records = tuple(
        _parse_station(item, f"{source_uri}:stations[{index}]")
        for index, item in enumerate(stations)
    )
    return Snapshot(source_uri=source_uri, last_updated=last_updated, stations=records)


def _decompress(blob: bytes, source_uri: str) -> bytes:
    try:
        return gzip.decompress(blob)
    except (OSError, EOFError, zlib.error) as error:
        raise DockstatDecodeError(
            f"Failed to decompress snapshot at {source_uri}: {error}. "
            "The gzip stream is corrupt or truncated."
        ) from error


def _parse_document(raw_bytes: bytes, source_uri: str) -> Any:
    try:
        return json.loads(raw_bytes)
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        raise DockstatDecodeError(
            f"Failed to parse snapshot JSON at {source_uri}: {error}."
        ) from error


def _parse_station(item: object, location: str) -> StationRecord:
    """Validate one raw station object.

    Args:
        item: Raw JSON value from ``data.stations``.
        location: Source and index for error messages.

    Returns:
        Typed station record.

    Raises:
        DockstatDecodeError: If required fields are missing or invalid.
    """
    if not isinstance(item, dict):
        raise DockstatDecodeError(f"Invalid station at {location}: expected a JSON object.")
    station_id = item.get("station_id")
    station_status = item.get("station_status")
    if not isinstance(station_id, str):
        raise DockstatDecodeError(
            f"Invalid station at {location}: 'station_id' must be a string."
        )
    if not isinstance(station_status, str):
        raise DockstatDecodeError(
            f"Invalid station at {location}: 'station_status' must be a string."
        )
    counts = {name: _require_count(item, name, location) for name in _COUNT_FIELDS}
    return StationRecord(station_id=station_id, station_status=station_status, **counts)


def _require_int(payload: dict[str, Any], name: str, location: str) -> int:
    value = payload.get(name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DockstatDecodeError(
            f"Invalid snapshot at {location}: '{name}' must be an integer."
        )
    return value


def _require_count(payload: dict[str, Any], name: str, location: str) -> int:
    value = _require_int(payload, name, location)
    if not 0 <= value <= UINT16_MAX:
        raise DockstatDecodeError(
            f"Invalid station at {location}: '{name}' value {value} is outside 0..{UINT16_MAX}."
        )
    return value
