"""Unit tests for snapshot decoding."""

from __future__ import annotations

import gzip

import pytest

from core.errors import DockstatDecodeError, DockstatIoError
from core.types import StationRecord
from ingest.snapshot_decoder import decode_snapshot, read_snapshot
from tests.fixture_paths import fixture_path
from tests.snapshot_payloads import compress_payload, snapshot_payload, station_payload


def test_decode_snapshot_reads_timestamp_and_stations() -> None:
    """Decoder should keep the timestamp and every station in order."""
    blob = compress_payload(
        snapshot_payload(1700000000, [station_payload("123"), station_payload("456", "planned")])
    )

    snapshot = decode_snapshot(blob, "memory")

    assert snapshot.last_updated == 1700000000 and [
        record.station_id for record in snapshot.stations
    ] == ["123", "456"]


def test_decode_snapshot_ignores_unknown_fields() -> None:
    """Extra fields in stations and the document should be tolerated."""
    station = station_payload("123", bikes=5, ebikes=2, disabled=1, docks=10)
    station["vehicle_types_available"] = [{"vehicle_type_id": "1", "count": 3}]
    payload = snapshot_payload(1700000000, [station])
    payload["version"] = "2.3"

    snapshot = decode_snapshot(compress_payload(payload), "memory")

    assert snapshot.stations[0] == StationRecord(
        station_id="123",
        station_status="active",
        num_bikes_available=5,
        num_ebikes_available=2,
        num_bikes_disabled=1,
        num_docks_available=10,
    )


def test_decode_snapshot_raises_for_corrupt_gzip() -> None:
    """Truncated gzip streams should fail with a decode error."""
    blob = compress_payload(snapshot_payload(1700000000, [station_payload("123")]))

    with pytest.raises(DockstatDecodeError):
        decode_snapshot(blob[: len(blob) // 2], "memory")


def test_decode_snapshot_raises_for_non_gzip_bytes() -> None:
    """Plain JSON bytes are not a valid snapshot blob."""
    with pytest.raises(DockstatDecodeError):
        decode_snapshot(b'{"last_updated": 1}', "memory")


def test_decode_snapshot_raises_for_truncated_json() -> None:
    """Valid gzip around invalid JSON should fail with a decode error."""
    blob = gzip.compress(b'{"last_updated": 1700000000, "data": {"stations": [')

    with pytest.raises(DockstatDecodeError):
        decode_snapshot(blob, "memory")


def test_decode_snapshot_raises_for_missing_stations() -> None:
    """Documents without data.stations do not match the expected shape."""
    blob = compress_payload({"last_updated": 1700000000, "data": {}})

    with pytest.raises(DockstatDecodeError):
        decode_snapshot(blob, "memory")


def test_decode_snapshot_raises_for_string_timestamp() -> None:
    """last_updated must be an integer, not a string."""
    blob = compress_payload(snapshot_payload("1700000000", [station_payload("123")]))

    with pytest.raises(DockstatDecodeError):
        decode_snapshot(blob, "memory")


def test_decode_snapshot_raises_for_count_over_uint16() -> None:
    """Counts that would overflow 16 bits should be surfaced."""
    blob = compress_payload(snapshot_payload(1700000000, [station_payload("123", docks=65536)]))

    with pytest.raises(DockstatDecodeError):
        decode_snapshot(blob, "memory")


def test_decode_snapshot_raises_for_negative_count() -> None:
    """Counts must be non-negative."""
    blob = compress_payload(snapshot_payload(1700000000, [station_payload("123", disabled=-1)]))

    with pytest.raises(DockstatDecodeError):
        decode_snapshot(blob, "memory")


def test_decode_snapshot_keeps_ebikes_above_total() -> None:
    """Count consistency is left to the derivation, not the decoder."""
    blob = compress_payload(
        snapshot_payload(1700000000, [station_payload("123", bikes=1, ebikes=2)])
    )

    snapshot = decode_snapshot(blob, "memory")

    assert snapshot.stations[0].num_ebikes_available == 2


def test_decode_snapshot_raises_for_numeric_station_id() -> None:
    """station_id must be a string."""
    station = station_payload("123")
    station["station_id"] = 123

    with pytest.raises(DockstatDecodeError):
        decode_snapshot(compress_payload(snapshot_payload(1700000000, [station])), "memory")


def test_decode_snapshot_names_source_in_error() -> None:
    """Error messages should identify which input failed."""
    with pytest.raises(DockstatDecodeError, match="snapshots/broken.json.gz"):
        decode_snapshot(b"garbage", "snapshots/broken.json.gz")


def test_read_snapshot_reads_fixture_file() -> None:
    """Reader should decode a snapshot file from disk."""
    snapshot = read_snapshot(
        fixture_path("station_status/station_status_20231114T221320.json.gz")
    )

    assert len(snapshot.stations) == 3


def test_read_snapshot_raises_for_missing_file(tmp_path) -> None:
    """Unreadable files are IO failures rather than decode failures."""
    with pytest.raises(DockstatIoError):
        read_snapshot(tmp_path / "missing.json.gz")
