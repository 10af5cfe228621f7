"""Unit tests for station identifier interning."""

from __future__ import annotations

import json

import pytest

from core.errors import DockstatCapacityError, DockstatDecodeError, DockstatIoError
from store.station_interner import StationInterner, read_id_map, write_id_map


def test_intern_returns_same_code_for_repeated_id() -> None:
    """Repeated interning should always return the first assigned code."""
    interner = StationInterner()

    codes = [interner.intern("123") for _ in range(3)]

    assert codes == [1, 1, 1]


def test_intern_assigns_increasing_codes_in_first_seen_order() -> None:
    """Codes should start at 1 and grow with first appearance."""
    interner = StationInterner()

    codes = [interner.intern(station_id) for station_id in ("b", "a", "b", "c")]

    assert codes == [1, 2, 1, 3]


def test_intern_raises_when_code_space_is_exhausted() -> None:
    """The 65,536th distinct station should not wrap to code 0."""
    interner = StationInterner()
    for index in range(65535):
        interner.intern(f"station-{index}")

    with pytest.raises(DockstatCapacityError):
        interner.intern("one-too-many")

    assert interner.intern("station-65534") == 65535


def test_from_mapping_continues_after_highest_code() -> None:
    """Seeded interners should keep prior codes and extend after them."""
    interner = StationInterner.from_mapping({"123": 4, "456": 2})

    new_code = interner.intern("789")

    assert (interner.intern("123"), new_code) == (4, 5)


def test_from_mapping_rejects_duplicate_codes() -> None:
    """A seed map reusing a code would break code uniqueness."""
    with pytest.raises(DockstatDecodeError):
        StationInterner.from_mapping({"123": 1, "456": 1})


def test_from_mapping_rejects_reserved_code() -> None:
    """Code 0 is never assigned, so it cannot appear in a seed map."""
    with pytest.raises(DockstatDecodeError):
        StationInterner.from_mapping({"123": 0})


def test_write_id_map_persists_final_mapping(tmp_path) -> None:
    """Id map artifact should hold every identifier to code pair."""
    interner = StationInterner()
    interner.intern("123")
    interner.intern("456")
    id_map_path = tmp_path / "nested" / "id_map.json"

    write_id_map(id_map_path, interner)

    assert json.loads(id_map_path.read_text(encoding="utf-8")) == {"123": 1, "456": 2}


def test_read_id_map_roundtrips_written_artifact(tmp_path) -> None:
    """A written id map should seed an equivalent interner."""
    interner = StationInterner()
    interner.intern("123")
    id_map_path = tmp_path / "id_map.json"
    write_id_map(id_map_path, interner)

    loaded = read_id_map(id_map_path)

    assert StationInterner.from_mapping(loaded).mapping() == interner.mapping()


def test_read_id_map_raises_for_missing_file(tmp_path) -> None:
    """Missing seed maps should surface as IO errors."""
    with pytest.raises(DockstatIoError):
        read_id_map(tmp_path / "missing.json")


def test_read_id_map_raises_for_non_object(tmp_path) -> None:
    """Seed maps must be JSON objects."""
    id_map_path = tmp_path / "id_map.json"
    id_map_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(DockstatDecodeError):
        read_id_map(id_map_path)
