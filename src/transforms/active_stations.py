"""Active station filtering and row derivation.

This module keeps stations reporting ``active`` status and derives the
emitted counts and timestamp for each one.
"""

from __future__ import annotations

from typing import Iterator

from core.constants import (
    ACTIVE_STATION_STATUS,
    BIKES_DERIVATION_STANDARD,
    MILLIS_PER_SECOND,
    SECONDS_PER_MINUTE,
)
from core.errors import DockstatSchemaError
from core.types import NormalizedRow, PipelineProfile, Snapshot, StationRecord
from store.station_interner import StationInterner


def normalize_snapshot(
    snapshot: Snapshot,
    interner: StationInterner,
    profile: PipelineProfile,
) -> Iterator[NormalizedRow]:
    """Yield one output row per active station in document order.

    Args:
        snapshot: Decoded snapshot.
        interner: Run-scoped station code map.
        profile: Derivation switches for this run.

    Yields:
        Normalized rows sharing the snapshot timestamp.

    Raises:
        DockstatCapacityError: If a new station cannot be assigned a code.
        DockstatSchemaError: If the standard derivation goes negative.
    """
    time_ms = snapshot_time_ms(snapshot.last_updated, profile.truncate_to_minute)
    for record in snapshot.stations:
        if not is_active(record):
            continue
        yield NormalizedRow(
            station_code=interner.intern(record.station_id),
            num_bikes_available=_bikes_available(record, profile.bikes_derivation),
            num_ebikes_available=record.num_ebikes_available,
            num_bikes_disabled=record.num_bikes_disabled,
            num_docks_available=record.num_docks_available,
            time_ms=time_ms,
        )


def is_active(record: StationRecord) -> bool:
    """Return whether a station passes the status filter."""
    return record.station_status == ACTIVE_STATION_STATUS


def snapshot_time_ms(last_updated: int, truncate_to_minute: bool) -> int:
    """Convert snapshot seconds to epoch milliseconds.

    Args:
        last_updated: Seconds since epoch.
        truncate_to_minute: Floor to the start of the minute first.

    Returns:
        Epoch milliseconds.
    """
    seconds = last_updated
    if truncate_to_minute:
        seconds -= seconds % SECONDS_PER_MINUTE
    return seconds * MILLIS_PER_SECOND


def _bikes_available(record: StationRecord, bikes_derivation: str) -> int:
    if bikes_derivation == BIKES_DERIVATION_STANDARD:
        standard_bikes = record.num_bikes_available - record.num_ebikes_available
        if standard_bikes < 0:
            raise DockstatSchemaError(
                f"Station '{record.station_id}' reports {record.num_ebikes_available} e-bikes "
                f"but only {record.num_bikes_available} available bikes; the standard "
                "bikes derivation would go negative. Use the total derivation for this feed."
            )
        return standard_bikes
    return record.num_bikes_available
