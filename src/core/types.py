"""Shared typed models.

This module defines immutable data models used by the decoder,
normalizer, batch builder, and writer to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from core.constants import (
    BATCH_STRATEGY_RUN,
    BIKES_DERIVATION_STANDARD,
)


@dataclass(frozen=True)
class StationRecord:
    """Raw per-station fields kept from one snapshot.

    Attributes:
        station_id: Opaque station identifier, stable across snapshots.
        station_status: Operational status flag, e.g. ``active``.
        num_bikes_available: Available bikes, e-bikes included.
        num_ebikes_available: Available electric-assist bikes.
        num_bikes_disabled: Disabled bikes docked at the station.
        num_docks_available: Free docks.
    """

    station_id: str
    station_status: str
    num_bikes_available: int
    num_ebikes_available: int
    num_bikes_disabled: int
    num_docks_available: int


@dataclass(frozen=True)
class Snapshot:
    """One decoded station status document.

    Attributes:
        source_uri: File the snapshot was read from.
        last_updated: Observation time in seconds since epoch.
        stations: Station records in document order.
    """

    source_uri: str
    last_updated: int
    stations: tuple[StationRecord, ...]


@dataclass(frozen=True)
class NormalizedRow:
    """One emitted output row.

    Attributes:
        station_code: Interned station code.
        num_bikes_available: Derived bikes-available count.
        num_ebikes_available: Available e-bikes.
        num_bikes_disabled: Disabled bikes.
        num_docks_available: Free docks.
        time_ms: Observation instant in epoch milliseconds.
    """

    station_code: int
    num_bikes_available: int
    num_ebikes_available: int
    num_bikes_disabled: int
    num_docks_available: int
    time_ms: int


@dataclass(frozen=True)
class PipelineProfile:
    """Conversion switches that must stay fixed for one run.

    Attributes:
        bikes_derivation: ``standard`` subtracts e-bikes, ``total`` keeps raw.
        include_disabled: Whether the disabled-bikes column is written.
        truncate_to_minute: Whether timestamps are floored to the minute.
        batch_strategy: ``run`` for one batch, ``snapshot`` for one per file.
    """

    bikes_derivation: str = BIKES_DERIVATION_STANDARD
    include_disabled: bool = True
    truncate_to_minute: bool = True
    batch_strategy: str = BATCH_STRATEGY_RUN


@dataclass(frozen=True)
class ConvertOptions:
    """Convert command options.

    Attributes:
        input_dir: Directory holding gzip snapshots.
        output_path: Parquet output path.
        id_map_path: JSON id map output path.
        profile: Conversion switches.
        input_pattern: Glob pattern for snapshot files.
        compression: Parquet compression codec.
        sort_snapshots: Process files in file-name order.
        seed_id_map_path: Optional prior id map to extend.
    """

    input_dir: Path
    output_path: Path
    id_map_path: Path
    profile: PipelineProfile
    input_pattern: str
    compression: str
    sort_snapshots: bool = True
    seed_id_map_path: Path | None = None


@dataclass(frozen=True)
class ConvertResult:
    """Summary of a completed conversion run.

    Attributes:
        output_path: Written Parquet file.
        id_map_path: Written id map file.
        snapshot_count: Number of snapshot files processed.
        row_count: Number of rows written.
        batch_count: Number of record batches written.
        station_count: Number of station codes in the id map.
    """

    output_path: Path
    id_map_path: Path
    snapshot_count: int
    row_count: int
    batch_count: int
    station_count: int


@dataclass(frozen=True)
class OutputSummary:
    """Read-back summary of a Parquet output file."""

    row_count: int
    row_group_count: int
    column_names: tuple[str, ...]
    min_time: datetime | None
    max_time: datetime | None
