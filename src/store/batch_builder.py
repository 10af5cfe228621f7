"""Columnar batch construction for station rows.

This module accumulates normalized rows into parallel column buffers
and finalizes them into pyarrow record batches under the run schema.
"""

from __future__ import annotations

from typing import Iterable

import pyarrow as pa

from core.constants import (
    BIKES_AVAILABLE_COLUMN,
    BIKES_DISABLED_COLUMN,
    DOCKS_AVAILABLE_COLUMN,
    EBIKES_AVAILABLE_COLUMN,
    STATION_CODE_COLUMN,
    TIME_COLUMN,
)
from core.errors import DockstatSchemaError
from core.types import NormalizedRow


def build_station_schema(include_disabled: bool) -> pa.Schema:
    """Build the fixed output schema for a run.

    Args:
        include_disabled: Whether the disabled-bikes column is present.

    Returns:
        Arrow schema with uint16 counts and a naive millisecond timestamp.
    """
    fields = [
        pa.field(STATION_CODE_COLUMN, pa.uint16(), nullable=False),
        pa.field(BIKES_AVAILABLE_COLUMN, pa.uint16(), nullable=False),
        pa.field(EBIKES_AVAILABLE_COLUMN, pa.uint16(), nullable=False),
    ]
    if include_disabled:
        fields.append(pa.field(BIKES_DISABLED_COLUMN, pa.uint16(), nullable=False))
    fields.append(pa.field(DOCKS_AVAILABLE_COLUMN, pa.uint16(), nullable=False))
    fields.append(pa.field(TIME_COLUMN, pa.timestamp("ms"), nullable=False))
    return pa.schema(fields)


class StationBatchBuilder:
    """Reusable column accumulator for normalized rows."""

    def __init__(self, include_disabled: bool) -> None:
        self._include_disabled = include_disabled
        self._schema = build_station_schema(include_disabled)
        self._reset()

    @property
    def schema(self) -> pa.Schema:
        return self._schema

    def append(self, row: NormalizedRow) -> None:
        """Append one row across every column buffer."""
        self._station_codes.append(row.station_code)
        self._bikes_available.append(row.num_bikes_available)
        self._ebikes_available.append(row.num_ebikes_available)
        self._bikes_disabled.append(row.num_bikes_disabled)
        self._docks_available.append(row.num_docks_available)
        self._times.append(row.time_ms)

    def extend(self, rows: Iterable[NormalizedRow]) -> int:
        """Append rows and return how many were added."""
        added = 0
        for row in rows:
            self.append(row)
            added += 1
        return added

    def __len__(self) -> int:
        return len(self._station_codes)

    def finish(self) -> pa.RecordBatch:
        """Materialize buffered rows as a record batch and reset buffers.

        Returns:
            Record batch whose columns all have ``len(self)`` values.

        Raises:
            DockstatSchemaError: If a value does not fit its column type.
        """
        columns = [
            (STATION_CODE_COLUMN, self._station_codes),
            (BIKES_AVAILABLE_COLUMN, self._bikes_available),
            (EBIKES_AVAILABLE_COLUMN, self._ebikes_available),
        ]
        if self._include_disabled:
            columns.append((BIKES_DISABLED_COLUMN, self._bikes_disabled))
        columns.append((DOCKS_AVAILABLE_COLUMN, self._docks_available))
        columns.append((TIME_COLUMN, self._times))
        arrays = [
            _build_array(name, values, self._schema.field(name).type) for name, values in columns
        ]
        self._reset()
        return pa.RecordBatch.from_arrays(arrays, schema=self._schema)

    def _reset(self) -> None:
        self._station_codes: list[int] = []
        self._bikes_available: list[int] = []
        self._ebikes_available: list[int] = []
        self._bikes_disabled: list[int] = []
        self._docks_available: list[int] = []
        self._times: list[int] = []


def _build_array(name: str, values: list[int], data_type: pa.DataType) -> pa.Array:
    """Convert one column buffer to an Arrow array.

    Args:
        name: Column name for error context.
        values: Buffered python integers.
        data_type: Target Arrow type.

    Returns:
        Arrow array of ``data_type``.

    Raises:
        DockstatSchemaError: If a value overflows the target type.
    """
    try:
        return pa.array(values, type=data_type)
    except (pa.ArrowInvalid, OverflowError) as error:
        raise DockstatSchemaError(
            f"Column '{name}' holds a value that does not fit {data_type}: {error}."
        ) from error
