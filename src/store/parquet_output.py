"""Parquet persistence for station batches.

This module appends record batches to a single Parquet file under a
fixed schema. Data lands in a temporary sibling path and only replaces
the target once the footer is written, so a failed run never leaves a
partial file at the output path.
"""

from __future__ import annotations

import os
from pathlib import Path
from types import TracebackType

import pyarrow as pa
import pyarrow.compute as pc
import pyarrow.parquet as pq

from core.constants import TEMP_FILE_SUFFIX, TIME_COLUMN
from core.errors import DockstatIoError, DockstatSchemaError
from core.logging_config import get_logger
from core.types import OutputSummary

_LOGGER = get_logger(__name__)


class StationParquetWriter:
    """Single-file Parquet writer with rename-on-close semantics."""

    def __init__(self, output_path: Path, schema: pa.Schema, compression: str) -> None:
        """Open the temporary output file.

        Args:
            output_path: Final Parquet path.
            schema: Schema every written batch must match.
            compression: Parquet compression codec.

        Raises:
            DockstatIoError: If the file cannot be created.
            DockstatSchemaError: If pyarrow rejects the schema.
        """
        self._output_path = output_path
        self._temp_path = output_path.with_name(output_path.name + TEMP_FILE_SUFFIX)
        self._schema = schema
        self._rows_written = 0
        self._batches_written = 0
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            self._writer: pq.ParquetWriter | None = pq.ParquetWriter(
                str(self._temp_path), schema, compression=compression
            )
        except OSError as error:
            raise DockstatIoError(
                f"Failed to create Parquet output at {self._temp_path}: {error}. "
                "Check that the output directory is writable."
            ) from error
        except (pa.ArrowInvalid, pa.ArrowNotImplementedError) as error:
            raise DockstatSchemaError(
                f"Failed to open Parquet output with schema {schema}: {error}."
            ) from error

    @property
    def rows_written(self) -> int:
        return self._rows_written

    @property
    def batches_written(self) -> int:
        return self._batches_written

    def write(self, batch: pa.RecordBatch) -> None:
        """Append one record batch.

        Args:
            batch: Batch matching the writer schema exactly.

        Raises:
            DockstatSchemaError: If the batch schema differs.
            DockstatIoError: If the write fails or the writer is closed.
        """
        writer = self._require_open()
        if not batch.schema.equals(self._schema):
            raise DockstatSchemaError(
                f"Batch schema does not match output schema for {self._output_path}. "
                f"Expected {self._schema.names}, got {batch.schema.names}."
            )
        try:
            writer.write_batch(batch)
        except (OSError, pa.ArrowException) as error:
            raise DockstatIoError(
                f"Failed to write batch to {self._temp_path}: {error}."
            ) from error
        self._rows_written += batch.num_rows
        self._batches_written += 1
        _LOGGER.debug(
            "batch_written",
            output_path=str(self._output_path),
            batch_rows=batch.num_rows,
            rows_written=self._rows_written,
        )

    def close(self) -> Path:
        """Write the footer and move the file into place.

        Returns:
            Final output path.

        Raises:
            DockstatIoError: If finalizing or renaming fails.
        """
        writer = self._require_open()
        self._writer = None
        try:
            writer.close()
            os.replace(self._temp_path, self._output_path)
        except (OSError, pa.ArrowException) as error:
            self._temp_path.unlink(missing_ok=True)
            raise DockstatIoError(
                f"Failed to finalize Parquet output at {self._output_path}: {error}."
            ) from error
        return self._output_path

    def abort(self) -> None:
        """Discard everything written so far."""
        writer = self._writer
        self._writer = None
        if writer is not None:
            try:
                writer.close()
            except (OSError, pa.ArrowException) as error:
                _LOGGER.warning(
                    "parquet_abort_close_failed",
                    output_path=str(self._temp_path),
                    error=str(error),
                )
        self._temp_path.unlink(missing_ok=True)

    def __enter__(self) -> "StationParquetWriter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            self.abort()
        elif self._writer is not None:
            self.close()

    def _require_open(self) -> pq.ParquetWriter:
        if self._writer is None:
            raise DockstatIoError(
                f"Parquet writer for {self._output_path} is already closed."
            )
        return self._writer


def read_station_table(output_path: Path) -> pa.Table:
    """Read a written station Parquet file.

    Args:
        output_path: Parquet file path.

    Returns:
        Arrow table with all rows.

    Raises:
        DockstatIoError: If the file is missing or not valid Parquet.
    """
    try:
        return pq.read_table(str(output_path))
    except (OSError, pa.ArrowException) as error:
        raise DockstatIoError(
            f"Failed to read Parquet output at {output_path}: {error}."
        ) from error


def describe_output(output_path: Path) -> OutputSummary:
    """Summarize a station Parquet file.

    Args:
        output_path: Parquet file path.

    Returns:
        Row, row group, column, and time range summary.

    Raises:
        DockstatIoError: If the file cannot be read.
    """
    try:
        parquet_file = pq.ParquetFile(str(output_path))
        metadata = parquet_file.metadata
        column_names = tuple(parquet_file.schema_arrow.names)
        time_column = parquet_file.read(columns=[TIME_COLUMN]).column(TIME_COLUMN)
    except (OSError, pa.ArrowException) as error:
        raise DockstatIoError(
            f"Failed to read Parquet output at {output_path}: {error}."
        ) from error
    bounds = pc.min_max(time_column)
    return OutputSummary(
        row_count=metadata.num_rows,
        row_group_count=metadata.num_row_groups,
        column_names=column_names,
        min_time=bounds["min"].as_py(),
        max_time=bounds["max"].as_py(),
    )
