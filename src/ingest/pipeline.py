"""Conversion orchestration for station status snapshots.

This module coordinates discovery, decoding, normalization, batch
building, and Parquet writes for one conversion run. Any failure aborts
the run, removes the partial output, and names the failing file and stage.
"""

from __future__ import annotations

from pathlib import Path

from core.config import validate_profile
from core.constants import BATCH_STRATEGY_SNAPSHOT
from core.errors import DockstatError
from core.logging_config import get_logger
from core.types import ConvertOptions, ConvertResult
from ingest.snapshot_decoder import read_snapshot
from ingest.snapshot_discovery import discover_snapshot_files
from store.batch_builder import StationBatchBuilder
from store.parquet_output import StationParquetWriter
from store.station_interner import StationInterner, read_id_map, write_id_map
from transforms.active_stations import normalize_snapshot

_LOGGER = get_logger(__name__)


class ConvertPipelineRunner:
    """Single-threaded runner owning the interner, builder, and writer."""

    def __init__(self, options: ConvertOptions) -> None:
        self._options = options
        self._profile = validate_profile(options.profile)
        self._stage = "initialize"
        self._source_uri: str | None = None
        self._snapshot_count = 0

    def run(self) -> ConvertResult:
        """Convert every discovered snapshot and return a run summary."""
        try:
            return self._run()
        except DockstatError as error:
            _LOGGER.error(
                "convert_failed",
                stage=self._stage,
                source_uri=self._source_uri,
                error_type=type(error).__name__,
                error=str(error),
            )
            raise _with_context(error, self._stage, self._source_uri) from error

    def _run(self) -> ConvertResult:
        self._stage = "discover"
        snapshot_paths = discover_snapshot_files(
            self._options.input_dir,
            self._options.input_pattern,
            sort_by_name=self._options.sort_snapshots,
        )
        self._stage = "load_id_map"
        interner = self._build_interner()
        builder = StationBatchBuilder(self._profile.include_disabled)
        self._stage = "open_output"
        writer = StationParquetWriter(
            self._options.output_path, builder.schema, self._options.compression
        )
        try:
            for snapshot_path in snapshot_paths:
                self._convert_snapshot(snapshot_path, interner, builder, writer)
            self._source_uri = None
            self._stage = "write"
            if len(builder):
                writer.write(builder.finish())
            self._stage = "close_output"
            output_path = writer.close()
        except BaseException:
            writer.abort()
            raise
        self._stage = "write_id_map"
        self._persist_id_map(interner, output_path)
        result = ConvertResult(
            output_path=output_path,
            id_map_path=self._options.id_map_path,
            snapshot_count=self._snapshot_count,
            row_count=writer.rows_written,
            batch_count=writer.batches_written,
            station_count=len(interner),
        )
        _log_convert_completion(self._options, result)
        return result

    def _build_interner(self) -> StationInterner:
        seed_path = self._options.seed_id_map_path
        if seed_path is None:
            return StationInterner()
        interner = StationInterner.from_mapping(read_id_map(seed_path))
        _LOGGER.info("id_map_seeded", seed_id_map_path=str(seed_path), station_count=len(interner))
        return interner

    def _convert_snapshot(
        self,
        snapshot_path: Path,
        interner: StationInterner,
        builder: StationBatchBuilder,
        writer: StationParquetWriter,
    ) -> None:
        self._source_uri = str(snapshot_path)
        _LOGGER.info("snapshot_processing", source_uri=self._source_uri)
        self._stage = "decode"
        snapshot = read_snapshot(snapshot_path)
        self._stage = "normalize"
        row_count = builder.extend(normalize_snapshot(snapshot, interner, self._profile))
        self._snapshot_count += 1
        _LOGGER.debug(
            "snapshot_normalized",
            source_uri=self._source_uri,
            last_updated=snapshot.last_updated,
            station_count=len(snapshot.stations),
            row_count=row_count,
        )
        if self._profile.batch_strategy == BATCH_STRATEGY_SNAPSHOT and len(builder):
            self._stage = "write"
            writer.write(builder.finish())

    def _persist_id_map(self, interner: StationInterner, output_path: Path) -> None:
        try:
            write_id_map(self._options.id_map_path, interner)
        except DockstatError:
            output_path.unlink(missing_ok=True)
            raise


def convert_snapshots(options: ConvertOptions) -> ConvertResult:
    """Run one conversion from snapshot directory to Parquet.

    Args:
        options: Convert request options.

    Returns:
        Summary of the written artifacts.

    Raises:
        DockstatIoError: If a file cannot be read or written.
        DockstatDecodeError: If a snapshot is malformed.
        DockstatCapacityError: If station codes run out.
        DockstatSchemaError: If a batch does not fit the output schema.
    """
    runner = ConvertPipelineRunner(options)
    return runner.run()


def _with_context(error: DockstatError, stage: str, source_uri: str | None) -> DockstatError:
    """Rebuild an error of the same kind with file and stage context."""
    location = f" while processing {source_uri}" if source_uri else ""
    return type(error)(f"Convert failed at stage '{stage}'{location}: {error}")


def _log_convert_completion(options: ConvertOptions, result: ConvertResult) -> None:
    """Log run completion with contextual metadata."""
    _LOGGER.info(
        "convert_completed",
        input_dir=str(options.input_dir),
        output_path=str(result.output_path),
        id_map_path=str(result.id_map_path),
        snapshot_count=result.snapshot_count,
        row_count=result.row_count,
        batch_count=result.batch_count,
        station_count=result.station_count,
        bikes_derivation=options.profile.bikes_derivation,
        include_disabled=options.profile.include_disabled,
        truncate_to_minute=options.profile.truncate_to_minute,
        batch_strategy=options.profile.batch_strategy,
    )
