"""Public SDK surface for Dockstat.

This module provides a stable import path for library users.
It re-exports the conversion entry point and typed option models.
"""

from __future__ import annotations

from core.config import DockstatConfig, resolve_profile, supported_profiles
from core.errors import (
    DockstatCapacityError,
    DockstatConfigError,
    DockstatDecodeError,
    DockstatError,
    DockstatIoError,
    DockstatSchemaError,
)
from core.types import ConvertOptions, ConvertResult, OutputSummary, PipelineProfile
from ingest.pipeline import convert_snapshots
from store.parquet_output import describe_output, read_station_table

__all__ = [
    "ConvertOptions",
    "ConvertResult",
    "DockstatCapacityError",
    "DockstatConfig",
    "DockstatConfigError",
    "DockstatDecodeError",
    "DockstatError",
    "DockstatIoError",
    "DockstatSchemaError",
    "OutputSummary",
    "PipelineProfile",
    "convert_snapshots",
    "describe_output",
    "read_station_table",
    "resolve_profile",
    "supported_profiles",
]
