"""Core constants used across Dockstat modules.

This module centralizes file names, column names, and limits.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_INPUT_DIR = Path("station_status")
DEFAULT_INPUT_PATTERN = "*.json.gz"
DEFAULT_OUTPUT_PATH = Path("data.parquet")
DEFAULT_ID_MAP_PATH = Path("id_map.json")
DEFAULT_COMPRESSION = "snappy"
SUPPORTED_COMPRESSIONS = ("none", "snappy", "gzip", "brotli", "zstd", "lz4")
TEMP_FILE_SUFFIX = ".tmp"

ACTIVE_STATION_STATUS = "active"
UINT16_MAX = 65535
MAX_STATION_CODE = UINT16_MAX
MILLIS_PER_SECOND = 1000
SECONDS_PER_MINUTE = 60

STATION_CODE_COLUMN = "station_code"
BIKES_AVAILABLE_COLUMN = "num_bikes_available"
EBIKES_AVAILABLE_COLUMN = "num_ebikes_available"
BIKES_DISABLED_COLUMN = "num_bikes_disabled"
DOCKS_AVAILABLE_COLUMN = "num_docks_available"
TIME_COLUMN = "time"

BIKES_DERIVATION_STANDARD = "standard"
BIKES_DERIVATION_TOTAL = "total"
SUPPORTED_BIKES_DERIVATIONS = (BIKES_DERIVATION_STANDARD, BIKES_DERIVATION_TOTAL)
BATCH_STRATEGY_RUN = "run"
BATCH_STRATEGY_SNAPSHOT = "snapshot"
SUPPORTED_BATCH_STRATEGIES = (BATCH_STRATEGY_RUN, BATCH_STRATEGY_SNAPSHOT)
PROFILE_ENRICHED = "enriched"
PROFILE_PER_SNAPSHOT = "per_snapshot"
DEFAULT_PROFILE = PROFILE_ENRICHED
