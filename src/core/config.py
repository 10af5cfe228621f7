"""Runtime configuration model for Dockstat.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    BATCH_STRATEGY_RUN,
    BATCH_STRATEGY_SNAPSHOT,
    BIKES_DERIVATION_STANDARD,
    BIKES_DERIVATION_TOTAL,
    DEFAULT_COMPRESSION,
    DEFAULT_ID_MAP_PATH,
    DEFAULT_INPUT_DIR,
    DEFAULT_INPUT_PATTERN,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_PROFILE,
    PROFILE_ENRICHED,
    PROFILE_PER_SNAPSHOT,
    SUPPORTED_BATCH_STRATEGIES,
    SUPPORTED_BIKES_DERIVATIONS,
    SUPPORTED_COMPRESSIONS,
)
from core.errors import DockstatConfigError
from core.types import ConvertOptions, PipelineProfile

_PROFILES = {
    PROFILE_ENRICHED: PipelineProfile(
        bikes_derivation=BIKES_DERIVATION_STANDARD,
        include_disabled=True,
        truncate_to_minute=True,
        batch_strategy=BATCH_STRATEGY_RUN,
    ),
    PROFILE_PER_SNAPSHOT: PipelineProfile(
        bikes_derivation=BIKES_DERIVATION_TOTAL,
        include_disabled=False,
        truncate_to_minute=False,
        batch_strategy=BATCH_STRATEGY_SNAPSHOT,
    ),
}

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class DockstatConfig:
    """Validated runtime configuration.

    Attributes:
        input_dir: Directory scanned for snapshot files.
        input_pattern: Glob pattern matched inside ``input_dir``.
        output_path: Parquet output path.
        id_map_path: JSON id map output path.
        profile_name: Name of the conversion profile preset.
        compression: Parquet compression codec.
        sort_snapshots: Process snapshots in file-name order.
        seed_id_map_path: Optional prior id map to extend.
    """

    input_dir: Path
    input_pattern: str
    output_path: Path
    id_map_path: Path
    profile_name: str
    compression: str
    sort_snapshots: bool
    seed_id_map_path: Path | None

    @classmethod
    def from_env(cls) -> "DockstatConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            DockstatConfigError: If environment values are invalid.
        """
        profile_name = os.getenv("DOCKSTAT_PROFILE", DEFAULT_PROFILE)
        resolve_profile(profile_name)
        compression = _parse_compression(os.getenv("DOCKSTAT_COMPRESSION", DEFAULT_COMPRESSION))
        sort_snapshots = _parse_bool(
            "DOCKSTAT_SORT_SNAPSHOTS", os.getenv("DOCKSTAT_SORT_SNAPSHOTS", "true")
        )
        seed_value = os.getenv("DOCKSTAT_SEED_ID_MAP")
        return cls(
            input_dir=_resolve_path(os.getenv("DOCKSTAT_INPUT_DIR", str(DEFAULT_INPUT_DIR))),
            input_pattern=os.getenv("DOCKSTAT_INPUT_PATTERN", DEFAULT_INPUT_PATTERN),
            output_path=_resolve_path(os.getenv("DOCKSTAT_OUTPUT_PATH", str(DEFAULT_OUTPUT_PATH))),
            id_map_path=_resolve_path(os.getenv("DOCKSTAT_ID_MAP_PATH", str(DEFAULT_ID_MAP_PATH))),
            profile_name=profile_name,
            compression=compression,
            sort_snapshots=sort_snapshots,
            seed_id_map_path=_resolve_path(seed_value) if seed_value else None,
        )

    def convert_options(self) -> ConvertOptions:
        """Build convert options from this config."""
        return ConvertOptions(
            input_dir=self.input_dir,
            output_path=self.output_path,
            id_map_path=self.id_map_path,
            profile=resolve_profile(self.profile_name),
            input_pattern=self.input_pattern,
            compression=self.compression,
            sort_snapshots=self.sort_snapshots,
            seed_id_map_path=self.seed_id_map_path,
        )


def resolve_profile(profile_name: str) -> PipelineProfile:
    """Look up a conversion profile preset by name.

    Args:
        profile_name: Preset name.

    Returns:
        Profile switches for the preset.

    Raises:
        DockstatConfigError: If the preset is unknown.
    """
    profile = _PROFILES.get(profile_name)
    if profile is None:
        raise DockstatConfigError(
            f"Invalid profile '{profile_name}': expected one of {supported_profiles()}. "
            "Set DOCKSTAT_PROFILE or --profile to a supported preset."
        )
    return profile


def supported_profiles() -> tuple[str, ...]:
    """Return names of the built-in profile presets."""
    return tuple(sorted(_PROFILES))


def _resolve_path(raw_value: str) -> Path:
    return Path(raw_value).expanduser().resolve()


def _parse_compression(raw_value: str) -> str:
    """Validate a Parquet compression codec name.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Lowercased codec name.

    Raises:
        DockstatConfigError: If codec is unsupported.
    """
    codec = raw_value.strip().lower()
    if codec not in SUPPORTED_COMPRESSIONS:
        raise DockstatConfigError(
            f"Invalid DOCKSTAT_COMPRESSION value: got '{raw_value}', "
            f"expected one of {SUPPORTED_COMPRESSIONS}."
        )
    return codec


def _parse_bool(name: str, raw_value: str) -> bool:
    """Parse a boolean environment value.

    Args:
        name: Variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed flag.

    Raises:
        DockstatConfigError: If value is not a recognized boolean.
    """
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise DockstatConfigError(
        f"Invalid {name} value: expected true/false, got '{raw_value}'. "
        f"Set {name} to one of {_TRUE_VALUES + _FALSE_VALUES}."
    )


def validate_profile(profile: PipelineProfile) -> PipelineProfile:
    """Check profile switches before a run starts.

    Args:
        profile: Profile to validate.

    Returns:
        The same profile.

    Raises:
        DockstatConfigError: If a switch holds an unsupported value.
    """
    if profile.bikes_derivation not in SUPPORTED_BIKES_DERIVATIONS:
        raise DockstatConfigError(
            f"Invalid bikes derivation '{profile.bikes_derivation}': "
            f"expected one of {SUPPORTED_BIKES_DERIVATIONS}."
        )
    if profile.batch_strategy not in SUPPORTED_BATCH_STRATEGIES:
        raise DockstatConfigError(
            f"Invalid batch strategy '{profile.batch_strategy}': "
            f"expected one of {SUPPORTED_BATCH_STRATEGIES}."
        )
    return profile
