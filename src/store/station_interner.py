"""Station identifier interning and id map persistence.

This module assigns dense uint16 codes to station identifiers in
first-seen order and persists the final map as a JSON side artifact.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Mapping

from core.constants import MAX_STATION_CODE, TEMP_FILE_SUFFIX
from core.errors import DockstatCapacityError, DockstatDecodeError, DockstatIoError


class StationInterner:
    """Run-scoped station identifier to code map.

    Codes start at 1 and are never reused; 0 stays unassigned.
    """

    def __init__(self) -> None:
        self._codes: dict[str, int] = {}
        self._last_code = 0

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, int]) -> "StationInterner":
        """Seed an interner from a prior run's id map.

        Args:
            mapping: Station identifier to code pairs.

        Returns:
            Interner continuing after the highest seeded code.

        Raises:
            DockstatDecodeError: If codes are out of range or duplicated.
        """
        interner = cls()
        seen_codes: set[int] = set()
        for station_id, code in mapping.items():
            if isinstance(code, bool) or not isinstance(code, int):
                raise DockstatDecodeError(
                    f"Invalid id map entry for station '{station_id}': code must be an integer."
                )
            if not 1 <= code <= MAX_STATION_CODE:
                raise DockstatDecodeError(
                    f"Invalid id map entry for station '{station_id}': code {code} "
                    f"is outside 1..{MAX_STATION_CODE}."
                )
            if code in seen_codes:
                raise DockstatDecodeError(
                    f"Invalid id map: code {code} is assigned to more than one station."
                )
            seen_codes.add(code)
            interner._codes[str(station_id)] = code
        interner._last_code = max(seen_codes, default=0)
        return interner

    def intern(self, station_id: str) -> int:
        """Return the code for a station, assigning the next one if new.

        Args:
            station_id: Opaque station identifier.

        Returns:
            Stable station code for this run.

        Raises:
            DockstatCapacityError: If every uint16 code is already taken.
        """
        code = self._codes.get(station_id)
        if code is not None:
            return code
        if self._last_code >= MAX_STATION_CODE:
            raise DockstatCapacityError(
                f"Cannot assign a code to station '{station_id}': all {MAX_STATION_CODE} "
                "station codes are in use."
            )
        self._last_code += 1
        self._codes[station_id] = self._last_code
        return self._last_code

    def mapping(self) -> dict[str, int]:
        """Return a copy of the identifier to code map."""
        return dict(self._codes)

    def __len__(self) -> int:
        return len(self._codes)


def write_id_map(id_map_path: Path, interner: StationInterner) -> None:
    """Persist the interner's map as JSON via temp file and replace.

    Args:
        id_map_path: Destination JSON path.
        interner: Interner holding the final map.

    Raises:
        DockstatIoError: If the file cannot be written.
    """
    temp_path = id_map_path.with_name(id_map_path.name + TEMP_FILE_SUFFIX)
    payload = json.dumps(interner.mapping(), indent=2, sort_keys=True) + "\n"
    try:
        id_map_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(payload, encoding="utf-8")
        os.replace(temp_path, id_map_path)
    except OSError as error:
        temp_path.unlink(missing_ok=True)
        raise DockstatIoError(
            f"Failed to write id map at {id_map_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error


def read_id_map(id_map_path: Path) -> dict[str, int]:
    """Load an id map artifact written by a prior run.

    Args:
        id_map_path: JSON id map path.

    Returns:
        Station identifier to code pairs.

    Raises:
        DockstatIoError: If the file is missing or unreadable.
        DockstatDecodeError: If the file is not a JSON object.
    """
    try:
        raw_text = id_map_path.read_text(encoding="utf-8")
    except OSError as error:
        raise DockstatIoError(
            f"Failed to read id map at {id_map_path}: {error}. "
            "Provide an id map written by a previous convert run."
        ) from error
    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError as error:
        raise DockstatDecodeError(
            f"Failed to parse id map at {id_map_path}: {error.msg}. "
            "Regenerate the id map or run without a seed map."
        ) from error
    if not isinstance(payload, dict):
        raise DockstatDecodeError(
            f"Failed to parse id map at {id_map_path}: expected a JSON object at top level."
        )
    return payload
