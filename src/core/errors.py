"""Dockstat exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class DockstatError(Exception):
    """Base exception for all Dockstat failures."""


class DockstatConfigError(DockstatError):
    """Raised for invalid runtime configuration."""


class DockstatDecodeError(DockstatError):
    """Raised for malformed gzip streams or snapshot documents."""


class DockstatIoError(DockstatError):
    """Raised when a file cannot be opened, read, written, or renamed."""


class DockstatCapacityError(DockstatError):
    """Raised when the station code space is exhausted."""


class DockstatSchemaError(DockstatError):
    """Raised when a batch or value does not fit the output schema."""
