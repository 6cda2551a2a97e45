"""Strata exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class StrataError(Exception):
    """Base exception for all Strata failures."""


class StrataConfigError(StrataError):
    """Raised for invalid runtime configuration."""


class StrataSchemaError(StrataError):
    """Raised for unparsable schemas or unusable root shapes."""


class StrataMaterializeError(StrataError):
    """Raised when a value cannot be materialized at all."""


class StrataIngestError(StrataError):
    """Raised for unreadable input sources."""


class StrataStoreError(StrataError):
    """Raised for container write and read failures."""
