"""Runtime configuration model for Strata.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass

from core.constants import (
    DEFAULT_CODEC,
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_INPUT_ENCODING,
    DEFAULT_SYNC_INTERVAL,
    MAX_COMPRESSION_LEVEL,
    MIN_COMPRESSION_LEVEL,
    SUPPORTED_CODECS,
)
from core.errors import StrataConfigError


@dataclass(frozen=True)
class StrataConfig:
    """Validated runtime configuration.

    Attributes:
        codec: Default container block codec name.
        compression_level: Default deflate compression level in [1, 9].
        sync_interval: Approximate uncompressed bytes per container block.
        input_encoding: Text encoding used to decode JSON input lines.
    """

    codec: str
    compression_level: int
    sync_interval: int
    input_encoding: str

    @classmethod
    def from_env(cls) -> "StrataConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            StrataConfigError: If environment values are invalid.
        """
        codec = os.getenv("STRATA_CODEC", DEFAULT_CODEC)
        level_value = os.getenv("STRATA_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL))
        sync_value = os.getenv("STRATA_SYNC_INTERVAL", str(DEFAULT_SYNC_INTERVAL))
        input_encoding = os.getenv("STRATA_INPUT_ENCODING", DEFAULT_INPUT_ENCODING)
        return cls(
            codec=validate_codec(codec),
            compression_level=validate_compression_level(
                _parse_int("STRATA_COMPRESSION_LEVEL", level_value)
            ),
            sync_interval=_parse_sync_interval(sync_value),
            input_encoding=_validate_encoding(input_encoding),
        )


def validate_codec(codec: str) -> str:
    """Validate a container codec name.

    Args:
        codec: Codec name to check.

    Returns:
        The codec name unchanged.

    Raises:
        StrataConfigError: If codec is not supported.
    """
    if codec not in SUPPORTED_CODECS:
        raise StrataConfigError(
            f"Unsupported codec '{codec}'. "
            f"Choose one of: {', '.join(SUPPORTED_CODECS)}."
        )
    return codec


def validate_compression_level(level: int) -> int:
    """Validate a deflate compression level.

    Args:
        level: Requested compression level.

    Returns:
        The level unchanged.

    Raises:
        StrataConfigError: If level is outside the supported range.
    """
    if not MIN_COMPRESSION_LEVEL <= level <= MAX_COMPRESSION_LEVEL:
        raise StrataConfigError(
            f"Invalid compression level {level}: expected an integer between "
            f"{MIN_COMPRESSION_LEVEL} and {MAX_COMPRESSION_LEVEL}."
        )
    return level


def _parse_int(variable_name: str, raw_value: str) -> int:
    """Parse an integer environment value.

    Raises:
        StrataConfigError: If value cannot be parsed into int.
    """
    try:
        return int(raw_value)
    except ValueError as error:
        raise StrataConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a numeric value."
        ) from error


def _parse_sync_interval(raw_value: str) -> int:
    sync_interval = _parse_int("STRATA_SYNC_INTERVAL", raw_value)
    if sync_interval <= 0:
        raise StrataConfigError(
            f"Invalid STRATA_SYNC_INTERVAL value: expected a positive integer, got {sync_interval}."
        )
    return sync_interval


def _validate_encoding(encoding: str) -> str:
    try:
        codecs.lookup(encoding)
    except LookupError as error:
        raise StrataConfigError(
            f"Invalid STRATA_INPUT_ENCODING value: unknown encoding '{encoding}'."
        ) from error
    return encoding
