"""Core constants used across Strata modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

STREAM_MARKER = "-"
NULL_CODEC = "null"
DEFLATE_CODEC = "deflate"
SUPPORTED_CODECS = (NULL_CODEC, DEFLATE_CODEC)
DEFAULT_CODEC = NULL_CODEC
DEFAULT_COMPRESSION_LEVEL = 1
MIN_COMPRESSION_LEVEL = 1
MAX_COMPRESSION_LEVEL = 9
DEFAULT_SYNC_INTERVAL = 16000
DEFAULT_INPUT_ENCODING = "utf-8"
CODEC_METADATA_KEY = "avro.codec"
SCHEMA_METADATA_KEY = "avro.schema"
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
