"""Avro container writer.

This module wraps fastavro's block writer behind the append/flush/close
contract the ingestion loop uses. It owns codec selection, block sizing,
and the schema and codec metadata written to the container header.
"""

from __future__ import annotations

from types import TracebackType
from typing import BinaryIO

from fastavro.validation import ValidationError
from fastavro.write import Writer

from core.config import validate_codec, validate_compression_level
from core.constants import (
    DEFAULT_CODEC,
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_SYNC_INTERVAL,
    DEFLATE_CODEC,
)
from core.errors import StrataStoreError
from schemas.schema_loader import LoadedSchema


class AvroRecordWriter:
    """Append-only writer for one Avro container stream."""

    def __init__(
        self,
        stream: BinaryIO,
        schema: LoadedSchema,
        codec: str = DEFAULT_CODEC,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
        sync_interval: int = DEFAULT_SYNC_INTERVAL,
    ) -> None:
        """Create a writer over an open binary stream.

        Args:
            stream: Destination stream, owned by the caller.
            schema: Loaded writer schema.
            codec: Block codec name, ``null`` or ``deflate``.
            compression_level: Deflate level in [1, 9], ignored for ``null``.
            sync_interval: Approximate uncompressed bytes per block.

        Raises:
            StrataConfigError: If codec or level is invalid.
        """
        codec = validate_codec(codec)
        level = validate_compression_level(compression_level) if codec == DEFLATE_CODEC else None
        self._writer = Writer(
            stream,
            schema.parsed,
            codec=codec,
            sync_interval=sync_interval,
            validator=True,
            compression_level=level,
        )
        self._record_count = 0
        self._closed = False

    @property
    def record_count(self) -> int:
        """Number of records appended so far."""
        return self._record_count

    def append(self, record: object) -> None:
        """Append one materialized record.

        Raises:
            StrataStoreError: If the writer is closed or the record does not
                satisfy the schema, such as a missing required field.
        """
        if self._closed:
            raise StrataStoreError("Cannot append to a closed container writer.")
        try:
            self._writer.write(record)
        except (ValidationError, ValueError, TypeError) as error:
            raise StrataStoreError(
                f"Failed to write record {self._record_count + 1}: {error}. "
                "Make sure every required field is present in the input."
            ) from error
        self._record_count += 1

    def flush(self) -> None:
        """Write the header if needed and any buffered block."""
        if not self._closed:
            self._writer.flush()

    def close(self) -> None:
        """Flush remaining records; the underlying stream stays open."""
        if self._closed:
            return
        self._writer.flush()
        self._closed = True

    def __enter__(self) -> "AvroRecordWriter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
