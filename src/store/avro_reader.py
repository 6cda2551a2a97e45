"""Avro container reader.

This module reads records, schemas, and header metadata back from
containers written by the writer, for dump tools and round-trip checks.
"""

from __future__ import annotations

import json
from typing import Any, BinaryIO, Iterator

import fastavro

from core.constants import CODEC_METADATA_KEY, NULL_CODEC, SCHEMA_METADATA_KEY
from core.errors import StrataStoreError
from core.types import ContainerSummary


def read_records(stream: BinaryIO) -> Iterator[object]:
    """Iterate records stored in a container.

    Args:
        stream: Readable binary container stream.

    Yields:
        Decoded records in file order.

    Raises:
        StrataStoreError: If the stream is not a valid container.
    """
    container_reader = _open_reader(stream)
    try:
        yield from container_reader
    except (ValueError, EOFError) as error:
        raise StrataStoreError(f"Failed to decode container block: {error}.") from error


def read_schema(stream: BinaryIO) -> object:
    """Return the writer schema stored in a container header.

    Raises:
        StrataStoreError: If the stream is not a valid container.
    """
    container_reader = _open_reader(stream)
    return _header_schema(container_reader.metadata)


def read_container_summary(stream: BinaryIO) -> ContainerSummary:
    """Describe a container: schema, codec, record count, metadata.

    Args:
        stream: Readable binary container stream.

    Returns:
        Container summary.

    Raises:
        StrataStoreError: If the stream is not a valid container.
    """
    container_reader = _open_reader(stream)
    metadata = dict(container_reader.metadata)
    try:
        record_count = sum(1 for _ in container_reader)
    except (ValueError, EOFError) as error:
        raise StrataStoreError(f"Failed to decode container block: {error}.") from error
    return ContainerSummary(
        schema=_header_schema(metadata),
        codec=metadata.get(CODEC_METADATA_KEY, NULL_CODEC),
        record_count=record_count,
        metadata=metadata,
    )


def to_json_compatible(value: object) -> Any:
    """Convert a decoded datum into a value ``json.dumps`` accepts.

    Bytes are rendered as ISO-8859-1 text, one character per byte.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("iso-8859-1")
    if isinstance(value, dict):
        return {str(key): to_json_compatible(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_compatible(item) for item in value]
    return value


def _open_reader(stream: BinaryIO) -> Any:
    try:
        return fastavro.reader(stream)
    except (ValueError, EOFError) as error:
        raise StrataStoreError(
            f"Failed to read container header: {error}. "
            "Make sure the input is an Avro container file."
        ) from error


def _header_schema(metadata: dict[str, str]) -> object:
    schema_text = metadata.get(SCHEMA_METADATA_KEY)
    if schema_text is None:
        raise StrataStoreError("Container header has no schema entry.")
    return json.loads(schema_text)
