"""Scoped stream opening for CLI and SDK paths.

This module opens filesystem paths, or the standard streams when given
the ``-`` marker. Standard streams are flushed but never closed.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, TextIO

from core.constants import DEFAULT_INPUT_ENCODING, STREAM_MARKER
from core.errors import StrataIngestError, StrataStoreError


@contextmanager
def open_input_stream(uri: str, encoding: str = DEFAULT_INPUT_ENCODING) -> Iterator[TextIO]:
    """Open JSON text input for line iteration.

    Args:
        uri: Input file path, or ``-`` for stdin.
        encoding: Text encoding for file input.

    Yields:
        Readable text stream.

    Raises:
        StrataIngestError: If the input file cannot be opened.
    """
    if uri == STREAM_MARKER:
        yield sys.stdin
        return
    input_path = Path(uri).expanduser()
    if not input_path.is_file():
        raise StrataIngestError(
            f"Failed to read input at {input_path}: file does not exist. "
            "Provide an existing JSON text file or '-' for stdin."
        )
    try:
        stream = input_path.open("r", encoding=encoding)
    except OSError as error:
        raise StrataIngestError(f"Failed to open input {input_path}: {error}.") from error
    with stream:
        yield stream


@contextmanager
def open_output_stream(uri: str) -> Iterator[BinaryIO]:
    """Open a binary container destination.

    Args:
        uri: Output file path, or ``-`` for stdout.

    Yields:
        Writable binary stream.

    Raises:
        StrataStoreError: If the output file cannot be created.
    """
    if uri == STREAM_MARKER:
        stdout = sys.stdout.buffer
        try:
            yield stdout
        finally:
            stdout.flush()
        return
    output_path = Path(uri).expanduser()
    try:
        stream = output_path.open("wb")
    except OSError as error:
        raise StrataStoreError(
            f"Failed to create output {output_path}: {error}. "
            "Check that the parent directory exists and is writable."
        ) from error
    with stream:
        yield stream


@contextmanager
def open_container_stream(uri: str) -> Iterator[BinaryIO]:
    """Open an existing container for reading.

    Args:
        uri: Container file path, or ``-`` for stdin.

    Yields:
        Readable binary stream.

    Raises:
        StrataStoreError: If the container file cannot be opened.
    """
    if uri == STREAM_MARKER:
        yield sys.stdin.buffer
        return
    container_path = Path(uri).expanduser()
    if not container_path.is_file():
        raise StrataStoreError(
            f"Failed to read container at {container_path}: file does not exist."
        )
    with container_path.open("rb") as stream:
        yield stream
