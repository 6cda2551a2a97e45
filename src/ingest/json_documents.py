"""Splitting text lines into JSON documents.

This module decodes every JSON document on one line of input, so that
whitespace-separated documents such as ``[] [] []`` are all consumed.
Only strict JSON is accepted: ``NaN`` and ``Infinity`` literals and
non-JSON whitespace between documents are decode errors.
"""

from __future__ import annotations

import json
import re
from typing import Iterator

_WHITESPACE = re.compile(r"[ \t\n\r]*")


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not a valid JSON value")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def iter_json_documents(line: str) -> Iterator[object]:
    """Decode successive JSON documents from one line.

    Args:
        line: One line of input text.

    Yields:
        Parsed JSON values in line order. Blank lines yield nothing.

    Raises:
        json.JSONDecodeError: When the remaining text is not valid JSON.
    """
    position = _skip_whitespace(line, 0)
    while position < len(line):
        document, end = _decode_document(line, position)
        yield document
        position = _skip_whitespace(line, end)


def _decode_document(line: str, position: int) -> tuple[object, int]:
    try:
        return _DECODER.raw_decode(line, position)
    except json.JSONDecodeError:
        raise
    except ValueError as error:
        raise json.JSONDecodeError(str(error), line, position) from error


def _skip_whitespace(text: str, position: int) -> int:
    match = _WHITESPACE.match(text, position)
    return match.end() if match else position
