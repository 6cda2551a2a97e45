"""Strata CLI entry points.
This module exposes the fromjson, tojson, and getschema commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from core.config import StrataConfig
from core.constants import (
    DEFLATE_CODEC,
    MAX_COMPRESSION_LEVEL,
    MIN_COMPRESSION_LEVEL,
    SUPPORTED_CODECS,
)
from core.errors import StrataConfigError, StrataError
from core.types import ConvertOptions
from ingest.pipeline import convert_json_to_avro
from store.avro_reader import read_records, read_schema, to_json_compatible
from store.streams import open_container_stream


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="strata", description="JSON to Avro container tools")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_fromjson_command(subparsers)
    _add_tojson_command(subparsers)
    _add_getschema_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Strata CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = StrataConfig.from_env()
    except StrataConfigError as error:
        parser.error(str(error))
    try:
        if args.command == "fromjson":
            return _run_fromjson_command(parser, config, args)
        if args.command == "tojson":
            return _run_tojson_command(args)
        if args.command == "getschema":
            return _run_getschema_command(args)
    except StrataError as error:
        print(f"strata_error={error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _run_fromjson_command(
    parser: argparse.ArgumentParser,
    config: StrataConfig,
    args: argparse.Namespace,
) -> int:
    """Handle fromjson command.

    Args:
        parser: Parser used to report argument errors.
        config: Runtime configuration supplying defaults.
        args: Parsed CLI args.

    Returns:
        Exit code, 1 when ingestion stopped on unparsable input.
    """
    options = ConvertOptions(
        input_uri=args.input,
        output_uri=args.output,
        schema_source=_resolve_schema_source(parser, args),
        codec=_resolve_codec(args, config),
        compression_level=_resolve_compression_level(parser, args, config),
    )
    result = convert_json_to_avro(options, config)
    if result.aborted:
        print(
            f"strata_error=ingestion stopped at line {result.lines_read}: invalid JSON",
            file=sys.stderr,
        )
        return 1
    return 0


def _run_tojson_command(args: argparse.Namespace) -> int:
    """Handle tojson command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    with open_container_stream(args.container) as stream:
        for record in read_records(stream):
            print(json.dumps(to_json_compatible(record)))
    return 0


def _run_getschema_command(args: argparse.Namespace) -> int:
    """Handle getschema command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    with open_container_stream(args.container) as stream:
        print(json.dumps(read_schema(stream)))
    return 0


def _resolve_schema_source(parser: argparse.ArgumentParser, args: argparse.Namespace) -> str:
    if args.schema is not None:
        return args.schema
    schema_path = Path(args.schema_file).expanduser()
    if not schema_path.is_file():
        parser.error(f"Schema file {schema_path} does not exist.")
    return str(schema_path)


def _resolve_codec(args: argparse.Namespace, config: StrataConfig) -> str:
    if args.codec is not None:
        return args.codec
    if args.level is not None:
        return DEFLATE_CODEC
    return config.codec


def _resolve_compression_level(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: StrataConfig,
) -> int:
    if args.level is None:
        return config.compression_level
    if not MIN_COMPRESSION_LEVEL <= args.level <= MAX_COMPRESSION_LEVEL:
        parser.error(
            f"--level must be between {MIN_COMPRESSION_LEVEL} and "
            f"{MAX_COMPRESSION_LEVEL}, got {args.level}"
        )
    return args.level


def _add_fromjson_command(subparsers: Any) -> None:
    """Register fromjson subcommand."""
    parser = subparsers.add_parser(
        "fromjson",
        help="Convert newline-delimited JSON text into an Avro container",
    )
    parser.add_argument("input", help="JSON text file, or '-' for stdin")
    parser.add_argument("output", help="Container file to write, or '-' for stdout")
    schema_group = parser.add_mutually_exclusive_group(required=True)
    schema_group.add_argument("--schema", help="Inline schema JSON, type name, or schema file path")
    schema_group.add_argument("--schema-file", help="Schema file path")
    parser.add_argument("--codec", choices=SUPPORTED_CODECS, help="Block compression codec")
    parser.add_argument(
        "--level",
        type=int,
        help=(
            f"Deflate compression level {MIN_COMPRESSION_LEVEL}-{MAX_COMPRESSION_LEVEL}; "
            "selects deflate when --codec is omitted"
        ),
    )


def _add_tojson_command(subparsers: Any) -> None:
    """Register tojson subcommand."""
    parser = subparsers.add_parser("tojson", help="Dump container records as JSON lines")
    parser.add_argument("container", help="Container file, or '-' for stdin")


def _add_getschema_command(subparsers: Any) -> None:
    """Register getschema subcommand."""
    parser = subparsers.add_parser("getschema", help="Print the schema stored in a container")
    parser.add_argument("container", help="Container file, or '-' for stdin")
