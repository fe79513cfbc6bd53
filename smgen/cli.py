"""Command-line interface for smgen."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from smgen import base64_vlq
from smgen.config import load_generator_config
from smgen.errors import CLIError, Diagnostic, SourceMapError, format_diagnostic
from smgen.identity import identity_map_for_file
from smgen.serialization import source_map_to_json, write_source_map
from smgen.url_util import compute_source_url, join, relative


def build_parser() -> argparse.ArgumentParser:
    """Build argparse command tree for the smgen CLI."""
    parser = argparse.ArgumentParser(prog="smgen", description="Source Map v3 generation tools")
    parser.add_argument("--verbose", action="store_true", help="Emit debug logging to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    identity_parser = subparsers.add_parser("identity", help="Map every token of a file onto itself")
    identity_parser.add_argument("input", help="Input source file")
    identity_parser.add_argument("--file", help="Value of the map's 'file' field")
    identity_parser.add_argument("--source-root", help="Value of the map's 'sourceRoot' field")
    identity_parser.add_argument("--names", action="store_true", help="Record identifiers as names")
    identity_parser.add_argument("--no-content", action="store_true", help="Omit sourcesContent")
    identity_parser.add_argument("-o", "--output", help="Output file path")
    identity_parser.add_argument("--indent", type=int, help="Pretty-print JSON with this indent")

    vlq_parser = subparsers.add_parser("vlq", help="Base64 VLQ encoding")
    vlq_sub = vlq_parser.add_subparsers(dest="vlq_command", required=True)
    encode_parser = vlq_sub.add_parser("encode", help="Encode integers as one VLQ segment")
    encode_parser.add_argument("values", nargs="+", type=int, help="Signed integers")
    decode_parser = vlq_sub.add_parser("decode", help="Decode one VLQ segment to integers")
    decode_parser.add_argument("segment", help="Base64 VLQ segment")

    url_parser = subparsers.add_parser("url", help="Source URL algebra")
    url_sub = url_parser.add_subparsers(dest="url_command", required=True)
    join_parser = url_sub.add_parser("join", help="Join a path onto a root directory")
    join_parser.add_argument("root")
    join_parser.add_argument("path")
    relative_parser = url_sub.add_parser("relative", help="Make a target relative to a root")
    relative_parser.add_argument("root")
    relative_parser.add_argument("target")
    source_parser = url_sub.add_parser("source", help="Resolve a sources entry to its URL")
    source_parser.add_argument("source", help="Entry of the map's 'sources' array")
    source_parser.add_argument("--root", help="The map's sourceRoot")
    source_parser.add_argument("--map", dest="map_url", help="URL of the source map itself")

    return parser


def run(argv: list[str] | None = None) -> int:
    """Run CLI and return shell exit code."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(message)s",
            stream=sys.stderr,
        )

    try:
        if args.command == "identity":
            input_path = Path(args.input)
            if not input_path.is_file():
                raise CLIError(
                    code="CLI002",
                    message=f"Input file not found: {input_path}",
                    hint="Check the path and file permissions.",
                )
            overrides = {
                key: value
                for key, value in (("file", args.file), ("source_root", args.source_root))
                if value is not None
            }
            config = load_generator_config(overrides)
            generator = identity_map_for_file(
                input_path,
                file=config.file,
                source_root=config.source_root,
                skip_validation=config.skip_validation,
                include_names=args.names,
                include_content=not args.no_content,
            )
            if args.output:
                write_source_map(generator, args.output, indent=args.indent)
            else:
                print(source_map_to_json(generator, indent=args.indent))
            return 0

        if args.command == "vlq":
            if args.vlq_command == "encode":
                print(base64_vlq.encode_segment(args.values))
            else:
                print(json.dumps(base64_vlq.decode(args.segment)))
            return 0

        if args.command == "url":
            if args.url_command == "join":
                print(join(args.root, args.path))
            elif args.url_command == "relative":
                print(relative(args.root, args.target))
            else:
                print(compute_source_url(args.root, args.source, args.map_url))
            return 0

        raise argparse.ArgumentTypeError(f"Unsupported command '{args.command}'.")

    except SourceMapError as err:
        print(format_diagnostic(err.to_diagnostic()), file=sys.stderr)
        return 1
    except argparse.ArgumentTypeError as err:
        diag = Diagnostic(code="CLI001", message=str(err), hint="Run smgen --help for usage.")
        print(format_diagnostic(diag), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(run())
