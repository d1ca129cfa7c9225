import argparse
import logging
import os

import uvicorn

from export_lens.config import DEFAULT_HOST, DEFAULT_PORT
from export_lens.services.export_analysis import (
    ExportAnalyzer,
    UnsupportedFileError,
    collect_object_patterns,
    describe_property,
)


def _load_program(analyzer: ExportAnalyzer, path: str):
    target_path = os.path.abspath(path)
    if not os.path.isfile(target_path):
        raise SystemExit(f"File does not exist: {target_path}")
    try:
        return analyzer.parse_file(target_path)
    except UnsupportedFileError as e:
        raise SystemExit(str(e))


def _check(args: argparse.Namespace) -> int:
    analyzer = ExportAnalyzer()
    program = _load_program(analyzer, args.file)
    matches = analyzer.find_named_exports(program, args.name)

    if not matches:
        print(f"❌ '{args.name}' is not a named export of {args.file}")
        return 1

    for match in matches:
        print(f"✅ '{args.name}' exported as {match.form} (lines {match.start_line}-{match.end_line})")
    return 0


def _strip(args: argparse.Namespace) -> int:
    analyzer = ExportAnalyzer()
    program = _load_program(analyzer, args.file)
    removed = analyzer.remove_export_properties(program, args.names)

    print(f"🧹 Removed {removed} destructured propert{'y' if removed == 1 else 'ies'}")
    for statement in program.body:
        if statement.type != "ExportNamedDeclaration":
            continue
        for pattern in collect_object_patterns(statement):
            names = ", ".join(describe_property(p) for p in pattern.properties)
            print(f"   line {pattern.start_line}: {{ {names} }}")
    return 0


def _serve(args: argparse.Namespace) -> int:
    url = f"http://{args.host}:{args.port}"
    print(f"🚀 Starting server at {url}")
    print("   Press Ctrl+C to stop.")

    uvicorn.run(
        "export_lens.main:app",
        host=args.host,
        port=args.port,
        reload=False,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the CLI.

    - `check FILE NAME` reports whether FILE has a named export for NAME.
    - `strip FILE NAME...` drops destructured export properties and prints
      what is left (the file on disk is not modified).
    - `serve` starts the FastAPI server.
    """
    parser = argparse.ArgumentParser(
        prog="export-lens",
        description="Locate and rewrite named exports in JavaScript/TypeScript modules.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Check whether a module exports a name.")
    check.add_argument("file", help="Path to the module.")
    check.add_argument("name", help="Exported name to look for.")
    check.set_defaults(handler=_check)

    strip = subparsers.add_parser("strip", help="Remove destructured export properties.")
    strip.add_argument("file", help="Path to the module.")
    strip.add_argument("names", nargs="+", help="Local names to remove.")
    strip.set_defaults(handler=_strip)

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Host interface to bind the server to (default: {DEFAULT_HOST}).",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to run the server on (default: {DEFAULT_PORT}).",
    )
    serve.set_defaults(handler=_serve)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
