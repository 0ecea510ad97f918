from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import BinaryIO, TextIO

from . import __version__
from .config import SortConfig
from .engine.errors import ConfigError, MalformedInputError
from .engine.runner import tsort

EXIT_OK = 0
EXIT_LOOP = 1
EXIT_USAGE = 2
EXIT_MALFORMED_INPUT = 3
EXIT_IO_ERROR = 4
EXIT_CONFIG_ERROR = 5


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsort",
        description=(
            "Write totally ordered list consistent with the partial ordering in FILE. "
            "With no FILE, or when FILE is -, read standard input."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Input of whitespace-separated token pairs (default: standard input).",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=("lines", "json"),
        default="lines",
        help="Output one key per line (default) or a JSON report.",
    )
    parser.add_argument(
        "-q",
        "--quiet-loops",
        dest="quiet_loops",
        action="store_true",
        help="Do not print loop diagnostics (the exit status still reports them).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on standard error.",
    )
    return parser


def _configure_logging(verbose: bool, stream: TextIO) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=stream,
    )


def _run(
    args: argparse.Namespace,
    *,
    config: SortConfig,
    stdin: BinaryIO,
    stdout: BinaryIO,
    stderr: TextIO,
) -> int:
    prog = config.program_name
    path = args.files[0] if args.files else "-"

    try:
        source = stdin if path == "-" else open(path, "rb")
    except OSError as e:
        print(f"{prog}: {path}: {e.strerror or e}", file=stderr)
        return EXIT_IO_ERROR

    try:
        if args.output_format == "json":
            from .models.report import SortReport

            result = tsort(source, None, stderr, config=config)
            payload = SortReport.from_result(result).model_dump_json(indent=2)
            stdout.write(payload.encode("utf-8") + b"\n")
            stdout.flush()
        else:
            result = tsort(source, stdout, stderr, config=config)
    except MalformedInputError as e:
        print(f"{prog}: {path}: {e}", file=stderr)
        return EXIT_MALFORMED_INPUT
    except OSError as e:
        print(f"{prog}: {path}: {e.strerror or e}", file=stderr)
        return EXIT_IO_ERROR
    finally:
        if source is not stdin:
            source.close()

    return EXIT_OK if result.ok else EXIT_LOOP


def main(
    argv: list[str] | None = None,
    *,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if len(args.files) > 1:
        parser.error(f"extra operand {args.files[1]!r}")

    err = stderr if stderr is not None else sys.stderr
    _configure_logging(bool(args.verbose), err)

    try:
        config = SortConfig.from_env()
    except ConfigError as e:
        print(f"tsort: {e}", file=err)
        return EXIT_CONFIG_ERROR
    if args.quiet_loops:
        config = replace(config, report_loops=False)

    try:
        return _run(
            args,
            config=config,
            stdin=stdin if stdin is not None else sys.stdin.buffer,
            stdout=stdout if stdout is not None else sys.stdout.buffer,
            stderr=err,
        )
    except KeyboardInterrupt:
        print("Interrupted.", file=err)
        return 130
