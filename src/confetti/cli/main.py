# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the Confetti command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from confetti.errors import ConfettiError, IoError, SourceError
from confetti.files.config import OPTIONS_FILE_NAME, OptionsFileError, find_options_file, load_options
from confetti.files.io import read_text, write_text
from confetti.model.options import MapperOptions
from confetti.parser.parser import parse
from confetti.writer.serializer import serialize

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the Confetti CLI."""
    parser = argparse.ArgumentParser(
        prog="confetti",
        description="Confetti configuration language tool",
    )
    parser.add_argument(
        "--options",
        metavar="PATH",
        help=f"YAML options file (default: nearest {OPTIONS_FILE_NAME} from the current directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check configuration files for syntax errors",
        description="Parse each file and report lexical and syntax errors.",
    )
    check_parser.add_argument("files", nargs="+", metavar="FILE", help="Files to check")

    # fmt subcommand
    fmt_parser = subparsers.add_parser(
        "fmt",
        help="Format configuration files",
        description="Re-serialize each file in canonical layout. Prints to stdout unless --write or --check is given.",
    )
    fmt_parser.add_argument("files", nargs="+", metavar="FILE", help="Files to format")
    mode = fmt_parser.add_mutually_exclusive_group()
    mode.add_argument("--write", action="store_true", help="Rewrite files in place")
    mode.add_argument("--check", action="store_true", help="Exit with code 1 if any file is not formatted")
    fmt_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        metavar="N",
        help="Indent nested blocks by N spaces (default: from options, 2)",
    )
    fmt_parser.add_argument(
        "--drop-comments",
        action="store_true",
        help="Allow --write to rewrite files that contain comments, which are not kept",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    try:
        options = _resolve_options(args)
    except OptionsFileError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.command == "check":
        return _cmd_check(args, options)
    if args.command == "fmt":
        return _cmd_fmt(args, options)
    return 0


def _resolve_options(args: argparse.Namespace) -> MapperOptions:
    """Load options from --options, the nearest options file, or the defaults."""
    if args.options is not None:
        return load_options(Path(args.options))
    found = find_options_file(Path.cwd())
    if found is None:
        return MapperOptions()
    logger.debug("Using options file %s", found)
    return load_options(found)


def _report(path: str, exc: ConfettiError) -> None:
    if isinstance(exc, SourceError):
        print(f"{path}:{exc.line}:{exc.column}: {exc.message}", file=sys.stderr)
    else:
        print(f"Error: {exc}", file=sys.stderr)


def _cmd_check(args: argparse.Namespace, options: MapperOptions) -> int:
    """Handle the check subcommand."""
    failed = 0
    for path in args.files:
        try:
            parse(read_text(Path(path)), options.parser_options)
        except (SourceError, IoError) as exc:
            _report(path, exc)
            failed += 1

    if failed:
        print(f"{failed} of {len(args.files)} file(s) failed.", file=sys.stderr)
        return 1

    print(f"Checked {len(args.files)} file(s), no issues found.")
    return 0


def _cmd_fmt(args: argparse.Namespace, options: MapperOptions) -> int:
    """Handle the fmt subcommand."""
    if args.indent is not None:
        if args.indent < 0:
            print("Error: --indent must not be negative.", file=sys.stderr)
            return 1
        options = options.model_copy(update={"indent": " " * args.indent})

    status = 0
    for path in args.files:
        try:
            source = read_text(Path(path))
            tree = parse(source, options.parser_options)
            formatted = serialize(tree, options)
        except ConfettiError as exc:
            _report(path, exc)
            status = 1
            continue

        if args.check:
            if formatted != source:
                print(f"Would reformat: {path}")
                status = 1
        elif args.write:
            if formatted == source:
                continue
            if tree.comments and not args.drop_comments:
                print(
                    f"Error: '{path}' contains comments, which formatting would drop. Pass --drop-comments to proceed.",
                    file=sys.stderr,
                )
                status = 1
                continue
            try:
                write_text(Path(path), formatted)
            except IoError as exc:
                _report(path, exc)
                status = 1
                continue
            print(f"Reformatted: {path}")
        else:
            sys.stdout.write(formatted)
    return status
