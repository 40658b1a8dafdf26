# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reading and writing Confetti files.

All functions read and write UTF-8. Operating-system failures surface as
:class:`~confetti.errors.IoError`; syntax and mapping failures keep their own
error types.
"""

import logging
from pathlib import Path
from typing import Any, TypeVar

from confetti.errors import IoError
from confetti.mapping.converters import ConverterRegistry
from confetti.mapping.mapper import from_text, to_text
from confetti.model.directives import DirectiveTree
from confetti.model.options import MapperOptions, ParserOptions
from confetti.parser.parser import parse
from confetti.writer.serializer import serialize

logger = logging.getLogger(__name__)

R = TypeVar("R")

# ###############
# Public Interface
# ###############


def read_text(path: Path) -> str:
    """Return the content of *path*, raising IoError on failure."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise IoError(Path(path), exc) from exc


def write_text(path: Path, text: str) -> None:
    """Write *text* to *path*, raising IoError on failure."""
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError as exc:
        raise IoError(Path(path), exc) from exc
    logger.debug("Wrote %d character(s) to %s", len(text), path)


def parse_file(path: Path, options: ParserOptions | None = None) -> DirectiveTree:
    """Parse the Confetti file at *path* into a DirectiveTree."""
    logger.debug("Parsing %s", path)
    return parse(read_text(path), options)


def dump_tree(tree: DirectiveTree, path: Path, options: MapperOptions | None = None) -> None:
    """Serialize *tree* and write it to *path*."""
    write_text(path, serialize(tree, options))


def load(
    path: Path,
    record_type: type[R],
    options: MapperOptions | None = None,
    registry: ConverterRegistry | None = None,
) -> R:
    """Read *path* and map its directive named after *record_type*."""
    logger.debug("Loading %s from %s", record_type.__name__, path)
    return from_text(read_text(path), record_type, options, registry)


def save(
    record: Any,
    path: Path,
    options: MapperOptions | None = None,
    registry: ConverterRegistry | None = None,
) -> None:
    """Render *record* as Confetti text and write it to *path*."""
    write_text(path, to_text(record, options, registry))
