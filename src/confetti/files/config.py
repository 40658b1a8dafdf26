# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""YAML files holding MapperOptions, used by the command line tool.

Keys use the hyphenated aliases of the option models::

    naming: kebab-case
    indent: "    "
    parser-options:
      allow-c-style-comments: true
      punctuators: ["="]
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from confetti.errors import ConfettiError
from confetti.model.options import MapperOptions

# ###############
# Public Interface
# ###############

OPTIONS_FILE_NAME = ".confetti.yaml"


class OptionsFileError(ConfettiError):
    """Raised when an options file cannot be read, written, or is invalid."""


def load_options(path: Path) -> MapperOptions:
    """Load and validate an options file.

    An empty file yields the default options.

    Raises:
        OptionsFileError: If the file cannot be read, contains invalid YAML,
            or does not conform to the option schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise OptionsFileError(f"Cannot read options file '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise OptionsFileError(f"Invalid YAML in options file '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise OptionsFileError(f"Invalid options file '{path}': expected a mapping at the top level")

    try:
        return MapperOptions.model_validate(data)
    except ValidationError as exc:
        raise OptionsFileError(f"Invalid options file '{path}': {exc}") from exc


def save_options(options: MapperOptions, path: Path) -> None:
    """Write *options* to *path* as YAML with hyphenated keys.

    Raises:
        OptionsFileError: If the file cannot be written.
    """
    data = options.model_dump(by_alias=True, mode="json")
    data["parser-options"]["punctuators"] = sorted(data["parser-options"]["punctuators"])
    try:
        path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=True), encoding="utf-8")
    except OSError as exc:
        raise OptionsFileError(f"Cannot write options file '{path}': {exc}") from exc


def find_options_file(start: Path) -> Path | None:
    """Return the nearest options file in *start* or its parents, or None."""
    directory = start if start.is_dir() else start.parent
    for candidate in (directory, *directory.parents):
        path = candidate / OPTIONS_FILE_NAME
        if path.is_file():
            return path
    return None
