# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""File input and output for configuration documents and options."""

from confetti.files.config import OPTIONS_FILE_NAME, OptionsFileError, find_options_file, load_options, save_options
from confetti.files.io import dump_tree, load, parse_file, read_text, save, write_text

__all__ = [
    "OPTIONS_FILE_NAME",
    "OptionsFileError",
    "dump_tree",
    "find_options_file",
    "load",
    "load_options",
    "parse_file",
    "read_text",
    "save",
    "save_options",
    "write_text",
]
