# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typed mapping between directive trees and records."""

from confetti.mapping.converters import (
    ConverterRegistry,
    EnumConverter,
    ValueConverter,
    default_registry,
    register_converter,
)
from confetti.mapping.fields import Setting
from confetti.mapping.mapper import Mappable, Mapper, from_text, map_from, map_to, to_text

__all__ = [
    "ConverterRegistry",
    "EnumConverter",
    "Mappable",
    "Mapper",
    "Setting",
    "ValueConverter",
    "default_registry",
    "from_text",
    "map_from",
    "map_to",
    "register_converter",
    "to_text",
]
