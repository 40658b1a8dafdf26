# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization of directive trees to Confetti text."""

from confetti.writer.serializer import render_argument, serialize

__all__ = ["render_argument", "serialize"]
