# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Scalar coercion for the typed getters.

Strict mode (the default) accepts only a node of the requested kind.
Loose mode also converts between the scalar kinds:

    number  <- boolean (1.0 / 0.0), numeric string
    string  <- number (shortest form, no trailing '.0'), boolean ('true'/'false')
    boolean <- string (true/yes/on/1, false/no/off/0), number (!= 0)

NULL, LIST and OBJECT never coerce. Each function returns a
(found, value) pair so that a falsy value is not mistaken for a miss.
"""

from __future__ import annotations

import math

from ..node import DataNode, NodeKind

_TRUE_WORDS = frozenset({'true', 'yes', 'on', '1'})
_FALSE_WORDS = frozenset({'false', 'no', 'off', '0'})

_MISS = (False, None)


def format_number(value: float) -> str:
    """Render a number the way it would read in a document."""
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


def coerce_number(node: DataNode | None, loose: bool = False) -> tuple[bool, float | None]:
    if node is None:
        return _MISS
    if node.kind is NodeKind.NUMBER:
        return True, node.value
    if not loose:
        return _MISS
    if node.kind is NodeKind.BOOLEAN:
        return True, 1.0 if node.value else 0.0
    if node.kind is NodeKind.STRING:
        try:
            return True, float(node.value.strip())
        except ValueError:
            return _MISS
    return _MISS


def coerce_string(node: DataNode | None, loose: bool = False) -> tuple[bool, str | None]:
    if node is None:
        return _MISS
    if node.kind is NodeKind.STRING:
        return True, node.value
    if not loose:
        return _MISS
    if node.kind is NodeKind.NUMBER:
        return True, format_number(node.value)
    if node.kind is NodeKind.BOOLEAN:
        return True, 'true' if node.value else 'false'
    return _MISS


def coerce_boolean(node: DataNode | None, loose: bool = False) -> tuple[bool, bool | None]:
    if node is None:
        return _MISS
    if node.kind is NodeKind.BOOLEAN:
        return True, node.value
    if not loose:
        return _MISS
    if node.kind is NodeKind.STRING:
        word = node.value.strip().lower()
        if word in _TRUE_WORDS:
            return True, True
        if word in _FALSE_WORDS:
            return True, False
        return _MISS
    if node.kind is NodeKind.NUMBER:
        return True, node.value != 0
    return _MISS
