# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""JSON backend."""

from __future__ import annotations

import json
from typing import Any

from ..exceptions import DecodeError, EncodeError
from ..node import DataNode
from .base import as_text, plain_data


class JsonBackend:
    """Reads and writes JSON documents with the standard library.

    Object member order is kept on both sides. Numbers are read as
    floats; integral floats are written without a fractional part.
    """

    name = 'json'
    extensions = ('.json',)

    def __init__(self, indent: int | None = 2, sort_keys: bool = False) -> None:
        self.indent = indent
        self.sort_keys = sort_keys

    def __repr__(self) -> str:
        return f"JsonBackend(indent={self.indent!r})"

    def decode(self, data: str | bytes) -> DataNode:
        try:
            text = as_text(data)
            return DataNode.from_python(json.loads(text))
        except (ValueError, TypeError, OverflowError, RecursionError) as exc:
            raise DecodeError(f"Invalid JSON document: {exc}") from exc

    def encode(self, node: DataNode, **options: Any) -> str:
        options.setdefault('indent', self.indent)
        options.setdefault('sort_keys', self.sort_keys)
        options.setdefault('ensure_ascii', False)
        try:
            return json.dumps(plain_data(node), **options)
        except (ValueError, TypeError, RecursionError) as exc:
            raise EncodeError(f"Cannot encode tree as JSON: {exc}") from exc
