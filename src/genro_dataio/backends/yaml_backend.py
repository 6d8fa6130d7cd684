# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""YAML backend (PyYAML)."""

from __future__ import annotations

from typing import Any

import yaml

from ..exceptions import DecodeError, EncodeError
from ..node import DataNode
from .base import as_text, plain_data


class YamlBackend:
    """Reads and writes YAML documents through yaml.safe_load / safe_dump.

    Only the JSON-compatible subset is accepted: timestamps, sets and
    other YAML-specific types fail to decode. An empty document decodes
    to NULL.
    """

    name = 'yaml'
    extensions = ('.yaml', '.yml')

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def __repr__(self) -> str:
        return f"YamlBackend(indent={self.indent!r})"

    def decode(self, data: str | bytes) -> DataNode:
        try:
            return DataNode.from_python(yaml.safe_load(as_text(data)))
        except (yaml.YAMLError, ValueError, TypeError, OverflowError, RecursionError) as exc:
            raise DecodeError(f"Invalid YAML document: {exc}") from exc

    def encode(self, node: DataNode, **options: Any) -> str:
        options.setdefault('indent', self.indent)
        options.setdefault('default_flow_style', False)
        options.setdefault('sort_keys', False)
        options.setdefault('allow_unicode', True)
        try:
            return yaml.safe_dump(plain_data(node), **options)
        except yaml.YAMLError as exc:
            raise EncodeError(f"Cannot encode tree as YAML: {exc}") from exc
