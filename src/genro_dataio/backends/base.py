# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Backend protocol and registry.

A backend is the Decoder/Encoder pair for one document format. Any class
with the attributes below satisfies the protocol; no inheritance needed::

    class TomlBackend:
        name = 'toml'
        extensions = ('.toml',)

        def decode(self, data: str | bytes) -> DataNode: ...
        def encode(self, node: DataNode, **options) -> str: ...

    register_backend(TomlBackend())

Backends must raise DecodeError / EncodeError, and for every tree built
through DataStore, decode(encode(tree)) must equal the tree.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Any, Protocol, runtime_checkable

from ..node import DataNode, NodeKind


@runtime_checkable
class Backend(Protocol):
    """Structural protocol for document backends."""

    name: str
    extensions: tuple[str, ...]

    def decode(self, data: str | bytes) -> DataNode: ...

    def encode(self, node: DataNode, **options) -> str: ...


_BACKENDS: dict[str, Backend] = {}
_BY_EXTENSION: dict[str, Backend] = {}


def register_backend(backend: Backend) -> Backend:
    """Register a backend under its name and file extensions.

    A later registration with the same name or extension replaces the
    earlier one.

    Raises:
        TypeError: If backend does not satisfy the Backend protocol.
    """
    if not isinstance(backend, Backend):
        raise TypeError(f"{type(backend).__name__} does not implement the Backend protocol")
    _BACKENDS[backend.name.lower()] = backend
    for extension in backend.extensions:
        _BY_EXTENSION[extension.lower()] = backend
    return backend


def get_backend(name: str | Backend) -> Backend:
    """Look up a backend by name or extension ('json', '.yaml').

    A Backend instance is returned unchanged.

    Raises:
        KeyError: If nothing is registered under that name.
    """
    if not isinstance(name, str):
        return name
    key = name.lower()
    backend = _BACKENDS.get(key) or _BY_EXTENSION.get(key) or _BY_EXTENSION.get(f'.{key}')
    if backend is None:
        raise KeyError(f"No backend registered for {name!r} (available: {available_backends()})")
    return backend


def backend_for_path(path: str | PurePath) -> Backend | None:
    """Backend matching a file name's extension, or None."""
    return _BY_EXTENSION.get(PurePath(path).suffix.lower())


def available_backends() -> list[str]:
    """Registered backend names in registration order."""
    return list(_BACKENDS)


def registered_extensions() -> list[str]:
    """Registered extensions in registration order."""
    return list(_BY_EXTENSION)


def as_text(data: str | bytes) -> str:
    """Decode bytes input as UTF-8 (a leading BOM is dropped)."""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode('utf-8-sig')
    return data


def plain_data(node: DataNode) -> Any:
    """Like DataNode.to_python, but integral numbers come out as ints."""
    if node.kind is NodeKind.LIST:
        return [plain_data(item) for item in node]
    if node.kind is NodeKind.OBJECT:
        return {key: plain_data(item) for key, item in node.items()}
    value = node.value
    if node.kind is NodeKind.NUMBER and value.is_integer():
        return int(value)
    return value
