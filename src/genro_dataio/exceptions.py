# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""DataIO exceptions."""

from __future__ import annotations


class DataIOError(Exception):
    """Base exception for DataIO errors."""

    pass


class MalformedPathError(DataIOError, ValueError):
    """Raised when a path format and its arguments disagree.

    Covers placeholder/argument count mismatches, arguments of the wrong
    kind, negative indexes, empty segments and over-long paths.
    """

    pass


class NodeNotFoundError(DataIOError, KeyError):
    """Raised when a read-mode resolution cannot locate a node."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ''


class TypeConflictError(DataIOError, TypeError):
    """Raised when a write meets an existing node of incompatible shape.

    Attributes:
        path: Rendered path of the conflicting node.
        found: Kind of the node already occupying the slot.
    """

    def __init__(self, message: str, path: str = '', found: object = None) -> None:
        super().__init__(message)
        self.path = path
        self.found = found


class PaddingLimitError(DataIOError, IndexError):
    """Raised when a write would pad a list with too many null elements.

    Attributes:
        path: Rendered path of the list being padded.
        padding: Number of null elements the write would add.
    """

    def __init__(self, message: str, path: str = '', padding: int = 0) -> None:
        super().__init__(message)
        self.path = path
        self.padding = padding


class DecodeError(DataIOError, ValueError):
    """Raised by a backend when a document cannot be turned into a tree."""

    pass


class EncodeError(DataIOError, ValueError):
    """Raised by a backend when a tree cannot be serialized."""

    pass


class StorageError(DataIOError, OSError):
    """Raised when a storage entry cannot be located or fetched."""

    pass
