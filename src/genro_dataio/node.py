# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""DataNode - the tagged value every DataIO tree is made of."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Iterator


class NodeKind(Enum):
    """The six shapes a DataNode can take."""

    NULL = 'null'
    NUMBER = 'number'
    STRING = 'string'
    BOOLEAN = 'boolean'
    LIST = 'list'
    OBJECT = 'object'

    @property
    def is_container(self) -> bool:
        return self in (NodeKind.LIST, NodeKind.OBJECT)


_SCALAR_TYPES = {
    NodeKind.NUMBER: float,
    NodeKind.STRING: str,
    NodeKind.BOOLEAN: bool,
}


class DataNode:
    """A node in a DataIO tree.

    Each node has:
    - kind: One of NodeKind
    - value: The scalar payload (None for NULL), or the children for
      LIST (list of DataNode) and OBJECT (dict of str -> DataNode)

    A node owns its children; there are no parent references, so a tree
    is acyclic by construction. The public surface is read-only: trees
    are mutated through DataStore, which keeps the shape rules (a List
    or Object never silently turns into a scalar).

    Example:
        >>> node = DataNode.from_python({'name': 'arm', 'joints': [1, 2]})
        >>> node.kind
        <NodeKind.OBJECT: 'object'>
        >>> node.child('joints').kind
        <NodeKind.LIST: 'list'>
    """

    __slots__ = ('_kind', '_value')

    def __init__(self, kind: NodeKind = NodeKind.NULL, value: Any = None) -> None:
        """Initialize a DataNode.

        Args:
            kind: The node kind. Defaults to NULL.
            value: Scalar payload for NUMBER, STRING and BOOLEAN. Must be
                omitted for NULL, LIST and OBJECT (containers start empty).

        Raises:
            TypeError: If value does not match kind.
        """
        self._kind = kind
        self._value = _checked_payload(kind, value)

    # ==================== Constructors ====================

    @classmethod
    def null(cls) -> DataNode:
        return cls(NodeKind.NULL)

    @classmethod
    def number(cls, value: float) -> DataNode:
        return cls(NodeKind.NUMBER, value)

    @classmethod
    def string(cls, value: str) -> DataNode:
        return cls(NodeKind.STRING, value)

    @classmethod
    def boolean(cls, value: bool) -> DataNode:
        return cls(NodeKind.BOOLEAN, value)

    @classmethod
    def new_list(cls) -> DataNode:
        return cls(NodeKind.LIST)

    @classmethod
    def new_object(cls) -> DataNode:
        return cls(NodeKind.OBJECT)

    @classmethod
    def from_python(cls, value: Any) -> DataNode:
        """Build a tree from plain Python data.

        dict -> OBJECT, list/tuple -> LIST, bool -> BOOLEAN, int/float ->
        NUMBER, str -> STRING, None -> NULL. Mapping keys are converted
        with str().

        Raises:
            TypeError: If value (or any nested value) has another type.
            OverflowError: If an int is too large to store as a float.
            RecursionError: If value contains itself.
        """
        # bool first: it is a subclass of int
        if isinstance(value, bool):
            return cls(NodeKind.BOOLEAN, value)
        if value is None:
            return cls(NodeKind.NULL)
        if isinstance(value, (int, float)):
            return cls(NodeKind.NUMBER, float(value))
        if isinstance(value, str):
            return cls(NodeKind.STRING, value)
        if isinstance(value, dict):
            node = cls(NodeKind.OBJECT)
            for key, item in value.items():
                node._value[str(key)] = cls.from_python(item)
            return node
        if isinstance(value, (list, tuple)):
            node = cls(NodeKind.LIST)
            node._value.extend(cls.from_python(item) for item in value)
            return node
        raise TypeError(f"Cannot store {type(value).__name__} in a DataNode")

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        if self._kind is NodeKind.LIST:
            return f"DataNode(list, {len(self._value)} items)"
        if self._kind is NodeKind.OBJECT:
            return f"DataNode(object, {list(self._value)})"
        if self._kind is NodeKind.NULL:
            return "DataNode(null)"
        return f"DataNode({self._kind.value}, {self._value!r})"

    def __eq__(self, other: object) -> bool:
        """Structural equality: same kinds, key sets, list order and scalars."""
        if not isinstance(other, DataNode):
            return NotImplemented
        if self._kind is not other._kind:
            return False
        if self._kind is NodeKind.NUMBER and math.isnan(self._value):
            return math.isnan(other._value)
        return self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        """Number of children (0 for scalars and NULL)."""
        if self._kind.is_container:
            return len(self._value)
        return 0

    def __iter__(self) -> Iterator[DataNode]:
        """Iterate over child nodes (list order, or object insertion order)."""
        if self._kind is NodeKind.LIST:
            return iter(list(self._value))
        if self._kind is NodeKind.OBJECT:
            return iter(list(self._value.values()))
        return iter(())

    # ==================== Read API ====================

    @property
    def kind(self) -> NodeKind:
        return self._kind

    @property
    def is_null(self) -> bool:
        return self._kind is NodeKind.NULL

    @property
    def is_container(self) -> bool:
        """True for LIST and OBJECT nodes."""
        return self._kind.is_container

    @property
    def is_scalar(self) -> bool:
        """True for NUMBER, STRING and BOOLEAN nodes."""
        return self._kind in _SCALAR_TYPES

    @property
    def value(self) -> Any:
        """The scalar payload (None for NULL).

        Raises:
            TypeError: For LIST and OBJECT nodes; use child() or to_python().
        """
        if self._kind.is_container:
            raise TypeError(f"{self._kind.value} node has no scalar value")
        return self._value

    def keys(self) -> list[str]:
        """Object member names in insertion order ([] for other kinds)."""
        if self._kind is NodeKind.OBJECT:
            return list(self._value)
        return []

    def items(self) -> list[tuple[str, DataNode]]:
        """Object (name, node) pairs in insertion order ([] for other kinds)."""
        if self._kind is NodeKind.OBJECT:
            return list(self._value.items())
        return []

    def child(self, key: str | int) -> DataNode | None:
        """Direct child by member name (OBJECT) or index (LIST), or None."""
        if self._kind is NodeKind.OBJECT and isinstance(key, str):
            return self._value.get(key)
        if (
            self._kind is NodeKind.LIST
            and isinstance(key, int)
            and not isinstance(key, bool)
            and 0 <= key < len(self._value)
        ):
            return self._value[key]
        return None

    def copy(self) -> DataNode:
        """Deep copy of this node and everything below it."""
        if self._kind is NodeKind.LIST:
            node = DataNode(NodeKind.LIST)
            node._value.extend(item.copy() for item in self._value)
            return node
        if self._kind is NodeKind.OBJECT:
            node = DataNode(NodeKind.OBJECT)
            for key, item in self._value.items():
                node._value[key] = item.copy()
            return node
        return DataNode(self._kind, self._value)

    def to_python(self) -> Any:
        """Convert to plain Python data (dict, list, float, str, bool, None)."""
        if self._kind is NodeKind.LIST:
            return [item.to_python() for item in self._value]
        if self._kind is NodeKind.OBJECT:
            return {key: item.to_python() for key, item in self._value.items()}
        return self._value

    # ==================== Mutation (DataStore only) ====================

    def _assign(self, kind: NodeKind, value: Any = None) -> None:
        """Turn this node into a scalar/NULL or an empty container in place."""
        self._value = _checked_payload(kind, value)
        self._kind = kind

    def _adopt(self, other: DataNode) -> None:
        """Take over kind and payload of other (a freshly copied node)."""
        self._kind = other._kind
        self._value = other._value

    def _member(self, key: str) -> DataNode:
        """Get or create (as NULL) an Object member."""
        node = self._value.get(key)
        if node is None:
            node = DataNode()
            self._value[key] = node
        return node

    def _element(self, index: int) -> DataNode:
        """Get a List element, padding with NULL elements up to index."""
        while len(self._value) <= index:
            self._value.append(DataNode())
        return self._value[index]

    def _append(self) -> DataNode:
        """Append a NULL element to a List and return it."""
        node = DataNode()
        self._value.append(node)
        return node

    def _remove(self, key: str | int) -> bool:
        """Remove an Object member or List element. False if absent."""
        if self._kind is NodeKind.OBJECT and isinstance(key, str):
            return self._value.pop(key, None) is not None
        if self._kind is NodeKind.LIST and isinstance(key, int) and 0 <= key < len(self._value):
            del self._value[key]
            return True
        return False


def _checked_payload(kind: NodeKind, value: Any) -> Any:
    if kind is NodeKind.LIST:
        if value is not None:
            raise TypeError("List nodes start empty")
        return []
    if kind is NodeKind.OBJECT:
        if value is not None:
            raise TypeError("Object nodes start empty")
        return {}
    if kind is NodeKind.NULL:
        if value is not None:
            raise TypeError("Null nodes carry no value")
        return None
    if kind is NodeKind.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"number node needs int or float, not {type(value).__name__}")
        return float(value)
    expected = _SCALAR_TYPES[kind]
    if not isinstance(value, expected):
        raise TypeError(
            f"{kind.value} node needs {expected.__name__}, not {type(value).__name__}"
        )
    return value
