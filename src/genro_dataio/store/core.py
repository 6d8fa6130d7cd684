# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""DataStore - typed, path-addressed access to a DataNode tree.

This module provides the DataStore class, the handle application code uses
to read and write hierarchical data regardless of the document format it
came from. A DataStore wraps one node of a tree: the root handle owns the
tree, and the handles returned by get_sub_data(), add_list() and
add_level() address nodes inside it.

Key Features:
    - **Path addressing**: printf-style formats ('robots.%d.%s') filled from
      positional arguments, or plain key sequences (('robots', 0, 'name'))
    - **Safe reads**: typed getters fall back to the caller's default and
      never raise for missing or mistyped data
    - **Creating writes**: setters build missing levels, pad lists with
      nulls and append on a None key
    - **Atomic conflicts**: a write blocked by an existing node of another
      shape returns False (or raises TypeConflictError) and changes nothing
    - **Format-neutral**: load_string_data()/get_data_string() delegate to a
      registered backend (json, yaml)

Example:
    Basic usage::

        store = DataStore()
        store.set_string_value('robot.name', 'arm')
        joints = store.add_list('robot.joints')
        for limit in (90, 120):
            joint = joints.add_level()
            joint.set_numeric_value('limit', limit)

        store.get_numeric_value(0.0, 'robot.joints.%d.limit', 1)   # 120.0
        store.get_string_value('none', 'robot.%s', 'missing')       # 'none'
        store.get_list_size('robot.joints')                         # 2

    Documents::

        store = DataStore.load_string_data('{"axes": [1, 2]}')
        store.get_data_string('yaml')
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Union

from ..backends import get_backend
from ..backends.base import Backend
from ..config import DEFAULT_CONFIG, DataIOConfig
from ..exceptions import MalformedPathError, PaddingLimitError, TypeConflictError
from ..node import DataNode, NodeKind
from ..path import IndexKey, LiteralKey, PathSpec, Step, StringKey, compile_key, compile_path
from .coercion import coerce_boolean, coerce_number, coerce_string
from .navigator import ensure_node, find_node, parent_and_last, resolve

logger = logging.getLogger(__name__)

_SCALAR_SLOTS = (NodeKind.NUMBER, NodeKind.STRING, NodeKind.BOOLEAN)
_REJECTED_WRITES = (TypeConflictError, PaddingLimitError)

Key = Union[PathSpec, int]


class DataStore:
    """Handle to a node of a hierarchical data tree.

    DataStore provides:
    - get_numeric_value / get_string_value / get_boolean_value: typed reads
      with default fallback
    - get_sub_data / get_list_size / has_key: structural reads
    - set_numeric_value / set_string_value / set_boolean_value /
      set_null_value: scalar writes returning True/False
    - add_list / add_level: container creation returning sub-handles
    - load_string_data / get_data_string: backend round trip

    Reads never create anything. Sub-handles share the tree of the handle
    they come from; use copy() for an independent snapshot.

    Attributes:
        config: The DataIOConfig in effect (inherited by sub-handles).

    Example:
        >>> store = DataStore({'motor': {'gain': 2.5}})
        >>> store.get_numeric_value(1.0, 'motor.gain')
        2.5
        >>> store.get_numeric_value(1.0, 'motor.%s', 'offset')
        1.0
    """

    __slots__ = ('_node', '_config')

    def __init__(
        self,
        source: Any = None,
        config: DataIOConfig | None = None,
    ) -> None:
        """Initialize a DataStore.

        Args:
            source: Optional initial data. Can be:
                - None: an empty Object (the usual starting point)
                - DataStore or DataNode: deep-copied
                - dict, list or scalar: converted with DataNode.from_python
            config: Bounds and defaults. Defaults to DEFAULT_CONFIG.

        Raises:
            TypeError: If source holds values that cannot be stored.

        Example:
            >>> DataStore()
            >>> DataStore({'a': 1, 'b': [True, None]})
            >>> DataStore(other_store)  # copy
        """
        self._config = config or DEFAULT_CONFIG
        self._node = self._load_source(source)

    @staticmethod
    def _load_source(source: Any) -> DataNode:
        if source is None:
            return DataNode.new_object()
        if isinstance(source, DataStore):
            return source._node.copy()
        if isinstance(source, DataNode):
            return source.copy()
        return DataNode.from_python(source)

    @classmethod
    def _wrap(cls, node: DataNode, config: DataIOConfig) -> DataStore:
        """Create a handle on an existing node without copying it."""
        store = cls.__new__(cls)
        store._node = node
        store._config = config
        return store

    # ==================== Documents ====================

    @classmethod
    def load_string_data(
        cls,
        data: str | bytes,
        backend: str | Backend | None = None,
        config: DataIOConfig | None = None,
    ) -> DataStore:
        """Parse a document into a new tree.

        Args:
            data: Document text (bytes are read as UTF-8).
            backend: Backend name/extension or instance. Defaults to
                config.default_backend.
            config: Config for the new store.

        Raises:
            DecodeError: If the backend cannot parse the document.
            KeyError: If no such backend is registered.
        """
        config = config or DEFAULT_CONFIG
        codec = get_backend(backend or config.default_backend)
        node = codec.decode(data)
        logger.debug("Loaded %s document into a %s root", codec.name, node.kind.value)
        return cls._wrap(node, config)

    def get_data_string(self, backend: str | Backend | None = None, **options: Any) -> str:
        """Serialize the tree below this handle.

        Args:
            backend: Backend name/extension or instance. Defaults to
                config.default_backend.
            **options: Passed to the backend encoder (e.g. indent=None).

        Raises:
            EncodeError: If the backend cannot serialize the tree.
        """
        codec = get_backend(backend or self._config.default_backend)
        options.setdefault('indent', self._config.indent)
        return codec.encode(self._node, **options)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"DataStore({self._node!r})"

    def __len__(self) -> int:
        """Number of children of this handle's node."""
        return len(self._node)

    def __eq__(self, other: object) -> bool:
        """Structural equality with another DataStore or a DataNode."""
        if isinstance(other, DataStore):
            return self._node == other._node
        if isinstance(other, DataNode):
            return self._node == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __contains__(self, path: PathSpec) -> bool:
        """Check if a path exists (no placeholder arguments)."""
        return self.has_key(path)

    def __getitem__(self, path: PathSpec) -> Any:
        """Get the plain Python value at a path.

        Raises:
            NodeNotFoundError: If the path does not exist (a KeyError).

        Example:
            >>> store['robot.joints.0']
            >>> store[('robot', 'joints', 0)]
        """
        return resolve(self._node, self._steps(path, ())).to_python()

    # ==================== Properties ====================

    @property
    def node(self) -> DataNode:
        """The DataNode this handle addresses."""
        return self._node

    @property
    def kind(self) -> NodeKind:
        return self._node.kind

    @property
    def config(self) -> DataIOConfig:
        return self._config

    # ==================== Path Utilities ====================

    def _steps(self, path_format: PathSpec, args: tuple) -> tuple[Step, ...]:
        return compile_path(path_format, *args, max_length=self._config.max_path_length)

    def _find(self, path_format: PathSpec, args: tuple) -> DataNode | None:
        return find_node(self._node, self._steps(path_format, args))

    def _slot(self, key: Key, args: tuple, terminal: tuple[NodeKind, ...]) -> DataNode:
        """Write-mode resolution of a setter key.

        Raises TypeConflictError or PaddingLimitError without touching the tree.
        """
        steps = compile_key(key, *args, max_length=self._config.max_path_length)
        return ensure_node(self._node, steps, terminal, self._config.max_list_padding)

    # ==================== Typed Reads ====================

    def _get_scalar(
        self,
        coerce: Callable[[DataNode | None, bool], tuple[bool, Any]],
        default: Any,
        path_format: PathSpec,
        args: tuple,
        loose: bool | None,
    ) -> Any:
        if loose is None:
            loose = self._config.loose_coercion
        found, value = coerce(self._find(path_format, args), loose)
        if not found:
            return default
        return value

    def get_numeric_value(
        self, default: float, path_format: PathSpec = '', *args: Any, coerce: bool | None = None
    ) -> float:
        """Get a number, or default if absent or not a number.

        Args:
            default: Value returned when the path does not hold a number.
            path_format: Path format (see genro_dataio.path).
            *args: Placeholder values.
            coerce: Allow loose conversion from strings and booleans.
                Defaults to config.loose_coercion.

        Raises:
            MalformedPathError: If the path format and args disagree.
        """
        return self._get_scalar(coerce_number, default, path_format, args, coerce)

    def get_string_value(
        self, default: str, path_format: PathSpec = '', *args: Any, coerce: bool | None = None
    ) -> str:
        """Get a string, or default if absent or not a string."""
        return self._get_scalar(coerce_string, default, path_format, args, coerce)

    def get_boolean_value(
        self, default: bool, path_format: PathSpec = '', *args: Any, coerce: bool | None = None
    ) -> bool:
        """Get a boolean, or default if absent or not a boolean."""
        return self._get_scalar(coerce_boolean, default, path_format, args, coerce)

    # ==================== Structural Reads ====================

    def get_sub_data(self, path_format: PathSpec = '', *args: Any) -> DataStore | None:
        """Get a handle on the node at path, or None if it does not exist.

        The handle shares the tree: writes through it are visible here.
        """
        node = self._find(path_format, args)
        if node is None:
            return None
        return self._wrap(node, self._config)

    def get_list_size(self, path_format: PathSpec = '', *args: Any) -> int:
        """Number of elements of the list at path (0 if absent or not a list)."""
        node = self._find(path_format, args)
        if node is None or node.kind is not NodeKind.LIST:
            return 0
        return len(node)

    def has_key(self, path_format: PathSpec, *args: Any) -> bool:
        """True if path exists. A key holding null counts as present."""
        return self._find(path_format, args) is not None

    def keys(self, path_format: PathSpec = '', *args: Any) -> list[str]:
        """Member names of the object at path ([] if absent or not an object)."""
        node = self._find(path_format, args)
        return node.keys() if node is not None else []

    # ==================== Containers ====================

    def _add_container(self, kind: NodeKind, key: Key, args: tuple) -> DataStore:
        try:
            slot = self._slot(key, args, (kind,))
        except _REJECTED_WRITES as exc:
            logger.debug("add_%s rejected: %s", 'list' if kind is NodeKind.LIST else 'level', exc)
            raise
        if slot.is_null:
            slot._assign(kind)
        return self._wrap(slot, self._config)

    def add_list(self, key: Key = None, *args: Any) -> DataStore:
        """Create (or reuse) a list at key and return a handle on it.

        Args:
            key: Path format of the slot, a list index, or None to append
                a new element to this handle's list.
            *args: Placeholder values for key.

        Returns:
            Handle on the list. An existing list is returned as is.

        Raises:
            TypeConflictError: If the slot, or a level on the way, already
                holds a value of another shape. Nothing is modified.
            PaddingLimitError: If an index lies more than
                config.max_list_padding elements past the end of a list.
            MalformedPathError: If key and args disagree.

        Example:
            >>> axes = store.add_list('axes')
            >>> axes.add_list()          # appends an empty list
            >>> axes.get_list_size()
            1
        """
        return self._add_container(NodeKind.LIST, key, args)

    def add_level(self, key: Key = None, *args: Any) -> DataStore:
        """Create (or reuse) an object at key and return a handle on it.

        Same rules as add_list(), with an object instead of a list.
        """
        return self._add_container(NodeKind.OBJECT, key, args)

    # ==================== Scalar Writes ====================

    def _set_scalar(self, key: Key, args: tuple, kind: NodeKind, value: Any) -> bool:
        try:
            slot = self._slot(key, args, _SCALAR_SLOTS)
        except _REJECTED_WRITES as exc:
            logger.debug("%s write rejected: %s", kind.value, exc)
            return False
        slot._assign(kind, value)
        return True

    def set_numeric_value(self, key: Key, value: float, *args: Any) -> bool:
        """Set a number at key, creating missing levels.

        Args:
            key: Path format of the slot, a list index, or None to append.
            value: int or float (stored as float).
            *args: Placeholder values for key.

        Returns:
            True if stored; False if an existing list/object blocks the
            write, or an index would pad a list beyond
            config.max_list_padding (the tree is left unchanged).

        Raises:
            TypeError: If value is not a number.
            MalformedPathError: If key and args disagree.

        Example:
            >>> store.set_numeric_value('a.b.%d', 4.0, 2)
            True
            >>> store.get_list_size('a.b')
            3
        """
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"value must be int or float, not {type(value).__name__}")
        return self._set_scalar(key, args, NodeKind.NUMBER, float(value))

    def set_string_value(self, key: Key, value: str, *args: Any) -> bool:
        """Set a string at key. False if longer than config.max_value_length."""
        if not isinstance(value, str):
            raise TypeError(f"value must be str, not {type(value).__name__}")
        if not self._config.value_fits(value):
            logger.debug(
                "String of %d chars exceeds max_value_length=%s",
                len(value), self._config.max_value_length,
            )
            return False
        return self._set_scalar(key, args, NodeKind.STRING, value)

    def set_boolean_value(self, key: Key, value: bool, *args: Any) -> bool:
        """Set a boolean at key."""
        if not isinstance(value, bool):
            raise TypeError(f"value must be bool, not {type(value).__name__}")
        return self._set_scalar(key, args, NodeKind.BOOLEAN, value)

    def set_null_value(self, key: Key, *args: Any) -> bool:
        """Set an explicit null at key (same conflict rules as scalars)."""
        return self._set_scalar(key, args, NodeKind.NULL, None)

    # ==================== Subtrees ====================

    def set_sub_data(self, key: Key, data: DataStore | DataNode | Any, *args: Any) -> bool:
        """Store a deep copy of data at key.

        A scalar may replace a scalar; a list or object may replace a
        container of the same kind. Anything else is a conflict.

        Returns:
            True if stored, False on a conflict (tree unchanged).
        """
        graft = self._load_source(data)
        terminal = _SCALAR_SLOTS if graft.is_scalar or graft.is_null else (graft.kind,)
        try:
            slot = self._slot(key, args, terminal)
        except _REJECTED_WRITES as exc:
            logger.debug("set_sub_data rejected: %s", exc)
            return False
        slot._adopt(graft)
        return True

    def remove_key(self, path_format: PathSpec, *args: Any) -> bool:
        """Delete the member or element at path.

        This is the explicit way to change the shape of a slot: remove it,
        then add a value of the new shape.

        Returns:
            True if something was removed, False if the path was absent.

        Raises:
            MalformedPathError: If the path is empty.
        """
        steps = self._steps(path_format, args)
        if not steps:
            raise MalformedPathError("remove_key needs a non-empty path")
        parent, last = parent_and_last(self._node, steps)
        if parent is None:
            return False
        if isinstance(last, StringKey):
            return parent._remove(last.name)
        if isinstance(last, LiteralKey):
            key = last.text if parent.kind is NodeKind.OBJECT else last.index
            return parent._remove(key)
        if isinstance(last, IndexKey):
            return parent._remove(last.index)
        return False

    # ==================== Conversion ====================

    def copy(self) -> DataStore:
        """Deep copy of this handle's subtree as a new independent root."""
        return self._wrap(self._node.copy(), self._config)

    def to_python(self) -> Any:
        """Plain Python data for this handle's subtree."""
        return self._node.to_python()

    def walk(self) -> Iterator[tuple[str, DataNode]]:
        """Yield (path, node) pairs depth-first, parents before children.

        Example:
            >>> for path, node in store.walk():
            ...     print(path, node.kind.value)
        """
        def _walk_gen(node: DataNode, prefix: str) -> Iterator[tuple[str, DataNode]]:
            if node.kind is NodeKind.OBJECT:
                children = node.items()
            elif node.kind is NodeKind.LIST:
                children = [(str(i), item) for i, item in enumerate(node)]
            else:
                return
            for label, child in children:
                path = f"{prefix}.{label}" if prefix else label
                yield path, child
                yield from _walk_gen(child, path)

        return _walk_gen(self._node, '')
