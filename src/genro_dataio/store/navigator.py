# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Navigator - resolves compiled steps against a DataNode tree.

Two policies share the same step semantics:

- READ walks existing nodes only and never mutates. A missing member, an
  out-of-range index, an APPEND step or a step of the wrong kind for the
  node (StringKey into a List, IndexKey into an Object, anything into a
  scalar) all mean "not found". A LiteralKey is a member name on an
  Object and an index on a List.
- WRITE creates what is missing. A NULL node met on the way becomes an
  Object (next step is a StringKey or LiteralKey) or a List (IndexKey or
  APPEND). Indexes past the end pad the list with NULL elements, up to
  max_padding of them, APPEND always adds a new element, and the terminal
  slot is created as NULL.

Writes never overwrite structure: a step that would descend into a scalar,
or a step of the wrong kind for an existing container, is a type conflict.
The conflict check runs over the whole path before anything is created,
so a rejected write leaves the tree exactly as it was.
"""

from __future__ import annotations

from enum import Enum
from typing import Collection, Sequence

from ..exceptions import NodeNotFoundError, PaddingLimitError, TypeConflictError
from ..node import DataNode, NodeKind
from ..path import IndexKey, LiteralKey, Step, StringKey, format_path


class Mode(Enum):
    """Resolution policy."""

    READ = 'read'
    WRITE = 'write'


def _child_for(node: DataNode, step: Step) -> DataNode | None:
    """Existing child of a container for a key, index or literal step."""
    kind = node.kind
    if isinstance(step, StringKey):
        return node._value.get(step.name) if kind is NodeKind.OBJECT else None
    if isinstance(step, LiteralKey):
        if kind is NodeKind.OBJECT:
            return node._value.get(step.text)
        return node.child(step.index) if kind is NodeKind.LIST else None
    if isinstance(step, IndexKey):
        return node.child(step.index) if kind is NodeKind.LIST else None
    return None


def find_node(root: DataNode, steps: Sequence[Step]) -> DataNode | None:
    """Resolve steps in read mode.

    Returns:
        The addressed node, or None if any step cannot be followed.
    """
    current = root
    for step in steps:
        current = _child_for(current, step)
        if current is None:
            return None
    return current


def _conflict(steps: Sequence[Step], depth: int, node: DataNode, wanted: str) -> TypeConflictError:
    path = format_path(steps[:depth]) or '<root>'
    return TypeConflictError(
        f"Cannot use {node.kind.value} at '{path}' as {wanted}", path=path, found=node.kind
    )


def _check_padding(
    steps: Sequence[Step], depth: int, index: int, size: int, limit: int | None
) -> None:
    padding = index - size
    if limit is None or padding <= limit:
        return
    path = format_path(steps[:depth]) or '<root>'
    raise PaddingLimitError(
        f"Index {index} at '{path}' would add {padding} null elements (max {limit})",
        path=path,
        padding=padding,
    )


def check_writable(
    root: DataNode,
    steps: Sequence[Step],
    terminal: Collection[NodeKind] = (),
    max_padding: int | None = None,
) -> None:
    """Verify that a write along steps can succeed, without mutating.

    Args:
        root: Tree to check.
        steps: Compiled steps.
        terminal: Kinds accepted at the final slot if it already exists.
            NULL is always accepted; an empty collection accepts anything.
        max_padding: Most NULL elements one index step may add to a list.
            None means unbounded.

    Raises:
        TypeConflictError: If an existing node blocks the write.
        PaddingLimitError: If an index lies too far past the end of a list.
    """
    current: DataNode | None = root
    for depth, step in enumerate(steps):
        if current is None or current.is_null:
            # Created from here on, only list padding can fail
            if isinstance(step, IndexKey):
                _check_padding(steps, depth, step.index, 0, max_padding)
            current = None
            continue
        kind = current.kind
        if isinstance(step, StringKey):
            if kind is not NodeKind.OBJECT:
                raise _conflict(steps, depth, current, f"an object (key '{step.name}')")
        elif isinstance(step, LiteralKey):
            if not kind.is_container:
                raise _conflict(steps, depth, current, f"an object or list (key '{step.text}')")
            if kind is NodeKind.LIST:
                _check_padding(steps, depth, step.index, len(current), max_padding)
        elif isinstance(step, IndexKey):
            if kind is not NodeKind.LIST:
                raise _conflict(steps, depth, current, f"a list (index {step.index})")
            _check_padding(steps, depth, step.index, len(current), max_padding)
        elif kind is not NodeKind.LIST:
            raise _conflict(steps, depth, current, "a list (append)")
        current = _child_for(current, step)

    if current is None:
        return
    if terminal and current.kind is not NodeKind.NULL and current.kind not in terminal:
        wanted = ' or '.join(sorted(k.value for k in terminal))
        raise _conflict(steps, len(steps), current, wanted)


def ensure_node(
    root: DataNode,
    steps: Sequence[Step],
    terminal: Collection[NodeKind] = (),
    max_padding: int | None = None,
) -> DataNode:
    """Resolve steps in write mode, creating missing levels.

    Args:
        root: Tree to write into.
        steps: Compiled steps.
        terminal: Kinds accepted at the final slot (see check_writable).
        max_padding: Bound on list padding (see check_writable).

    Returns:
        The node at the final slot (a new NULL node if it did not exist).

    Raises:
        TypeConflictError: If an existing node blocks the write.
        PaddingLimitError: If an index lies too far past the end of a list.
            The tree is not modified in either case.
    """
    check_writable(root, steps, terminal, max_padding)

    current = root
    for step in steps:
        if current.kind is NodeKind.NULL:
            creates_object = isinstance(step, (StringKey, LiteralKey))
            current._assign(NodeKind.OBJECT if creates_object else NodeKind.LIST)
        if isinstance(step, StringKey):
            current = current._member(step.name)
        elif isinstance(step, LiteralKey) and current.kind is NodeKind.OBJECT:
            current = current._member(step.text)
        elif isinstance(step, (IndexKey, LiteralKey)):
            current = current._element(step.index)
        else:
            current = current._append()
    return current


def resolve(
    root: DataNode,
    steps: Sequence[Step],
    mode: Mode = Mode.READ,
) -> DataNode:
    """Resolve steps with the given policy.

    Raises:
        NodeNotFoundError: In READ mode, if the path does not exist.
        TypeConflictError: In WRITE mode, if an existing node blocks the path.
    """
    if mode is Mode.WRITE:
        return ensure_node(root, steps)
    node = find_node(root, steps)
    if node is None:
        raise NodeNotFoundError(f"Path '{format_path(steps)}' not found")
    return node


def parent_and_last(root: DataNode, steps: Sequence[Step]) -> tuple[DataNode | None, Step | None]:
    """Read-mode lookup of the container holding the last step."""
    if not steps:
        return None, None
    parent = find_node(root, steps[:-1])
    return parent, steps[-1]

