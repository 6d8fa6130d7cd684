# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Path compiler - printf-style path formats to navigation steps.

A path format is a dot-separated list of segments. Each segment is either
literal text or contains placeholders that are filled, in order, from the
positional arguments of the call::

    'config.database.host'          -> StringKey('config'), ..., StringKey('host')
    'robots.%d.name', 2             -> StringKey('robots'), IndexKey(2), StringKey('name')
    'joints.%s.limits', 'knee'      -> StringKey('joints'), StringKey('knee'), ...
    'sensor%u.offset', 3            -> StringKey('sensor3'), StringKey('offset')
    'items.%s', None                -> StringKey('items'), APPEND

Placeholders:
    - %s: string key (None means "append to the enclosing list")
    - %d, %i, %u: non-negative list index
    - %%: literal percent sign

Literal segments made only of digits compile to a LiteralKey, which names
a member of an object and an index of a list, so 'ports.8080' and
'joints.0' both read naturally. Arguments are never split on '.', so a %s
argument holding dots is still one key.

A sequence of keys can be given instead of a format string. Its items are
taken as they are: str -> StringKey, int -> IndexKey, None -> APPEND.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Sequence, Union

from .exceptions import MalformedPathError

_INDEX_CONVERSIONS = frozenset('diu')
_CONVERSIONS = _INDEX_CONVERSIONS | {'s'}


@dataclass(frozen=True)
class StringKey:
    """Step addressing an Object member by name."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class IndexKey:
    """Step addressing a List element by position."""

    index: int

    def __str__(self) -> str:
        return str(self.index)


@dataclass(frozen=True)
class LiteralKey:
    """Step written as a literal digit segment ('joints.0', 'ports.8080').

    Addresses a member by name when the node is an Object and an element
    by position when it is a List. A missing level met on write becomes
    an Object.
    """

    text: str

    @property
    def index(self) -> int:
        return int(self.text)

    def __str__(self) -> str:
        return self.text


class _Append:
    """Step meaning "a new element at the end of the enclosing list"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return 'APPEND'

    def __str__(self) -> str:
        return '[]'

    def __reduce__(self) -> str:
        return 'APPEND'


APPEND = _Append()

Step = Union[StringKey, IndexKey, LiteralKey, _Append]
PathSpec = Union[str, Sequence[Union[str, int, None, StringKey, IndexKey, LiteralKey, _Append]], None]


@dataclass(frozen=True)
class _Placeholder:
    conversion: str


def _split_segments(path_format: str) -> list[list[str | _Placeholder]]:
    """Split a format on literal dots into lists of literal/placeholder parts."""
    segments: list[list[str | _Placeholder]] = [[]]
    literal: list[str] = []

    def flush() -> None:
        if literal:
            segments[-1].append(''.join(literal))
            literal.clear()

    i = 0
    while i < len(path_format):
        char = path_format[i]
        if char == '.':
            flush()
            segments.append([])
        elif char == '%':
            if i + 1 >= len(path_format):
                raise MalformedPathError(f"Dangling '%' at end of path format {path_format!r}")
            conversion = path_format[i + 1]
            if conversion == '%':
                literal.append('%')
            elif conversion in _CONVERSIONS:
                flush()
                segments[-1].append(_Placeholder(conversion))
            else:
                raise MalformedPathError(
                    f"Unsupported conversion '%{conversion}' in path format {path_format!r}"
                )
            i += 2
            continue
        else:
            literal.append(char)
        i += 1

    flush()
    return segments


def _check_index(value: Any, path_format: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedPathError(
            f"Index placeholder in {path_format!r} expects an int, got {type(value).__name__}"
        )
    if value < 0:
        raise MalformedPathError(f"Negative index {value} in path {path_format!r}")
    return value


def _check_key(value: Any, path_format: str) -> str:
    if not isinstance(value, str):
        raise MalformedPathError(
            f"'%s' placeholder in {path_format!r} expects a str, got {type(value).__name__}"
        )
    return value


def _compile_segment(
    segment: list[str | _Placeholder], args: Iterator[Any], path_format: str
) -> Step:
    if not segment:
        raise MalformedPathError(f"Empty segment in path format {path_format!r}")

    if len(segment) == 1 and isinstance(segment[0], _Placeholder):
        conversion = segment[0].conversion
        value = next(args)
        if conversion in _INDEX_CONVERSIONS:
            return IndexKey(_check_index(value, path_format))
        if value is None:
            return APPEND
        return StringKey(_check_key(value, path_format))

    if all(isinstance(part, str) for part in segment):
        text = ''.join(segment)  # type: ignore[arg-type]
        if text.isascii() and text.isdigit():
            return LiteralKey(text)
        return StringKey(text)

    # Mixed literal text and placeholders always renders to a key name
    rendered = []
    for part in segment:
        if isinstance(part, str):
            rendered.append(part)
        elif part.conversion in _INDEX_CONVERSIONS:
            rendered.append(str(_check_index(next(args), path_format)))
        else:
            rendered.append(_check_key(next(args), path_format))
    return StringKey(''.join(rendered))


def _step_from_item(item: Any) -> Step:
    if isinstance(item, (StringKey, IndexKey, LiteralKey, _Append)):
        if isinstance(item, IndexKey):
            _check_index(item.index, repr(item))
        return item
    if item is None:
        return APPEND
    if isinstance(item, str):
        return StringKey(item)
    return IndexKey(_check_index(item, repr(item)))


def format_path(steps: Sequence[Step]) -> str:
    """Render compiled steps back to a dotted path (for messages and logs)."""
    return '.'.join(str(step) for step in steps)


def compile_path(
    path_format: PathSpec, *args: Any, max_length: int | None = None
) -> tuple[Step, ...]:
    """Compile a path format and its arguments into navigation steps.

    Args:
        path_format: Dotted printf-style format, a sequence of keys, or
            None/'' for the node the path is applied to.
        *args: Values for the placeholders, consumed in order.
        max_length: Optional bound on the rendered path length.

    Returns:
        Tuple of steps (StringKey, IndexKey, LiteralKey or APPEND).

    Raises:
        MalformedPathError: If the format and the arguments disagree.

    Example:
        >>> compile_path('robots.%d.%s', 0, 'name')
        (StringKey(name='robots'), IndexKey(index=0), StringKey(name='name'))
    """
    if path_format is None or path_format == '':
        if args:
            raise MalformedPathError(f"Empty path takes no arguments, got {len(args)}")
        return ()

    if isinstance(path_format, str):
        segments = _split_segments(path_format)
        expected = sum(
            isinstance(part, _Placeholder) for segment in segments for part in segment
        )
        if expected != len(args):
            raise MalformedPathError(
                f"Path format {path_format!r} expects {expected} argument(s), got {len(args)}"
            )
        arg_iter = iter(args)
        steps = tuple(_compile_segment(segment, arg_iter, path_format) for segment in segments)
    elif isinstance(path_format, (list, tuple)):
        if args:
            raise MalformedPathError("A key sequence takes no extra arguments")
        steps = tuple(_step_from_item(item) for item in path_format)
    else:
        raise MalformedPathError(
            f"path must be str, sequence of keys or None, not {type(path_format).__name__}"
        )

    if max_length is not None:
        rendered = format_path(steps)
        if len(rendered) > max_length:
            raise MalformedPathError(
                f"Path {rendered[:40]!r}... is {len(rendered)} chars long (max {max_length})"
            )
    return steps


def compile_key(
    key: PathSpec | int, *args: Any, max_length: int | None = None
) -> tuple[Step, ...]:
    """Compile the key argument of a write operation.

    None appends to the enclosing list and a bare int addresses a list
    index; anything else is compiled as a path.
    """
    if key is None:
        if args:
            raise MalformedPathError("The append key takes no path arguments")
        return (APPEND,)
    if isinstance(key, int) and not isinstance(key, bool):
        if args:
            raise MalformedPathError("An index key takes no path arguments")
        return (IndexKey(_check_index(key, str(key))),)
    return compile_path(key, *args, max_length=max_length)
