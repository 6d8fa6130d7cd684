# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Configuration for DataIO stores and storage locators.

A single frozen dataclass carries the length bounds for paths and string
values, plus the behavioural switches of the accessor layer. Every DataStore handle keeps
a reference to the config it was created with, and sub-handles inherit it.

Example:
    >>> config = DataIOConfig(max_value_length=None, loose_coercion=True)
    >>> store = DataStore(config=config)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass


@dataclass(frozen=True)
class DataIOConfig:
    """Bounds and defaults shared by the accessor API and the backends."""

    max_path_length: int | None = 256    # Rendered path length, None = unbounded
    max_value_length: int | None = 128   # String value length, None = unbounded
    max_list_padding: int | None = 1024  # Nulls one index write may add, None = unbounded
    loose_coercion: bool = False         # Default for the getters' coerce= flag
    default_backend: str = 'json'        # Backend name used when none is given
    indent: int | None = 2               # Pretty-print indent for encoders

    def __post_init__(self) -> None:
        for name in ('max_path_length', 'max_value_length'):
            bound = getattr(self, name)
            if bound is not None and (isinstance(bound, bool) or bound < 1):
                raise ValueError(f"{name} must be a positive int or None, not {bound!r}")
        padding = self.max_list_padding
        if padding is not None and (isinstance(padding, bool) or padding < 0):
            raise ValueError(f"max_list_padding must be >= 0 or None, not {padding!r}")
        if self.indent is not None and self.indent < 0:
            raise ValueError(f"indent must be >= 0 or None, not {self.indent!r}")
        if not self.default_backend:
            raise ValueError("default_backend must be a non-empty backend name")

    def replace(self, **changes) -> DataIOConfig:
        """Return a copy of this config with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def path_fits(self, path: str) -> bool:
        """True if a rendered path respects max_path_length."""
        return self.max_path_length is None or len(path) <= self.max_path_length

    def value_fits(self, value: str) -> bool:
        """True if a string value respects max_value_length."""
        return self.max_value_length is None or len(value) <= self.max_value_length


DEFAULT_CONFIG = DataIOConfig()
