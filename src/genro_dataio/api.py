# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Functional entry points mirroring the classic DataIO call names.

These are thin wrappers for code that prefers free functions over the
DataStore classmethods; storage helpers live in genro_dataio.storage.
"""

from __future__ import annotations

from .backends.base import Backend
from .config import DataIOConfig
from .store import DataStore


def create_empty_data(config: DataIOConfig | None = None) -> DataStore:
    """New tree with an empty object at the root."""
    return DataStore(config=config)


def load_string_data(
    data: str | bytes,
    backend: str | Backend | None = None,
    config: DataIOConfig | None = None,
) -> DataStore:
    """Parse a document into a new tree (see DataStore.load_string_data)."""
    return DataStore.load_string_data(data, backend=backend, config=config)


def get_data_string(
    data: DataStore, backend: str | Backend | None = None, **options
) -> str:
    """Serialize a tree (see DataStore.get_data_string)."""
    return data.get_data_string(backend, **options)
