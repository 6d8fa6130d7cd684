# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-DataIO - Format-neutral hierarchical data with path access.

An in-memory tree of numbers, strings, booleans, nulls, lists and objects,
addressed with printf-style dotted paths, with typed default-valued reads,
creating writes and pluggable JSON/YAML backends.
"""

__version__ = "0.1.0"

from .api import create_empty_data, get_data_string, load_string_data
from .backends import (
    Backend,
    JsonBackend,
    YamlBackend,
    available_backends,
    get_backend,
    register_backend,
)
from .config import DEFAULT_CONFIG, DataIOConfig
from .exceptions import (
    DataIOError,
    DecodeError,
    EncodeError,
    MalformedPathError,
    NodeNotFoundError,
    PaddingLimitError,
    StorageError,
    TypeConflictError,
)
from .node import DataNode, NodeKind
from .path import APPEND, IndexKey, LiteralKey, StringKey, compile_path
from .storage import (
    StorageEntries,
    StorageLocator,
    list_storage_data_entries,
    load_storage_data,
    set_base_storage_path,
)
from .store import DataStore

__all__ = [
    # Core classes
    "DataStore",
    "DataNode",
    "NodeKind",
    # Paths
    "APPEND",
    "IndexKey",
    "LiteralKey",
    "StringKey",
    "compile_path",
    # Documents
    "Backend",
    "JsonBackend",
    "YamlBackend",
    "available_backends",
    "get_backend",
    "register_backend",
    "create_empty_data",
    "load_string_data",
    "get_data_string",
    # Storage
    "StorageEntries",
    "StorageLocator",
    "list_storage_data_entries",
    "load_storage_data",
    "set_base_storage_path",
    # Config
    "DataIOConfig",
    "DEFAULT_CONFIG",
    # Exceptions
    "DataIOError",
    "MalformedPathError",
    "NodeNotFoundError",
    "TypeConflictError",
    "PaddingLimitError",
    "DecodeError",
    "EncodeError",
    "StorageError",
]
