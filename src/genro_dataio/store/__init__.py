# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Store package - path-addressed access to DataIO trees.

The package is organized into:
- core: DataStore, the typed accessor API
- navigator: read/write resolution of compiled paths against a tree
- coercion: strict and loose scalar conversion for the typed getters

Example:
    >>> from genro_dataio import DataStore
    >>> store = DataStore()
    >>> store.set_numeric_value('limits.%d', 1.5, 2)
    True
    >>> store.get_list_size('limits')
    3
"""

from .core import DataStore
from .navigator import Mode, check_writable, ensure_node, find_node, resolve

__all__ = ["DataStore", "Mode", "check_writable", "ensure_node", "find_node", "resolve"]
