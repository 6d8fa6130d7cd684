# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Document backends for DataIO trees.

Available backends:
- json: standard library json (.json)
- yaml: PyYAML safe loader/dumper (.yaml, .yml)

Example:
    >>> from genro_dataio.backends import get_backend
    >>> node = get_backend('yaml').decode('robot: {joints: 6}')
    >>> get_backend('json').encode(node, indent=None)
    '{"robot": {"joints": 6}}'
"""

from .base import (
    Backend,
    available_backends,
    backend_for_path,
    get_backend,
    register_backend,
    registered_extensions,
)
from .json_backend import JsonBackend
from .yaml_backend import YamlBackend

register_backend(JsonBackend())
register_backend(YamlBackend())

__all__ = [
    'Backend',
    'JsonBackend',
    'YamlBackend',
    'available_backends',
    'backend_for_path',
    'get_backend',
    'register_backend',
    'registered_extensions',
]
