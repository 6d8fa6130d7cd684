# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Storage locator - finds documents and turns them into DataStore trees.

The locator is the glue between storage paths and the format-neutral core:
it resolves a path against a base location, reads the bytes and hands them
to the backend registered for the file extension.

Resolution of ``load(storage_path)``:
    - ``http://`` / ``https://`` locations are fetched with urllib; the
      backend comes from the URL extension (default backend otherwise)
    - an existing file loads through the backend of its extension
    - a path without a registered extension tries each registered one
      ('robots/arm' -> 'robots/arm.json', 'robots/arm.yaml', ...)
    - a directory loads as an object with one member per loadable entry

Example:
    >>> locator = StorageLocator('config')
    >>> list(locator.list_entries('robots'))
    ['arm', 'gripper']
    >>> arm = locator.load('robots/arm')
    >>> arm.get_numeric_value(0.0, 'joints.%d.limit', 0)
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from pathlib import Path, PurePosixPath
from typing import Iterator
from urllib.parse import urlsplit

from .backends import backend_for_path, get_backend, registered_extensions
from .config import DEFAULT_CONFIG, DataIOConfig
from .exceptions import DecodeError, StorageError
from .node import DataNode
from .store import DataStore

logger = logging.getLogger(__name__)

_URL_SCHEMES = ('http://', 'https://')


def _is_url(location: str) -> bool:
    return location.startswith(_URL_SCHEMES)


class StorageEntries:
    """Loadable entry names under a storage directory.

    Iterating lists the directory again each time, so the sequence is lazy,
    finite and restartable, and every caller gets its own names. Entries
    are sorted; hidden names (leading '.') are skipped. Files appear without
    their extension; a file and a directory of the same stem appear once.
    """

    __slots__ = ('_directory',)

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def __repr__(self) -> str:
        return f"StorageEntries({str(self._directory)!r})"

    @property
    def directory(self) -> Path:
        return self._directory

    def __iter__(self) -> Iterator[str]:
        if not self._directory.is_dir():
            return
        seen: set[str] = set()
        for path in sorted(self._directory.iterdir()):
            if path.name.startswith('.'):
                continue
            if path.is_dir():
                name = path.name
            elif backend_for_path(path) is not None:
                name = path.stem
            else:
                continue
            if name not in seen:
                seen.add(name)
                yield name


class StorageLocator:
    """Loads documents relative to a base storage path.

    Attributes:
        base_path: Root that relative storage paths are resolved against.
            A local directory or an http(s) URL prefix.
        config: Config given to every DataStore the locator creates.
    """

    def __init__(
        self,
        base_path: str | Path = '.',
        config: DataIOConfig | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_path = base_path
        self.config = config or DEFAULT_CONFIG
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"StorageLocator({self._base!r})"

    @property
    def base_path(self) -> str:
        return self._base

    @base_path.setter
    def base_path(self, value: str | Path) -> None:
        self._base = str(value)

    # ==================== Resolution ====================

    def _location(self, storage_path: str | Path) -> str:
        """Join storage_path onto the base (absolute paths and URLs win)."""
        storage_path = str(storage_path)
        if _is_url(storage_path):
            return storage_path
        if _is_url(self._base):
            return self._base.rstrip('/') + '/' + storage_path.lstrip('/')
        return str(Path(self._base) / storage_path)

    def _candidates(self, path: Path) -> Iterator[Path]:
        yield path
        for extension in registered_extensions():
            yield path.with_name(path.name + extension)

    # ==================== Loading ====================

    def load(self, storage_path: str | Path = '') -> DataStore:
        """Load the document (or directory of documents) at storage_path.

        Raises:
            StorageError: If nothing loadable exists there, or a URL
                cannot be fetched.
            DecodeError: If a document is not valid for its backend.
        """
        location = self._location(storage_path)
        if _is_url(location):
            return self._load_url(location)

        path = Path(location)
        if path.is_dir():
            logger.info("Loading storage directory %s", path)
            return DataStore._wrap(self._load_directory(path), self.config)

        for candidate in self._candidates(path):
            if candidate.is_file():
                logger.info("Loading storage file %s", candidate)
                return DataStore._wrap(self._load_file(candidate), self.config)

        raise StorageError(f"No loadable storage entry at '{location}'")

    def _load_file(self, path: Path) -> DataNode:
        backend = backend_for_path(path) or get_backend(self.config.default_backend)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Cannot read '{path}': {exc}") from exc
        return backend.decode(data)

    def _load_directory(self, directory: Path) -> DataNode:
        tree = DataNode.new_object()
        for name in StorageEntries(directory):
            entry = directory / name
            try:
                if entry.is_dir():
                    node = self._load_directory(entry)
                else:
                    file = next((c for c in self._candidates(entry) if c.is_file()), None)
                    if file is None:
                        raise StorageError(f"No loadable file for entry '{name}'")
                    node = self._load_file(file)
            except (StorageError, DecodeError) as exc:
                logger.warning("Skipping storage entry %s: %s", entry, exc)
                continue
            tree._member(name)._adopt(node)
        return tree

    def _load_url(self, url: str) -> DataStore:
        backend = (
            backend_for_path(PurePosixPath(urlsplit(url).path))
            or get_backend(self.config.default_backend)
        )
        logger.info("Fetching %s", url)
        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as response:
                data = response.read()
        except (urllib.error.URLError, OSError) as exc:
            raise StorageError(f"Cannot fetch '{url}': {exc}") from exc
        return DataStore._wrap(backend.decode(data), self.config)

    # ==================== Listing ====================

    def list_entries(self, storage_path: str | Path = '') -> StorageEntries:
        """Loadable entry names under a local storage directory.

        Raises:
            StorageError: For URL locations, which cannot be listed.
        """
        location = self._location(storage_path)
        if _is_url(location):
            raise StorageError(f"Cannot list remote storage '{location}'")
        return StorageEntries(Path(location))


_default_locator = StorageLocator()


def set_base_storage_path(base_path: str | Path) -> None:
    """Set the base path of the module default locator."""
    _default_locator.base_path = base_path


def get_base_storage_path() -> str:
    return _default_locator.base_path


def load_storage_data(storage_path: str | Path = '') -> DataStore:
    """Load a storage entry through the module default locator."""
    return _default_locator.load(storage_path)


def list_storage_data_entries(storage_path: str | Path = '') -> StorageEntries:
    """List storage entries through the module default locator."""
    return _default_locator.list_entries(storage_path)
