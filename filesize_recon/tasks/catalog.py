# File: filesize_recon/tasks/catalog.py

"""
Catalog (key table) access used by a full reprocess.

A catalog hands out a read-only forward iterator of (key, value) pairs.
The iterator must be closed once the caller is done with it, including when
the scan stops early, so it doubles as a context manager.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Mapping, NamedTuple, Protocol


class CatalogReadError(OSError):
    """The catalog could not be read while iterating."""


@dataclass(frozen=True)
class ObjectInfo:
    key_name: str
    data_size: int


class KeyValue(NamedTuple):
    key: str
    value: Any


class TableIterator:
    """Closeable forward iterator over catalog entries."""

    def __init__(self, entries: Iterator[KeyValue]) -> None:
        self._entries = entries
        self.closed = False

    def __iter__(self) -> "TableIterator":
        return self

    def __next__(self) -> KeyValue:
        if self.closed:
            raise StopIteration
        return next(self._entries)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        close = getattr(self._entries, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "TableIterator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class CatalogTable(Protocol):
    def iterator(self) -> TableIterator:
        ...


class InMemoryCatalogTable:
    """Point-in-time snapshot of a key -> value mapping."""

    def __init__(self, entries: Mapping[str, Any]) -> None:
        self._entries = dict(entries)

    def iterator(self) -> TableIterator:
        return TableIterator(KeyValue(k, v) for k, v in self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)


class DirectoryCatalogTable:
    """
    Treats every regular file under ``root`` as a catalog object.

    Keys are paths relative to ``root`` with forward slashes; the value's
    data_size is the file size in bytes. Symlinks are not followed.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def iterator(self) -> TableIterator:
        return TableIterator(self._walk())

    def _walk(self) -> Iterator[KeyValue]:
        if not self.root.is_dir():
            raise CatalogReadError(f"Catalog root is not a directory: {self.root}")

        def _raise(err: OSError) -> None:
            raise CatalogReadError(f"Unable to read {err.filename}: {err.strerror}") from err

        for dirpath, _dirnames, filenames in os.walk(self.root, onerror=_raise):
            for name in sorted(filenames):
                path = Path(dirpath) / name
                try:
                    if path.is_symlink() or not path.is_file():
                        continue
                    size = path.stat().st_size
                except OSError as e:
                    raise CatalogReadError(f"Unable to stat {path}: {e}") from e
                key = path.relative_to(self.root).as_posix()
                yield KeyValue(key, ObjectInfo(key_name=key, data_size=size))
