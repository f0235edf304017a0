"""File system accessors used by the scanner and compiler.

Components:
    FileSystem - Protocol for the three primitives compilation needs
    LocalFileSystem - Disk-backed implementation (default)
    MemoryFileSystem - In-memory implementation for virtual trees and tests

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from localepack.constants import RESOURCE_ENCODING

__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "MemoryFileSystem",
]


class FileSystem(Protocol):
    """Protocol for the file system primitives used during compilation.

    This is a Protocol (structural typing) rather than ABC so hosts can
    adapt their own virtual file systems without inheriting from it.
    """

    def list_dir(self, path: str) -> list[str]:
        """Return entry names of directory ``path`` in file system order.

        Raises:
            FileNotFoundError: If ``path`` does not exist
            NotADirectoryError: If ``path`` is not a directory
            OSError: If the directory cannot be listed
        """

    def is_dir(self, path: str) -> bool:
        """Check whether ``path`` is a directory, without following symlinks."""

    def read_text(self, path: str) -> str:
        """Read ``path`` as UTF-8 text.

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the content is not valid UTF-8
        """


@dataclass(frozen=True, slots=True)
class LocalFileSystem:
    """Disk-backed FileSystem.

    Symlinks are never followed for the directory check, so a symlinked
    directory is treated as a leaf entry and is not recursed into.
    Directory entries are listed in sorted order so every checkout of a
    tree compiles to the same module.
    """

    def list_dir(self, path: str) -> list[str]:
        return sorted(os.listdir(path))

    def is_dir(self, path: str) -> bool:
        return stat.S_ISDIR(os.lstat(path).st_mode)

    def read_text(self, path: str) -> str:
        with open(path, encoding=RESOURCE_ENCODING) as f:
            return f.read()


class MemoryFileSystem:
    """In-memory FileSystem over a mapping of file path -> text.

    Directories are implied by the file paths. Listing order follows the
    insertion order of the files, which makes traversal order fully
    predictable.

    Example:
        >>> fs = MemoryFileSystem({"/app/locales/en/messages.json": '{"hi": "Hi"}'})
        >>> fs.list_dir("/app/locales")
        ['en']
    """

    __slots__ = ("files",)

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self.files: dict[str, str] = {}
        for path, text in (files or {}).items():
            self.write_text(path, text)

    @staticmethod
    def _normalize(path: str) -> str:
        normalized = os.path.normpath(path).replace(os.sep, "/")
        return normalized if normalized != "." else ""

    def write_text(self, path: str, text: str) -> None:
        """Add or replace a file."""
        self.files[self._normalize(path)] = text

    def remove(self, path: str) -> None:
        """Delete a file.

        Raises:
            FileNotFoundError: If no such file exists
        """
        try:
            del self.files[self._normalize(path)]
        except KeyError:
            raise FileNotFoundError(path) from None

    def list_dir(self, path: str) -> list[str]:
        directory = self._normalize(path)
        if directory in self.files:
            raise NotADirectoryError(path)
        prefix = directory.rstrip("/") + "/"
        names: dict[str, None] = {}
        for file_path in self.files:
            if file_path.startswith(prefix):
                names.setdefault(file_path[len(prefix):].split("/", 1)[0])
        if not names:
            raise FileNotFoundError(path)
        return list(names)

    def is_dir(self, path: str) -> bool:
        prefix = self._normalize(path).rstrip("/") + "/"
        return any(file_path.startswith(prefix) for file_path in self.files)

    def read_text(self, path: str) -> str:
        try:
            return self.files[self._normalize(path)]
        except KeyError:
            raise FileNotFoundError(path) from None
