"""Recursive discovery of translation resource files.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

from localepack.constants import DATA_FILE_EXTENSION
from localepack.filesystem import FileSystem, LocalFileSystem

__all__ = ["expand_directory"]

logger = logging.getLogger(__name__)

_LOCAL_FS = LocalFileSystem()


def expand_directory(
    directory: str,
    *,
    fs: FileSystem | None = None,
    extension: str = DATA_FILE_EXTENSION,
) -> Iterator[str]:
    """Lazily yield every ``extension`` file below ``directory``, depth-first.

    Entries are visited in the order the file system lists them; each
    subdirectory is fully expanded before the next sibling entry. Entries
    that are neither directories nor ``extension`` files are skipped.

    Args:
        directory: Directory to expand
        fs: File system accessor (default: local disk)
        extension: Required file name suffix

    Yields:
        Paths of the matching files, joined onto ``directory``

    Raises:
        OSError: If ``directory`` or any subdirectory cannot be listed.
            Raised on iteration, not on call.
    """
    fs = fs or _LOCAL_FS
    for name in fs.list_dir(directory):
        path = os.path.join(directory, name)
        if fs.is_dir(path):
            logger.debug("Descending into %s", path)
            yield from expand_directory(path, fs=fs, extension=extension)
        elif path.endswith(extension):
            yield path
