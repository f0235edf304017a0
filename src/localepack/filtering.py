"""Include/exclude path filtering.

Builds the predicate the compiler applies to every discovered resource
path. Patterns may be glob strings or compiled regular expressions.

Glob semantics:
    - Matched against the whole path, POSIX-normalised
    - ``*`` matches within one segment, ``**`` spans any number of segments
    - Relative globs are anchored at ``base`` (default: current directory)
      unless they start with ``**``

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from localepack.diagnostics import ConfigurationError

if TYPE_CHECKING:
    from localepack.types import PathFilter

__all__ = [
    "FilterPattern",
    "create_filter",
]

type FilterPattern = str | re.Pattern[str] | Iterable[str | re.Pattern[str]] | None
"""Single pattern, iterable of patterns, or None for "no patterns"."""


def _to_posix(path: str) -> str:
    return path.replace(os.sep, "/") if os.sep != "/" else path


def _compile_pattern(pattern: str | re.Pattern[str], base: str) -> re.Pattern[str] | str:
    if isinstance(pattern, re.Pattern):
        return pattern
    if not isinstance(pattern, str) or not pattern:
        msg = f"Filter patterns must be non-empty strings or compiled regexes, got {pattern!r}"
        raise ConfigurationError(msg)
    glob = _to_posix(pattern)
    if glob.startswith("**") or os.path.isabs(pattern):
        return glob
    return str(PurePosixPath(_to_posix(base)) / glob)


def _normalize_patterns(patterns: FilterPattern, base: str) -> tuple[re.Pattern[str] | str, ...]:
    if patterns is None:
        return ()
    if isinstance(patterns, (str, re.Pattern)) or not isinstance(patterns, Iterable):
        return (_compile_pattern(patterns, base),)
    return tuple(_compile_pattern(p, base) for p in patterns)


def _matches(pattern: re.Pattern[str] | str, path: str) -> bool:
    if isinstance(pattern, re.Pattern):
        return pattern.search(path) is not None
    return PurePosixPath(path).full_match(pattern)


def create_filter(
    include: FilterPattern = None,
    exclude: FilterPattern = None,
    *,
    base: str | None = None,
) -> PathFilter:
    """Create a predicate selecting paths by include/exclude patterns.

    A path passes when it matches no exclude pattern and, if any include
    patterns were given, at least one include pattern. Paths containing a
    NUL character never pass.

    Args:
        include: Patterns a path must match (None or empty: match all)
        exclude: Patterns that reject a path
        base: Directory relative globs are anchored at (default: cwd)

    Returns:
        Predicate over file paths

    Raises:
        ConfigurationError: If a pattern is neither a string nor a regex

    Example:
        >>> keep = create_filter("**/*.json", "**/draft/**", base="/app")
        >>> keep("/app/locales/en/messages.json")
        True
        >>> keep("/app/locales/draft/en/messages.json")
        False
    """
    anchor = base if base is not None else os.getcwd()
    include_patterns = _normalize_patterns(include, anchor)
    exclude_patterns = _normalize_patterns(exclude, anchor)

    def path_filter(path: str) -> bool:
        if "\0" in path:
            return False
        posix_path = _to_posix(path)
        if any(_matches(p, posix_path) for p in exclude_patterns):
            return False
        if not include_patterns:
            return True
        return any(_matches(p, posix_path) for p in include_patterns)

    return path_filter
