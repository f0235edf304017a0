"""Type aliases for the localepack domain.

Provides semantic type aliases used throughout the package and by user
code supplying custom locale resolvers, filters, or error handlers.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

__all__ = [
    "DetermineLocale",
    "LocaleCode",
    "OnError",
    "PathFilter",
    "RootName",
    "Roots",
    "StructuredData",
    "TargetName",
]

type LocaleCode = str
"""Locale tag derived per file (e.g., 'en', 'fr', 'zh-Hans')."""

type TargetName = str
"""Logical resource name: file basename without extension (e.g., 'messages')."""

type RootName = str
"""Root directory, relative to the working directory (e.g., 'src/locales')."""

type Roots = Mapping[RootName, Sequence[str]]
"""Root directory -> ordered submodule declaration names."""

type StructuredData = (
    dict[str, StructuredData] | list[StructuredData] | str | int | float | bool | None
)
"""Parsed JSON value."""

type DetermineLocale = Callable[[str], LocaleCode]
"""Maps a resource file path to its locale tag."""

type PathFilter = Callable[[str], bool]
"""Predicate deciding whether a candidate path is compiled."""

type OnError = Callable[[str, Exception], None]
"""Receives the offending path and the error of an isolated per-file failure."""
