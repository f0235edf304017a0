"""Enumerations for localepack type-safe constants.

Uses StrEnum so members compare equal to the plain strings found in
configuration files.

Python 3.13+.
"""

from enum import StrEnum


class OutputType(StrEnum):
    """Discriminator of the ``output`` configuration union."""

    VIRTUAL = "virtual"
    """Serve the generated module from memory under a module name."""

    FILE = "file"
    """Emit the generated module as build assets."""


class AssetKind(StrEnum):
    """Format of an emitted asset."""

    ESM = "esm"
    """ECMAScript module: export default <function>"""

    CJS = "cjs"
    """CommonJS module with default-interop export"""

    DTS = "dts"
    """TypeScript declaration stub (no runtime logic)"""


class LocalePolicy(StrEnum):
    """Built-in locale resolution policies selectable from configuration."""

    DIRECTORY = "directory"
    """Locale is the parent directory name: locales/fr/messages.json"""

    FILENAME = "filename"
    """Locale is the last stem suffix: locales/messages.fr.json"""


__all__ = [
    "AssetKind",
    "LocalePolicy",
    "OutputType",
]
