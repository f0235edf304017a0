"""Plugin configuration files.

Options can be kept in a TOML or JSON file. In a ``pyproject.toml`` they
live under ``[tool.localepack]``:

    [tool.localepack]
    roots = { "src/locales" = ["app", "errors"] }
    include = ["**/*.json"]
    locale_policy = "directory"

    [tool.localepack.output]
    type = "file"
    fileName = "i18n.mjs"
    dtsFilename = "i18n.d.ts"

A relative ``cwd`` resolves against the directory of the file; without
``cwd`` roots are relative to that directory.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from localepack.diagnostics import ConfigurationError
from localepack.enums import LocalePolicy
from localepack.locale_utils import resolver_for_policy
from localepack.plugin import PluginOptions

__all__ = [
    "load_options",
    "options_from_mapping",
    "read_config",
]

logger = logging.getLogger(__name__)

PYPROJECT_FILE = "pyproject.toml"
TOOL_TABLE = "localepack"

_KNOWN_KEYS = frozenset(
    {"output", "roots", "include", "exclude", "locale_policy", "validate_locales", "strict", "cwd"}
)


def read_config(path: str | Path) -> dict[str, Any]:
    """Read the raw option table from a TOML or JSON file.

    Raises:
        ConfigurationError: If the file cannot be parsed or lacks the table
        OSError: If the file cannot be read
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = tomllib.loads(text)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        msg = f"Cannot parse {path}: {e}"
        raise ConfigurationError(msg) from e

    if path.name == PYPROJECT_FILE:
        data = data.get("tool", {}).get(TOOL_TABLE)
        if data is None:
            msg = f"{path} has no [tool.{TOOL_TABLE}] table"
            raise ConfigurationError(msg)
    if not isinstance(data, dict):
        msg = f"{path}: configuration must be a table, got {type(data).__name__}"
        raise ConfigurationError(msg)
    return data


def options_from_mapping(config: Mapping[str, Any], *, base_dir: str | Path) -> PluginOptions:
    """Build PluginOptions from a configuration table.

    Args:
        config: Option table as read from a file
        base_dir: Directory a relative or missing ``cwd`` resolves against

    Raises:
        ConfigurationError: If the table has unknown keys or invalid values
    """
    unknown = sorted(set(config) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown configuration key(s): {', '.join(unknown)}"
        raise ConfigurationError(msg)
    if "output" not in config or "roots" not in config:
        msg = "Configuration requires both 'output' and 'roots'"
        raise ConfigurationError(msg)

    for flag in ("validate_locales", "strict"):
        if not isinstance(config.get(flag, False), bool):
            msg = f"'{flag}' must be true or false, got {config[flag]!r}"
            raise ConfigurationError(msg)

    cwd = config.get("cwd", ".")
    if not isinstance(cwd, str):
        msg = f"'cwd' must be a string, got {cwd!r}"
        raise ConfigurationError(msg)

    return PluginOptions(
        output=config["output"],
        roots=config["roots"],
        include=config.get("include"),
        exclude=config.get("exclude"),
        determine_locale=resolver_for_policy(config.get("locale_policy", LocalePolicy.DIRECTORY)),
        validate_locales=config.get("validate_locales", False),
        strict=config.get("strict", False),
        cwd=str(Path(base_dir) / cwd),
    )


def load_options(path: str | Path) -> PluginOptions:
    """Load PluginOptions from a TOML, JSON, or pyproject.toml file.

    Raises:
        ConfigurationError: If the file content is invalid
        OSError: If the file cannot be read
    """
    path = Path(path)
    options = options_from_mapping(read_config(path), base_dir=path.resolve().parent)
    logger.debug("Loaded options from %s: %d roots", path, len(options.roots))
    return options
