"""Output targets and asset renderers.

An output target is either virtual (served from memory under a module
name) or file-based (emitted as build assets). Targets are parsed from
configuration mappings whose ``type`` key selects the variant; the
camelCase keys of JavaScript build configs are accepted alongside the
snake_case field names.

Renderers turn a CompilationResult into asset source text:

    render_esm   export default function <name>(modDef) {...}
    render_cjs   CommonJS module exporting the function as both
                 ``module.exports`` and ``exports.default``
    render_dts   TypeScript declaration of the function signature only

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import ntpath
import posixpath
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from localepack.constants import DEFAULT_DTS_TYPE_MODULE, DEFAULT_DTS_TYPE_NAME
from localepack.diagnostics import ConfigurationError
from localepack.enums import AssetKind, OutputType
from localepack.literals import js_string

if TYPE_CHECKING:
    from localepack.factory import CompilationResult

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Targets
    "FileOutputTarget",
    "OutputTarget",
    "VirtualOutputTarget",
    "parse_output_target",
    # Assets
    "EmittedAsset",
    "render_assets",
    "render_cjs",
    "render_dts",
    "render_esm",
]


@dataclass(frozen=True, slots=True)
class VirtualOutputTarget:
    """Serve the generated module from memory.

    Attributes:
        module_name: Import specifier resolved to the generated module
    """

    module_name: str

    def __post_init__(self) -> None:
        if not self.module_name:
            msg = "Virtual output requires a non-empty module name"
            raise ConfigurationError(msg)

    @property
    def type(self) -> OutputType:
        return OutputType.VIRTUAL


def _check_asset_name(field_name: str, name: str) -> None:
    """Reject asset names that could land outside the output directory."""
    if not name:
        msg = f"{field_name} must be a non-empty file name"
        raise ConfigurationError(msg)
    segments = name.replace("\\", "/").split("/")
    absolute = posixpath.isabs(name) or ntpath.isabs(name) or bool(ntpath.splitdrive(name)[0])
    if absolute or ".." in segments:
        msg = f"{field_name} must be a relative path inside the output directory, got {name!r}"
        raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class FileOutputTarget:
    """Emit the generated module as build assets.

    Attributes:
        file_name: ESM asset name
        cjs_file_name: CommonJS asset name (optional)
        dts_file_name: TypeScript declaration asset name (optional)
        dts_type_module: Module the declaration imports the definable type from
        dts_type_name: Name of the module-definable type
    """

    file_name: str
    cjs_file_name: str | None = None
    dts_file_name: str | None = None
    dts_type_module: str = DEFAULT_DTS_TYPE_MODULE
    dts_type_name: str = DEFAULT_DTS_TYPE_NAME

    def __post_init__(self) -> None:
        if not self.file_name:
            msg = "File output requires a non-empty file name"
            raise ConfigurationError(msg)
        for field_name in ("file_name", "cjs_file_name", "dts_file_name"):
            name = getattr(self, field_name)
            if name is not None:
                _check_asset_name(field_name, name)
        if not self.dts_type_name.isidentifier():
            msg = f"dts_type_name must be an identifier, got {self.dts_type_name!r}"
            raise ConfigurationError(msg)

    @property
    def type(self) -> OutputType:
        return OutputType.FILE


type OutputTarget = VirtualOutputTarget | FileOutputTarget

# Accepted spellings per field; the first entry is the field name.
_VIRTUAL_KEYS: dict[str, tuple[str, ...]] = {
    "module_name": ("module_name", "moduleName"),
}
_FILE_KEYS: dict[str, tuple[str, ...]] = {
    "file_name": ("file_name", "fileName"),
    "cjs_file_name": ("cjs_file_name", "cjsFileName"),
    "dts_file_name": ("dts_file_name", "dtsFilename", "dtsFileName"),
    "dts_type_module": ("dts_type_module", "dtsTypeModule"),
    "dts_type_name": ("dts_type_name", "dtsTypeName"),
}


def _collect_fields(
    config: Mapping[str, Any], keys: dict[str, tuple[str, ...]], kind: str
) -> dict[str, Any]:
    known = {"type"}
    fields: dict[str, Any] = {}
    for field_name, spellings in keys.items():
        known.update(spellings)
        present = [key for key in spellings if key in config]
        if len(present) > 1:
            msg = f"{kind} output: {' and '.join(present)} given together"
            raise ConfigurationError(msg)
        if present:
            value = config[present[0]]
            if value is not None and not isinstance(value, str):
                msg = f"{kind} output: {present[0]} must be a string, got {value!r}"
                raise ConfigurationError(msg)
            if value is not None:
                fields[field_name] = value
    unknown = sorted(set(config) - known)
    if unknown:
        msg = f"{kind} output: unknown option(s) {', '.join(unknown)}"
        raise ConfigurationError(msg)
    return fields


def parse_output_target(config: OutputTarget | Mapping[str, Any]) -> OutputTarget:
    """Build an output target from its configuration mapping.

    Args:
        config: Mapping with a ``type`` tag, or an already built target

    Returns:
        The matching target variant

    Raises:
        ConfigurationError: If the type tag is unknown or fields are invalid

    Example:
        >>> parse_output_target({"type": "virtual", "moduleName": "virtual:i18n"})
        VirtualOutputTarget(module_name='virtual:i18n')
    """
    if isinstance(config, (VirtualOutputTarget, FileOutputTarget)):
        return config
    if not isinstance(config, Mapping):
        msg = f"Output configuration must be a mapping, got {type(config).__name__}"
        raise ConfigurationError(msg)

    output_type = config.get("type")
    match output_type:
        case OutputType.VIRTUAL:
            fields = _collect_fields(config, _VIRTUAL_KEYS, "Virtual")
            if "module_name" not in fields:
                msg = "Virtual output requires moduleName"
                raise ConfigurationError(msg)
            return VirtualOutputTarget(**fields)
        case OutputType.FILE:
            fields = _collect_fields(config, _FILE_KEYS, "File")
            if "file_name" not in fields:
                msg = "File output requires fileName"
                raise ConfigurationError(msg)
            return FileOutputTarget(**fields)
        case _:
            msg = f"Unsupported output type '{output_type}'"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class EmittedAsset:
    """An asset handed to the host for writing.

    Attributes:
        file_name: Asset name relative to the build output
        source: Asset text
        kind: Asset format
    """

    file_name: str
    source: str
    kind: AssetKind


def render_esm(result: CompilationResult) -> str:
    """Return ESM source default-exporting the generated function."""
    return f"export default {result.code}\n"


def render_cjs(result: CompilationResult) -> str:
    """Return CommonJS source exporting the generated function.

    ``require()`` yields the function itself; ``exports.default`` is set
    too, so default-interop consumers resolve the same callable.
    """
    return (
        f"{result.code}\n"
        f"exports.default = {result.name};\n"
        f"module.exports = Object.assign(exports.default, exports);\n"
    )


def render_dts(
    result: CompilationResult,
    *,
    type_module: str = DEFAULT_DTS_TYPE_MODULE,
    type_name: str = DEFAULT_DTS_TYPE_NAME,
) -> str:
    """Return a TypeScript declaration for the generated function."""
    return (
        f"import {{ {type_name} }} from {js_string(type_module)};\n"
        f"export default function {result.name}(modDefs: {type_name}): void;\n"
    )


def render_assets(target: FileOutputTarget, result: CompilationResult) -> list[EmittedAsset]:
    """Render every asset ``target`` asks for, ESM first."""
    assets = [EmittedAsset(target.file_name, render_esm(result), AssetKind.ESM)]
    if target.cjs_file_name is not None:
        assets.append(EmittedAsset(target.cjs_file_name, render_cjs(result), AssetKind.CJS))
    if target.dts_file_name is not None:
        source = render_dts(
            result, type_module=target.dts_type_module, type_name=target.dts_type_name
        )
        assets.append(EmittedAsset(target.dts_file_name, source, AssetKind.DTS))
    return assets
