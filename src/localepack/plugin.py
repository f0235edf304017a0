"""Build plugin: configuration and output dispatch.

LocalePackPlugin exposes three hook-shaped entry points for a host build
pipeline:

    resolve_id(id)        claim the configured virtual module name
    load(id)              serve freshly compiled source for a claimed id
    generate_bundle(ctx)  emit file assets, at most once per plugin

Virtual mode recompiles on every load, so edits to locale files show up
on the next load without restarting the host. File mode compiles once,
guarded by a per-instance emission flag; separate plugin instances never
share that state.

Example:
    >>> plugin = localepack(
    ...     output={"type": "virtual", "moduleName": "virtual:i18n"},
    ...     roots={"locales": ["app"]},
    ... )
    >>> plugin.resolve_id("virtual:i18n")
    '\\x00localepack:virtual:i18n'
    >>> plugin.resolve_id("./other.js") is None
    True

Python 3.13+.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from localepack.compiler import compile_as_function
from localepack.constants import PLUGIN_NAME, VIRTUAL_PREFIX
from localepack.diagnostics import CompilationError, ConfigurationError, ResourceDiagnostic
from localepack.factory import CompilationResult, FunctionNameGenerator
from localepack.filesystem import FileSystem, LocalFileSystem
from localepack.filtering import FilterPattern, create_filter
from localepack.locale_utils import default_determine_locale, validating_resolver
from localepack.output import (
    EmittedAsset,
    FileOutputTarget,
    OutputTarget,
    VirtualOutputTarget,
    parse_output_target,
    render_assets,
    render_esm,
)

if TYPE_CHECKING:
    from localepack.types import DetermineLocale, PathFilter

__all__ = [
    "LocalePackPlugin",
    "PluginContext",
    "PluginOptions",
    "localepack",
]

logger = logging.getLogger(__name__)


class PluginContext(Protocol):
    """Host services available to plugin hooks.

    Mirrors the subset of a bundler's plugin context the hooks use.
    """

    def emit_file(self, asset: EmittedAsset) -> str:
        """Hand an asset to the host for writing; return its reference id."""

    def warn(self, message: str) -> None:
        """Report a non-fatal diagnostic."""


def _normalize_roots(roots: Any) -> dict[str, tuple[str, ...]]:
    if not isinstance(roots, Mapping):
        msg = f"roots must be a mapping of directory -> submodule names, got {roots!r}"
        raise ConfigurationError(msg)
    normalized: dict[str, tuple[str, ...]] = {}
    for root, submodules in roots.items():
        if not isinstance(root, str) or not root:
            msg = f"Root names must be non-empty strings, got {root!r}"
            raise ConfigurationError(msg)
        if isinstance(submodules, str) or not isinstance(submodules, Sequence):
            msg = f"Submodules of root '{root}' must be a list of strings, got {submodules!r}"
            raise ConfigurationError(msg)
        for name in submodules:
            if not isinstance(name, str):
                msg = f"Submodule names of root '{root}' must be strings, got {name!r}"
                raise ConfigurationError(msg)
        normalized[root] = tuple(submodules)
    return normalized


@dataclass(frozen=True, slots=True)
class PluginOptions:
    """Immutable, validated plugin configuration.

    Mappings are accepted for ``output`` and normalized to an
    OutputTarget; ``roots`` is copied so later mutation of the caller's
    mapping has no effect.

    Attributes:
        output: Where the generated module goes
        roots: Root directory -> submodule declarations, in compile order
        include: Patterns of files to compile (default: all)
        exclude: Patterns of files to skip
        determine_locale: Maps a file path to its locale
        validate_locales: Reject locales unknown to CLDR (via Babel)
        strict: Fail the hook when any file could not be compiled
        cwd: Directory roots are relative to (default: current directory)

    Raises:
        ConfigurationError: If any option is invalid
    """

    output: OutputTarget
    roots: Mapping[str, Sequence[str]]
    include: FilterPattern = None
    exclude: FilterPattern = None
    determine_locale: DetermineLocale = default_determine_locale
    validate_locales: bool = False
    strict: bool = False
    cwd: str = field(default_factory=os.getcwd)

    def __post_init__(self) -> None:
        object.__setattr__(self, "output", parse_output_target(self.output))
        object.__setattr__(self, "roots", _normalize_roots(self.roots))
        if not callable(self.determine_locale):
            msg = f"determine_locale must be callable, got {self.determine_locale!r}"
            raise ConfigurationError(msg)
        object.__setattr__(self, "cwd", os.path.abspath(self.cwd))


class LocalePackPlugin:
    """Host plugin compiling locale trees into a registration module.

    Args:
        options: Validated configuration
        fs: File system accessor (default: local disk)
    """

    name = PLUGIN_NAME

    def __init__(self, options: PluginOptions, *, fs: FileSystem | None = None) -> None:
        self._options = options
        self._fs = fs or LocalFileSystem()
        self._filter: PathFilter = create_filter(
            options.include, options.exclude, base=options.cwd
        )
        self._determine_locale = (
            validating_resolver(options.determine_locale)
            if options.validate_locales
            else options.determine_locale
        )
        self._name_generator = FunctionNameGenerator()
        self._emitted = False

    @property
    def options(self) -> PluginOptions:
        return self._options

    @property
    def emitted(self) -> bool:
        """Whether file-mode assets have been emitted."""
        return self._emitted

    def _virtual_module_name(self) -> str | None:
        output = self._options.output
        return output.module_name if isinstance(output, VirtualOutputTarget) else None

    def compile(self, context: PluginContext | None = None) -> CompilationResult:
        """Run one compilation pass over all roots.

        Per-file failures are reported through ``context.warn``.

        Raises:
            OSError: If a root directory cannot be listed
            CompilationError: In strict mode, if any file failed
        """

        def on_error(file_path: str, error: Exception) -> None:
            if context is not None:
                context.warn(ResourceDiagnostic.from_error(file_path, error).format())

        result = compile_as_function(
            self._options.cwd,
            self._options.roots,
            self._filter,
            self._determine_locale,
            on_error,
            fs=self._fs,
            name_generator=self._name_generator,
        )
        if self._options.strict and result.has_errors:
            raise CompilationError(result.diagnostics)
        return result

    def resolve_id(self, module_id: str) -> str | None:
        """Claim ``module_id`` if it is the configured virtual module name."""
        module_name = self._virtual_module_name()
        if module_name is not None and module_id == module_name:
            return VIRTUAL_PREFIX + module_id
        return None

    def load(self, module_id: str, context: PluginContext | None = None) -> str | None:
        """Return freshly compiled ESM source for a claimed virtual id.

        Returns:
            Module source, or None if ``module_id`` is not ours
        """
        if not module_id.startswith(VIRTUAL_PREFIX):
            return None
        if module_id.removeprefix(VIRTUAL_PREFIX) != self._virtual_module_name():
            return None
        result = self.compile(context)
        logger.debug(
            "Loaded virtual module %s as %s", self._virtual_module_name(), result.name
        )
        return render_esm(result)

    def generate_bundle(self, context: PluginContext) -> tuple[EmittedAsset, ...]:
        """Emit the configured file assets once per plugin instance.

        Returns:
            The assets emitted by this call; empty in virtual mode and on
            every call after the first successful emission
        """
        output = self._options.output
        if not isinstance(output, FileOutputTarget):
            return ()
        if self._emitted:
            logger.debug("Assets already emitted; skipping")
            return ()

        result = self.compile(context)
        assets = tuple(render_assets(output, result))
        self._emitted = True

        for asset in assets:
            context.emit_file(asset)
        logger.info(
            "Emitted %s", ", ".join(f"{a.file_name} ({a.kind})" for a in assets)
        )
        return assets


def localepack(*, fs: FileSystem | None = None, **options: Any) -> LocalePackPlugin:
    """Create a plugin from keyword options.

    Keyword arguments are the PluginOptions fields.

    Raises:
        ConfigurationError: If the options are invalid
        TypeError: If an unknown option is passed
    """
    return LocalePackPlugin(PluginOptions(**options), fs=fs)
