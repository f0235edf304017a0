"""Resource compilation: locale trees to generated registration statements.

For every configured root, in configuration order:

    1. emit ``modDef.define(<submodules>)`` (even with no submodules)
    2. expand the root directory depth-first for .json files
    3. drop paths rejected by the path filter
    4. resolve locale and target name, read and parse each file, and
       chain ``.defines(<target>, <locale>, <value>)`` onto the statement
    5. terminate the statement

A failure in step 4 skips only that file: the error is passed to the
``on_error`` handler, recorded as a diagnostic, and compilation moves on.
A root directory that cannot be listed aborts the pass.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from localepack.constants import DATA_FILE_EXTENSION, MODULE_DEFINABLE_PARAM
from localepack.diagnostics import LocaleResolutionError, ResourceDiagnostic, ResourceParseError
from localepack.factory import CompilationResult, build_function
from localepack.filesystem import FileSystem, LocalFileSystem
from localepack.literals import js_literal, js_string, parse_json
from localepack.scanner import expand_directory

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from localepack.types import (
        DetermineLocale,
        LocaleCode,
        OnError,
        PathFilter,
        Roots,
        StructuredData,
        TargetName,
    )

__all__ = [
    "ResourceFile",
    "compile_as_function",
    "compile_root",
    "load_resource",
    "target_name_for",
]

logger = logging.getLogger(__name__)

_LOCAL_FS = LocalFileSystem()


@dataclass(frozen=True, slots=True)
class ResourceFile:
    """A resource file registered by the generated function.

    Attributes:
        root: Root the file was discovered under
        path: Path of the file
        target_name: Name the content is registered under
        locale: Locale the content is registered for
        value: Parsed content
    """

    root: str
    path: str
    target_name: TargetName
    locale: LocaleCode
    value: StructuredData

    def render_call(self) -> str:
        """Return the chained ``.defines(...)`` call registering this file.

        Raises:
            ValueError: If the value cannot be encoded as a literal
        """
        return (
            f".defines({js_string(self.target_name)}, "
            f"{js_string(self.locale)}, {js_literal(self.value)})"
        )


def target_name_for(file_path: str, extension: str = DATA_FILE_EXTENSION) -> TargetName:
    """Return the basename of ``file_path`` without ``extension``.

    Example:
        >>> target_name_for("/app/locales/fr/messages.json")
        'messages'
    """
    return os.path.basename(file_path).removesuffix(extension)


def load_resource(
    root: str,
    file_path: str,
    determine_locale: DetermineLocale,
    *,
    fs: FileSystem | None = None,
) -> ResourceFile:
    """Resolve, read, and parse one resource file.

    Raises:
        ResourceParseError: If the content is not valid JSON
        LocaleResolutionError: If no locale is found or the resolver returns
            something other than a non-empty string
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not UTF-8
        Exception: Whatever a custom ``determine_locale`` raises
    """
    fs = fs or _LOCAL_FS
    locale = determine_locale(file_path)
    if not isinstance(locale, str) or not locale:
        msg = f"Locale resolver returned {locale!r} for '{file_path}'"
        raise LocaleResolutionError(msg, path=file_path)
    target_name = target_name_for(file_path)
    text = fs.read_text(file_path)
    try:
        value = parse_json(text)
    except ValueError as e:
        msg = f"Invalid JSON: {e}"
        raise ResourceParseError(msg, path=file_path) from e
    return ResourceFile(
        root=root,
        path=file_path,
        target_name=target_name,
        locale=locale,
        value=value,
    )


def compile_root(
    root: str,
    submodules: Sequence[str],
    root_path: str,
    path_filter: PathFilter,
    determine_locale: DetermineLocale,
    on_error: OnError,
    *,
    fs: FileSystem | None = None,
) -> tuple[str, list[ResourceFile]]:
    """Compile one root into a single chained statement.

    Args:
        root: Root name as configured
        submodules: Submodule names declared before any data
        root_path: Directory to expand
        path_filter: Predicate selecting files to compile
        determine_locale: Locale resolver
        on_error: Receives (path, error) for every skipped file
        fs: File system accessor (default: local disk)

    Returns:
        The statement text and the resources it registers

    Raises:
        OSError: If ``root_path`` or one of its subdirectories cannot be listed
    """
    declared = ",".join(js_string(name) for name in submodules)
    parts = [f"{MODULE_DEFINABLE_PARAM}.define({declared})"]
    resources: list[ResourceFile] = []

    for file_path in expand_directory(root_path, fs=fs):
        if not path_filter(file_path):
            logger.debug("Filtered out %s", file_path)
            continue

        # Custom resolvers may raise anything; every failure stays with its file.
        try:
            resource = load_resource(root, file_path, determine_locale, fs=fs)
            call = resource.render_call()
        except Exception as e:  # noqa: BLE001
            logger.warning("Skipping %s: %s", file_path, e)
            on_error(file_path, e)
            continue

        parts.append(call)
        resources.append(resource)
        logger.debug(
            "Registered %s/%s from %s", resource.target_name, resource.locale, file_path
        )

    return "\n    ".join(parts) + ";", resources


def compile_as_function(
    cwd: str,
    roots: Roots,
    path_filter: PathFilter,
    determine_locale: DetermineLocale,
    on_error: OnError | None = None,
    *,
    fs: FileSystem | None = None,
    name_generator: Callable[[], str] | None = None,
) -> CompilationResult:
    """Compile all roots into one generated registration function.

    Args:
        cwd: Directory the root names are relative to
        roots: Root name -> submodule declarations, compiled in mapping order
        path_filter: Predicate selecting files to compile
        determine_locale: Locale resolver
        on_error: Receives (path, error) for every skipped file
        fs: File system accessor (default: local disk)
        name_generator: Function name source

    Returns:
        CompilationResult with the function source, per-root statements,
        registered resources and per-file diagnostics

    Raises:
        OSError: If a root directory cannot be listed

    Example:
        >>> from localepack.filesystem import MemoryFileSystem
        >>> from localepack.locale_utils import default_determine_locale
        >>> fs = MemoryFileSystem({"/app/locales/en/a.json": '{"hi": "Hi"}'})
        >>> result = compile_as_function(
        ...     "/app", {"locales": ["app"]}, lambda p: True, default_determine_locale, fs=fs
        ... )
        >>> result.statements[0]
        'modDef.define(\\'app\\')\\n    .defines(\\'a\\', \\'en\\', {"hi":"Hi"});'
    """
    diagnostics: list[ResourceDiagnostic] = []

    def record_error(file_path: str, error: Exception) -> None:
        diagnostics.append(ResourceDiagnostic.from_error(file_path, error))
        if on_error is not None:
            on_error(file_path, error)

    statements: list[str] = []
    resources: list[ResourceFile] = []
    for root, submodules in roots.items():
        root_path = os.path.join(cwd, root)
        try:
            statement, root_resources = compile_root(
                root,
                submodules,
                root_path,
                path_filter,
                determine_locale,
                record_error,
                fs=fs,
            )
        except OSError as e:
            logger.error("Cannot scan root %s: %s", root_path, e)
            raise
        statements.append(statement)
        resources.extend(root_resources)

    result = build_function(
        statements,
        name_generator=name_generator,
        resources=resources,
        diagnostics=diagnostics,
    )
    logger.info(
        "Compiled %s: %d roots, %d resources, %d errors",
        result.name,
        len(statements),
        len(resources),
        len(diagnostics),
    )
    return result
