"""localepack - compile JSON locale trees into an i18n registration module.

Walks configured root directories for per-locale JSON files and generates
one JavaScript function that, given a module-definable, declares each
root's submodules and registers every translation under its locale.

Public API:
    compile_as_function - Compile roots into a CompilationResult
    localepack - Create a build plugin from keyword options
    LocalePackPlugin - Host plugin (resolve_id / load / generate_bundle)
    PluginOptions - Validated plugin configuration
    build - Write file-mode assets to a directory
    load_options - Read PluginOptions from TOML/JSON/pyproject.toml
    create_filter - Include/exclude path predicate
    default_determine_locale - Locale from the parent directory name

Exceptions:
    LocalePackError - Base exception class
    ConfigurationError - Invalid options
    ResourceError - Single-file failure (isolated during compilation)
    CompilationError - Strict mode failure

Submodules:
    localepack.output - Output targets and asset renderers
    localepack.filesystem - File system accessor protocol and implementations
    localepack.locale_utils - Locale policies and Babel-backed validation
"""

from .build import build
from .compiler import ResourceFile, compile_as_function
from .config import load_options
from .diagnostics import (
    CompilationError,
    ConfigurationError,
    LocalePackError,
    LocaleResolutionError,
    ResourceDiagnostic,
    ResourceError,
    ResourceParseError,
)
from .factory import CompilationResult
from .filtering import create_filter
from .locale_utils import default_determine_locale, locale_from_filename
from .plugin import LocalePackPlugin, PluginOptions, localepack

# Version information - Auto-populated from package metadata
try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _get_version
except ImportError as e:
    raise RuntimeError("importlib.metadata unavailable - Python version too old? " + str(e)) from e

try:
    __version__ = _get_version("localepack")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CompilationError",
    "CompilationResult",
    "ConfigurationError",
    "LocalePackError",
    "LocalePackPlugin",
    "LocaleResolutionError",
    "PluginOptions",
    "ResourceDiagnostic",
    "ResourceError",
    "ResourceFile",
    "ResourceParseError",
    "__version__",
    "build",
    "compile_as_function",
    "create_filter",
    "default_determine_locale",
    "load_options",
    "locale_from_filename",
    "localepack",
]
