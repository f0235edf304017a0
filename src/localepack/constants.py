"""Shared constants for localepack.

Centralizes the fixed strings that appear in generated code and in host
module identifiers, so compiler, renderers, and plugin agree on them.

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Resource discovery
    "DATA_FILE_EXTENSION",
    "RESOURCE_ENCODING",
    # Host integration
    "PLUGIN_NAME",
    "VIRTUAL_PREFIX",
    # Generated code
    "FUNCTION_NAME_PREFIX",
    "FUNCTION_NAME_RANDOM_RANGE",
    "MAX_NAME_ATTEMPTS",
    "MODULE_DEFINABLE_PARAM",
    # Type declaration stub
    "DEFAULT_DTS_TYPE_MODULE",
    "DEFAULT_DTS_TYPE_NAME",
]

# ============================================================================
# RESOURCE DISCOVERY
# ============================================================================

DATA_FILE_EXTENSION: str = ".json"
"""Only files ending in this suffix are considered translation resources."""

RESOURCE_ENCODING: str = "utf-8"

# ============================================================================
# HOST INTEGRATION
# ============================================================================

PLUGIN_NAME: str = "localepack"

# NUL cannot appear in a real file path, so prefixed ids never collide with
# ids produced by the host's own resolver.
VIRTUAL_PREFIX: str = "\0localepack:"

# ============================================================================
# GENERATED CODE
# ============================================================================

FUNCTION_NAME_PREFIX: str = "__localepack_compiled_"

FUNCTION_NAME_RANDOM_RANGE: int = 10000
"""Upper bound (exclusive) of the random suffix in generated function names."""

MAX_NAME_ATTEMPTS: int = 100
"""Retries before FunctionNameGenerator gives up on finding an unused name."""

MODULE_DEFINABLE_PARAM: str = "modDef"

# ============================================================================
# TYPE DECLARATION STUB
# ============================================================================

DEFAULT_DTS_TYPE_MODULE: str = "@xirelogy/xwts"
DEFAULT_DTS_TYPE_NAME: str = "XwI18nModuleDefinable"
