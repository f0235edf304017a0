"""localepack exception hierarchy and per-file diagnostics.

Hierarchy:
    LocalePackError (base)
    ├─ ConfigurationError (invalid options; fatal at construction)
    ├─ ResourceError (one resource file failed; isolated by the compiler)
    │  ├─ LocaleResolutionError (no locale could be determined)
    │  └─ ResourceParseError (content is not strict JSON)
    └─ CompilationError (strict mode: pass finished with per-file failures)

Root-level I/O errors are not part of this hierarchy: the OSError raised
while listing a root directory propagates to the caller unchanged.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "CompilationError",
    "ConfigurationError",
    "LocalePackError",
    "LocaleResolutionError",
    "ResourceDiagnostic",
    "ResourceError",
    "ResourceParseError",
]


class LocalePackError(Exception):
    """Base exception for all localepack errors."""


class ConfigurationError(LocalePackError, ValueError):
    """Invalid plugin configuration.

    Raised synchronously while options are constructed, before any
    compilation runs. Never recovered.
    """


class ResourceError(LocalePackError):
    """Failure confined to a single resource file.

    Attributes:
        path: Path of the offending resource file
    """

    def __init__(self, message: str, *, path: str) -> None:
        """Initialize ResourceError.

        Args:
            message: Human-readable error description
            path: Path of the offending resource file
        """
        super().__init__(message)
        self.path = path


class LocaleResolutionError(ResourceError):
    """The locale resolver could not determine a locale for a path."""


class ResourceParseError(ResourceError):
    """Resource content is not valid strict JSON."""


class CompilationError(LocalePackError):
    """Compilation produced per-file diagnostics while strict mode is on.

    Attributes:
        diagnostics: Every per-file failure of the pass, in traversal order
    """

    def __init__(self, diagnostics: tuple[ResourceDiagnostic, ...]) -> None:
        """Initialize CompilationError.

        Args:
            diagnostics: Per-file failures collected during the pass
        """
        count = len(diagnostics)
        noun = "resource" if count == 1 else "resources"
        lines = [f"{count} {noun} failed to compile:"]
        lines.extend(f"  {diagnostic.format()}" for diagnostic in diagnostics)
        super().__init__("\n".join(lines))
        self.diagnostics = diagnostics


@dataclass(frozen=True, slots=True)
class ResourceDiagnostic:
    """Immutable record of an isolated per-file failure.

    Attributes:
        path: Path of the file that was skipped
        message: Message of the underlying error
        error: The underlying exception
    """

    path: str
    message: str
    error: Exception

    @classmethod
    def from_error(cls, path: str, error: Exception) -> ResourceDiagnostic:
        """Build a diagnostic from the error passed to an on_error handler."""
        message = str(error) or type(error).__name__
        return cls(path=path, message=message, error=error)

    def format(self) -> str:
        """Return the host-facing message attributed to the file."""
        return f"In {self.path}: {self.message}"
