"""Module factory generation: wrap compiled statements in a named function.

The generated function takes one argument, the module-definable, and
replays every root's statements against it:

    function __localepack_compiled_1718000000000_4821(modDef) {
      modDef.define('app')
        .defines('messages', 'en', {"hello":"Hello"});
    }

Function names combine a millisecond timestamp with a random suffix.
A FunctionNameGenerator also remembers every name it issued and retries
on collision, so names from one generator are unique.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from localepack.constants import (
    FUNCTION_NAME_PREFIX,
    FUNCTION_NAME_RANDOM_RANGE,
    MAX_NAME_ATTEMPTS,
    MODULE_DEFINABLE_PARAM,
)

if TYPE_CHECKING:
    from localepack.compiler import ResourceFile
    from localepack.diagnostics import ResourceDiagnostic

__all__ = [
    "CompilationResult",
    "FunctionNameGenerator",
    "build_function",
    "default_name_generator",
]


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class FunctionNameGenerator:
    """Issues collision-free JavaScript function names.

    Not a cryptographic identifier: the random suffix only disambiguates
    several compiled modules that end up in one build output.

    Args:
        clock: Returns the time component in milliseconds
        rng: Source of the random suffix
    """

    __slots__ = ("_clock", "_issued", "_rng")

    def __init__(
        self,
        *,
        clock: Callable[[], int] = _epoch_millis,
        rng: random.Random | None = None,
    ) -> None:
        self._clock = clock
        self._rng = rng or random.Random()
        self._issued: set[str] = set()

    def __call__(self) -> str:
        """Return a name not issued before by this generator.

        Raises:
            RuntimeError: If no unused name was found after MAX_NAME_ATTEMPTS
        """
        for _ in range(MAX_NAME_ATTEMPTS):
            suffix = self._rng.randrange(FUNCTION_NAME_RANDOM_RANGE)
            name = f"{FUNCTION_NAME_PREFIX}{self._clock()}_{suffix}"
            if name not in self._issued:
                self._issued.add(name)
                return name
        msg = f"Could not generate an unused function name in {MAX_NAME_ATTEMPTS} attempts"
        raise RuntimeError(msg)

    @property
    def issued_count(self) -> int:
        """Number of names issued so far."""
        return len(self._issued)


default_name_generator = FunctionNameGenerator()
"""Process-wide generator used when the caller supplies none."""


@dataclass(frozen=True, slots=True)
class CompilationResult:
    """Immutable result of one compilation pass.

    Attributes:
        name: Generated function name
        code: Complete source of the function definition
        statements: Per-root statement text, in root order. Independent of
            ``name``, so two passes over the same tree compare equal here.
        resources: Every resource registered by the function, in order
        diagnostics: Every per-file failure of the pass, in order
    """

    name: str
    code: str
    statements: tuple[str, ...] = ()
    resources: tuple[ResourceFile, ...] = ()
    diagnostics: tuple[ResourceDiagnostic, ...] = ()

    @property
    def has_errors(self) -> bool:
        """Check if any resource file failed to compile."""
        return len(self.diagnostics) > 0

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"CompilationResult(name={self.name!r}, "
            f"roots={len(self.statements)}, "
            f"resources={len(self.resources)}, "
            f"errors={len(self.diagnostics)})"
        )


def build_function(
    statements: Iterable[str],
    *,
    name_generator: Callable[[], str] | None = None,
    resources: Iterable[ResourceFile] = (),
    diagnostics: Iterable[ResourceDiagnostic] = (),
) -> CompilationResult:
    """Wrap root statements in a uniquely named function definition.

    Args:
        statements: One complete statement per root
        name_generator: Function name source (default: default_name_generator)
        resources: Registered resources, carried into the result
        diagnostics: Per-file failures, carried into the result

    Returns:
        CompilationResult whose ``code`` parses as a standalone definition
    """
    statements = tuple(statements)
    name = (name_generator or default_name_generator)()
    body = "".join(f"  {statement}\n" for statement in statements)
    code = f"function {name}({MODULE_DEFINABLE_PARAM}) {{\n{body}}}"
    return CompilationResult(
        name=name,
        code=code,
        statements=statements,
        resources=tuple(resources),
        diagnostics=tuple(diagnostics),
    )
