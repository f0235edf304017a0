"""Locale resolution policies and Babel-backed locale validation.

A locale resolver maps a resource file path to the locale tag the file's
content is registered under. Two policies are built in:

    default_determine_locale  locales/fr/messages.json  -> "fr"
    locale_from_filename      locales/messages.fr.json  -> "fr"

Both raise LocaleResolutionError instead of returning a placeholder, so
the compiler reports the file and skips it rather than registering data
under a meaningless locale key.

Python 3.13+.
"""

from __future__ import annotations

import functools
from pathlib import PurePath
from typing import TYPE_CHECKING

from localepack.diagnostics import ConfigurationError, LocaleResolutionError
from localepack.enums import LocalePolicy

if TYPE_CHECKING:
    from babel import Locale

    from localepack.types import DetermineLocale, LocaleCode

__all__ = [
    "clear_locale_cache",
    "default_determine_locale",
    "get_babel_locale",
    "locale_from_filename",
    "normalize_locale",
    "resolver_for_policy",
    "validating_resolver",
]


def default_determine_locale(file_path: str) -> LocaleCode:
    """Return the parent directory name of ``file_path`` as its locale.

    Args:
        file_path: Path of a resource file

    Returns:
        Second-to-last path segment

    Raises:
        LocaleResolutionError: If the path has no parent directory name

    Example:
        >>> default_determine_locale("/app/locales/fr/messages.json")
        'fr'
    """
    parent = PurePath(file_path).parent.name
    if not parent:
        msg = f"Cannot determine locale: '{file_path}' has no parent directory"
        raise LocaleResolutionError(msg, path=file_path)
    return parent


def locale_from_filename(file_path: str) -> LocaleCode:
    """Return the locale embedded as the last stem suffix of ``file_path``.

    Example:
        >>> locale_from_filename("/app/locales/messages.pt-BR.json")
        'pt-BR'

    Raises:
        LocaleResolutionError: If the file stem carries no locale suffix
    """
    stem = PurePath(file_path).stem
    _, dot, locale = stem.rpartition(".")
    if not dot or not locale:
        msg = f"Cannot determine locale: '{file_path}' has no '<name>.<locale>' stem"
        raise LocaleResolutionError(msg, path=file_path)
    return locale


def resolver_for_policy(policy: str) -> DetermineLocale:
    """Look up a built-in resolver by configuration name.

    Raises:
        ConfigurationError: If ``policy`` names no built-in policy
    """
    match policy:
        case LocalePolicy.DIRECTORY:
            return default_determine_locale
        case LocalePolicy.FILENAME:
            return locale_from_filename
        case _:
            choices = ", ".join(repr(str(p)) for p in LocalePolicy)
            msg = f"Unknown locale policy {policy!r}; expected one of {choices}"
            raise ConfigurationError(msg)


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    Example:
        >>> normalize_locale("pt-BR")
        'pt_BR'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def clear_locale_cache() -> None:
    """Clear the get_babel_locale cache."""
    get_babel_locale.cache_clear()


def validating_resolver(resolver: DetermineLocale) -> DetermineLocale:
    """Wrap ``resolver`` so unknown or malformed locale tags are rejected.

    The wrapped resolver returns the tag exactly as ``resolver`` produced
    it; Babel is consulted only to decide whether CLDR knows the locale.

    Example:
        >>> resolve = validating_resolver(default_determine_locale)
        >>> resolve("/app/locales/qq/messages.json")
        Traceback (most recent call last):
        localepack.diagnostics.LocaleResolutionError: Unknown locale 'qq' for '/app/locales/qq/messages.json'
    """
    from babel.core import UnknownLocaleError  # noqa: PLC0415

    @functools.wraps(resolver)
    def resolve(file_path: str) -> LocaleCode:
        locale = resolver(file_path)
        if not isinstance(locale, str) or not locale:
            msg = f"Locale resolver returned {locale!r} for '{file_path}'"
            raise LocaleResolutionError(msg, path=file_path)
        try:
            get_babel_locale(locale)
        except (UnknownLocaleError, ValueError) as e:
            msg = f"Unknown locale '{locale}' for '{file_path}'"
            raise LocaleResolutionError(msg, path=file_path) from e
        return locale

    return resolve
