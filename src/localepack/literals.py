"""Structured data to JavaScript source literal encoding.

Parsed resource content crosses into generated source text here, so all
escaping lives in one place:

    js_string   str -> single-quoted JavaScript string literal
    js_literal  JSON value -> JavaScript expression literal
    parse_json  resource text -> JSON value (strict)

JSON text is a valid JavaScript expression except for the raw line
separators U+2028 and U+2029, which pre-ES2019 engines reject inside
string literals; both encoders escape them.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from localepack.constants import RESOURCE_ENCODING

if TYPE_CHECKING:
    from localepack.types import StructuredData

__all__ = [
    "js_literal",
    "js_string",
    "parse_json",
]

_LINE_SEPARATORS = str.maketrans({"\u2028": "\\u2028", "\u2029": "\\u2029"})


def js_string(text: str) -> str:
    """Encode ``text`` as a single-quoted JavaScript string literal.

    Raises:
        TypeError: If ``text`` is not a string

    Example:
        >>> js_string("it's")
        "'it\\\\'s'"
    """
    if not isinstance(text, str):
        msg = f"js_string expects str, got {type(text).__name__}"
        raise TypeError(msg)
    # JSON escapes every '"' as '\"', so each occurrence of that pair is an
    # escaped quote and can be unescaped without a tokenizer.
    body = json.dumps(text, ensure_ascii=False)[1:-1]
    body = body.replace('\\"', '"').replace("'", "\\'")
    return f"'{body.translate(_LINE_SEPARATORS)}'"


def js_literal(value: StructuredData) -> str:
    """Encode a JSON value as a compact JavaScript literal.

    Object key order is preserved, so equal input produces identical text.

    Raises:
        ValueError: If ``value`` contains NaN, an infinity, or a lone surrogate
        TypeError: If ``value`` contains a non-JSON type
    """
    text = json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    try:
        text.encode(RESOURCE_ENCODING)
    except UnicodeEncodeError as e:
        msg = f"Value contains a lone surrogate at offset {e.start}"
        raise ValueError(msg) from e
    return text.translate(_LINE_SEPARATORS)


def _reject_constant(name: str) -> StructuredData:
    msg = f"Invalid JSON constant: {name}"
    raise ValueError(msg)


def parse_json(text: str) -> StructuredData:
    """Parse resource text as strict JSON.

    Unlike ``json.loads`` defaults, the non-standard constants ``NaN``,
    ``Infinity`` and ``-Infinity`` are rejected. A leading UTF-8 byte order
    mark is ignored.

    Raises:
        json.JSONDecodeError: If ``text`` is not valid JSON
        ValueError: If ``text`` uses a non-standard constant
    """
    return json.loads(text.removeprefix("\ufeff"), parse_constant=_reject_constant)
