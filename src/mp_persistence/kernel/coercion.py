"""Kernel coercion – strict text-to-scalar parsing.

Shared by the filter parser and the settings loaders.  Each parser raises
``ValueError`` for text that does not fit, never a silent default.
"""
from __future__ import annotations

import math
import re

TRUE_WORDS = frozenset({"true", "1", "yes", "y", "on"})
FALSE_WORDS = frozenset({"false", "0", "no", "n", "off"})

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def parse_bool(raw: str) -> bool:
    word = raw.strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def parse_int(raw: str) -> int:
    """Plain decimal digits with an optional sign; no ``_`` separators."""
    text = raw.strip()
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"not an integer: {raw!r}")
    return int(text)


def parse_float(raw: str) -> float:
    """Finite decimal number; ``nan``, ``inf`` and ``_`` separators are rejected."""
    text = raw.strip()
    if not _DECIMAL.fullmatch(text):
        raise ValueError(f"not a decimal number: {raw!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"out of range: {raw!r}")
    return value


__all__ = ["FALSE_WORDS", "TRUE_WORDS", "parse_bool", "parse_float", "parse_int"]
