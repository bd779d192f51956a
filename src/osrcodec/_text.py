from __future__ import annotations

import math
import re

from .errors import ReplayParseError

I32_MIN = -(1 << 31)
I32_MAX = (1 << 31) - 1
U32_MAX = (1 << 32) - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*(?:[eE][+-]?[0-9]+)?|\.[0-9]+(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def parse_int(text: str, what: str, *, lo: int = I32_MIN, hi: int = I32_MAX) -> int:
    if not _INT_RE.fullmatch(text):
        raise ReplayParseError(f"invalid {what}: {text!r}")
    value = int(text)
    if not lo <= value <= hi:
        raise ReplayParseError(f"invalid {what}: {text!r} out of range [{lo}, {hi}]")
    return value


def parse_float(text: str, what: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ReplayParseError(f"invalid {what}: {text!r}")
    return float(text)


def try_parse_float(text: str) -> float | None:
    if not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


def format_number(value: float) -> str:
    """`1.0` -> `"1"`, `0.8` -> `"0.8"`; integral floats lose their fractional part."""
    value = float(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)
