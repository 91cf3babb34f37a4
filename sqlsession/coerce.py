"""Conversions from decoded column values to the typed getters' results.

The rules follow SQLite's ``sqlite3_column_*`` accessors, so every bundled
driver reads a value the same way no matter how it travelled:

- NULL reads as the type's zero value
- text is parsed from its longest numeric prefix (``"12abc"`` is 12)
- reals are truncated toward zero and saturate at the 64-bit limits
- 32-bit reads keep the low 32 bits of the 64-bit value
"""

from typing import Optional
import math
import re

from .result import Value

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_NUMERIC_PREFIX = re.compile(rb"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INTEGER = re.compile(rb"[+-]?\d+")

def _numeric_prefix(value: bytes) -> Optional[bytes]:
    match = _NUMERIC_PREFIX.match(value)
    return match.group(1) if match else None

def _as_bytes(value: Value) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode()
    if value is None:
        return b""
    return str(value).encode()

def _wrap(value: int, bits: int) -> int:
    half = 1 << (bits - 1)
    return ((value + half) % (1 << bits)) - half

def _real_to_int64(value: float) -> int:
    if math.isnan(value):
        return 0
    if value <= INT64_MIN:
        return INT64_MIN
    if value >= INT64_MAX:
        return INT64_MAX
    return int(value)

def to_int64(value: Value) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return _wrap(value, 64)
    if isinstance(value, float):
        return _real_to_int64(value)
    prefix = _numeric_prefix(_as_bytes(value))
    if prefix is None:
        return 0
    if _INTEGER.fullmatch(prefix):
        return max(INT64_MIN, min(INT64_MAX, int(prefix)))
    return _real_to_int64(float(prefix))

def to_int32(value: Value) -> int:
    return _wrap(to_int64(value), 32)

def to_float(value: Value) -> float:
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    prefix = _numeric_prefix(_as_bytes(value))
    if prefix is None:
        return 0.0
    return float(prefix)

def to_bool(value: Value) -> bool:
    return to_int64(value) != 0

def to_text(value: Value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)

def to_blob(value: Value) -> bytes:
    return _as_bytes(value)
