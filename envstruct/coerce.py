"""
envstruct.coerce
----------------

String to scalar conversions used by the parser, plus the separator search
shared by map and sequence values.

Each function takes the raw string and returns the converted value or raises
a ``ParseFailure`` subclass naming the offending input.
"""

import re
from datetime import datetime, timedelta
from typing import List, Optional
from urllib.parse import ParseResult, urlparse

from .exceptions import BadFormat, ParseFailure, TimeFormatExhausted
from .kinds import IntBits

# Tried in order; the first one that splits the string wins.
SEPARATORS = (",", ";", "-", " ")

# Tried in order; the first layout that parses wins.
TIME_LAYOUTS = (
    "%Y-%m-%d",                    # date only
    "%H:%M:%S",                    # time only
    "%Y-%m-%d %H:%M:%S",           # date time
    "%Y-%m-%d %H:%M:%S%z",         # date time with offset
    "%I:%M%p",                     # kitchen
    "%Y-%m-%dT%H:%M:%S%z",         # RFC 3339
    "%Y-%m-%dT%H:%M:%S.%f%z",      # RFC 3339 with fraction
    "%a, %d %b %Y %H:%M:%S %Z",    # RFC 1123
    "%a, %d %b %Y %H:%M:%S %z",    # RFC 1123 numeric zone
    "%a %b %d %H:%M:%S %Y",        # ANSI C
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%a %b %d %H:%M:%S %Z %Y",     # unix date
    "%a %b %d %H:%M:%S %z %Y",     # ruby date
)

TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")
# no surrounding whitespace, no digit underscores
_FLOAT = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?|[+-]?(inf|infinity|nan)", re.I)

# microseconds per unit
_DURATION_UNITS = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,  # U+00B5 micro sign
    "μs": 1,  # U+03BC greek mu
    "ms": 1000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}
_DURATION_PART = r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
_DURATION = re.compile(rf"[+-]?(?:{_DURATION_PART})+")
_DURATION_PARTS = re.compile(_DURATION_PART)


def split_values(value: str) -> List[str]:
    """
    Split `value` on the first separator of ``SEPARATORS`` that occurs in it.

    A string without any separator comes back as a one-element list.

    Examples:
        >>> split_values("a,b c")
        ['a', 'b c']
        >>> split_values("single")
        ['single']
    """
    for sep in SEPARATORS:
        parts = value.split(sep)
        if len(parts) > 1:
            return parts
    return [value]


def split_pairs(value: str) -> List[str]:
    """
    Split a map literal into ``key:value`` tokens.

    A separator only counts when every piece it produces holds a colon, so
    ``"1:Hello world"`` stays a single pair. Without such a separator, a
    string that holds a colon is one pair; anything else falls back to
    ``split_values`` so the malformed token can be reported.
    """
    for sep in SEPARATORS:
        parts = value.split(sep)
        if len(parts) > 1 and all(":" in part for part in parts):
            return parts
    if ":" in value:
        return [value]
    return split_values(value)


def parse_int(value: str, bits: Optional[IntBits] = None) -> int:
    """Parse a base-10 signed integer, bounded by `bits` when given."""
    if not _SIGNED.fullmatch(value):
        raise BadFormat(f"{value!r} is not a base-10 integer", value=value, kind="int")
    return _check_width(int(value), value, bits)


def parse_uint(value: str, bits: Optional[IntBits] = None) -> int:
    """Parse a base-10 unsigned integer, bounded by `bits` when given."""
    if not _UNSIGNED.fullmatch(value):
        raise BadFormat(f"{value!r} is not a base-10 unsigned integer", value=value, kind="uint")
    return _check_width(int(value), value, bits)


def _check_width(n: int, value: str, bits: Optional[IntBits]) -> int:
    if bits is not None and not bits.min <= n <= bits.max:
        raise BadFormat(f"{value!r} is out of range for a {bits.bits}-bit integer", value=value, kind="int")
    return n


def parse_float(value: str) -> float:
    if not _FLOAT.fullmatch(value):
        raise BadFormat(f"{value!r} is not a decimal number", value=value, kind="float")
    try:
        return float(value)
    except ValueError as e:
        raise BadFormat(f"{value!r} is not a decimal number", value=value, kind="float") from e


def parse_bool(value: str) -> bool:
    """Accept ``1 t T TRUE true True`` and ``0 f F FALSE false False``."""
    if value in TRUE_STRINGS:
        return True
    if value in FALSE_STRINGS:
        return False
    raise BadFormat(f"{value!r} is not a boolean", value=value, kind="bool")


def parse_time(value: str) -> datetime:
    """
    Parse `value` with the first matching layout of ``TIME_LAYOUTS``.

    Raises:
        TimeFormatExhausted: No layout matched; carries every per-layout error.
    """
    errors = []
    for layout in TIME_LAYOUTS:
        try:
            return datetime.strptime(value, layout)
        except ValueError as e:
            errors.append(e)
    raise TimeFormatExhausted(value, errors)


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration such as ``"300ms"``, ``"-1.5h"`` or ``"2h45m"``.

    Valid units are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``.
    ``"0"`` is the only value accepted without a unit. Precision below one
    microsecond is lost.
    """
    if value in ("0", "+0", "-0"):
        return timedelta(0)
    if not _DURATION.fullmatch(value):
        raise ParseFailure(f"invalid duration {value!r}")

    micros = 0.0
    for number, unit in _DURATION_PARTS.findall(value):
        micros += float(number) * _DURATION_UNITS[unit]
    if value.startswith("-"):
        micros = -micros
    try:
        return timedelta(microseconds=micros)
    except OverflowError as e:
        raise ParseFailure(f"invalid duration {value!r}") from e


def parse_url(value: str) -> ParseResult:
    """Parse `value` with ``urlparse``; an invalid host or port is an error."""
    try:
        url = urlparse(value)
        url.port  # validates the port
    except ValueError as e:
        raise ParseFailure(f"invalid URL {value!r}: {e}") from e
    return url
