"""Duration parsing and formatting.

Durations are parsed exactly into integer nanoseconds (``Decimal`` arithmetic,
no float rounding) and handed to callers as :class:`datetime.timedelta`.
"""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation

_NANOS_PER_UNIT: dict[str, int] = {
    "ns": 1,
    "nano": 1,
    "nanos": 1,
    "nanosecond": 1,
    "nanoseconds": 1,
    "us": 1_000,
    "micro": 1_000,
    "micros": 1_000,
    "microsecond": 1_000,
    "microseconds": 1_000,
    "ms": 1_000_000,
    "milli": 1_000_000,
    "millis": 1_000_000,
    "millisecond": 1_000_000,
    "milliseconds": 1_000_000,
    "s": 1_000_000_000,
    "second": 1_000_000_000,
    "seconds": 1_000_000_000,
    "m": 60_000_000_000,
    "minute": 60_000_000_000,
    "minutes": 60_000_000_000,
    "h": 3_600_000_000_000,
    "hour": 3_600_000_000_000,
    "hours": 3_600_000_000_000,
    "d": 86_400_000_000_000,
    "day": 86_400_000_000_000,
    "days": 86_400_000_000_000,
}

_DURATION = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?)\s*([A-Za-z]*)\s*$")

# Largest unit first; used when rendering.
_FORMAT_UNITS = (("d", 86_400_000_000), ("h", 3_600_000_000), ("m", 60_000_000), ("s", 1_000_000), ("ms", 1_000))


def parse_duration_nanos(text: str) -> int:
    """Parse *text* into nanoseconds, raising :class:`ValueError` when malformed.

    A missing unit means milliseconds.

    Examples
    --------
    >>> parse_duration_nanos("60s")
    60000000000
    >>> parse_duration_nanos("1.5 ms")
    1500000
    >>> parse_duration_nanos("250")
    250000000
    """

    match = _DURATION.match(text)
    if match is None:
        raise ValueError(f"malformed duration {text!r}")
    number, unit = match.groups()
    factor = _NANOS_PER_UNIT.get(unit or "ms")
    if factor is None:
        raise ValueError(f"unknown duration unit {unit!r} in {text!r}")
    try:
        return int(Decimal(number) * factor)
    except InvalidOperation as exc:  # pragma: no cover - the regex already guards the number
        raise ValueError(f"malformed duration {text!r}") from exc


def nanos_to_timedelta(nanos: int) -> timedelta:
    """Convert nanoseconds to :class:`timedelta`, truncating toward zero below a microsecond.

    >>> nanos_to_timedelta(1_500)
    datetime.timedelta(microseconds=1)
    """

    micros = abs(nanos) // 1_000
    return timedelta(microseconds=micros if nanos >= 0 else -micros)


def parse_duration(text: str) -> timedelta:
    """Parse *text* straight into a :class:`timedelta`.

    >>> parse_duration("5s")
    datetime.timedelta(seconds=5)
    """

    return nanos_to_timedelta(parse_duration_nanos(text))


def format_duration(value: timedelta) -> str:
    """Render *value* using the largest unit that represents it exactly.

    >>> format_duration(timedelta(seconds=60)), format_duration(timedelta(milliseconds=1500))
    ('1m', '1500ms')
    >>> format_duration(timedelta(0))
    '0ms'
    """

    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0ms"
    for unit, size in _FORMAT_UNITS:
        if micros % size == 0:
            return f"{micros // size}{unit}"
    return f"{micros}us"
