"""Date parsing, formatting and fixed-offset timezone shifting.

All instants are timezone-aware ``datetime`` objects in UTC. Naive
``datetime`` values are read as host-local wall-clock time.

Parsing tries, in order:

(a) ``YYYY-MM-DD`` / ``YYYY/MM/DD``            -> UTC midnight
(b) ``DD/MM/YYYY`` then ``MM/DD/YYYY``         -> UTC midnight (day-first wins)
(c) all-digit strings of 10 or 13+ characters  -> epoch seconds / milliseconds
(d) ``dateutil`` generic parse as a fallback; text missing a year, month
    or day ("may", "Sunday", "March 5") is rejected rather than completed
    from the current date

Numbers are epoch milliseconds, except that a number whose decimal text is
exactly 10 digits is read as epoch seconds. This heuristic misreads
millisecond timestamps close to the epoch and second timestamps before
2001-09-09; it is kept as-is.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

import numpy as np
from dateutil import parser as date_parser

__all__ = [
    "convert_to_timezone",
    "format_date",
    "is_valid_date",
    "local_offset",
    "parse_date",
    "to_epoch_ms",
]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_YEAR_FIRST = re.compile(r"^(\d{4})[/-](\d{1,2})[/-](\d{1,2})$", re.ASCII)
_DAY_OR_MONTH_FIRST = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})$", re.ASCII)
_DIGITS = re.compile(r"^\d+$", re.ASCII)

# Plain numbers ("42", "-1,000.5", "3.14") never reach the generic parser,
# which would otherwise read them as a day or a year.
_PLAIN_NUMBER = re.compile(r"^[+-]?[\d,\s]*\.?\d*$", re.ASCII)

_FILL_A = datetime(2000, 1, 1)
_FILL_B = datetime(2001, 2, 2)

_OFFSET = re.compile(r"^([+-])(\d{2}):?(\d{2})?$", re.ASCII)

# Longest tokens first so "yyyy" is never read as two "yy"
_TOKENS = re.compile(r"yyyy|yy|MM|M|dd|d|HH|H|mm|m|ss|s|a|A")


def _number_text(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _from_epoch_ms(ms: float) -> datetime | None:
    try:
        return EPOCH + timedelta(milliseconds=ms)
    except (OverflowError, ValueError):
        return None


def _from_number(value: float) -> datetime | None:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    ms = value * 1000 if len(_number_text(value)) == 10 else value
    return _from_epoch_ms(ms)


def _utc_midnight(year: int, month: int, day: int) -> datetime | None:
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None


def _expand_year(text: str) -> int:
    return int(f"20{text}") if len(text) == 2 else int(text)


def _as_utc(value: datetime) -> datetime:
    # astimezone() reads naive values as host-local time
    return value.astimezone(timezone.utc)


def _from_datetime64(value: np.datetime64) -> datetime | None:
    if np.isnat(value):
        return None
    ms = int(value.astype("datetime64[ms]").astype(np.int64))
    return _from_epoch_ms(ms)


def _parse_complete(text: str) -> datetime | None:
    # Two different fill-in dates only agree when the text names the full date
    try:
        first = date_parser.parse(text, default=_FILL_A)
        second = date_parser.parse(text, default=_FILL_B)
    except (ValueError, OverflowError):
        return None
    if first != second:
        return None
    return _as_utc(first)


def _parse_string(text: str) -> datetime | None:
    text = text.strip()
    if not text:
        return None

    match = _YEAR_FIRST.match(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        parsed = _utc_midnight(year, month, day)
        if parsed is not None:
            return parsed

    match = _DAY_OR_MONTH_FIRST.match(text)
    if match:
        first, second, year_text = match.groups()
        year = _expand_year(year_text)
        parsed = _utc_midnight(year, int(second), int(first))
        if parsed is None:
            parsed = _utc_midnight(year, int(first), int(second))
        if parsed is not None:
            return parsed

    if _DIGITS.match(text):
        if len(text) == 10:
            return _from_epoch_ms(int(text) * 1000)
        if len(text) >= 13:
            return _from_epoch_ms(int(text))
        return None

    if _PLAIN_NUMBER.match(text):
        return None

    return _parse_complete(text)


def parse_date(value: Any) -> datetime | None:
    """Resolve a date-like value to an aware UTC ``datetime``.

    Args:
        value: A ``datetime``, ``date``, ``numpy.datetime64``, number
            (epoch milliseconds, or seconds for 10-digit values) or string.

    Returns:
        The parsed instant, or ``None`` when no parsing stage succeeds.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return _utc_midnight(value.year, value.month, value.day)
    if isinstance(value, np.datetime64):
        return _from_datetime64(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        return _from_number(value.item() if isinstance(value, np.generic) else value)
    if isinstance(value, str):
        return _parse_string(value)
    return None


def is_valid_date(value: Any) -> bool:
    """Return True when ``value`` resolves to an instant via ``parse_date``."""
    if not value:
        return False
    return parse_date(value) is not None


def to_epoch_ms(instant: datetime) -> int:
    """Milliseconds since the Unix epoch for an aware or naive ``datetime``."""
    delta = _as_utc(instant) - EPOCH
    return delta // timedelta(milliseconds=1)


def local_offset(instant: datetime) -> timedelta:
    """UTC offset of the host's local timezone at ``instant``."""
    offset = instant.astimezone().utcoffset()
    return offset if offset is not None else timedelta(0)


def _pad(n: int) -> str:
    return f"{n:02d}"


def _iso(instant: datetime) -> str:
    utc = _as_utc(instant)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_date(instant: Any, fmt: str = "iso") -> str | int | None:
    """Render an instant in the requested representation.

    Args:
        instant: The ``datetime`` to format. Anything else yields ``None``.
        fmt:     ``"timestamp"`` (epoch milliseconds), ``"iso"`` (UTC ISO 8601
            with milliseconds), one of the shortcuts ``YYYY-MM-DD``,
            ``DD/MM/YYYY``, ``MM/DD/YYYY``, or a template over the tokens
            ``yyyy yy MM M dd d HH H mm m ss s a A``. Shortcuts and templates
            use host-local date/time components.

    Returns:
        The formatted value, or ``None`` for an invalid instant.
    """
    if not isinstance(instant, datetime):
        return None
    if fmt == "timestamp":
        return to_epoch_ms(instant)
    if fmt == "iso":
        return _iso(instant)

    local = instant.astimezone()
    year, month, day = f"{local.year:04d}", _pad(local.month), _pad(local.day)
    if fmt == "YYYY-MM-DD":
        return f"{year}-{month}-{day}"
    if fmt == "DD/MM/YYYY":
        return f"{day}/{month}/{year}"
    if fmt == "MM/DD/YYYY":
        return f"{month}/{day}/{year}"

    values = {
        "yyyy": str(local.year),
        "yy": str(local.year)[-2:],
        "MM": _pad(local.month),
        "M": str(local.month),
        "dd": _pad(local.day),
        "d": str(local.day),
        "HH": _pad(local.hour),
        "H": str(local.hour),
        "mm": _pad(local.minute),
        "m": str(local.minute),
        "ss": _pad(local.second),
        "s": str(local.second),
        "a": "am" if local.hour < 12 else "pm",
        "A": "AM" if local.hour < 12 else "PM",
    }
    return _TOKENS.sub(lambda m: values[m.group(0)], fmt)


def convert_to_timezone(instant: datetime, tz: str) -> datetime:
    """Shift an instant by a fixed offset.

    ``"utc"`` relabels the host-local wall clock as UTC, ``"local"`` is the
    inverse shift, and ``±HH[:]MM`` shifts by that offset combined with the
    host-local offset. Any other ``tz`` returns ``instant`` unchanged; no
    timezone database is consulted.
    """
    if tz == "utc":
        return instant - local_offset(instant)
    if tz == "local":
        return instant + local_offset(instant)

    match = _OFFSET.match(tz)
    if match:
        sign, hours, minutes = match.groups()
        offset = timedelta(hours=int(hours), minutes=int(minutes or "0"))
        signed = offset if sign == "+" else -offset
        return instant - local_offset(instant) - signed

    return instant
