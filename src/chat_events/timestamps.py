"""Timestamp resolution for chat export line headers.

Chat exports write message times in several shapes. This module turns the
date/time fragment captured by a line grammar into a naive ``datetime``:

* slash dates ``D/M/Y[,] H:MM[:SS][ AM/PM]`` with two- or four-digit years,
  read day first, month second, and
* ISO-style ``YYYY-MM-DD HH:MM:SS``.

No timezone arithmetic is applied. When a fragment cannot be resolved the
current wall-clock time is used instead and the caller is told so.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Optional, Tuple

LOGGER = logging.getLogger(__name__)

PIVOT_YEAR = 50

SLASH_TIMESTAMP_RE = re.compile(
    r"(\d{1,2})/(\d{1,2})/(\d{2,4}),?\s+(\d{1,2}):(\d{2})(?::(\d{2}))?\s?"
    r"(AM|PM|am|pm)?"
)
ISO_TIMESTAMP_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})\s+(\d{2}):(\d{2}):(\d{2})")


def expand_two_digit_year(year: int) -> int:
    """Expand a two-digit year around :data:`PIVOT_YEAR`.

    Years above the pivot land in the 1900s, the pivot itself and below land
    in the 2000s. Years of 100 or more are returned unchanged.
    """

    if year >= 100:
        return year
    return 1900 + year if year > PIVOT_YEAR else 2000 + year


def to_24_hour(hour: int, period: Optional[str]) -> int:
    """Convert a 12-hour clock value to 24-hour notation.

    ``period`` is ``"AM"``/``"PM"`` in any case, or ``None`` for values that
    are already on a 24-hour clock.
    """

    if not period:
        return hour
    marker = period.lower()
    if marker == "pm" and hour < 12:
        return hour + 12
    if marker == "am" and hour == 12:
        return 0
    return hour


def _resolve_slash(match: re.Match[str]) -> datetime:
    day, month, year, hours, minutes, seconds, period = match.groups()
    return datetime(
        expand_two_digit_year(int(year)),
        int(month),
        int(day),
        to_24_hour(int(hours), period),
        int(minutes),
        int(seconds or 0),
    )


def _resolve_iso(match: re.Match[str]) -> datetime:
    year, month, day, hours, minutes, seconds = (int(g) for g in match.groups())
    return datetime(year, month, day, hours, minutes, seconds)


_RESOLVERS = (
    (SLASH_TIMESTAMP_RE, _resolve_slash),
    (ISO_TIMESTAMP_RE, _resolve_iso),
)


def parse_timestamp(text: str) -> Optional[datetime]:
    """Return the instant written in ``text`` or ``None`` when unresolvable.

    Parameters
    ----------
    text:
        Date/time fragment captured from a line header.

    Returns
    -------
    Optional[datetime]
        Naive ``datetime`` when a known format matches and its fields form a
        valid calendar instant; otherwise ``None``.
    """

    for pattern, resolve in _RESOLVERS:
        match = pattern.search(text)
        if not match:
            continue
        try:
            return resolve(match)
        except ValueError as err:
            LOGGER.debug("Invalid timestamp fields in %r: %s", text, err)
    return None


def resolve_timestamp(
    text: str, now: Optional[datetime] = None
) -> Tuple[datetime, bool]:
    """Resolve ``text`` to an instant, falling back to the current time.

    Parameters
    ----------
    text:
        Date/time fragment captured from a line header.
    now:
        Instant used for the fallback. Defaults to ``datetime.now()``.

    Returns
    -------
    Tuple[datetime, bool]
        The instant and whether it was read from ``text`` (``False`` means the
        fallback was used).
    """

    parsed = parse_timestamp(text)
    if parsed is not None:
        return parsed, True
    LOGGER.warning("Unresolvable timestamp %r; using current time", text)
    return (now if now is not None else datetime.now()), False


def format_instant(value: datetime) -> str:
    """Render an instant as an ISO 8601 label with seconds precision."""

    return value.isoformat(timespec="seconds")


__all__ = [
    "PIVOT_YEAR",
    "expand_two_digit_year",
    "to_24_hour",
    "parse_timestamp",
    "resolve_timestamp",
    "format_instant",
]
