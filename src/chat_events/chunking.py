"""Month-by-month preview of how many messages a chat export holds.

This is a lightweight pass used before the full pipeline: it only reads the
date of each header line and counts messages per calendar month. It does not
reassemble continuation lines or detect events.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Tuple

import pandas as pd

from .transcript import split_lines

MONTH_NAMES = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

_TIME = r"(\d{1,2}:\d{2}(?::\d{2})?\s*(?:AM|PM|am|pm)?)"
PREVIEW_LINE_PATTERNS = (
    re.compile(
        r"^(\d{1,2}/\d{1,2}/\d{2,4}),?\s+" + _TIME + r"\s*[-\u2013]\s*([^:]+):\s*(.*)$"
    ),
    re.compile(
        r"^\[(\d{1,2}/\d{1,2}/\d{2,4}),?\s+" + _TIME + r"\]\s*([^:]+):\s*(.*)$"
    ),
    re.compile(
        r"^(\d{1,2}/\d{1,2}/\d{2,4})\s+" + _TIME + r"\s*[-\u2013]\s*([^:]+):\s*(.*)$"
    ),
)


@dataclass(frozen=True)
class MonthBucket:
    year: int
    month: int
    label: str
    count: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "year": self.year,
            "month": self.month,
            "label": self.label,
            "count": self.count,
        }


@dataclass(frozen=True)
class MonthPreview:
    buckets: Tuple[MonthBucket, ...]
    total_messages: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "chunks": [bucket.to_dict() for bucket in self.buckets],
            "totalMessages": self.total_messages,
        }


def month_of_header(line: str) -> Tuple[int, int] | None:
    """Return ``(year, month)`` for a header line, or ``None``.

    The month is the second slash field. Four-digit years are taken as
    written; shorter years are offset by 2000. Lines whose month field is not a
    calendar month are skipped.
    """
    for pattern in PREVIEW_LINE_PATTERNS:
        match = pattern.match(line)
        if not match:
            continue
        parts = match.group(1).split("/")
        year = int(parts[2])
        if len(parts[2]) != 4:
            year += 2000
        month = int(parts[1])
        if not 1 <= month <= 12:
            return None
        return year, month
    return None


def preview_month_buckets(text: str) -> MonthPreview:
    """Count header lines per calendar month.

    Parameters
    ----------
    text:
        Raw chat export text.

    Returns
    -------
    MonthPreview
        Buckets sorted by year then month, and the number of headers found.
    """

    months: List[Tuple[int, int]] = []
    for line in split_lines(text):
        if not line.strip():
            continue
        found = month_of_header(line)
        if found is not None:
            months.append(found)

    if not months:
        return MonthPreview(buckets=(), total_messages=0)

    frame = pd.DataFrame(months, columns=["year", "month"])
    counts = frame.groupby(["year", "month"]).size().sort_index()
    buckets = tuple(
        MonthBucket(
            year=int(year),
            month=int(month),
            label=f"{MONTH_NAMES[int(month) - 1]} {int(year)}",
            count=int(count),
        )
        for (year, month), count in counts.items()
    )
    return MonthPreview(buckets=buckets, total_messages=len(months))
