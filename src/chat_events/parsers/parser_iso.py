"""Grammar for ISO headers: ``YYYY-MM-DD HH:MM:SS - Author: text``."""

from __future__ import annotations

import re
from typing import Optional

from .line_match import LineMatch, build_match

DIALECT = "iso"

LINE_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2})\s*[-\u2013\u2014]\s*(.+?)\s*:\s*(.*)$"
)


def match(line: str) -> Optional[LineMatch]:
    """Return the captured header or ``None`` when the line is not ISO-dashed."""
    m = LINE_RE.match(line)
    if not m:
        return None
    return build_match(m, DIALECT)
