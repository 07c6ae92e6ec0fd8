"""Grammar for dashed headers: ``D/M/Y, H:MM[:SS] [AM|PM] - Author: text``.

The separator may be an ASCII hyphen, an en dash, or an em dash.
"""

from __future__ import annotations

import re
from typing import Optional

from .line_match import LineMatch, build_match

DIALECT = "dashed"

LINE_RE = re.compile(
    r"^(\d{1,2}/\d{1,2}/\d{2,4},?\s+\d{1,2}:\d{2}(?::\d{2})?\s?"
    r"(?:AM|PM|am|pm)?)\s*[-\u2013\u2014]\s*(.+?)\s*:\s*(.*)$"
)


def match(line: str) -> Optional[LineMatch]:
    """Return the captured header or ``None`` when the line is not dashed."""
    m = LINE_RE.match(line)
    if not m:
        return None
    return build_match(m, DIALECT)
