"""Shared result type and capture cleanup for line grammars."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from ..textloaders import strip_direction_marks

ATTACHMENT_RE = re.compile(r"<attached: (.+?)>")


@dataclass(frozen=True)
class LineMatch:
    """Header captured from one physical line.

    ``text`` keeps any ``<attached: ...>`` markers; the file names are also
    listed in ``attachments`` in order of appearance.
    """

    timestamp_text: str
    author: str
    text: str
    attachments: Tuple[str, ...]
    dialect: str


def extract_attachments(text: str) -> Tuple[str, ...]:
    """Return file names of every ``<attached: name>`` marker in ``text``."""
    return tuple(ATTACHMENT_RE.findall(text))


def build_match(match: re.Match[str], dialect: str) -> LineMatch:
    """Build a :class:`LineMatch` from a ``(timestamp, author, text)`` match."""
    timestamp_text, author_raw, text_raw = match.groups()
    author = strip_direction_marks(author_raw).strip()
    text = strip_direction_marks(text_raw).strip()
    return LineMatch(
        timestamp_text=timestamp_text.strip(),
        author=author,
        text=text,
        attachments=extract_attachments(text),
        dialect=dialect,
    )
