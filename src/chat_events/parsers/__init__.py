"""Line grammar dispatch for chat export headers."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from .line_match import LineMatch, extract_attachments
from .parser_bracketed import match as _match_bracketed
from .parser_dashed import match as _match_dashed
from .parser_iso import match as _match_iso

LineGrammar = Callable[[str], Optional[LineMatch]]

# Most structurally specific shapes first; append new dialects at the end.
LINE_GRAMMARS: Tuple[LineGrammar, ...] = (
    _match_bracketed,
    _match_dashed,
    _match_iso,
)


def match_line(
    line: str, grammars: Tuple[LineGrammar, ...] = LINE_GRAMMARS
) -> Optional[LineMatch]:
    """Try each grammar in order and return the first match.

    ``line`` is expected to be normalized already (see
    :func:`chat_events.textloaders.normalize_line`).
    """
    for grammar in grammars:
        found = grammar(line)
        if found is not None:
            return found
    return None


__all__ = [
    "LINE_GRAMMARS",
    "LineGrammar",
    "LineMatch",
    "extract_attachments",
    "match_line",
]
