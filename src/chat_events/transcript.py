"""Turn raw chat export text into an ordered list of messages.

Each physical line is either a new message header (recognized by one of the
line grammars), a continuation of the message above it, a system notice, or
an unparseable line. The scan is a fold over ``(line_index, line)`` pairs:
the accumulator carries the finished messages, the message still being
assembled, and the error bookkeeping used for the quality gate.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from functools import partial, reduce
from typing import List, NamedTuple, Optional, Tuple

from .config import MAX_FAILED_SAMPLES
from .parsers import LineMatch, match_line
from .textloaders import normalize_line
from .timestamps import resolve_timestamp

SYSTEM_NOTICE_PREFIX = "\u200e"
FAILED_LINE_EXCERPT = 100

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Message:
    """One chat message reassembled from its header and continuation lines."""

    id: str
    timestamp: datetime
    author: str
    text: str
    attachments: Tuple[str, ...]
    raw_line: str
    line_index: int
    timestamp_resolved: bool = True
    dialect: str = ""


@dataclass(frozen=True)
class FailedLine:
    """Diagnostic sample of a line that matched no grammar."""

    line_index: int
    excerpt: str

    def label(self) -> str:
        """Return the ``"{line_index}: {excerpt}"`` form used in reports."""
        return f"{self.line_index}: {self.excerpt}"


@dataclass(frozen=True)
class ParseQuality:
    """Counts describing how much of a transcript the grammars recognized."""

    parsed_count: int
    error_count: int
    failed_lines: Tuple[FailedLine, ...] = ()
    unresolved_timestamps: int = 0

    @property
    def attempted(self) -> int:
        return self.parsed_count + self.error_count

    @property
    def success_rate(self) -> float:
        """Parsed share of attempted lines; ``1.0`` when nothing was attempted."""
        if self.attempted == 0:
            return 1.0
        return self.parsed_count / self.attempted


@dataclass(frozen=True)
class ParsedTranscript:
    messages: Tuple[Message, ...]
    quality: ParseQuality


class _Pending(NamedTuple):
    header: LineMatch
    line_index: int
    raw_line: str
    timestamp: datetime
    resolved: bool
    continuation: List[str]


class _FoldState(NamedTuple):
    # messages and failed_lines are append-only arenas shared across steps
    messages: List[Message]
    pending: Optional[_Pending]
    error_count: int
    failed_lines: List[FailedLine]
    unresolved: int


def split_lines(text: str) -> List[str]:
    """Split ``text`` on any newline convention, keeping empty lines."""
    return _LINE_BREAK_RE.split(text)


def _finish(pending: _Pending) -> Message:
    tail = "".join("\n" + line for line in pending.continuation)
    header = pending.header
    return Message(
        id=f"msg_{pending.line_index}",
        timestamp=pending.timestamp,
        author=header.author,
        text=header.text + tail,
        attachments=header.attachments,
        raw_line=pending.raw_line + tail,
        line_index=pending.line_index,
        timestamp_resolved=pending.resolved,
        dialect=header.dialect,
    )


def _flush(state: _FoldState) -> _FoldState:
    if state.pending is None:
        return state
    state.messages.append(_finish(state.pending))
    return state._replace(pending=None)


def _step(
    state: _FoldState,
    indexed_line: Tuple[int, str],
    *,
    max_failed_samples: int,
    now: Optional[datetime],
) -> _FoldState:
    line_index, raw = indexed_line
    line = raw.strip()
    if not line:
        return state

    header = match_line(normalize_line(line))
    if header is not None:
        timestamp, resolved = resolve_timestamp(header.timestamp_text, now=now)
        state = _flush(state)
        return state._replace(
            pending=_Pending(header, line_index, line, timestamp, resolved, []),
            unresolved=state.unresolved + (0 if resolved else 1),
        )

    if state.pending is not None:
        state.pending.continuation.append(line)
        return state

    if line.startswith(SYSTEM_NOTICE_PREFIX):
        return state

    if len(state.failed_lines) < max_failed_samples:
        state.failed_lines.append(FailedLine(line_index, line[:FAILED_LINE_EXCERPT]))
    return state._replace(error_count=state.error_count + 1)


def parse_transcript(
    text: str,
    *,
    max_failed_samples: int = MAX_FAILED_SAMPLES,
    now: Optional[datetime] = None,
) -> ParsedTranscript:
    """Parse a chat export into messages plus parse-quality counters.

    Parameters
    ----------
    text:
        Full transcript text.
    max_failed_samples:
        Number of unparseable lines kept as diagnostic samples.
    now:
        Instant used for headers whose timestamp cannot be resolved. Defaults
        to the wall clock at the time each such header is read.

    Returns
    -------
    ParsedTranscript
        Messages in file order and the :class:`ParseQuality` of the run.
    """

    initial = _FoldState(
        messages=[], pending=None, error_count=0, failed_lines=[], unresolved=0
    )
    step = partial(_step, max_failed_samples=max_failed_samples, now=now)
    state = _flush(reduce(step, enumerate(split_lines(text)), initial))
    quality = ParseQuality(
        parsed_count=len(state.messages),
        error_count=state.error_count,
        failed_lines=tuple(state.failed_lines),
        unresolved_timestamps=state.unresolved,
    )
    return ParsedTranscript(messages=tuple(state.messages), quality=quality)
