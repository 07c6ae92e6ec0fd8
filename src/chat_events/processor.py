"""Core pipeline that turns a chat export into messages and detected events.

The pipeline parses the transcript, checks the parse success rate against the
quality gate, segments the messages into bursts, classifies each burst, and
links every message to the event containing it. File-level helpers read an
export from disk, run the pipeline, and write the result artifacts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .assigner import assign_messages
from .classifier import Event, classify_bursts
from .config import DEFAULT_CONFIG, DEFAULT_TIMEZONE, PipelineConfig
from .segmentation import segment_bursts
from .textloaders import InputError, load_transcript
from .timestamps import format_instant
from .transcript import Message, ParseQuality, parse_transcript, split_lines
from .util import write_json, write_messages_jsonl

LOGGER = logging.getLogger(__name__)


class ParseQualityError(Exception):
    """Raised when too few transcript lines match a supported line format."""

    def __init__(
        self,
        quality: ParseQuality,
        sample: List[str],
        threshold: float,
    ) -> None:
        self.quality = quality
        self.sample = sample
        self.threshold = threshold
        super().__init__(
            f"Parse success rate {quality.success_rate:.1%} is below "
            f"{threshold:.0%}; re-export the chat in a supported format"
        )

    @property
    def success_rate(self) -> float:
        return self.quality.success_rate

    @property
    def failed_lines(self) -> List[str]:
        return [failed.label() for failed in self.quality.failed_lines]

    def to_dict(self) -> Dict[str, Any]:
        """Return the diagnostic payload reported for a rejected transcript."""
        return {
            "error": str(self),
            "parseSuccessRate": self.success_rate,
            "sample": self.sample,
            "failedLines": self.failed_lines,
        }


@dataclass(frozen=True)
class PipelineResult:
    """Messages, events, and message-to-event links for one transcript."""

    messages: Tuple[Message, ...]
    events: Tuple[Event, ...]
    assignments: Tuple[Optional[int], ...]
    quality: ParseQuality
    timezone: str = DEFAULT_TIMEZONE

    @property
    def total_messages(self) -> int:
        return len(self.messages)

    @property
    def events_detected(self) -> int:
        return len(self.events)

    def message_records(self) -> List[Dict[str, Any]]:
        """Serialize messages in file order with their event index."""
        return [
            {
                "messageId": message.id,
                "datetimeISO": format_instant(message.timestamp),
                "author": message.author,
                "text": message.text,
                "attachments": list(message.attachments),
                "rawLine": message.raw_line,
                "eventIndex": event_index,
            }
            for message, event_index in zip(self.messages, self.assignments)
        ]

    def event_records(self) -> List[Dict[str, Any]]:
        return [
            {
                "title": event.title,
                "startDatetime": format_instant(event.start),
                "endDatetime": format_instant(event.end),
                "messageCount": event.message_count,
                "keywords": list(event.keywords),
                "confidenceScore": event.confidence_score,
                "tags": list(event.tags),
            }
            for event in self.events
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalMessages": self.total_messages,
            "eventsDetected": self.events_detected,
            "parseSuccessRate": self.quality.success_rate,
            "timezone": self.timezone,
            "messages": self.message_records(),
            "events": self.event_records(),
        }


def check_parse_quality(
    quality: ParseQuality,
    text: str,
    config: PipelineConfig = DEFAULT_CONFIG,
) -> None:
    """Raise :class:`ParseQualityError` when the success rate is too low.

    The comparison is strict: a rate exactly at the threshold passes. A
    transcript with no attempted lines always passes. ``text`` is only split
    into its first lines for the error sample when the gate trips.
    """

    if quality.attempted == 0:
        return
    if quality.success_rate < config.quality_threshold:
        raise ParseQualityError(
            quality,
            sample=split_lines(text)[: config.sample_line_count],
            threshold=config.quality_threshold,
        )


def run_pipeline(
    text: str,
    timezone: str = DEFAULT_TIMEZONE,
    config: Optional[PipelineConfig] = None,
    *,
    now: Optional[datetime] = None,
) -> PipelineResult:
    """Parse ``text``, detect events, and link messages to them.

    Parameters
    ----------
    text:
        Decoded chat export.
    timezone:
        Caller-declared timezone label. It is recorded on the result only;
        timestamps are never shifted.
    config:
        Thresholds to apply. Defaults to :data:`DEFAULT_CONFIG`.
    now:
        Instant used for unresolvable timestamps (defaults to the wall clock).

    Returns
    -------
    PipelineResult
        Parsed messages, detected events, and per-message event indices.

    Raises
    ------
    ParseQualityError
        If the parse success rate is below ``config.quality_threshold``.
    """

    cfg = config or DEFAULT_CONFIG
    parsed = parse_transcript(
        text, max_failed_samples=cfg.max_failed_samples, now=now
    )
    quality = parsed.quality
    LOGGER.info(
        "Parsed %d messages, %d unparseable lines (success rate %.3f)",
        quality.parsed_count,
        quality.error_count,
        quality.success_rate,
    )
    if quality.unresolved_timestamps:
        LOGGER.warning(
            "%d message(s) fell back to the current time for their timestamp",
            quality.unresolved_timestamps,
        )
    check_parse_quality(quality, text, cfg)

    bursts = segment_bursts(
        parsed.messages, gap=cfg.burst_gap, min_size=cfg.min_burst_size
    )
    events = classify_bursts(bursts)
    assignments = assign_messages(parsed.messages, events)
    LOGGER.info("Detected %d events from %d bursts", len(events), len(bursts))
    return PipelineResult(
        messages=parsed.messages,
        events=tuple(events),
        assignments=tuple(assignments),
        quality=quality,
        timezone=timezone,
    )


@dataclass
class ProcessMeta:
    """
    Outcome of processing one export file.
    """

    src_path: str
    ok: bool
    error: Optional[str]
    message_count: int
    event_count: int
    output_path: Optional[str] = None


def process_file(
    src: Path,
    out_root: Path,
    timezone: str = DEFAULT_TIMEZONE,
    config: Optional[PipelineConfig] = None,
    rel_path: Optional[Path] = None,
) -> ProcessMeta:
    """Load, process, and write results for a single export file.

    Outputs mirror ``rel_path`` (default: the file name of ``src``) under
    ``out_root``, keeping the full input name so ``a/chat.txt`` and
    ``b/chat.txt``, or ``chat.txt`` and ``chat.zip``, never share an output.
    On success writes ``<rel>.events.json`` (the full result) and
    ``<rel>.messages.jsonl`` (messages in persistence-sized batches). When the
    quality gate trips, writes ``<rel>.error.json`` with the diagnostics
    instead. Input errors write nothing.
    """

    cfg = config or DEFAULT_CONFIG
    base = out_root / (rel_path if rel_path is not None else Path(src.name))
    try:
        text = load_transcript(src, max_bytes=cfg.max_input_bytes)
    except InputError as e:
        LOGGER.error("[INPUT-ERROR] %s: %s", src, e)
        return ProcessMeta(str(src), False, str(e), 0, 0)

    try:
        result = run_pipeline(text, timezone=timezone, config=cfg)
    except ParseQualityError as e:
        err_path = base.with_name(base.name + ".error.json")
        write_json(err_path, e.to_dict())
        LOGGER.error("[PARSE-QUALITY] %s: %s", src, e)
        return ProcessMeta(str(src), False, str(e), 0, 0, str(err_path))

    out_path = base.with_name(base.name + ".events.json")
    write_json(out_path, result.to_dict())
    write_messages_jsonl(
        base.with_name(base.name + ".messages.jsonl"),
        result.message_records(),
        batch_size=cfg.persist_batch_size,
    )
    LOGGER.info(
        "[OK] %s -> %s (%d messages, %d events)",
        src,
        out_path,
        result.total_messages,
        result.events_detected,
    )
    return ProcessMeta(
        str(src),
        True,
        None,
        result.total_messages,
        result.events_detected,
        str(out_path),
    )
