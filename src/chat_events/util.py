"""Utility helpers for filesystem, JSON serialization, and result files."""

from __future__ import annotations

import json
import logging
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

import json_repair

from .config import PERSIST_BATCH_SIZE

LOGGER = logging.getLogger(__name__)

RESULT_KEYS = ("totalMessages", "eventsDetected", "messages", "events")


def ensure_dir(p: Path) -> None:
    """Create directory `p` and all parents if they do not exist."""

    p.mkdir(parents=True, exist_ok=True)


def _sanitize(obj):
    """Recursively coerce strings to valid UTF-8 for safe JSON writing."""

    if isinstance(obj, str):
        # Replace invalid surrogates with U+FFFD to keep JSON valid
        return obj.encode("utf-8", errors="replace").decode("utf-8")
    if isinstance(obj, dict):
        return {k: _sanitize(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_sanitize(x) for x in obj]
    return obj


def write_json(path: Path, obj) -> None:
    """Write an object as pretty-printed UTF-8 JSON after sanitizing strings."""

    ensure_dir(path.parent)
    clean = _sanitize(obj)
    with path.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(clean, f, ensure_ascii=False, indent=2)


def iter_batches(
    records: Iterable[Dict[str, Any]], batch_size: int = PERSIST_BATCH_SIZE
) -> Iterator[List[Dict[str, Any]]]:
    """Yield ``records`` in lists of at most ``batch_size`` items."""

    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    batch: List[Dict[str, Any]] = []
    for record in records:
        batch.append(record)
        if len(batch) >= batch_size:
            yield batch
            batch = []
    if batch:
        yield batch


def write_messages_jsonl(
    path: Path,
    records: Iterable[Dict[str, Any]],
    batch_size: int = PERSIST_BATCH_SIZE,
) -> int:
    """Write message records as JSON Lines, one batch at a time.

    Returns the number of records written.
    """

    ensure_dir(path.parent)
    written = 0
    with path.open("w", encoding="utf-8", newline="\n") as f:
        for batch in iter_batches(records, batch_size):
            f.write(
                "".join(
                    json.dumps(_sanitize(r), ensure_ascii=False) + "\n" for r in batch
                )
            )
            written += len(batch)
            LOGGER.debug("Wrote batch of %d messages to %s", len(batch), path)
    return written


def load_result(path: Path) -> Optional[Dict[str, Any]]:
    """Read a result JSON file, repairing minor syntax damage.

    Returns ``None`` when the file cannot be read or does not hold an object.
    """

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as err:
        LOGGER.warning("Failed to read %s: %s", path, err)
        return None
    try:
        data = json_repair.loads(raw)
    except (JSONDecodeError, ValueError) as err:
        LOGGER.warning("Invalid JSON %s: %s", path, err)
        return None
    return data if isinstance(data, dict) else None


def looks_like_result_json(obj: Any) -> bool:
    """Return True if ``obj`` matches the pipeline result schema.

    Requires the top-level counters plus ``messages``/``events`` lists whose
    lengths agree with ``totalMessages``/``eventsDetected``.
    """
    if not isinstance(obj, dict):
        return False
    if any(key not in obj for key in RESULT_KEYS):
        return False
    messages, events = obj["messages"], obj["events"]
    if not isinstance(messages, list) or not isinstance(events, list):
        return False
    if obj["totalMessages"] != len(messages) or obj["eventsDetected"] != len(events):
        return False
    for message in messages:
        if not isinstance(message, dict) or "messageId" not in message:
            return False
    for event in events:
        if not isinstance(event, dict) or "title" not in event:
            return False
    return True
