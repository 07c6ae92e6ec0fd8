"""
Tests for burst classification against the keyword taxonomy.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from chat_events.classifier import (
    EVENT_KEYWORDS,
    classify_burst,
    classify_bursts,
    match_category,
)
from chat_events.transcript import Message

START = datetime(2024, 3, 15, 9, 0)


def _burst(texts: list[str]) -> tuple[Message, ...]:
    return tuple(
        Message(
            id=f"msg_{i}",
            timestamp=START + timedelta(minutes=i),
            author="Alice",
            text=text,
            attachments=(),
            raw_line=text,
            line_index=i,
        )
        for i, text in enumerate(texts)
    )


def test_taxonomy_scan_order_is_pinned() -> None:
    assert [category for category, _ in EVENT_KEYWORDS] == [
        "meeting",
        "birthday",
        "wedding",
        "travel",
        "appointment",
        "payment",
        "celebration",
    ]


def test_first_declared_category_wins() -> None:
    """'meeting' outranks 'payment' regardless of text order."""

    event = classify_burst(
        _burst(["Here is the INVOICE", "ok", "and the Meeting", "fine", "bye"])
    )
    assert event.category == "Meeting"
    assert event.keywords == ("meeting",)
    assert event.confidence_score == 0.8
    assert event.title == "Meeting - 2024-03-15"


def test_keywords_keep_only_first_declared_hit() -> None:
    """'bday' is declared before 'cake', so it is the one reported."""

    event = classify_burst(_burst(["cake!", "more cake", "happy bday", "yay", "ok"]))
    assert event.category == "Birthday"
    assert event.keywords == ("bday",)


def test_no_hits_is_a_plain_conversation() -> None:
    event = classify_burst(_burst(["hello", "how are you", "good", "you?", "fine"]))
    assert event.category == "Conversation"
    assert event.keywords == ()
    assert event.confidence_score == 0.5
    assert event.title == "Conversation - 2024-03-15"


def test_event_spans_first_and_last_message() -> None:
    burst = _burst(["a", "b", "c", "d", "e", "f"])
    event = classify_burst(burst)
    assert event.start == burst[0].timestamp
    assert event.end == burst[-1].timestamp
    assert event.message_count == 6
    assert event.tags == ()


def test_match_category_uses_substrings() -> None:
    """Keywords match inside longer words, as in 'meetings'."""

    assert match_category("Two MEETINGS today") == ("meeting", ("meeting",))
    assert match_category("nothing here") is None


def test_classify_empty_burst_raises() -> None:
    with pytest.raises(ValueError):
        classify_burst(())


def test_classify_bursts_passes_custom_taxonomy_through() -> None:
    taxonomy = (("sport", ("match", "goal")), ("meeting", ("meeting",)))
    bursts = [
        _burst(["meeting about the match", "b", "c", "d", "e"]),
        _burst(["what a goal", "b", "c", "d", "e"]),
        _burst(["hello", "b", "c", "d", "e"]),
    ]
    events = classify_bursts(bursts, taxonomy)
    assert [e.category for e in events] == ["Sport", "Sport", "Conversation"]
    assert [e.keywords for e in events] == [("match",), ("goal",), ()]


def test_classify_bursts_defaults_to_builtin_taxonomy() -> None:
    events = classify_bursts([_burst(["team meeting", "b", "c", "d", "e"])])
    assert [e.category for e in events] == ["Meeting"]
