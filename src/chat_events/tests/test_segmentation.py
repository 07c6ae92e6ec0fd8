"""
Tests for linear burst segmentation.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from chat_events.segmentation import segment_bursts
from chat_events.transcript import Message

START = datetime(2024, 3, 15, 9, 0)


def _messages(offsets_minutes: list[float]) -> list[Message]:
    """Build messages at the given minute offsets from ``START``."""

    return [
        Message(
            id=f"msg_{i}",
            timestamp=START + timedelta(minutes=offset),
            author="Alice" if i % 2 == 0 else "Bob",
            text=f"message {i}",
            attachments=(),
            raw_line=f"message {i}",
            line_index=i,
        )
        for i, offset in enumerate(offsets_minutes)
    ]


def test_five_close_messages_form_one_burst() -> None:
    messages = _messages([0, 1, 2, 3, 4])
    assert segment_bursts(messages) == [tuple(messages)]


def test_four_close_messages_are_too_few() -> None:
    assert segment_bursts(_messages([0, 1, 2, 3])) == []


def test_gap_of_exactly_ten_minutes_stays_in_burst() -> None:
    """The gap limit is inclusive."""

    bursts = segment_bursts(_messages([0, 10, 20, 30, 40]))
    assert len(bursts) == 1
    assert len(bursts[0]) == 5


def test_gap_just_over_ten_minutes_splits() -> None:
    bursts = segment_bursts(_messages([0, 1, 2, 3, 4, 14.02, 15, 16, 17, 18]))
    assert [len(b) for b in bursts] == [5, 5]
    assert bursts[0][-1].id == "msg_4"
    assert bursts[1][0].id == "msg_5"


def test_short_buffers_are_discarded_not_merged() -> None:
    """A short run between two bursts joins neither of them."""

    offsets = [0, 1, 2, 3, 4, 30, 31, 60, 61, 62, 63, 64]
    bursts = segment_bursts(_messages(offsets))
    assert [[m.id for m in b] for b in bursts] == [
        ["msg_0", "msg_1", "msg_2", "msg_3", "msg_4"],
        ["msg_7", "msg_8", "msg_9", "msg_10", "msg_11"],
    ]


def test_bursts_are_disjoint_ordered_and_large_enough() -> None:
    offsets = [0, 2, 4, 6, 8, 10, 40, 41, 42, 43, 44, 90, 200, 201, 202, 203, 204]
    messages = _messages(offsets)
    bursts = segment_bursts(messages)
    seen: list[int] = []
    for burst in bursts:
        assert len(burst) >= 5
        seen.extend(m.line_index for m in burst)
    assert seen == sorted(seen)
    assert len(seen) == len(set(seen))


def test_custom_gap_and_min_size() -> None:
    bursts = segment_bursts(
        _messages([0, 1, 5, 6]), gap=timedelta(minutes=2), min_size=2
    )
    assert [len(b) for b in bursts] == [2, 2]


def test_empty_input_has_no_bursts() -> None:
    assert segment_bursts([]) == []
