"""Link each message to the event whose time interval contains it."""

from __future__ import annotations

from bisect import bisect_right
from typing import List, Optional, Sequence

from .classifier import Event
from .transcript import Message


def _sorted_and_disjoint(events: Sequence[Event]) -> bool:
    if any(e.start > e.end for e in events):
        return False
    return all(prev.end < nxt.start for prev, nxt in zip(events, events[1:]))


def _first_containing(message: Message, events: Sequence[Event]) -> Optional[int]:
    for index, event in enumerate(events):
        if event.start <= message.timestamp <= event.end:
            return index
    return None


def assign_messages(
    messages: Sequence[Message], events: Sequence[Event]
) -> List[Optional[int]]:
    """Return, per message, the index of the first event containing it.

    Containment is inclusive on both ends of ``[event.start, event.end]``.
    Messages outside every interval map to ``None``. When the intervals are
    sorted and disjoint (time-ordered input) the lookup bisects on start
    instants; otherwise every event is scanned in discovery order. Both paths
    give the same answer.
    """

    if not events:
        return [None] * len(messages)
    if not _sorted_and_disjoint(events):
        return [_first_containing(m, events) for m in messages]

    starts = [e.start for e in events]
    assigned: List[Optional[int]] = []
    for message in messages:
        index = bisect_right(starts, message.timestamp) - 1
        if index >= 0 and message.timestamp <= events[index].end:
            assigned.append(index)
        else:
            assigned.append(None)
    return assigned
