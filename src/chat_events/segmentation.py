"""Split a message sequence into bursts of temporally dense activity."""

from __future__ import annotations

from datetime import timedelta
from functools import reduce
from typing import List, NamedTuple, Sequence, Tuple

from .config import BURST_GAP, MIN_BURST_SIZE
from .transcript import Message

Burst = Tuple[Message, ...]


class _ScanState(NamedTuple):
    # bursts is an append-only arena shared across steps
    bursts: List[Burst]
    buffer: List[Message]


def segment_bursts(
    messages: Sequence[Message],
    *,
    gap: timedelta = BURST_GAP,
    min_size: int = MIN_BURST_SIZE,
) -> List[Burst]:
    """Group consecutive messages into bursts in a single linear pass.

    A message joins the running buffer when it is at most ``gap`` after the
    buffer's last message. Otherwise the buffer is committed as a burst if it
    holds at least ``min_size`` messages (and dropped if not), and a new
    buffer starts with the message. Bursts are never merged or revisited.

    Parameters
    ----------
    messages:
        Messages in file order. They are not re-sorted.
    gap:
        Largest inclusive gap between neighbours within one burst.
    min_size:
        Smallest buffer that is kept as a burst.

    Returns
    -------
    List[Burst]
        Bursts in scan order; each is a tuple of consecutive messages.
    """

    def commit(state: _ScanState) -> _ScanState:
        if len(state.buffer) >= min_size:
            state.bursts.append(tuple(state.buffer))
        return state._replace(buffer=[])

    def step(state: _ScanState, message: Message) -> _ScanState:
        if state.buffer and message.timestamp - state.buffer[-1].timestamp > gap:
            state = commit(state)
        state.buffer.append(message)
        return state

    final = commit(reduce(step, messages, _ScanState(bursts=[], buffer=[])))
    return final.bursts
