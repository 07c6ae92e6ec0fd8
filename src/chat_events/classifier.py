"""Keyword taxonomy used to title and score message bursts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence, Tuple

from .segmentation import Burst

# Scan order matters: the first category with any hit wins.
EVENT_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("meeting", ("meeting", "meet", "conference", "call", "zoom", "teams")),
    ("birthday", ("birthday", "bday", "born", "cake")),
    ("wedding", ("wedding", "marriage", "bride", "groom")),
    ("travel", ("flight", "airport", "train", "ticket", "booking", "hotel")),
    ("appointment", ("appointment", "doctor", "clinic", "hospital")),
    ("payment", ("invoice", "payment", "paid", "transfer", "amount")),
    ("celebration", ("party", "celebrate", "celebration", "congrats")),
)

DEFAULT_CATEGORY = "Conversation"
MATCHED_CONFIDENCE = 0.8
DEFAULT_CONFIDENCE = 0.5


@dataclass(frozen=True)
class Event:
    """Titled, scored description of one burst.

    ``keywords`` holds the first declared keyword of the winning category
    found in the burst, or is empty for uncategorized bursts.
    """

    title: str
    start: datetime
    end: datetime
    message_count: int
    keywords: Tuple[str, ...]
    confidence_score: float
    category: str = DEFAULT_CATEGORY
    tags: Tuple[str, ...] = field(default=())


def match_category(
    text: str,
    taxonomy: Sequence[Tuple[str, Tuple[str, ...]]] = EVENT_KEYWORDS,
) -> Optional[Tuple[str, Tuple[str, ...]]]:
    """Return the first category with a keyword in ``text`` and that keyword.

    Matching is plain substring search on lower-cased ``text``. Categories and
    their keywords are tried in declared order; only the first keyword found
    in the winning category is reported.
    """
    lowered = text.lower()
    for category, keywords in taxonomy:
        for keyword in keywords:
            if keyword in lowered:
                return category, (keyword,)
    return None


def classify_burst(
    burst: Burst,
    taxonomy: Sequence[Tuple[str, Tuple[str, ...]]] = EVENT_KEYWORDS,
) -> Event:
    """Score ``burst`` against ``taxonomy`` and build its :class:`Event`."""
    if not burst:
        raise ValueError("cannot classify an empty burst")
    found = match_category(" ".join(m.text for m in burst), taxonomy)
    if found is None:
        category, keywords, confidence = DEFAULT_CATEGORY, (), DEFAULT_CONFIDENCE
    else:
        category = found[0].capitalize()
        keywords = found[1]
        confidence = MATCHED_CONFIDENCE
    first, last = burst[0], burst[-1]
    return Event(
        title=f"{category} - {first.timestamp.date().isoformat()}",
        start=first.timestamp,
        end=last.timestamp,
        message_count=len(burst),
        keywords=keywords,
        confidence_score=confidence,
        category=category,
    )


def classify_bursts(
    bursts: Sequence[Burst],
    taxonomy: Sequence[Tuple[str, Tuple[str, ...]]] = EVENT_KEYWORDS,
) -> list[Event]:
    """Classify each burst in order, one :class:`Event` per burst."""
    return [classify_burst(burst, taxonomy) for burst in bursts]
