"""Tunable thresholds for transcript parsing and event segmentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

BURST_GAP = timedelta(minutes=10)
MIN_BURST_SIZE = 5
QUALITY_THRESHOLD = 0.85
MAX_FAILED_SAMPLES = 10
SAMPLE_LINE_COUNT = 20
MAX_INPUT_BYTES = 1024 * 1024 * 1024
PERSIST_BATCH_SIZE = 500
DEFAULT_TIMEZONE = "UTC"


@dataclass(frozen=True)
class PipelineConfig:
    """Settings shared by the parser, segmenter, and CLI.

    Parameters
    ----------
    burst_gap:
        Largest gap between consecutive messages that keeps them in the same
        burst (inclusive).
    min_burst_size:
        Smallest burst that is promoted to an event.
    quality_threshold:
        Parse success rate below which a transcript is rejected (strict).
    max_failed_samples:
        Number of unparseable lines kept for diagnostics.
    sample_line_count:
        Number of leading raw lines echoed back when the quality gate trips.
    max_input_bytes:
        Largest input file accepted by the loader.
    persist_batch_size:
        Number of message records written per batch.
    """

    burst_gap: timedelta = field(default=BURST_GAP)
    min_burst_size: int = MIN_BURST_SIZE
    quality_threshold: float = QUALITY_THRESHOLD
    max_failed_samples: int = MAX_FAILED_SAMPLES
    sample_line_count: int = SAMPLE_LINE_COUNT
    max_input_bytes: int = MAX_INPUT_BYTES
    persist_batch_size: int = PERSIST_BATCH_SIZE


DEFAULT_CONFIG = PipelineConfig()
