"""Chat export parsing and event detection package public exports."""

from .chunking import MonthBucket, MonthPreview, preview_month_buckets
from .classifier import EVENT_KEYWORDS, Event, classify_burst
from .config import DEFAULT_CONFIG, PipelineConfig
from .processor import ParseQualityError, PipelineResult, process_file, run_pipeline
from .segmentation import segment_bursts
from .textloaders import InputError, load_transcript, normalize_line
from .timestamps import parse_timestamp, resolve_timestamp
from .transcript import Message, ParseQuality, parse_transcript
