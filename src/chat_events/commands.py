"""CLI entry points for chat export event detection.

Subcommands:

- ``parse``: run the full pipeline over one export file or a directory of
  exports and write result artifacts.
- ``preview``: print per-month message counts for one export.
- ``validate``: check that result JSON files have the expected shape.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .chunking import preview_month_buckets
from .config import DEFAULT_CONFIG, DEFAULT_TIMEZONE, PipelineConfig
from .processor import process_file
from .textloaders import InputError, load_transcript
from .util import ensure_dir, load_result, looks_like_result_json

SUPPORTED_EXTS = {".txt", ".zip"}


def build_parser() -> argparse.ArgumentParser:
    """Build the ``chat-events`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="chat-events",
        description="Parse chat exports into messages and detected events",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    # ---------------- parse ----------------
    p_parse = sub.add_parser("parse", help="Parse exports and detect events")
    p_parse.add_argument(
        "--input", required=True, help="Export file (.txt/.zip) or directory"
    )
    p_parse.add_argument(
        "-o",
        "--output-dir",
        help="Output directory for results (default: INPUT + '_events')",
    )
    p_parse.add_argument(
        "--timezone",
        default=DEFAULT_TIMEZONE,
        help=f"Timezone label recorded on results (default: {DEFAULT_TIMEZONE})",
    )
    p_parse.add_argument(
        "--gap-minutes",
        type=float,
        default=DEFAULT_CONFIG.burst_gap.total_seconds() / 60,
        help="Largest gap in minutes between messages of one burst",
    )
    p_parse.add_argument(
        "--min-burst",
        type=int,
        default=DEFAULT_CONFIG.min_burst_size,
        help="Smallest number of messages that forms an event",
    )
    p_parse.add_argument(
        "--quality-threshold",
        type=float,
        default=DEFAULT_CONFIG.quality_threshold,
        help="Reject transcripts whose parse success rate is below this value",
    )
    p_parse.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p_parse.add_argument("--log-file", help="Write a detailed log under the output dir")
    p_parse.add_argument(
        "--no-progress", action="store_true", help="Disable progress bar"
    )

    # ---------------- preview ----------------
    p_prev = sub.add_parser("preview", help="Count messages per calendar month")
    p_prev.add_argument("input", help="Export file (.txt/.zip)")

    # ---------------- validate ----------------
    p_val = sub.add_parser("validate", help="Validate result JSONs")
    p_val.add_argument("results_dir")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI dispatcher."""
    args = build_parser().parse_args(argv)
    if args.cmd == "parse":
        failures = cmd_parse(args)
    elif args.cmd == "preview":
        failures = cmd_preview(args)
    else:
        failures = cmd_validate(args)
    if failures:
        raise SystemExit(1)


def _config_from_args(args) -> PipelineConfig:
    return replace(
        DEFAULT_CONFIG,
        burst_gap=timedelta(minutes=args.gap_minutes),
        min_burst_size=args.min_burst,
        quality_threshold=args.quality_threshold,
    )


def _configure_logging(verbose: bool, log_path: Optional[Path]) -> logging.Logger:
    logger = logging.getLogger("chat_events")
    logger.handlers.clear()
    logger.setLevel(logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO if verbose else logging.WARNING)
    ch.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(ch)
    if log_path is not None:
        ensure_dir(log_path.parent)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.INFO)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(fh)
    return logger


def _gather_inputs(in_path: Path) -> List[Path]:
    if in_path.is_file():
        return [in_path]
    return sorted(
        p
        for p in in_path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_EXTS
    )


def cmd_parse(args) -> int:
    """Process every export under ``args.input``.

    Returns the number of files that failed.
    """
    in_path = Path(args.input).expanduser().resolve()
    if not in_path.exists():
        raise FileNotFoundError(in_path)

    out_root = (
        Path(args.output_dir).expanduser().resolve()
        if args.output_dir
        else in_path.with_name(in_path.name + "_events")
    )
    ensure_dir(out_root)
    logger = _configure_logging(
        args.verbose, out_root / args.log_file if args.log_file else None
    )
    config = _config_from_args(args)

    files = _gather_inputs(in_path)
    ok = 0
    fail = 0
    iterator = files if args.no_progress else tqdm(files, desc="Files", unit="file")
    for src in iterator:
        rel = src.relative_to(in_path) if in_path.is_dir() else Path(src.name)
        meta = process_file(
            src, out_root, timezone=args.timezone, config=config, rel_path=rel
        )
        if meta.ok:
            ok += 1
        else:
            fail += 1
    logger.warning(
        "Done. Parsed: %d, Failed: %d, Total: %d. Output: %s",
        ok,
        fail,
        len(files),
        out_root,
    )
    return fail


def cmd_preview(args) -> int:
    """Print the month buckets of one export as JSON."""
    try:
        text = load_transcript(Path(args.input).expanduser())
    except InputError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    print(json.dumps(preview_month_buckets(text).to_dict(), indent=2))
    return 0


def cmd_validate(args) -> int:
    """Check every ``*.events.json`` under ``args.results_dir``."""
    root = Path(args.results_dir).expanduser().resolve()
    bad = 0
    total = 0
    for p in sorted(root.rglob("*.events.json")):
        total += 1
        if not looks_like_result_json(load_result(p)):
            bad += 1
            print(f"[INVALID] {p.relative_to(root)}")
    print(f"Validated {total} file(s); invalid: {bad}")
    return bad
