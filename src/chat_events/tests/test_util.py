"""
Tests for JSON output helpers and persistence batching.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from chat_events.util import (
    iter_batches,
    load_result,
    looks_like_result_json,
    write_json,
    write_messages_jsonl,
)


def test_iter_batches_splits_into_fixed_size_chunks() -> None:
    records = [{"i": i} for i in range(1203)]
    sizes = [len(batch) for batch in iter_batches(records)]
    assert sizes == [500, 500, 203]


def test_iter_batches_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        list(iter_batches([{"i": 1}], batch_size=0))


def test_write_messages_jsonl_returns_count(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "m.jsonl"
    written = write_messages_jsonl(path, [{"i": i} for i in range(7)], batch_size=3)
    assert written == 7
    assert [json.loads(x)["i"] for x in path.read_text("utf-8").splitlines()] == list(
        range(7)
    )


def test_write_json_sanitizes_lone_surrogates(tmp_path: Path) -> None:
    path = tmp_path / "out.json"
    write_json(path, {"text": "bad \ud800 char"})
    assert json.loads(path.read_text("utf-8")) == {"text": "bad ? char"}


def test_load_result_repairs_trailing_commas(tmp_path: Path) -> None:
    path = tmp_path / "r.events.json"
    path.write_text(
        '{"totalMessages": 0, "eventsDetected": 0, "messages": [], "events": [],}',
        encoding="utf-8",
    )
    data = load_result(path)
    assert looks_like_result_json(data)


def test_load_result_missing_file_returns_none(tmp_path: Path) -> None:
    assert load_result(tmp_path / "missing.json") is None


def test_looks_like_result_json_checks_counts() -> None:
    good = {
        "totalMessages": 1,
        "eventsDetected": 0,
        "messages": [{"messageId": "msg_0"}],
        "events": [],
    }
    assert looks_like_result_json(good)
    assert not looks_like_result_json({**good, "totalMessages": 2})
    assert not looks_like_result_json({"messages": []})
    assert not looks_like_result_json(None)
