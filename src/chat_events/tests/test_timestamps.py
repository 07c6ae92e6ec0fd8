"""
Tests for timestamp resolution of line headers.
"""

from __future__ import annotations

import logging
from datetime import datetime

import pytest

from chat_events.timestamps import (
    expand_two_digit_year,
    format_instant,
    parse_timestamp,
    resolve_timestamp,
    to_24_hour,
)


@pytest.mark.parametrize(
    "year, expected",
    [(89, 1989), (51, 1951), (50, 2050), (12, 2012), (0, 2000), (2023, 2023)],
)
def test_expand_two_digit_year_pivot(year: int, expected: int) -> None:
    """Two-digit years above 50 land in the 1900s, the rest in the 2000s."""

    assert expand_two_digit_year(year) == expected


@pytest.mark.parametrize(
    "hour, period, expected",
    [
        (12, "AM", 0),
        (12, "PM", 12),
        (1, "PM", 13),
        (11, "am", 11),
        (11, "pm", 23),
        (17, None, 17),
    ],
)
def test_to_24_hour(hour: int, period: str | None, expected: int) -> None:
    """12-hour markers should map onto the 24-hour clock."""

    assert to_24_hour(hour, period) == expected


def test_parse_slash_timestamp_reads_day_before_month() -> None:
    """Slash dates are read day first, month second."""

    assert parse_timestamp("5/3/23, 10:15 PM") == datetime(2023, 3, 5, 22, 15)
    assert parse_timestamp("25/12/2022, 08:05:09") == datetime(
        2022, 12, 25, 8, 5, 9
    )


def test_parse_slash_timestamp_without_comma_or_space_before_period() -> None:
    """The comma and the space before AM/PM are optional."""

    assert parse_timestamp("1/2/89 12:00AM") == datetime(1989, 2, 1, 0, 0)


def test_parse_iso_timestamp() -> None:
    """ISO fragments map directly onto datetime fields."""

    assert parse_timestamp("2024-03-15 09:01:02") == datetime(2024, 3, 15, 9, 1, 2)


@pytest.mark.parametrize("text", ["13/13/2023, 10:00", "31/2/2023, 10:00", "soon"])
def test_parse_timestamp_returns_none_when_unresolvable(text: str) -> None:
    """Unknown shapes and impossible calendar dates do not resolve."""

    assert parse_timestamp(text) is None


def test_resolve_timestamp_falls_back_to_now_and_warns(caplog) -> None:
    """Unresolvable fragments use the supplied 'now' and log a warning."""

    now = datetime(2030, 1, 1, 12, 0)
    with caplog.at_level(logging.WARNING, logger="chat_events.timestamps"):
        value, resolved = resolve_timestamp("31/2/2023, 10:00", now=now)
    assert value == now
    assert resolved is False
    assert "Unresolvable timestamp" in caplog.text


def test_resolve_timestamp_reports_success() -> None:
    """Resolvable fragments are flagged as resolved."""

    value, resolved = resolve_timestamp("2024-03-15 09:00:00")
    assert value == datetime(2024, 3, 15, 9, 0)
    assert resolved is True


def test_format_instant_uses_seconds_precision() -> None:
    assert format_instant(datetime(2024, 3, 15, 9, 0)) == "2024-03-15T09:00:00"
