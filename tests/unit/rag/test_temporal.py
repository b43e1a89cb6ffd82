"""Tests for temporal intent classification and date extraction."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from groundwork.index.models import Chunk, ChunkMetadata
from groundwork.rag.temporal import (
    TemporalIntent,
    calendar_date,
    classify_intent,
    dates_in_properties,
    dates_in_text,
    extract_dates,
    in_window,
)

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _chunk(content: str, properties: dict | None = None) -> Chunk:
    return Chunk(
        id="p-0",
        content=content,
        metadata=ChunkMetadata(
            title="T",
            source_id="p",
            last_modified="2024-01-01T00:00:00Z",
            chunk_index=0,
            total_chunks=1,
            properties=properties or {},
        ),
    )


# ------------------------------------------------------------------
# classify_intent
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "query, expected",
    [
        ("최근 회의 내용", [TemporalIntent.RECENT]),
        ("What happened recently?", [TemporalIntent.RECENT]),
        ("다가오는 일정", [TemporalIntent.UPCOMING]),
        ("Upcoming releases", [TemporalIntent.UPCOMING]),
        ("지난 분기 보고서", [TemporalIntent.PAST]),
        ("previous launches", [TemporalIntent.PAST]),
        ("budget overview", []),
    ],
)
def test_classify_intent(query, expected):
    assert classify_intent(query) == expected


def test_multiple_families_all_active():
    assert classify_intent("최근 그리고 다가오는 일정") == [
        TemporalIntent.RECENT,
        TemporalIntent.UPCOMING,
    ]


def test_english_keywords_need_word_boundary():
    assert classify_intent("snowfall knowledge") == []


def test_intent_case_insensitive():
    assert classify_intent("RECENT notes") == [TemporalIntent.RECENT]


# ------------------------------------------------------------------
# Date parsing
# ------------------------------------------------------------------


def test_long_form_korean_date():
    assert dates_in_text("회의는 2024년 3월 5일 에 진행") == [date(2024, 3, 5)]


def test_long_form_dotted_date():
    assert dates_in_text("2024. 3. 5. 회의") == [date(2024, 3, 5)]


def test_iso_date_inside_timestamp():
    assert dates_in_text("edited 2024-03-05T10:00:00Z") == [date(2024, 3, 5)]


def test_long_form_listed_before_iso():
    assert dates_in_text("2024-01-02 and 2023년 12월 1일") == [date(2023, 12, 1), date(2024, 1, 2)]


def test_out_of_range_year_ignored():
    assert dates_in_text("2031-01-01 and 2019-12-31") == []


def test_invalid_month_ignored():
    assert dates_in_text("2024-13-01") == []


def test_day_overflow_rolls_over():
    assert calendar_date(2024, 2, 30) == date(2024, 3, 1)


def test_calendar_date_rejects_day_zero():
    assert calendar_date(2024, 1, 0) is None


def test_property_dates_only_for_date_like_keys():
    props = {
        "Due": "2024-06-20",
        "deadline": "2024-06-21T09:00:00.000+09:00",
        "마감일": "2024-06-22",
        "Owner": "2024-06-23",
        "start_time": "not a date",
        "end": "2035-01-01",
        "day": 5,
    }
    assert dates_in_properties(props) == [date(2024, 6, 20), date(2024, 6, 21), date(2024, 6, 22)]


def test_extract_dates_combines_text_and_properties():
    chunk = _chunk("launch 2024-06-14", {"Due": "2024-06-20"})
    assert extract_dates(chunk) == [date(2024, 6, 14), date(2024, 6, 20)]


# ------------------------------------------------------------------
# Windows
# ------------------------------------------------------------------


def test_recent_window_inclusive_bounds():
    window = timedelta(days=7)
    assert in_window(date(2024, 6, 9), TemporalIntent.RECENT, NOW, window)
    assert in_window(date(2024, 6, 22), TemporalIntent.RECENT, NOW, window)
    assert not in_window(date(2024, 6, 23), TemporalIntent.RECENT, NOW, window)
    assert not in_window(date(2024, 6, 8), TemporalIntent.RECENT, NOW, window)


def test_upcoming_and_past_compare_to_now():
    assert in_window(date(2024, 6, 16), TemporalIntent.UPCOMING, NOW)
    assert not in_window(date(2024, 6, 15), TemporalIntent.UPCOMING, NOW)
    assert in_window(date(2024, 6, 15), TemporalIntent.PAST, NOW)
    assert not in_window(date(2024, 6, 16), TemporalIntent.PAST, NOW)
