"""Temporal intent classification and date extraction for re-ranking.

A query is matched (case-insensitively) against three keyword families, each in
Korean and English:

  RECENT    최근, 요즘, 현재, 오늘, recently, currently, today, ...
  UPCOMING  다가오는, 예정, 앞으로, upcoming, future, scheduled, soon, ...
  PAST      과거, 이전, 지난, past, before, previously, ...

Every family that matches is active. Chunks are then checked for calendar dates
(in their text and their date-bearing metadata properties) that fall inside the
window of an active family:

  RECENT    |date - now| <= window
  UPCOMING  date > now
  PAST      date < now

Only years in [2020, 2030] are accepted; anything else is treated as noise.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, Iterable

from groundwork.index.models import Chunk

MIN_YEAR = 2020
MAX_YEAR = 2030


class TemporalIntent(str, Enum):
    RECENT = "recent"
    UPCOMING = "upcoming"
    PAST = "past"


# ------------------------------------------------------------------
# Intent keywords
# ------------------------------------------------------------------


def _family(korean: Iterable[str], english: Iterable[str]) -> re.Pattern[str]:
    parts = [re.escape(k) for k in korean]
    parts += [rf"\b{re.escape(w)}\b" for w in english]
    return re.compile("|".join(parts), re.IGNORECASE)


_INTENT_PATTERNS: list[tuple[TemporalIntent, re.Pattern[str]]] = [
    (
        TemporalIntent.RECENT,
        _family(
            ["최근", "요즘", "현재", "지금", "오늘", "이번 주", "이번주", "근래"],
            ["recent", "recently", "current", "currently", "now", "today", "latest", "this week"],
        ),
    ),
    (
        TemporalIntent.UPCOMING,
        _family(
            ["다가오는", "다가올", "앞으로", "예정", "미래", "향후", "곧", "다음 주", "다음주"],
            ["upcoming", "coming", "future", "scheduled", "soon", "next week", "planned"],
        ),
    ),
    (
        TemporalIntent.PAST,
        _family(
            ["과거", "이전", "지난", "예전", "전에", "작년"],
            ["past", "before", "previous", "previously", "earlier", "last week", "last year"],
        ),
    ),
]


def classify_intent(query: str) -> list[TemporalIntent]:
    """Return every intent family matched by *query*, in family order."""
    return [intent for intent, pattern in _INTENT_PATTERNS if pattern.search(query)]


# ------------------------------------------------------------------
# Date extraction
# ------------------------------------------------------------------

# 2024년 3월 5일 / 2024. 3. 5.
_LONG_FORM_RE = re.compile(
    r"(?<!\d)(\d{4})\s*(?:년|\.)\s*(\d{1,2})\s*(?:월|\.)\s*(\d{1,2})(?!\d)\s*(?:일)?"
)
# 2024-03-05 (also the date part of 2024-03-05T10:00:00Z)
_ISO_RE = re.compile(r"(?<!\d)(\d{4})-(\d{2})-(\d{2})(?!\d)")

_DATE_KEY_TOKENS: tuple[str, ...] = (
    "date", "time", "day", "due", "deadline", "start", "end",
    "날짜", "일자", "일정", "기한", "마감", "시작", "종료",
)


def calendar_date(year: int, month: int, day: int) -> date | None:
    """Build a date from loosely validated parts.

    Accepts year in [MIN_YEAR, MAX_YEAR], month in [1, 12], day in [1, 31].
    A day past the end of its month rolls over into the next month
    (2024-02-30 → 2024-03-01).
    """
    if not (MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12 and 1 <= day <= 31):
        return None
    return date(year, month, 1) + timedelta(days=day - 1)


def dates_in_text(text: str) -> list[date]:
    """Return every accepted date written in *text* (long form first, then ISO)."""
    found: list[date] = []
    for pattern in (_LONG_FORM_RE, _ISO_RE):
        for match in pattern.finditer(text):
            parsed = calendar_date(*(int(g) for g in match.groups()))
            if parsed is not None:
                found.append(parsed)
    return found


def _parse_property_date(value: Any) -> date | None:
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        try:
            parsed = date.fromisoformat(raw[:10])
        except ValueError:
            return None
    return parsed if MIN_YEAR <= parsed.year <= MAX_YEAR else None


def dates_in_properties(properties: dict[str, Any]) -> list[date]:
    """Return dates held by properties whose key names a date-like field."""
    found: list[date] = []
    for key, value in properties.items():
        lowered = str(key).lower()
        if not any(token in lowered for token in _DATE_KEY_TOKENS):
            continue
        parsed = _parse_property_date(value)
        if parsed is not None:
            found.append(parsed)
    return found


def extract_dates(chunk: Chunk) -> list[date]:
    """Return all dates found in *chunk* text and metadata (not deduplicated)."""
    return dates_in_text(chunk.content) + dates_in_properties(chunk.metadata.properties)


# ------------------------------------------------------------------
# Windows
# ------------------------------------------------------------------


def in_window(
    value: date,
    intent: TemporalIntent,
    now: datetime,
    window: timedelta = timedelta(days=7),
) -> bool:
    """True if *value* (taken at UTC midnight) satisfies *intent* relative to *now*."""
    moment = datetime.combine(value, time.min, tzinfo=timezone.utc)
    if intent is TemporalIntent.RECENT:
        return now - window <= moment <= now + window
    if intent is TemporalIntent.UPCOMING:
        return moment > now
    return moment < now
