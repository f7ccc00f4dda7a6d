# memory_jar/insights.py
"""
Read-only views over a user's memories: flashback, streak, monthly insights and
the daily prompt. Everything here is pure; callers pass ``today`` in.

Records can be ORM rows, MemoryOut models or plain dicts;
dates can be ``date`` objects or ISO strings.
"""
from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Any, Dict, Iterable, Optional

from memory_jar.db.models import MOODS

PROMPTS = [
    "What made you smile today?",
    "One thing you learned today?",
    "A moment you want to remember.",
    "What are you grateful for right now?",
    "Who made your day better?",
    "What would you tell your future self about today?",
    "Describe today in one word.",
    "What are you proud of today?",
    "A small win from today.",
    "What felt good today?",
    "Something you want to let go of.",
    "What are you looking forward to?",
    "A detail you noticed today.",
    "What made today unique?",
    "How did you take care of yourself today?",
]


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def record_date(record: Any) -> Optional[date]:
    value = _field(record, "date")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def one_month_before(day: date) -> date:
    """Same day-of-month in the previous month, clamped to that month's last day."""
    year, month = (day.year - 1, 12) if day.month == 1 else (day.year, day.month - 1)
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def flashback(records: Iterable[Any], today: date) -> Optional[Any]:
    target = one_month_before(today)
    for r in records:
        if record_date(r) == target:
            return r
    return None


def streak(records: Iterable[Any], today: date) -> int:
    days = {record_date(r) for r in records}
    count = 0
    cursor = today
    while cursor in days:
        count += 1
        cursor -= timedelta(days=1)
    return count


def monthly_insights(records: Iterable[Any], month: int, year: int) -> Dict[str, Any]:
    """``month`` is 1-12. Word count is whitespace tokens across notes."""
    in_month = []
    for r in records:
        d = record_date(r)
        if d and d.year == year and d.month == month:
            in_month.append(r)

    moods: Dict[str, int] = {m: 0 for m in MOODS}
    words = 0
    for r in in_month:
        note = _field(r, "note") or ""
        words += len(note.split())
        mood = _field(r, "mood")
        if mood in moods:
            moods[mood] += 1

    return {
        "month": month,
        "year": year,
        "entries": len(in_month),
        "words": words,
        "moods": moods,
    }


def daily_prompt(today: date) -> str:
    # rotates once a day through the prompt list
    return PROMPTS[today.timetuple().tm_yday % len(PROMPTS)]
