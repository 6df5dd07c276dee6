"""Calendar helpers: ISO week keys, week bounds and calendar quarters.

Week keys look like ``2025-W03`` and quarter labels like ``2025-Q1``; both are
used as file names and cross-run identifiers, so the formats are fixed.
"""

import re
from datetime import date, datetime, timedelta

QUARTER_STARTS = [(1, 1), (4, 1), (7, 1), (10, 1)]
QUARTER_ENDS = [(3, 31), (6, 30), (9, 30), (12, 31)]

WEEK_KEY_RE = re.compile(r'^(\d{4})-W(\d{2})$')
QUARTER_RE = re.compile(r'^(\d{4})-Q([1-4])$')


def to_date(value) -> date:
    """Coerce a date, datetime or ISO string (date or timestamp) to a date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def add_days(day, days: int) -> date:
    return to_date(day) + timedelta(days=days)


def day_range(start, end):
    """Every calendar day from start to end, inclusive"""
    current = to_date(start)
    end = to_date(end)
    while current <= end:
        yield current
        current += timedelta(days=1)


def iso_week_key(day) -> str:
    """ISO-8601 week key; the Thursday of the week decides the year"""
    d = to_date(day)
    thursday = d - timedelta(days=d.weekday()) + timedelta(days=3)
    week1 = date(thursday.year, 1, 4)
    week = 1 + round((thursday - week1).days / 7)
    return f'{thursday.year}-W{week:02d}'


def parse_week_key(week_key: str):
    match = WEEK_KEY_RE.match(week_key)
    if not match:
        raise ValueError(f"Invalid week key: {week_key!r} (expected YYYY-Wnn)")
    return int(match.group(1)), int(match.group(2))


def week_bounds(week_key: str):
    """Monday and Sunday of an ISO week"""
    year, week = parse_week_key(week_key)
    monday = date.fromisocalendar(year, week, 1)
    return monday, monday + timedelta(days=6)


def next_week_key(week_key: str) -> str:
    monday, _ = week_bounds(week_key)
    return iso_week_key(monday + timedelta(days=7))


def quarter_bounds(year: int, q: int):
    if q not in (1, 2, 3, 4):
        raise ValueError(f"Quarter must be 1-4, got {q}")
    start_month, start_day = QUARTER_STARTS[q - 1]
    end_month, end_day = QUARTER_ENDS[q - 1]
    return date(year, start_month, start_day), date(year, end_month, end_day)


def quarter_label(year: int, q: int) -> str:
    return f'{year}-Q{q}'


def parse_quarter(label: str):
    match = QUARTER_RE.match(label)
    if not match:
        raise ValueError(f"Invalid quarter: {label!r} (expected YYYY-Qn)")
    return int(match.group(1)), int(match.group(2))


def iso_weeks_in_quarter(year: int, q: int):
    """Week keys of every ISO week that overlaps the quarter, in order"""
    start, end = quarter_bounds(year, q)
    weeks = []
    for day in day_range(start, end):
        key = iso_week_key(day)
        if not weeks or weeks[-1] != key:
            weeks.append(key)
    return weeks
