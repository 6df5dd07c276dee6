"""Daily, weekly and cumulative star series.

A cumulative series is a list of ``(date, value)`` pairs sorted by date, one
entry per day on which the running total changed. It is read as a step
function: the value on any day is the latest entry at or before that day, and
0 before the first entry.
"""

from bisect import bisect_right
from dataclasses import dataclass
from datetime import date

import pandas as pd

from .timeutil import iso_week_key, next_week_key, to_date, week_bounds


@dataclass(frozen=True)
class WeekTotal:
    week: str
    total: int
    start: date
    end: date

    def to_dict(self):
        return {
            'week': self.week,
            'total': self.total,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
        }


def value_as_of(series, day) -> int:
    """Cumulative value on ``day``: last entry with date <= day, else 0"""
    idx = bisect_right(series, to_date(day), key=lambda entry: entry[0])
    if idx == 0:
        return 0
    return series[idx - 1][1]


def validate_cumulative(series, name='series'):
    """Raise ValueError unless dates strictly increase and values never drop"""
    prev_date = None
    prev_value = 0
    for day, value in series:
        if value < 0:
            raise ValueError(f"{name}: negative value {value} on {day}")
        if prev_date is not None and day <= prev_date:
            raise ValueError(f"{name}: dates not strictly increasing at {day}")
        if value < prev_value:
            raise ValueError(f"{name}: value drops from {prev_value} to {value} on {day}")
        prev_date, prev_value = day, value


def to_daily(timestamps):
    """Count stargazer timestamps per UTC day -> [(date, count)]"""
    if len(timestamps) == 0:
        return []
    days = pd.to_datetime(pd.Series(list(timestamps)), utc=True, format='ISO8601').dt.strftime('%Y-%m-%d')
    counts = days.value_counts().sort_index()
    return [(date.fromisoformat(day), int(n)) for day, n in counts.items()]


def to_weekly(daily):
    """Sum daily counts into ISO weeks; only weeks with stars appear"""
    if not daily:
        return []
    df = pd.DataFrame(daily, columns=['date', 'daily'])
    df['week'] = df['date'].map(iso_week_key)
    totals = df.groupby('week', sort=True)['daily'].sum()
    return [WeekTotal(week, int(total), *week_bounds(week)) for week, total in totals.items()]


def to_cumulative(daily):
    if not daily:
        return []
    df = pd.DataFrame(daily, columns=['date', 'daily'])
    df['value'] = df['daily'].cumsum()
    return [(row.date, int(row.value)) for row in df.itertuples(index=False)]


def densify_weekly(weekly):
    """Fill inactive weeks between the first and last week with zero totals"""
    if not weekly:
        return []
    weekly = sorted(weekly, key=lambda w: w.week)
    by_week = {w.week: w for w in weekly}
    last = weekly[-1].week

    dense = []
    key = weekly[0].week
    while True:
        dense.append(by_week.get(key) or WeekTotal(key, 0, *week_bounds(key)))
        if key == last:
            break
        key = next_week_key(key)
    return dense


def cumulative_from_records(records):
    return [(to_date(r['date']), int(r['value'])) for r in records or []]


def cumulative_to_records(series):
    return [{'date': day.isoformat(), 'value': value} for day, value in series]


def weekly_from_records(records):
    weekly = []
    for r in records or []:
        if r.get('start') and r.get('end'):
            start, end = to_date(r['start']), to_date(r['end'])
        else:
            start, end = week_bounds(r['week'])
        weekly.append(WeekTotal(r['week'], int(r['total']), start, end))
    return weekly


def aggregate(repo: str, timestamps, stars_now=None) -> dict:
    """Build the per-repository weekly document from raw stargazer timestamps"""
    daily = to_daily(sorted(timestamps))
    return {
        'repo': repo,
        'stars_now': stars_now,
        'weekly': [w.to_dict() for w in to_weekly(daily)],
        'cumulative': cumulative_to_records(to_cumulative(daily)),
    }
