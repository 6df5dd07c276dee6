from datetime import date

import pytest

from star_trends.series import (
    WeekTotal,
    aggregate,
    densify_weekly,
    to_cumulative,
    to_daily,
    to_weekly,
    validate_cumulative,
    value_as_of,
)
from star_trends.timeutil import week_bounds

SERIES = [
    (date(2025, 1, 10), 5),
    (date(2025, 1, 20), 8),
    (date(2025, 2, 1), 12),
]


def week(key, total):
    return WeekTotal(key, total, *week_bounds(key))


@pytest.mark.parametrize('day, expected', [
    (date(2025, 1, 9), 0),
    (date(2025, 1, 10), 5),
    (date(2025, 1, 15), 5),
    (date(2025, 1, 20), 8),
    (date(2025, 1, 31), 8),
    (date(2025, 2, 1), 12),
    (date(2026, 1, 1), 12),
])
def test_value_as_of(day, expected):
    assert value_as_of(SERIES, day) == expected


def test_value_as_of_empty_and_string_dates():
    assert value_as_of([], date(2025, 1, 1)) == 0
    assert value_as_of(SERIES, '2025-01-20') == 8


def test_validate_cumulative_accepts_sparse_series():
    validate_cumulative(SERIES)
    validate_cumulative([])


@pytest.mark.parametrize('series', [
    [(date(2025, 1, 2), 5), (date(2025, 1, 1), 6)],
    [(date(2025, 1, 1), 5), (date(2025, 1, 1), 6)],
    [(date(2025, 1, 1), 5), (date(2025, 1, 2), 4)],
    [(date(2025, 1, 1), -1)],
])
def test_validate_cumulative_rejects_malformed(series):
    with pytest.raises(ValueError):
        validate_cumulative(series, name='owner/repo')


def test_to_daily_counts_per_utc_day():
    timestamps = [
        '2025-01-03T00:00:00Z',
        '2025-01-01T10:00:00Z',
        '2025-01-01T23:59:59Z',
    ]
    assert to_daily(timestamps) == [(date(2025, 1, 1), 2), (date(2025, 1, 3), 1)]
    assert to_daily([]) == []


def test_to_weekly_groups_iso_weeks():
    daily = [(date(2024, 12, 30), 1), (date(2025, 1, 5), 2), (date(2025, 1, 6), 4)]
    weekly = to_weekly(daily)
    assert weekly == [week('2025-W01', 3), week('2025-W02', 4)]
    assert weekly[0].start == date(2024, 12, 30)
    assert weekly[0].end == date(2025, 1, 5)


def test_to_cumulative_running_total():
    daily = [(date(2025, 1, 1), 2), (date(2025, 1, 3), 1)]
    assert to_cumulative(daily) == [(date(2025, 1, 1), 2), (date(2025, 1, 3), 3)]


def test_densify_weekly_fills_gaps_with_zero():
    dense = densify_weekly([week('2025-W04', 1), week('2025-W01', 3)])
    assert [(w.week, w.total) for w in dense] == [
        ('2025-W01', 3), ('2025-W02', 0), ('2025-W03', 0), ('2025-W04', 1),
    ]
    assert dense[1].start == date(2025, 1, 6)


def test_densify_weekly_across_53_week_year():
    dense = densify_weekly([week('2020-W52', 1), week('2021-W01', 2)])
    assert [w.week for w in dense] == ['2020-W52', '2020-W53', '2021-W01']
    assert densify_weekly([]) == []


def test_aggregate_document():
    doc = aggregate('owner/repo', ['2025-01-06T08:00:00Z', '2025-01-01T08:00:00Z'], stars_now=2)
    assert doc == {
        'repo': 'owner/repo',
        'stars_now': 2,
        'weekly': [
            {'week': '2025-W01', 'total': 1, 'start': '2024-12-30', 'end': '2025-01-05'},
            {'week': '2025-W02', 'total': 1, 'start': '2025-01-06', 'end': '2025-01-12'},
        ],
        'cumulative': [
            {'date': '2025-01-01', 'value': 1},
            {'date': '2025-01-06', 'value': 2},
        ],
    }
