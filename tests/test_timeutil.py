from datetime import date, timedelta

import pytest

from star_trends.timeutil import (
    add_days,
    day_range,
    iso_week_key,
    iso_weeks_in_quarter,
    next_week_key,
    parse_quarter,
    parse_week_key,
    quarter_bounds,
    quarter_label,
    week_bounds,
)


def all_days(start, end):
    return list(day_range(start, end))


@pytest.mark.parametrize('day, expected', [
    (date(2025, 1, 15), '2025-W03'),
    (date(2024, 12, 31), '2025-W01'),
    (date(2021, 1, 1), '2020-W53'),
    (date(2023, 1, 1), '2022-W52'),
    (date(2026, 12, 31), '2026-W53'),
])
def test_iso_week_key_year_boundaries(day, expected):
    assert iso_week_key(day) == expected


def test_iso_week_key_accepts_strings_and_timestamps():
    assert iso_week_key('2025-01-15') == '2025-W03'
    assert iso_week_key('2025-01-15T23:10:00Z') == '2025-W03'


def test_iso_week_key_matches_isocalendar():
    for day in all_days(date(2019, 12, 1), date(2027, 1, 31)):
        iso = day.isocalendar()
        assert iso_week_key(day) == f'{iso.year}-W{iso.week:02d}'


def test_week_bounds_contains_day():
    for day in all_days(date(2020, 12, 1), date(2023, 1, 31)):
        monday, sunday = week_bounds(iso_week_key(day))
        assert monday.weekday() == 0
        assert sunday - monday == timedelta(days=6)
        assert monday <= day <= sunday


def test_week_bounds_when_year_starts_late_in_week():
    # Jan 1 2021 is a Friday, so week 1 starts on Jan 4
    assert week_bounds('2021-W01') == (date(2021, 1, 4), date(2021, 1, 10))
    assert week_bounds('2025-W01') == (date(2024, 12, 30), date(2025, 1, 5))


def test_next_week_key_rolls_over_year():
    assert next_week_key('2020-W52') == '2020-W53'
    assert next_week_key('2020-W53') == '2021-W01'
    assert next_week_key('2025-W09') == '2025-W10'


def test_parse_week_key_rejects_garbage():
    assert parse_week_key('2025-W03') == (2025, 3)
    with pytest.raises(ValueError):
        parse_week_key('2025-3')


@pytest.mark.parametrize('q, start, end', [
    (1, date(2024, 1, 1), date(2024, 3, 31)),
    (2, date(2024, 4, 1), date(2024, 6, 30)),
    (3, date(2024, 7, 1), date(2024, 9, 30)),
    (4, date(2024, 10, 1), date(2024, 12, 31)),
])
def test_quarter_bounds(q, start, end):
    assert quarter_bounds(2024, q) == (start, end)


def test_quarter_bounds_rejects_bad_quarter():
    with pytest.raises(ValueError):
        quarter_bounds(2025, 5)


def test_quarter_labels():
    assert quarter_label(2025, 3) == '2025-Q3'
    assert parse_quarter('2025-Q3') == (2025, 3)
    with pytest.raises(ValueError):
        parse_quarter('2025-Q5')


def test_iso_weeks_in_quarter():
    weeks = iso_weeks_in_quarter(2025, 1)
    assert weeks[0] == '2025-W01'
    assert weeks[-1] == '2025-W14'
    assert len(weeks) == 14
    assert '2025-W27' in iso_weeks_in_quarter(2025, 3)


def test_add_days():
    assert add_days('2025-03-31', -89) == date(2025, 1, 1)
