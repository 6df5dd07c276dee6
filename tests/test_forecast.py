from datetime import date, timedelta

import pytest

from star_trends.forecast import (
    SmoothingState,
    forecast_ranked,
    forecast_repo,
    holt_winters_additive,
    round_half_up,
    smooth,
)
from star_trends.series import WeekTotal, densify_weekly
from star_trends.store import MemoryStore, RepoHistory
from star_trends.timeutil import iso_week_key, week_bounds


def weekly_history(repo, totals, first_monday=date(2024, 1, 1), skip=()):
    weekly = []
    for i, total in enumerate(totals):
        if i in skip:
            continue
        key = iso_week_key(first_monday + timedelta(days=7 * i))
        weekly.append(WeekTotal(key, total, *week_bounds(key)))
    return RepoHistory(repo=repo, weekly=weekly)


@pytest.mark.parametrize('length', [0, 1, 53])
def test_short_series_forecasts_zeros(length):
    assert holt_winters_additive([5] * length) == [0] * 12
    assert holt_winters_additive([5] * length, horizon=3) == [0, 0, 0]


def test_flat_series_stays_flat():
    assert holt_winters_additive([10] * 60) == [10] * 12


def test_flat_series_state():
    state = smooth([10] * 60, 52, 0.3, 0.1, 0.3)
    assert state == SmoothingState(10, 0, (0,) * 52)


def test_minimum_length_series_forecasts():
    assert holt_winters_additive([7] * 54, horizon=4) == [7, 7, 7, 7]


def test_predictions_clamped_to_non_negative_ints():
    series = [max(0, 600 - 12 * t) for t in range(60)]
    forecast = holt_winters_additive(series, horizon=20)
    assert len(forecast) == 20
    assert all(isinstance(p, int) and p >= 0 for p in forecast)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4999) == 2
    assert round_half_up(-0.4) == 0


def test_forecast_repo_dates_follow_last_week():
    row = forecast_repo(weekly_history('a/b', [10] * 60))
    last_start, last_end = week_bounds(row.last_week)
    assert row.last_week == '2025-W08'
    assert row.horizon_weeks == 12
    assert [week.offset for week in row.forecast] == [f'+{i}' for i in range(1, 13)]
    assert [week.pred for week in row.forecast] == [10] * 12
    assert row.forecast[0].start == last_end + timedelta(days=1)
    assert row.forecast[0].start.weekday() == 0
    assert row.forecast[0].end == row.forecast[0].start + timedelta(days=6)
    assert row.forecast[-1].start == row.forecast[0].start + timedelta(days=77)


def test_forecast_repo_densifies_gap_weeks():
    totals = [20 if i % 2 == 0 else 0 for i in range(60)]
    history = weekly_history('a/b', totals, skip=set(range(1, 60, 2)))
    assert len(history.weekly) == 30

    row = forecast_repo(history)
    dense = [w.total for w in densify_weekly(history.weekly)]
    assert len(dense) == 59
    assert [week.pred for week in row.forecast] == holt_winters_additive(dense)


def test_forecast_repo_without_history():
    row = forecast_repo(RepoHistory(repo='new/repo'), horizon=3)
    assert row.last_week is None
    assert [week.pred for week in row.forecast] == [0, 0, 0]
    assert row.to_dict()['forecast'][0] == {'week': '+1', 'start': None, 'end': None, 'pred': 0}


def test_forecast_row_dict():
    row = forecast_repo(weekly_history('a/b', [10] * 60), horizon=1)
    assert row.to_dict() == {
        'repo': 'a/b',
        'horizon_weeks': 1,
        'last_week': '2025-W08',
        'forecast': [{'week': '+1', 'start': '2025-02-24', 'end': '2025-03-02', 'pred': 10}],
    }


def test_forecast_ranked_skips_missing(capsys):
    store = MemoryStore([weekly_history('a/b', [10] * 60)])
    rows = forecast_ranked(['a/b', 'missing/repo'], store.get_history, horizon=2)
    assert [row.repo for row in rows] == ['a/b']
    assert 'missing/repo' in capsys.readouterr().out
