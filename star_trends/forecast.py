"""Weekly star forecasts with additive Holt-Winters smoothing.

The smoother is a single chronological pass over the weekly totals, threaded
through an explicit ``(level, trend, season)`` state, followed by a projection
``level + k * trend + season[slot]`` for k = 1..horizon. Series too short to
seed a full season (fewer than ``season_length + 2`` weeks) forecast zeros.
"""

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from functools import reduce
from typing import List, NamedTuple, Optional

from . import config
from .series import densify_weekly


class SmoothingState(NamedTuple):
    level: float
    trend: float
    season: tuple


@dataclass(frozen=True)
class ForecastWeek:
    offset: str
    start: Optional[date]
    end: Optional[date]
    pred: int

    def to_dict(self):
        return {
            'week': self.offset,
            'start': self.start.isoformat() if self.start else None,
            'end': self.end.isoformat() if self.end else None,
            'pred': self.pred,
        }


@dataclass
class ForecastRow:
    repo: str
    horizon_weeks: int
    last_week: Optional[str]
    forecast: List[ForecastWeek] = field(default_factory=list)

    def to_dict(self):
        return {
            'repo': self.repo,
            'horizon_weeks': self.horizon_weeks,
            'last_week': self.last_week,
            'forecast': [week.to_dict() for week in self.forecast],
        }


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def initial_state(series, season_length) -> SmoothingState:
    level = series[0]
    return SmoothingState(
        level=level,
        trend=series[1] - series[0],
        season=tuple(y - level for y in series[:season_length]),
    )


def smooth(series, season_length, alpha, beta, gamma) -> SmoothingState:
    def step(state, observation):
        t, y = observation
        i = t % season_length
        level = alpha * (y - state.season[i]) + (1 - alpha) * (state.level + state.trend)
        trend = beta * (level - state.level) + (1 - beta) * state.trend
        season = list(state.season)
        season[i] = gamma * (y - level) + (1 - gamma) * season[i]
        return SmoothingState(level, trend, tuple(season))

    return reduce(step, enumerate(series), initial_state(series, season_length))


def holt_winters_additive(
    series,
    season_length=config.SEASON_LENGTH,
    alpha=config.ALPHA,
    beta=config.BETA,
    gamma=config.GAMMA,
    horizon=config.FORECAST_HORIZON,
) -> List[int]:
    """Forecast ``horizon`` future values, clamped to non-negative integers"""
    if len(series) < season_length + 2:
        return [0] * horizon

    state = smooth(series, season_length, alpha, beta, gamma)
    last_idx = len(series) - 1
    forecast = []
    for k in range(1, horizon + 1):
        pred = state.level + k * state.trend + state.season[(last_idx + k) % season_length]
        forecast.append(max(0, round_half_up(pred)))
    return forecast


def forecast_repo(history, horizon=config.FORECAST_HORIZON, **params) -> ForecastRow:
    """Forecast weekly stars for one repository history.

    Inactive weeks are filled with zeros first so the seasonal slots line up
    with calendar weeks. Forecast week k starts k-1 weeks after the day
    following the last observed week.
    """
    weekly = densify_weekly(history.weekly)
    preds = holt_winters_additive([w.total for w in weekly], horizon=horizon, **params)

    last = weekly[-1] if weekly else None
    weeks = []
    for i, pred in enumerate(preds):
        if last is None:
            weeks.append(ForecastWeek(f'+{i + 1}', None, None, pred))
            continue
        start = last.end + timedelta(days=1 + 7 * i)
        weeks.append(ForecastWeek(f'+{i + 1}', start, start + timedelta(days=6), pred))

    return ForecastRow(
        repo=history.repo,
        horizon_weeks=horizon,
        last_week=last.week if last else None,
        forecast=weeks,
    )


def forecast_ranked(repos, lookup, horizon=config.FORECAST_HORIZON, **params):
    """Forecast each ranked repo, resolving histories through ``lookup(repo)``"""
    rows = []
    for repo in repos:
        history = lookup(repo)
        if history is None:
            print(f"Warning: no weekly history for {repo}, skipping")
            continue
        rows.append(forecast_repo(history, horizon=horizon, **params))
    return rows
