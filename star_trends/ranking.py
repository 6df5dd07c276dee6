"""Quarterly rankings.

ROSS ranking: for every day E in the quarter take the 90-day window ending on
E, skip it unless the window starts with at least 1000 stars, and keep the
window with the highest relative gain. Repositories are then ordered by that
best relative gain and the top 100 ranked.

Delta ranking: plain star gain between the first and last day of the quarter.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional

from . import config
from .series import validate_cumulative, value_as_of
from .timeutil import add_days, day_range, quarter_bounds, quarter_label


@dataclass(frozen=True)
class RossWindow:
    rel_gain: float = 0.0
    abs_gain: int = 0
    start: Optional[date] = None
    end: Optional[date] = None
    start_value: int = 0
    end_value: int = 0

    @property
    def is_eligible(self) -> bool:
        return self.start is not None and self.rel_gain > 0


@dataclass
class RankedRow:
    repo: str
    quarter: str
    rank: int
    window: RossWindow
    attachments: Dict[str, Any] = field(default_factory=dict)

    @property
    def rel_gain(self) -> float:
        return round(self.window.rel_gain, config.REL_GAIN_DIGITS)

    def to_dict(self):
        row = dict(self.attachments)
        row.update({
            'rank': self.rank,
            'repo': self.repo,
            'quarter': self.quarter,
            'best_window_start': self.window.start.isoformat(),
            'best_window_end': self.window.end.isoformat(),
            'window_start_stars': self.window.start_value,
            'window_end_stars': self.window.end_value,
            'abs_gain_90d': self.window.abs_gain,
            'rel_gain_90d': self.rel_gain,
        })
        return row


@dataclass
class DeltaRow:
    repo: str
    quarter: str
    rank: int
    cumulative_start: int
    cumulative_end: int

    @property
    def delta(self) -> int:
        return self.cumulative_end - self.cumulative_start

    def to_dict(self):
        return {
            'rank': self.rank,
            'repo': self.repo,
            'quarter': self.quarter,
            'cumulative_start': self.cumulative_start,
            'cumulative_end': self.cumulative_end,
            'delta': self.delta,
        }


def max_ross_window(
    cumulative,
    quarter_start,
    quarter_end,
    window_days=config.ROSS_WINDOW_DAYS,
    min_start=config.ROSS_MIN_START_STARS,
) -> RossWindow:
    """Best relative-growth window ending inside the quarter.

    Windows starting below ``min_start`` stars are skipped outright. On ties
    the earliest window end wins.
    """
    best = RossWindow()
    if not cumulative:
        return best

    for end in day_range(quarter_start, quarter_end):
        start = add_days(end, -(window_days - 1))
        start_value = value_as_of(cumulative, start)
        if start_value < min_start:
            continue
        end_value = value_as_of(cumulative, end)
        gain = end_value - start_value
        rel = gain / start_value if start_value > 0 else 0.0
        if rel > best.rel_gain:
            best = RossWindow(rel, gain, start, end, start_value, end_value)
    return best


def _top(rows, sort_key, limit):
    # sorted() is stable, so equal scores keep input enumeration order
    return sorted(rows, key=sort_key, reverse=True)[:limit]


def rank_ross_quarter(histories, year: int, q: int, limit=config.TOP_N, **window_opts):
    """Rank histories by best ROSS window in the quarter -> list of RankedRow"""
    quarter_start, quarter_end = quarter_bounds(year, q)
    label = quarter_label(year, q)

    scored = []
    for history in histories:
        validate_cumulative(history.cumulative, name=history.repo)
        best = max_ross_window(history.cumulative, quarter_start, quarter_end, **window_opts)
        if not best.is_eligible:
            continue
        scored.append((history, best))

    top = _top(scored, lambda item: round(item[1].rel_gain, config.REL_GAIN_DIGITS), limit)
    return [
        RankedRow(history.repo, label, rank, best, dict(history.attachments))
        for rank, (history, best) in enumerate(top, start=1)
    ]


def rank_quarter_delta(histories, year: int, q: int, limit=config.TOP_N):
    """Rank histories by cumulative stars gained from quarter start to end"""
    quarter_start, quarter_end = quarter_bounds(year, q)
    label = quarter_label(year, q)

    rows = []
    for history in histories:
        validate_cumulative(history.cumulative, name=history.repo)
        rows.append(DeltaRow(
            repo=history.repo,
            quarter=label,
            rank=0,
            cumulative_start=value_as_of(history.cumulative, quarter_start),
            cumulative_end=value_as_of(history.cumulative, quarter_end),
        ))

    top = _top(rows, lambda row: row.delta, limit)
    for rank, row in enumerate(top, start=1):
        row.rank = rank
    return top
