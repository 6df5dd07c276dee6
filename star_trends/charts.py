from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.dates import DateFormatter
from scipy import stats

from .series import densify_weekly


def daily_frame(cumulative) -> pd.Series:
    """Cumulative series as one value per calendar day (forward filled)"""
    if not cumulative:
        return pd.Series(dtype='int64')
    s = pd.Series(
        [value for _, value in cumulative],
        index=pd.to_datetime([day for day, _ in cumulative]),
    )
    dates = pd.date_range(start=s.index.min(), end=s.index.max(), freq='D')
    return s.reindex(dates).ffill().astype(int)


def calc_daily_avg(cumulative, timeframes=(30, 90, 180)):
    """Average stars per day from linear fits over the trailing timeframes"""
    daily = daily_frame(cumulative)
    if len(daily) < 2:
        return 0

    total_days = (daily.index.max() - daily.index.min()).days
    daily_gains = []
    for days in timeframes:
        # Skip timeframes longer than available data
        if days > total_days:
            continue
        recent = daily[daily.index >= daily.index.max() - pd.Timedelta(days=days)]
        if len(recent) < 2:
            continue
        x = (recent.index - recent.index.min()).days
        slope, _, _, _, _ = stats.linregress(x, recent.values)
        daily_gains.append(slope)

    if not daily_gains:
        return 0
    return sum(daily_gains) / len(daily_gains)


def plot_ross_quarter(rows, lookup, path, limit=10):
    """Cumulative stars of the top ranked repos with their best windows shaded"""
    fig, ax = plt.subplots(figsize=(14, 6))
    colors = plt.cm.tab10(np.linspace(0, 1, 10))

    quarter = rows[0]['quarter'] if rows else ''
    plotted = 0
    for row in rows[:limit]:
        history = lookup(row['repo'])
        if history is None or not history.cumulative:
            continue
        color = colors[plotted % len(colors)]
        daily = daily_frame(history.cumulative)
        daily_avg = calc_daily_avg(history.cumulative)
        ax.plot(
            daily.index,
            daily.values,
            color=color,
            label=f"#{row['rank']} {row['repo']} (+{daily_avg:.1f}/day, {row['rel_gain_90d']:+.1%})",
            linewidth=2,
        )
        ax.axvspan(
            pd.Timestamp(row['best_window_start']),
            pd.Timestamp(row['best_window_end']),
            color=color,
            alpha=0.08,
        )
        plotted += 1

    if plotted:
        ax.set_ylabel('GitHub Stars', fontsize=12)
        ax.set_xlabel('Date', fontsize=12)
        ax.legend(loc='upper left', fontsize=9)
        ax.grid(True, alpha=0.3)
        ax.xaxis.set_major_formatter(DateFormatter('%Y-%m-%d'))
        plt.xticks(rotation=45)
    else:
        ax.text(0.5, 0.5, 'No ranked repos with history',
                horizontalalignment='center', verticalalignment='center',
                transform=ax.transAxes, fontsize=14, color='gray')
        ax.set_xticks([])
        ax.set_yticks([])
    ax.set_title(f'{quarter} Fastest Growing Repos (best 90-day window)', fontsize=14, fontweight='bold')

    plt.tight_layout()
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(path, dpi=300, bbox_inches='tight')
    plt.close(fig)
    return plotted


def plot_forecast(history, forecast_row, path, weeks_shown=52):
    """Observed weekly stars followed by the forecast weeks"""
    weekly = densify_weekly(history.weekly)[-weeks_shown:]
    fig, ax = plt.subplots(figsize=(12, 6))

    ax.bar(
        [pd.Timestamp(w.start) for w in weekly],
        [w.total for w in weekly],
        width=6,
        color='#2E86C1',
        label='observed',
    )
    dated = [week for week in forecast_row.forecast if week.start is not None]
    if dated:
        ax.plot(
            [pd.Timestamp(week.start) for week in dated],
            [week.pred for week in dated],
            color='#E67E22',
            linestyle='--',
            marker='o',
            markersize=4,
            label=f'forecast ({forecast_row.horizon_weeks} weeks)',
        )

    ax.set_ylabel('Stars per week', fontsize=12)
    ax.set_xlabel('Week', fontsize=12)
    ax.set_title(f'{history.repo}: weekly stars', fontsize=14, fontweight='bold')
    ax.legend(loc='upper left')
    ax.grid(True, alpha=0.3)
    ax.xaxis.set_major_formatter(DateFormatter('%Y-%m-%d'))
    plt.xticks(rotation=45)

    plt.tight_layout()
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(path, dpi=300, bbox_inches='tight')
    plt.close(fig)
