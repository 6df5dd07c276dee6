#!/usr/bin/env -S uv run
import argparse

from star_trends import config
from star_trends.charts import plot_forecast
from star_trends.forecast import forecast_repo
from star_trends.store import JsonDirStore
from star_trends.timeutil import parse_quarter


def main():
    parser = argparse.ArgumentParser(description="Chart weekly stars and forecasts for top ranked repos")
    parser.add_argument('quarter', help="YYYY-Qn")
    parser.add_argument('--limit', type=int, default=5)
    parser.add_argument('--horizon', type=int, default=config.FORECAST_HORIZON)
    args = parser.parse_args()

    parse_quarter(args.quarter)
    store = JsonDirStore(config.DATA_DIR)
    rows = store.read_ranking(args.quarter)
    if rows is None:
        raise SystemExit(f"No ROSS ranking for {args.quarter}; run rank-ross-quarter first.")

    for row in rows[:args.limit]:
        history = store.get_history(row['repo'])
        if history is None:
            print(f"Warning: no weekly history for {row['repo']}")
            continue
        out_path = config.CHARTS_DIR / 'forecast' / row['repo'].replace('/', '__')
        out_path = out_path.with_suffix('.png')
        plot_forecast(history, forecast_repo(history, horizon=args.horizon), out_path)
        print(f"Saved {out_path}")


if __name__ == '__main__':
    main()
