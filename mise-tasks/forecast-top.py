#!/usr/bin/env -S uv run
import argparse

from star_trends import config
from star_trends.forecast import forecast_ranked
from star_trends.store import JsonDirStore
from star_trends.timeutil import parse_quarter


def main():
    parser = argparse.ArgumentParser(description="Forecast weekly stars for a quarter's ranked repos")
    parser.add_argument('quarter', help="YYYY-Qn")
    parser.add_argument('--source', choices=['ross', 'delta'], default='ross')
    parser.add_argument('--horizon', type=int, default=config.FORECAST_HORIZON)
    args = parser.parse_args()

    parse_quarter(args.quarter)
    store = JsonDirStore(config.DATA_DIR)
    ranking = store.read_ranking(args.quarter, ross=args.source == 'ross')
    if ranking is None:
        raise SystemExit(f"No {args.source} ranking for {args.quarter}; run the ranking task first.")

    forecasts = forecast_ranked([row['repo'] for row in ranking], store.get_history, horizon=args.horizon)
    for fc in forecasts:
        store.write_forecast(fc)
        print(f"forecasted {fc.repo}: {', '.join(str(w.pred) for w in fc.forecast[:4])} ...")
    print(f"Wrote {len(forecasts)} forecasts to {store.forecast_dir}")


if __name__ == '__main__':
    main()
