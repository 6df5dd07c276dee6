#!/usr/bin/env -S uv run
import argparse

from star_trends import config
from star_trends.charts import plot_ross_quarter
from star_trends.store import JsonDirStore
from star_trends.timeutil import parse_quarter


def main():
    parser = argparse.ArgumentParser(description="Chart the top ROSS-ranked repos of a quarter")
    parser.add_argument('quarter', help="YYYY-Qn")
    parser.add_argument('--limit', type=int, default=10)
    args = parser.parse_args()

    parse_quarter(args.quarter)
    store = JsonDirStore(config.DATA_DIR)
    rows = store.read_ranking(args.quarter)
    if rows is None:
        raise SystemExit(f"No ROSS ranking for {args.quarter}; run rank-ross-quarter first.")

    out_path = config.CHARTS_DIR / f'ross_{args.quarter}.png'
    plotted = plot_ross_quarter(rows, store.get_history, out_path, limit=args.limit)
    print(f"Saved visualization to {out_path}")
    print(f"Plotted {plotted} repos")


if __name__ == '__main__':
    main()
