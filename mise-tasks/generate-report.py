#!/usr/bin/env -S uv run
import argparse

from star_trends import config
from star_trends.report import format_forecast_table, format_ross_table, update_readme
from star_trends.store import JsonDirStore
from star_trends.timeutil import parse_quarter

SECTION_HEADER = "## Fastest Growing Repos ({quarter})"
START_MARKER = "<!-- START ross-ranking -->"
END_MARKER = "<!-- END ross-ranking -->"
FORECAST_HEADER = "## Weekly Star Forecasts"
FORECAST_START_MARKER = "<!-- START forecasts -->"
FORECAST_END_MARKER = "<!-- END forecasts -->"


def main():
    parser = argparse.ArgumentParser(description="Update README sections with ranking and forecasts")
    parser.add_argument('quarter', help="YYYY-Qn")
    parser.add_argument('--limit', type=int, default=25)
    args = parser.parse_args()

    parse_quarter(args.quarter)
    store = JsonDirStore(config.DATA_DIR)
    rows = store.read_ranking(args.quarter)
    if not rows:
        raise SystemExit(f"No ROSS ranking for {args.quarter}; run rank-ross-quarter first.")

    update_readme(
        config.README_PATH,
        SECTION_HEADER.format(quarter=args.quarter),
        START_MARKER,
        END_MARKER,
        format_ross_table(rows, limit=args.limit),
    )

    forecasts = [fc for fc in (store.read_forecast(row['repo']) for row in rows[:args.limit]) if fc]
    update_readme(
        config.README_PATH,
        FORECAST_HEADER,
        FORECAST_START_MARKER,
        FORECAST_END_MARKER,
        format_forecast_table(forecasts),
    )
    print(
        f"Updated README with {args.quarter} ranking: "
        + ", ".join(f"{row['repo']} ({row['rel_gain_90d']:+.1%})" for row in rows[:3])
    )


if __name__ == '__main__':
    main()
