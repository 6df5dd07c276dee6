#!/usr/bin/env -S uv run
import argparse

from star_trends import config
from star_trends.ranking import rank_ross_quarter
from star_trends.store import JsonDirStore
from star_trends.timeutil import quarter_label


def main():
    parser = argparse.ArgumentParser(description="ROSS ranking: best 90-day relative growth in a quarter")
    parser.add_argument('year', type=int)
    parser.add_argument('q', type=int, choices=[1, 2, 3, 4])
    args = parser.parse_args()

    label = quarter_label(args.year, args.q)
    store = JsonDirStore(config.DATA_DIR)
    rows = rank_ross_quarter(store.iter_histories(), args.year, args.q)
    out_path = store.write_ranking(label, rows)
    print(f"ROSS ranked {label} -> {out_path} ({len(rows)} rows)")
    for row in rows[:5]:
        print(f"  #{row.rank} {row.repo} {row.rel_gain:+.1%} ({row.window.abs_gain:+,d} stars)")


if __name__ == '__main__':
    main()
