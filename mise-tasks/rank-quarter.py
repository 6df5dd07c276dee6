#!/usr/bin/env -S uv run
import argparse

from star_trends import config
from star_trends.ranking import rank_quarter_delta
from star_trends.store import JsonDirStore
from star_trends.timeutil import quarter_label


def main():
    parser = argparse.ArgumentParser(description="Rank repos by stars gained during a quarter")
    parser.add_argument('year', type=int)
    parser.add_argument('q', type=int, choices=[1, 2, 3, 4])
    args = parser.parse_args()

    store = JsonDirStore(config.DATA_DIR)
    rows = rank_quarter_delta(store.iter_histories(), args.year, args.q)
    out_path = store.write_ranking(quarter_label(args.year, args.q), rows, ross=False)
    print(f"ranked {quarter_label(args.year, args.q)} -> {out_path} ({len(rows)} rows)")


if __name__ == '__main__':
    main()
