#!/usr/bin/env -S uv run
import argparse

from star_trends import config
from star_trends.github import build_candidates
from star_trends.store import JsonDirStore
from star_trends.timeutil import quarter_label


def main():
    parser = argparse.ArgumentParser(description="Build the candidate repo list for a quarter")
    parser.add_argument('year', type=int)
    parser.add_argument('quarter', help="Q1..Q4")
    parser.add_argument('--top', type=int, default=5000, help="search fallback size")
    args = parser.parse_args()

    q = int(args.quarter.upper().lstrip('Q'))
    label = quarter_label(args.year, q)
    store = JsonDirStore(config.DATA_DIR)

    names = build_candidates(store, args.year, q, top_n=args.top)
    store.write_candidates(label, names)
    print(f"Wrote {len(names)} candidates to {store.candidates_path(label)}")


if __name__ == '__main__':
    main()
