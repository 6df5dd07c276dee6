#!/usr/bin/env -S uv run
"""Generate a commit message with the top 5 repos of a quarter's ranking."""

import sys

from star_trends import config
from star_trends.report import commit_message
from star_trends.store import JsonDirStore


def main():
    if len(sys.argv) < 2:
        print("update stats")
        return

    rows = JsonDirStore(config.DATA_DIR).read_ranking(sys.argv[1]) or []
    print(commit_message(rows))


if __name__ == '__main__':
    main()
