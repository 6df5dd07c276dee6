#!/usr/bin/env -S uv run
import requests

from star_trends import config
from star_trends.github import fetch_repo_meta
from star_trends.store import JsonDirStore


def main():
    store = JsonDirStore(config.DATA_DIR)
    candidates = store.read_candidates()
    if not candidates:
        raise SystemExit("No candidates found; run build-candidates first.")

    for c in candidates:
        try:
            meta = fetch_repo_meta(c['owner'], c['repo'])
        except requests.RequestException as e:
            print(f"meta error {c['owner']}/{c['repo']}: {e}")
            continue
        store.write_meta(meta)
        print(f"meta {meta['repo']} {meta['stars_now']:,}")


if __name__ == '__main__':
    main()
