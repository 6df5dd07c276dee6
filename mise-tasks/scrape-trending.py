#!/usr/bin/env -S uv run
import time
from datetime import datetime, timezone

import requests

from star_trends import config
from star_trends.github import fetch_trending
from star_trends.store import JsonDirStore
from star_trends.timeutil import iso_week_key


def main():
    store = JsonDirStore(config.DATA_DIR)
    week_key = iso_week_key(datetime.now(timezone.utc).date())

    print(f"Scraping weekly trending for {week_key}...")
    overall = fetch_trending()
    by_language = {}
    for lang in config.TRENDING_LANGUAGES:
        try:
            by_language[lang] = fetch_trending(lang)
        except requests.RequestException as e:
            print(f"  {lang}: {e}")
            by_language[lang] = []
        time.sleep(0.4)

    store.write_trending(week_key, {
        'week': week_key,
        'scraped_at': datetime.now(timezone.utc).isoformat(),
        'overall': overall,
        'by_language': by_language,
    })
    total = len(overall) + sum(len(repos) for repos in by_language.values())
    print(f"Saved {total} trending entries to {store.trending_dir / (week_key + '.json')}")


if __name__ == '__main__':
    main()
