#!/usr/bin/env -S uv run
from star_trends import config
from star_trends.series import aggregate
from star_trends.store import JsonDirStore, meta_attachment


def main():
    store = JsonDirStore(config.DATA_DIR)
    repos = store.raw_repos()
    if not repos:
        raise SystemExit("No raw stargazer files found; run fetch-stars first.")

    for repo in repos:
        meta = meta_attachment(store.read_meta(repo))
        doc = aggregate(repo, store.read_raw_stars(repo), stars_now=meta['stars_now'] if meta else None)
        store.write_weekly(doc)
        print(f"weekly wrote {repo} ({len(doc['weekly'])} weeks)")


if __name__ == '__main__':
    main()
