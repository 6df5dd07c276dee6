#!/usr/bin/env -S uv run
import asyncio

from star_trends import config
from star_trends.github import fetch_all_stargazers, merge_timestamps
from star_trends.store import JsonDirStore


def main():
    config.github_token(required=True)
    store = JsonDirStore(config.DATA_DIR)

    print("Reading candidates...")
    repos = [f"{c['owner']}/{c['repo']}" for c in store.read_candidates()]
    if not repos:
        raise SystemExit("No candidates found; run build-candidates first.")
    print(f"Found {len(repos)} candidate repos")

    existing = {repo: store.read_raw_stars(repo) for repo in repos}
    known_newest = {repo: ts[-1] for repo, ts in existing.items() if ts}

    print("\nFetching stargazer history...")
    new_stars = asyncio.run(fetch_all_stargazers(repos, known_newest))

    for repo in repos:
        if repo not in new_stars:
            continue
        if not new_stars[repo]:
            print(f"no new stars {repo}")
            continue
        store.write_raw_stars(repo, merge_timestamps(existing[repo], new_stars[repo]))
        print(f"updated {repo} +{len(new_stars[repo])}")


if __name__ == '__main__':
    main()
