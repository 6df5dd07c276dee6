#!/usr/bin/env -S uv run
import time
from datetime import datetime, timezone

import requests

from star_trends import config
from star_trends.github import fetch_owner
from star_trends.store import JsonDirStore


def main():
    store = JsonDirStore(config.DATA_DIR)
    repos = store.repos()
    print(f"Enriching owners for {len(repos)} repos...")

    owners = {}
    for repo in repos:
        login = repo.split('/', 1)[0]
        if login not in owners:
            try:
                owners[login] = fetch_owner(login)
            except requests.RequestException as e:
                print(f"owner error {login}: {e}")
                owners[login] = None
            time.sleep(0.2)

        if owners[login] is None:
            print(f"no owner profile for {repo}")
            continue
        store.write_owner(repo, {
            'repo': repo,
            **owners[login],
            'enriched_at': datetime.now(timezone.utc).isoformat(),
        })
        print(f"owner {repo} ({owners[login]['owner_type']})")


if __name__ == '__main__':
    main()
