import asyncio
import re
import time
from datetime import datetime, timezone
from urllib.parse import quote, urlparse

import aiohttp
import requests
from tqdm import tqdm

from . import config
from .timeutil import iso_weeks_in_quarter, quarter_bounds

TRENDING_URL = 'https://github.com/trending'
TRENDING_REPO_RE = re.compile(r'<h2[^>]*>\s*<a[^>]*href="/([^/"]+)/([^/"]+)"')


def merge_timestamps(existing, new):
    """Sorted union of two stargazer timestamp lists"""
    return sorted(set(existing) | set(new))


def rate_limit_wait(headers, now=None, threshold=1):
    """Seconds to sleep before the next request, 0 if the budget allows it"""
    remaining = headers.get('X-RateLimit-Remaining')
    if remaining is None or int(remaining) > threshold:
        return 0
    reset_time = int(headers.get('X-RateLimit-Reset', 0))
    now = now if now is not None else time.time()
    return max(0, reset_time - now) + 1


def normalize_url(url):
    """Coerce a profile blog/homepage value to an http(s) URL, else None"""
    if not url:
        return None
    url = str(url).strip()
    if not url:
        return None
    if not re.match(r'^https?://', url, re.IGNORECASE):
        url = 'https://' + url
    parsed = urlparse(url)
    if not parsed.netloc or ' ' in parsed.netloc:
        return None
    return url


async def fetch_stargazer_timestamps(session, owner, repo, known_newest=None, pbar=None):
    """Fetch stargazer timestamps newer than ``known_newest`` for one repo"""
    headers = config.github_headers(accept=config.STAR_MEDIA_TYPE, required=True)
    per_page = 100
    timestamps = []
    page = 1

    while True:
        async with session.get(
            f'{config.GITHUB_API}/repos/{owner}/{repo}/stargazers',
            headers=headers,
            params={'per_page': per_page, 'page': page},
        ) as response:
            if response.status == 404:
                print(f"Warning: {owner}/{repo} not found")
                break

            wait_time = rate_limit_wait(response.headers)
            if response.status == 403 and wait_time > 0:
                if pbar:
                    pbar.set_description(f"Rate limited, waiting {int(wait_time)}s...")
                await asyncio.sleep(wait_time)
                if pbar:
                    pbar.set_description(f"Fetching {owner}/{repo}")
                continue
            response.raise_for_status()

            stars = await response.json()

        if not stars or not isinstance(stars, list):
            break

        # Pages run oldest first, so stored stars come before the new ones
        for star in stars:
            starred_at = star.get('starred_at')
            if not starred_at:
                continue
            if known_newest and starred_at <= known_newest:
                continue
            timestamps.append(starred_at)
            if pbar:
                pbar.update(1)

        if len(stars) < per_page:
            break
        page += 1

        if wait_time > 0:
            if pbar:
                pbar.set_description(f"Rate limited, waiting {int(wait_time)}s...")
            await asyncio.sleep(wait_time)
            if pbar:
                pbar.set_description(f"Fetching {owner}/{repo}")

    return sorted(timestamps)


async def fetch_all_stargazers(repos, known_newest=None, concurrency=config.CONCURRENCY):
    """Fetch new stargazer timestamps for many repos in parallel.

    ``known_newest`` maps ``owner/repo`` to the newest timestamp already
    stored. Repos that fail are reported and left out of the result.
    """
    known_newest = known_newest or {}
    semaphore = asyncio.Semaphore(concurrency)
    results = {}

    async with aiohttp.ClientSession() as session:
        pbars = [tqdm(position=i, desc=name, total=None) for i, name in enumerate(repos)]

        async def fetch_one(name, pbar):
            owner, repo = name.split('/', 1)
            async with semaphore:
                pbar.set_description(f"Fetching {name}")
                try:
                    results[name] = await fetch_stargazer_timestamps(
                        session, owner, repo, known_newest.get(name), pbar
                    )
                except aiohttp.ClientError as e:
                    print(f"Error fetching {name}: {e}")

        await asyncio.gather(*(fetch_one(name, pbar) for name, pbar in zip(repos, pbars)))
        for pbar in pbars:
            pbar.close()

    return results


def gh_get(url, params=None):
    response = requests.get(url, headers=config.github_headers(), params=params, timeout=30)
    wait_time = rate_limit_wait(response.headers, threshold=10)
    if wait_time > 0:
        print(f"  Rate limit low. Sleeping {wait_time:.0f}s...")
        time.sleep(wait_time)
    return response


def fetch_repo_meta(owner, repo):
    response = gh_get(f'{config.GITHUB_API}/repos/{owner}/{repo}')
    response.raise_for_status()
    data = response.json()
    return {
        'repo': f'{owner}/{repo}',
        'stars_now': data.get('stargazers_count', 0),
        'forks': data.get('forks_count', 0),
        'open_issues': data.get('open_issues_count', 0),
        'subscribers': data.get('subscribers_count', 0),
        'default_branch': data.get('default_branch', 'main'),
        'fetched_at': datetime.now(timezone.utc).isoformat(),
    }


def fetch_owner(owner):
    """Owner profile, trying the organization endpoint before the user one"""
    response = gh_get(f'{config.GITHUB_API}/orgs/{owner}')
    if response.status_code == 200:
        data = response.json()
        return {
            'owner_login': data.get('login'),
            'owner_type': 'Organization',
            'name': data.get('name'),
            'company': None,
            'bio': data.get('description'),
            'location': data.get('location'),
            'website': normalize_url(data.get('blog')),
            'created_at': data.get('created_at'),
            'followers': None,
            'public_repos': data.get('public_repos'),
        }

    response = gh_get(f'{config.GITHUB_API}/users/{owner}')
    if response.status_code == 200:
        data = response.json()
        return {
            'owner_login': data.get('login'),
            'owner_type': 'User',
            'name': data.get('name'),
            'company': data.get('company'),
            'bio': data.get('bio'),
            'location': data.get('location'),
            'website': normalize_url(data.get('blog')),
            'created_at': data.get('created_at'),
            'followers': data.get('followers'),
            'public_repos': data.get('public_repos'),
        }
    return None


def parse_trending(html):
    return [{'owner': owner, 'repo': repo} for owner, repo in TRENDING_REPO_RE.findall(html)]


def fetch_trending(lang=None):
    """Repos on the weekly trending page, overall or for one language"""
    url = f'{TRENDING_URL}/{quote(lang)}' if lang else TRENDING_URL
    response = requests.get(
        url,
        params={'since': 'weekly'},
        headers={'User-Agent': 'star-trends', 'Accept': 'text/html'},
        timeout=30,
    )
    response.raise_for_status()
    return parse_trending(response.text)


def trending_candidates(snapshots):
    """Union of ``owner/repo`` names across trending snapshots, sorted"""
    names = set()
    for snapshot in snapshots:
        for r in snapshot.get('overall', []):
            names.add(f"{r['owner']}/{r['repo']}")
        for repos in snapshot.get('by_language', {}).values():
            for r in repos:
                names.add(f"{r['owner']}/{r['repo']}")
    return sorted(names)


def search_candidates(year, q, top_n=5000):
    """Most-starred repos pushed since the quarter began, per language bucket.

    GitHub search returns at most 1000 results per query, so the query is
    split by language to widen coverage.
    """
    quarter_start, _ = quarter_bounds(year, q)
    config.github_token(required=True)
    results = {}

    for lang in config.SEARCH_LANGUAGES:
        page = 1
        while page <= 10 and len(results) < top_n:
            response = gh_get(
                f'{config.GITHUB_API}/search/repositories',
                params={
                    'q': f'language:{lang} pushed:>{quarter_start.isoformat()}',
                    'sort': 'stars',
                    'order': 'desc',
                    'per_page': 100,
                    'page': page,
                },
            )
            if response.status_code == 422:
                break
            response.raise_for_status()
            items = response.json().get('items', [])
            for item in items:
                results.setdefault(f"{item['owner']['login']}/{item['name']}")
            if len(items) < 100:
                break
            page += 1
            time.sleep(0.35)

    return sorted(list(results)[:top_n])


def build_candidates(store, year, q, top_n=5000):
    """Candidates from the quarter's trending snapshots, else from search"""
    snapshots = []
    for week_key in iso_weeks_in_quarter(year, q):
        snapshot = store.read_trending(week_key)
        if snapshot:
            snapshots.append(snapshot)

    names = trending_candidates(snapshots)
    if not names:
        print("No weekly trending snapshots found; using search fallback")
        names = search_candidates(year, q, top_n)
    return names
