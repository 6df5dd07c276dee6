import os
from pathlib import Path

DATA_DIR = Path(os.environ.get('STAR_TRENDS_DATA', 'data'))
CHARTS_DIR = Path('charts')
README_PATH = Path('README.md')

GITHUB_API = 'https://api.github.com'
STAR_MEDIA_TYPE = 'application/vnd.github.v3.star+json'
JSON_MEDIA_TYPE = 'application/vnd.github+json'
API_VERSION = '2022-11-28'

CONCURRENCY = int(os.environ.get('STAR_TRENDS_CONCURRENCY', '4'))
# Optional JSON file with a slice of the candidate list, for chunked runs
CANDIDATES_CHUNK = os.environ.get('CANDIDATES_CHUNK')

# ROSS ranking
ROSS_WINDOW_DAYS = 90
ROSS_MIN_START_STARS = 1000
TOP_N = 100
REL_GAIN_DIGITS = 6

# Holt-Winters
SEASON_LENGTH = 52
ALPHA = 0.3
BETA = 0.1
GAMMA = 0.3
FORECAST_HORIZON = 12

TRENDING_LANGUAGES = [
    'javascript', 'typescript', 'python', 'go', 'rust', 'java',
    'c++', 'c', 'php', 'ruby', 'kotlin',
]
SEARCH_LANGUAGES = TRENDING_LANGUAGES + ['shell', 'dart']


def github_token(required=True):
    """GitHub token from GH_TOKEN, falling back to GITHUB_TOKEN"""
    token = os.environ.get('GH_TOKEN') or os.environ.get('GITHUB_TOKEN')
    if not token and required:
        raise ValueError("GH_TOKEN or GITHUB_TOKEN environment variable is required")
    return token


def github_headers(accept=JSON_MEDIA_TYPE, required=False):
    headers = {
        'Accept': accept,
        'X-GitHub-Api-Version': API_VERSION,
    }
    token = github_token(required=required)
    if token:
        headers['Authorization'] = f'Bearer {token}'
    return headers
