"""Per-repository storage keyed by ``owner/repo``.

The analytics only need something that yields ``RepoHistory`` objects (for
ranking) or looks one up by name (for forecasting). ``MemoryStore`` does that
in memory; ``JsonDirStore`` does it over the JSON directory layout the tasks
read and write:

    data/raw/stars/owner__repo.json            sorted stargazer timestamps
    data/raw/weekly_trending/YYYY-Wnn.json     trending snapshots
    data/derived/YYYY-Qn/candidates.json       candidate repositories
    data/derived/weekly/owner__repo.json       {repo, stars_now, weekly, cumulative}
    data/derived/meta/owner__repo.json         repository counts
    data/derived/owner/owner__repo.json        owner profile
    data/derived/quarter/YYYY-Qn.json          star-delta ranking
    data/derived/quarter-ross/YYYY-Qn.json     ROSS ranking
    data/derived/forecast/owner__repo.json     weekly forecast
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import config
from .series import WeekTotal, cumulative_from_records, weekly_from_records

QUARTER_DIR_RE = re.compile(r'^\d{4}-Q[1-4]$')


@dataclass
class RepoHistory:
    repo: str
    cumulative: List[tuple] = field(default_factory=list)
    weekly: List[WeekTotal] = field(default_factory=list)
    # Opaque extras (repo meta, owner profile) carried onto ranked rows
    attachments: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc, attachments=None):
        return cls(
            repo=doc['repo'],
            cumulative=cumulative_from_records(doc.get('cumulative')),
            weekly=weekly_from_records(doc.get('weekly')),
            attachments=attachments or {},
        )


class MemoryStore:
    """Histories held in a dict, iterated in insertion order"""

    def __init__(self, histories=()):
        self._histories = {}
        for history in histories:
            self.add(history)

    def add(self, history: RepoHistory):
        self._histories[history.repo] = history

    def iter_histories(self):
        return iter(list(self._histories.values()))

    def get_history(self, repo) -> Optional[RepoHistory]:
        return self._histories.get(repo)


def file_key(repo: str) -> str:
    return repo.replace('/', '__') + '.json'


def repo_from_file_key(name: str) -> str:
    owner, repo = Path(name).stem.split('__', 1)
    return f'{owner}/{repo}'


def read_json(path: Path, default=None):
    if not path.exists():
        return default
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2)


def meta_attachment(m):
    """Normalize a stored repo meta document to the counts shown on ranked rows"""
    if not m:
        return None
    return {
        'stars_now': m.get('stargazers_count', m.get('stars_now')),
        'forks': m.get('forks_count', m.get('forks')),
        'open_issues': m.get('open_issues_count', m.get('open_issues')),
        'subscribers': m.get('subscribers_count', m.get('subscribers')),
    }


def owner_attachment(o):
    if not o:
        return None
    return {
        'owner': o.get('owner_login', o.get('owner')),
        'owner_type': o.get('owner_type'),
        'location': o.get('location'),
        'website': o.get('website'),
    }


class JsonDirStore:
    """Histories and job outputs stored as JSON files under a data root"""

    def __init__(self, root):
        self.root = Path(root)
        self.raw_stars_dir = self.root / 'raw' / 'stars'
        self.trending_dir = self.root / 'raw' / 'weekly_trending'
        self.derived_dir = self.root / 'derived'
        self.weekly_dir = self.derived_dir / 'weekly'
        self.meta_dir = self.derived_dir / 'meta'
        self.owner_dir = self.derived_dir / 'owner'
        self.quarter_dir = self.derived_dir / 'quarter'
        self.ross_dir = self.derived_dir / 'quarter-ross'
        self.forecast_dir = self.derived_dir / 'forecast'

    # Raw stargazer timestamps

    def raw_repos(self):
        if not self.raw_stars_dir.exists():
            return []
        return [repo_from_file_key(p.name) for p in sorted(self.raw_stars_dir.glob('*.json'))]

    def read_raw_stars(self, repo):
        return read_json(self.raw_stars_dir / file_key(repo), default=[])

    def write_raw_stars(self, repo, timestamps):
        write_json(self.raw_stars_dir / file_key(repo), sorted(timestamps))

    # Candidates and trending snapshots

    def write_trending(self, week_key, snapshot):
        write_json(self.trending_dir / f'{week_key}.json', snapshot)

    def read_trending(self, week_key):
        return read_json(self.trending_dir / f'{week_key}.json')

    def candidates_path(self, label):
        return self.derived_dir / label / 'candidates.json'

    def write_candidates(self, label, repos):
        payload = []
        for name in repos:
            owner, repo = name.split('/', 1)
            payload.append({'owner': owner, 'repo': repo})
        write_json(self.candidates_path(label), payload)

    def read_candidates(self, label=None):
        """Candidates for a quarter, else the CANDIDATES_CHUNK file, else the latest quarter"""
        if label is not None:
            return read_json(self.candidates_path(label), default=[])
        if config.CANDIDATES_CHUNK and Path(config.CANDIDATES_CHUNK).exists():
            return read_json(Path(config.CANDIDATES_CHUNK))
        if not self.derived_dir.exists():
            return []
        labels = sorted(
            (p.name for p in self.derived_dir.iterdir() if QUARTER_DIR_RE.match(p.name)),
            reverse=True,
        )
        for label in labels:
            path = self.candidates_path(label)
            if path.exists():
                return read_json(path)
        return []

    # Enrichment

    def _read_optional(self, path):
        try:
            return read_json(path)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Warning: could not read {path}: {e}")
            return None

    def read_meta(self, repo):
        return self._read_optional(self.meta_dir / file_key(repo))

    def write_meta(self, meta):
        write_json(self.meta_dir / file_key(meta['repo']), meta)

    def read_owner(self, repo):
        return self._read_optional(self.owner_dir / file_key(repo))

    def write_owner(self, repo, owner):
        write_json(self.owner_dir / file_key(repo), owner)

    # Aggregated series

    def write_weekly(self, doc):
        write_json(self.weekly_dir / file_key(doc['repo']), doc)

    def repos(self):
        if not self.weekly_dir.exists():
            return []
        return [repo_from_file_key(p.name) for p in sorted(self.weekly_dir.glob('*.json'))]

    def _load_history(self, path: Path):
        doc = read_json(path)
        if not doc or not doc.get('repo'):
            return None
        attachments = {
            'meta': meta_attachment(self.read_meta(doc['repo'])),
            'owner': owner_attachment(self.read_owner(doc['repo'])),
        }
        return RepoHistory.from_document(doc, attachments)

    def iter_histories(self):
        """Yield histories in sorted file-name order"""
        if not self.weekly_dir.exists():
            return
        for path in sorted(self.weekly_dir.glob('*.json')):
            history = self._load_history(path)
            if history is not None:
                yield history

    def get_history(self, repo) -> Optional[RepoHistory]:
        return self._load_history(self.weekly_dir / file_key(repo))

    # Outputs

    def ranking_path(self, label, ross=True):
        return (self.ross_dir if ross else self.quarter_dir) / f'{label}.json'

    def write_ranking(self, label, rows, ross=True):
        path = self.ranking_path(label, ross)
        write_json(path, [row.to_dict() for row in rows])
        return path

    def read_ranking(self, label, ross=True):
        return read_json(self.ranking_path(label, ross))

    def write_forecast(self, forecast):
        path = self.forecast_dir / file_key(forecast.repo)
        write_json(path, forecast.to_dict())
        return path

    def read_forecast(self, repo):
        return read_json(self.forecast_dir / file_key(repo))
