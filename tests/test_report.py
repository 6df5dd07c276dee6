from star_trends.report import (
    commit_message,
    format_forecast_table,
    format_ross_table,
    update_readme,
)

ROWS = [
    {
        'rank': 1, 'repo': 'a/fast', 'quarter': '2025-Q1',
        'best_window_start': '2024-11-04', 'best_window_end': '2025-02-01',
        'window_start_stars': 3000, 'window_end_stars': 4500,
        'abs_gain_90d': 1500, 'rel_gain_90d': 0.5,
    },
    {
        'rank': 2, 'repo': 'b/steady', 'quarter': '2025-Q1',
        'best_window_start': '2024-10-03', 'best_window_end': '2024-12-31',
        'window_start_stars': 10000, 'window_end_stars': 11000,
        'abs_gain_90d': 1000, 'rel_gain_90d': 0.1,
    },
]


def test_format_ross_table():
    table = format_ross_table(ROWS).splitlines()
    assert table[0].startswith('| Rank | Repo |')
    assert table[2] == '| 1 | `a/fast` | 2024-11-04 → 2025-02-01 | 3,000 | +1,500 | +50.0% |'
    assert len(format_ross_table(ROWS, limit=1).splitlines()) == 3


def test_format_forecast_table():
    forecasts = [{
        'repo': 'a/fast',
        'last_week': '2025-W08',
        'forecast': [{'week': f'+{i}', 'pred': 1000 + i} for i in range(1, 13)],
    }]
    lines = format_forecast_table(forecasts, weeks=2).splitlines()
    assert lines[0] == '| Repo | Last week | +1 | +2 |'
    assert lines[2] == '| `a/fast` | 2025-W08 | 1,001 | 1,002 |'
    assert format_forecast_table([]) == 'No forecasts available.'


def test_update_readme_appends_then_replaces(tmp_path):
    readme = tmp_path / 'README.md'
    readme.write_text('# stats\n\nIntro text.\n', encoding='utf-8')

    update_readme(readme, '## Ranking', '<!-- START r -->', '<!-- END r -->', 'first')
    text = readme.read_text(encoding='utf-8')
    assert text.startswith('# stats\n\nIntro text.\n\n## Ranking')
    assert 'first' in text

    update_readme(readme, '## Ranking', '<!-- START r -->', '<!-- END r -->', 'second')
    text = readme.read_text(encoding='utf-8')
    assert 'first' not in text
    assert text.count('## Ranking') == 1
    assert text.endswith('<!-- START r -->\n\nsecond\n\n<!-- END r -->\n')


def test_update_readme_creates_file(tmp_path):
    readme = tmp_path / 'README.md'
    update_readme(readme, '## Ranking', '<!-- START r -->', '<!-- END r -->', 'body')
    assert readme.read_text(encoding='utf-8').startswith('## Ranking\n\n<!-- START r -->')


def test_commit_message():
    assert commit_message(ROWS) == 'update 2025-Q1 ranking: a/fast: +50.0%, b/steady: +10.0%'
    assert commit_message([]) == 'update stats'
