"""Markdown report sections and commit messages from ranking/forecast output."""

import re
from pathlib import Path


def format_ross_table(rows, limit=25) -> str:
    lines = [
        "| Rank | Repo | Best 90-day window | Stars at start | Gain | Growth |",
        "| --- | --- | --- | --- | --- | --- |",
    ]
    for row in rows[:limit]:
        lines.append(
            "| {rank} | `{repo}` | {start} → {end} | {start_stars:,d} | {gain:+,d} | {rel:+.1%} |".format(
                rank=row['rank'],
                repo=row['repo'],
                start=row['best_window_start'],
                end=row['best_window_end'],
                start_stars=row['window_start_stars'],
                gain=row['abs_gain_90d'],
                rel=row['rel_gain_90d'],
            )
        )
    return "\n".join(lines)


def format_forecast_table(forecasts, weeks=4) -> str:
    """One row per repo with the first ``weeks`` predicted weekly totals"""
    if not forecasts:
        return "No forecasts available."

    header = ["Repo", "Last week"] + [f"+{i}" for i in range(1, weeks + 1)]
    lines = ["| " + " | ".join(header) + " |"]
    lines.append("| " + " | ".join(["---"] * len(header)) + " |")
    for fc in forecasts:
        preds = [f"{week['pred']:,d}" for week in fc['forecast'][:weeks]]
        preds += [""] * (weeks - len(preds))
        lines.append("| " + " | ".join([f"`{fc['repo']}`", fc['last_week'] or "-"] + preds) + " |")
    return "\n".join(lines)


def build_section(header, start_marker, end_marker, body) -> str:
    return "\n".join([header, "", start_marker, "", body.strip(), "", end_marker, ""])


def update_readme(readme_path, header, start_marker, end_marker, body) -> None:
    """Replace the marker-delimited section in the README, or append it"""
    readme_path = Path(readme_path)
    readme_text = readme_path.read_text(encoding='utf-8') if readme_path.exists() else ""
    section = build_section(header, start_marker, end_marker, body).strip()

    pattern = re.compile(
        re.escape(header) + r"[\s\S]*?" + re.escape(end_marker),
        re.DOTALL,
    )
    if pattern.search(readme_text):
        new_text = pattern.sub(lambda _: section, readme_text, count=1)
    else:
        pieces = [readme_text.strip("\n")] if readme_text.strip() else []
        pieces.append(section)
        new_text = "\n\n".join(pieces)

    readme_path.write_text(new_text.strip("\n") + "\n", encoding='utf-8')


def commit_message(rows, limit=5) -> str:
    if not rows:
        return "update stats"
    parts = [f"{row['repo']}: {row['rel_gain_90d']:+.1%}" for row in rows[:limit]]
    return f"update {rows[0]['quarter']} ranking: {', '.join(parts)}"
