"""Quick viewer for eval/fix logs (CSV or JSONL).

Shows aggregate recovery rate, field totals, and outcome counts in a Rich table.
"""

from __future__ import annotations

import argparse
from collections import Counter
from pathlib import Path

from rich.console import Console
from rich.table import Table

from tagmend.eval.summarize import iter_entries, summarize_log


def _tag_from_entry(entry: dict[str, object]) -> tuple[str, float]:
    tag = str(entry.get("tag") or "")
    rate = 0.0
    if "recovery_rate" in entry:
        rate = float(entry["recovery_rate"])
    elif isinstance(entry.get("evaluation"), dict):
        rate = float(entry["evaluation"].get("recovery_rate", 0.0))
    return tag, rate


def main() -> None:
    parser = argparse.ArgumentParser(description="View eval logs.")
    parser.add_argument("log", type=Path, help="CSV or JSONL log file.")
    args = parser.parse_args()

    console = Console()
    summary = summarize_log(args.log)

    console.print("[bold]Aggregate[/]")
    console.print(
        f"- entries: {summary['entries']}, fields: {summary['fields_total']}, "
        f"avg recovery rate: {summary['average_recovery_rate']}"
    )

    outcome_table = Table(title="Outcome Counts")
    outcome_table.add_column("Outcome")
    outcome_table.add_column("Count", justify="right")
    counts = summary.get("outcome_counts", {}) or {}
    for outcome, count in sorted(counts.items(), key=lambda kv: kv[1], reverse=True):
        outcome_table.add_row(outcome, str(count))
    console.print(outcome_table)

    # Rates by tag (if present)
    tag_counts: Counter[str] = Counter()
    tag_rate_sum: Counter[str] = Counter()
    for entry in iter_entries(args.log):
        tag, rate = _tag_from_entry(entry)
        if tag:
            tag_counts[tag] += 1
            tag_rate_sum[tag] += rate
    if tag_counts:
        tag_table = Table(title="Tags")
        tag_table.add_column("Tag")
        tag_table.add_column("Entries", justify="right")
        tag_table.add_column("Avg Rate", justify="right")
        for tag, count in tag_counts.most_common():
            avg = tag_rate_sum[tag] / count if count else 0.0
            tag_table.add_row(tag, str(count), f"{avg:.4f}")
        console.print(tag_table)


if __name__ == "__main__":
    main()
