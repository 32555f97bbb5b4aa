"""Summaries over eval and repair logs (CSV or JSONL)."""

from __future__ import annotations

import csv
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import orjson


def _iter_csv(path: Path) -> Iterator[dict[str, str]]:
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        yield from reader


def _iter_jsonl(path: Path) -> Iterator[dict[str, Any]]:
    with path.open("rb") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            yield orjson.loads(line)


def iter_entries(path: Path) -> Iterator[dict[str, Any]]:
    return _iter_csv(path) if path.suffix.lower() == ".csv" else _iter_jsonl(path)


def summarize_log(path: Path) -> dict[str, object]:
    """Compute simple aggregates from a CSV/JSONL log.

    Eval rows contribute ``recovery_rate``/``fields``/``outcome_counts``;
    per-field repair rows contribute their ``outcome``.
    """
    rates: list[float] = []
    fields_total = 0
    outcome_counts: dict[str, int] = {}

    for entry in iter_entries(path):
        if "evaluation" in entry and isinstance(entry["evaluation"], dict):
            entry = entry["evaluation"]

        if "recovery_rate" in entry:
            rates.append(float(entry["recovery_rate"]))

        if "fields" in entry:
            fields_total += int(entry["fields"])

        if "outcome_counts" in entry:
            counts_raw = entry["outcome_counts"]
            counts = orjson.loads(counts_raw) if isinstance(counts_raw, str) else counts_raw
            for k, v in counts.items():
                outcome_counts[k] = outcome_counts.get(k, 0) + int(v)
        elif "outcome" in entry:
            key = str(entry["outcome"])
            outcome_counts[key] = outcome_counts.get(key, 0) + 1
            fields_total += 1

    avg_rate = sum(rates) / len(rates) if rates else 0.0
    return {
        "entries": len(rates),
        "fields_total": fields_total,
        "average_recovery_rate": round(avg_rate, 4),
        "outcome_counts": outcome_counts,
    }
