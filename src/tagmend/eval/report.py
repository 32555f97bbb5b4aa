"""Helpers to log evaluation summaries and repair runs for trend tracking."""

from __future__ import annotations

import csv
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, cast

import orjson

from tagmend.eval.harness import EvalSummary
from tagmend.policy import Accepted, Ambiguous, Unconvertible
from tagmend.repair import FieldReport
from tagmend.transforms import show


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def summary_to_row(
    summary: EvalSummary | Mapping[str, object], source: str, tag: str | None = None
) -> dict:
    """Flatten EvalSummary into a CSV/JSONL-friendly row."""
    if isinstance(summary, Mapping):
        fields = int(cast(Any, summary.get("fields", 0)) or 0)
        recovery_rate = float(cast(Any, summary.get("recovery_rate", 0.0)) or 0.0)
        counts_obj = summary.get("outcome_counts", {})
        counts = dict(counts_obj) if isinstance(counts_obj, Mapping) else {}
        notes = str(summary.get("notes", ""))
    else:
        fields = summary.fields
        recovery_rate = summary.recovery_rate
        counts = summary.outcome_counts
        notes = summary.notes
    return {
        "timestamp": _timestamp(),
        "source": source,
        "tag": tag or "",
        "fields": fields,
        "recovery_rate": recovery_rate,
        "outcome_counts": orjson.dumps(counts).decode(),
        "notes": notes,
    }


def report_to_row(report: FieldReport, source: str) -> dict:
    """One row per repaired field of a file."""
    outcome = report.outcome
    result = ""
    score = ""
    if isinstance(outcome, Accepted):
        result = outcome.result_text
    elif isinstance(outcome, Ambiguous):
        result = " | ".join(outcome.candidate_texts)
    elif isinstance(outcome, Unconvertible):
        score = f"{outcome.best_score:.4f}"
    return {
        "timestamp": _timestamp(),
        "source": source,
        "frame": report.name,
        "original": show(report.original),
        "outcome": outcome.kind,
        "result": result,
        "best_score": score,
    }


def append_csv(path: Path, row: dict) -> None:
    """Append a row to a CSV file, writing headers when the file is new."""
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists()
    with path.open("a", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(row.keys()))
        if is_new:
            writer.writeheader()
        writer.writerow(row)


def _default(obj: object) -> object:
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, bytes):
        return obj.hex(" ")
    raise TypeError(f"Cannot serialize {type(obj).__name__}")


def append_jsonl(path: Path, payload: dict) -> None:
    """Append a JSON line (UTF-8) to a log file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("ab") as f:
        f.write(orjson.dumps(payload, default=_default) + b"\n")
