"""Run selection, search and resolution over the frames of one container."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from tagmend.config import RepairConfig
from tagmend.fields import Encoding, Frame, TextField, select_fields
from tagmend.policy import Accepted, Ambiguous, NoChange, Outcome, Unconvertible, resolve
from tagmend.search import search

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldReport:
    name: str
    original: str | bytes
    outcome: Outcome


@dataclass
class RepairResult:
    corrections: dict[str, TextField]
    reports: list[FieldReport]


def repair_field(field: TextField, config: RepairConfig) -> Outcome:
    result = search(field, threshold=config.threshold, pipelines=config.pipelines)
    return resolve(result.candidates, result.best_score_seen, searched=result.searched)


def _log_outcome(name: str, outcome: Outcome, threshold: float) -> None:
    if isinstance(outcome, NoChange):
        logger.debug(" frame %s is already normal", name)
    elif isinstance(outcome, Accepted):
        logger.info(
            " frame %s converted to %r via %s", name, outcome.result_text, outcome.pipeline_name
        )
    elif isinstance(outcome, Unconvertible):
        logger.warning(
            " could not convert frame %s: best goodness %.4f below threshold %.4f"
            " (lower --threshold to accept it)",
            name,
            outcome.best_score,
            threshold,
        )
    elif isinstance(outcome, Ambiguous):
        count = "two" if len(outcome.candidate_texts) == 2 else str(len(outcome.candidate_texts))
        logger.warning(
            " ambiguous conversion for frame %s, %s possible results: %s",
            name,
            count,
            ", ".join(
                f"{pipeline}={text!r}"
                for pipeline, text in zip(outcome.pipeline_names, outcome.candidate_texts)
            ),
        )


def repair_fields(frames: Iterable[Frame], config: RepairConfig) -> RepairResult:
    """Return the corrections (UTF-8 text fields) plus one report per eligible field."""
    corrections: dict[str, TextField] = {}
    reports: list[FieldReport] = []
    for name, field in select_fields(frames).items():
        outcome = repair_field(field, config)
        _log_outcome(name, outcome, config.threshold)
        reports.append(FieldReport(name=name, original=field.text, outcome=outcome))
        if isinstance(outcome, Accepted):
            corrections[name] = TextField(name, Encoding.UTF8, outcome.result_text)
    return RepairResult(corrections=corrections, reports=reports)
