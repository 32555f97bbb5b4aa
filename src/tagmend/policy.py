"""Decide what to do with a field given its search candidates."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from tagmend.search import Candidate


@dataclass(frozen=True)
class NoChange:
    """Field was already correct or not eligible; search never ran."""

    kind = "no_change"


@dataclass(frozen=True)
class Unconvertible:
    best_score: float

    kind = "unconvertible"


@dataclass(frozen=True)
class Accepted:
    result_text: str
    pipeline_name: str

    kind = "accepted"


@dataclass(frozen=True)
class Ambiguous:
    candidate_texts: tuple[str, ...]
    pipeline_names: tuple[str, ...]

    kind = "ambiguous"


Outcome = NoChange | Unconvertible | Accepted | Ambiguous


def resolve(
    candidates: Sequence[Candidate], best_score_seen: float, searched: bool = True
) -> Outcome:
    """Map a candidate set to an outcome; more than one candidate is never auto-picked."""
    if not searched:
        return NoChange()
    if not candidates:
        return Unconvertible(best_score_seen)
    if len(candidates) == 1:
        only = candidates[0]
        return Accepted(only.result_text, only.pipeline_name)
    return Ambiguous(
        tuple(c.result_text for c in candidates),
        tuple(c.pipeline_name for c in candidates),
    )
