"""Candidate search: run every pipeline over one field and keep the good ones."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple

from tagmend.config import DEFAULT_THRESHOLD, validate_threshold
from tagmend.errors import TransformError
from tagmend.fields import LEGACY_ENCODING, TextField
from tagmend.goodness import score
from tagmend.transforms import PIPELINES, Pipeline, as_text, execute

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    pipeline_name: str
    result_text: str
    goodness: float


class SearchResult(NamedTuple):
    candidates: list[Candidate]
    best_score_seen: float
    searched: bool = True


def search(
    field: TextField,
    threshold: float = DEFAULT_THRESHOLD,
    pipelines: Sequence[Pipeline] = PIPELINES,
) -> SearchResult:
    """Collect pipeline outputs scoring at least ``threshold``.

    ``best_score_seen`` is the highest goodness among all successful
    pipeline outputs, whether or not they qualified. Fields that are not
    Latin-1 or already score 1.0 are returned untouched with
    ``searched=False``.
    """
    threshold = validate_threshold(threshold)
    value = field.stripped()
    current = score(value)
    if field.declared_encoding != LEGACY_ENCODING:
        logger.debug(" frame %s is not %s, leaving it", field.name, LEGACY_ENCODING.name)
        return SearchResult([], current, searched=False)
    if current >= 1.0:
        logger.debug(" frame %s is already normal", field.name)
        return SearchResult([], current, searched=False)

    candidates: list[Candidate] = []
    best = 0.0
    for pipeline in pipelines:
        logger.debug(" attempting %s (%s)...", pipeline.name, pipeline.describe())
        try:
            result = execute(value, pipeline)
        except TransformError as exc:
            logger.debug("  %s dropped: %s", pipeline.name, exc)
            continue
        goodness = score(result)
        best = max(best, goodness)
        if goodness < threshold:
            logger.debug(
                "  %s dropped: goodness %.4f below %.4f", pipeline.name, goodness, threshold
            )
            continue
        text = as_text(result)
        logger.debug("  %s produced %r (goodness %.4f)", pipeline.name, text, goodness)
        candidates.append(Candidate(pipeline.name, text, goodness))
    return SearchResult(candidates, best)
