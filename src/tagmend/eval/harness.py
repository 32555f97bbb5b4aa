"""Evaluation harness for the recovery heuristic.

Purpose:
- Measure how often each corruption chain is recovered, rejected or flagged
  as ambiguous at a given threshold.
- Run on synthetic fields from the generator or on any labelled field list.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from tagmend.config import DEFAULT_THRESHOLD, RepairConfig
from tagmend.data.generator import CHAINS, SyntheticField, generate_synthetic_fields
from tagmend.policy import Accepted
from tagmend.repair import repair_field
from tagmend.transforms import show


@dataclass
class FieldEval:
    chain: str
    mangled: str
    expected: str
    outcome: str
    result: str | None


@dataclass
class EvalSummary:
    fields: int
    recovered: int
    wrong: int
    ambiguous: int
    unconvertible: int
    unchanged: int
    recovery_rate: float
    outcome_counts: dict[str, int]
    samples: list[FieldEval]
    notes: str


def evaluate_fields(
    samples: Sequence[SyntheticField],
    config: RepairConfig | None = None,
    sample_limit: int = 3,
) -> EvalSummary:
    """Repair each labelled field and tally outcomes against the expected text."""
    config = config or RepairConfig()
    counts: Counter[str] = Counter()
    recovered = wrong = 0
    kept: list[FieldEval] = []

    for sample in samples:
        outcome = repair_field(sample.field, config)
        counts[outcome.kind] += 1
        result = None
        if isinstance(outcome, Accepted):
            result = outcome.result_text
            if result == sample.expected:
                recovered += 1
            else:
                wrong += 1
        if len(kept) < sample_limit:
            kept.append(
                FieldEval(
                    chain=sample.chain,
                    mangled=show(sample.field.text),
                    expected=sample.expected,
                    outcome=outcome.kind,
                    result=result,
                )
            )

    total = len(samples)
    return EvalSummary(
        fields=total,
        recovered=recovered,
        wrong=wrong,
        ambiguous=counts["ambiguous"],
        unconvertible=counts["unconvertible"],
        unchanged=counts["no_change"],
        recovery_rate=round(recovered / total, 4) if total else 0.0,
        outcome_counts=dict(counts),
        samples=kept,
        notes=f"threshold={config.threshold}",
    )


def evaluate_synthetic(
    count: int = 32,
    seed: int = 1234,
    threshold: float = DEFAULT_THRESHOLD,
    chains: Sequence[str] = CHAINS,
) -> dict[str, object]:
    """Generate synthetic fields and return evaluation plus generator settings."""
    samples = generate_synthetic_fields(count=count, seed=seed, chains=chains)
    summary = evaluate_fields(samples, RepairConfig(threshold=threshold))
    return {
        "generator": {"count": count, "seed": seed, "chains": list(chains)},
        "evaluation": summary,
    }
