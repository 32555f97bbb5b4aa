"""Micro-benchmarks for the recovery heuristic on synthetic tags."""

from __future__ import annotations

import time

from tagmend.config import RepairConfig
from tagmend.data.generator import generate_synthetic_fields
from tagmend.repair import repair_field


def benchmark_repair(fields: int = 1000, runs: int = 3) -> dict[str, float]:
    samples = generate_synthetic_fields(count=fields)
    config = RepairConfig()
    best = None
    for _ in range(runs):
        start = time.perf_counter()
        for sample in samples:
            repair_field(sample.field, config)
        elapsed = time.perf_counter() - start
        best = elapsed if best is None or elapsed < best else best
    per_second = fields / best if best else 0.0
    return {"fields": fields, "best_seconds": best or 0.0, "fields_per_second": per_second}


if __name__ == "__main__":
    result = benchmark_repair()
    print(result)
