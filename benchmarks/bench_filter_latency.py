"""Benchmark: Attribute filter latency, per-call p50/p95/p99.

Measures the per-call latency of Permission.filter() on a nested document
with wildcard and negated patterns, capturing the latency distribution.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aumos_access_control import Permission

_WARMUP: int = 100
_ITERATIONS: int = 5_000
_PATTERNS: list[str] = ["*", "!account.balance.credit", "!account.id", "!secret", "meta.*"]


def _make_document() -> dict[str, object]:
    """Build a fixed nested document for benchmarking."""
    return {
        "name": "Company, LTD.",
        "address": {"city": "istanbul", "country": "TR"},
        "account": {
            "id": 33,
            "taxNo": 12345,
            "balance": {"credit": 100, "deposit": 0, "currency": "TRY"},
        },
        "secret": {"value": "hidden"},
        "meta": {"created": "2020-01-01", "tags": ["a", "b", "c"]},
    }


def bench_attribute_filter_latency() -> dict[str, object]:
    """Benchmark Permission.filter() per-call latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms, memory_peak_mb.
    """
    permission = Permission(["bench"], "company", "read", "any", _PATTERNS)
    document = _make_document()

    # Warmup.
    for _ in range(_WARMUP):
        permission.filter(document)

    latencies_ms: list[float] = []
    for _ in range(_ITERATIONS):
        t0 = time.perf_counter()
        permission.filter(document)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "attribute_filter_latency",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p99_latency_ms": round(sorted_lats[min(int(n * 0.99), n - 1)], 4),
        "memory_peak_mb": 0.0,
    }
    print(
        f"[bench_filter_latency] {result['operation']}: "
        f"p99={result['p99_latency_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_attribute_filter_latency()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
