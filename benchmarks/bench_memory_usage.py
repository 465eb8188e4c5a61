"""Benchmark: Memory usage of grants construction and permission queries.

Uses tracemalloc to measure memory allocated while building a grants model
through the fluent builder, locking it, and resolving repeated queries.
"""
from __future__ import annotations

import json
import sys
import tracemalloc
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aumos_access_control import AccessControl

_ITERATIONS: int = 500
_RESOURCES: tuple[str, ...] = ("account", "invoice", "report", "ticket")


def bench_grants_memory_usage() -> dict[str, object]:
    """Benchmark memory usage during grants construction and repeated queries.

    Returns
    -------
    dict with keys: operation, iterations, peak_memory_kb, current_memory_kb,
    ops_per_second, avg_latency_ms, memory_peak_mb.
    """
    tracemalloc.start()
    snapshot_before = tracemalloc.take_snapshot()

    ac = AccessControl()
    for resource in _RESOURCES:
        ac.grant("member").read_any(resource, ["*", "!internal"])
        ac.grant("owner").extend("member").update_own(resource).delete_own(resource)
    ac.grant("staff").extend("owner").update_any(_RESOURCES)
    ac.lock()

    for i in range(_ITERATIONS):
        resource = _RESOURCES[i % len(_RESOURCES)]
        ac.can(["staff", "member"]).read_own(resource)

    snapshot_after = tracemalloc.take_snapshot()
    tracemalloc.stop()

    stats = snapshot_after.compare_to(snapshot_before, "lineno")
    total_bytes = sum(stat.size_diff for stat in stats if stat.size_diff > 0)
    peak_kb = round(total_bytes / 1024, 2)

    result: dict[str, object] = {
        "operation": "grants_memory_usage",
        "iterations": _ITERATIONS,
        "peak_memory_kb": peak_kb,
        "current_memory_kb": peak_kb,
        "ops_per_second": 0.0,
        "avg_latency_ms": 0.0,
        "memory_peak_mb": round(peak_kb / 1024, 4),
    }
    print(
        f"[bench_memory_usage] {result['operation']}: "
        f"peak {peak_kb:.2f} KB over {_ITERATIONS} iterations"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_grants_memory_usage()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "memory_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
