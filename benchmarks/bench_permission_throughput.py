"""Benchmark: Permission query throughput, queries per second.

Measures how many AccessControl.can(...).<action>() calls can be completed per
second against a four-level role hierarchy where every query unions the
attribute lists of several inherited roles.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aumos_access_control import AccessControl

_ITERATIONS: int = 10_000


def _make_access_control() -> AccessControl:
    """Build a realistic multi-role grants model for benchmarking."""
    ac = AccessControl()
    ac.grant("viewer").read_any("account", ["*", "!balance", "!ssn"])
    ac.grant("clerk").extend("viewer").update_own("account", ["address", "phone"])
    ac.grant("manager").extend("clerk").read_any("account", ["*", "!ssn"]) \
        .update_any("account", ["*", "!id", "!ssn"])
    ac.grant("auditor").extend("viewer").read_any("ledger")
    ac.grant("admin").extend(["manager", "auditor"]).delete_any("account")
    return ac


def bench_permission_query_throughput() -> dict[str, object]:
    """Benchmark AccessControl permission query throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms, memory_peak_mb.
    """
    ac = _make_access_control()

    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        ac.can("admin").read_own("account")
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "permission_query_throughput",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
        "p99_latency_ms": 0.0,
        "memory_peak_mb": 0.0,
    }
    print(
        f"[bench_permission_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_permission_query_throughput()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "throughput_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
