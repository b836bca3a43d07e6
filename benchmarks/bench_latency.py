"""Benchmark: RCL parse latency (p50/p95/mean).

Measures per-call latency for RCL parse operations on a small document
and on a long generated one.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import rcl

_WARMUP: int = 100
_ITERATIONS: int = 2_000
_LARGE_ITERATIONS: int = 50

_MINIMAL_RCL = """
let port = 8080;
{ host = "localhost", port = port }
"""

# A thousand-entry record, one key per line.
_LARGE_RCL = "{\n" + "".join(f'  key-{i} = [{i}, "value-{i}"],\n' for i in range(1_000)) + "}\n"


def _measure(source: str, iterations: int, operation: str) -> dict[str, object]:
    latencies_ms: list[float] = []
    for _ in range(iterations):
        t0 = time.perf_counter()
        rcl.parse(source)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_ms": round(sorted_lats[int(n * 0.50)], 4),
        "p95_ms": round(sorted_lats[min(int(n * 0.95), n - 1)], 4),
    }
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def bench_parse_latency() -> dict[str, object]:
    """Benchmark RCL parse latency on a minimal document.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_ms, p95_ms.
    """
    # Warmup
    for _ in range(_WARMUP):
        rcl.parse(_MINIMAL_RCL)
    return _measure(_MINIMAL_RCL, _ITERATIONS, "rcl_parse_latency_minimal")


def bench_parse_latency_large() -> dict[str, object]:
    """Benchmark RCL parse latency on a thousand-entry record."""
    return _measure(_LARGE_RCL, _LARGE_ITERATIONS, "rcl_parse_latency_large")


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    for bench_fn, fname in [
        (bench_parse_latency, "latency_baseline.json"),
        (bench_parse_latency_large, "latency_large_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
