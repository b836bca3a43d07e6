"""Benchmark: RCL parse and tokenize throughput.

Measures how many RCL parse and tokenize operations can complete per
second using the public rcl.parse() and rcl.tokenize() APIs.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import rcl

_ITERATIONS: int = 2_000
_TOKENIZE_ITERATIONS: int = 2_000

_SAMPLE_RCL = """
// Deployment matrix.
let regions = ["eu-west", "us-east"];
let replicas = 3;

{
  // One service per region.
  services = [
    for region in regions:
    for i in [1, 2, 3]:
    if i <= replicas:
    {
      name = region,
      port = 8000 + i,
      tags: ["web", "edge"],
    },
  ],
  mask = 0b1010_0101,
  limit = 0xffff,
  ratio = 1.5e-3,
  enabled = not maintenance.active,
}
"""


def bench_parse_throughput() -> dict[str, object]:
    """Benchmark RCL parsing throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        rcl.parse(_SAMPLE_RCL)
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "rcl_parse_throughput",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_tokenize_throughput() -> dict[str, object]:
    """Benchmark lexer throughput on its own.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    start = time.perf_counter()
    for _ in range(_TOKENIZE_ITERATIONS):
        rcl.tokenize(_SAMPLE_RCL)
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "rcl_tokenize_throughput",
        "iterations": _TOKENIZE_ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_TOKENIZE_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _TOKENIZE_ITERATIONS * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_parse_throughput, "parse_throughput_baseline.json"),
        (bench_tokenize_throughput, "tokenize_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
