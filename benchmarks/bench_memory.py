"""Benchmark: Memory retained by parsed RCL trees."""
from __future__ import annotations

import json
import sys
import tracemalloc
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import rcl

_ITERATIONS: int = 200

_SAMPLE_RCL = """
// Feature flags per environment.
{
  dev = { debug = true, replicas = 1 },
  prod = { debug = false, replicas = 0x10 },
  regions = [for r in ["eu", "us"]: r],
}
"""


def bench_parse_memory() -> dict[str, object]:
    """Benchmark memory held by ``_ITERATIONS`` live parse trees.

    Returns
    -------
    dict with keys: operation, iterations, peak_memory_kb, current_memory_kb.
    """
    tracemalloc.start()
    trees = [rcl.parse(_SAMPLE_RCL) for _ in range(_ITERATIONS)]
    current, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    result: dict[str, object] = {
        "operation": "rcl_parse_memory",
        "iterations": len(trees),
        "peak_memory_kb": round(peak / 1024, 2),
        "current_memory_kb": round(current / 1024, 2),
        "ops_per_second": 0.0,
        "avg_latency_ms": 0.0,
    }
    print(
        f"[bench_memory] {result['operation']}: peak {result['peak_memory_kb']:.2f} KB, "
        f"retained {result['current_memory_kb']:.2f} KB over {_ITERATIONS} trees"
    )
    return result


if __name__ == "__main__":
    result = bench_parse_memory()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "memory_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
