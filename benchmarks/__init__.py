"""Benchmark suite for hyperray.

Run benchmarks:
    pytest benchmarks/bench_walls.py --benchmark-only

Save baseline:
    pytest benchmarks/bench_walls.py --benchmark-only --benchmark-save=baseline

Compare to baseline:
    pytest benchmarks/bench_walls.py --benchmark-only --benchmark-compare=baseline
"""
