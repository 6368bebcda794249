"""Benchmarks for point kernels and wall ordering.

These benchmarks measure:
1. Vmapped distance kernels with and without JIT
2. Batched isometries
3. Sorting walls by closest-point distance

Run with:
    pytest benchmarks/bench_walls.py --benchmark-only -v
"""

import jax

from hyperray.manifolds import hyperboloid
from hyperray.walls import closest_point_distances, sort_walls

EPS = 1e-9


def test_hyperboloid_dist_no_jit(benchmark, benchmark_points):
    """Benchmark hyperboloid distance without JIT (baseline)."""
    points_a, points_b = benchmark_points[0::2], benchmark_points[1::2]
    dist_fn = jax.vmap(hyperboloid._dist, in_axes=(0, 0, None))

    def run():
        return dist_fn(points_a, points_b, EPS).block_until_ready()

    benchmark(run)


def test_hyperboloid_dist_with_jit(benchmark, benchmark_points):
    """Benchmark hyperboloid distance with JIT (after warmup)."""
    points_a, points_b = benchmark_points[0::2], benchmark_points[1::2]
    dist_fn = jax.jit(jax.vmap(hyperboloid._dist, in_axes=(0, 0, None)))

    # Warmup JIT compilation
    _ = dist_fn(points_a, points_b, EPS).block_until_ready()

    def run():
        return dist_fn(points_a, points_b, EPS).block_until_ready()

    benchmark(run)


def test_hyperboloid_translate_with_jit(benchmark, benchmark_points):
    """Benchmark the composed boost over a batch of points."""
    translate_fn = jax.jit(jax.vmap(hyperboloid._translate, in_axes=(0, None, None)))
    _ = translate_fn(benchmark_points, 0.3, -0.2).block_until_ready()

    def run():
        return translate_fn(benchmark_points, 0.3, -0.2).block_until_ready()

    benchmark(run)


def test_closest_point_distances(benchmark, benchmark_walls):
    """Benchmark the vmapped wall keys."""

    def run():
        return closest_point_distances(benchmark_walls).block_until_ready()

    benchmark(run)


def test_sort_walls(benchmark, benchmark_walls):
    """Benchmark sorting walls nearest first."""
    benchmark(sort_walls, benchmark_walls)
