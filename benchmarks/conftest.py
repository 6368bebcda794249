"""Shared fixtures for benchmarks."""

import jax
import pytest

from hyperray.color import WHITE
from hyperray.manifolds import isometry_mappings
from hyperray.manifolds.hyperboloid import Hyperpoint
from hyperray.walls import HyperWall

# Enable float64 for numerical accuracy
jax.config.update("jax_enable_x64", True)


@pytest.fixture(params=[100, 1000])
def batch_size(request):
    """Parametrize over batch sizes."""
    return request.param


@pytest.fixture
def random_key():
    """Random key for reproducibility."""
    return jax.random.PRNGKey(42)


@pytest.fixture
def benchmark_points(batch_size, random_key):
    """Random hyperboloid points, shape (batch_size, 3).

    Sampled in the disk at ~0.1 scale to stay away from the boundary.
    """
    uv = jax.random.normal(random_key, (batch_size, 2)) * 0.1
    return jax.vmap(isometry_mappings.poincare_to_hyperboloid)(uv)


@pytest.fixture
def benchmark_walls(benchmark_points):
    """Walls joining consecutive benchmark points."""
    begins, ends = benchmark_points[0::2], benchmark_points[1::2]
    return [HyperWall(Hyperpoint(coords=b), Hyperpoint(coords=e), WHITE) for b, e in zip(begins, ends)]
