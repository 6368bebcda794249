"""This file contains global fixtures that are used across all our tests."""

import jax
import jax.numpy as jnp
import pytest

from hyperray.color import RGBColor
from hyperray.manifolds import isometry_mappings

# Enable float64 support in JAX for numerical precision
jax.config.update("jax_enable_x64", True)


@pytest.fixture
def tolerance() -> tuple[float, float]:
    """Tolerance for float64 comparisons."""
    return (1e-6, 1e-6)  # (atol, rtol)


@pytest.fixture(params=[0, 7, 42])
def rng(request: pytest.FixtureRequest):
    """PRNG key for reproducibility."""
    return jax.random.PRNGKey(request.param)


@pytest.fixture
def disk_points(rng) -> jnp.ndarray:
    """Random points strictly inside the Poincaré disk, shape (20, 2)."""
    samples = jax.random.normal(rng, (20, 2))
    norms = jnp.linalg.norm(samples, axis=1, keepdims=True)
    # Stay away from the boundary
    max_norm = 0.9
    return samples * (max_norm / jnp.maximum(norms, 1.0))


@pytest.fixture
def hyperboloid_points(disk_points: jnp.ndarray) -> jnp.ndarray:
    """Random points on the upper sheet, shape (20, 3)."""
    return jax.vmap(isometry_mappings.poincare_to_hyperboloid)(disk_points)


@pytest.fixture
def red() -> RGBColor:
    return RGBColor(255, 0, 0)
