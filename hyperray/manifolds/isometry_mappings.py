"""Isometry mappings between the Poincaré disk and the hyperboloid.

Both functions operate on single points; use jax.vmap for batches:

    >>> import jax
    >>> import jax.numpy as jnp
    >>> from hyperray.manifolds import isometry_mappings
    >>>
    >>> uv = jnp.array([[0.0, 0.0], [0.5, 0.0]])
    >>> xyz = jax.vmap(isometry_mappings.poincare_to_hyperboloid)(uv)
    >>> # [[0, 0, 1], [4/3, 0, 5/3]]

Coordinates on the hyperboloid are ordered (x, y, z) with z time-like, so the
sheet is x² + y² - z² = -1, z > 0.

References:
    Wikipedia: Hyperboloid model
    https://en.wikipedia.org/wiki/Hyperboloid_model#Relation_to_other_models
"""

import jax.numpy as jnp
from jaxtyping import Array, Float

from .poincare import _minkowski_dot as _disk_dot


def poincare_to_hyperboloid(uv: Float[Array, "2"]) -> Float[Array, "3"]:
    """Convert a Poincaré disk point to the hyperboloid by inverse stereographic projection.

    Formula:
        (x, y, z) = (2u, 2v, 1 + n) / (1 - n),  n = u² + v²

    Args:
        uv: Point in the disk, shape (2,). Must satisfy u² + v² < 1.

    Returns:
        Point on the hyperboloid, shape (3,).

    Notes:
        No clamping is applied. Points on or outside the unit circle are out of
        contract and come back with infinite or negative z.
    """
    norm_squared = _disk_dot(uv, uv)
    denominator = 1.0 - norm_squared
    spatial = 2.0 * uv / denominator
    z = (1.0 + norm_squared) / denominator
    return jnp.concatenate([spatial, z[None]])


def hyperboloid_to_poincare(xyz: Float[Array, "3"]) -> Float[Array, "2"]:
    """Convert a hyperboloid point to the disk by stereographic projection through (0, 0, -1).

    Formula:
        (u, v) = (x, y) / (1 + z)

    Args:
        xyz: Point on the hyperboloid, shape (3,).

    Returns:
        Point in the Poincaré disk, shape (2,).
    """
    return xyz[:2] / (1.0 + xyz[2])
