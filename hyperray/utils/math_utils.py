"""Math helpers for hyperboloid kernels.

Matrices follow the ambient coordinate order (x, y, z) with z time-like.
"""

import jax.numpy as jnp
from jaxtyping import Array, Float


def acosh_snapped(
    x: Float[Array, "..."], eps: float, scale: Float[Array, "..."] | float = 1.0
) -> Float[Array, "..."]:
    """Inverse hyperbolic cosine that absorbs rounding just below 1. Domain=[1, inf).

    Values in ``[1 - eps * scale, 1)`` are treated as rounding noise and mapped to
    ``acosh(1) = 0``. Anything further below 1 is left alone, so genuinely
    malformed input still yields NaN.

    Args:
        x: Input array of any shape
        eps: Relative width of the snap band
        scale: Magnitude the rounding error grows with (e.g. |z * z'|)

    Returns:
        acosh(x) with the snap band applied
    """
    band = eps * jnp.maximum(jnp.abs(scale), 1.0)
    x = jnp.where((x < 1.0) & (x >= 1.0 - band), 1.0, x)
    return jnp.arccosh(x)


def rotation_matrix(angle: Float[Array, ""] | float, dtype=None) -> Float[Array, "3 3"]:
    """Rotation about the time-like z axis, positive angle counterclockwise in x-y."""
    c = jnp.cos(angle)
    s = jnp.sin(angle)
    return jnp.array(
        [
            [c, -s, 0.0],
            [s, c, 0.0],
            [0.0, 0.0, 1.0],
        ],
        dtype=dtype,
    )


def boost_matrix(t: Float[Array, ""] | float, axis: int, dtype=None) -> Float[Array, "3 3"]:
    """Lorentz boost mixing spatial ``axis`` (0 for x, 1 for y) with the time-like z axis.

    Args:
        t: Rapidity of the boost
        axis: Spatial axis to boost along
        dtype: Output dtype (jnp default if None)

    Returns:
        3x3 boost matrix with cosh(t) on the (axis, axis) and (z, z) entries and
        sinh(t) on the two off-diagonal axis/z entries

    Raises:
        ValueError: If axis is not 0 or 1
    """
    if axis not in (0, 1):
        raise ValueError(f"Boost axis must be 0 (x) or 1 (y), got {axis}")
    ch = jnp.cosh(t)
    sh = jnp.sinh(t)
    m = jnp.eye(3, dtype=dtype)
    m = m.at[axis, axis].set(ch)
    m = m.at[2, 2].set(ch)
    m = m.at[axis, 2].set(sh)
    m = m.at[2, axis].set(sh)
    return m
