"""Poincaré disk points and walls.

The renderer owns the Poincaré model; this module carries just enough of it to
feed the hyperboloid conversion: a point type with its bilinear form and
metric, and a wall type pairing two such points with a color.

Convention: points (u, v) with u² + v² < 1 (curvature -1).

    >>> from hyperray.manifolds.poincare import PoincarePoint
    >>> p = PoincarePoint.new(0.5, 0.0)
    >>> round(p.distance_to_origin(), 4)  # 2 * artanh(0.5)
    1.0986
"""

from __future__ import annotations

import jax.numpy as jnp
from flax import struct
from jaxtyping import Array, Float

from ..color import RGBColor
from ..config import DEFAULT_CONFIG, resolve_dtype
from ..utils.math_utils import acosh_snapped


def _minkowski_dot(p: Float[Array, "2"], q: Float[Array, "2"]) -> Float[Array, ""]:
    """Bilinear form of the disk model, u·u' + v·v'.

    Against itself this is the squared Euclidean norm used as the normalisation
    term of the hyperboloid conversion.
    """
    return jnp.dot(p, q)


def _dist_0(p: Float[Array, "2"]) -> Float[Array, ""]:
    """Distance from the disk origin, 2 * artanh(|p|)."""
    return 2.0 * jnp.arctanh(jnp.sqrt(_minkowski_dot(p, p)))


def _dist(p: Float[Array, "2"], q: Float[Array, "2"], eps: float) -> Float[Array, ""]:
    """Geodesic distance acosh(1 + 2|p-q|² / ((1-|p|²)(1-|q|²)))."""
    diff = p - q
    num = 2.0 * _minkowski_dot(diff, diff)
    denom = (1.0 - _minkowski_dot(p, p)) * (1.0 - _minkowski_dot(q, q))
    res = acosh_snapped(1.0 + num / denom, eps)
    same = jnp.all(jnp.equal(p, q))
    return jnp.where(same, 0.0, res)


def _is_in_disk(p: Float[Array, "2"], eps: float) -> Array:
    """True if |p|² <= 1 - eps."""
    return _minkowski_dot(p, p) <= 1.0 - eps


@struct.dataclass
class PoincarePoint:
    """Point (u, v) of the Poincaré disk, stored as a length-2 array."""

    coords: Float[Array, "2"]

    @classmethod
    def new(cls, u: float, v: float, dtype=None) -> PoincarePoint:
        return cls(coords=jnp.asarray([u, v], dtype=resolve_dtype(dtype)))

    @classmethod
    def new_at_origin(cls) -> PoincarePoint:
        return cls.new(0.0, 0.0)

    @property
    def u(self) -> float:
        return float(self.coords[0])

    @property
    def v(self) -> float:
        return float(self.coords[1])

    def as_tuple(self) -> tuple[float, float]:
        return (self.u, self.v)

    @staticmethod
    def minkowski_dot(a: PoincarePoint, b: PoincarePoint) -> float:
        return float(_minkowski_dot(a.coords, b.coords))

    def distance_to_origin(self) -> float:
        return float(_dist_0(self.coords))

    def distance_to(self, other: PoincarePoint) -> float:
        return float(_dist(self.coords, other.coords, DEFAULT_CONFIG.acosh_eps))

    def is_in_disk(self, eps: float = DEFAULT_CONFIG.disk_eps) -> bool:
        return bool(_is_in_disk(self.coords, eps))

    def __eq__(self, other):
        if not isinstance(other, PoincarePoint):
            return NotImplemented
        return bool(jnp.array_equal(self.coords, other.coords))

    def __hash__(self):
        return hash(self.as_tuple())


@struct.dataclass
class PoincareWall:
    """Wall segment in disk coordinates, as handed over by the renderer."""

    beginning: PoincarePoint
    end: PoincarePoint
    color: RGBColor = struct.field(pytree_node=False)
