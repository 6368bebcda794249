"""Hyperbolic wall segments and nearest-wall ordering.

A ``HyperWall`` is a directed segment between two ``Hyperpoint`` endpoints with
a display color. Walls are ordered by how close their nearer endpoint is to the
origin, which is what the renderer needs to find the nearest wall.

Ordering is by proximity only: two walls with different endpoints but the same
closest-point distance compare equal. A NaN key (from a malformed endpoint)
cannot be ordered; comparisons raise ``IncomparableWallsError`` instead.

Batch helpers compute the keys of many walls at once with ``jax.vmap``:

    >>> from hyperray.walls import HyperWall, sort_walls
    >>> from hyperray.manifolds.hyperboloid import Hyperpoint
    >>> from hyperray.color import WHITE
    >>>
    >>> near = HyperWall(Hyperpoint.new(0.1, 0.0), Hyperpoint.new(2.0, 0.0), WHITE)
    >>> far = HyperWall(Hyperpoint.new(1.0, 1.0), Hyperpoint.new(-1.0, 1.0), WHITE)
    >>> sort_walls([far, near]) == [near, far]
    True
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import jax
import jax.numpy as jnp
from flax import struct
from jaxtyping import Array, Float

from .color import RGBColor
from .config import DEFAULT_CONFIG
from .manifolds.hyperboloid import Hyperpoint, _dist_0
from .manifolds.poincare import PoincareWall

logger = logging.getLogger(__name__)

NAN_POLICIES = ("raise", "last")


class IncomparableWallsError(ValueError):
    """Raised when walls are ordered but a closest-point distance is NaN."""


def _closest_key(endpoints: Float[Array, "2 3"], eps: float) -> Float[Array, ""]:
    """Smaller of the two endpoint distances to the origin.

    ``fmin`` ignores a single NaN endpoint; the key is NaN only if both are.
    """
    return jnp.fmin(_dist_0(endpoints[0], eps), _dist_0(endpoints[1], eps))


@struct.dataclass
class HyperWall:
    """Wall between two hyperboloid points, carrying an opaque color."""

    beginning: Hyperpoint
    end: Hyperpoint
    color: RGBColor = struct.field(pytree_node=False)

    @classmethod
    def from_poincare(cls, wall: PoincareWall) -> HyperWall:
        """Convert both endpoints from the disk; color is carried over unchanged."""
        return cls(
            beginning=Hyperpoint.from_poincare(wall.beginning),
            end=Hyperpoint.from_poincare(wall.end),
            color=wall.color,
        )

    def to_poincare(self) -> PoincareWall:
        return PoincareWall(
            beginning=self.beginning.to_poincare(),
            end=self.end.to_poincare(),
            color=self.color,
        )

    def endpoints(self) -> Float[Array, "2 3"]:
        return jnp.stack([self.beginning.coords, self.end.coords])

    def distance_to_closest_point(self, eps: float = DEFAULT_CONFIG.acosh_eps) -> float:
        """Distance from the origin to the nearer endpoint."""
        return float(_closest_key(self.endpoints(), eps))

    def length(self) -> float:
        """Geodesic length between the endpoints."""
        return self.beginning.distance_to(self.end)

    def intersection(self, angle: float) -> float | None:
        """Distance along the ray at ``angle`` to this wall.

        Raises:
            NotImplementedError: Always. Ray/wall intersection on the hyperboloid
                has not been implemented; the renderer must not rely on it.
        """
        raise NotImplementedError(
            f"HyperWall.intersection(angle={angle!r}) is not implemented: "
            "ray/geodesic intersection on the hyperboloid is not available"
        )

    # -- Isometries ------------------------------------------------------
    def rotate(self, angle: float) -> HyperWall:
        return self.replace(beginning=self.beginning.rotate(angle), end=self.end.rotate(angle))

    def translate(self, dx: float, dy: float) -> HyperWall:
        return self.replace(beginning=self.beginning.translate(dx, dy), end=self.end.translate(dx, dy))

    # -- Ordering by proximity -------------------------------------------
    def compare(self, other: HyperWall) -> int:
        """Return -1, 0 or 1 as this wall is closer, as close, or farther than ``other``.

        Raises:
            IncomparableWallsError: If either closest-point distance is NaN.
        """
        a, b = self._ordering_keys(other)
        return (a > b) - (a < b)

    def _ordering_keys(self, other: HyperWall) -> tuple[float, float]:
        a = self.distance_to_closest_point()
        b = other.distance_to_closest_point()
        if math.isnan(a) or math.isnan(b):
            raise IncomparableWallsError(f"Cannot order walls with closest-point distances {a} and {b}")
        return a, b

    def __eq__(self, other):
        if not isinstance(other, HyperWall):
            return NotImplemented
        return self.distance_to_closest_point() == other.distance_to_closest_point()

    def __hash__(self):
        return hash(self.distance_to_closest_point())

    def __lt__(self, other):
        if not isinstance(other, HyperWall):
            return NotImplemented
        a, b = self._ordering_keys(other)
        return a < b

    def __le__(self, other):
        if not isinstance(other, HyperWall):
            return NotImplemented
        a, b = self._ordering_keys(other)
        return a <= b

    def __gt__(self, other):
        if not isinstance(other, HyperWall):
            return NotImplemented
        a, b = self._ordering_keys(other)
        return a > b

    def __ge__(self, other):
        if not isinstance(other, HyperWall):
            return NotImplemented
        a, b = self._ordering_keys(other)
        return a >= b


# ---------------------------------------------------------------------------
# Batched helpers
# ---------------------------------------------------------------------------


def closest_point_distances(
    walls: Sequence[HyperWall], eps: float = DEFAULT_CONFIG.acosh_eps
) -> Float[Array, "n_walls"]:
    """Closest-point distance of every wall, computed with one vmapped kernel."""
    if len(walls) == 0:
        return jnp.zeros((0,))
    endpoints = jnp.stack([wall.endpoints() for wall in walls])
    return jax.vmap(_closest_key, in_axes=(0, None))(endpoints, eps)


def sort_walls(
    walls: Sequence[HyperWall],
    nan_policy: str = "raise",
    eps: float = DEFAULT_CONFIG.acosh_eps,
) -> list[HyperWall]:
    """Sort walls nearest first. Walls with equal keys keep their input order.

    Args:
        walls: Walls to sort
        nan_policy: ``"raise"`` to reject NaN keys, ``"last"`` to sort them after
            every finite key
        eps: acosh snap band passed to the distance kernel

    Returns:
        New list of walls ordered by closest-point distance

    Raises:
        IncomparableWallsError: If a key is NaN and nan_policy is ``"raise"``
        ValueError: If nan_policy is unknown
    """
    if nan_policy not in NAN_POLICIES:
        raise ValueError(f"Unknown nan_policy: {nan_policy!r}. Use one of {NAN_POLICIES}.")
    walls = list(walls)
    keys = closest_point_distances(walls, eps)
    nan_mask = jnp.isnan(keys)
    n_nan = int(jnp.sum(nan_mask))
    if n_nan:
        if nan_policy == "raise":
            raise IncomparableWallsError(f"{n_nan} of {len(walls)} walls have a NaN closest-point distance")
        logger.warning("Sorting %d walls with NaN closest-point distance last", n_nan)
    # jnp.argsort is stable and places NaN after all finite values
    order = jnp.argsort(keys)
    return [walls[int(i)] for i in order]


def closest_wall(
    walls: Sequence[HyperWall],
    nan_policy: str = "raise",
    eps: float = DEFAULT_CONFIG.acosh_eps,
) -> HyperWall:
    """The wall whose nearer endpoint is closest to the origin.

    Raises:
        ValueError: If ``walls`` is empty
    """
    if len(walls) == 0:
        raise ValueError("closest_wall() requires at least one wall")
    return sort_walls(walls, nan_policy=nan_policy, eps=eps)[0]
