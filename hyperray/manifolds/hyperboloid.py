"""Hyperboloid points - pure kernels plus the ``Hyperpoint`` value type.

Kernels operate on single points in ambient 3-space and are jit/vmap friendly.
``Hyperpoint`` wraps them for scalar use by the renderer.

Convention: x² + y² - z² = -1 with z > 0 (upper sheet, curvature -1). The
time-like coordinate is the last one.

    >>> import jax
    >>> import jax.numpy as jnp
    >>> from hyperray.manifolds.hyperboloid import Hyperpoint, _dist_0
    >>>
    >>> p = Hyperpoint.new(0.3, -0.4)
    >>> q = p.translate(0.5, 0.0).rotate(jnp.pi / 2)
    >>>
    >>> # Batch operations with vmap
    >>> pts = jnp.stack([p.coords, q.coords])
    >>> dists = jax.vmap(_dist_0, in_axes=(0, None))(pts, 1e-9)

Isometries are pure: ``rotate`` and ``translate`` return a new point and leave
the receiver untouched.
"""

from __future__ import annotations

import jax.numpy as jnp
from flax import struct
from jaxtyping import Array, Float

from ..config import DEFAULT_CONFIG, resolve_dtype
from ..utils.math_utils import acosh_snapped, boost_matrix, rotation_matrix
from .isometry_mappings import hyperboloid_to_poincare, poincare_to_hyperboloid
from .poincare import PoincarePoint


def _create_origin(dtype=None) -> Float[Array, "3"]:
    """Create hyperboloid origin [0, 0, 1]."""
    return jnp.array([0.0, 0.0, 1.0], dtype=dtype)


def _minkowski_dot(x: Float[Array, "3"], y: Float[Array, "3"]) -> Float[Array, ""]:
    """Compute the Minkowski bilinear form x₀y₀ + x₁y₁ - x₂y₂.

    This is the space-like-positive sign convention; the distance kernels use
    the negated form z·z' - x·x' - y·y' directly.

    Args:
        x: Hyperboloid point, shape (3,)
        y: Hyperboloid point, shape (3,)

    Returns:
        Minkowski bilinear form, scalar
    """
    return x[0] * y[0] + x[1] * y[1] - x[2] * y[2]


def _proj(xy: Float[Array, "2"]) -> Float[Array, "3"]:
    """Lift (x, y) onto the upper sheet by solving for z = sqrt(1 + x² + y²)."""
    z = jnp.sqrt(1.0 + jnp.dot(xy, xy))
    return jnp.concatenate([xy, z[None]])


def _dist(x: Float[Array, "3"], y: Float[Array, "3"], eps: float) -> Float[Array, ""]:
    """Geodesic distance acosh(z·z' - x·x' - y·y').

    Args:
        x: Hyperboloid point, shape (3,)
        y: Hyperboloid point, shape (3,)
        eps: Relative snap band for rounding just below the acosh domain

    Returns:
        Geodesic distance d(x, y), scalar. NaN if either point is malformed.
    """
    time_prod = x[2] * y[2]
    arg = time_prod - x[1] * y[1] - x[0] * y[0]
    res = acosh_snapped(arg, eps, time_prod)
    # Zero out if points are identical, unless the argument is already out of domain
    same = jnp.all(jnp.equal(x, y)) & ~jnp.isnan(res)
    return jnp.where(same, 0.0, res)


def _dist_0(x: Float[Array, "3"], eps: float) -> Float[Array, ""]:
    """Geodesic distance from the origin, acosh(z). NaN if z < 1 beyond rounding."""
    return acosh_snapped(x[2], eps)


def _rotate(x: Float[Array, "3"], angle: Float[Array, ""] | float) -> Float[Array, "3"]:
    """Rotate about the z axis by ``angle`` radians, counterclockwise in x-y."""
    return rotation_matrix(angle, dtype=x.dtype) @ x


def _translate(
    x: Float[Array, "3"], dx: Float[Array, ""] | float, dy: Float[Array, ""] | float
) -> Float[Array, "3"]:
    """Translate by the composed boost B_x(dx) · B_y(-dy).

    The y rapidity is negated so that positive ``dy`` moves the viewpoint the
    way the renderer expects. Boosts along different axes do not commute; the
    product order is fixed.

    References:
        https://math.stackexchange.com/questions/1862340/what-are-the-hyperbolic-rotation-matrices-in-3-and-4-dimensions
    """
    boost_x = boost_matrix(dx, axis=0, dtype=x.dtype)
    boost_y = boost_matrix(-dy, axis=1, dtype=x.dtype)
    return (boost_x @ boost_y) @ x


def _is_in_manifold(x: Float[Array, "3"], atol: float = 1e-4) -> Array:
    """Check if point x lies on the upper sheet.

    Returns:
        True if x² + y² - z² = -1 within atol and z > 0
    """
    valid_constraint = jnp.isclose(_minkowski_dot(x, x), -1.0, atol=atol, rtol=0.0)
    valid_z = x[2] > 0
    return jnp.logical_and(valid_constraint, valid_z)


# ---------------------------------------------------------------------------
# Value type
# ---------------------------------------------------------------------------


@struct.dataclass
class Hyperpoint:
    """Point on the upper sheet of the hyperboloid x² + y² - z² = -1.

    Stored as a length-3 array ``coords`` = (x, y, z). Being a flax struct, it is
    a pytree and can pass through ``jax.jit``/``jax.vmap`` as is.

    Two constructors with different guarantees:

    - ``Hyperpoint.new(x, y)`` solves for z, so the result is always on the sheet.
    - ``Hyperpoint.new_with_z(x, y, z)`` trusts the caller. It performs **no**
      check; x² + y² - z² = -1 must already hold. Isometries, model conversion
      and scene decoding use it where the invariant follows from how the
      coordinates were produced. Pair it with ``is_on_hyperboloid`` when the
      source is not trusted.

    Constructors take an optional ``dtype`` (see ``hyperray.config.resolve_dtype``).
    float64 needs ``jax_enable_x64``; without it points are float32 and asking
    for float64 raises ``ValueError``.

    Examples:
        >>> from hyperray.manifolds.hyperboloid import Hyperpoint
        >>> from hyperray.manifolds.poincare import PoincarePoint
        >>>
        >>> p = Hyperpoint.from_poincare(PoincarePoint.new(0.5, 0.0))
        >>> tuple(round(c, 4) for c in p.as_tuple())
        (1.3333, 0.0, 1.6667)
        >>> round(p.distance_to_origin(), 4)
        1.0986
    """

    coords: Float[Array, "3"]

    # -- Construction ----------------------------------------------------
    @classmethod
    def new(cls, x: float, y: float, dtype=None) -> Hyperpoint:
        """Point on the sheet above (x, y); z = sqrt(1 + x² + y²)."""
        return cls(coords=_proj(jnp.asarray([x, y], dtype=resolve_dtype(dtype))))

    @classmethod
    def new_with_z(cls, x: float, y: float, z: float, dtype=None) -> Hyperpoint:
        """Point from all three coordinates. Unchecked: caller guarantees x² + y² - z² = -1."""
        return cls(coords=jnp.asarray([x, y, z], dtype=resolve_dtype(dtype)))

    @classmethod
    def new_at_origin(cls, dtype=None) -> Hyperpoint:
        """The base point (0, 0, 1)."""
        return cls(coords=_create_origin(resolve_dtype(dtype)))

    @classmethod
    def from_poincare(cls, point: PoincarePoint) -> Hyperpoint:
        """Convert a disk point; requires u² + v² < 1 (not checked)."""
        return cls(coords=poincare_to_hyperboloid(point.coords))

    def to_poincare(self) -> PoincarePoint:
        return PoincarePoint(coords=hyperboloid_to_poincare(self.coords))

    # -- Accessors -------------------------------------------------------
    @property
    def x(self) -> float:
        return float(self.coords[0])

    @property
    def y(self) -> float:
        return float(self.coords[1])

    @property
    def z(self) -> float:
        return float(self.coords[2])

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    # -- Metric ----------------------------------------------------------
    @staticmethod
    def minkowski_dot(a: Hyperpoint, b: Hyperpoint) -> float:
        """a.x·b.x + a.y·b.y - a.z·b.z (time coordinate subtracted)."""
        return float(_minkowski_dot(a.coords, b.coords))

    def distance_to_origin(self, eps: float = DEFAULT_CONFIG.acosh_eps) -> float:
        """acosh(z). NaN for a malformed point with z < 1."""
        return float(_dist_0(self.coords, eps))

    def distance_to(self, other: Hyperpoint, eps: float = DEFAULT_CONFIG.acosh_eps) -> float:
        """acosh(z·z' - x·x' - y·y'). Symmetric; NaN if either point is malformed."""
        return float(_dist(self.coords, other.coords, eps))

    # -- Isometries ------------------------------------------------------
    def rotate(self, angle: float) -> Hyperpoint:
        """Rotated copy, ``angle`` radians counterclockwise about the z axis."""
        return Hyperpoint(coords=_rotate(self.coords, angle))

    def translate(self, dx: float, dy: float) -> Hyperpoint:
        """Translated copy under the boost B_x(dx) · B_y(-dy)."""
        return Hyperpoint(coords=_translate(self.coords, dx, dy))

    # -- Validation ------------------------------------------------------
    def is_on_hyperboloid(self, atol: float = DEFAULT_CONFIG.atol) -> bool:
        return bool(_is_in_manifold(self.coords, atol))

    def isclose(self, other: Hyperpoint, atol: float = DEFAULT_CONFIG.atol) -> bool:
        return bool(jnp.allclose(self.coords, other.coords, atol=atol, rtol=0.0))

    def __eq__(self, other):
        if not isinstance(other, Hyperpoint):
            return NotImplemented
        return bool(jnp.array_equal(self.coords, other.coords))

    def __hash__(self):
        return hash(self.as_tuple())
