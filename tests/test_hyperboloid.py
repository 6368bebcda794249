"""Tests for hyperboloid points.

Covers construction, the Minkowski form, distances, and the rotation and
translation isometries, both through ``Hyperpoint`` and the vmap-able kernels.
"""

import math

import jax
import jax.numpy as jnp
import pytest

from hyperray import config as config_module
from hyperray.manifolds import hyperboloid
from hyperray.manifolds.hyperboloid import Hyperpoint
from hyperray.manifolds.poincare import PoincarePoint
from hyperray.manifolds.protocol import Point, Wall
from hyperray.utils.math_utils import boost_matrix

# Enable float64 support in JAX
jax.config.update("jax_enable_x64", True)

EPS = 1e-9


# ---------------------------------------------------------------------------
# Helper functions


def _batch_dist(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    return jax.vmap(hyperboloid._dist, in_axes=(0, 0, None))(x, y, EPS)


def _batch_minkowski_norm(x: jnp.ndarray) -> jnp.ndarray:
    return jax.vmap(hyperboloid._minkowski_dot)(x, x)


# ---------------------------------------------------------------------------
# Construction


@pytest.mark.parametrize("x, y", [(0.0, 0.0), (0.3, -0.4), (-2.0, 5.0), (100.0, -37.5), (1e-8, 0.0)])
def test_new_lies_on_hyperboloid(x: float, y: float):
    """Test that new(x, y) solves for z on the upper sheet."""
    p = Hyperpoint.new(x, y)
    assert p.x == x and p.y == y
    assert p.z >= 1.0
    assert Hyperpoint.minkowski_dot(p, p) == pytest.approx(-1.0, abs=1e-9)
    assert p.is_on_hyperboloid()


def test_new_with_z_is_unchecked():
    """Test that new_with_z keeps coordinates verbatim, even off the sheet."""
    p = Hyperpoint.new_with_z(1.0, 2.0, 0.5)
    assert p.as_tuple() == (1.0, 2.0, 0.5)
    assert not p.is_on_hyperboloid()


def test_points_near_origin_keep_their_distance():
    """Test that a point 1e-4 from the origin is not rounded onto it."""
    p = Hyperpoint.new(1e-4, 0.0)
    assert p.coords.dtype == jnp.float64
    assert p.distance_to_origin() == pytest.approx(1e-4, rel=1e-6)


def test_constructors_without_x64(monkeypatch: pytest.MonkeyPatch):
    """Test that points fall back to float32 and refuse float64 when 64-bit mode is off."""
    monkeypatch.setattr(config_module, "x64_enabled", lambda: False)
    assert Hyperpoint.new(0.3, 0.4).coords.dtype == jnp.float32
    assert Hyperpoint.new_at_origin().coords.dtype == jnp.float32
    assert PoincarePoint.new(0.5, 0.0).coords.dtype == jnp.float32
    with pytest.raises(ValueError, match="jax_enable_x64"):
        Hyperpoint.new(1e-4, 0.0, dtype=jnp.float64)
    with pytest.raises(ValueError, match="jax_enable_x64"):
        Hyperpoint.new_with_z(0.0, 0.0, 1.0, dtype="float64")
    with pytest.raises(ValueError, match="jax_enable_x64"):
        PoincarePoint.new(0.5, 0.0, dtype=jnp.float64)


def test_origin():
    """Test the distinguished base point."""
    origin = Hyperpoint.new_at_origin()
    assert origin.as_tuple() == (0.0, 0.0, 1.0)
    assert origin.distance_to_origin() == 0.0
    assert origin == Hyperpoint.new(0.0, 0.0)


def test_satisfies_point_protocol():
    """Test that Hyperpoint satisfies the Point protocol but not Wall."""
    p = Hyperpoint.new(0.1, 0.2)
    assert isinstance(p, Point)
    assert not isinstance(p, Wall)


def test_equality_and_hash():
    """Test coordinate equality and hashing."""
    a = Hyperpoint.new(0.25, -1.5)
    b = Hyperpoint.new(0.25, -1.5)
    c = Hyperpoint.new(0.25, -1.4)
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert a.isclose(Hyperpoint.new(0.25 + 1e-7, -1.5))


# ---------------------------------------------------------------------------
# Minkowski form and distances


def test_minkowski_dot_formula():
    """Test the form x·x' + y·y' - z·z' with the time coordinate subtracted."""
    a = Hyperpoint.new_with_z(1.0, 2.0, 3.0)
    b = Hyperpoint.new_with_z(4.0, 5.0, 6.0)
    assert Hyperpoint.minkowski_dot(a, b) == pytest.approx(4.0 + 10.0 - 18.0)
    assert Hyperpoint.minkowski_dot(a, b) == Hyperpoint.minkowski_dot(b, a)


def test_minkowski_dot_is_negated_distance_argument(hyperboloid_points: jnp.ndarray):
    """Test that cosh(d(a, b)) equals -<a, b> for points on the sheet."""
    a = Hyperpoint(coords=hyperboloid_points[0])
    b = Hyperpoint(coords=hyperboloid_points[1])
    assert math.cosh(a.distance_to(b)) == pytest.approx(-Hyperpoint.minkowski_dot(a, b), rel=1e-9)


def test_points_lie_on_hyperboloid(hyperboloid_points: jnp.ndarray, tolerance: tuple[float, float]):
    """Test that generated fixture points satisfy the invariant."""
    atol, rtol = tolerance
    norms = _batch_minkowski_norm(hyperboloid_points)
    assert jnp.allclose(norms, -1.0, atol=atol, rtol=rtol)


def test_distance_to_origin_matches_acosh_z(hyperboloid_points: jnp.ndarray, tolerance: tuple[float, float]):
    """Test that distance to origin is acosh(z) and agrees with distance_to(origin)."""
    atol, rtol = tolerance
    origin = Hyperpoint.new_at_origin()
    for coords in hyperboloid_points[:5]:
        p = Hyperpoint(coords=coords)
        assert p.distance_to_origin() == pytest.approx(math.acosh(p.z), abs=atol)
        assert p.distance_to(origin) == pytest.approx(p.distance_to_origin(), abs=atol)


def test_self_distance_is_zero(hyperboloid_points: jnp.ndarray):
    """Test that d(p, p) == 0 for every point."""
    dists = _batch_dist(hyperboloid_points, hyperboloid_points)
    assert jnp.all(dists == 0.0)

    p = Hyperpoint.new(3.0, -4.0)
    assert p.distance_to(p) == 0.0
    assert p.distance_to(Hyperpoint.new(3.0, -4.0)) == 0.0


def test_distance_is_symmetric(hyperboloid_points: jnp.ndarray, tolerance: tuple[float, float]):
    """Test that d(a, b) == d(b, a)."""
    atol, rtol = tolerance
    a, b = jnp.array_split(hyperboloid_points, 2)
    assert jnp.allclose(_batch_dist(a, b), _batch_dist(b, a), atol=atol, rtol=rtol)


def test_distance_along_x_axis():
    """Test that points at signed rapidities s, t on the x axis are |s - t| apart."""
    a = Hyperpoint.new(math.sinh(0.5), 0.0)
    b = Hyperpoint.new(math.sinh(-1.25), 0.0)
    assert a.distance_to(b) == pytest.approx(1.75, abs=1e-9)


def test_malformed_point_yields_nan():
    """Test that z < 1 surfaces as NaN instead of an error."""
    bad = Hyperpoint.new_with_z(0.0, 0.0, 0.5)
    assert math.isnan(bad.distance_to_origin())
    assert math.isnan(bad.distance_to(Hyperpoint.new_with_z(0.0, 0.0, 0.5 + 1e-3)))


def test_malformed_point_has_nan_self_distance():
    """Test that identical coordinates do not hide an out-of-domain acosh argument."""
    bad = Hyperpoint.new_with_z(0.0, 0.0, 0.5)
    assert math.isnan(bad.distance_to(bad))
    assert math.isnan(float(hyperboloid._dist(bad.coords, bad.coords, 1e-9)))


def test_rounding_below_one_is_snapped():
    """Test that acosh arguments a hair below 1 count as rounding, not malformed input."""
    p = Hyperpoint.new_with_z(0.0, 0.0, 1.0 - 1e-12)
    assert p.distance_to_origin() == 0.0
    assert math.isnan(p.distance_to_origin(eps=0.0))


# ---------------------------------------------------------------------------
# Poincaré conversion


def test_poincare_origin_maps_to_origin():
    """Test that the disk origin maps to (0, 0, 1)."""
    p = Hyperpoint.from_poincare(PoincarePoint.new_at_origin())
    assert p == Hyperpoint.new_at_origin()


def test_poincare_conversion_concrete():
    """Test (0.5, 0) -> (4/3, 0, 5/3) at distance 2 * artanh(0.5)."""
    p = Hyperpoint.from_poincare(PoincarePoint.new(0.5, 0.0))
    assert p.x == pytest.approx(4.0 / 3.0)
    assert p.y == pytest.approx(0.0)
    assert p.z == pytest.approx(5.0 / 3.0)
    assert p.distance_to_origin() == pytest.approx(1.0986, abs=1e-4)
    assert p.distance_to_origin() == pytest.approx(2.0 * math.atanh(0.5), abs=1e-12)


def test_poincare_round_trip(disk_points: jnp.ndarray, tolerance: tuple[float, float]):
    """Test that disk -> hyperboloid -> disk is the identity."""
    atol, rtol = tolerance
    for uv in disk_points[:5]:
        p = PoincarePoint(coords=uv)
        back = Hyperpoint.from_poincare(p).to_poincare()
        assert jnp.allclose(back.coords, uv, atol=atol, rtol=rtol)


def test_poincare_conversion_preserves_distances(disk_points: jnp.ndarray):
    """Test that converted points keep their disk distances."""
    a = PoincarePoint(coords=disk_points[0])
    b = PoincarePoint(coords=disk_points[1])
    ha = Hyperpoint.from_poincare(a)
    hb = Hyperpoint.from_poincare(b)
    assert ha.distance_to(hb) == pytest.approx(a.distance_to(b), rel=1e-7, abs=1e-9)
    assert ha.distance_to_origin() == pytest.approx(a.distance_to_origin(), rel=1e-7, abs=1e-9)


# ---------------------------------------------------------------------------
# Isometries


@pytest.mark.parametrize("angle", [0.0, 2.0 * math.pi, -2.0 * math.pi])
def test_full_turn_rotation_is_identity(angle: float):
    """Test that rotating by 0 or a full turn returns the same point."""
    p = Hyperpoint.new(1.5, -0.75)
    assert p.rotate(angle).isclose(p, atol=1e-12)


def test_zero_translation_is_identity():
    """Test that translate(0, 0) returns the same point."""
    p = Hyperpoint.new(-0.2, 0.9)
    assert p.translate(0.0, 0.0).isclose(p, atol=1e-12)


def test_isometries_do_not_mutate_receiver():
    """Test that rotate and translate return new points."""
    p = Hyperpoint.new(0.5, 0.5)
    before = p.as_tuple()
    q = p.rotate(1.0).translate(0.3, -0.2)
    assert p.as_tuple() == before
    assert q != p


def test_rotation_is_counterclockwise():
    """Test that a quarter turn takes the x axis onto the y axis."""
    p = Hyperpoint.new(1.0, 0.0).rotate(math.pi / 2)
    assert p.isclose(Hyperpoint.new(0.0, 1.0), atol=1e-12)


def test_translation_of_origin():
    """Test the boost sign conventions on the origin."""
    origin = Hyperpoint.new_at_origin()

    along_x = origin.translate(0.7, 0.0)
    assert along_x.isclose(Hyperpoint.new_with_z(math.sinh(0.7), 0.0, math.cosh(0.7)), atol=1e-12)
    assert along_x.distance_to_origin() == pytest.approx(0.7, abs=1e-9)

    # The y rapidity is negated
    along_y = origin.translate(0.0, 0.7)
    assert along_y.isclose(Hyperpoint.new_with_z(0.0, -math.sinh(0.7), math.cosh(0.7)), atol=1e-12)


def test_translation_composes_x_boost_then_y_boost():
    """Test that translate applies B_x(dx) @ B_y(-dy), which differs from the reverse product."""
    p = Hyperpoint.new(0.2, -0.1)
    dx, dy = 1.0, 1.0
    expected = boost_matrix(dx, axis=0) @ boost_matrix(-dy, axis=1) @ p.coords
    reversed_order = boost_matrix(-dy, axis=1) @ boost_matrix(dx, axis=0) @ p.coords

    result = p.translate(dx, dy)
    assert jnp.allclose(result.coords, expected, atol=1e-12)
    assert not jnp.allclose(result.coords, reversed_order, atol=1e-3)


@pytest.mark.parametrize("angle", [0.3, -1.2, math.pi])
def test_rotation_preserves_manifold_and_distances(
    hyperboloid_points: jnp.ndarray, angle: float, tolerance: tuple[float, float]
):
    """Test that rotation keeps points on the sheet and preserves pairwise distances."""
    atol, rtol = tolerance
    rotated = jax.vmap(hyperboloid._rotate, in_axes=(0, None))(hyperboloid_points, angle)
    assert jnp.allclose(_batch_minkowski_norm(rotated), -1.0, atol=atol, rtol=rtol)

    a, b = jnp.array_split(hyperboloid_points, 2)
    ra, rb = jnp.array_split(rotated, 2)
    assert jnp.allclose(_batch_dist(a, b), _batch_dist(ra, rb), atol=atol, rtol=rtol)


@pytest.mark.parametrize("dx, dy", [(0.5, 0.0), (0.0, -0.8), (0.4, 0.9)])
def test_translation_preserves_manifold_and_distances(
    hyperboloid_points: jnp.ndarray, dx: float, dy: float, tolerance: tuple[float, float]
):
    """Test that translation keeps points on the sheet and preserves pairwise distances."""
    atol, rtol = tolerance
    moved = jax.vmap(hyperboloid._translate, in_axes=(0, None, None))(hyperboloid_points, dx, dy)
    assert jnp.allclose(_batch_minkowski_norm(moved), -1.0, atol=1e-5, rtol=rtol)
    assert jnp.all(moved[:, 2] > 0)

    a, b = jnp.array_split(hyperboloid_points, 2)
    ma, mb = jnp.array_split(moved, 2)
    assert jnp.allclose(_batch_dist(a, b), _batch_dist(ma, mb), atol=atol, rtol=rtol)


def test_isometries_are_jit_compatible():
    """Test that Hyperpoint passes through jax.jit as a pytree."""
    p = Hyperpoint.new(0.4, -0.3)

    rotate_jit = jax.jit(lambda point, angle: point.rotate(angle))
    translate_jit = jax.jit(lambda point, dx, dy: point.translate(dx, dy))

    assert rotate_jit(p, 0.5).isclose(p.rotate(0.5), atol=1e-12)
    assert translate_jit(p, 0.2, 0.1).isclose(p.translate(0.2, 0.1), atol=1e-12)
