"""Hyperbolic point models: hyperboloid points, Poincaré disk points and the maps between them."""

from . import hyperboloid, isometry_mappings, poincare
from .hyperboloid import Hyperpoint
from .poincare import PoincarePoint, PoincareWall
from .protocol import Point, Wall

__all__ = [
    "Hyperpoint",
    "PoincarePoint",
    "PoincareWall",
    "Point",
    "Wall",
    "hyperboloid",
    "isometry_mappings",
    "poincare",
]
