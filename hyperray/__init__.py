"""Hyperboloid-model points and walls for a hyperbolic raycaster."""

import logging

from . import config, io, manifolds, utils, walls
from .color import RGBColor
from .config import DEFAULT_CONFIG, FLOAT64_CONFIG, RuntimeConfig, create_config
from .io import SceneFormatError, load_scene, loads_scene
from .manifolds import Hyperpoint, PoincarePoint, PoincareWall, Point, Wall
from .walls import HyperWall, IncomparableWallsError, closest_wall, sort_walls

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_CONFIG",
    "FLOAT64_CONFIG",
    "HyperWall",
    "Hyperpoint",
    "IncomparableWallsError",
    "PoincarePoint",
    "PoincareWall",
    "Point",
    "RGBColor",
    "RuntimeConfig",
    "SceneFormatError",
    "Wall",
    "closest_wall",
    "config",
    "create_config",
    "io",
    "load_scene",
    "loads_scene",
    "manifolds",
    "sort_walls",
    "utils",
    "walls",
]
