"""Scene decoding.

Reads wall lists from JSON (or an already parsed mapping) into ``HyperWall``
values and writes them back. Decoding builds points with
``Hyperpoint.new_with_z`` and never applies isometries; off-manifold points are
reported, and rejected only when the config asks for strict decoding.

Scene layout::

    {
        "model": "hyperboloid",
        "walls": [
            {"beginning": [x, y, z], "end": [x, y, z], "color": [r, g, b]}
        ]
    }

With ``"model": "poincare"`` the endpoints are disk points ``[u, v]`` and are
converted on load. Colors may also be given as ``{"r": .., "g": .., "b": ..}``.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from numbers import Real
from typing import Any, Union

from .color import RGBColor
from .config import DEFAULT_CONFIG, RuntimeConfig
from .manifolds.hyperboloid import Hyperpoint
from .manifolds.poincare import PoincarePoint, PoincareWall
from .walls import HyperWall

logger = logging.getLogger(__name__)

MODEL_HYPERBOLOID = "hyperboloid"
MODEL_POINCARE = "poincare"
MODELS = (MODEL_HYPERBOLOID, MODEL_POINCARE)


class SceneFormatError(ValueError):
    """Raised when scene data does not have the expected shape."""


def _coordinates(data: Any, arity: int, what: str) -> list[float]:
    if isinstance(data, (str, bytes)) or not isinstance(data, Iterable):
        raise SceneFormatError(f"{what} must be a list of {arity} numbers, got {data!r}")
    values = list(data)
    if len(values) != arity:
        raise SceneFormatError(f"{what} must have {arity} coordinates, got {len(values)}")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, Real):
            raise SceneFormatError(f"{what} coordinates must be numbers, got {value!r}")
    return [float(value) for value in values]


def _field(data: Any, key: str, what: str) -> Any:
    if not isinstance(data, Mapping):
        raise SceneFormatError(f"{what} must be a mapping, got {type(data).__name__}")
    try:
        return data[key]
    except KeyError:
        raise SceneFormatError(f"{what} is missing '{key}'") from None


def hyperpoint_from_data(data: Any, config: RuntimeConfig = DEFAULT_CONFIG) -> Hyperpoint:
    """Decode an ``[x, y, z]`` triple. The invariant is not enforced unless ``config.strict_decode``."""
    x, y, z = _coordinates(data, 3, "Hyperpoint")
    point = Hyperpoint.new_with_z(x, y, z, dtype=config.dtype)
    if not point.is_on_hyperboloid(config.atol):
        if config.strict_decode:
            raise SceneFormatError(f"Point {(x, y, z)} does not lie on the hyperboloid")
        logger.warning("Point %s does not lie on the hyperboloid (atol=%g)", (x, y, z), config.atol)
    return point


def poincare_point_from_data(data: Any, config: RuntimeConfig = DEFAULT_CONFIG) -> PoincarePoint:
    """Decode a ``[u, v]`` disk point."""
    u, v = _coordinates(data, 2, "PoincarePoint")
    point = PoincarePoint.new(u, v, dtype=config.dtype)
    if not point.is_in_disk(config.disk_eps):
        if config.strict_decode:
            raise SceneFormatError(f"Point {(u, v)} is not inside the unit disk")
        logger.warning("Point %s is not inside the unit disk", (u, v))
    return point


def color_from_data(data: Any) -> RGBColor:
    """Decode ``[r, g, b]`` or ``{"r": .., "g": .., "b": ..}``."""
    if isinstance(data, Mapping):
        channels = [_field(data, key, "Color") for key in ("r", "g", "b")]
    elif isinstance(data, (list, tuple)):
        channels = list(data)
    else:
        raise SceneFormatError(f"Color must be a list or mapping, got {data!r}")
    if len(channels) != 3:
        raise SceneFormatError(f"Color must have 3 channels, got {len(channels)}")
    try:
        return RGBColor(*channels)
    except (TypeError, ValueError) as e:
        raise SceneFormatError(f"Invalid color {data!r}: {e}") from e


def hyperwall_from_data(
    data: Any, model: str = MODEL_HYPERBOLOID, config: RuntimeConfig = DEFAULT_CONFIG
) -> HyperWall:
    """Decode one wall. Poincaré walls are converted with ``HyperWall.from_poincare``."""
    beginning = _field(data, "beginning", "Wall")
    end = _field(data, "end", "Wall")
    color = color_from_data(_field(data, "color", "Wall"))
    if model == MODEL_HYPERBOLOID:
        return HyperWall(
            beginning=hyperpoint_from_data(beginning, config),
            end=hyperpoint_from_data(end, config),
            color=color,
        )
    if model == MODEL_POINCARE:
        wall = PoincareWall(
            beginning=poincare_point_from_data(beginning, config),
            end=poincare_point_from_data(end, config),
            color=color,
        )
        return HyperWall.from_poincare(wall)
    raise SceneFormatError(f"Unknown model: {model!r}. Use one of {MODELS}.")


def load_scene_data(data: Any, config: RuntimeConfig = DEFAULT_CONFIG) -> list[HyperWall]:
    """Decode a parsed scene mapping into hyperboloid walls."""
    model = data.get("model", MODEL_HYPERBOLOID) if isinstance(data, Mapping) else None
    walls_data = _field(data, "walls", "Scene")
    if isinstance(walls_data, (str, bytes, Mapping)) or not isinstance(walls_data, Iterable):
        raise SceneFormatError(f"Scene 'walls' must be a list, got {type(walls_data).__name__}")
    if model not in MODELS:
        raise SceneFormatError(f"Unknown model: {model!r}. Use one of {MODELS}.")

    walls = []
    for idx, wall_data in enumerate(walls_data):
        try:
            walls.append(hyperwall_from_data(wall_data, model, config))
        except SceneFormatError as e:
            raise SceneFormatError(f"Wall {idx}: {e}") from e
        logger.debug(f"Decoded wall {idx} ({model})")
    logger.info(f"Loaded {len(walls)} walls from {model} scene")
    return walls


def loads_scene(text: Union[str, bytes], config: RuntimeConfig = DEFAULT_CONFIG) -> list[HyperWall]:
    """Decode a scene from a JSON string."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SceneFormatError(f"Scene is not valid JSON: {e}") from e
    return load_scene_data(data, config)


def load_scene(path: Union[str, os.PathLike], config: RuntimeConfig = DEFAULT_CONFIG) -> list[HyperWall]:
    """Decode a scene from a JSON file."""
    logger.info(f"Loading scene from: {path}")
    with open(path, encoding="utf-8") as f:
        text = f.read()
    return loads_scene(text, config)


def dump_scene_data(walls: Iterable[HyperWall]) -> dict[str, Any]:
    """Encode walls as a hyperboloid scene mapping."""
    return {
        "model": MODEL_HYPERBOLOID,
        "walls": [
            {
                "beginning": list(wall.beginning.as_tuple()),
                "end": list(wall.end.as_tuple()),
                "color": list(wall.color.as_tuple()),
            }
            for wall in walls
        ],
    }


def dumps_scene(walls: Iterable[HyperWall], indent: int | None = None) -> str:
    """Encode walls as a JSON hyperboloid scene."""
    return json.dumps(dump_scene_data(walls), indent=indent)
