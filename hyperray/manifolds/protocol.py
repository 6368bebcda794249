"""Point and Wall protocols for structural typing.

Defines the capabilities the renderer relies on. ``Hyperpoint`` and
``PoincarePoint`` satisfy ``Point``; ``HyperWall`` satisfies ``Wall``.

These are ``typing.Protocol`` classes -- no class needs to inherit from them.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Point(Protocol):
    """Structural protocol for points of a hyperbolic model."""

    # -- Construction ----------------------------------------------------
    @classmethod
    def new_at_origin(cls) -> Point: ...

    # -- Metric ----------------------------------------------------------
    @staticmethod
    def minkowski_dot(a, b) -> float: ...

    def distance_to_origin(self) -> float: ...

    def distance_to(self, other) -> float: ...


@runtime_checkable
class Wall(Protocol):
    """Structural protocol for renderable wall segments."""

    def distance_to_closest_point(self) -> float: ...

    def intersection(self, angle: float) -> float | None: ...
