"""Display color carried by walls.

Geometry never looks inside a color; walls only pass it through conversions
and isometries unchanged.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RGBColor:
    """8-bit RGB color. Hashable so it can sit in static pytree fields."""

    r: int
    g: int
    b: int

    def __post_init__(self):
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Color channel {name} must be an int, got {type(value).__name__}")
            if not 0 <= value <= 255:
                raise ValueError(f"Color channel {name} must lie in [0, 255], got {value}")

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


BLACK = RGBColor(0, 0, 0)
WHITE = RGBColor(255, 255, 255)
