"""
RoomForge - Geometry Primitives
Axis-aligned bounding boxes on the integer map grid.
"""
from dataclasses import dataclass

from roomforge.services.errors import ValidationFailedError


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle covering [x, x+width) x [y, y+height).

    The origin may be negative (bounds checks reject it later); the
    dimensions must be positive integers.
    """
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        for name in ("x", "y", "width", "height"):
            value = getattr(self, name)
            # bool is an int subclass but never a coordinate
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationFailedError(f"Rectangle {name} must be an integer, got {value!r}")
        if self.width <= 0 or self.height <= 0:
            raise ValidationFailedError(
                f"Rectangle dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def overlaps(self, other: "Rect") -> bool:
        return overlaps(self, other)

    def within(self, width: int, height: int) -> bool:
        """True when the rectangle lies inside a width x height grid anchored at (0, 0)."""
        return self.x >= 0 and self.y >= 0 and self.right <= width and self.bottom <= height


def overlaps(a: Rect, b: Rect) -> bool:
    """Separating-axis test; rectangles that only share an edge do not overlap."""
    return not (
        a.x >= b.right
        or a.right <= b.x
        or a.y >= b.bottom
        or a.bottom <= b.y
    )
