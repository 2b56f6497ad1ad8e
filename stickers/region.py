"""
Region dataclasses for sticker extraction.
Represents raw component bounds and the padded, clipped sticker regions.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class RawBounds:
    """Tight bounding box of one connected component (inclusive coordinates)."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def w(self) -> int:
        """Width in pixels."""
        return self.max_x - self.min_x + 1

    @property
    def h(self) -> int:
        """Height in pixels."""
        return self.max_y - self.min_y + 1

    @property
    def area(self) -> int:
        return self.w * self.h

    def __repr__(self) -> str:
        return (f"RawBounds(min_x={self.min_x}, min_y={self.min_y}, "
                f"max_x={self.max_x}, max_y={self.max_y})")


@dataclass(frozen=True)
class ExtractedRegion:
    """
    A sticker rectangle inside the atlas.

    Geometry is fixed once created. Selection changes produce a new
    instance through ``with_selected``.
    """

    x: int  # Top-left x coordinate
    y: int  # Top-left y coordinate
    w: int  # Width
    h: int  # Height
    selected: bool = True

    @property
    def x2(self) -> int:
        """Right edge x coordinate (exclusive)."""
        return self.x + self.w

    @property
    def y2(self) -> int:
        """Bottom edge y coordinate (exclusive)."""
        return self.y + self.h

    @property
    def area(self) -> int:
        """Area of the region."""
        return self.w * self.h

    def with_selected(self, selected: bool) -> 'ExtractedRegion':
        """Return a copy with the selection flag replaced."""
        return ExtractedRegion(self.x, self.y, self.w, self.h, selected)

    def to_bbox(self) -> Tuple[int, int, int, int]:
        """(x, y, w, h) tuple."""
        return (self.x, self.y, self.w, self.h)

    def to_dict(self) -> dict:
        """Convert region to dictionary."""
        return {
            'x': self.x,
            'y': self.y,
            'w': self.w,
            'h': self.h,
            'area': self.area,
            'selected': self.selected
        }

    def __repr__(self) -> str:
        return (f"ExtractedRegion(x={self.x}, y={self.y}, w={self.w}, "
                f"h={self.h}, selected={self.selected})")
