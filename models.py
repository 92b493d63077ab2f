"""
models.py - Core Data Models for Subwindow Search
==================================================
Defines the result type returned by the search.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Any


@dataclass(frozen=True)
class Box:
    """
    Axis-aligned rectangle found by the search.
    Coordinates are inclusive pixel indices; score is the exact quality.
    """
    left: int
    top: int
    right: int
    bottom: int
    score: float

    @property
    def width(self) -> int:
        """Number of pixel columns covered."""
        return self.right - self.left + 1

    @property
    def height(self) -> int:
        """Number of pixel rows covered."""
        return self.bottom - self.top + 1

    @property
    def area(self) -> int:
        """Covered pixel count."""
        return self.width * self.height

    def contains(self, x: int, y: int) -> bool:
        """Check if pixel (x, y) lies inside the box."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def as_tuple(self) -> Tuple[int, int, int, int]:
        """Coordinates as (left, top, right, bottom)."""
        return (self.left, self.top, self.right, self.bottom)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'left': self.left,
            'top': self.top,
            'right': self.right,
            'bottom': self.bottom,
            'score': self.score,
            'width': self.width,
            'height': self.height,
        }
