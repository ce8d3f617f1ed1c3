"""Core geometry types."""

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class GeometryError(ValueError):
    """Base error for malformed geometry input."""


class SvgPathError(GeometryError):
    """An SVG path `d` string could not be parsed."""


class Point(BaseModel):
    """A 2D point. Also used as a free vector (tangents, offsets)."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)

    def __add__(self, other: "Point") -> "Point":
        return Point(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(x=self.x - other.x, y=self.y - other.y)

    def __mul__(self, factor: float) -> "Point":
        return Point(x=self.x * factor, y=self.y * factor)

    def length(self) -> float:
        return math.hypot(self.x, self.y)


class BBox(BaseModel):
    """Axis-aligned bounding box. Width and height are never negative."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    def expand(self, margin: float) -> "BBox":
        """Grow the box by ``margin`` on every side."""
        return BBox(
            x=self.x - margin,
            y=self.y - margin,
            width=self.width + margin * 2,
            height=self.height + margin * 2,
        )


class ResizeHandle(str, Enum):
    """Compass positions of the eight resize handles."""

    TOP_LEFT = "top-left"
    TOP = "top"
    TOP_RIGHT = "top-right"
    RIGHT = "right"
    BOTTOM_RIGHT = "bottom-right"
    BOTTOM = "bottom"
    BOTTOM_LEFT = "bottom-left"
    LEFT = "left"

    @property
    def affects_x(self) -> bool:
        return "left" in self.value or "right" in self.value

    @property
    def affects_y(self) -> bool:
        return "top" in self.value or "bottom" in self.value

    @property
    def is_corner(self) -> bool:
        return self.affects_x and self.affects_y


class FlipAxis(str, Enum):
    """Mirror direction for flips."""

    HORIZONTAL = "horizontal"  # Mirror x across a vertical line
    VERTICAL = "vertical"  # Mirror y across a horizontal line


class Axis(str, Enum):
    """Direction along which shapes are laid out."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Alignment(str, Enum):
    """Edge or center line that aligned shapes end up sharing."""

    LEFT = "left"
    H_CENTER = "h-center"
    RIGHT = "right"
    TOP = "top"
    V_CENTER = "v-center"
    BOTTOM = "bottom"


class DistributeMode(str, Enum):
    """Whether distribution spaces the gaps between boxes or their centers."""

    EDGES = "edges"
    CENTERS = "centers"
