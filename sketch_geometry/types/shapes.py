"""Anchor-based paths and primitive shapes."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from sketch_geometry.types.geometry import Point


class Anchor(BaseModel):
    """One node of a cubic-bezier path.

    Handles that coincide with ``point`` make a corner; handles that extend
    away make a smooth node. Symmetry is enforced by editing operations,
    never by the type.
    """

    model_config = ConfigDict(frozen=True)

    point: Point
    handle_in: Point
    handle_out: Point

    @classmethod
    def corner(cls, point: Point) -> "Anchor":
        """Build an anchor with zero-length handles."""
        return cls(point=point, handle_in=point, handle_out=point)

    @property
    def is_corner(self) -> bool:
        return self.handle_in == self.point and self.handle_out == self.point

    def translated(self, dx: float, dy: float) -> "Anchor":
        offset = Point(x=dx, y=dy)
        return Anchor(
            point=self.point + offset,
            handle_in=self.handle_in + offset,
            handle_out=self.handle_out + offset,
        )


class _ShapeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    stroke_width: float = Field(default=2.0, ge=0, allow_inf_nan=False)


class Path(_ShapeBase):
    """An ordered, optionally closed sequence of anchors.

    When ``closed`` is set, an implicit segment joins the last anchor back to
    the first. Zero anchors is an empty path; one anchor is a dot drawn with
    stroke-width diameter.
    """

    tool: Literal["path"] = "path"
    anchors: list[Anchor] = []
    closed: bool = False

    @property
    def segment_count(self) -> int:
        n = len(self.anchors)
        if n < 2:
            return 0
        return n if self.closed else n - 1


class _BoxShape(_ShapeBase):
    """A primitive defined by its unrotated box plus a rotation about its center."""

    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)
    width: float = Field(allow_inf_nan=False)  # May go negative mid-transform
    height: float = Field(allow_inf_nan=False)
    rotation: float = Field(default=0.0, allow_inf_nan=False)  # Radians

    @property
    def center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)


class RectangleShape(_BoxShape):
    tool: Literal["rectangle"] = "rectangle"


class EllipseShape(_BoxShape):
    """Ellipse inscribed in its box."""

    tool: Literal["ellipse"] = "ellipse"


class PolygonShape(_BoxShape):
    """Regular polygon inscribed in its box, first vertex at top middle."""

    tool: Literal["polygon"] = "polygon"
    sides: int = Field(default=6, ge=3)


class GroupShape(BaseModel):
    """Shapes that move, scale and select as one.

    Transforms and queries recurse into ``children``. A group without
    children measures like an empty path.
    """

    model_config = ConfigDict(frozen=True)

    tool: Literal["group"] = "group"
    children: list["Shape"] = []


PrimitiveShape = RectangleShape | EllipseShape | PolygonShape

Shape = Annotated[
    Path | RectangleShape | EllipseShape | PolygonShape | GroupShape,
    Field(discriminator="tool"),
]

GroupShape.model_rebuild()

_shape_adapter: TypeAdapter[Shape] = TypeAdapter(Shape)


def parse_shape(data: dict[str, Any]) -> Shape:
    """Validate a plain dict (e.g. loaded JSON) into the matching shape model."""
    return _shape_adapter.validate_python(data)
