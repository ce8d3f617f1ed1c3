"""Lossless conversion of primitive shapes into anchored paths.

Primitives keep compact fields for cheap editing, but operations such as
flips need the anchor form. Each primitive kind has its own explicit
converter; :func:`shape_to_path` dispatches by tool.
"""

import math

from sketch_geometry.bezier import rotate_point
from sketch_geometry.types import (
    Anchor,
    EllipseShape,
    Path,
    Point,
    PolygonShape,
    RectangleShape,
    Shape,
)

# Handle length / radius for a four-segment cubic circle approximation
KAPPA = 0.552284749831


def polygon_vertices(x: float, y: float, width: float, height: float, sides: int) -> list[Point]:
    """Vertices of a regular polygon inscribed in a box, first vertex at top middle."""
    cx = x + width / 2
    cy = y + height / 2
    rx = width / 2
    ry = height / 2
    return [
        Point(
            x=cx + rx * math.cos(2 * math.pi * i / sides - math.pi / 2),
            y=cy + ry * math.sin(2 * math.pi * i / sides - math.pi / 2),
        )
        for i in range(sides)
    ]


def _rotate_anchors(anchors: list[Anchor], center: Point, angle: float) -> list[Anchor]:
    if not angle:
        return anchors
    return [
        Anchor(
            point=rotate_point(a.point, center, angle),
            handle_in=rotate_point(a.handle_in, center, angle),
            handle_out=rotate_point(a.handle_out, center, angle),
        )
        for a in anchors
    ]


def rectangle_to_path(shape: RectangleShape) -> Path:
    """Four corner anchors, clockwise from the top-left in screen coordinates."""
    x, y, w, h = shape.x, shape.y, shape.width, shape.height
    corners = [Point(x=x, y=y), Point(x=x + w, y=y), Point(x=x + w, y=y + h), Point(x=x, y=y + h)]
    anchors = _rotate_anchors([Anchor.corner(p) for p in corners], shape.center, shape.rotation)
    return Path(anchors=anchors, closed=True, stroke_width=shape.stroke_width)


def ellipse_to_path(shape: EllipseShape) -> Path:
    """Four smooth anchors at top, right, bottom and left of the ellipse."""
    c = shape.center
    rx = shape.width / 2
    ry = shape.height / 2
    ox = rx * KAPPA
    oy = ry * KAPPA

    def anchor(
        px: float, py: float, in_x: float, in_y: float, out_x: float, out_y: float
    ) -> Anchor:
        return Anchor(
            point=Point(x=px, y=py),
            handle_in=Point(x=in_x, y=in_y),
            handle_out=Point(x=out_x, y=out_y),
        )

    anchors = [
        anchor(c.x, c.y - ry, c.x - ox, c.y - ry, c.x + ox, c.y - ry),
        anchor(c.x + rx, c.y, c.x + rx, c.y - oy, c.x + rx, c.y + oy),
        anchor(c.x, c.y + ry, c.x + ox, c.y + ry, c.x - ox, c.y + ry),
        anchor(c.x - rx, c.y, c.x - rx, c.y + oy, c.x - rx, c.y - oy),
    ]
    anchors = _rotate_anchors(anchors, c, shape.rotation)
    return Path(anchors=anchors, closed=True, stroke_width=shape.stroke_width)


def polygon_to_path(shape: PolygonShape) -> Path:
    """One corner anchor per polygon vertex."""
    vertices = polygon_vertices(shape.x, shape.y, shape.width, shape.height, shape.sides)
    anchors = _rotate_anchors([Anchor.corner(p) for p in vertices], shape.center, shape.rotation)
    return Path(anchors=anchors, closed=True, stroke_width=shape.stroke_width)


def shape_to_path(shape: Shape) -> Path:
    """Convert any shape to its anchored form. Paths pass through unchanged.

    Groups have no single anchored form and raise ``TypeError``.
    """
    match shape:
        case Path():
            return shape
        case RectangleShape():
            return rectangle_to_path(shape)
        case EllipseShape():
            return ellipse_to_path(shape)
        case PolygonShape():
            return polygon_to_path(shape)
    raise TypeError(f"Unsupported shape: {type(shape).__name__}")
