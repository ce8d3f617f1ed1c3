"""Axis-aligned bounding boxes for paths and primitive shapes."""

import math

from sketch_geometry.bezier import rotate_point, sample_path
from sketch_geometry.config import settings
from sketch_geometry.convert import polygon_vertices
from sketch_geometry.types import (
    BBox,
    EllipseShape,
    GroupShape,
    Path,
    Point,
    PolygonShape,
    PrimitiveShape,
    Shape,
)


def bbox_of_points(points: list[Point]) -> BBox:
    """Tight box around a non-empty point list."""
    assert points, "bbox_of_points needs at least one point"
    min_x = min(p.x for p in points)
    min_y = min(p.y for p in points)
    max_x = max(p.x for p in points)
    max_y = max(p.y for p in points)
    return BBox(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)


def box_intersects_box(a: BBox, b: BBox) -> bool:
    """Strict AABB overlap; boxes that only touch do not intersect."""
    x_overlap = a.x < b.x + b.width and a.x + a.width > b.x
    y_overlap = a.y < b.y + b.height and a.y + a.height > b.y
    return x_overlap and y_overlap


def is_bbox_inside(inner: BBox, outer: BBox) -> bool:
    return (
        inner.x >= outer.x
        and inner.y >= outer.y
        and inner.right <= outer.right
        and inner.bottom <= outer.bottom
    )


def marquee_rect(start: Point, end: Point) -> BBox:
    """Normalized box spanned by a marquee drag from ``start`` to ``end``."""
    return BBox(
        x=min(start.x, end.x),
        y=min(start.y, end.y),
        width=abs(start.x - end.x),
        height=abs(start.y - end.y),
    )


def path_bbox(path: Path, include_stroke: bool = True, precise: bool = True) -> BBox | None:
    """Bounding box of an anchored path.

    Args:
        path: The path to measure
        include_stroke: Grow the box by half the stroke width on every side
        precise: Sample the curve for a tight box; otherwise use the control
            cage (every point and handle), which is faster but loose

    Returns:
        The box, or None for a path without anchors
    """
    if not path.anchors:
        return None

    margin = path.stroke_width / 2 if include_stroke else 0.0
    if len(path.anchors) == 1:
        points = [path.anchors[0].point]
    elif precise:
        points = sample_path(path.anchors, settings.samples_per_segment, path.closed)
    else:
        points = [p for a in path.anchors for p in (a.point, a.handle_in, a.handle_out)]
    return bbox_of_points(points).expand(margin)


def primitive_bbox(shape: PrimitiveShape, include_stroke: bool = True) -> BBox:
    """Bounding box of a rectangle, ellipse or polygon, honouring its rotation."""
    margin = shape.stroke_width / 2 if include_stroke else 0.0
    center = shape.center

    match shape:
        case EllipseShape(rotation=rotation) if rotation:
            rx = abs(shape.width) / 2
            ry = abs(shape.height) / 2
            cos = math.cos(rotation)
            sin = math.sin(rotation)
            width = 2 * math.sqrt((rx * cos) ** 2 + (ry * sin) ** 2)
            height = 2 * math.sqrt((rx * sin) ** 2 + (ry * cos) ** 2)
            box = BBox(x=center.x - width / 2, y=center.y - height / 2, width=width, height=height)
        case PolygonShape():
            vertices = polygon_vertices(shape.x, shape.y, shape.width, shape.height, shape.sides)
            if shape.rotation:
                vertices = [rotate_point(p, center, shape.rotation) for p in vertices]
            box = bbox_of_points(vertices)
        case _:
            x, y, w, h = shape.x, shape.y, shape.width, shape.height
            corners = [
                Point(x=x, y=y),
                Point(x=x + w, y=y),
                Point(x=x + w, y=y + h),
                Point(x=x, y=y + h),
            ]
            if shape.rotation:
                corners = [rotate_point(p, center, shape.rotation) for p in corners]
            box = bbox_of_points(corners)
    return box.expand(margin)


def shape_bbox(shape: Shape, include_stroke: bool = True) -> BBox | None:
    """Bounding box of any shape; None for an empty path or a group with nothing to measure."""
    if isinstance(shape, GroupShape):
        return union_bbox(shape.children, include_stroke)
    if isinstance(shape, Path):
        return path_bbox(shape, include_stroke)
    return primitive_bbox(shape, include_stroke)


def union_bbox(shapes: list[Shape], include_stroke: bool = False) -> BBox | None:
    """Union of the boxes of all shapes.

    Returns None when there is nothing to measure. Callers must not treat
    that as a zero-sized box at the origin.
    """
    boxes = [box for box in (shape_bbox(s, include_stroke) for s in shapes) if box is not None]
    if not boxes:
        return None
    min_x = min(b.x for b in boxes)
    min_y = min(b.y for b in boxes)
    max_x = max(b.right for b in boxes)
    max_y = max(b.bottom for b in boxes)
    return BBox(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)
