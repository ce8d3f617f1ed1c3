"""Hit detection for shapes.

Decides whether a point touches a shape's stroke (or fill), and whether a
shape falls inside a marquee rectangle or a freeform lasso.
"""

import logging
import math

from sketch_geometry.bbox import bbox_of_points, box_intersects_box, shape_bbox
from sketch_geometry.bezier import distance, rotate_point, sample_path
from sketch_geometry.config import settings
from sketch_geometry.convert import polygon_vertices
from sketch_geometry.types import (
    BBox,
    EllipseShape,
    GroupShape,
    Path,
    Point,
    PolygonShape,
    RectangleShape,
    Shape,
)

logger = logging.getLogger(__name__)


def hit_tolerance(stroke_width: float, scale: float) -> float:
    """Clickable margin in drawing units.

    The larger of the fixed screen-pixel margin converted through the zoom
    ``scale`` and half the visual stroke thickness.
    """
    assert scale > 0, "zoom scale must be positive"
    return max(settings.hit_tolerance_px / scale, stroke_width / 2)


def dist_sq_to_segment(p: Point, a: Point, b: Point) -> float:
    """Squared distance from ``p`` to the segment ``a``-``b``."""
    l2 = (a.x - b.x) ** 2 + (a.y - b.y) ** 2
    if l2 == 0:
        return (p.x - a.x) ** 2 + (p.y - a.y) ** 2
    t = ((p.x - a.x) * (b.x - a.x) + (p.y - a.y) * (b.y - a.y)) / l2
    t = max(0.0, min(1.0, t))
    dx = p.x - (a.x + t * (b.x - a.x))
    dy = p.y - (a.y + t * (b.y - a.y))
    return dx * dx + dy * dy


def _near_polyline(point: Point, polyline: list[Point], threshold: float) -> bool:
    threshold_sq = threshold * threshold
    return any(
        dist_sq_to_segment(point, a, b) < threshold_sq
        for a, b in zip(polyline[:-1], polyline[1:], strict=True)
    )


def _boxes_touch(a: BBox, b: BBox) -> bool:
    return a.x <= b.right and b.x <= a.right and a.y <= b.bottom and b.y <= a.bottom


def _closed(vertices: list[Point]) -> list[Point]:
    return [*vertices, vertices[0]] if vertices else vertices


def is_point_in_polygon(point: Point, vertices: list[Point]) -> bool:
    """Even-odd ray cast test."""
    inside = False
    j = len(vertices) - 1
    for i, vi in enumerate(vertices):
        vj = vertices[j]
        if (vi.y > point.y) != (vj.y > point.y):
            crossing_x = (vj.x - vi.x) * (point.y - vi.y) / (vj.y - vi.y) + vi.x
            if point.x < crossing_x:
                inside = not inside
        j = i
    return inside


def _orientation(a: Point, b: Point, c: Point) -> float:
    return (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)


def _on_segment(a: Point, b: Point, p: Point) -> bool:
    return min(a.x, b.x) <= p.x <= max(a.x, b.x) and min(a.y, b.y) <= p.y <= max(a.y, b.y)


def segments_intersect(a1: Point, a2: Point, b1: Point, b2: Point) -> bool:
    """Whether two closed segments share at least one point."""
    d1 = _orientation(b1, b2, a1)
    d2 = _orientation(b1, b2, a2)
    d3 = _orientation(a1, a2, b1)
    d4 = _orientation(a1, a2, b2)
    if d1 * d2 < 0 and d3 * d4 < 0:
        return True
    return (
        (d1 == 0 and _on_segment(b1, b2, a1))
        or (d2 == 0 and _on_segment(b1, b2, a2))
        or (d3 == 0 and _on_segment(a1, a2, b1))
        or (d4 == 0 and _on_segment(a1, a2, b2))
    )


def ellipse_sample_count(rx: float, ry: float) -> int:
    """Outline samples for an ellipse, growing with its circumference."""
    # Ramanujan's approximation
    h = ((rx - ry) / (rx + ry)) ** 2 if rx + ry > 0 else 0.0
    circumference = math.pi * (rx + ry) * (1 + 3 * h / (10 + math.sqrt(4 - 3 * h)))
    return int(
        min(settings.ellipse_max_samples, max(settings.ellipse_min_samples, circumference / 4))
    )


def sample_ellipse(shape: EllipseShape) -> list[Point]:
    """Closed polyline around a (possibly rotated) ellipse; first point repeated last."""
    center = shape.center
    rx = abs(shape.width / 2)
    ry = abs(shape.height / 2)
    steps = ellipse_sample_count(rx, ry)
    points = [
        Point(
            x=center.x + rx * math.cos(2 * math.pi * i / steps),
            y=center.y + ry * math.sin(2 * math.pi * i / steps),
        )
        for i in range(steps)
    ]
    if shape.rotation:
        points = [rotate_point(p, center, shape.rotation) for p in points]
    return _closed(points)


def _rectangle_corners(shape: RectangleShape) -> list[Point]:
    x, y, w, h = shape.x, shape.y, shape.width, shape.height
    return [Point(x=x, y=y), Point(x=x + w, y=y), Point(x=x + w, y=y + h), Point(x=x, y=y + h)]


def _to_local(point: Point, shape: RectangleShape | EllipseShape | PolygonShape) -> Point:
    """Undo the shape's rotation so the query can be tested against the unrotated box."""
    if not shape.rotation:
        return point
    return rotate_point(point, shape.center, -shape.rotation)


def is_point_on_path(point: Point, path: Path, stroke_width: float, scale: float) -> bool:
    """Whether ``point`` lies within clicking distance of the path's stroke.

    The curve is replaced by a dense polyline (``samples_per_segment`` per
    segment) and each polyline segment is tested in turn.
    """
    threshold = hit_tolerance(stroke_width, scale)
    if not path.anchors:
        return False
    if len(path.anchors) == 1:
        return distance(point, path.anchors[0].point) < threshold

    polyline = sample_path(path.anchors, settings.samples_per_segment, path.closed)
    return _near_polyline(point, polyline, threshold)


def is_point_on_rectangle_stroke(point: Point, shape: RectangleShape, scale: float) -> bool:
    """Whether ``point`` is within tolerance of one of the rectangle's four edges."""
    threshold = hit_tolerance(shape.stroke_width, scale)
    return _near_polyline(_to_local(point, shape), _closed(_rectangle_corners(shape)), threshold)


def is_point_on_ellipse_stroke(point: Point, shape: EllipseShape, scale: float) -> bool:
    """Whether ``point`` is within tolerance of the ellipse outline."""
    threshold = hit_tolerance(shape.stroke_width, scale)
    rx = abs(shape.width / 2)
    ry = abs(shape.height / 2)
    if rx < threshold and ry < threshold:
        # Essentially a dot
        return distance(point, shape.center) < threshold
    return _near_polyline(point, sample_ellipse(shape), threshold)


def is_point_on_polygon_stroke(point: Point, shape: PolygonShape, scale: float) -> bool:
    """Whether ``point`` is within tolerance of one of the polygon's edges."""
    threshold = hit_tolerance(shape.stroke_width, scale)
    vertices = polygon_vertices(shape.x, shape.y, shape.width, shape.height, shape.sides)
    return _near_polyline(_to_local(point, shape), _closed(vertices), threshold)


def _is_point_in_fill(point: Point, shape: Shape) -> bool:
    match shape:
        case RectangleShape():
            local = _to_local(point, shape)
            box = bbox_of_points(_rectangle_corners(shape))
            return box.x <= local.x <= box.right and box.y <= local.y <= box.bottom
        case EllipseShape():
            rx = abs(shape.width / 2)
            ry = abs(shape.height / 2)
            if rx == 0 or ry == 0:
                return False
            local = _to_local(point, shape)
            dx = local.x - shape.center.x
            dy = local.y - shape.center.y
            return (dx * dx) / (rx * rx) + (dy * dy) / (ry * ry) <= 1
        case PolygonShape():
            vertices = polygon_vertices(shape.x, shape.y, shape.width, shape.height, shape.sides)
            return is_point_in_polygon(_to_local(point, shape), vertices)
        case Path(closed=True) if len(shape.anchors) > 2:
            return is_point_in_polygon(point, sample_path(shape.anchors, closed=True))
        case _:
            return False


def is_point_hitting_shape(
    point: Point, shape: Shape, scale: float, include_fill: bool = False
) -> bool:
    """Dispatch a hit test by shape kind.

    With ``include_fill`` a click inside a closed shape also counts, which is
    what selection wants for filled shapes. A group is hit when any of its
    children is.
    """
    if isinstance(shape, GroupShape):
        return any(
            is_point_hitting_shape(point, child, scale, include_fill) for child in shape.children
        )
    if include_fill and _is_point_in_fill(point, shape):
        return True

    match shape:
        case Path():
            return is_point_on_path(point, shape, shape.stroke_width, scale)
        case RectangleShape():
            return is_point_on_rectangle_stroke(point, shape, scale)
        case EllipseShape():
            return is_point_on_ellipse_stroke(point, shape, scale)
        case PolygonShape():
            return is_point_on_polygon_stroke(point, shape, scale)
        case _:
            logger.warning(f"Unknown shape kind for hit test: {type(shape).__name__}")
            return False


def shape_outline(shape: Shape) -> list[Point]:
    """Sampled outline of any shape, in drawing coordinates."""
    match shape:
        case Path():
            return sample_path(shape.anchors, settings.samples_per_segment, shape.closed)
        case EllipseShape():
            return sample_ellipse(shape)
        case RectangleShape():
            corners = _rectangle_corners(shape)
        case PolygonShape():
            corners = polygon_vertices(shape.x, shape.y, shape.width, shape.height, shape.sides)
        case _:
            return []
    if shape.rotation:
        corners = [rotate_point(p, shape.center, shape.rotation) for p in corners]
    return _closed(corners)


def shape_intersects_marquee(shape: Shape, marquee: BBox) -> bool:
    """Loose marquee selection: the shape's visual bbox overlaps the marquee."""
    box = shape_bbox(shape, include_stroke=True)
    return box is not None and box_intersects_box(box, marquee)


def shape_intersects_lasso(shape: Shape, lasso: list[Point]) -> bool:
    """Freeform lasso selection.

    A shape is selected when any outline sample lies inside the lasso polygon
    (shape inside the lasso) or any outline edge crosses a lasso edge (lasso
    cutting through the shape).
    """
    if len(lasso) < 3:
        return False
    if isinstance(shape, GroupShape):
        return any(shape_intersects_lasso(child, lasso) for child in shape.children)

    box = shape_bbox(shape, include_stroke=True)
    if box is None:
        return False
    if not _boxes_touch(box, bbox_of_points(lasso)):
        return False

    outline = shape_outline(shape)
    if any(is_point_in_polygon(p, lasso) for p in outline):
        return True

    lasso_edges = list(zip(lasso, _closed(lasso)[1:], strict=True))
    return any(
        segments_intersect(a, b, c, d)
        for a, b in zip(outline[:-1], outline[1:], strict=True)
        for c, d in lasso_edges
    )


def find_deepest_hit(
    point: Point, shapes: list[Shape], scale: float, include_fill: bool = False
) -> Shape | None:
    """Top-most shape under ``point``, drilling into groups.

    ``shapes`` is in paint order, so the last one is on top. A hit inside a
    group returns the innermost child that was hit, never the group itself.
    """
    for shape in reversed(shapes):
        if isinstance(shape, GroupShape):
            hit = find_deepest_hit(point, shape.children, scale, include_fill)
            if hit is not None:
                return hit
        elif is_point_hitting_shape(point, shape, scale, include_fill):
            return shape
    return None
