"""Move, rotate, scale and flip for every shape kind.

Each function is pure: it returns a new shape and never touches its input.
Paths transform every anchor point and handle. Primitives transform their
compact fields where that is exact, and convert to a path where it is not.
Groups apply the same transform to each child.
"""

import math
from collections.abc import Callable

from sketch_geometry.bezier import rotate_point
from sketch_geometry.convert import shape_to_path
from sketch_geometry.types import (
    Anchor,
    FlipAxis,
    GroupShape,
    Path,
    Point,
    PrimitiveShape,
    Shape,
)


def _map_anchors(path: Path, fn: Callable[[Point], Point]) -> Path:
    anchors = [
        Anchor(point=fn(a.point), handle_in=fn(a.handle_in), handle_out=fn(a.handle_out))
        for a in path.anchors
    ]
    return path.model_copy(update={"anchors": anchors})


def _map_children(group: GroupShape, fn: Callable[[Shape], Shape]) -> GroupShape:
    return group.model_copy(update={"children": [fn(child) for child in group.children]})


def move_shape(shape: Shape, dx: float, dy: float) -> Shape:
    """Translate a shape by (dx, dy)."""
    if isinstance(shape, GroupShape):
        return _map_children(shape, lambda child: move_shape(child, dx, dy))
    if isinstance(shape, Path):
        anchors = [a.translated(dx, dy) for a in shape.anchors]
        return shape.model_copy(update={"anchors": anchors})
    return shape.model_copy(update={"x": shape.x + dx, "y": shape.y + dy})


def rotate_shape(shape: Shape, center: Point, angle: float) -> Shape:
    """Rotate a shape around ``center`` by ``angle`` radians.

    Primitives stay primitives: their own center orbits ``center`` and the
    angle accumulates into their ``rotation`` field.
    """
    if isinstance(shape, GroupShape):
        return _map_children(shape, lambda child: rotate_shape(child, center, angle))
    if isinstance(shape, Path):
        return _map_anchors(shape, lambda p: rotate_point(p, center, angle))

    new_center = rotate_point(shape.center, center, angle)
    return shape.model_copy(
        update={
            "x": new_center.x - shape.width / 2,
            "y": new_center.y - shape.height / 2,
            "rotation": shape.rotation + angle,
        }
    )


def scale_shape(
    shape: Shape,
    pivot: Point,
    scale_x: float,
    scale_y: float,
    scale_stroke: bool = False,
) -> Shape:
    """Scale a shape away from ``pivot``.

    Negative factors mirror. A primitive may come back with a negative width
    or height; callers that need a display-ready box run
    :func:`normalize_primitive` on the result.

    A rotated primitive keeps its compact form under a uniform scale or a
    mirror, where a mirror also negates its rotation. Any other stretch of a
    rotated primitive skews it off its own axes, so it comes back as a path.
    """
    if isinstance(shape, GroupShape):
        return _map_children(
            shape, lambda child: scale_shape(child, pivot, scale_x, scale_y, scale_stroke)
        )

    def scale_point(p: Point) -> Point:
        return Point(x=pivot.x + (p.x - pivot.x) * scale_x, y=pivot.y + (p.y - pivot.y) * scale_y)

    if isinstance(shape, Path):
        result = _map_anchors(shape, scale_point)
    elif shape.rotation and abs(scale_x) != abs(scale_y):
        result = _map_anchors(shape_to_path(shape), scale_point)
    else:
        origin = scale_point(Point(x=shape.x, y=shape.y))
        update = {
            "x": origin.x,
            "y": origin.y,
            "width": shape.width * scale_x,
            "height": shape.height * scale_y,
        }
        if shape.rotation and scale_x * scale_y < 0:
            update["rotation"] = -shape.rotation
        result = shape.model_copy(update=update)

    if scale_stroke:
        factor = math.sqrt(abs(scale_x * scale_y))
        result = result.model_copy(update={"stroke_width": shape.stroke_width * factor})
    return result


def normalize_primitive(shape: PrimitiveShape) -> PrimitiveShape:
    """Turn negative width/height into a shifted origin and positive size."""
    x, y, width, height = shape.x, shape.y, shape.width, shape.height
    if width < 0:
        x += width
        width = -width
    if height < 0:
        y += height
        height = -height
    if (x, y, width, height) == (shape.x, shape.y, shape.width, shape.height):
        return shape
    return shape.model_copy(update={"x": x, "y": y, "width": width, "height": height})


def flip_point(point: Point, center: Point, axis: FlipAxis) -> Point:
    """Mirror a point across the axis line through ``center``."""
    if axis == FlipAxis.HORIZONTAL:
        return Point(x=2 * center.x - point.x, y=point.y)
    return Point(x=point.x, y=2 * center.y - point.y)


def flip_path(path: Path, center: Point, axis: FlipAxis) -> Path:
    """Mirror a path while keeping its curve exactly.

    A reflection reverses the sense of travel, so each anchor's handles
    swap roles and the anchor order is reversed. A closed path keeps its
    first anchor in front and reverses the rest, which also keeps its
    winding direction.
    """
    mirrored = [
        Anchor(
            point=flip_point(a.point, center, axis),
            handle_in=flip_point(a.handle_out, center, axis),
            handle_out=flip_point(a.handle_in, center, axis),
        )
        for a in path.anchors
    ]
    if path.closed:
        anchors = mirrored[:1] + mirrored[:0:-1]
    else:
        anchors = mirrored[::-1]
    return path.model_copy(update={"anchors": anchors})


def flip_shape(shape: Shape, center: Point, axis: FlipAxis | str) -> Shape:
    """Mirror any shape across the axis line through ``center``.

    Primitives cannot represent a mirrored state, so they are first converted
    to a closed path. The conversion is one-way. Groups stay groups and flip
    each child.
    """
    axis = FlipAxis(axis)
    if isinstance(shape, GroupShape):
        return _map_children(shape, lambda child: flip_shape(child, center, axis))
    return flip_path(shape_to_path(shape), center, axis)
