"""Handle-driven resizing."""

from sketch_geometry.bbox import shape_bbox
from sketch_geometry.bezier import rotate_point
from sketch_geometry.transforms.affine import normalize_primitive, scale_shape
from sketch_geometry.types import (
    BBox,
    GroupShape,
    Path,
    Point,
    PrimitiveShape,
    ResizeHandle,
    Shape,
)

_HANDLE_VECTORS: dict[ResizeHandle, tuple[int, int]] = {
    ResizeHandle.TOP_LEFT: (-1, -1),
    ResizeHandle.TOP: (0, -1),
    ResizeHandle.TOP_RIGHT: (1, -1),
    ResizeHandle.RIGHT: (1, 0),
    ResizeHandle.BOTTOM_RIGHT: (1, 1),
    ResizeHandle.BOTTOM: (0, 1),
    ResizeHandle.BOTTOM_LEFT: (-1, 1),
    ResizeHandle.LEFT: (-1, 0),
}


def rotate_resize_handle(handle: ResizeHandle | str, angle: float) -> ResizeHandle:
    """Which on-screen handle position ``handle`` ends up at on a shape rotated by ``angle``."""
    vx, vy = _HANDLE_VECTORS[ResizeHandle(handle)]
    rotated = rotate_point(Point(x=vx, y=vy), Point(x=0, y=0), angle)
    sx = 0 if abs(rotated.x) < 0.5 else (1 if rotated.x > 0 else -1)
    sy = 0 if abs(rotated.y) < 0.5 else (1 if rotated.y > 0 else -1)
    for candidate, vector in _HANDLE_VECTORS.items():
        if vector == (sx, sy):
            return candidate
    return ResizeHandle.TOP_LEFT


def _fixed_corner(x: float, y: float, width: float, height: float, handle: ResizeHandle) -> Point:
    """The corner that stays put while ``handle`` is dragged."""
    return Point(
        x=x + width if "left" in handle.value else x,
        y=y + height if "top" in handle.value else y,
    )


def _resize_box(
    box: tuple[float, float, float, float],
    handle: ResizeHandle,
    dx: float,
    dy: float,
    keep_aspect_ratio: bool,
) -> tuple[float, float, float, float]:
    """Apply a handle drag to an unrotated box. Width and height may go negative."""
    x, y, width, height = box
    ratio = width / height if width != 0 and height != 0 else None

    if "right" in handle.value:
        width += dx
    if "bottom" in handle.value:
        height += dy
    if "left" in handle.value:
        width -= dx
        x += dx
    if "top" in handle.value:
        height -= dy
        y += dy

    if keep_aspect_ratio and ratio is not None:
        if handle.affects_x:
            new_height = width / ratio
            if "top" in handle.value:
                y += height - new_height
            height = new_height
        else:
            new_width = height * ratio
            if "left" in handle.value:
                x += width - new_width
            width = new_width

    return x, y, width, height


def _resize_primitive(
    shape: PrimitiveShape,
    handle: ResizeHandle,
    current_pointer: Point,
    initial_pointer: Point,
    keep_aspect_ratio: bool,
) -> PrimitiveShape:
    center = shape.center
    local_current = rotate_point(current_pointer, center, -shape.rotation)
    local_initial = rotate_point(initial_pointer, center, -shape.rotation)
    old_box = (shape.x, shape.y, shape.width, shape.height)
    x, y, width, height = _resize_box(
        old_box,
        handle,
        local_current.x - local_initial.x,
        local_current.y - local_initial.y,
        keep_aspect_ratio,
    )

    if shape.rotation:
        # Rotation happens about the box center, which just moved. Shift the
        # box so the fixed corner stays where it was on screen.
        fixed = _fixed_corner(*old_box, handle)
        before = rotate_point(fixed, center, shape.rotation)
        after = rotate_point(fixed, Point(x=x + width / 2, y=y + height / 2), shape.rotation)
        x += before.x - after.x
        y += before.y - after.y

    resized = shape.model_copy(update={"x": x, "y": y, "width": width, "height": height})
    return normalize_primitive(resized)


def _normalized(shape: Shape) -> Shape:
    """Normalize every primitive inside a scaled shape."""
    match shape:
        case GroupShape():
            return shape.model_copy(update={"children": [_normalized(c) for c in shape.children]})
        case Path():
            return shape
    return normalize_primitive(shape)


def _resize_by_scaling(
    shape: Path | GroupShape,
    handle: ResizeHandle,
    current_pointer: Point,
    initial_pointer: Point,
    keep_aspect_ratio: bool,
) -> Shape:
    box: BBox | None = shape_bbox(shape, include_stroke=False)
    if box is None or (isinstance(shape, Path) and len(shape.anchors) < 2):
        return shape

    _, _, width, height = _resize_box(
        (box.x, box.y, box.width, box.height),
        handle,
        current_pointer.x - initial_pointer.x,
        current_pointer.y - initial_pointer.y,
        keep_aspect_ratio,
    )
    scale_x = width / box.width if box.width else 1.0
    scale_y = height / box.height if box.height else 1.0
    pivot = _fixed_corner(box.x, box.y, box.width, box.height, handle)
    return _normalized(scale_shape(shape, pivot, scale_x, scale_y))


def resize_shape(
    shape: Shape,
    handle: ResizeHandle | str,
    current_pointer: Point,
    initial_pointer: Point,
    keep_aspect_ratio: bool = False,
) -> Shape:
    """Resize a shape by dragging one of its eight handles.

    Corner handles change both dimensions with the opposite corner fixed;
    edge handles change only the perpendicular dimension. With
    ``keep_aspect_ratio`` the other dimension follows the original ratio
    while the non-dragged edge stays put. Dragging past the opposite edge
    flips the origin instead of producing a negative size.

    Args:
        shape: Shape as it was when the drag started
        handle: Compass position of the dragged handle
        current_pointer: Pointer position now, in drawing coordinates
        initial_pointer: Pointer position when the drag started
        keep_aspect_ratio: Lock the width/height ratio

    Returns:
        The resized shape. Paths and groups are scaled about their bounding box.
    """
    handle = ResizeHandle(handle)
    if isinstance(shape, Path | GroupShape):
        return _resize_by_scaling(
            shape, handle, current_pointer, initial_pointer, keep_aspect_ratio
        )
    return _resize_primitive(shape, handle, current_pointer, initial_pointer, keep_aspect_ratio)
