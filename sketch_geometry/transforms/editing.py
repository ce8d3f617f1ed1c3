"""Anchor editing and drag-session application.

The interaction layer owns the drag session. It passes a ``DragState`` plus
the current pointer on every move, and these functions return new shapes.
Stale indices (the selection outlived the anchor it pointed at) are no-ops.
"""

import logging

from sketch_geometry.bezier import insert_anchor_on_curve, segment_controls, split
from sketch_geometry.transforms.affine import move_shape
from sketch_geometry.transforms.resize import resize_shape
from sketch_geometry.types import (
    Anchor,
    AnchorDrag,
    DragState,
    MoveDrag,
    Path,
    Point,
    ResizeDrag,
    Shape,
)

logger = logging.getLogger(__name__)


def _mirror(point: Point, around: Point) -> Point:
    return around + (around - point)


def update_path_anchors(
    shape: Shape, drag: AnchorDrag, pointer: Point, break_symmetry: bool = False
) -> Shape:
    """Move an anchor or one of its handles to ``pointer``.

    Moving the anchor carries both handles along. Moving a handle mirrors the
    opposite handle through the anchor unless ``break_symmetry`` is set.
    """
    if not isinstance(shape, Path):
        return shape
    index = drag.anchor_index
    if not 0 <= index < len(shape.anchors):
        logger.debug(f"Ignoring stale anchor index {index} on path of {len(shape.anchors)}")
        return shape

    anchor = shape.anchors[index]
    match drag.type:
        case "anchor":
            updated = anchor.translated(pointer.x - anchor.point.x, pointer.y - anchor.point.y)
        case "handle_out":
            handle_in = anchor.handle_in if break_symmetry else _mirror(pointer, anchor.point)
            updated = Anchor(point=anchor.point, handle_in=handle_in, handle_out=pointer)
        case "handle_in":
            handle_out = anchor.handle_out if break_symmetry else _mirror(pointer, anchor.point)
            updated = Anchor(point=anchor.point, handle_in=pointer, handle_out=handle_out)

    anchors = list(shape.anchors)
    anchors[index] = updated
    return shape.model_copy(update={"anchors": anchors})


def insert_anchor(path: Path, segment_index: int, t: float, preserve_shape: bool = True) -> Path:
    """Insert a new anchor at parameter ``t`` of segment ``segment_index``.

    With ``preserve_shape`` the segment is split exactly and the neighbours'
    handles are rewritten so the visible curve does not change. Otherwise the
    new anchor gets tangent handles and the neighbours are left alone.
    """
    if not 0 <= segment_index < path.segment_count:
        logger.debug(f"Ignoring insert on missing segment {segment_index}")
        return path
    assert 0.0 <= t <= 1.0, "t must be clamped to [0, 1]"

    anchors = list(path.anchors)
    start_index = segment_index
    end_index = (segment_index + 1) % len(anchors)
    start = anchors[start_index]
    end = anchors[end_index]

    if preserve_shape:
        result = split(*segment_controls(start, end), t)
        new_anchor = Anchor(
            point=result.new_point,
            handle_in=result.new_handle_in,
            handle_out=result.new_handle_out,
        )
        anchors[start_index] = start.model_copy(
            update={"handle_out": result.updated_start_handle_out}
        )
        anchors[end_index] = anchors[end_index].model_copy(
            update={"handle_in": result.updated_end_handle_in}
        )
    else:
        new_anchor = insert_anchor_on_curve(start, end, t)

    anchors.insert(segment_index + 1, new_anchor)
    return path.model_copy(update={"anchors": anchors})


def remove_anchor(path: Path, index: int) -> Path:
    """Delete one anchor; the neighbours join directly with their own handles."""
    if not 0 <= index < len(path.anchors):
        logger.debug(f"Ignoring removal of missing anchor {index}")
        return path
    anchors = path.anchors[:index] + path.anchors[index + 1 :]
    return path.model_copy(update={"anchors": anchors})


def apply_drag(
    drag: DragState,
    pointer: Point,
    *,
    target: Shape | None = None,
    keep_aspect_ratio: bool = False,
    break_symmetry: bool = False,
) -> list[Shape]:
    """Apply one frame of a drag session.

    Move and resize sessions carry their original shapes, so every frame is
    computed from the drag start rather than accumulated. Anchor drags edit
    ``target``, the current version of the path being edited.

    Raises:
        ValueError: For an anchor drag without a target shape
    """
    match drag:
        case MoveDrag():
            dx = pointer.x - drag.initial_pointer.x
            dy = pointer.y - drag.initial_pointer.y
            return [move_shape(shape, dx, dy) for shape in drag.original_shapes]
        case ResizeDrag():
            return [
                resize_shape(
                    drag.original_shape,
                    drag.handle,
                    pointer,
                    drag.initial_pointer,
                    keep_aspect_ratio,
                )
            ]
        case AnchorDrag():
            if target is None:
                raise ValueError("Anchor drags need the target path")
            return [update_path_anchors(target, drag, pointer, break_symmetry)]
    raise TypeError(f"Unsupported drag state: {type(drag).__name__}")
