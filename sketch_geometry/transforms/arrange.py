"""Aligning and distributing a selection of shapes.

Both operations measure each shape's visual box (stroke included) and only
ever translate. Shapes come back in the order they were passed in; a shape
with nothing to measure, such as an empty path, is left where it is.
"""

from sketch_geometry.bbox import shape_bbox, union_bbox
from sketch_geometry.transforms.affine import move_shape
from sketch_geometry.types import Alignment, Axis, BBox, DistributeMode, Shape


def _alignment_offset(selection: BBox, box: BBox, alignment: Alignment) -> tuple[float, float]:
    match alignment:
        case Alignment.LEFT:
            return selection.x - box.x, 0.0
        case Alignment.H_CENTER:
            return selection.center.x - box.center.x, 0.0
        case Alignment.RIGHT:
            return selection.right - box.right, 0.0
        case Alignment.TOP:
            return 0.0, selection.y - box.y
        case Alignment.V_CENTER:
            return 0.0, selection.center.y - box.center.y
        case Alignment.BOTTOM:
            return 0.0, selection.bottom - box.bottom
    raise ValueError(f"Unknown alignment: {alignment}")


def align_shapes(shapes: list[Shape], alignment: Alignment | str) -> list[Shape]:
    """Line shapes up on one edge or center line of their combined box.

    Fewer than two shapes, or nothing measurable, return the input list.
    """
    alignment = Alignment(alignment)
    if len(shapes) < 2:
        return shapes
    selection = union_bbox(shapes, include_stroke=True)
    if selection is None:
        return shapes

    aligned: list[Shape] = []
    for shape in shapes:
        box = shape_bbox(shape)
        if box is None:
            aligned.append(shape)
            continue
        dx, dy = _alignment_offset(selection, box, alignment)
        aligned.append(move_shape(shape, dx, dy))
    return aligned


def distribute_shapes(
    shapes: list[Shape],
    axis: Axis | str,
    spacing: float | None = None,
    mode: DistributeMode | str = DistributeMode.EDGES,
) -> list[Shape]:
    """Space shapes out along ``axis``.

    Shapes are ordered by their leading edge and the first one stays put.
    With a non-negative ``spacing`` every following shape is placed that far
    from its predecessor, gap to gap in ``edges`` mode or center to center in
    ``centers`` mode. Without one, the first and last shapes stay put and the
    ones between get equal gaps (or equally spaced centers), which needs at
    least three shapes.

    Args:
        shapes: The selection, in any order
        axis: Direction to distribute along
        spacing: Fixed distance between neighbours; None (or negative) spaces
            evenly between the outermost shapes
        mode: Measure between box edges or between box centers

    Returns:
        New list in the input order. Fewer than two measurable shapes return
        the input list.
    """
    axis = Axis(axis)
    mode = DistributeMode(mode)
    horizontal = axis is Axis.HORIZONTAL

    def start(box: BBox) -> float:
        return box.x if horizontal else box.y

    def size(box: BBox) -> float:
        return box.width if horizontal else box.height

    def middle(box: BBox) -> float:
        return start(box) + size(box) / 2

    measured: list[tuple[int, BBox]] = []
    for index, shape in enumerate(shapes):
        box = shape_bbox(shape)
        if box is not None:
            measured.append((index, box))
    if len(measured) < 2:
        return shapes
    measured.sort(key=lambda item: start(item[1]))

    first = measured[0][1]
    offsets: dict[int, float] = {}
    if spacing is not None and spacing >= 0:
        if mode is DistributeMode.CENTERS:
            cursor = middle(first)
            for index, box in measured[1:]:
                cursor += spacing
                offsets[index] = cursor - middle(box)
        else:
            cursor = start(first) + size(first)
            for index, box in measured[1:]:
                offsets[index] = cursor + spacing - start(box)
                cursor += spacing + size(box)
    else:
        if len(measured) < 3:
            return shapes
        last = measured[-1][1]
        inner = measured[1:-1]
        if mode is DistributeMode.CENTERS:
            gap = (middle(last) - middle(first)) / (len(measured) - 1)
            for step, (index, box) in enumerate(inner, start=1):
                offsets[index] = middle(first) + gap * step - middle(box)
        else:
            free = start(last) - (start(first) + size(first)) - sum(size(b) for _, b in inner)
            gap = free / (len(inner) + 1)
            cursor = start(first) + size(first) + gap
            for index, box in inner:
                offsets[index] = cursor - start(box)
                cursor += size(box) + gap

    distributed = list(shapes)
    for index, offset in offsets.items():
        dx, dy = (offset, 0.0) if horizontal else (0.0, offset)
        distributed[index] = move_shape(shapes[index], dx, dy)
    return distributed
