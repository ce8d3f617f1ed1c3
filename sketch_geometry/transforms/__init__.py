"""Pure transform engine.

- affine: move, rotate, scale and flip
- resize: handle-driven resizing
- editing: anchor edits and drag-session application
- arrange: aligning and distributing a selection
"""

from sketch_geometry.convert import (
    ellipse_to_path,
    polygon_to_path,
    polygon_vertices,
    rectangle_to_path,
    shape_to_path,
)
from sketch_geometry.transforms.affine import (
    flip_path,
    flip_point,
    flip_shape,
    move_shape,
    normalize_primitive,
    rotate_shape,
    scale_shape,
)
from sketch_geometry.transforms.arrange import align_shapes, distribute_shapes
from sketch_geometry.transforms.editing import (
    apply_drag,
    insert_anchor,
    remove_anchor,
    update_path_anchors,
)
from sketch_geometry.transforms.resize import resize_shape, rotate_resize_handle

__all__ = [
    # Affine
    "flip_path",
    "flip_point",
    "flip_shape",
    "move_shape",
    "normalize_primitive",
    "rotate_shape",
    "scale_shape",
    # Resize
    "resize_shape",
    "rotate_resize_handle",
    # Editing
    "apply_drag",
    "insert_anchor",
    "remove_anchor",
    "update_path_anchors",
    # Arrange
    "align_shapes",
    "distribute_shapes",
    # Conversion
    "ellipse_to_path",
    "polygon_to_path",
    "polygon_vertices",
    "rectangle_to_path",
    "shape_to_path",
]
