"""Type definitions for the geometry engine.

This package contains all value types organized into focused modules:
- geometry: Core geometry types (Point, BBox, enums)
- shapes: Anchors, paths, primitive shapes and groups
- drag: Drag-session descriptors consumed by the transform engine
"""

from sketch_geometry.types.drag import AnchorDrag, DragState, MoveDrag, ResizeDrag
from sketch_geometry.types.geometry import (
    Alignment,
    Axis,
    BBox,
    DistributeMode,
    FlipAxis,
    GeometryError,
    Point,
    ResizeHandle,
    SvgPathError,
)
from sketch_geometry.types.shapes import (
    Anchor,
    EllipseShape,
    GroupShape,
    Path,
    PolygonShape,
    PrimitiveShape,
    RectangleShape,
    Shape,
    parse_shape,
)

__all__ = [
    # Geometry
    "Alignment",
    "Axis",
    "BBox",
    "DistributeMode",
    "FlipAxis",
    "GeometryError",
    "Point",
    "ResizeHandle",
    "SvgPathError",
    # Shapes
    "Anchor",
    "EllipseShape",
    "GroupShape",
    "Path",
    "PolygonShape",
    "PrimitiveShape",
    "RectangleShape",
    "Shape",
    "parse_shape",
    # Drag
    "AnchorDrag",
    "DragState",
    "MoveDrag",
    "ResizeDrag",
]
