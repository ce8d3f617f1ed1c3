"""Drag-session descriptors passed in by the interaction layer.

The engine never stores these. The caller builds one when a drag starts and
hands it to the transform functions on every pointer move.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from sketch_geometry.types.geometry import Point, ResizeHandle
from sketch_geometry.types.shapes import Shape


class AnchorDrag(BaseModel):
    """Dragging one anchor or one of its handles."""

    model_config = ConfigDict(frozen=True)

    type: Literal["anchor", "handle_in", "handle_out"]
    anchor_index: int


class MoveDrag(BaseModel):
    """Moving a set of shapes, relative to where the pointer went down."""

    model_config = ConfigDict(frozen=True)

    type: Literal["move"] = "move"
    original_shapes: list[Shape]
    initial_pointer: Point


class ResizeDrag(BaseModel):
    """Resizing a single shape by one of its handles."""

    model_config = ConfigDict(frozen=True)

    type: Literal["resize"] = "resize"
    handle: ResizeHandle
    original_shape: Shape
    initial_pointer: Point


DragState = Annotated[AnchorDrag | MoveDrag | ResizeDrag, Field(discriminator="type")]
