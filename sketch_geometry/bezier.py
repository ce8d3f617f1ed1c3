"""Pure functions for cubic bezier math over anchors.

This module contains stateless mathematical functions for evaluating,
sampling and subdividing cubic bezier segments. No side effects or I/O.
"""

import math
from collections.abc import Iterator
from typing import NamedTuple

from sketch_geometry.config import settings
from sketch_geometry.types import Anchor, Point


class SplitResult(NamedTuple):
    """Control points produced by a de Casteljau split at t."""

    new_point: Point
    new_handle_in: Point
    new_handle_out: Point
    updated_start_handle_out: Point
    updated_end_handle_in: Point


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between two values."""
    return a + (b - a) * t


def lerp_point(p1: Point, p2: Point, t: float) -> Point:
    """Linearly interpolate between two points."""
    return Point(x=lerp(p1.x, p2.x, t), y=lerp(p1.y, p2.y, t))


def distance(p1: Point, p2: Point) -> float:
    """Calculate Euclidean distance between two points."""
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def rotate_point(point: Point, center: Point, angle: float) -> Point:
    """Rotate ``point`` around ``center`` by ``angle`` radians."""
    cos = math.cos(angle)
    sin = math.sin(angle)
    dx = point.x - center.x
    dy = point.y - center.y
    return Point(x=cos * dx - sin * dy + center.x, y=sin * dx + cos * dy + center.y)


def evaluate(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate cubic bezier at t. Callers clamp t to [0, 1]."""
    u = 1 - t
    uu = u * u
    tt = t * t
    return Point(
        x=uu * u * p0.x + 3 * uu * t * p1.x + 3 * u * tt * p2.x + tt * t * p3.x,
        y=uu * u * p0.y + 3 * uu * t * p1.y + 3 * u * tt * p2.y + tt * t * p3.y,
    )


def tangent(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """First derivative of the cubic at t.

    The result is the zero vector at a cusp (all four control points equal,
    or both handles collapsed onto a zero-length chord). Callers must not
    normalize it without checking its length.
    """
    u = 1 - t
    return Point(
        x=3 * u * u * (p1.x - p0.x) + 6 * u * t * (p2.x - p1.x) + 3 * t * t * (p3.x - p2.x),
        y=3 * u * u * (p1.y - p0.y) + 6 * u * t * (p2.y - p1.y) + 3 * t * t * (p3.y - p2.y),
    )


def sample_segment(p0: Point, p1: Point, p2: Point, p3: Point, steps: int) -> list[Point]:
    """Sample ``steps + 1`` points uniformly in t, both endpoints included."""
    assert steps >= 1, "steps must be positive"
    return [evaluate(p0, p1, p2, p3, i / steps) for i in range(steps + 1)]


def segment_controls(start: Anchor, end: Anchor) -> tuple[Point, Point, Point, Point]:
    """The four control points of the segment running from ``start`` to ``end``."""
    return start.point, start.handle_out, end.handle_in, end.point


def path_segments(anchors: list[Anchor], closed: bool = False) -> Iterator[tuple[Anchor, Anchor]]:
    """Yield consecutive (start, end) anchor pairs, plus the closing pair if closed."""
    for start, end in zip(anchors[:-1], anchors[1:], strict=True):
        yield start, end
    if closed and len(anchors) > 1:
        yield anchors[-1], anchors[0]


def sample_path(
    anchors: list[Anchor], steps_per_segment: int | None = None, closed: bool = False
) -> list[Point]:
    """Sample a whole anchored path into a polyline.

    Segment boundaries are shared, so an open path with ``n`` anchors yields
    ``1 + (n - 1) * steps`` points.
    """
    if len(anchors) < 2:
        return [a.point for a in anchors]

    steps = steps_per_segment if steps_per_segment is not None else settings.samples_per_segment
    assert steps >= 1, "steps_per_segment must be positive"

    points: list[Point] = [anchors[0].point]
    for start, end in path_segments(anchors, closed):
        points.extend(sample_segment(*segment_controls(start, end), steps)[1:])
    return points


def split(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> SplitResult:
    """Split a cubic at t with de Casteljau's construction.

    The two halves together trace exactly the original curve. Inserting the
    new anchor therefore also requires overwriting the neighbours' handles
    with ``updated_start_handle_out`` and ``updated_end_handle_in``.
    """
    p01 = lerp_point(p0, p1, t)
    p12 = lerp_point(p1, p2, t)
    p23 = lerp_point(p2, p3, t)
    p012 = lerp_point(p01, p12, t)
    p123 = lerp_point(p12, p23, t)
    return SplitResult(
        new_point=lerp_point(p012, p123, t),
        new_handle_in=p012,
        new_handle_out=p123,
        updated_start_handle_out=p01,
        updated_end_handle_in=p23,
    )


def insert_anchor_on_curve(
    start: Anchor, end: Anchor, t: float, handle_factor: float | None = None
) -> Anchor:
    """Create an anchor on the segment at t without touching its neighbours.

    Handles follow the curve tangent with a length of ``handle_factor`` times
    the segment chord. Unlike :func:`split` this alters the curve slightly
    around the new anchor. A zero tangent yields a corner.
    """
    factor = handle_factor if handle_factor is not None else settings.insert_handle_factor
    controls = segment_controls(start, end)
    new_point = evaluate(*controls, t)
    direction = tangent(*controls, t)
    length = direction.length()
    if length == 0:
        return Anchor.corner(new_point)

    offset = direction * (distance(start.point, end.point) * factor / length)
    return Anchor(point=new_point, handle_in=new_point - offset, handle_out=new_point + offset)
