"""Stroke simplification and curve fitting.

Freehand input arrives as a dense polyline. It is reduced with
Ramer-Douglas-Peucker and then turned into smooth anchors whose handles
follow a finite-difference tangent estimate. Already-anchored paths can be
simplified in place with the same algorithm.
"""

import logging
import math
from collections.abc import Callable

from sketch_geometry.bezier import distance
from sketch_geometry.config import settings
from sketch_geometry.types import Anchor, Path, Point

logger = logging.getLogger(__name__)

# Error of item ``index`` against the chord from item ``start`` to item ``end``
SpanError = Callable[[int, int, int], float]


def perpendicular_distance(point: Point, line_start: Point, line_end: Point) -> float:
    """Distance from ``point`` to the infinite line through the two others.

    A degenerate line (both ends equal) falls back to the distance to its start.
    """
    dx = line_end.x - line_start.x
    dy = line_end.y - line_start.y
    if dx == 0 and dy == 0:
        return distance(point, line_start)
    cross = line_end.x * line_start.y - line_end.y * line_start.x
    numerator = abs(dy * point.x - dx * point.y + cross)
    return numerator / math.hypot(dx, dy)


def _rdp_keep(count: int, error: SpanError, epsilon: float) -> list[bool]:
    """Run Ramer-Douglas-Peucker over ``count`` items and flag the survivors.

    Uses an explicit stack so long strokes cannot hit the recursion limit.
    The first maximum wins ties, which keeps the result deterministic.
    """
    keep = [False] * count
    keep[0] = keep[-1] = True
    stack = [(0, count - 1)]
    while stack:
        start, end = stack.pop()
        max_error = 0.0
        index = 0
        for i in range(start + 1, end):
            d = error(i, start, end)
            if d > max_error:
                index = i
                max_error = d
        if max_error > epsilon:
            keep[index] = True
            stack.append((index, end))
            stack.append((start, index))
    return keep


def _cap_stroke(points: list[Point]) -> list[Point]:
    limit = settings.max_stroke_points
    if len(points) <= limit:
        return points
    stride = math.ceil(len(points) / limit)
    logger.warning(f"Stroke of {len(points)} points exceeds {limit}; decimating by {stride}")
    decimated = points[::stride]
    if decimated[-1] != points[-1]:
        decimated.append(points[-1])
    return decimated


def simplify_points(points: list[Point], epsilon: float) -> list[Point]:
    """Reduce a polyline with Ramer-Douglas-Peucker.

    Keeps only points farther than ``epsilon`` from the chord of the span
    they belong to. Inputs of two points or fewer are returned as-is.
    """
    if len(points) <= 2:
        return list(points)

    points = _cap_stroke(points)

    def error(i: int, start: int, end: int) -> float:
        return perpendicular_distance(points[i], points[start], points[end])

    keep = _rdp_keep(len(points), error, epsilon)
    return [p for p, kept in zip(points, keep, strict=True) if kept]


def dedupe_close_points(points: list[Point], min_distance: float = 1.5) -> list[Point]:
    """Drop points closer than ``min_distance`` to the last kept point.

    The first and last points are always kept.
    """
    if len(points) <= 2:
        return list(points)

    result = [points[0]]
    for point in points[1:-1]:
        if distance(point, result[-1]) >= min_distance:
            result.append(point)
    result.append(points[-1])
    return result


def fit_anchors(
    points: list[Point],
    scale_factor: float | None = None,
    max_handle_ratio: float | None = None,
) -> list[Anchor]:
    """Fit smooth anchors through an (already simplified) point list.

    Each interior point gets handles along the direction from its previous to
    its next neighbour, each handle ``scale_factor`` times the distance to the
    neighbour on its side. Endpoints use a one-sided tangent and get no outer
    handle. A zero tangent (coincident neighbours) yields a corner.

    ``max_handle_ratio`` optionally caps every handle at that multiple of the
    shorter adjacent chord, which tames overshoot where a very long segment
    meets a very short one.
    """
    scale = scale_factor if scale_factor is not None else settings.fit_handle_scale
    ratio = max_handle_ratio if max_handle_ratio is not None else settings.fit_max_handle_ratio

    if len(points) < 2:
        return [Anchor.corner(p) for p in points]

    anchors: list[Anchor] = []
    last = len(points) - 1
    for i, p in enumerate(points):
        prev = points[i - 1] if i > 0 else p
        nxt = points[i + 1] if i < last else p
        direction = nxt - prev
        length = direction.length()
        if length == 0:
            anchors.append(Anchor.corner(p))
            continue

        unit = direction * (1 / length)
        d_prev = distance(p, prev)
        d_next = distance(nxt, p)
        out_length = d_next * scale
        in_length = d_prev * scale
        if ratio is not None:
            shorter = min(d for d in (d_prev, d_next) if d > 0)
            out_length = min(out_length, shorter * ratio)
            in_length = min(in_length, shorter * ratio)

        anchors.append(
            Anchor(
                point=p,
                handle_in=p - unit * in_length if i > 0 else p,
                handle_out=p + unit * out_length if i < last else p,
            )
        )
    return anchors


def brush_to_path(
    raw_points: list[Point], stroke_width: float, epsilon_factor: float | None = None
) -> Path:
    """Turn a freehand stroke into a compact open bezier path.

    Thicker strokes tolerate more deviation, so they simplify to fewer anchors.
    """
    factor = epsilon_factor if epsilon_factor is not None else settings.brush_epsilon_factor
    simplified = simplify_points(raw_points, stroke_width * factor)
    anchors = fit_anchors(simplified)
    logger.debug(f"Fitted {len(raw_points)} stroke points to {len(anchors)} anchors")
    return Path(anchors=anchors, closed=False, stroke_width=stroke_width)


def _anchor_error(anchor: Anchor, chord_start: Point, chord_end: Point) -> float:
    return max(
        perpendicular_distance(anchor.point, chord_start, chord_end),
        perpendicular_distance(anchor.handle_in, chord_start, chord_end),
        perpendicular_distance(anchor.handle_out, chord_start, chord_end),
    )


def _scaled_handle(point: Point, handle: Point, old_chord: float, new_chord: float) -> Point:
    if old_chord == 0:
        return handle
    return point + (handle - point) * (new_chord / old_chord)


def simplify_path(path: Path, tolerance: float) -> Path:
    """Remove anchors that barely shape the path.

    Interior anchors are scored by how far their point and both handles stray
    from the chord of the span being replaced. Surviving anchors keep their
    position and handle direction; handles that now reach across a longer
    segment are stretched by the chord ratio.

    Returns the original path when nothing can be removed or when the result
    would fall below two anchors (three for a closed path).
    """
    min_anchors = 3 if path.closed else 2
    if tolerance <= 0 or len(path.anchors) <= min_anchors:
        return path

    # A closed loop is simplified as an open run returning to its first anchor.
    seq = [*path.anchors, path.anchors[0]] if path.closed else list(path.anchors)

    def error(i: int, start: int, end: int) -> float:
        return _anchor_error(seq[i], seq[start].point, seq[end].point)

    keep = _rdp_keep(len(seq), error, tolerance)
    kept = [i for i, flag in enumerate(keep) if flag]
    survivors = len(kept) - 1 if path.closed else len(kept)
    if survivors < min_anchors:
        logger.debug(f"Simplification would leave {survivors} anchors; keeping original path")
        return path
    if len(kept) == len(seq):
        return path

    handle_in = {i: seq[i].handle_in for i in kept}
    handle_out = {i: seq[i].handle_out for i in kept}
    for start, end in zip(kept[:-1], kept[1:], strict=True):
        if end == start + 1:
            continue
        span = distance(seq[start].point, seq[end].point)
        handle_out[start] = _scaled_handle(
            seq[start].point,
            seq[start].handle_out,
            distance(seq[start].point, seq[start + 1].point),
            span,
        )
        handle_in[end] = _scaled_handle(
            seq[end].point,
            seq[end].handle_in,
            distance(seq[end - 1].point, seq[end].point),
            span,
        )

    if path.closed:
        closing = kept.pop()
        handle_in[0] = handle_in[closing]

    anchors = [
        Anchor(point=seq[i].point, handle_in=handle_in[i], handle_out=handle_out[i]) for i in kept
    ]
    logger.debug(f"Simplified path from {len(path.anchors)} to {len(anchors)} anchors")
    return path.model_copy(update={"anchors": anchors})
