"""Tests for the transform engine."""

import math

import pytest
from conftest import smooth_anchor

from sketch_geometry.bezier import rotate_point, sample_path
from sketch_geometry.convert import ellipse_to_path, rectangle_to_path, shape_to_path
from sketch_geometry.transforms import (
    apply_drag,
    flip_path,
    flip_point,
    flip_shape,
    insert_anchor,
    move_shape,
    normalize_primitive,
    remove_anchor,
    resize_shape,
    rotate_resize_handle,
    rotate_shape,
    scale_shape,
    update_path_anchors,
)
from sketch_geometry.types import (
    Anchor,
    AnchorDrag,
    EllipseShape,
    FlipAxis,
    GroupShape,
    MoveDrag,
    Path,
    Point,
    PolygonShape,
    RectangleShape,
    ResizeDrag,
    ResizeHandle,
)

CENTER = Point(x=40, y=-15)


def assert_point_close(a: Point, b: Point, tol: float = 1e-9) -> None:
    assert a.x == pytest.approx(b.x, abs=tol)
    assert a.y == pytest.approx(b.y, abs=tol)


def assert_same_points(actual: list[Point], expected: list[Point], tol: float = 1e-9) -> None:
    """Both lists hold the same points, in any order."""
    assert len(actual) == len(expected)
    for p in expected:
        assert any(abs(p.x - q.x) < tol and abs(p.y - q.y) < tol for q in actual), p


def assert_anchors_close(a: list[Anchor], b: list[Anchor]) -> None:
    assert len(a) == len(b)
    for left, right in zip(a, b, strict=True):
        assert_point_close(left.point, right.point)
        assert_point_close(left.handle_in, right.handle_in)
        assert_point_close(left.handle_out, right.handle_out)


class TestMoveAndRotate:
    def test_move_path_carries_handles(self, wave_path: Path) -> None:
        moved = move_shape(wave_path, 5, -3)
        for before, after in zip(wave_path.anchors, moved.anchors, strict=True):
            assert_point_close(after.point, Point(x=before.point.x + 5, y=before.point.y - 3))
            shifted = Point(x=before.handle_out.x + 5, y=before.handle_out.y - 3)
            assert_point_close(after.handle_out, shifted)

    def test_move_primitive(self, rect: RectangleShape) -> None:
        moved = move_shape(rect, 10, 20)
        assert (moved.x, moved.y, moved.width, moved.height) == (10, 20, 100, 50)

    def test_rotate_primitive_accumulates(self) -> None:
        square = RectangleShape(x=0, y=0, width=10, height=10, rotation=0.1)
        rotated = rotate_shape(square, Point(x=0, y=0), math.pi / 2)
        assert rotated.rotation == pytest.approx(0.1 + math.pi / 2)
        assert_point_close(rotated.center, Point(x=-5, y=5))
        assert (rotated.width, rotated.height) == (10, 10)

    def test_rectangle_path_half_turn_swaps_corners(self, rect: RectangleShape) -> None:
        path = rectangle_to_path(rect)
        rotated = rotate_shape(path, Point(x=50, y=25), math.pi)
        for i, anchor in enumerate(rotated.anchors):
            assert_point_close(anchor.point, path.anchors[(i + 2) % 4].point)


class TestScale:
    def test_scale_path_about_pivot(self, wave_path: Path) -> None:
        pivot = Point(x=10, y=10)
        scaled = scale_shape(wave_path, pivot, 2, 3)
        original = wave_path.anchors[1].handle_in
        expected = Point(x=10 + (original.x - 10) * 2, y=10 + (original.y - 10) * 3)
        assert_point_close(scaled.anchors[1].handle_in, expected)

    def test_negative_factor_leaves_negative_width(self) -> None:
        shape = RectangleShape(x=10, y=10, width=20, height=20)
        mirrored = scale_shape(shape, Point(x=0, y=0), -1, 1)
        assert (mirrored.x, mirrored.width) == (-10, -20)
        normalized = normalize_primitive(mirrored)
        assert (normalized.x, normalized.width) == (-30, 20)

    def test_normalize_is_noop_for_positive_box(self, rect: RectangleShape) -> None:
        assert normalize_primitive(rect) is rect

    def test_scale_stroke(self, rect: RectangleShape) -> None:
        scaled = scale_shape(rect, Point(x=0, y=0), 4, 1, scale_stroke=True)
        assert scaled.stroke_width == pytest.approx(rect.stroke_width * 2)

    def test_stroke_untouched_by_default(self, rect: RectangleShape) -> None:
        assert scale_shape(rect, Point(x=0, y=0), 4, 4).stroke_width == rect.stroke_width

    @pytest.mark.parametrize(
        "shape",
        [
            RectangleShape(x=0, y=0, width=100, height=20, rotation=math.pi / 6),
            EllipseShape(x=-10, y=5, width=60, height=30, rotation=0.4),
            PolygonShape(x=20, y=-5, width=40, height=30, sides=5, rotation=1.1),
        ],
    )
    @pytest.mark.parametrize(
        ("scale_x", "scale_y"),
        [(-1, 1), (1, -1), (-2, 2), (-1, -1), (3, 3), (2, 1), (1, 0.5), (-2, 1)],
    )
    def test_rotated_primitive_maps_every_point(
        self, shape, scale_x: float, scale_y: float
    ) -> None:
        pivot = Point(x=7, y=-3)
        expected = [
            Point(
                x=pivot.x + (a.point.x - pivot.x) * scale_x,
                y=pivot.y + (a.point.y - pivot.y) * scale_y,
            )
            for a in shape_to_path(shape).anchors
        ]
        result = scale_shape(shape, pivot, scale_x, scale_y)
        assert_same_points([a.point for a in shape_to_path(result).anchors], expected)

    def test_rotated_mirror_negates_rotation(self) -> None:
        shape = RectangleShape(x=0, y=0, width=100, height=20, rotation=math.pi / 6)
        mirrored = scale_shape(shape, Point(x=0, y=0), -1, 1)
        assert isinstance(mirrored, RectangleShape)
        assert mirrored.rotation == pytest.approx(-math.pi / 6)
        cos = math.cos(math.pi / 6)
        sin = math.sin(math.pi / 6)
        # Screen corners of the original, mirrored across x = 0
        expected = [
            Point(x=-(50 + dx * cos - dy * sin), y=10 + dx * sin + dy * cos)
            for dx, dy in [(-50, -10), (50, -10), (50, 10), (-50, 10)]
        ]
        corners = [a.point for a in rectangle_to_path(mirrored).anchors]
        assert_same_points(corners, expected)
        assert_same_points(
            [Point(x=round(p.x, 2), y=round(p.y, 2)) for p in corners],
            [
                Point(x=-98.30, y=26.34),
                Point(x=-88.30, y=43.66),
                Point(x=-11.70, y=-23.66),
                Point(x=-1.70, y=-6.34),
            ],
        )

    def test_rotated_stretch_becomes_path(self) -> None:
        shape = RectangleShape(x=0, y=0, width=100, height=20, rotation=math.pi / 6)
        stretched = scale_shape(shape, Point(x=0, y=0), 2, 1, scale_stroke=True)
        assert isinstance(stretched, Path)
        assert stretched.closed
        assert stretched.stroke_width == pytest.approx(shape.stroke_width * math.sqrt(2))
        first = rectangle_to_path(shape).anchors[0].point
        assert_point_close(stretched.anchors[0].point, Point(x=first.x * 2, y=first.y))

    def test_unrotated_stretch_stays_primitive(self, rect: RectangleShape) -> None:
        assert isinstance(scale_shape(rect, Point(x=0, y=0), 2, 1), RectangleShape)


class TestFlip:
    def test_flip_point(self) -> None:
        p = Point(x=50, y=0)
        assert flip_point(p, CENTER, FlipAxis.HORIZONTAL) == Point(x=30, y=0)
        assert flip_point(p, CENTER, FlipAxis.VERTICAL) == Point(x=50, y=-30)

    @pytest.mark.parametrize("axis", [FlipAxis.HORIZONTAL, FlipAxis.VERTICAL])
    def test_open_path_involution(self, wave_path: Path, axis: FlipAxis) -> None:
        twice = flip_path(flip_path(wave_path, CENTER, axis), CENTER, axis)
        assert_anchors_close(twice.anchors, wave_path.anchors)

    @pytest.mark.parametrize("axis", [FlipAxis.HORIZONTAL, FlipAxis.VERTICAL])
    def test_closed_path_involution(self, blob_path: Path, axis: FlipAxis) -> None:
        twice = flip_path(flip_path(blob_path, CENTER, axis), CENTER, axis)
        assert_anchors_close(twice.anchors, blob_path.anchors)

    def test_open_flip_traces_mirrored_curve(self, wave_path: Path) -> None:
        flipped = flip_path(wave_path, CENTER, FlipAxis.HORIZONTAL)
        expected = [
            flip_point(p, CENTER, FlipAxis.HORIZONTAL)
            for p in sample_path(wave_path.anchors, steps_per_segment=10)
        ]
        actual = sample_path(flipped.anchors, steps_per_segment=10)
        for a, b in zip(actual, reversed(expected), strict=True):
            assert_point_close(a, b, tol=1e-6)

    def test_closed_flip_keeps_first_anchor(self, blob_path: Path) -> None:
        flipped = flip_path(blob_path, CENTER, FlipAxis.VERTICAL)
        assert_point_close(
            flipped.anchors[0].point,
            flip_point(blob_path.anchors[0].point, CENTER, FlipAxis.VERTICAL),
        )
        assert flipped.closed

    @pytest.mark.parametrize("axis", [FlipAxis.HORIZONTAL, FlipAxis.VERTICAL])
    def test_closed_flip_traces_mirrored_curve(self, axis: FlipAxis) -> None:
        ellipse = EllipseShape(x=10, y=-20, width=90, height=40, rotation=0.7)
        source = ellipse_to_path(ellipse)
        flipped = flip_shape(ellipse, CENTER, axis)
        expected = [
            flip_point(p, CENTER, axis)
            for p in sample_path(source.anchors, steps_per_segment=12, closed=True)
        ]
        actual = sample_path(flipped.anchors, steps_per_segment=12, closed=True)
        # Same start, then the mirrored loop walked the other way round
        for a, b in zip(actual, reversed(expected), strict=True):
            assert_point_close(a, b, tol=1e-6)

    def test_flip_swaps_handles(self) -> None:
        anchor = smooth_anchor(0, 0, 10, 0)
        path = Path(anchors=[anchor])
        flipped = flip_path(path, Point(x=0, y=0), FlipAxis.HORIZONTAL)
        # Reflecting x and swapping in/out leaves a horizontal smooth anchor as it was
        assert_anchors_close(flipped.anchors, [anchor])

    @pytest.mark.parametrize(
        "shape",
        [
            RectangleShape(x=0, y=0, width=100, height=50, rotation=0.3),
            EllipseShape(x=10, y=10, width=60, height=30),
            PolygonShape(x=-20, y=5, width=40, height=40, sides=5),
        ],
    )
    def test_primitives_become_paths(self, shape) -> None:
        flipped = flip_shape(shape, CENTER, "horizontal")
        assert isinstance(flipped, Path)
        assert flipped.closed
        assert flipped.stroke_width == shape.stroke_width
        twice = flip_shape(flipped, CENTER, FlipAxis.HORIZONTAL)
        assert_anchors_close(twice.anchors, shape_to_path(shape).anchors)


class TestResizeRectangle:
    def test_bottom_right_corner(self, rect: RectangleShape) -> None:
        result = resize_shape(
            rect, ResizeHandle.BOTTOM_RIGHT, Point(x=120, y=70), Point(x=100, y=50)
        )
        assert (result.x, result.y, result.width, result.height) == (0, 0, 120, 70)

    def test_top_left_corner_moves_origin(self, rect: RectangleShape) -> None:
        result = resize_shape(rect, "top-left", Point(x=10, y=10), Point(x=0, y=0))
        assert (result.x, result.y, result.width, result.height) == (10, 10, 90, 40)

    def test_edge_changes_one_dimension(self, rect: RectangleShape) -> None:
        result = resize_shape(rect, ResizeHandle.RIGHT, Point(x=130, y=90), Point(x=100, y=25))
        assert (result.x, result.y, result.width, result.height) == (0, 0, 130, 50)

    def test_drag_past_opposite_edge_flips_origin(self, rect: RectangleShape) -> None:
        result = resize_shape(rect, ResizeHandle.RIGHT, Point(x=-20, y=25), Point(x=100, y=25))
        assert (result.x, result.width) == (-20, 20)

    def test_aspect_lock_from_corner(self, rect: RectangleShape) -> None:
        result = resize_shape(
            rect, ResizeHandle.BOTTOM_RIGHT, Point(x=200, y=50), Point(x=100, y=50), True
        )
        assert (result.width, result.height) == (200, 100)

    def test_aspect_lock_keeps_bottom_edge_for_top_left(self, rect: RectangleShape) -> None:
        result = resize_shape(
            rect, ResizeHandle.TOP_LEFT, Point(x=-100, y=0), Point(x=0, y=0), True
        )
        assert (result.x, result.y, result.width, result.height) == (-100, -50, 200, 100)
        assert result.y + result.height == 50

    def test_aspect_lock_from_vertical_edge(self, rect: RectangleShape) -> None:
        result = resize_shape(
            rect, ResizeHandle.BOTTOM, Point(x=50, y=100), Point(x=50, y=50), True
        )
        assert (result.x, result.width, result.height) == (0, 200, 100)

    def test_zero_size_original(self) -> None:
        empty = RectangleShape(x=5, y=5, width=0, height=0)
        result = resize_shape(
            empty, ResizeHandle.BOTTOM_RIGHT, Point(x=15, y=25), Point(x=5, y=5), True
        )
        assert (result.width, result.height) == (10, 20)

    def test_rotated_resize_keeps_fixed_corner(self, rect: RectangleShape) -> None:
        angle = math.pi / 2
        rotated = rect.model_copy(update={"rotation": angle})
        fixed_before = rotate_point(Point(x=0, y=0), rotated.center, angle)
        # A local drag of (20, 10) appears on screen rotated by the shape angle
        result = resize_shape(
            rotated, ResizeHandle.BOTTOM_RIGHT, Point(x=-10, y=20), Point(x=0, y=0)
        )
        assert result.width == pytest.approx(120)
        assert result.height == pytest.approx(60)
        assert result.rotation == angle
        fixed_after = rotate_point(Point(x=result.x, y=result.y), result.center, angle)
        assert_point_close(fixed_after, fixed_before)


class TestResizePath:
    def test_scales_from_fixed_corner(self) -> None:
        line = Path(anchors=[Anchor.corner(Point(x=0, y=0)), Anchor.corner(Point(x=100, y=50))])
        result = resize_shape(
            line, ResizeHandle.BOTTOM_RIGHT, Point(x=200, y=100), Point(x=100, y=50)
        )
        assert_point_close(result.anchors[0].point, Point(x=0, y=0))
        assert_point_close(result.anchors[1].point, Point(x=200, y=100))

    def test_single_anchor_path_is_unchanged(self) -> None:
        dot = Path(anchors=[Anchor.corner(Point(x=1, y=1))])
        assert resize_shape(dot, "right", Point(x=50, y=1), Point(x=1, y=1)) is dot

    def test_ellipse_path_keeps_anchor_count(self) -> None:
        path = ellipse_to_path(EllipseShape(x=0, y=0, width=100, height=100))
        result = resize_shape(path, ResizeHandle.LEFT, Point(x=-50, y=50), Point(x=0, y=50))
        assert len(result.anchors) == 4
        right = max(a.point.x for a in result.anchors)
        assert right == pytest.approx(100)


class TestRotateResizeHandle:
    def test_no_rotation(self) -> None:
        assert rotate_resize_handle(ResizeHandle.TOP_LEFT, 0) == ResizeHandle.TOP_LEFT

    def test_quarter_turn(self) -> None:
        assert rotate_resize_handle(ResizeHandle.RIGHT, math.pi / 2) == ResizeHandle.BOTTOM
        assert rotate_resize_handle("top", math.pi / 2) == ResizeHandle.RIGHT

    def test_eighth_turn(self) -> None:
        assert rotate_resize_handle(ResizeHandle.BOTTOM_RIGHT, math.pi / 4) == ResizeHandle.BOTTOM


class TestAnchorEditing:
    def test_moving_anchor_carries_handles(self, wave_path: Path) -> None:
        drag = AnchorDrag(type="anchor", anchor_index=1)
        result = update_path_anchors(wave_path, drag, Point(x=60, y=50))
        anchor = result.anchors[1]
        assert anchor.point == Point(x=60, y=50)
        assert_point_close(anchor.handle_in, Point(x=40, y=50))
        assert_point_close(anchor.handle_out, Point(x=80, y=50))
        assert result.anchors[0] == wave_path.anchors[0]

    def test_handle_drag_mirrors_opposite(self, wave_path: Path) -> None:
        drag = AnchorDrag(type="handle_out", anchor_index=1)
        anchor = update_path_anchors(wave_path, drag, Point(x=50, y=70)).anchors[1]
        assert anchor.handle_out == Point(x=50, y=70)
        assert_point_close(anchor.handle_in, Point(x=50, y=10))

    def test_break_symmetry(self, wave_path: Path) -> None:
        drag = AnchorDrag(type="handle_in", anchor_index=1)
        result = update_path_anchors(wave_path, drag, Point(x=0, y=0), break_symmetry=True)
        assert result.anchors[1].handle_in == Point(x=0, y=0)
        assert result.anchors[1].handle_out == wave_path.anchors[1].handle_out

    def test_stale_index_is_noop(self, wave_path: Path) -> None:
        drag = AnchorDrag(type="anchor", anchor_index=9)
        assert update_path_anchors(wave_path, drag, Point(x=0, y=0)) is wave_path
        negative = AnchorDrag(type="anchor", anchor_index=-1)
        assert update_path_anchors(wave_path, negative, Point(x=0, y=0)) is wave_path

    def test_primitive_is_ignored(self, rect: RectangleShape) -> None:
        drag = AnchorDrag(type="anchor", anchor_index=0)
        assert update_path_anchors(rect, drag, Point(x=0, y=0)) is rect

    def test_insert_preserves_curve(self, wave_path: Path) -> None:
        result = insert_anchor(wave_path, 1, 0.4)
        assert len(result.anchors) == 5
        before = sample_path(wave_path.anchors, steps_per_segment=50)
        new_anchor = result.anchors[2]
        assert any(
            abs(p.x - new_anchor.point.x) < 1e-9 and abs(p.y - new_anchor.point.y) < 1e-9
            for p in before
        )
        # Every sample of the new curve lies on the old one
        old_dense = sample_path(wave_path.anchors, steps_per_segment=2000)
        for p in sample_path(result.anchors, steps_per_segment=10):
            nearest = min((q.x - p.x) ** 2 + (q.y - p.y) ** 2 for q in old_dense)
            assert nearest < 0.05**2

    def test_insert_on_closing_segment(self, blob_path: Path) -> None:
        result = insert_anchor(blob_path, 3, 0.5)
        assert len(result.anchors) == 5
        assert result.anchors[0].point == blob_path.anchors[0].point
        assert result.anchors[0].handle_in != blob_path.anchors[0].handle_in

    def test_insert_without_preserving_shape(self, wave_path: Path) -> None:
        result = insert_anchor(wave_path, 0, 0.5, preserve_shape=False)
        assert result.anchors[0] == wave_path.anchors[0]
        assert result.anchors[2] == wave_path.anchors[1]

    def test_insert_out_of_range_is_noop(self, wave_path: Path) -> None:
        assert insert_anchor(wave_path, 3, 0.5) is wave_path

    def test_remove_anchor(self, wave_path: Path) -> None:
        result = remove_anchor(wave_path, 1)
        assert result.anchors == [wave_path.anchors[0], *wave_path.anchors[2:]]
        assert remove_anchor(wave_path, 4) is wave_path


class TestApplyDrag:
    def test_move_drag_is_relative_to_start(self, rect: RectangleShape, wave_path: Path) -> None:
        drag = MoveDrag(original_shapes=[rect, wave_path], initial_pointer=Point(x=10, y=10))
        moved_rect, moved_path = apply_drag(drag, Point(x=15, y=30))
        assert (moved_rect.x, moved_rect.y) == (5, 20)
        assert_point_close(moved_path.anchors[0].point, Point(x=5, y=20))

    def test_resize_drag(self, rect: RectangleShape) -> None:
        drag = ResizeDrag(
            handle=ResizeHandle.RIGHT, original_shape=rect, initial_pointer=Point(x=100, y=25)
        )
        [resized] = apply_drag(drag, Point(x=150, y=25))
        assert resized.width == 150

    def test_anchor_drag_needs_target(self) -> None:
        with pytest.raises(ValueError, match="target"):
            apply_drag(AnchorDrag(type="anchor", anchor_index=0), Point(x=0, y=0))

    def test_anchor_drag_edits_target(self, wave_path: Path) -> None:
        drag = AnchorDrag(type="anchor", anchor_index=0)
        [edited] = apply_drag(drag, Point(x=-5, y=-5), target=wave_path)
        assert edited.anchors[0].point == Point(x=-5, y=-5)


class TestGroups:
    @pytest.fixture
    def group(self, rect: RectangleShape, wave_path: Path) -> GroupShape:
        inner = GroupShape(children=[EllipseShape(x=200, y=0, width=40, height=20)])
        return GroupShape(children=[rect, wave_path, inner])

    def test_move_recurses(self, group: GroupShape) -> None:
        moved = move_shape(group, 10, -5)
        moved_rect, moved_path, moved_inner = moved.children
        assert (moved_rect.x, moved_rect.y) == (10, -5)
        assert_point_close(moved_path.anchors[0].point, Point(x=10, y=-5))
        assert (moved_inner.children[0].x, moved_inner.children[0].y) == (210, -5)

    def test_rotate_recurses(self, group: GroupShape) -> None:
        rotated = rotate_shape(group, Point(x=0, y=0), math.pi / 2)
        rotated_rect, rotated_path, rotated_inner = rotated.children
        assert rotated_rect.rotation == pytest.approx(math.pi / 2)
        assert_point_close(rotated_path.anchors[3].point, Point(x=-30, y=160))
        assert rotated_inner.children[0].rotation == pytest.approx(math.pi / 2)

    def test_scale_recurses_with_stroke(self, group: GroupShape) -> None:
        scaled = scale_shape(group, Point(x=0, y=0), 2, 2, scale_stroke=True)
        scaled_rect, scaled_path, scaled_inner = scaled.children
        assert (scaled_rect.width, scaled_rect.stroke_width) == (200, 4)
        assert_point_close(scaled_path.anchors[3].point, Point(x=320, y=60))
        assert scaled_inner.children[0].x == 400

    def test_flip_keeps_group(self, group: GroupShape) -> None:
        flipped = flip_shape(group, CENTER, FlipAxis.VERTICAL)
        assert isinstance(flipped, GroupShape)
        flipped_rect, flipped_path, flipped_inner = flipped.children
        assert isinstance(flipped_rect, Path)
        assert isinstance(flipped_inner, GroupShape)
        assert isinstance(flipped_inner.children[0], Path)
        assert_point_close(flipped_path.anchors[0].point, Point(x=160, y=-60))

    def test_resize_scales_children_from_fixed_corner(self) -> None:
        group = GroupShape(
            children=[
                RectangleShape(x=0, y=0, width=50, height=50),
                RectangleShape(x=50, y=0, width=50, height=50),
            ]
        )
        resized = resize_shape(group, ResizeHandle.RIGHT, Point(x=200, y=25), Point(x=100, y=25))
        left, right = resized.children
        assert (left.x, left.width, left.height) == (0, 100, 50)
        assert (right.x, right.width) == (100, 100)

    def test_resize_past_edge_normalizes_children(self) -> None:
        group = GroupShape(children=[RectangleShape(x=0, y=0, width=100, height=50)])
        resized = resize_shape(group, ResizeHandle.RIGHT, Point(x=-100, y=25), Point(x=100, y=25))
        [child] = resized.children
        assert (child.x, child.width) == (-100, 100)

    def test_empty_group_resize_is_noop(self) -> None:
        empty = GroupShape()
        assert resize_shape(empty, "right", Point(x=5, y=0), Point(x=0, y=0)) is empty

    def test_move_drag_moves_groups(self, group: GroupShape) -> None:
        drag = MoveDrag(original_shapes=[group], initial_pointer=Point(x=0, y=0))
        [moved] = apply_drag(drag, Point(x=3, y=4))
        assert moved.children[0].x == 3
