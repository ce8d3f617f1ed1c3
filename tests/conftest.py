"""Shared shape builders for geometry tests."""

import pytest

from sketch_geometry.types import Anchor, Path, Point, RectangleShape


def smooth_anchor(x: float, y: float, dx: float, dy: float) -> Anchor:
    """Anchor at (x, y) with symmetric handles offset by (dx, dy)."""
    return Anchor(
        point=Point(x=x, y=y),
        handle_in=Point(x=x - dx, y=y - dy),
        handle_out=Point(x=x + dx, y=y + dy),
    )


@pytest.fixture
def wave_path() -> Path:
    """Open S-curve with smooth interior anchors."""
    return Path(
        anchors=[
            Anchor.corner(Point(x=0, y=0)),
            smooth_anchor(50, 40, 20, 0),
            smooth_anchor(100, -10, 15, 10),
            Anchor.corner(Point(x=160, y=30)),
        ],
        stroke_width=3.0,
    )


@pytest.fixture
def blob_path() -> Path:
    """Closed curvy loop."""
    return Path(
        anchors=[
            smooth_anchor(0, 0, 30, -10),
            smooth_anchor(120, 20, 5, 40),
            smooth_anchor(80, 110, -40, 0),
            smooth_anchor(-20, 60, -5, -30),
        ],
        closed=True,
    )


@pytest.fixture
def rect() -> RectangleShape:
    return RectangleShape(x=0, y=0, width=100, height=50)
