"""SVG path `d` string conversion.

Anchored paths serialize to a move plus one cubic per segment. Parsing goes
the other way for the commands a drawing editor can represent exactly: lines
and cubics directly, quadratics elevated to cubics.
"""

import logging
import re

from sketch_geometry.bezier import path_segments, segment_controls
from sketch_geometry.types import Anchor, Path, Point, SvgPathError

logger = logging.getLogger(__name__)

# A command letter, or a number with optional sign, fraction and exponent
SVG_TOKEN_RE = re.compile(r"([A-Za-z])|([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")

# Arguments consumed by one repetition of each command
COMMAND_ARITY = {
    "M": 2,
    "L": 2,
    "H": 1,
    "V": 1,
    "C": 6,
    "S": 4,
    "Q": 4,
    "T": 2,
    "A": 7,
    "Z": 0,
}


def _point_d(p: Point) -> str:
    return f"{p.x} {p.y}"


def anchors_to_path_d(anchors: list[Anchor], closed: bool = False) -> str:
    """Serialize anchors to an SVG `d` attribute.

    Every segment is written as a cubic, including straight ones, so the
    output parses back into the same anchors.
    """
    if not anchors:
        return ""

    d_parts = [f"M {_point_d(anchors[0].point)}"]
    for start, end in path_segments(anchors, closed):
        _, p1, p2, p3 = segment_controls(start, end)
        d_parts.append(f"C {_point_d(p1)} {_point_d(p2)} {_point_d(p3)}")
    if closed:
        d_parts.append("Z")
    return " ".join(d_parts)


def parse_svg_path(d: str) -> list[tuple[str, list[float]]]:
    """Tokenize a `d` string into (command, args) tuples.

    Raises:
        SvgPathError: On a command letter SVG does not define, or numbers
            before the first command
    """
    commands: list[tuple[str, list[float]]] = []
    current_cmd = ""
    current_args: list[float] = []

    for match in SVG_TOKEN_RE.finditer(d):
        letter, number = match.groups()
        if letter:
            if letter.upper() not in COMMAND_ARITY:
                raise SvgPathError(f"Unknown SVG path command: {letter!r}")
            if current_cmd:
                commands.append((current_cmd, current_args))
            current_cmd = letter
            current_args = []
        else:
            if not current_cmd:
                raise SvgPathError("SVG path data must start with a command")
            current_args.append(float(number))

    if current_cmd:
        commands.append((current_cmd, current_args))

    return commands


def _chunks(cmd: str, args: list[float]) -> list[list[float]]:
    arity = COMMAND_ARITY[cmd.upper()]
    if arity == 0:
        return [[]]
    if not args or len(args) % arity:
        raise SvgPathError(f"Command {cmd!r} expects a multiple of {arity} arguments")
    return [args[i : i + arity] for i in range(0, len(args), arity)]


def _offset(origin: Point, x: float, y: float) -> Point:
    return Point(x=origin.x + x, y=origin.y + y)


class _PathBuilder:
    """Accumulates cubic segments into anchors."""

    def __init__(self, start: Point) -> None:
        self.anchors = [Anchor.corner(start)]

    @property
    def current(self) -> Point:
        return self.anchors[-1].point

    def cubic_to(self, c1: Point, c2: Point, end: Point) -> None:
        self.anchors[-1] = self.anchors[-1].model_copy(update={"handle_out": c1})
        self.anchors.append(Anchor(point=end, handle_in=c2, handle_out=end))

    def line_to(self, end: Point) -> None:
        self.cubic_to(self.current, end, end)

    def close(self) -> None:
        """Fold a trailing anchor that repeats the start into the first anchor."""
        first = self.anchors[0]
        last = self.anchors[-1]
        if len(self.anchors) > 1 and (last.point - first.point).length() < 1e-9:
            self.anchors[0] = first.model_copy(update={"handle_in": last.handle_in})
            self.anchors.pop()


def path_from_svg_d(d: str, stroke_width: float = 2.0) -> Path:
    """Build a :class:`Path` from an SVG `d` string.

    Handles M, L, H, V, C, S, Q, T and Z in absolute and relative form. Arcs
    have no exact cubic form here and are replaced by a straight line to their
    end point. Only the first subpath is kept.

    Raises:
        SvgPathError: On malformed input
    """
    commands = parse_svg_path(d)
    if not commands:
        return Path(stroke_width=stroke_width)
    if commands[0][0].upper() != "M":
        raise SvgPathError("SVG path data must start with a moveto")

    builder: _PathBuilder | None = None
    closed = False
    # Last control point of the previous C/S or Q/T command, for smooth variants
    last_cubic: Point | None = None
    last_quad: Point | None = None

    for index, (cmd, args) in enumerate(commands):
        upper = cmd.upper()
        relative = cmd.islower()

        if closed or (upper == "M" and builder is not None):
            remaining = len(commands) - index
            logger.warning(f"Keeping only the first subpath, dropped {remaining} commands")
            break

        for chunk in _chunks(cmd, args):
            origin = builder.current if builder is not None and relative else Point(x=0, y=0)

            cubic_control: Point | None = None
            quad_control: Point | None = None

            match upper:
                case "M":
                    if builder is None:
                        builder = _PathBuilder(_offset(origin, *chunk))
                    else:
                        # Extra coordinate pairs after a moveto are implicit linetos
                        builder.line_to(_offset(origin, *chunk))
                case "L":
                    builder.line_to(_offset(origin, *chunk))
                case "H":
                    builder.line_to(Point(x=origin.x + chunk[0], y=builder.current.y))
                case "V":
                    builder.line_to(Point(x=builder.current.x, y=origin.y + chunk[0]))
                case "C":
                    cubic_control = _offset(origin, chunk[2], chunk[3])
                    c1 = _offset(origin, chunk[0], chunk[1])
                    builder.cubic_to(c1, cubic_control, _offset(origin, chunk[4], chunk[5]))
                case "S":
                    current = builder.current
                    c1 = current + (current - last_cubic) if last_cubic is not None else current
                    cubic_control = _offset(origin, chunk[0], chunk[1])
                    builder.cubic_to(c1, cubic_control, _offset(origin, chunk[2], chunk[3]))
                case "Q" | "T":
                    start = builder.current
                    if upper == "Q":
                        quad_control = _offset(origin, chunk[0], chunk[1])
                        end = _offset(origin, chunk[2], chunk[3])
                    else:
                        quad_control = start
                        if last_quad is not None:
                            quad_control = start + (start - last_quad)
                        end = _offset(origin, chunk[0], chunk[1])
                    builder.cubic_to(
                        start + (quad_control - start) * (2 / 3),
                        end + (quad_control - end) * (2 / 3),
                        end,
                    )
                case "A":
                    logger.warning("Replacing SVG arc with a straight line")
                    builder.line_to(_offset(origin, chunk[5], chunk[6]))
                case "Z":
                    builder.close()
                    closed = True

            last_cubic = cubic_control
            last_quad = quad_control

    assert builder is not None
    return Path(anchors=builder.anchors, closed=closed, stroke_width=stroke_width)
