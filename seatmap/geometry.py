from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from shapely.geometry import MultiPoint


class GeometryError(Exception):
    pass


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, x: float, y: float, *, tol: float = 1e-9) -> bool:
        return (self.x - tol) <= x <= (self.max_x + tol) and (self.y - tol) <= y <= (self.max_y + tol)

    def union(self, other: "Bounds") -> "Bounds":
        min_x = min(self.x, other.x)
        min_y = min(self.y, other.y)
        max_x = max(self.max_x, other.max_x)
        max_y = max(self.max_y, other.max_y)
        return Bounds(min_x, min_y, max_x - min_x, max_y - min_y)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


def bounds_of(points: Iterable[Point]) -> Bounds:
    pts = list(points)
    if not pts:
        raise GeometryError("cannot compute bounds of an empty point set")
    xs = [p.x for p in pts]
    ys = [p.y for p in pts]
    return Bounds(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def _fmt(v: float) -> str:
    # Shortest exact repr; integral values without the trailing ".0".
    v = float(v)
    if v.is_integer():
        return str(int(v))
    return repr(v)


# ---------------------------------------------------------------------------
# Elliptical projection and path assembly
# ---------------------------------------------------------------------------


def ellipse_point(center: Point, radius_x: float, radius_y: float, angle_deg: float) -> Point:
    """
    Point on an axis-aligned ellipse.

    0 degrees is +x and angles grow counter-clockwise on screen, so y shrinks
    as the angle grows (top-left canvas origin).
    """
    rad = math.radians(angle_deg)
    return Point(center.x + radius_x * math.cos(rad), center.y - radius_y * math.sin(rad))


def wedge_corners(
    center: Point,
    angle_start: float,
    angle_end: float,
    inner: tuple[float, float],
    outer: tuple[float, float],
) -> tuple[Point, Point, Point, Point]:
    """Corners inner-start, inner-end, outer-end, outer-start for explicit (rx, ry) radii."""
    return (
        ellipse_point(center, inner[0], inner[1], angle_start),
        ellipse_point(center, inner[0], inner[1], angle_end),
        ellipse_point(center, outer[0], outer[1], angle_end),
        ellipse_point(center, outer[0], outer[1], angle_start),
    )


def ring_wedge_corners(
    center: Point,
    angle_start: float,
    angle_end: float,
    radius_inner: float,
    radius_outer: float,
    oval_ratio: float,
) -> tuple[Point, Point, Point, Point]:
    return wedge_corners(
        center,
        angle_start,
        angle_end,
        (radius_inner * oval_ratio, radius_inner),
        (radius_outer * oval_ratio, radius_outer),
    )


def polygon_path(points: Sequence[Point]) -> str:
    if not points:
        return ""
    head, *rest = points
    parts = [f"M {_fmt(head.x)} {_fmt(head.y)}"]
    parts.extend(f"L {_fmt(p.x)} {_fmt(p.y)}" for p in rest)
    return " ".join(parts) + " Z"


def ring_wedge_path(
    center: Point,
    angle_start: float,
    angle_end: float,
    radius_inner: float,
    radius_outer: float,
    oval_ratio: float,
) -> str:
    # Straight chords, no arc commands on the section outline.
    return polygon_path(ring_wedge_corners(center, angle_start, angle_end, radius_inner, radius_outer, oval_ratio))


def hole_band(
    center: Point,
    angle_start: float,
    angle_end: float,
    radius_inner: float,
    radius_outer: float,
    oval_ratio: float,
) -> str:
    """Same quadrilateral as ring_wedge_path wound the other way; a gap under even-odd fill."""
    p1, p2, p3, p4 = ring_wedge_corners(center, angle_start, angle_end, radius_inner, radius_outer, oval_ratio)
    return polygon_path((p4, p3, p2, p1))


def rect_path(x: float, y: float, width: float, height: float) -> str:
    return polygon_path((Point(x, y), Point(x + width, y), Point(x + width, y + height), Point(x, y + height)))


def line_path(x0: float, y0: float, x1: float, y1: float) -> str:
    return f"M {_fmt(x0)} {_fmt(y0)} L {_fmt(x1)} {_fmt(y1)}"


def ellipse_path(center: Point, radius_x: float, radius_y: float) -> str:
    cx, cy = center.x, center.y
    return (
        f"M {_fmt(cx + radius_x)} {_fmt(cy)} "
        f"A {_fmt(radius_x)} {_fmt(radius_y)} 0 0 1 {_fmt(cx - radius_x)} {_fmt(cy)} "
        f"A {_fmt(radius_x)} {_fmt(radius_y)} 0 0 1 {_fmt(cx + radius_x)} {_fmt(cy)} Z"
    )


def ellipse_ring_path(center: Point, inner: tuple[float, float], outer: tuple[float, float]) -> str:
    return ellipse_path(center, outer[0], outer[1]) + " " + ellipse_path(center, inner[0], inner[1])


def arc_path(center: Point, radius_x: float, radius_y: float, angle_start: float, angle_end: float) -> str:
    p0 = ellipse_point(center, radius_x, radius_y, angle_start)
    p1 = ellipse_point(center, radius_x, radius_y, angle_end)
    large_arc = 1 if abs(angle_end - angle_start) > 180 else 0
    # Growing angles run counter-clockwise on screen: the negative SVG sweep direction.
    sweep = 0 if angle_end >= angle_start else 1
    return (
        f"M {_fmt(p0.x)} {_fmt(p0.y)} "
        f"A {_fmt(radius_x)} {_fmt(radius_y)} 0 {large_arc} {sweep} {_fmt(p1.x)} {_fmt(p1.y)}"
    )


def ellipse_bounds(center: Point, radius_x: float, radius_y: float) -> Bounds:
    return Bounds(center.x - radius_x, center.y - radius_y, 2 * radius_x, 2 * radius_y)


# ---------------------------------------------------------------------------
# Path parsing
# ---------------------------------------------------------------------------

_PATH_TOKEN_RE = re.compile(r"([MmLlHhVvCcSsQqTtAaZz])|([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_CURVE_STEPS = 12


def _cubic(p0, p1, p2, p3, steps: int = _CURVE_STEPS) -> list[tuple[float, float]]:
    out = []
    for k in range(1, steps + 1):
        t = k / steps
        mt = 1 - t
        x = mt**3 * p0[0] + 3 * mt**2 * t * p1[0] + 3 * mt * t**2 * p2[0] + t**3 * p3[0]
        y = mt**3 * p0[1] + 3 * mt**2 * t * p1[1] + 3 * mt * t**2 * p2[1] + t**3 * p3[1]
        out.append((x, y))
    return out


def _quad(p0, p1, p2, steps: int = _CURVE_STEPS) -> list[tuple[float, float]]:
    out = []
    for k in range(1, steps + 1):
        t = k / steps
        mt = 1 - t
        out.append(
            (
                mt**2 * p0[0] + 2 * mt * t * p1[0] + t**2 * p2[0],
                mt**2 * p0[1] + 2 * mt * t * p1[1] + t**2 * p2[1],
            )
        )
    return out


def _arc(
    x1: float,
    y1: float,
    rx: float,
    ry: float,
    phi_deg: float,
    large_arc: bool,
    sweep: bool,
    x2: float,
    y2: float,
    steps: int = _CURVE_STEPS,
) -> list[tuple[float, float]]:
    # Endpoint to center parameterization (SVG 1.1 implementation notes F.6.5).
    if rx == 0 or ry == 0 or (x1 == x2 and y1 == y2):
        return [(x2, y2)]
    rx, ry = abs(rx), abs(ry)
    phi = math.radians(phi_deg)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)
    dx2 = (x1 - x2) / 2
    dy2 = (y1 - y2) / 2
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2

    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1:
        s = math.sqrt(lam)
        rx *= s
        ry *= s

    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(0.0, num / den)) if den else 0.0
    if large_arc == sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx
    cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
    cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

    theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
    theta2 = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx)
    delta = (theta2 - theta1) % (2 * math.pi)
    if not sweep:
        delta -= 2 * math.pi

    out = []
    for k in range(1, steps + 1):
        t = theta1 + delta * k / steps
        out.append(
            (
                cx + rx * math.cos(t) * cos_phi - ry * math.sin(t) * sin_phi,
                cy + rx * math.cos(t) * sin_phi + ry * math.sin(t) * cos_phi,
            )
        )
    out[-1] = (x2, y2)
    return out


def flatten_path(d: str) -> list[list[tuple[float, float]]]:
    """
    Parse SVG path data into vertex lists, one per sub-path.

    Curves and arcs are sampled; closing a sub-path does not repeat its first vertex.
    """
    tokens = _PATH_TOKEN_RE.findall(d or "")
    subpaths: list[list[tuple[float, float]]] = []
    current: list[tuple[float, float]] = []
    pos = (0.0, 0.0)
    start = (0.0, 0.0)
    last_ctrl: tuple[float, float] | None = None
    last_cmd = ""
    i = 0

    def _num() -> float:
        nonlocal i
        if i >= len(tokens) or tokens[i][0]:
            raise GeometryError(f"unexpected end of path data: {d!r}")
        try:
            val = float(tokens[i][1])
        except ValueError as e:
            raise GeometryError(f"malformed number in path data: {tokens[i][1]!r}") from e
        i += 1
        return val

    def _has_num() -> bool:
        return i < len(tokens) and not tokens[i][0]

    def _ensure_open() -> None:
        nonlocal current
        if not current:
            current = [pos]
            subpaths.append(current)

    cmd = ""
    while i < len(tokens):
        if tokens[i][0]:
            cmd = tokens[i][0]
            i += 1
        elif not cmd:
            raise GeometryError(f"path data must start with a command: {d!r}")

        rel = cmd.islower()
        op = cmd.upper()
        ox, oy = pos if rel else (0.0, 0.0)

        if op == "M":
            x, y = _num() + ox, _num() + oy
            pos = start = (x, y)
            current = [pos]
            subpaths.append(current)
            # Extra coordinate pairs after a move are implicit line-tos.
            cmd = "l" if rel else "L"
            last_ctrl = None
        elif op == "L":
            _ensure_open()
            pos = (_num() + ox, _num() + oy)
            current.append(pos)
            last_ctrl = None
        elif op == "H":
            _ensure_open()
            pos = (_num() + ox, pos[1])
            current.append(pos)
            last_ctrl = None
        elif op == "V":
            _ensure_open()
            pos = (pos[0], _num() + (pos[1] if rel else 0.0))
            current.append(pos)
            last_ctrl = None
        elif op in ("C", "S"):
            _ensure_open()
            if op == "C":
                c1 = (_num() + ox, _num() + oy)
            elif last_ctrl is not None and last_cmd in ("C", "S"):
                c1 = (2 * pos[0] - last_ctrl[0], 2 * pos[1] - last_ctrl[1])
            else:
                c1 = pos
            c2 = (_num() + ox, _num() + oy)
            end = (_num() + ox, _num() + oy)
            current.extend(_cubic(pos, c1, c2, end))
            last_ctrl = c2
            pos = end
        elif op in ("Q", "T"):
            _ensure_open()
            if op == "Q":
                c1 = (_num() + ox, _num() + oy)
            elif last_ctrl is not None and last_cmd in ("Q", "T"):
                c1 = (2 * pos[0] - last_ctrl[0], 2 * pos[1] - last_ctrl[1])
            else:
                c1 = pos
            end = (_num() + ox, _num() + oy)
            current.extend(_quad(pos, c1, end))
            last_ctrl = c1
            pos = end
        elif op == "A":
            _ensure_open()
            rx, ry, phi = _num(), _num(), _num()
            large_arc, sweep = bool(_num()), bool(_num())
            end = (_num() + ox, _num() + oy)
            current.extend(_arc(pos[0], pos[1], rx, ry, phi, large_arc, sweep, end[0], end[1]))
            last_ctrl = None
            pos = end
        elif op == "Z":
            pos = start
            current = []
            last_ctrl = None
            # Z takes no arguments; stray numbers would otherwise loop forever.
            if _has_num():
                raise GeometryError(f"unexpected numbers after close command: {d!r}")
            cmd = ""

        last_cmd = op

    return [sp for sp in subpaths if sp]


def path_vertices(d: str) -> list[tuple[float, float]]:
    return [pt for sp in flatten_path(d) for pt in sp]


def subpath_count(d: str) -> int:
    return len(flatten_path(d))


def path_bounds(d: str) -> Bounds:
    """Extent of a path, measured on its flattened vertices."""
    pts = path_vertices(d)
    if not pts:
        raise GeometryError(f"path has no vertices: {d!r}")
    min_x, min_y, max_x, max_y = MultiPoint(pts).bounds
    return Bounds(min_x, min_y, max_x - min_x, max_y - min_y)
