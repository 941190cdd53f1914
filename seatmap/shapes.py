from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .geometry import (
    Bounds,
    Point,
    arc_path,
    bounds_of,
    ellipse_point,
    polygon_path,
    rect_path,
    wedge_corners,
)
from .schemas import Section

STAGE_KEY = "stage"

# Bowl-style decorations (boundary rings, walkway rings, bridge label).
BOWL_DECORATION_KEYS = frozenset(
    {
        "walkwayLower",
        "walkwayUpper",
        "arenaInner",
        "arenaOuter",
        "chaseBridgeLabel",
    }
)

# Decorations produced from a venue schematic.
SCHEMATIC_DECORATION_KEYS = frozenset(
    {
        "walkway_1",
        "walkway_2",
        "chaseBridge",
        "chaseBridgeLabel",
    }
)

ALL_DECORATION_KEYS = BOWL_DECORATION_KEYS | SCHEMATIC_DECORATION_KEYS

# Coarse venue silhouette, outer ring first.
BOUNDARY_KEYS = ("arenaOuter", "arenaInner")


def is_section_key(key: str) -> bool:
    return key != STAGE_KEY and key not in ALL_DECORATION_KEYS


@dataclass(frozen=True)
class Polar:
    """Elliptical wedge: seats follow the curve instead of a rectangular grid."""

    center: Point
    start_angle: float
    end_angle: float
    inner_radius_x: float
    inner_radius_y: float
    outer_radius_x: float
    outer_radius_y: float

    @classmethod
    def ring(
        cls,
        center: Point,
        angle_start: float,
        angle_end: float,
        radius_inner: float,
        radius_outer: float,
        oval_ratio: float,
    ) -> "Polar":
        return cls(
            center=center,
            start_angle=angle_start,
            end_angle=angle_end,
            inner_radius_x=radius_inner * oval_ratio,
            inner_radius_y=radius_inner,
            outer_radius_x=radius_outer * oval_ratio,
            outer_radius_y=radius_outer,
        )

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    def radii_at(self, t: float) -> tuple[float, float]:
        """Radii interpolated between the inner (t=0) and outer (t=1) ellipse."""
        return (
            self.inner_radius_x + t * (self.outer_radius_x - self.inner_radius_x),
            self.inner_radius_y + t * (self.outer_radius_y - self.inner_radius_y),
        )

    def angle_at(self, t: float) -> float:
        return self.start_angle + t * self.span

    def point_at(self, radius_t: float, angle_t: float) -> Point:
        rx, ry = self.radii_at(radius_t)
        return ellipse_point(self.center, rx, ry, self.angle_at(angle_t))

    def corners(self) -> tuple[Point, Point, Point, Point]:
        return wedge_corners(
            self.center,
            self.start_angle,
            self.end_angle,
            (self.inner_radius_x, self.inner_radius_y),
            (self.outer_radius_x, self.outer_radius_y),
        )

    def envelope_bounds(self) -> Bounds:
        """Corners plus any axis extreme of the inner/outer arcs inside the angle range."""
        pts = list(self.corners())
        lo, hi = sorted((self.start_angle, self.end_angle))
        k = math.ceil(lo / 90.0)
        while k * 90.0 <= hi:
            a = k * 90.0
            pts.append(ellipse_point(self.center, self.inner_radius_x, self.inner_radius_y, a))
            pts.append(ellipse_point(self.center, self.outer_radius_x, self.outer_radius_y, a))
            k += 1
        return bounds_of(pts)

    def contains(self, x: float, y: float, *, tol: float = 1e-6) -> bool:
        """True when (x, y) lies inside the radius/angle envelope of the wedge."""
        dx = x - self.center.x
        dy = self.center.y - y
        # Eccentric angle on the mid-radius ellipse, the same parameter ellipse_point takes.
        rx_mid, ry_mid = self.radii_at(0.5)
        angle = math.degrees(math.atan2(dy / ry_mid, dx / rx_mid)) % 360.0
        lo = min(self.start_angle, self.end_angle) % 360.0
        hi = lo + abs(self.span)
        if not (lo - tol <= angle <= hi + tol or lo - tol <= angle + 360.0 <= hi + tol):
            return False

        def _norm(rx: float, ry: float) -> float:
            return (dx / rx) ** 2 + (dy / ry) ** 2

        inner = _norm(self.inner_radius_x, self.inner_radius_y) if self.inner_radius_x and self.inner_radius_y else math.inf
        outer = _norm(self.outer_radius_x, self.outer_radius_y)
        return inner >= 1 - tol and outer <= 1 + tol

    def entrance_path(self) -> str:
        return arc_path(self.center, self.inner_radius_x, self.inner_radius_y, self.start_angle, self.end_angle)

    def to_dict(self) -> dict:
        return {
            "center": self.center.to_dict(),
            "startAngle": self.start_angle,
            "endAngle": self.end_angle,
            "innerRadiusX": self.inner_radius_x,
            "innerRadiusY": self.inner_radius_y,
            "outerRadiusX": self.outer_radius_x,
            "outerRadiusY": self.outer_radius_y,
        }


@dataclass(frozen=True)
class SectionShape:
    path: str
    bounds: Bounds
    label: Point
    polar: Optional[Polar] = None
    cutouts: tuple[str, ...] = field(default_factory=tuple)
    fill_rule: Optional[str] = None
    entrance_path: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict = {
            "path": self.path,
            "bounds": self.bounds.to_dict(),
            "label": self.label.to_dict(),
        }
        if self.polar is not None:
            out["polar"] = self.polar.to_dict()
        if self.cutouts:
            out["cutouts"] = list(self.cutouts)
        if self.fill_rule:
            out["fillRule"] = self.fill_rule
        if self.entrance_path:
            out["entrancePath"] = self.entrance_path
        return out


# Section id, "stage" or a decoration key -> shape.
VenueLayout = dict[str, SectionShape]


def layout_to_dict(layout: VenueLayout) -> dict:
    return {key: shape.to_dict() for key, shape in layout.items()}


def rect_shape(x: float, y: float, width: float, height: float) -> SectionShape:
    return SectionShape(
        path=rect_path(x, y, width, height),
        bounds=Bounds(x, y, width, height),
        label=Point(x + width / 2, y + height / 2),
    )


def wedge_shape(polar: Polar, *, cutouts: Iterable[str] = ()) -> SectionShape:
    """Curved section: chord outline, polar parameters and the inner arc as entrance."""
    rx_mid, ry_mid = polar.radii_at(0.5)
    return SectionShape(
        path=polygon_path(polar.corners()),
        bounds=polar.envelope_bounds(),
        label=ellipse_point(polar.center, rx_mid, ry_mid, polar.angle_at(0.5)),
        polar=polar,
        cutouts=tuple(cutouts),
        entrance_path=polar.entrance_path(),
    )


def filter_layout(layout: VenueLayout, sections: Iterable[Section]) -> VenueLayout:
    """Keep the stage, shapes for the given sections and every decoration present."""
    out: VenueLayout = {}
    if STAGE_KEY in layout:
        out[STAGE_KEY] = layout[STAGE_KEY]
    for sec in sections:
        shape = layout.get(sec.id)
        if shape is not None:
            out[sec.id] = shape
    for key in sorted(ALL_DECORATION_KEYS):
        if key in layout:
            out[key] = layout[key]
    return out


def layout_bounds(layout: VenueLayout) -> Bounds:
    result: Optional[Bounds] = None
    for shape in layout.values():
        result = shape.bounds if result is None else result.union(shape.bounds)
    return result if result is not None else Bounds(0.0, 0.0, 0.0, 0.0)
