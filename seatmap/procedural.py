"""
Procedural venue layouts for venues without a curated map.

Concentric ring model: stage below center, floor block above the stage, lower
and upper tiers as equal angular slices of a half ellipse. Catalogs with at
most one lower and one upper section get the simpler block model instead.
"""

from __future__ import annotations

from typing import Iterable, Optional

from loguru import logger

from .geometry import Point, bounds_of, ellipse_point, ring_wedge_corners, ring_wedge_path
from .schemas import Section, Tier
from .shapes import STAGE_KEY, SectionShape, VenueLayout, rect_shape

CENTER = Point(864.0, 420.0)
OVAL_RATIO = 1.35

STAGE_Y = 720.0
STAGE_WIDTH = 600.0
STAGE_HEIGHT = 80.0

FLOOR_Y = 580.0
FLOOR_WIDTH = 360.0
FLOOR_HEIGHT = 70.0

# Half ellipse covered by each tier, in degrees.
ARC_START = 5.0
ARC_END = 175.0

LOWER_RING = (220.0, 380.0)
UPPER_RING = (380.0, 520.0)


def sections_in_tier(sections: Iterable[Section], tier: Tier) -> list[Section]:
    return sorted((s for s in sections if s.tier == tier), key=lambda s: s.order)


def first_in_tier(sections: Iterable[Section], tier: Tier) -> Optional[Section]:
    for s in sections:
        if s.tier == tier:
            return s
    return None


def stage_block(center: Point = CENTER) -> SectionShape:
    return rect_shape(center.x - STAGE_WIDTH / 2, STAGE_Y, STAGE_WIDTH, STAGE_HEIGHT)


def floor_block(center: Point = CENTER) -> SectionShape:
    return rect_shape(center.x - FLOOR_WIDTH / 2, FLOOR_Y, FLOOR_WIDTH, FLOOR_HEIGHT)


def wedge_angles(count: int, start: float = ARC_START, end: float = ARC_END) -> list[tuple[float, float]]:
    """Equal, gap-free slices of [start, end]."""
    n = max(1, count)
    step = (end - start) / n
    return [(start + i * step, start + (i + 1) * step) for i in range(count)]


def _ring_wedges(
    layout: VenueLayout,
    sections: list[Section],
    radius_inner: float,
    radius_outer: float,
    center: Point = CENTER,
    oval_ratio: float = OVAL_RATIO,
) -> None:
    mid_rx = (radius_inner + radius_outer) / 2 * oval_ratio
    mid_ry = (radius_inner + radius_outer) / 2
    for sec, (a0, a1) in zip(sections, wedge_angles(len(sections))):
        corners = ring_wedge_corners(center, a0, a1, radius_inner, radius_outer, oval_ratio)
        layout[sec.id] = SectionShape(
            path=ring_wedge_path(center, a0, a1, radius_inner, radius_outer, oval_ratio),
            bounds=bounds_of(corners),
            label=ellipse_point(center, mid_rx, mid_ry, (a0 + a1) / 2),
        )


def build_concentric_layout(sections: list[Section]) -> VenueLayout:
    layout: VenueLayout = {STAGE_KEY: stage_block()}

    floor = first_in_tier(sections, Tier.floor)
    if floor is not None:
        layout[floor.id] = floor_block()

    _ring_wedges(layout, sections_in_tier(sections, Tier.lower), *LOWER_RING)
    _ring_wedges(layout, sections_in_tier(sections, Tier.upper), *UPPER_RING)
    return layout


def build_block_layout(sections: list[Section]) -> VenueLayout:
    """One rectangle per tier: floor, lower and upper stacked above the stage."""
    layout: VenueLayout = {STAGE_KEY: rect_shape(250, 700, 500, 80)}

    blocks = {
        Tier.floor: (350, 560, 300, 80),
        Tier.lower: (200, 320, 600, 200),
        Tier.upper: (120, 80, 760, 200),
    }
    for tier, rect in blocks.items():
        sec = first_in_tier(sections, tier)
        if sec is not None:
            layout[sec.id] = rect_shape(*rect)
    return layout


def build_procedural_layout(sections: list[Section]) -> VenueLayout:
    lower = sections_in_tier(sections, Tier.lower)
    upper = sections_in_tier(sections, Tier.upper)
    if len(lower) > 1 or len(upper) > 1:
        logger.debug("procedural layout: concentric rings (lower={}, upper={})", len(lower), len(upper))
        return build_concentric_layout(sections)
    logger.debug("procedural layout: tier blocks")
    return build_block_layout(sections)
