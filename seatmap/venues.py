"""
Curated venue layouts and the per-venue registry.

A venue is registered as one of three variants:

* FixedLayout    - a shape table used verbatim.
* BuiltLayout    - a function of the event's sections (the map depends on which
                   sections are on sale).
* ExternalLayout - geometry authored outside the engine (an SVG map). The
                   engine returns an empty layout for these; see svg_layout.

Unregistered venues use the procedural fallback.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import partial
from typing import Callable, Mapping, Optional, Union

from loguru import logger

from .geometry import Bounds, Point, ellipse_bounds, ellipse_path, ellipse_ring_path, hole_band
from .procedural import (
    CENTER,
    OVAL_RATIO,
    build_procedural_layout,
    floor_block,
    first_in_tier,
    sections_in_tier,
    stage_block,
    wedge_angles,
)
from .schemas import Section, Tier, VenueSchematic, index_by_name
from .shapes import STAGE_KEY, Polar, SectionShape, VenueLayout, filter_layout, rect_shape, wedge_shape


@dataclass(frozen=True)
class ViewBox:
    width: float
    height: float
    min_x: float = 0.0
    min_y: float = 0.0

    def to_attr(self) -> str:
        return f"{self.min_x:g} {self.min_y:g} {self.width:g} {self.height:g}"

    def to_dict(self) -> dict:
        return {"minX": self.min_x, "minY": self.min_y, "width": self.width, "height": self.height}


DEFAULT_VIEW_BOX = ViewBox(1728, 800)
MSG_VIEW_BOX = ViewBox(2000, 2000)
# Full SVG is 2000x2000; the arena content fits in this region.
CRYPTO_ARENA_VIEW_BOX = ViewBox(1369, 1162, min_x=313, min_y=575)


@dataclass(frozen=True)
class FixedLayout:
    layout: VenueLayout
    view_box: Optional[ViewBox] = None


@dataclass(frozen=True)
class BuiltLayout:
    builder: Callable[[list[Section]], VenueLayout]
    view_box: Optional[ViewBox] = None


@dataclass(frozen=True)
class ExternalLayout:
    source: str
    element_ids: tuple[str, ...]
    floor_element: Optional[str] = None
    stage_element: Optional[str] = None
    view_box: Optional[ViewBox] = None


LayoutConfig = Union[FixedLayout, BuiltLayout, ExternalLayout]


# ---------------------------------------------------------------------------
# Asymmetric dual-ring bowl
# ---------------------------------------------------------------------------

# Left and right halves sweep independently so wedge counts and widths may differ.
LEFT_ARC = (5.0, 88.0)
RIGHT_ARC = (92.0, 175.0)

LOWER_BOWL_OVAL = 1.38
WALKWAY_BAND = 12.0

BOWL_LOWER = (220.0, 380.0)
BOWL_UPPER = (380.0, 520.0)
BOWL_TOP = (520.0, 640.0)


def split_ring_angles(count: int) -> list[tuple[float, float]]:
    """First ceil(n/2) wedges on the left arc, the rest on the right arc."""
    n_left = math.ceil(count / 2)
    return wedge_angles(n_left, *LEFT_ARC) + wedge_angles(count - n_left, *RIGHT_ARC)


def _add_bowl_ring(
    layout: VenueLayout,
    sections: list[Section],
    radius_inner: float,
    radius_outer: float,
    oval_ratio: float,
    walkway_radius: Optional[float] = None,
    band: float = WALKWAY_BAND,
) -> None:
    for sec, (a0, a1) in zip(sections, split_ring_angles(len(sections))):
        polar = Polar.ring(CENTER, a0, a1, radius_inner, radius_outer, oval_ratio)
        cutouts = []
        if walkway_radius is not None and radius_inner < walkway_radius < radius_outer:
            hole_inner = max(radius_inner, walkway_radius - band)
            hole_outer = min(radius_outer, walkway_radius + band)
            cutouts.append(hole_band(CENTER, a0, a1, hole_inner, hole_outer, oval_ratio))
        layout[sec.id] = wedge_shape(polar, cutouts=cutouts)


def _ellipse_shape(center: Point, radius: float, oval_ratio: float = OVAL_RATIO) -> SectionShape:
    rx, ry = radius * oval_ratio, radius
    return SectionShape(path=ellipse_path(center, rx, ry), bounds=ellipse_bounds(center, rx, ry), label=center)


def _walkway_shape(center: Point, radius: float, band: float = WALKWAY_BAND, oval_ratio: float = OVAL_RATIO) -> SectionShape:
    inner = ((radius - band) * oval_ratio, radius - band)
    outer = ((radius + band) * oval_ratio, radius + band)
    return SectionShape(
        path=ellipse_ring_path(center, inner, outer),
        bounds=ellipse_bounds(center, *outer),
        label=center,
        fill_rule="evenodd",
    )


def _label_only(bounds: Bounds, label: Point) -> SectionShape:
    return SectionShape(path="", bounds=bounds, label=label)


def build_dual_ring_bowl(sections: list[Section]) -> VenueLayout:
    """Stage, floor, three seating rings with walkway gaps, boundary rings and bridge label."""
    layout: VenueLayout = {STAGE_KEY: stage_block()}

    floor = first_in_tier(sections, Tier.floor)
    if floor is not None:
        layout[floor.id] = floor_block()

    _add_bowl_ring(
        layout, sections_in_tier(sections, Tier.lower), *BOWL_LOWER, LOWER_BOWL_OVAL, walkway_radius=BOWL_LOWER[1]
    )
    _add_bowl_ring(layout, sections_in_tier(sections, Tier.upper), *BOWL_UPPER, OVAL_RATIO, walkway_radius=BOWL_UPPER[1])
    _add_bowl_ring(layout, sections_in_tier(sections, Tier.top), *BOWL_TOP, OVAL_RATIO)

    layout["arenaInner"] = _ellipse_shape(CENTER, BOWL_LOWER[0])
    layout["walkwayLower"] = _walkway_shape(CENTER, BOWL_LOWER[1])
    layout["walkwayUpper"] = _walkway_shape(CENTER, BOWL_UPPER[1])
    layout["arenaOuter"] = _ellipse_shape(CENTER, BOWL_TOP[1])
    layout["chaseBridgeLabel"] = _label_only(Bounds(CENTER.x - 50, 68, 100, 24), Point(CENTER.x, 80))
    return layout


# ---------------------------------------------------------------------------
# Schematic-driven layout
# ---------------------------------------------------------------------------

MSG_SCHEMATIC = VenueSchematic.model_validate(
    {
        "venue": "Madison Square Garden",
        "version": "schematic_v1",
        "viewBox": "0 0 1000 1000",
        "center": {"x": 500, "y": 500},
        "stage": {"type": "rect", "x": 350, "y": 370, "width": 300, "height": 160, "label": "STAGE"},
        "floor": {
            "type": "rect",
            "x": 380,
            "y": 550,
            "width": 240,
            "height": 130,
            "sections": ["F1", "F2", "F3", "F4"],
        },
        "rings": [
            {
                "id": "lower_bowl_100",
                "level": "100",
                "innerRadius": {"x": 210, "y": 170},
                "outerRadius": {"x": 290, "y": 235},
                "sectionCount": 18,
                "sectionStart": 101,
                "interactive": True,
            },
            {
                "id": "walkway_1",
                "type": "walkway",
                "innerRadius": {"x": 295, "y": 240},
                "outerRadius": {"x": 320, "y": 260},
                "interactive": False,
            },
            {
                "id": "upper_bowl_200",
                "level": "200",
                "innerRadius": {"x": 325, "y": 265},
                "outerRadius": {"x": 385, "y": 315},
                "sectionCount": 20,
                "sectionStart": 201,
                "interactive": True,
            },
            {
                "id": "walkway_2",
                "type": "walkway",
                "innerRadius": {"x": 390, "y": 320},
                "outerRadius": {"x": 410, "y": 340},
                "interactive": False,
            },
            {
                "id": "upper_bridge_300",
                "level": "300",
                "innerRadius": {"x": 415, "y": 345},
                "outerRadius": {"x": 470, "y": 390},
                "sectionCount": 24,
                "sectionStart": 301,
                "interactive": True,
            },
        ],
        "chaseBridge": {
            "type": "rect",
            "x": 230,
            "y": 285,
            "width": 540,
            "height": 55,
            "label": "CHASE BRIDGE",
            "zIndex": 5,
        },
    }
)


def build_schematic_layout(schematic: VenueSchematic, sections: list[Section]) -> VenueLayout:
    center = Point(schematic.center.x, schematic.center.y)
    by_name = index_by_name(sections)
    st = schematic.stage
    layout: VenueLayout = {STAGE_KEY: rect_shape(st.x, st.y, st.width, st.height)}

    fl = schematic.floor
    if fl is not None:
        listed = [by_name[n] for n in fl.sections if n in by_name]
        if listed:
            strip = fl.width / len(fl.sections)
            for idx, name in enumerate(fl.sections):
                sec = by_name.get(name)
                if sec is not None:
                    layout[sec.id] = rect_shape(fl.x + idx * strip, fl.y, strip, fl.height)
        else:
            floor = first_in_tier(sections, Tier.floor)
            if floor is not None:
                layout[floor.id] = rect_shape(fl.x, fl.y, fl.width, fl.height)

    seating = []
    for ring in schematic.rings:
        inner = (ring.inner_radius.x, ring.inner_radius.y)
        outer = (ring.outer_radius.x, ring.outer_radius.y)
        if ring.type == "walkway":
            layout[ring.id] = SectionShape(
                path=ellipse_ring_path(center, inner, outer),
                bounds=ellipse_bounds(center, *outer),
                label=center,
                fill_rule="evenodd",
            )
            continue
        if not ring.interactive or ring.section_count <= 0:
            continue
        seating.append(ring)
        step = 360.0 / ring.section_count
        for k in range(ring.section_count):
            sec = by_name.get(str(ring.section_start + k))
            if sec is None:
                continue
            # Numbered clockwise from twelve o'clock.
            a1 = 90.0 - k * step
            polar = Polar(center, a1 - step, a1, inner[0], inner[1], outer[0], outer[1])
            layout[sec.id] = wedge_shape(polar)

    if seating:
        first, last = seating[0], seating[-1]
        rx, ry = first.inner_radius.x, first.inner_radius.y
        layout["arenaInner"] = SectionShape(ellipse_path(center, rx, ry), ellipse_bounds(center, rx, ry), center)
        rx, ry = last.outer_radius.x, last.outer_radius.y
        layout["arenaOuter"] = SectionShape(ellipse_path(center, rx, ry), ellipse_bounds(center, rx, ry), center)

    cb = schematic.chase_bridge
    if cb is not None:
        layout["chaseBridge"] = rect_shape(cb.x, cb.y, cb.width, cb.height)
        bridge = layout["chaseBridge"]
        layout["chaseBridgeLabel"] = _label_only(bridge.bounds, bridge.label)
    return layout


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

MSG_SVG_ELEMENTS = tuple(f"section-{n}" for n in (*range(101, 107), *range(201, 207), *range(301, 307)))
CRYPTO_SVG_ELEMENTS = tuple(f"section-{n}" for n in (*range(101, 107), *range(201, 207)))

_schematic_width, _schematic_height = MSG_SCHEMATIC.view_box_size()

VENUE_LAYOUTS: dict[str, LayoutConfig] = {
    # Madison Square Garden: geometry comes from the venue's SVG map only.
    "v1": ExternalLayout(
        source="venue-map-msg.svg",
        element_ids=MSG_SVG_ELEMENTS,
        floor_element="msg-floor",
        stage_element="msg-stage",
        view_box=MSG_VIEW_BOX,
    ),
    # Crypto.com Arena: SVG map as well.
    "v2": ExternalLayout(
        source="crypto-arena.svg",
        element_ids=CRYPTO_SVG_ELEMENTS,
        floor_element="crypto-floor",
    ),
    # Mercedes-Benz Stadium: stadium-style bowl built from the event's sections.
    "v8": BuiltLayout(build_dual_ring_bowl),
    "msg_schematic": BuiltLayout(
        partial(build_schematic_layout, MSG_SCHEMATIC),
        view_box=ViewBox(_schematic_width, _schematic_height),
    ),
}


def view_box(
    venue_id: Optional[str],
    event_category: Optional[str] = None,
    registry: Optional[Mapping[str, LayoutConfig]] = None,
) -> ViewBox:
    if venue_id == "v2" and event_category == "sports":
        return CRYPTO_ARENA_VIEW_BOX
    reg = VENUE_LAYOUTS if registry is None else registry
    config = reg.get(venue_id) if venue_id is not None else None
    if config is not None and config.view_box is not None:
        return config.view_box
    return DEFAULT_VIEW_BOX


def build_layout(
    venue_id: Optional[str],
    sections: list[Section],
    registry: Optional[Mapping[str, LayoutConfig]] = None,
) -> VenueLayout:
    """
    Venue layout for the sections of one event.

    Registered venues use their curated layout (builder errors propagate);
    external-geometry venues yield an empty layout; everything else falls back
    to the procedural layout. The result only holds the stage, the given
    sections and decoration keys.
    """
    if not sections:
        return {}

    reg = VENUE_LAYOUTS if registry is None else registry
    config = reg.get(venue_id) if venue_id is not None else None

    if config is None:
        layout = build_procedural_layout(sections)
    elif isinstance(config, FixedLayout):
        layout = config.layout
    elif isinstance(config, BuiltLayout):
        layout = config.builder(sections)
    elif isinstance(config, ExternalLayout):
        logger.debug("venue {} uses external geometry from {}", venue_id, config.source)
        return {}
    else:
        raise TypeError(f"unsupported layout config for venue {venue_id!r}: {config!r}")

    out = filter_layout(layout, sections)
    logger.debug("layout for venue {}: {} of {} shapes kept", venue_id, len(out), len(layout))
    return out
