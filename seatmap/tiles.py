"""
Zoom-indexed venue tiles.

Four tiles per venue, each self-contained:

    0  venue silhouette (boundary rings only)
    1  section polygons
    2  sections + row entrance lines
    3  sections + rows + seat points

Each tile carries its own metadata table; polygons, lines and points refer to
it by index. Higher zooms reuse the polygon/line lists of the lower ones and
append to a copy of the metadata, so indices stay valid across levels.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal, Optional

from loguru import logger

from .geometry import Bounds
from .placement import place_seats, section_key
from .rows import row_entrances
from .schemas import Seat, Section, index_by_name
from .shapes import BOUNDARY_KEYS, VenueLayout, is_section_key, layout_bounds
from .venues import LayoutConfig, build_layout

TILE_ZOOMS = (0, 1, 2, 3)

MetaType = Literal["section", "row", "seat"]


def _compact(d: dict) -> dict:
    return {k: v for k, v in d.items() if v is not None}


@dataclass(frozen=True)
class TilePolygon:
    path: str
    cutouts: tuple[str, ...] = ()
    fill_rule: Optional[str] = None
    meta_index: Optional[int] = None

    def to_dict(self) -> dict:
        return _compact(
            {
                "path": self.path,
                "cutouts": list(self.cutouts) if self.cutouts else None,
                "fillRule": self.fill_rule,
                "metaIndex": self.meta_index,
            }
        )


@dataclass(frozen=True)
class TileLine:
    path: str
    meta_index: Optional[int] = None

    def to_dict(self) -> dict:
        return _compact({"path": self.path, "metaIndex": self.meta_index})


@dataclass(frozen=True)
class TilePoint:
    x: float
    y: float
    meta_index: Optional[int] = None

    def to_dict(self) -> dict:
        return _compact({"x": self.x, "y": self.y, "metaIndex": self.meta_index})


@dataclass(frozen=True)
class TileMetadata:
    type: MetaType
    section_id: str
    section_name: Optional[str] = None
    tier: Optional[str] = None
    row: Optional[str] = None
    seat_id: Optional[str] = None
    seat_number: Optional[str] = None

    def to_dict(self) -> dict:
        return _compact(
            {
                "type": self.type,
                "sectionId": self.section_id,
                "sectionName": self.section_name,
                "tier": self.tier,
                "row": self.row,
                "seatId": self.seat_id,
                "seatNumber": self.seat_number,
            }
        )


@dataclass
class VenueTile:
    zoom: int
    bounds: Bounds
    polygons: list[TilePolygon] = field(default_factory=list)
    lines: list[TileLine] = field(default_factory=list)
    points: list[TilePoint] = field(default_factory=list)
    metadata: list[TileMetadata] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "zoom": self.zoom,
            "bounds": self.bounds.to_dict(),
            "polygons": [p.to_dict() for p in self.polygons],
            "lines": [ln.to_dict() for ln in self.lines],
            "points": [p.to_dict() for p in self.points],
            "metadata": [m.to_dict() for m in self.metadata],
        }


def tiles_to_dict(tiles: dict[int, VenueTile]) -> dict[str, dict]:
    return {str(zoom): tile.to_dict() for zoom, tile in sorted(tiles.items())}


def build_tiles_from_layout(
    layout: VenueLayout, sections: list[Section], seats: Iterable[Seat]
) -> dict[int, VenueTile]:
    seats = list(seats)
    bounds = layout_bounds(layout)
    sections_by_id = {s.id: s for s in sections}

    # zoom 0: silhouette
    outline = [
        TilePolygon(path=layout[key].path, cutouts=layout[key].cutouts, fill_rule=layout[key].fill_rule)
        for key in BOUNDARY_KEYS
        if key in layout
    ]
    tile0 = VenueTile(zoom=0, bounds=bounds, polygons=outline)

    # zoom 1: one polygon per section
    polygons: list[TilePolygon] = []
    meta1: list[TileMetadata] = []
    for key, shape in layout.items():
        if not is_section_key(key):
            continue
        sec = sections_by_id.get(key)
        meta1.append(
            TileMetadata(
                type="section",
                section_id=key,
                section_name=sec.name if sec is not None else key,
                tier=sec.tier.value if sec is not None else None,
            )
        )
        polygons.append(
            TilePolygon(path=shape.path, cutouts=shape.cutouts, fill_rule=shape.fill_rule, meta_index=len(meta1) - 1)
        )
    tile1 = VenueTile(zoom=1, bounds=bounds, polygons=polygons, metadata=meta1)

    # zoom 2: + row entrances
    meta2 = list(meta1)
    lines: list[TileLine] = []
    for entrance in row_entrances(seats, layout, sections):
        meta2.append(TileMetadata(type="row", section_id=entrance.section_id, row=entrance.row))
        lines.append(TileLine(path=entrance.path, meta_index=len(meta2) - 1))
    tile2 = VenueTile(zoom=2, bounds=bounds, polygons=polygons, lines=lines, metadata=meta2)

    # zoom 3: + seats
    meta3 = list(meta2)
    points: list[TilePoint] = []
    by_name = index_by_name(sections)
    seats_by_id = {seat.id: seat for seat in seats}
    for seat_id, pos in place_seats(seats, layout, sections).items():
        seat = seats_by_id[seat_id]
        meta3.append(
            TileMetadata(
                type="seat",
                section_id=section_key(seat.section, by_name),
                row=seat.row,
                seat_id=seat.id,
                seat_number=seat.number,
            )
        )
        points.append(TilePoint(x=pos.x, y=pos.y, meta_index=len(meta3) - 1))
    tile3 = VenueTile(zoom=3, bounds=bounds, polygons=polygons, lines=lines, points=points, metadata=meta3)

    logger.debug(
        "tiles: {} outline, {} sections, {} rows, {} seats",
        len(outline),
        len(polygons),
        len(lines),
        len(points),
    )
    return {0: tile0, 1: tile1, 2: tile2, 3: tile3}


def build_tiles(
    venue_id: Optional[str],
    sections: list[Section],
    seats: Iterable[Seat],
    registry: Optional[dict[str, LayoutConfig]] = None,
) -> dict[int, VenueTile]:
    layout = build_layout(venue_id, sections, registry=registry)
    return build_tiles_from_layout(layout, sections, seats)


def zoom_from_scale(scale: float) -> int:
    if scale < 0.5:
        return 0
    if scale < 1:
        return 1
    if scale < 2:
        return 2
    return 3
