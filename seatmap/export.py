"""
GeoJSON export of venue layouts.

Layout coordinates have a top-left origin (SVG); features are flipped to a
bottom-left origin using the viewport height so they can be loaded by map and
analytics tooling as-is.
"""

from __future__ import annotations

from typing import Iterable, Optional

from loguru import logger
from shapely.affinity import affine_transform
from shapely.geometry import Polygon, box, mapping

from .config import get_settings
from .geometry import Bounds, flatten_path
from .placement import seat_cell_bounds
from .schemas import Seat, Section
from .shapes import ALL_DECORATION_KEYS, STAGE_KEY, SectionShape, VenueLayout
from .venues import LayoutConfig, build_layout


def _flip(geom, view_box_height: float):
    return affine_transform(geom, [1, 0, 0, -1, 0, view_box_height])


def shape_polygon(shape: SectionShape, view_box_height: float) -> Optional[Polygon]:
    """Outer boundary of a shape as a flipped polygon; cutouts are not carried over."""
    subpaths = flatten_path(shape.path)
    if not subpaths or len(subpaths[0]) < 3:
        return None
    return _flip(Polygon(subpaths[0]), view_box_height)


def _feature(feature_id: str, geom, properties: dict) -> dict:
    geometry = mapping(geom)
    # mapping() yields tuples; plain lists serialize the same everywhere.
    geometry = {"type": geometry["type"], "coordinates": [[list(pt) for pt in ring] for ring in geometry["coordinates"]]}
    return {"type": "Feature", "id": feature_id, "geometry": geometry, "properties": properties}


def layout_to_features(
    layout: VenueLayout,
    sections: list[Section],
    view_box_height: float,
    *,
    include_stage: bool = True,
) -> list[dict]:
    sections_by_id = {s.id: s for s in sections}
    features = []
    for key, shape in layout.items():
        if key in ALL_DECORATION_KEYS or (key == STAGE_KEY and not include_stage):
            continue
        polygon = shape_polygon(shape, view_box_height)
        if polygon is None:
            logger.debug("skipping {!r}: path has fewer than 3 vertices", key)
            continue
        sec = sections_by_id.get(key)
        features.append(
            _feature(
                key,
                polygon,
                {
                    "sectionId": key,
                    "name": sec.name if sec is not None else key,
                    "tier": sec.tier.value if sec is not None else None,
                },
            )
        )
    return features


def seat_features(cells: dict[str, Bounds], view_box_height: float) -> list[dict]:
    out = []
    for seat_id, b in cells.items():
        cell = _flip(box(b.x, b.y, b.max_x, b.max_y), view_box_height)
        out.append(_feature(seat_id, cell, {"seatId": seat_id, "type": "seat"}))
    return out


def feature_collection(features: list[dict]) -> dict:
    return {"type": "FeatureCollection", "features": features}


def venue_geojson(
    venue_id: Optional[str],
    sections: list[Section],
    seats: Optional[Iterable[Seat]] = None,
    *,
    include_seats: bool = False,
    view_box_height: Optional[float] = None,
    registry: Optional[dict[str, LayoutConfig]] = None,
) -> dict:
    """Section (and stage) polygons for a venue, plus one rectangle per seat when asked."""
    layout = build_layout(venue_id, sections, registry=registry)
    return layout_geojson(layout, sections, seats, include_seats=include_seats, view_box_height=view_box_height)


def layout_geojson(
    layout: VenueLayout,
    sections: list[Section],
    seats: Optional[Iterable[Seat]] = None,
    *,
    include_seats: bool = False,
    view_box_height: Optional[float] = None,
) -> dict:
    height = get_settings().export_view_box_height if view_box_height is None else view_box_height
    features = layout_to_features(layout, sections, height)

    seats = list(seats or [])
    if include_seats and seats:
        features.extend(seat_features(seat_cell_bounds(seats, layout, sections), height))
    return feature_collection(features)


def section_geojson(layout: VenueLayout, sections: list[Section], view_box_height: float = 800) -> dict:
    return feature_collection(layout_to_features(layout, sections, view_box_height, include_stage=False))
