from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from loguru import logger

from seatmap.config import settings
from seatmap.export import layout_geojson
from seatmap.geometry import GeometryError
from seatmap.logger_config import configure_logging
from seatmap.render import render_tile_svg
from seatmap.schemas import Catalog
from seatmap.shapes import VenueLayout, layout_to_dict
from seatmap.svg_layout import load_external_layout
from seatmap.tiles import TILE_ZOOMS, VenueTile, build_tiles_from_layout, tiles_to_dict, zoom_from_scale
from seatmap.venues import VENUE_LAYOUTS, ExternalLayout, build_layout, view_box

from .schemas import LayoutOut, SvgLayoutRequest, ZoomOut


app = FastAPI(title="Venue Seat Map API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup() -> None:
    configure_logging(settings.log_level)


def _layout(venue_id: str, catalog: Catalog) -> VenueLayout:
    try:
        return build_layout(venue_id, catalog.sections)
    except GeometryError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _layout_out(venue_id: str, layout: VenueLayout, event_category: Optional[str]) -> LayoutOut:
    return LayoutOut(
        venueId=venue_id,
        viewBox=view_box(venue_id, event_category).to_dict(),
        layout=layout_to_dict(layout),
    )


def _tile(venue_id: str, zoom: int, catalog: Catalog) -> VenueTile:
    if zoom not in TILE_ZOOMS:
        raise HTTPException(status_code=404, detail=f"zoom must be one of {list(TILE_ZOOMS)}")
    tiles = build_tiles_from_layout(_layout(venue_id, catalog), catalog.sections, catalog.seats)
    return tiles[zoom]


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.post("/venues/{venue_id}/layout", response_model=LayoutOut)
def venue_layout(venue_id: str, payload: Catalog, event_category: Optional[str] = None) -> LayoutOut:
    return _layout_out(venue_id, _layout(venue_id, payload), event_category)


@app.post("/venues/{venue_id}/svg-layout", response_model=LayoutOut)
def venue_svg_layout(venue_id: str, payload: SvgLayoutRequest, event_category: Optional[str] = None) -> LayoutOut:
    if not isinstance(VENUE_LAYOUTS.get(venue_id), ExternalLayout):
        raise HTTPException(status_code=404, detail="venue has no SVG map")
    try:
        layout = load_external_layout(venue_id, payload.svg, payload.sections)
    except GeometryError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _layout_out(venue_id, layout, event_category)


@app.post("/venues/{venue_id}/tiles")
def venue_tiles(venue_id: str, payload: Catalog) -> dict:
    tiles = build_tiles_from_layout(_layout(venue_id, payload), payload.sections, payload.seats)
    logger.debug("venue {}: built {} tiles", venue_id, len(tiles))
    return tiles_to_dict(tiles)


@app.post("/venues/{venue_id}/tiles/{zoom}")
def venue_tile(venue_id: str, zoom: int, payload: Catalog) -> dict:
    return _tile(venue_id, zoom, payload).to_dict()


@app.post("/venues/{venue_id}/tiles/{zoom}/svg")
def venue_tile_svg(venue_id: str, zoom: int, payload: Catalog, event_category: Optional[str] = None) -> Response:
    svg = render_tile_svg(_tile(venue_id, zoom, payload), view_box(venue_id, event_category))
    return Response(content=svg, media_type="image/svg+xml")


@app.post("/venues/{venue_id}/geojson")
def venue_geojson(
    venue_id: str,
    payload: Catalog,
    include_seats: bool = False,
    view_box_height: Optional[float] = Query(default=None, gt=0),
) -> dict:
    try:
        return layout_geojson(
            _layout(venue_id, payload),
            payload.sections,
            payload.seats,
            include_seats=include_seats,
            view_box_height=view_box_height,
        )
    except GeometryError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.get("/zoom", response_model=ZoomOut)
def zoom(scale: float) -> ZoomOut:
    return ZoomOut(scale=scale, zoom=zoom_from_scale(scale))
