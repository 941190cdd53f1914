from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from .config import get_settings
from .export import layout_geojson
from .geometry import GeometryError
from .logger_config import configure_logging
from .render import render_tile_svg
from .schemas import Catalog, CatalogError
from .shapes import VenueLayout, layout_to_dict
from .storage import dump_json, load_catalog, write_json, write_text
from .svg_layout import load_external_layout
from .tiles import TILE_ZOOMS, build_tiles_from_layout, tiles_to_dict, zoom_from_scale
from .venues import build_layout, view_box

DEFAULT_CATALOG = "catalog.json"


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--catalog",
        default=DEFAULT_CATALOG,
        help=f"Path to section/seat catalog JSON file (default: {DEFAULT_CATALOG})",
    )
    p.add_argument("--venue", default=None, help="Venue id (unregistered venues get a procedural layout)")
    p.add_argument("--svg", default=None, help="SVG map for venues with externally authored geometry")
    p.add_argument("--output", default=None, help="Write to this file instead of stdout")


def _layout(args: argparse.Namespace, catalog: Catalog) -> VenueLayout:
    if args.svg:
        svg_text = Path(args.svg).read_text(encoding="utf-8")
        return load_external_layout(args.venue, svg_text, catalog.sections)
    return build_layout(args.venue, catalog.sections)


def _emit(data: object, output: Optional[str]) -> None:
    if output:
        write_json(data, output)
        print(f"Wrote {output}")
    else:
        print(dump_json(data), end="")


def cmd_layout(args: argparse.Namespace) -> int:
    catalog = load_catalog(args.catalog)
    _emit(layout_to_dict(_layout(args, catalog)), args.output)
    return 0


def cmd_tiles(args: argparse.Namespace) -> int:
    catalog = load_catalog(args.catalog)
    tiles = build_tiles_from_layout(_layout(args, catalog), catalog.sections, catalog.seats)
    if args.zoom is not None:
        _emit(tiles[args.zoom].to_dict(), args.output)
    else:
        _emit(tiles_to_dict(tiles), args.output)
    return 0


def cmd_geojson(args: argparse.Namespace) -> int:
    catalog = load_catalog(args.catalog)
    data = layout_geojson(
        _layout(args, catalog),
        catalog.sections,
        catalog.seats,
        include_seats=args.include_seats,
        view_box_height=args.height,
    )
    _emit(data, args.output)
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    catalog = load_catalog(args.catalog)
    tiles = build_tiles_from_layout(_layout(args, catalog), catalog.sections, catalog.seats)
    svg = render_tile_svg(tiles[args.zoom], view_box(args.venue))
    if args.output:
        write_text(svg, args.output)
        print(f"Rendered zoom {args.zoom} to {args.output}")
    else:
        print(svg, end="")
    return 0


def cmd_zoom(args: argparse.Namespace) -> int:
    print(zoom_from_scale(args.scale))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="seatmap", description="Venue seat-map geometry and tiles (CLI).")
    p.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_layout = sub.add_parser("layout", help="Print the venue layout (section shapes) as JSON")
    _add_common_args(p_layout)
    p_layout.set_defaults(func=cmd_layout)

    p_tiles = sub.add_parser("tiles", help="Build zoom tiles for the catalog")
    _add_common_args(p_tiles)
    p_tiles.add_argument("--zoom", type=int, choices=TILE_ZOOMS, help="Only this zoom level")
    p_tiles.set_defaults(func=cmd_tiles)

    p_geojson = sub.add_parser("geojson", help="Export section polygons as a GeoJSON FeatureCollection")
    _add_common_args(p_geojson)
    p_geojson.add_argument("--include-seats", action="store_true", help="Add one rectangle per seat")
    p_geojson.add_argument("--height", type=float, default=None, help="Viewport height used for the y flip")
    p_geojson.set_defaults(func=cmd_geojson)

    p_render = sub.add_parser("render", help="Render one tile as an SVG preview")
    _add_common_args(p_render)
    p_render.add_argument("--zoom", type=int, choices=TILE_ZOOMS, required=True)
    p_render.set_defaults(func=cmd_render)

    p_zoom = sub.add_parser("zoom", help="Tile zoom level for a magnification factor")
    p_zoom.add_argument("scale", type=float)
    p_zoom.set_defaults(func=cmd_zoom)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else get_settings().log_level)
    try:
        return int(args.func(args))
    except (CatalogError, GeometryError, ValueError, OSError) as e:
        print(f"Error: {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
