from __future__ import annotations

from typing import Optional

from .tiles import VenueTile
from .venues import DEFAULT_VIEW_BOX, ViewBox

SECTION_FILL = "#dbe4f0"
SECTION_STROKE = "#5b6b80"
ROW_STROKE = "#9aa7b8"
SEAT_FILL = "#2f6fdb"
OUTLINE_FILL = "#f3f4f6"


def _polygon_d(path: str, cutouts: tuple[str, ...]) -> str:
    return " ".join([path, *cutouts]) if cutouts else path


def render_tile_svg(tile: VenueTile, view_box: Optional[ViewBox] = None, *, seat_radius: float = 3.0) -> str:
    """Standalone SVG preview of one tile: polygons, then row lines, then seat dots."""
    vb = view_box or DEFAULT_VIEW_BOX
    fill = OUTLINE_FILL if tile.zoom == 0 else SECTION_FILL

    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{vb.to_attr()}" '
        f'width="{vb.width:g}" height="{vb.height:g}" data-zoom="{tile.zoom}">'
    ]
    for poly in tile.polygons:
        if not poly.path:
            continue
        fill_rule = "evenodd" if poly.cutouts else (poly.fill_rule or "nonzero")
        attrs = f'fill="{fill}" stroke="{SECTION_STROKE}" fill-rule="{fill_rule}"'
        if poly.meta_index is not None:
            attrs += f' data-meta="{poly.meta_index}"'
        lines.append(f'  <path d="{_polygon_d(poly.path, poly.cutouts)}" {attrs}/>')
    for ln in tile.lines:
        lines.append(f'  <path d="{ln.path}" fill="none" stroke="{ROW_STROKE}" data-meta="{ln.meta_index}"/>')
    for pt in tile.points:
        lines.append(
            f'  <circle cx="{pt.x:.2f}" cy="{pt.y:.2f}" r="{seat_radius:g}" fill="{SEAT_FILL}" data-meta="{pt.meta_index}"/>'
        )
    lines.append("</svg>")
    return "\n".join(lines) + "\n"
