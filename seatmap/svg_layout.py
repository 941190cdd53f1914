"""
Layouts for venues whose geometry is authored as an SVG map.

Each section is one ``path`` (or ``polygon``) element with a known id:
``section-101`` becomes layout key ``101``, the floor element maps to the
catalog's floor section and the stage element to ``stage``.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Mapping, Optional

from loguru import logger

from .geometry import GeometryError, Point, path_bounds, polygon_path, subpath_count
from .procedural import first_in_tier
from .schemas import Section, Tier
from .shapes import STAGE_KEY, SectionShape, VenueLayout, filter_layout
from .venues import VENUE_LAYOUTS, ExternalLayout, LayoutConfig

SECTION_PREFIX = "section-"
DEFAULT_FLOOR_KEY = "floor"

_NUM_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _local_tag(tag: str) -> str:
    """Strip namespace from an element tag."""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _points_to_path(points: Optional[str]) -> Optional[str]:
    coords = [float(n) for n in _NUM_RE.findall(points or "")]
    if len(coords) < 6:
        return None
    return polygon_path([Point(coords[i], coords[i + 1]) for i in range(0, len(coords) - 1, 2)])


def element_path(element: ET.Element) -> Optional[str]:
    """Path data of a ``path`` element, or a polygon's points as a closed path."""
    d = element.get("d")
    if d:
        return d
    if _local_tag(element.tag).lower() == "polygon":
        return _points_to_path(element.get("points"))
    return None


def _index_by_id(root: ET.Element) -> dict[str, ET.Element]:
    out: dict[str, ET.Element] = {}
    for el in root.iter():
        el_id = el.get("id")
        if el_id and el_id not in out:
            out[el_id] = el
    return out


def layout_key(element_id: str, external: ExternalLayout, floor_key: str) -> str:
    if external.stage_element is not None and element_id == external.stage_element:
        return STAGE_KEY
    if external.floor_element is not None and element_id == external.floor_element:
        return floor_key
    if element_id.startswith(SECTION_PREFIX):
        return element_id[len(SECTION_PREFIX):]
    return element_id


def shape_from_path(d: str) -> SectionShape:
    bounds = path_bounds(d)
    return SectionShape(
        path=d,
        bounds=bounds,
        label=bounds.center,
        # outer boundary plus inner cutouts
        fill_rule="evenodd" if subpath_count(d) > 1 else None,
    )


def layout_from_svg(svg_text: str, sections: list[Section], external: ExternalLayout) -> VenueLayout:
    """
    Shapes for every listed element present in the SVG document.

    Raises GeometryError when the document is not well-formed XML or an
    element carries malformed path data.
    """
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as e:
        raise GeometryError(f"failed to parse SVG map {external.source}: {e}") from e

    floor = first_in_tier(sections, Tier.floor)
    floor_key = floor.id if floor is not None else DEFAULT_FLOOR_KEY

    element_ids = list(external.element_ids)
    for extra in (external.floor_element, external.stage_element):
        if extra is not None and extra not in element_ids:
            element_ids.append(extra)

    elements = _index_by_id(root)
    layout: VenueLayout = {}
    for element_id in element_ids:
        el = elements.get(element_id)
        if el is None:
            logger.debug("{}: no element with id {!r}", external.source, element_id)
            continue
        d = element_path(el)
        if not d:
            continue
        layout[layout_key(element_id, external, floor_key)] = shape_from_path(d)
    return layout


def load_external_layout(
    venue_id: str,
    svg_text: str,
    sections: list[Section],
    registry: Optional[Mapping[str, LayoutConfig]] = None,
) -> VenueLayout:
    reg = VENUE_LAYOUTS if registry is None else registry
    config = reg.get(venue_id)
    if not isinstance(config, ExternalLayout):
        raise ValueError(f"venue {venue_id!r} does not use an external SVG map")
    return filter_layout(layout_from_svg(svg_text, sections, config), sections)
