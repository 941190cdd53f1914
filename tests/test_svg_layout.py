import unittest
import xml.etree.ElementTree as ET

from seatmap.geometry import Bounds, GeometryError
from seatmap.schemas import Section, Tier
from seatmap.shapes import STAGE_KEY
from seatmap.svg_layout import element_path, layout_from_svg, load_external_layout
from seatmap.venues import VENUE_LAYOUTS, ExternalLayout

SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 2000 2000">
  <g id="sections">
    <path id="section-101" d="M 100 100 L 200 100 L 200 150 L 100 150 Z"/>
    <polygon id="section-102" points="300,100 400,100 400,180"/>
    <path id="section-103" d="M 500 500 h 40 v 40 h -40 z"/>
  </g>
  <path id="msg-floor" d="M 0 0 L 100 0 L 100 100 L 0 100 Z M 25 25 L 75 25 L 75 75 L 25 75 Z"/>
  <rect id="msg-stage" x="0" y="0" width="10" height="10"/>
  <path id="decor" d="M 0 0 L 1 1"/>
</svg>
"""


class TestSvgLayout(unittest.TestCase):
    def setUp(self):
        self.sections = [
            Section(id="court", name="Floor", tier=Tier.floor),
            Section(id="101", name="101", tier=Tier.lower),
            Section(id="102", name="102", tier=Tier.lower),
        ]
        self.external = VENUE_LAYOUTS["v1"]

    def test_keys(self):
        layout = layout_from_svg(SVG, self.sections, self.external)
        # rect elements carry no path data.
        self.assertEqual(set(layout), {"101", "102", "103", "court"})

    def test_bounds_and_label(self):
        layout = layout_from_svg(SVG, self.sections, self.external)
        self.assertEqual(layout["101"].bounds, Bounds(100, 100, 100, 50))
        self.assertEqual((layout["101"].label.x, layout["101"].label.y), (150, 125))
        self.assertEqual(layout["103"].bounds, Bounds(500, 500, 40, 40))

    def test_polygon_points(self):
        layout = layout_from_svg(SVG, self.sections, self.external)
        self.assertEqual(layout["102"].path, "M 300 100 L 400 100 L 400 180 Z")
        self.assertIsNone(layout["102"].fill_rule)

    def test_multiple_subpaths_use_evenodd(self):
        layout = layout_from_svg(SVG, self.sections, self.external)
        self.assertEqual(layout["court"].fill_rule, "evenodd")

    def test_default_floor_key(self):
        layout = layout_from_svg(SVG, self.sections[1:], self.external)
        self.assertIn("floor", layout)

    def test_stage_element(self):
        svg = SVG.replace('<rect id="msg-stage" x="0" y="0" width="10" height="10"/>', '<path id="msg-stage" d="M 0 0 L 10 0 L 10 10 Z"/>')
        layout = layout_from_svg(svg, self.sections, self.external)
        self.assertIn(STAGE_KEY, layout)

    def test_load_filters_to_catalog(self):
        layout = load_external_layout("v1", SVG, self.sections)
        self.assertEqual(list(layout), ["court", "101", "102"])

    def test_missing_elements_skipped(self):
        external = ExternalLayout(source="x.svg", element_ids=("section-999",))
        self.assertEqual(layout_from_svg(SVG, self.sections, external), {})

    def test_malformed_svg(self):
        with self.assertRaises(GeometryError):
            layout_from_svg("<svg><path", self.sections, self.external)

    def test_not_an_external_venue(self):
        with self.assertRaises(ValueError):
            load_external_layout("v8", SVG, self.sections)

    def test_element_path_short_polygon(self):
        el = ET.fromstring('<polygon points="0,0 1,1"/>')
        self.assertIsNone(element_path(el))


if __name__ == "__main__":
    unittest.main()
