import unittest

from seatmap.export import layout_to_features, section_geojson, venue_geojson
from seatmap.schemas import Seat, Section, Tier
from seatmap.shapes import STAGE_KEY, SectionShape, rect_shape
from seatmap.geometry import Bounds, Point
from seatmap.venues import FixedLayout


def _corners(feature):
    ring = feature["geometry"]["coordinates"][0]
    return {tuple(pt) for pt in ring}


class TestSectionGeoJSON(unittest.TestCase):
    def setUp(self):
        self.sections = [Section(id="A", name="Section A", tier=Tier.lower)]
        self.layout = {
            STAGE_KEY: rect_shape(0, 700, 100, 50),
            "A": rect_shape(0, 0, 100, 90),
            "arenaOuter": rect_shape(-10, -10, 200, 800),
            "chaseBridgeLabel": SectionShape(path="", bounds=Bounds(0, 0, 1, 1), label=Point(0, 0)),
        }

    def test_flips_to_bottom_left_origin(self):
        fc = section_geojson(self.layout, self.sections, view_box_height=800)
        self.assertEqual(fc["type"], "FeatureCollection")
        self.assertEqual(len(fc["features"]), 1)
        feature = fc["features"][0]
        self.assertEqual(feature["id"], "A")
        self.assertEqual(feature["geometry"]["type"], "Polygon")
        self.assertEqual(_corners(feature), {(0, 800), (100, 800), (100, 710), (0, 710)})
        ring = feature["geometry"]["coordinates"][0]
        self.assertEqual(ring[0], ring[-1])

    def test_properties(self):
        feature = section_geojson(self.layout, self.sections)["features"][0]
        self.assertEqual(feature["properties"], {"sectionId": "A", "name": "Section A", "tier": "lower"})

    def test_stage_only_in_full_export(self):
        keys = [f["id"] for f in layout_to_features(self.layout, self.sections, 800)]
        self.assertEqual(keys, [STAGE_KEY, "A"])
        stage = layout_to_features(self.layout, self.sections, 800)[0]
        self.assertEqual(stage["properties"], {"sectionId": STAGE_KEY, "name": STAGE_KEY, "tier": None})


class TestVenueGeoJSON(unittest.TestCase):
    def setUp(self):
        self.sections = [Section(id="A", name="Section A", tier=Tier.lower)]
        self.registry = {"x": FixedLayout({STAGE_KEY: rect_shape(0, 700, 100, 50), "A": rect_shape(0, 0, 100, 90)})}
        self.seats = [Seat(id=f"s{n}", section="Section A", row="1", number=str(n)) for n in (1, 2)]

    def test_default_height(self):
        fc = venue_geojson("x", self.sections, registry=self.registry)
        a = next(f for f in fc["features"] if f["id"] == "A")
        self.assertIn((0, 800), _corners(a))

    def test_seat_rectangles(self):
        fc = venue_geojson("x", self.sections, self.seats, include_seats=True, view_box_height=100, registry=self.registry)
        seats = [f for f in fc["features"] if f["properties"].get("type") == "seat"]
        self.assertEqual([f["id"] for f in seats], ["s1", "s2"])
        self.assertEqual(seats[0]["properties"], {"seatId": "s1", "type": "seat"})
        self.assertEqual(_corners(seats[1]), {(50, 100), (100, 100), (100, 10), (50, 10)})

    def test_seats_need_flag(self):
        fc = venue_geojson("x", self.sections, self.seats, registry=self.registry)
        self.assertEqual(len(fc["features"]), 2)

    def test_bowl_export_skips_decorations(self):
        sections = [Section(id=f"L{n}", name=f"L{n}", tier=Tier.lower, order=n) for n in range(3)]
        fc = venue_geojson("v8", sections)
        self.assertEqual(sorted(f["id"] for f in fc["features"]), ["L0", "L1", "L2", STAGE_KEY])
        for f in fc["features"]:
            self.assertGreaterEqual(len(f["geometry"]["coordinates"][0]), 4)


if __name__ == "__main__":
    unittest.main()
