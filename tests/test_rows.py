import unittest

from seatmap.rows import row_entrances, row_grids, row_labels
from seatmap.schemas import Seat, Section, Tier
from seatmap.shapes import rect_shape
from seatmap.venues import build_layout


def _seats(section, rows, per_row=4):
    return [
        Seat(id=f"{section}-{r}-{n}", section=section, row=r, number=str(n))
        for r in rows
        for n in range(1, per_row + 1)
    ]


class TestRectangularRows(unittest.TestCase):
    def setUp(self):
        self.sections = [
            Section(id="A", name="A", tier=Tier.lower),
            Section(id="B", name="B", tier=Tier.lower),
        ]
        self.layout = {"A": rect_shape(0, 0, 100, 90), "B": rect_shape(200, 0, 50, 50)}
        # B has a single row: no row geometry.
        self.seats = _seats("A", ["3", "1", "2"]) + _seats("B", ["1"])

    def test_grid_boundaries(self):
        grids = row_grids(self.seats, self.layout, self.sections)
        self.assertEqual(len(grids), 1)
        self.assertEqual(grids[0].section_id, "A")
        self.assertEqual(grids[0].row_boundary_ys, (30.0, 60.0))

    def test_entrances_on_front_edges(self):
        entrances = row_entrances(self.seats, self.layout, self.sections)
        self.assertEqual([e.row for e in entrances], ["1", "2", "3"])
        self.assertEqual([e.path for e in entrances], ["M 0 0 L 100 0", "M 0 30 L 100 30", "M 0 60 L 100 60"])

    def test_labels_near_row_start(self):
        labels = row_labels(self.seats, self.layout, self.sections)
        self.assertEqual([(lb.x, lb.y) for lb in labels], [(8.0, 15.0), (8.0, 45.0), (8.0, 75.0)])

    def test_no_shape_no_rows(self):
        self.assertEqual(row_entrances(self.seats, {}, self.sections), [])

    def test_to_dict(self):
        grid = row_grids(self.seats, self.layout, self.sections)[0]
        self.assertEqual(grid.to_dict()["rowBoundaryYs"], [30.0, 60.0])
        self.assertEqual(
            row_labels(self.seats, self.layout, self.sections)[0].to_dict(),
            {"sectionId": "A", "row": "1", "x": 8.0, "y": 15.0},
        )


class TestPolarRows(unittest.TestCase):
    def setUp(self):
        self.sections = [Section(id="101", name="101", tier=Tier.lower), Section(id="102", name="102", tier=Tier.lower)]
        self.layout = build_layout("v8", self.sections)
        self.seats = _seats("101", ["A", "B", "C", "D"])

    def test_no_boundary_lines(self):
        self.assertEqual(row_grids(self.seats, self.layout, self.sections), [])

    def test_entrances_are_arcs(self):
        polar = self.layout["101"].polar
        entrances = row_entrances(self.seats, self.layout, self.sections)
        self.assertEqual(len(entrances), 4)
        for e in entrances:
            self.assertIn(" A ", e.path)
        # The first row's front edge is the wedge's inner arc.
        self.assertEqual(entrances[0].path, self.layout["101"].entrance_path)
        self.assertEqual(entrances[0].path, polar.entrance_path())

    def test_labels_inside_wedge(self):
        polar = self.layout["101"].polar
        labels = row_labels(self.seats, self.layout, self.sections)
        self.assertEqual([lb.row for lb in labels], ["A", "B", "C", "D"])
        for lb in labels:
            self.assertTrue(polar.contains(lb.x, lb.y), lb)


if __name__ == "__main__":
    unittest.main()
