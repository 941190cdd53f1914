import math
import unittest

from seatmap.geometry import (
    Bounds,
    GeometryError,
    Point,
    arc_path,
    ellipse_path,
    ellipse_point,
    flatten_path,
    hole_band,
    line_path,
    path_bounds,
    path_vertices,
    polygon_path,
    rect_path,
    ring_wedge_corners,
    ring_wedge_path,
    subpath_count,
)


class TestEllipsePoint(unittest.TestCase):
    def test_zero_degrees_is_plus_x(self):
        p = ellipse_point(Point(100, 50), 20, 10, 0)
        self.assertAlmostEqual(p.x, 120)
        self.assertAlmostEqual(p.y, 50)

    def test_angle_grows_upward_on_screen(self):
        p = ellipse_point(Point(100, 50), 20, 10, 90)
        self.assertAlmostEqual(p.x, 100)
        self.assertAlmostEqual(p.y, 40)

    def test_left_side(self):
        p = ellipse_point(Point(0, 0), 20, 10, 180)
        self.assertAlmostEqual(p.x, -20)
        self.assertAlmostEqual(p.y, 0)


class TestPathAssembly(unittest.TestCase):
    def test_rect_path(self):
        self.assertEqual(rect_path(0, 0, 10, 5), "M 0 0 L 10 0 L 10 5 L 0 5 Z")

    def test_polygon_path_empty(self):
        self.assertEqual(polygon_path([]), "")

    def test_line_path(self):
        self.assertEqual(line_path(0, 2.5, 10, 2.5), "M 0 2.5 L 10 2.5")

    def test_ring_wedge_is_quadrilateral(self):
        d = ring_wedge_path(Point(0, 0), 10, 40, 100, 150, 1.5)
        self.assertTrue(d.startswith("M "))
        self.assertTrue(d.endswith(" Z"))
        self.assertEqual(d.count(" L "), 3)
        self.assertNotIn("A", d)

    def test_ring_wedge_corner_order(self):
        p1, p2, p3, p4 = ring_wedge_corners(Point(0, 0), 0, 90, 100, 200, 1.0)
        self.assertAlmostEqual(p1.x, 100)  # inner start
        self.assertAlmostEqual(p2.y, -100)  # inner end
        self.assertAlmostEqual(p3.y, -200)  # outer end
        self.assertAlmostEqual(p4.x, 200)  # outer start

    def test_hole_band_reverses_winding(self):
        args = (Point(864, 420), 20, 50, 368, 380, 1.38)
        wedge = path_vertices(ring_wedge_path(*args))
        hole = path_vertices(hole_band(*args))
        self.assertEqual(hole, list(reversed(wedge)))

    def test_arc_path_sweep_for_growing_angles(self):
        d = arc_path(Point(0, 0), 10, 10, 0, 90)
        self.assertTrue(d.startswith("M 10 0 A 10 10 0 0 0 "))

    def test_arc_path_sweep_for_shrinking_angles(self):
        d = arc_path(Point(0, 0), 10, 10, 90, 0)
        self.assertIn(" A 10 10 0 0 1 ", d)

    def test_arc_path_large_arc(self):
        d = arc_path(Point(0, 0), 10, 10, 0, 270)
        self.assertIn(" A 10 10 0 1 0 ", d)


class TestFlattenPath(unittest.TestCase):
    def test_absolute_polygon(self):
        self.assertEqual(flatten_path("M 0 0 L 10 0 L 10 10 Z"), [[(0, 0), (10, 0), (10, 10)]])

    def test_relative_commands(self):
        self.assertEqual(flatten_path("m 1 1 l 2 0 v 3 h -2 z"), [[(1, 1), (3, 1), (3, 4), (1, 4)]])

    def test_implicit_lineto_after_move(self):
        self.assertEqual(flatten_path("M0,0 5,0 5,5z"), [[(0, 0), (5, 0), (5, 5)]])

    def test_subpaths(self):
        d = "M 0 0 L 10 0 L 10 10 Z M 2 2 L 3 2 L 3 3 Z"
        self.assertEqual(subpath_count(d), 2)

    def test_cubic_ends_on_endpoint(self):
        pts = path_vertices("M 0 0 C 0 10 10 10 10 0")
        self.assertEqual(pts[0], (0, 0))
        self.assertAlmostEqual(pts[-1][0], 10)
        self.assertAlmostEqual(pts[-1][1], 0)
        self.assertGreater(max(y for _, y in pts), 5)

    def test_empty(self):
        self.assertEqual(flatten_path(""), [])

    def test_must_start_with_command(self):
        with self.assertRaises(GeometryError):
            flatten_path("10 10 L 0 0")

    def test_truncated_path(self):
        with self.assertRaises(GeometryError):
            flatten_path("M 0 0 L 10")

    def test_numbers_after_close(self):
        with self.assertRaises(GeometryError):
            flatten_path("M 0 0 L 1 1 Z 5 5")


class TestPathBounds(unittest.TestCase):
    def test_polygon_bounds(self):
        b = path_bounds("M 10 20 L 40 20 L 40 60 L 10 60 Z")
        self.assertEqual(b, Bounds(10, 20, 30, 40))

    def test_ellipse_bounds(self):
        b = path_bounds(ellipse_path(Point(100, 100), 50, 20))
        self.assertAlmostEqual(b.x, 50, places=6)
        self.assertAlmostEqual(b.y, 80, places=6)
        self.assertAlmostEqual(b.width, 100, places=6)
        self.assertAlmostEqual(b.height, 40, places=6)

    def test_no_vertices_raises(self):
        with self.assertRaises(GeometryError):
            path_bounds("")


class TestBounds(unittest.TestCase):
    def test_union_and_contains(self):
        b = Bounds(0, 0, 10, 10).union(Bounds(5, -5, 10, 10))
        self.assertEqual(b, Bounds(0, -5, 15, 15))
        self.assertTrue(b.contains(15, 5))
        self.assertFalse(b.contains(15.1, 5))

    def test_to_dict(self):
        self.assertEqual(Bounds(1, 2, 3, 4).to_dict(), {"x": 1, "y": 2, "width": 3, "height": 4})

    def test_center(self):
        c = Bounds(0, 0, 10, 4).center
        self.assertTrue(math.isclose(c.x, 5) and math.isclose(c.y, 2))


if __name__ == "__main__":
    unittest.main()
