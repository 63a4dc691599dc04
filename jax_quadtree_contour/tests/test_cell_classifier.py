import unittest
from unittest import mock
import jax.numpy as jnp
import logging

from jax_quadtree_contour import (
    Cell,
    Side,
    SideEndpoint,
    TRANSITION_TABLE,
    classify,
    corner_code
)
from jax_quadtree_contour import cell_classifier
from jax_quadtree_contour.cell_classifier import (
    _SIDE_CORNERS,
    code_bits,
    interpolate_side,
    side_edge
)


def f_line(x, y):
    return x


def f_saddle(x, y):
    return x * y


class TestTransitionTable(unittest.TestCase):
    def test_shape(self):
        self.assertEqual(len(TRANSITION_TABLE), 16)
        for entry in TRANSITION_TABLE:
            self.assertIn(len(entry), (0, 1, 2))
            for pair in entry:
                self.assertEqual(len(pair), 2)
                self.assertNotEqual(pair[0], pair[1])

    def test_uniform_and_saddle_codes(self):
        self.assertEqual(TRANSITION_TABLE[0], ())
        self.assertEqual(TRANSITION_TABLE[15], ())
        self.assertEqual(len(TRANSITION_TABLE[5]), 2)
        self.assertEqual(len(TRANSITION_TABLE[10]), 2)
        for code in set(range(1, 15)) - {5, 10}:
            self.assertEqual(len(TRANSITION_TABLE[code]), 1)

    def test_sides_cross(self):
        # every side used by an entry has corners on both sides of the contour,
        # and every crossing side is used exactly once
        for code, entry in enumerate(TRANSITION_TABLE):
            bits = code_bits(code)
            crossing = {side for side, (a, b) in _SIDE_CORNERS.items() if bits[a] != bits[b]}
            used = [side for pair in entry for side in pair]
            self.assertEqual(len(used), len(set(used)))
            self.assertEqual(set(used), crossing)

    def test_complement_codes(self):
        # flipping every corner gives the same segments (saddles aside)
        for code in set(range(16)) - {5, 10}:
            self.assertEqual(
                {frozenset(pair) for pair in TRANSITION_TABLE[code]},
                {frozenset(pair) for pair in TRANSITION_TABLE[15 - code]}
            )


class TestCornerCode(unittest.TestCase):
    def test_codes(self):
        # top-left, top-right, bottom-right, bottom-left
        self.assertEqual(int(corner_code(jnp.array([1.0, -1.0, -1.0, -1.0]))), 8)
        self.assertEqual(int(corner_code(jnp.array([-1.0, 1.0, -1.0, -1.0]))), 4)
        self.assertEqual(int(corner_code(jnp.array([-1.0, -1.0, 1.0, -1.0]))), 2)
        self.assertEqual(int(corner_code(jnp.array([-1.0, -1.0, -1.0, 1.0]))), 1)
        self.assertEqual(int(corner_code(jnp.array([2.0, 3.0, 4.0, 5.0]))), 15)
        self.assertEqual(int(corner_code(jnp.array([-1.0, 1.0, -1.0, 1.0]))), 5)

    def test_zero_is_outside(self):
        self.assertEqual(int(corner_code(jnp.array([0.0, 0.0, 0.0, 0.0]))), 0)
        self.assertEqual(int(corner_code(jnp.array([0.0, 1.0, 1.0, 0.0]))), 6)

    def test_nan_does_not_crash(self):
        self.assertEqual(int(corner_code(jnp.array([jnp.nan, 1.0, 1.0, 1.0]))), 7)

    def test_code_bits(self):
        self.assertEqual(code_bits(0), (0, 0, 0, 0))
        self.assertEqual(code_bits(8), (1, 0, 0, 0))
        self.assertEqual(code_bits(5), (0, 1, 0, 1))
        self.assertEqual(code_bits(15), (1, 1, 1, 1))


class TestClassify(unittest.TestCase):
    def setUp(self):
        logging.disable(logging.CRITICAL)

    def tearDown(self):
        logging.disable(logging.NOTSET)

    def test_uniform(self):
        self.assertEqual(classify(lambda x, y: 1, (-1, 1), (2, 2)), [])
        self.assertEqual(classify(lambda x, y: -1, (-1, 1), (2, 2)), [])
        self.assertEqual(classify(f_line, (1, 1), (2, 2)), [])

    def test_line(self):
        segments = classify(f_line, (-0.5, 0.5), (1, 1))
        self.assertEqual(segments, [((0, 0.5), (0, -0.5))])

    def test_tiny_field(self):
        segments = classify(lambda x, y: 1e-50 * x, (-0.5, 0.5), (1, 1))
        self.assertEqual(segments, [((0, 0.5), (0, -0.5))])
        segments = classify(lambda x, y: 1e-300 * (3 * x - 1), (0, 1), (1, 1))
        self.assertEqual(len(segments), 1)
        for point in segments[0]:
            self.assertAlmostEqual(point.x, 1 / 3)

    def test_line_sides(self):
        segments = classify(f_line, (-0.5, 0.5), (1, 1), interpolate=False)
        self.assertEqual(
            segments,
            [(SideEndpoint((-0.5, 0.5), (0.5, 0.5)), SideEndpoint((-0.5, -0.5), (0.5, -0.5)))]
        )

    def test_interpolation(self):
        # f = 3x - 1 crosses zero at x = 1/3
        segments = classify(lambda x, y: 3 * x - 1, (0, 1), (1, 1))
        self.assertEqual(len(segments), 1)
        for point in segments[0]:
            self.assertAlmostEqual(point.x, 1 / 3)
        self.assertEqual({p.y for p in segments[0]}, {0.0, 1.0})

    def test_corner_on_contour(self):
        segments = classify(f_line, (0, 1), (1, 1))
        self.assertEqual(segments, [((0, 1), (0, 0))])

    def test_zero_length_segment(self):
        # the contour only touches the top-left corner
        self.assertEqual(classify(lambda x, y: x - y, (0, 0), (1, 1)), [])

    def test_saddle(self):
        segments = classify(f_saddle, (-1, 1), (2, 2))
        self.assertEqual(len(segments), 2)
        upper, lower, left, right = (0, 1), (0, -1), (-1, 0), (1, 0)
        found = {frozenset(s) for s in segments}
        either_diagonal = [
            {frozenset([upper, right]), frozenset([left, lower])},
            {frozenset([upper, left]), frozenset([lower, right])}
        ]
        self.assertIn(found, either_diagonal)

    def test_even_points_on_boundary(self):
        def f(x, y):
            return float(jnp.sin(3 * x) * jnp.cos(2 * y) - 0.1)

        step = 0.25
        for i in range(8):
            for j in range(8):
                cell = Cell(-1 + i * step, 1 - j * step, step, step)
                segments = classify(f, (cell.x, cell.y), (cell.dx, cell.dy))
                self.assertEqual(sum(len(s) for s in segments) % 2, 0)
                for point in (p for s in segments for p in s):
                    on_x_edge = point.x in (cell.x, cell.x + cell.dx)
                    on_y_edge = point.y in (cell.y, cell.y - cell.dy)
                    self.assertTrue(on_x_edge or on_y_edge)
                    self.assertTrue(cell.x <= point.x <= cell.x + cell.dx)
                    self.assertTrue(cell.y - cell.dy <= point.y <= cell.y)

    def test_bad_extents(self):
        with self.assertRaises(ValueError):
            classify(f_line, (0, 0), (0, 0))


class TestSides(unittest.TestCase):
    def test_side_edge(self):
        cell = Cell(0, 0, 2, 1)
        self.assertEqual(side_edge(cell, Side.UPPER), ((0, 0), (2, 0)))
        self.assertEqual(side_edge(cell, Side.LOWER), ((0, -1), (2, -1)))
        self.assertEqual(side_edge(cell, Side.LEFT), ((0, 0), (0, -1)))
        self.assertEqual(side_edge(cell, Side.RIGHT), ((2, 0), (2, -1)))

    def test_shared_edge(self):
        upper_cell = Cell(0, 1, 1, 1)
        lower_cell = Cell(0, 0, 1, 1)
        self.assertEqual(side_edge(upper_cell, Side.LOWER), side_edge(lower_cell, Side.UPPER))
        left_cell = Cell(0, 0, 1, 1)
        right_cell = Cell(1, 0, 1, 1)
        self.assertEqual(side_edge(left_cell, Side.RIGHT), side_edge(right_cell, Side.LEFT))

    def test_interpolate_side(self):
        cell = Cell(0, 0, 4, 2)
        values = (-1.0, 3.0, 3.0, -1.0)
        bits = (0, 1, 1, 0)
        self.assertEqual(interpolate_side(cell, Side.UPPER, values, bits), (1.0, 0.0))
        self.assertEqual(interpolate_side(cell, Side.LOWER, values, bits), (1.0, -2.0))
        self.assertIsNone(interpolate_side(cell, Side.LEFT, values, bits))
        self.assertIsNone(interpolate_side(cell, Side.RIGHT, values, bits))


class TestTableConsistencyWarning(unittest.TestCase):
    def test_bad_entry_is_skipped(self):
        table = list(TRANSITION_TABLE)
        # the left side of a code 6 cell has no crossing
        table[6] = ((Side.UPPER, Side.LEFT), (Side.UPPER, Side.LOWER))
        with mock.patch.object(cell_classifier, 'TRANSITION_TABLE', table):
            with self.assertLogs('jax_quadtree_contour.cell_classifier', level='WARNING') as logs:
                segments = classify(f_line, (-0.5, 0.5), (1, 1))
        self.assertEqual(segments, [((0, 0.5), (0, -0.5))])
        self.assertEqual(len(logs.records), 1)
