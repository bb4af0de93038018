"""
Tests for horizontal and diagonal scanline builders.
"""

import unittest

import numpy as np

from rastergcode.core.pixel_grid import ArrayPixelGrid, PixelOutOfBoundsError
from rastergcode.laser.line_builder import (
    DiagonalLineBuilder, HorizontalLineBuilder, make_line_builder, read_pixel_power
)


def make_grid(rows):
    return ArrayPixelGrid(np.array(rows, dtype=np.uint8))


class TestReadPixelPower(unittest.TestCase):
    """Test read_pixel_power function."""

    def setUp(self):
        # Top row black, bottom row white
        self.grid = make_grid([[0, 0], [255, 200]])

    def test_inverted_and_flipped(self):
        """Logical row 0 is the bottom image row; black carries 255."""
        self.assertEqual(read_pixel_power(self.grid, 0, 0), 0)
        self.assertEqual(read_pixel_power(self.grid, 1, 0), 55)
        self.assertEqual(read_pixel_power(self.grid, 0, 1), 255)

    def test_off_grid_without_default(self):
        """Test that off-grid reads raise without a default."""
        with self.assertRaises(PixelOutOfBoundsError):
            read_pixel_power(self.grid, 2, 0)
        with self.assertRaises(PixelOutOfBoundsError):
            read_pixel_power(self.grid, 0, -1)

    def test_off_grid_default(self):
        """Test that off-grid reads return the default."""
        self.assertEqual(read_pixel_power(self.grid, 2, 0, 42), 42)
        self.assertIsNone(read_pixel_power(self.grid, 0, -1, None))


class TestHorizontalLineBuilder(unittest.TestCase):
    """Test HorizontalLineBuilder class."""

    def setUp(self):
        self.builder = HorizontalLineBuilder(make_grid([[255, 0, 0, 255]]))

    def test_total_lines(self):
        """Test the scanline count."""
        self.assertEqual(self.builder.total_lines, 1)
        self.assertEqual(HorizontalLineBuilder(make_grid(np.zeros((5, 3)))).total_lines, 5)
        self.assertEqual(HorizontalLineBuilder(make_grid(np.zeros((3, 0)))).total_lines, 0)

    def test_probes_one_column_past_the_edge(self):
        """Test the closing probe past the right edge."""
        line = self.builder.build(0)
        self.assertEqual([sample.x for sample in line], [0, 1, 2, 3, 4])
        self.assertTrue(all(sample.y == 0 for sample in line))

    def test_forward_line_uses_previous_power(self):
        """Test that forward samples carry the previous power."""
        line = self.builder.build(0)
        self.assertEqual([sample.p for sample in line], [0, 255, 255, 0, 0])
        self.assertEqual([sample.s for sample in line], [0, 0, 255, 255, 0])

    def test_reversed_line_uses_own_power(self):
        """Test that reversed samples carry their own power."""
        line = self.builder.build(0, reversed=True)
        self.assertEqual([sample.s for sample in line], [0, 255, 255, 0, 0])

    def test_transition_flags(self):
        """Test white to colored transition flags."""
        line = self.builder.build(0)
        self.assertEqual([sample.last_white for sample in line],
                         [False, True, False, False, False])
        self.assertEqual([sample.last_colored for sample in line],
                         [False, False, False, True, False])

    def test_closing_probe_repeats_last_power(self):
        """Test that the closing probe repeats the last power."""
        line = HorizontalLineBuilder(make_grid([[0]])).build(0)
        self.assertEqual([(sample.s, sample.p) for sample in line], [(255, 255), (255, 255)])

    def test_rows_bottom_first(self):
        """Test that scanline 0 is the bottom image row."""
        builder = HorizontalLineBuilder(make_grid([[0, 0], [255, 255]]))
        self.assertEqual([s.p for s in builder.build(0)], [0, 0, 0])
        self.assertEqual([s.p for s in builder.build(1)], [255, 255, 255])


class TestDiagonalLineBuilder(unittest.TestCase):
    """Test DiagonalLineBuilder class."""

    def test_total_lines(self):
        """Test the scanline count."""
        self.assertEqual(DiagonalLineBuilder(make_grid(np.zeros((2, 3)))).total_lines, 4)
        self.assertEqual(DiagonalLineBuilder(make_grid(np.zeros((0, 0)))).total_lines, 0)

    def test_starts(self):
        """Test diagonal start positions."""
        builder = DiagonalLineBuilder(make_grid(np.zeros((2, 3))))
        starts = [builder.start(i) for i in range(builder.total_lines)]
        self.assertEqual(starts, [(0, 0), (0, 1), (1, 1), (2, 1)])

    def test_probes(self):
        """Test diagonal probe positions."""
        builder = DiagonalLineBuilder(make_grid(np.zeros((2, 3))))
        self.assertEqual(list(builder.probes(0)), [(0, 0), (1, -1)])
        self.assertEqual(list(builder.probes(1)), [(0, 1), (1, 0), (2, -1)])
        self.assertEqual(list(builder.probes(2)), [(1, 1), (2, 0), (3, -1)])
        self.assertEqual(list(builder.probes(3)), [(2, 1), (3, 0)])

    def test_coverage_matches_grid(self):
        """Across all diagonals every pixel is visited exactly once."""
        for height, width in [(1, 1), (2, 3), (4, 2), (5, 5), (1, 7), (6, 1)]:
            builder = DiagonalLineBuilder(make_grid(np.zeros((height, width))))
            visited = []
            for index in range(builder.total_lines):
                visited.extend(
                    (s.x, s.y) for s in builder.build(index)
                    if 0 <= s.x < width and 0 <= s.y < height
                )
            self.assertEqual(len(visited), width * height)
            self.assertEqual(set(visited), {(x, y) for x in range(width) for y in range(height)})

    def test_samples_follow_the_diagonal(self):
        """Test sample coordinates along a diagonal."""
        # Gray values of logical rows: y=0 -> [0, 255], y=1 -> [255, 0]
        builder = DiagonalLineBuilder(make_grid([[255, 0], [0, 255]]))
        line = builder.build(1)
        self.assertEqual([(s.x, s.y) for s in line], [(0, 1), (1, 0), (2, -1)])
        self.assertEqual([s.p for s in line], [0, 0, 0])

        line = builder.build(0)
        self.assertEqual([s.p for s in line], [255, 255])
        self.assertEqual([s.s for s in line], [255, 255])


class TestMakeLineBuilder(unittest.TestCase):
    """Test make_line_builder function."""

    def test_kind(self):
        """Test choosing the builder by scan mode."""
        grid = make_grid([[0]])
        self.assertIsInstance(make_line_builder(grid), HorizontalLineBuilder)
        self.assertIsInstance(make_line_builder(grid, diagonal=True), DiagonalLineBuilder)


if __name__ == '__main__':
    unittest.main()
