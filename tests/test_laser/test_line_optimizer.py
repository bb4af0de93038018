"""
Tests for scanline trimming, merging and overscan.
"""

import unittest

from rastergcode.core.settings import RasterSettings
from rastergcode.laser.line_builder import PixelSample
from rastergcode.laser.line_optimizer import LineOptimizer, merge_line, overscan_line, trim_line


def make_line(powers):
    """Forward line samples with the given intrinsic powers."""
    line = []
    previous = None
    for x, p in enumerate(powers):
        s = p if previous is None else previous
        line.append(PixelSample(x=x, y=0, s=s, p=p))
        previous = p
    return line


class TestTrimLine(unittest.TestCase):
    """Test trim_line function."""

    def test_trims_both_ends(self):
        """Test trimming white samples at both ends."""
        line = make_line([0, 0, 255, 0, 0])
        trimmed = trim_line(line)
        self.assertEqual([s.x for s in trimmed], [2, 3])

    def test_keeps_closing_sample_of_colored_run(self):
        """Test keeping the sample that closes the last colored run."""
        trimmed = trim_line(make_line([0, 10, 20, 20]))
        self.assertEqual([s.x for s in trimmed], [1, 2, 3])

    def test_all_white_is_empty(self):
        """Test that an all-white line trims to nothing."""
        self.assertEqual(trim_line(make_line([0, 0, 0, 0, 0])), [])

    def test_inner_white_is_kept(self):
        """Test keeping white samples inside the line."""
        trimmed = trim_line(make_line([255, 0, 0, 255, 255]))
        self.assertEqual([s.p for s in trimmed], [255, 0, 0, 255, 255])


class TestMergeLine(unittest.TestCase):
    """Test merge_line function."""

    def test_one_sample_per_run_plus_closing(self):
        """Test one sample per power run plus the closing sample."""
        line = make_line([10, 10, 20, 20, 30, 30, 30])
        merged = merge_line(line)
        self.assertEqual([s.x for s in merged], [0, 2, 4, 6])
        self.assertEqual([s.p for s in merged[:-1]], [10, 20, 30])

    def test_run_count(self):
        """k runs collapse to k run starts, plus the closing sample."""
        powers = [5] * 4 + [0] * 3 + [200] * 6 + [5] * 2
        merged = merge_line(make_line(powers))
        self.assertEqual(len(merged), 4 + 1)

    def test_last_sample_starting_a_run(self):
        """Test a closing sample that starts a new run."""
        merged = merge_line(make_line([10, 10, 20]))
        self.assertEqual([s.x for s in merged], [0, 2])

    def test_short_lines_untouched(self):
        """Test that lines under three samples are not merged."""
        line = make_line([10, 10])
        self.assertIs(merge_line(line), line)

    def test_keeps_sample_objects(self):
        """Test that merging keeps the original sample objects."""
        line = make_line([10, 10, 10, 20])
        merged = merge_line(line)
        self.assertIs(merged[0], line[0])
        self.assertIs(merged[-1], line[-1])


class TestOverscanLine(unittest.TestCase):
    """Test overscan_line function."""

    def setUp(self):
        # White -> black -> white transition, already trimmed
        self.line = [PixelSample(x=1, y=3, s=0, p=255), PixelSample(x=2, y=3, s=255, p=0)]

    def test_adds_unpowered_ends(self):
        """Test adding unpowered samples beyond both ends."""
        result = overscan_line(self.line, 2)
        self.assertEqual(len(result), 4)
        left, right = result[0], result[-1]
        self.assertEqual((left.x, left.y, left.s, left.p), (-1, 3, 0, 0))
        self.assertEqual((right.x, right.y, right.s, right.p), (4, 3, 0, 0))

    def test_flags_former_ends(self):
        """Test transition flags on the former ends."""
        result = overscan_line(self.line, 2)
        self.assertFalse(result[1].last_white)
        self.assertTrue(result[2].last_colored)

    def test_forward_zeroes_first_power(self):
        """Test zeroing the leading power on forward lines."""
        line = [PixelSample(x=0, y=0, s=255, p=255), PixelSample(x=1, y=0, s=255, p=255)]
        result = overscan_line(line, 1)
        self.assertTrue(result[1].last_white)
        self.assertEqual(result[1].s, 0)
        self.assertEqual(result[2].s, 255)

    def test_reversed_zeroes_last_power(self):
        """Test zeroing the trailing power on reversed lines."""
        line = [PixelSample(x=0, y=0, s=255, p=255), PixelSample(x=1, y=0, s=255, p=255)]
        result = overscan_line(line, 1, reversed=True)
        self.assertEqual(result[1].s, 255)
        self.assertEqual(result[2].s, 0)

    def test_diagonal(self):
        """Test overscan along a diagonal."""
        result = overscan_line(self.line, 2, diagonal=True)
        self.assertEqual((result[0].x, result[0].y), (-1, 5))
        self.assertEqual((result[-1].x, result[-1].y), (4, 1))


class TestLineOptimizer(unittest.TestCase):
    """Test LineOptimizer class."""

    def test_empty_line(self):
        """Test that an empty line is skipped."""
        optimizer = LineOptimizer(RasterSettings())
        self.assertIsNone(optimizer.optimize(make_line([0, 0, 0])))

    def test_boundary_flags(self):
        """Test first and last flags."""
        optimizer = LineOptimizer(RasterSettings())
        line = optimizer.optimize(make_line([0, 100, 100, 100, 0, 0]))
        self.assertEqual([s.x for s in line], [1, 4])
        self.assertTrue(line[0].first)
        self.assertTrue(line[-1].last)
        self.assertFalse(line[0].last)

    def test_reversed(self):
        """Test reversing a line in place."""
        optimizer = LineOptimizer(RasterSettings())
        line = optimizer.optimize(make_line([0, 100, 100, 100, 0, 0]), reversed=True)
        self.assertEqual([s.x for s in line], [4, 1])
        self.assertTrue(line[-1].first)
        self.assertTrue(line[0].last)

    def test_disabled_steps(self):
        """Test turning off trimming and merging."""
        optimizer = LineOptimizer(RasterSettings(trim_line=False, join_pixel=False))
        line = optimizer.optimize(make_line([0, 100, 100, 0]))
        self.assertEqual(len(line), 4)

    def test_overscan_pixels(self):
        """Overscan is given in mm and converted with the X pixel size."""
        optimizer = LineOptimizer(RasterSettings(overscan=1.0))
        self.assertAlmostEqual(optimizer.overscan_pixels, 10)

        line = optimizer.optimize(make_line([0, 100, 100, 0]))
        self.assertAlmostEqual(line[0].x, 1 - 10)
        self.assertAlmostEqual(line[-1].x, 3 + 10)
        self.assertTrue(line[0].first)
        self.assertTrue(line[-1].last)

    def test_no_overscan_by_default(self):
        """Test that overscan is off by default."""
        self.assertEqual(LineOptimizer(RasterSettings()).overscan_pixels, 0)


if __name__ == '__main__':
    unittest.main()
