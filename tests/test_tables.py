"""Tests for the lookup tables.

Validates:
  - Width × spacing tables snap to breakpoints, never interpolate
  - 1D tables interpolate linearly and clamp flat
  - CRT tables interpolate both coefficients and clamp to the end rows
  - Width × thickness tables interpolate bilinearly and clamp flat
  - Polynomial variation picks the right coefficient row
"""

from __future__ import annotations

import unittest

from itfstack.data.tables import (
    CrtVsSiWidthTable,
    LookupTable1D,
    LookupTable2D,
    ProcessVariation,
    WidthThicknessTable,
    bracket,
    snap_index,
)
from tests.itf_fixtures import M8_CRT_ROWS


def _grid_table() -> LookupTable2D:
    return LookupTable2D(
        widths=[0.1, 0.2, 0.3],
        spacings=[0.05, 0.1, 0.15],
        values=[
            [1.0, 2.0, 3.0],
            [4.0, 5.0, 6.0],
            [7.0, 8.0, 9.0],
        ],
    )


class TestAxisHelpers(unittest.TestCase):

    def test_snap_index_clamps(self):
        axis = [1.0, 2.0, 4.0]
        self.assertEqual(snap_index(axis, -5.0), 0)
        self.assertEqual(snap_index(axis, 10.0), 2)

    def test_snap_index_nearest(self):
        axis = [1.0, 2.0, 4.0]
        self.assertEqual(snap_index(axis, 1.4), 0)
        self.assertEqual(snap_index(axis, 1.6), 1)
        self.assertEqual(snap_index(axis, 3.5), 2)

    def test_snap_index_midpoint_goes_high(self):
        """Exactly halfway between breakpoints resolves to the upper one."""
        self.assertEqual(snap_index([1.0, 2.0, 4.0], 3.0), 2)
        self.assertEqual(snap_index([0.0, 1.0], 0.5), 1)

    def test_snap_index_empty(self):
        self.assertIsNone(snap_index([], 1.0))

    def test_bracket_inside(self):
        lo, hi, t = bracket([0.0, 2.0, 4.0], 3.0)
        self.assertEqual((lo, hi), (1, 2))
        self.assertAlmostEqual(t, 0.5)

    def test_bracket_outside(self):
        self.assertEqual(bracket([0.0, 2.0], -1.0), (0, 0, 0.0))
        self.assertEqual(bracket([0.0, 2.0], 9.0), (1, 1, 0.0))


class TestLookupTable2D(unittest.TestCase):

    def setUp(self):
        self.table = _grid_table()

    def test_exact_breakpoints(self):
        self.assertEqual(self.table.lookup(0.1, 0.05), 1.0)
        self.assertEqual(self.table.lookup(0.3, 0.15), 9.0)
        self.assertEqual(self.table.lookup(0.2, 0.1), 5.0)

    def test_row_is_spacing_column_is_width(self):
        self.assertEqual(self.table.lookup(0.3, 0.05), 3.0)
        self.assertEqual(self.table.lookup(0.1, 0.15), 7.0)

    def test_snaps_instead_of_interpolating(self):
        """(0.17, 0.12) snaps to (0.2, 0.1); no blended value."""
        self.assertEqual(self.table.lookup(0.17, 0.12), 5.0)
        self.assertEqual(self.table.lookup(0.26, 0.14), 9.0)

    def test_clamps_outside_range(self):
        self.assertEqual(self.table.lookup(0.0, 0.0), 1.0)
        self.assertEqual(self.table.lookup(1.0, 1.0), 9.0)
        self.assertEqual(self.table.lookup(0.0, 1.0), 7.0)

    def test_midpoint_takes_upper_cell(self):
        self.assertEqual(LookupTable2D([0.0, 1.0], [0.0], [[10.0, 20.0]]).lookup(0.5, 0.0), 20.0)

    def test_empty_axis_misses(self):
        self.assertIsNone(LookupTable2D([], [0.1], [[1.0]]).lookup(0.1, 0.1))
        self.assertIsNone(LookupTable2D([0.1], [], [[1.0]]).lookup(0.1, 0.1))
        self.assertIsNone(LookupTable2D().lookup(0.1, 0.1))
        self.assertTrue(LookupTable2D().is_empty)

    def test_missing_cell_misses(self):
        table = LookupTable2D([0.1, 0.2], [0.1], [[1.0]])
        self.assertEqual(table.lookup(0.1, 0.1), 1.0)
        self.assertIsNone(table.lookup(0.2, 0.1))


class TestLookupTable1D(unittest.TestCase):

    def setUp(self):
        self.table = LookupTable1D([1.0, 2.0, 3.0], [10.0, 20.0, 30.0])

    def test_breakpoints(self):
        self.assertEqual(self.table.lookup(1.0), 10.0)
        self.assertEqual(self.table.lookup(3.0), 30.0)

    def test_linear_interpolation(self):
        self.assertAlmostEqual(self.table.lookup(1.5), 15.0, places=10)
        self.assertAlmostEqual(self.table.lookup(2.25), 22.5, places=10)

    def test_flat_extrapolation(self):
        self.assertEqual(self.table.lookup(0.0), 10.0)
        self.assertEqual(self.table.lookup(5.0), 30.0)

    def test_empty(self):
        self.assertIsNone(LookupTable1D().lookup(1.0))


class TestCrtVsSiWidthTable(unittest.TestCase):

    def setUp(self):
        self.table = CrtVsSiWidthTable()
        for row in M8_CRT_ROWS:
            self.table.add_point(*row)

    def test_exact_row(self):
        crt1, crt2 = self.table.lookup_crt_values(0.39)
        self.assertAlmostEqual(crt1, 3.6490e-3, places=12)
        self.assertAlmostEqual(crt2, -8.5347e-7, places=15)

    def test_interpolates_both_coefficients(self):
        """Width 0.45 sits between the 0.39 and 0.4572 rows."""
        t = (0.45 - 0.39) / (0.4572 - 0.39)
        crt1, crt2 = self.table.lookup_crt_values(0.45)
        self.assertAlmostEqual(crt1, 3.6490e-3 + t * (3.6834e-3 - 3.6490e-3), places=12)
        self.assertAlmostEqual(crt2, -8.5347e-7 + t * (-8.5317e-7 + 8.5347e-7), places=15)

    def test_clamps_to_end_rows(self):
        self.assertEqual(self.table.lookup_crt_values(0.1), (3.6490e-3, -8.5347e-7))
        self.assertEqual(self.table.lookup_crt_values(10.0), (3.8055e-3, -4.7080e-7))

    def test_single_number_lookup_is_crt1(self):
        self.assertAlmostEqual(self.table.lookup(0.7), 3.7416e-3, places=12)

    def test_empty(self):
        self.assertIsNone(CrtVsSiWidthTable().lookup_crt_values(0.5))


class TestWidthThicknessTable(unittest.TestCase):

    def setUp(self):
        self.table = WidthThicknessTable(
            widths=[0.2, 0.4, 0.6],
            thicknesses=[0.4, 0.5, 0.6],
            values=[
                [0.020, 0.018, 0.016],
                [0.018, 0.016, 0.014],
                [0.016, 0.014, 0.012],
            ],
        )

    def test_breakpoint(self):
        self.assertAlmostEqual(self.table.lookup(0.4, 0.5), 0.016, places=12)

    def test_interpolates_between_breakpoints(self):
        """Unlike the snap table, mid-cell queries blend the corners."""
        self.assertAlmostEqual(self.table.lookup(0.3, 0.5), 0.017, places=12)
        self.assertAlmostEqual(self.table.lookup(0.3, 0.45), 0.018, places=12)

    def test_flat_outside_range(self):
        self.assertAlmostEqual(self.table.lookup(0.0, 0.0), 0.020, places=12)
        self.assertAlmostEqual(self.table.lookup(1.0, 1.0), 0.012, places=12)
        self.assertAlmostEqual(self.table.lookup(0.4, 1.0), 0.014, places=12)

    def test_ragged_matrix_misses(self):
        table = WidthThicknessTable([0.1, 0.2], [0.3], [[0.02]])
        self.assertIsNone(table.lookup(0.2, 0.3))

    def test_empty(self):
        self.assertIsNone(WidthThicknessTable().lookup(0.1, 0.1))


class TestProcessVariation(unittest.TestCase):

    def setUp(self):
        self.variation = ProcessVariation(
            density_polynomial_orders=[0, 1],
            width_polynomial_orders=[0, 1],
            width_ranges=[1.0, 2.0],
            polynomial_coefficients=[[1.0, 2.0, 3.0, 4.0], [5.0, 6.0, 7.0, 8.0]],
        )

    def test_first_range(self):
        """1 + 2·0.8 + 3·0.5 + 4·0.5·0.8 = 5.7"""
        self.assertAlmostEqual(self.variation.calculate_thickness_variation(0.5, 0.8), 5.7, places=10)

    def test_second_range(self):
        """5 + 6·1.5 + 7·0.5 + 8·0.5·1.5 = 23.5"""
        self.assertAlmostEqual(self.variation.calculate_thickness_variation(0.5, 1.5), 23.5, places=10)

    def test_beyond_last_range_uses_last_row(self):
        """5 + 6·3 + 7·0.5 + 8·0.5·3 = 38.5"""
        self.assertAlmostEqual(self.variation.calculate_thickness_variation(0.5, 3.0), 38.5, places=10)

    def test_short_coefficient_row_stops_early(self):
        variation = ProcessVariation([0, 1], [0, 1], [1.0], [[1.0, 2.0]])
        self.assertAlmostEqual(variation.calculate_thickness_variation(0.5, 0.5), 2.0, places=10)

    def test_no_coefficients_is_zero(self):
        variation = ProcessVariation([0], [0], [1.0], [])
        self.assertEqual(variation.calculate_thickness_variation(0.5, 0.5), 0.0)
        self.assertIsNone(variation.lookup(0.5, 0.5))


if __name__ == "__main__":
    unittest.main()
