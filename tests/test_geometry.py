"""
Tests for the geometry module.
"""

import unittest
import math
import numpy as np

from fmr_core.geometry import CellGeometry
from fmr_core.exceptions import DegenerateGeometryError


class TestCellGeometry(unittest.TestCase):
    """Test core and unit-cell geometry."""

    def setUp(self):
        self.geometry = CellGeometry()

    def test_reference_dimensions(self):
        """Test derived element dimensions."""
        self.assertAlmostEqual(self.geometry.fuel_diameter, 0.80, places=12)
        self.assertAlmostEqual(self.geometry.pitch, 1.26, places=12)
        self.assertEqual(self.geometry.core_radius, 50.0)

    def test_extrapolated_dimensions(self):
        """Test extrapolated radius and height."""
        self.assertEqual(self.geometry.extrapolated_radius, 65.0)
        self.assertEqual(self.geometry.extrapolated_height, 80.0)

    def test_num_fuel_elements(self):
        """Test equivalent-square packing of the core."""
        # π·50² / 1.26² = 4947.1
        self.assertEqual(self.geometry.num_fuel_elements, 4947)

    def test_volume_fractions_sum_to_one(self):
        """Test fuel, clad and moderator fractions sum to 1."""
        geometries = [
            self.geometry,
            self.geometry.perturbed(-40.0),
            self.geometry.perturbed(40.0),
            CellGeometry(element_diameter=1.2, cladding_thickness=0.1, pitch_ratio=1.1),
        ]
        for geometry in geometries:
            fractions = geometry.volume_fractions()
            self.assertAlmostEqual(sum(fractions.values()), 1.0, places=12)
            self.assertTrue(all(f > 0 for f in fractions.values()))

    def test_reference_volume_fractions(self):
        """Test unit-cell fractions of the reference lattice."""
        fractions = self.geometry.volume_fractions()
        self.assertTrue(0.31 < fractions["fuel"] < 0.32)
        self.assertTrue(0.08 < fractions["cladding"] < 0.09)
        self.assertTrue(0.59 < fractions["moderator"] < 0.61)

    def test_fuel_plus_clad_is_element(self):
        """Test element volume splits into fuel and cladding."""
        g = self.geometry
        self.assertAlmostEqual(g.fuel_volume + g.cladding_volume, g.element_volume, places=10)
        self.assertAlmostEqual(g.fuel_volume, math.pi * 0.4**2 * 50.0, places=10)

    def test_buckling(self):
        """Test bare-cylinder buckling."""
        b_r, b_z, b_total = self.geometry.get_buckling_geometric()
        self.assertAlmostEqual(b_r, (2.404825557695773 / 50.0) ** 2, places=12)
        self.assertAlmostEqual(b_z, (math.pi / 50.0) ** 2, places=12)
        self.assertAlmostEqual(b_total, 0.0062611, places=6)
        self.assertEqual(self.geometry.buckling(), b_total)

    def test_extrapolated_buckling_smaller(self):
        """Test extrapolation reduces leakage."""
        self.assertLess(
            self.geometry.buckling(extrapolated=True),
            self.geometry.buckling(extrapolated=False),
        )

    def test_flux_shape(self):
        """Test fundamental-mode shape."""
        self.assertAlmostEqual(float(self.geometry.flux_shape(0.0, 0.0)), 1.0)
        self.assertAlmostEqual(float(self.geometry.flux_shape(50.0, 0.0)), 0.0, places=8)
        self.assertAlmostEqual(float(self.geometry.flux_shape(0.0, 25.0)), 0.0, places=12)
        edge = float(self.geometry.flux_shape(50.0, 0.0, extrapolated=True))
        self.assertTrue(0.0 < edge < 1.0)

    def test_flux_shape_broadcasts(self):
        """Test flux shape accepts arrays."""
        r = np.linspace(0.0, 50.0, 5)
        z = np.linspace(-25.0, 25.0, 3)
        shape = self.geometry.flux_shape(r[:, None], z[None, :])
        self.assertEqual(shape.shape, (5, 3))

    def test_peak_to_average_ratio(self):
        """Test bare-cylinder peaking."""
        ratio = self.geometry.peak_to_average_ratio()
        self.assertAlmostEqual(ratio["axial"], math.pi / 2.0, places=10)
        self.assertTrue(2.3 < ratio["radial"] < 2.33)
        self.assertTrue(3.6 < ratio["total"] < 3.7)
        flatter = self.geometry.peak_to_average_ratio(extrapolated=True)
        self.assertLess(flatter["total"], ratio["total"])

    def test_perturbed(self):
        """Test perturbation changes diameter and height."""
        perturbed = self.geometry.perturbed(10.0)
        self.assertEqual(perturbed.core_diameter, 110.0)
        self.assertEqual(perturbed.core_height, 60.0)
        self.assertEqual(perturbed.extrapolated_radius, 70.0)
        self.assertEqual(perturbed.extrapolated_height, 90.0)
        self.assertGreater(perturbed.num_fuel_elements, self.geometry.num_fuel_elements)
        # Base geometry untouched
        self.assertEqual(self.geometry.core_diameter, 100.0)

    def test_zero_perturbation_is_identity(self):
        """Test δ = 0 reproduces the geometry."""
        self.assertEqual(self.geometry.perturbed(0.0), self.geometry)


class TestDegenerateGeometry(unittest.TestCase):
    """Test rejection of impossible geometry."""

    def test_zero_diameter(self):
        with self.assertRaises(DegenerateGeometryError):
            CellGeometry(core_diameter=0.0)

    def test_zero_element_diameter(self):
        with self.assertRaises(DegenerateGeometryError):
            CellGeometry(element_diameter=0.0)

    def test_non_finite_dimension(self):
        with self.assertRaises(DegenerateGeometryError):
            CellGeometry(core_height=float("nan"))

    def test_cladding_consumes_element(self):
        with self.assertRaises(DegenerateGeometryError):
            CellGeometry(cladding_thickness=0.45)

    def test_overlapping_elements(self):
        with self.assertRaises(DegenerateGeometryError):
            CellGeometry(pitch_ratio=0.9)

    def test_core_smaller_than_element(self):
        with self.assertRaises(DegenerateGeometryError):
            CellGeometry(core_diameter=0.5)

    def test_perturbation_to_zero(self):
        with self.assertRaises(DegenerateGeometryError):
            CellGeometry().perturbed(-100.0)

    def test_is_value_error(self):
        """Test geometry errors are ValueErrors."""
        with self.assertRaises(ValueError):
            CellGeometry(core_height=-1.0)


if __name__ == "__main__":
    unittest.main()
