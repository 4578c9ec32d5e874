"""
Tests for the sensitivity module.
"""

import unittest
import numpy as np

from fmr_core.config import ModelOptions
from fmr_core.geometry import CellGeometry
from fmr_core.materials import reference_library
from fmr_core.neutronics import compute_k_eff
from fmr_core.sensitivity import (
    dimension_sensitivity,
    dimension_sensitivity_curve,
    enrichment_sensitivity,
    k_eff_curve,
    k_eff_enrichment_derivative,
)
from fmr_core.exceptions import DegenerateGeometryError, DomainError


class TestEnrichmentSensitivity(unittest.TestCase):
    """Test sensitivity of k_eff to enrichment."""

    def setUp(self):
        self.geometry = CellGeometry()
        self.library = reference_library()
        self.x = 0.798

    def test_reference_step(self):
        """Test ±10% enrichment swing of the reference design."""
        result = enrichment_sensitivity(self.x, 0.1, self.geometry, self.library)
        self.assertTrue(0.155 < result < 0.162)

    def test_converges_to_derivative(self):
        """Test the centred difference approaches x·(dk/dx)/k as the step shrinks."""
        k_eff, _ = compute_k_eff(self.x, self.geometry, self.library)
        derivative = k_eff_enrichment_derivative(self.x, self.geometry, self.library)
        exact = derivative * self.x / k_eff

        errors = []
        for step in (0.1, 0.01, 0.001):
            result = enrichment_sensitivity(self.x, step, self.geometry, self.library)
            errors.append(abs(result / (2.0 * step) - exact))

        self.assertTrue(errors[0] > errors[1] > errors[2])
        self.assertLess(errors[-1], 1e-5)

    def test_derivative_matches_difference_quotient(self):
        """Test dk/dx against a small centred difference."""
        h = 1e-6
        k_plus, _ = compute_k_eff(self.x + h, self.geometry, self.library)
        k_minus, _ = compute_k_eff(self.x - h, self.geometry, self.library)
        derivative = k_eff_enrichment_derivative(self.x, self.geometry, self.library)
        self.assertAlmostEqual(derivative, (k_plus - k_minus) / (2 * h), places=5)

    def test_zero_step(self):
        """Test a zero step gives no change."""
        self.assertEqual(enrichment_sensitivity(self.x, 0.0, self.geometry, self.library), 0.0)

    def test_stencil_outside_unit_interval(self):
        """Test stencils leaving [0, 1] are rejected."""
        with self.assertRaises(DomainError):
            enrichment_sensitivity(0.95, 0.1, self.geometry, self.library)
        with self.assertRaises(DomainError):
            enrichment_sensitivity(0.5, -0.1, self.geometry, self.library)


class TestDimensionSensitivity(unittest.TestCase):
    """Test sensitivity of k_eff to core dimensions."""

    def setUp(self):
        self.geometry = CellGeometry()
        self.library = reference_library()

    def test_zero_perturbation(self):
        """Test no perturbation gives exactly no change."""
        self.assertEqual(dimension_sensitivity(0.0, self.geometry, self.library), 0.0)
        extrapolated = ModelOptions(extrapolated_buckling=True)
        self.assertEqual(
            dimension_sensitivity(0.0, self.geometry, self.library, options=extrapolated), 0.0
        )

    def test_larger_core_more_reactive(self):
        """Test leakage falls as the core grows."""
        self.assertGreater(dimension_sensitivity(10.0, self.geometry, self.library), 0.0)
        self.assertLess(dimension_sensitivity(-10.0, self.geometry, self.library), 0.0)

    def test_matches_direct_evaluation(self):
        """Test the result against a hand-built perturbed core."""
        k_base, _ = compute_k_eff(0.798, self.geometry, self.library)
        bigger = CellGeometry(core_diameter=120.0, core_height=70.0)
        k_bigger, _ = compute_k_eff(0.798, bigger, self.library)
        self.assertAlmostEqual(
            dimension_sensitivity(20.0, self.geometry, self.library),
            (k_bigger - k_base) / k_base,
            places=12,
        )

    def test_curve_monotonic(self):
        """Test the response rises steadily over ±40 cm."""
        deltas = np.arange(-40.0, 41.0, 10.0)
        for options in (ModelOptions(), ModelOptions(extrapolated_buckling=True)):
            curve = dimension_sensitivity_curve(
                deltas, self.geometry, self.library, options=options
            )
            self.assertEqual(curve.shape, deltas.shape)
            self.assertTrue(np.all(np.diff(curve) > 0))
            self.assertEqual(curve[4], 0.0)

    def test_base_geometry_unchanged(self):
        """Test perturbation leaves the base geometry intact."""
        dimension_sensitivity(25.0, self.geometry, self.library)
        self.assertEqual(self.geometry.core_diameter, 100.0)
        self.assertEqual(self.geometry.core_height, 50.0)

    def test_degenerate_perturbation(self):
        """Test shrinking the core away fails fast."""
        with self.assertRaises(DegenerateGeometryError):
            dimension_sensitivity(-100.0, self.geometry, self.library)
        with self.assertRaises(DomainError):
            dimension_sensitivity(float("inf"), self.geometry, self.library)


class TestKEffCurve(unittest.TestCase):
    """Test enrichment sweeps."""

    def test_sweep(self):
        geometry = CellGeometry()
        library = reference_library()
        enrichments = np.linspace(0.0, 1.0, 6)
        curve = k_eff_curve(enrichments, geometry, library)
        self.assertEqual(curve.shape, (6,))
        self.assertTrue(np.all(np.diff(curve) > 0))


if __name__ == "__main__":
    unittest.main()
