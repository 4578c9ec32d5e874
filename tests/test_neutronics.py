"""
Tests for the neutronics module.
"""

import logging
import unittest
from dataclasses import replace
import numpy as np

from fmr_core.config import ModelOptions
from fmr_core.constants import DEFAULT_CONSTANTS
from fmr_core.geometry import CellGeometry
from fmr_core.homogenization import homogenize
from fmr_core.materials import reference_library
from fmr_core.neutronics import (
    compute_k_eff,
    loss_matrix,
    normalize_flux,
    reactivity,
    reactivity_pcm,
    solve,
    solve_cell,
)
from fmr_core.search import REFERENCE_TARGET
from fmr_core.exceptions import DomainError, InvalidFluxError, SingularSystemError


class TestDiffusionSolver(unittest.TestCase):
    """Test the multigroup diffusion solve."""

    def setUp(self):
        self.geometry = CellGeometry()
        self.library = reference_library()
        self.chi = self.library.groups.fission_spectrum()
        self.xs = homogenize(0.798, self.geometry, self.library)
        self.buckling = self.geometry.buckling()

    def test_reference_design_k_eff(self):
        """Test x = 0.798 reproduces the design k_eff band."""
        k_eff, flux = compute_k_eff(0.798, self.geometry, self.library)
        self.assertTrue(REFERENCE_TARGET.contains(k_eff))
        self.assertAlmostEqual(k_eff, 1.035, places=3)
        self.assertEqual(flux.shape, (8,))

    def test_k_eff_limits(self):
        """Test k_eff of pure U-238 and pure U-235 fuel."""
        k_zero, _ = compute_k_eff(0.0, self.geometry, self.library)
        k_one, _ = compute_k_eff(1.0, self.geometry, self.library)
        self.assertTrue(0.29 < k_zero < 0.32)
        self.assertTrue(1.23 < k_one < 1.27)
        self.assertLess(k_zero, k_one)

    def test_k_eff_monotonic_in_enrichment(self):
        """Test k_eff increases with enrichment."""
        k_values = [
            compute_k_eff(x, self.geometry, self.library)[0]
            for x in np.linspace(0.0, 1.0, 11)
        ]
        self.assertTrue(np.all(np.diff(k_values) > 0))

    def test_loss_matrix_structure(self):
        """Test L is lower triangular with positive diagonal."""
        L = loss_matrix(self.xs, self.buckling)
        self.assertEqual(L.shape, (8, 8))
        np.testing.assert_array_equal(np.triu(L, k=1), np.zeros((8, 8)))
        self.assertTrue(np.all(np.diag(L) > 0))
        expected_diag = self.xs.diffusion_coefficient * self.buckling + self.xs.removal
        np.testing.assert_allclose(np.diag(L), expected_diag)
        np.testing.assert_allclose(np.tril(L, k=-1), self.xs.scattering.T)

    def test_flux_satisfies_balance(self):
        """Test L·φ = χ."""
        solution = solve(self.xs, self.buckling, self.chi)
        L = loss_matrix(self.xs, self.buckling)
        np.testing.assert_allclose(L @ solution.flux, self.chi, atol=1e-12)
        self.assertAlmostEqual(
            solution.k_eff, float(self.xs.production @ solution.flux), places=12
        )
        self.assertEqual(solution.buckling, self.buckling)

    def test_fast_groups_dominate(self):
        """Test the spectrum is hard."""
        _, flux = compute_k_eff(0.798, self.geometry, self.library)
        self.assertGreater(flux[0] + flux[1], 0.5 * np.sum(np.abs(flux)))

    def test_negative_flux_flagged(self):
        """Test the sourceless bottom group is flagged, not accepted silently."""
        with self.assertLogs("fmr_core.neutronics", level="DEBUG") as cm:
            solution = solve(self.xs, self.buckling, self.chi)
        self.assertTrue(any("Negative flux" in line for line in cm.output))
        self.assertFalse(any(record.levelno >= logging.WARNING for record in cm.records))
        self.assertEqual(solution.negative_groups, (7,))
        self.assertFalse(solution.is_physical)

    def test_negative_flux_rejected_in_strict_mode(self):
        """Test strict mode raises on negative flux."""
        with self.assertRaises(InvalidFluxError):
            solve(self.xs, self.buckling, self.chi, ModelOptions(reject_negative_flux=True))

    def test_singular_matrix(self):
        """Test a singular loss matrix raises."""
        xs = replace(self.xs, removal=np.zeros(8))
        with self.assertRaises(SingularSystemError):
            solve(xs, 0.0, self.chi)

    def test_non_finite_matrix(self):
        """Test non-finite cross sections raise."""
        xs = replace(self.xs, transport=np.full(8, np.nan))
        with self.assertRaises(SingularSystemError):
            solve(xs, self.buckling, self.chi)

    def test_ill_conditioned_matrix(self):
        """Test the condition limit is enforced."""
        with self.assertRaises(SingularSystemError):
            solve(self.xs, self.buckling, self.chi, ModelOptions(condition_limit=1.5))

    def test_invalid_enrichment(self):
        """Test enrichment outside [0, 1] never reaches the solver."""
        with self.assertRaises(DomainError):
            compute_k_eff(1.5, self.geometry, self.library)


class TestModelOptions(unittest.TestCase):
    """Test solver policy switches."""

    def setUp(self):
        self.geometry = CellGeometry()
        self.library = reference_library()
        self.k_reference, _ = compute_k_eff(0.798, self.geometry, self.library)

    def test_extrapolated_buckling_raises_k(self):
        """Test lower leakage with extrapolated dimensions."""
        k_eff, _ = compute_k_eff(
            0.798, self.geometry, self.library, ModelOptions(extrapolated_buckling=True)
        )
        self.assertGreater(k_eff, self.k_reference)
        self.assertTrue(1.30 < k_eff < 1.34)

    def test_material_number_density_changes_k(self):
        """Test the number-density basis is applied."""
        k_eff, _ = compute_k_eff(
            0.798, self.geometry, self.library, ModelOptions(number_density_basis="material")
        )
        self.assertGreater(k_eff, self.k_reference)

    def test_invalid_option(self):
        """Test unknown basis is rejected."""
        with self.assertRaises(DomainError):
            ModelOptions(number_density_basis="fuel")


class TestFluxNormalization(unittest.TestCase):
    """Test power normalization of the flux."""

    def setUp(self):
        self.geometry = CellGeometry()
        self.library = reference_library()
        self.xs, self.solution = solve_cell(0.798, self.geometry, self.library)
        self.power = 1.0e6  # [W]
        self.flux = normalize_flux(self.solution, self.xs, self.geometry, self.power)

    def test_power_reproduced(self):
        """Test E_f·V·ΣΣ_f·φ equals the thermal power."""
        power = (
            DEFAULT_CONSTANTS.energy_per_fission_j
            * self.geometry.core_volume
            * float(self.xs.fission @ self.flux.average)
        )
        self.assertAlmostEqual(power / self.power, 1.0, places=10)

    def test_peak_flux(self):
        """Test peak flux is the peaking ratio times the average."""
        np.testing.assert_allclose(self.flux.peak, self.flux.peak_to_average * self.flux.average)
        self.assertTrue(3.6 < self.flux.peak_to_average < 3.7)

    def test_flux_scales_with_power(self):
        """Test flux is proportional to power."""
        double = normalize_flux(self.solution, self.xs, self.geometry, 2 * self.power)
        self.assertAlmostEqual(double.total_average / self.flux.total_average, 2.0, places=10)

    def test_flux_magnitude(self):
        """Test average flux of a 1 MW core is of order 1e12 n/cm²/s."""
        self.assertTrue(1e11 < self.flux.total_average < 1e14)


class TestReactivity(unittest.TestCase):
    """Test reactivity conversions."""

    def test_critical(self):
        self.assertEqual(reactivity(1.0), 0.0)

    def test_supercritical(self):
        self.assertAlmostEqual(reactivity_pcm(1.035), 3381.64, places=1)

    def test_subcritical(self):
        self.assertLess(reactivity(0.95), 0.0)


if __name__ == "__main__":
    unittest.main()
