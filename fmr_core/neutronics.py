"""
Zero-Dimensional Multigroup Diffusion Solver

Solves the 8-group, leakage-corrected balance of a bare homogeneous core:

    [diag(D_g·B² + Σ_r,g) + Σ_sᵀ] · φ = χ

and weights the resulting flux with the fuel neutron production to obtain
k_eff. Downscatter only: Σ_s is strictly upper triangular, so the loss
matrix is lower triangular.
"""

from dataclasses import dataclass
from typing import Dict, Tuple
import logging
import math

import numpy as np
from scipy.linalg import lu_factor, lu_solve

from .config import DEFAULT_OPTIONS, ModelOptions
from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .exceptions import InvalidFluxError, SingularSystemError
from .geometry import CellGeometry
from .homogenization import HomogenizedCrossSections, homogenize
from .materials import MaterialLibrary
from .utils import delta_k_to_pcm

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class FluxSolution:
    """
    Result of one diffusion solve.

    Attributes:
        flux: Group flux per unit fission-source neutron
        k_eff: Effective multiplication factor
        buckling: Geometric buckling used [1/cm²]
        negative_groups: Zero-based indices of groups with negative flux
    """

    flux: np.ndarray
    k_eff: float
    buckling: float
    negative_groups: Tuple[int, ...] = ()

    @property
    def is_physical(self) -> bool:
        return not self.negative_groups


def loss_matrix(xs: HomogenizedCrossSections, buckling: float) -> np.ndarray:
    """
    Assemble the group loss matrix.

    L = diag(D_g·B² + Σ_r,g) + Σ_sᵀ

    Args:
        xs: Homogenized cross sections
        buckling: Geometric buckling [1/cm²]

    Returns:
        Square loss matrix [1/cm]
    """
    diagonal = xs.diffusion_coefficient * buckling + xs.removal
    return np.diag(diagonal) + xs.scattering.T


def solve(
    xs: HomogenizedCrossSections,
    buckling: float,
    chi: np.ndarray,
    options: ModelOptions = DEFAULT_OPTIONS,
) -> FluxSolution:
    """
    Solve L·φ = χ and compute k_eff = Σ_g production_g·φ_g.

    Args:
        xs: Homogenized cross sections
        buckling: Geometric buckling [1/cm²]
        chi: Fission spectrum
        options: Model options (conditioning limit, negative flux policy)

    Returns:
        FluxSolution

    Raises:
        SingularSystemError: If the loss matrix is singular or ill-conditioned
        InvalidFluxError: If the flux is non-finite, or negative in strict mode
    """
    chi = np.asarray(chi, dtype=float)
    L = loss_matrix(xs, buckling)

    if not np.all(np.isfinite(L)):
        raise SingularSystemError("Loss matrix contains non-finite entries")

    with np.errstate(divide="ignore", invalid="ignore"):
        condition = np.linalg.cond(L)
    if not (math.isfinite(condition) and condition <= options.condition_limit):
        raise SingularSystemError(
            f"Loss matrix is singular or ill-conditioned (cond = {condition:.3e})"
        )

    flux = lu_solve(lu_factor(L), chi)

    if not np.all(np.isfinite(flux)):
        raise InvalidFluxError("Diffusion solve produced non-finite flux")

    negative = tuple(int(g) for g in np.flatnonzero(flux < 0.0))
    if negative:
        message = (
            f"Negative flux in group(s) {[g + 1 for g in negative]} at "
            f"x={xs.enrichment:.6f}"
        )
        if options.reject_negative_flux:
            raise InvalidFluxError(message)
        # Flagged on the result; reports decide whether to warn
        logger.debug(message)

    k_eff = float(np.dot(xs.production, flux))
    logger.debug("Solved x=%.6f: k_eff=%.6f, B2=%.6e", xs.enrichment, k_eff, buckling)

    return FluxSolution(flux=flux, k_eff=k_eff, buckling=buckling, negative_groups=negative)


def solve_cell(
    enrichment: float,
    geometry: CellGeometry,
    materials: MaterialLibrary,
    options: ModelOptions = DEFAULT_OPTIONS,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> Tuple[HomogenizedCrossSections, FluxSolution]:
    """Homogenize and solve one core configuration."""
    xs = homogenize(enrichment, geometry, materials, options, constants)
    buckling = geometry.buckling(options.extrapolated_buckling, constants)
    solution = solve(xs, buckling, materials.groups.fission_spectrum(), options)
    return xs, solution


def compute_k_eff(
    enrichment: float,
    geometry: CellGeometry,
    materials: MaterialLibrary,
    options: ModelOptions = DEFAULT_OPTIONS,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> Tuple[float, np.ndarray]:
    """
    Effective multiplication factor of a core configuration.

    Args:
        enrichment: U-235 atom fraction of the fuel, in [0, 1]
        geometry: Core and element dimensions
        materials: Material library
        options: Model options
        constants: Physical constants

    Returns:
        Tuple of (k_eff, group flux)
    """
    _, solution = solve_cell(enrichment, geometry, materials, options, constants)
    return solution.k_eff, solution.flux


@dataclass(frozen=True, eq=False)
class NormalizedFlux:
    """
    Group flux scaled to the core thermal power.

    Attributes:
        average: Core-average group flux [n/cm²/s]
        peak: Peak group flux at the core centre [n/cm²/s]
        scale: Factor applied to the unit-source flux
        peak_to_average: Fundamental-mode peak-to-average ratio
    """

    average: np.ndarray
    peak: np.ndarray
    scale: float
    peak_to_average: float

    @property
    def total_average(self) -> float:
        return float(np.sum(self.average))

    @property
    def total_peak(self) -> float:
        return float(np.sum(self.peak))


def normalize_flux(
    solution: FluxSolution,
    xs: HomogenizedCrossSections,
    geometry: CellGeometry,
    thermal_power: float,
    extrapolated: bool = False,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> NormalizedFlux:
    """
    Scale the group flux so the fission power equals the thermal power.

    P = E_f · V_core · Σ_g Σ_f,g·φ_g

    Args:
        solution: Unit-source flux solution
        xs: Cross sections the solution was computed with
        geometry: Core geometry
        thermal_power: Core thermal power [W]
        extrapolated: Use extrapolated dimensions for the flux shape
        constants: Physical constants

    Returns:
        NormalizedFlux
    """
    fission_rate = float(np.dot(xs.fission, solution.flux))  # [fissions/cm³ per source]
    if not fission_rate > 0.0:
        raise InvalidFluxError("Fission rate is not positive; flux cannot be normalized")

    scale = thermal_power / (constants.energy_per_fission_j * geometry.core_volume * fission_rate)
    ratio = geometry.peak_to_average_ratio(extrapolated, constants)["total"]
    average = scale * solution.flux

    return NormalizedFlux(
        average=average,
        peak=ratio * average,
        scale=scale,
        peak_to_average=ratio,
    )


def reactivity(k_eff: float) -> float:
    """Reactivity ρ = (k - 1)/k [Δk/k]."""
    return (k_eff - 1.0) / k_eff


def reactivity_pcm(k_eff: float) -> float:
    """Reactivity in pcm."""
    return delta_k_to_pcm(reactivity(k_eff))


def spectrum_summary(solution: FluxSolution, groups) -> Dict[str, list]:
    """Relative group spectrum for reporting."""
    total = float(np.sum(solution.flux))
    return {
        "lower_energy_keV": list(groups.lower_energies),
        "group_fraction": (solution.flux / total).tolist(),
    }
