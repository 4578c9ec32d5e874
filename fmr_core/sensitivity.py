"""
Sensitivity of k_eff to Enrichment and Core Dimensions

Every evaluation re-runs the full homogenizer and diffusion pipeline from
its own inputs; only the base-case k_eff is shared, as the denominator of
the relative change.
"""

from typing import Iterable
import logging
import math

import numpy as np
from scipy.linalg import lu_factor, lu_solve

from .config import DEFAULT_OPTIONS, ModelOptions
from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .exceptions import DomainError
from .geometry import CellGeometry
from .homogenization import homogenize, validate_enrichment
from .materials import MaterialLibrary
from .neutronics import compute_k_eff, loss_matrix, solve_cell

logger = logging.getLogger(__name__)

REFERENCE_ENRICHMENT = 0.798


def enrichment_sensitivity(
    enrichment: float,
    relative_step: float,
    geometry: CellGeometry,
    materials: MaterialLibrary,
    options: ModelOptions = DEFAULT_OPTIONS,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Relative k_eff change across a centred enrichment step.

    (k(x + δx) - k(x - δx)) / k(x), with δx = relative_step·x

    Args:
        enrichment: Base enrichment x
        relative_step: δx/x
        geometry: Core and element dimensions
        materials: Material library
        options: Model options
        constants: Physical constants

    Returns:
        Relative change in k_eff
    """
    x = validate_enrichment(enrichment)
    if not (math.isfinite(relative_step) and relative_step >= 0.0):
        raise DomainError(f"relative_step must be non-negative, got {relative_step}")
    dx = relative_step * x
    if x - dx < 0.0 or x + dx > 1.0:
        raise DomainError(
            f"Enrichment stencil [{x - dx:.6f}, {x + dx:.6f}] leaves [0, 1]"
        )

    k_base, _ = compute_k_eff(x, geometry, materials, options, constants)
    k_plus, _ = compute_k_eff(x + dx, geometry, materials, options, constants)
    k_minus, _ = compute_k_eff(x - dx, geometry, materials, options, constants)

    result = (k_plus - k_minus) / k_base
    logger.debug("Enrichment sensitivity at x=%.6f, step %.3g: %.6e", x, relative_step, result)
    return result


def k_eff_enrichment_derivative(
    enrichment: float,
    geometry: CellGeometry,
    materials: MaterialLibrary,
    options: ModelOptions = DEFAULT_OPTIONS,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Exact dk_eff/dx by differentiating the group balance.

    All homogenized cross sections are linear in x, so their derivative is
    their value at x = 1 minus their value at x = 0. Then

        dφ/dx = -L⁻¹ (dL/dx) φ
        dk/dx = p'·φ + p·dφ/dx

    Returns:
        dk_eff/dx
    """
    xs, solution = solve_cell(enrichment, geometry, materials, options, constants)
    xs_one = homogenize(1.0, geometry, materials, options, constants)
    xs_zero = homogenize(0.0, geometry, materials, options, constants)

    def slope(name: str) -> np.ndarray:
        return getattr(xs_one, name) - getattr(xs_zero, name)

    d_diffusion = -slope("transport") / (3.0 * xs.transport**2)
    d_loss = np.diag(d_diffusion * solution.buckling + slope("removal")) + slope("scattering").T

    lu = lu_factor(loss_matrix(xs, solution.buckling))
    d_flux = -lu_solve(lu, d_loss @ solution.flux)

    return float(slope("production") @ solution.flux + xs.production @ d_flux)


def dimension_sensitivity(
    perturbation_length: float,
    base_geometry: CellGeometry,
    materials: MaterialLibrary,
    enrichment: float = REFERENCE_ENRICHMENT,
    options: ModelOptions = DEFAULT_OPTIONS,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Relative k_eff change when core diameter and height both change by δ.

    The perturbed geometry is rebuilt from scratch (extrapolated dimensions,
    element count and volume fractions included) and solved with the same
    buckling policy as the base case.

    Args:
        perturbation_length: δ [cm]
        base_geometry: Unperturbed geometry
        materials: Material library
        enrichment: Fuel enrichment held fixed
        options: Model options
        constants: Physical constants

    Returns:
        (k(δ) - k(0)) / k(0)
    """
    if not math.isfinite(perturbation_length):
        raise DomainError("perturbation_length must be finite")

    k_base, _ = compute_k_eff(enrichment, base_geometry, materials, options, constants)
    perturbed = base_geometry.perturbed(perturbation_length)
    k_perturbed, _ = compute_k_eff(enrichment, perturbed, materials, options, constants)

    result = (k_perturbed - k_base) / k_base
    logger.debug(
        "Dimension sensitivity at delta=%+.3f cm (%d elements): %.6e",
        perturbation_length, perturbed.num_fuel_elements, result,
    )
    return result


def k_eff_curve(
    enrichments: Iterable[float],
    geometry: CellGeometry,
    materials: MaterialLibrary,
    options: ModelOptions = DEFAULT_OPTIONS,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> np.ndarray:
    """k_eff at each enrichment of a sweep."""
    return np.array([
        compute_k_eff(x, geometry, materials, options, constants)[0]
        for x in enrichments
    ])


def dimension_sensitivity_curve(
    perturbations: Iterable[float],
    base_geometry: CellGeometry,
    materials: MaterialLibrary,
    enrichment: float = REFERENCE_ENRICHMENT,
    options: ModelOptions = DEFAULT_OPTIONS,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> np.ndarray:
    """Relative k_eff change at each perturbation length of a sweep."""
    return np.array([
        dimension_sensitivity(delta, base_geometry, materials, enrichment, options, constants)
        for delta in perturbations
    ])
