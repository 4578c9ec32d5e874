"""
Cell Homogenization

Smears the fuel, cladding and coolant of one unit cell into a single set of
8-group macroscopic cross sections. Disadvantage factors are approximated by
pure volume ratios.
"""

from dataclasses import dataclass
from typing import Dict
import logging
import math

import numpy as np

from .config import DEFAULT_OPTIONS, ModelOptions
from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .exceptions import DomainError
from .geometry import CellGeometry
from .materials import MaterialLibrary

logger = logging.getLogger(__name__)


def validate_enrichment(enrichment: float) -> float:
    """
    Check that an enrichment is an atom fraction in [0, 1].

    Raises:
        DomainError: If the enrichment is outside [0, 1] or not finite
    """
    enrichment = float(enrichment)
    if not (math.isfinite(enrichment) and 0.0 <= enrichment <= 1.0):
        raise DomainError(f"Enrichment must be an atom fraction in [0, 1], got {enrichment}")
    return enrichment


@dataclass(frozen=True, eq=False)
class HomogenizedCrossSections:
    """
    Cell-averaged macroscopic cross sections [1/cm].

    Each instance is bound to the enrichment and geometry that produced it.

    Attributes:
        enrichment: U-235 atom fraction of the fuel
        geometry: Geometry the cell was built from
        volume_fractions: Fuel, cladding and moderator fractions
        transport: Σ_tr per group
        capture: Σ_γ per group
        removal: Σ_r per group
        fission: Σ_f per group (fuel fraction only)
        nu_fission: νΣ_f per group (fuel fraction only)
        production: x·ν₅Σ_f5 + (1-x)·ν₈Σ_f8 of the undiluted fuel, the
            source weighting used for k_eff
        scattering: Σ_s group-to-group matrix
    """

    enrichment: float
    geometry: CellGeometry
    volume_fractions: Dict[str, float]
    transport: np.ndarray
    capture: np.ndarray
    removal: np.ndarray
    fission: np.ndarray
    nu_fission: np.ndarray
    production: np.ndarray
    scattering: np.ndarray

    def __post_init__(self):
        for name in ("transport", "capture", "removal", "fission", "nu_fission",
                     "production", "scattering"):
            array = np.array(getattr(self, name), dtype=float)
            array.setflags(write=False)
            object.__setattr__(self, name, array)

    @property
    def num_groups(self) -> int:
        return len(self.transport)

    @property
    def diffusion_coefficient(self) -> np.ndarray:
        """D = 1/(3Σ_tr) [cm]."""
        return 1.0 / (3.0 * self.transport)

    def as_dict(self) -> Dict[str, list]:
        """Cross sections as plain lists for reporting."""
        return {
            "transport_1_cm": self.transport.tolist(),
            "capture_1_cm": self.capture.tolist(),
            "removal_1_cm": self.removal.tolist(),
            "fission_1_cm": self.fission.tolist(),
            "nu_fission_1_cm": self.nu_fission.tolist(),
        }


def number_densities(
    materials: MaterialLibrary,
    options: ModelOptions = DEFAULT_OPTIONS,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> Dict[str, float]:
    """
    Number density applied to each material [atoms/cm³].

    With the "coolant" basis every material is evaluated at the coolant
    number density.
    """
    if options.number_density_basis == "coolant":
        n_coolant = materials.coolant.number_density(constants)
        return {name: n_coolant for name in materials.materials()}
    return {name: m.number_density(constants) for name, m in materials.materials().items()}


def homogenize(
    enrichment: float,
    geometry: CellGeometry,
    materials: MaterialLibrary,
    options: ModelOptions = DEFAULT_OPTIONS,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> HomogenizedCrossSections:
    """
    Homogenize one unit cell at the given enrichment.

    Σ = ζ_c·Σ_clad + ζ_m·Σ_coolant + ζ_f·(x·Σ_U235 + (1-x)·Σ_U238)

    Args:
        enrichment: U-235 atom fraction of the fuel, in [0, 1]
        geometry: Core and element dimensions
        materials: Material library
        options: Model options (number-density basis)
        constants: Physical constants supplying Avogadro's number

    Returns:
        HomogenizedCrossSections bound to (enrichment, geometry)
    """
    x = validate_enrichment(enrichment)
    fractions = geometry.volume_fractions()
    densities = number_densities(materials, options, constants)
    zeta_f, zeta_c, zeta_m = fractions["fuel"], fractions["cladding"], fractions["moderator"]

    def fuel(reaction: str) -> np.ndarray:
        return (
            x * materials.fissile.macroscopic(reaction, densities["fissile"])
            + (1.0 - x) * materials.fertile.macroscopic(reaction, densities["fertile"])
        )

    def cell(reaction: str) -> np.ndarray:
        return (
            zeta_c * materials.cladding.macroscopic(reaction, densities["cladding"])
            + zeta_m * materials.coolant.macroscopic(reaction, densities["coolant"])
            + zeta_f * fuel(reaction)
        )

    production = (
        x * densities["fissile"] * materials.fissile.nu_fission()
        + (1.0 - x) * densities["fertile"] * materials.fertile.nu_fission()
    )

    logger.debug(
        "Homogenized cell at x=%.6f (fuel %.4f, clad %.4f, moderator %.4f)",
        x, zeta_f, zeta_c, zeta_m,
    )

    return HomogenizedCrossSections(
        enrichment=x,
        geometry=geometry,
        volume_fractions=fractions,
        transport=cell("transport"),
        capture=cell("capture"),
        removal=cell("removal"),
        fission=zeta_f * fuel("fission"),
        nu_fission=zeta_f * production,
        production=production,
        scattering=cell("scattering"),
    )


homogenized_cross_sections = homogenize
