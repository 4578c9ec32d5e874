"""
Core Geometry Module for the Fast Micro-Reactor

This module defines the cylindrical core filled with a square lattice of
clad metallic fuel elements, and the unit cell the homogenizer works on.

Each fuel element owns one unit cell: the element itself plus its share of
the coolant. Volume fractions of fuel, cladding and coolant are pure volume
ratios within that cell.
"""

from dataclasses import dataclass, replace
from typing import Dict, Tuple
import logging
import math

import numpy as np
from scipy.special import j0, j1

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .exceptions import DegenerateGeometryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CellGeometry:
    """
    Core and fuel-element dimensions.

    Attributes:
        core_diameter: Active core diameter [cm]
        core_height: Active core height [cm]
        element_diameter: Fuel element outer diameter [cm]
        cladding_thickness: Cladding wall thickness [cm]
        pitch_ratio: Lattice pitch over element outer diameter
        extrapolation_length: Extrapolation distance added to each free
            surface [cm]
    """

    core_diameter: float = 100.0  # [cm]
    core_height: float = 50.0  # [cm]
    element_diameter: float = 0.90  # [cm]
    cladding_thickness: float = 0.05  # [cm]
    pitch_ratio: float = 1.4
    extrapolation_length: float = 15.0  # [cm]

    def __post_init__(self):
        """Reject geometry that cannot form a unit cell."""
        for name in ("core_diameter", "core_height", "element_diameter", "pitch_ratio"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0.0):
                raise DegenerateGeometryError(f"{name} must be positive, got {value}")
        if not (math.isfinite(self.cladding_thickness) and self.cladding_thickness >= 0.0):
            raise DegenerateGeometryError("cladding_thickness must be non-negative")
        if not (math.isfinite(self.extrapolation_length) and self.extrapolation_length >= 0.0):
            raise DegenerateGeometryError("extrapolation_length must be non-negative")
        if self.fuel_diameter <= 0.0:
            raise DegenerateGeometryError(
                f"Cladding of {self.cladding_thickness} cm leaves no fuel in a "
                f"{self.element_diameter} cm element"
            )
        if self.pitch_ratio < 1.0:
            raise DegenerateGeometryError("Fuel elements overlap: pitch_ratio < 1")
        if self.num_fuel_elements < 1:
            raise DegenerateGeometryError("Core is too small to hold a fuel element")
        if self.moderator_volume < 0.0:
            raise DegenerateGeometryError("Fuel elements do not fit in the core")

    @property
    def core_radius(self) -> float:
        """Active core radius [cm]."""
        return self.core_diameter / 2.0

    @property
    def fuel_diameter(self) -> float:
        """Fuel slug diameter [cm]."""
        return self.element_diameter - 2.0 * self.cladding_thickness

    @property
    def pitch(self) -> float:
        """Lattice pitch [cm]."""
        return self.pitch_ratio * self.element_diameter

    @property
    def extrapolated_radius(self) -> float:
        return self.core_radius + self.extrapolation_length

    @property
    def extrapolated_height(self) -> float:
        return self.core_height + 2.0 * self.extrapolation_length

    @property
    def core_area(self) -> float:
        """Core cross-sectional area [cm²]."""
        return math.pi * self.core_radius**2

    @property
    def num_fuel_elements(self) -> int:
        """
        Number of fuel elements in the core.

        The circular cross section is packed as an equivalent square of
        side sqrt(π r²) filled at the lattice pitch, rounded to the
        nearest whole element.
        """
        return int(round((math.sqrt(self.core_area) / self.pitch) ** 2))

    @property
    def core_volume(self) -> float:
        """Active core volume [cm³]."""
        return self.core_area * self.core_height

    @property
    def element_volume(self) -> float:
        """Volume of one fuel element, fuel plus cladding [cm³]."""
        return math.pi * (self.element_diameter / 2.0) ** 2 * self.core_height

    @property
    def cladding_volume(self) -> float:
        """Cladding volume of one element [cm³]."""
        return (
            math.pi
            * ((self.element_diameter / 2.0) ** 2 - (self.fuel_diameter / 2.0) ** 2)
            * self.core_height
        )

    @property
    def fuel_volume(self) -> float:
        """Fuel volume of one element [cm³]."""
        return self.element_volume - self.cladding_volume

    @property
    def cell_volume(self) -> float:
        """Volume of one unit cell [cm³]."""
        return self.core_volume / self.num_fuel_elements

    @property
    def moderator_volume(self) -> float:
        """Coolant volume per unit cell [cm³]."""
        return (self.core_volume - self.num_fuel_elements * self.element_volume) / (
            self.num_fuel_elements
        )

    def volume_fractions(self) -> Dict[str, float]:
        """
        Unit-cell volume fractions.

        Returns:
            Dictionary with fuel, cladding and moderator fractions (sum to 1)
        """
        return {
            "fuel": self.fuel_volume / self.cell_volume,
            "cladding": self.cladding_volume / self.cell_volume,
            "moderator": self.moderator_volume / self.cell_volume,
        }

    def buckling_dimensions(self, extrapolated: bool = False) -> Tuple[float, float]:
        """Radius and height used for leakage [cm]."""
        if extrapolated:
            return self.extrapolated_radius, self.extrapolated_height
        return self.core_radius, self.core_height

    def get_buckling_geometric(
        self,
        extrapolated: bool = False,
        constants: PhysicalConstants = DEFAULT_CONSTANTS,
    ) -> Tuple[float, float, float]:
        """
        Geometric buckling of a bare cylinder.

        B² = (j₀₁/R)² + (π/H)²

        Args:
            extrapolated: Use extrapolated dimensions
            constants: Source of the Bessel zero j₀₁

        Returns:
            Tuple of (radial, axial, total) buckling [1/cm²]
        """
        radius, height = self.buckling_dimensions(extrapolated)
        b_r = (constants.BESSEL_J0_FIRST_ZERO / radius) ** 2
        b_z = (math.pi / height) ** 2
        return b_r, b_z, b_r + b_z

    def buckling(
        self,
        extrapolated: bool = False,
        constants: PhysicalConstants = DEFAULT_CONSTANTS,
    ) -> float:
        """Total geometric buckling [1/cm²]."""
        return self.get_buckling_geometric(extrapolated, constants)[2]

    def flux_shape(
        self,
        r,
        z,
        extrapolated: bool = False,
        constants: PhysicalConstants = DEFAULT_CONSTANTS,
    ):
        """
        Fundamental-mode flux shape J₀(j₀₁r/R)·cos(πz/H), unity at the centre.

        Args:
            r: Radial position(s) [cm]
            z: Axial position(s) measured from the core midplane [cm]

        Returns:
            Relative flux (broadcast over r and z)
        """
        radius, height = self.buckling_dimensions(extrapolated)
        r = np.asarray(r, dtype=float)
        z = np.asarray(z, dtype=float)
        return j0(constants.BESSEL_J0_FIRST_ZERO * r / radius) * np.cos(np.pi * z / height)

    def peak_to_average_ratio(
        self,
        extrapolated: bool = False,
        constants: PhysicalConstants = DEFAULT_CONSTANTS,
    ) -> Dict[str, float]:
        """
        Peak-to-average ratio of the fundamental-mode flux over the core.

        Returns:
            Dictionary with radial, axial and total ratios
        """
        radius, height = self.buckling_dimensions(extrapolated)
        a = constants.BESSEL_J0_FIRST_ZERO * self.core_radius / radius
        b = math.pi * self.core_height / (2.0 * height)

        radial = a / (2.0 * float(j1(a)))
        axial = b / math.sin(b)

        return {
            "radial": radial,
            "axial": axial,
            "total": radial * axial,
        }

    def perturbed(self, delta: float) -> "CellGeometry":
        """
        Geometry with core diameter and height each changed by delta [cm].

        Every derived quantity (extrapolated dimensions, element count,
        volume fractions) follows from the new dimensions.
        """
        logger.debug("Perturbing core dimensions by %+.3f cm", delta)
        return replace(
            self,
            core_diameter=self.core_diameter + delta,
            core_height=self.core_height + delta,
        )

    def summary(self) -> Dict[str, float]:
        """Geometry summary for reporting."""
        return {
            "core_diameter_cm": self.core_diameter,
            "core_height_cm": self.core_height,
            "element_diameter_cm": self.element_diameter,
            "fuel_diameter_cm": self.fuel_diameter,
            "pitch_cm": self.pitch,
            "num_fuel_elements": self.num_fuel_elements,
            "core_volume_m3": self.core_volume * 1e-6,
            "volume_fractions": self.volume_fractions(),
        }
