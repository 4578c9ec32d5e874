"""
Material Library for the Sodium-Cooled Fast Micro-Reactor

This module defines the 8-group microscopic cross sections of the coolant
(sodium), the cladding (iron, standing in for stainless steel) and the two
uranium isotopes of the metallic fuel.

Cross sections are tabulated in barns and converted to cm² once, when a
MaterialProperties instance is built. Everything downstream works in cm².
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
import logging

import numpy as np

from .constants import (
    DEFAULT_CONSTANTS,
    EIGHT_GROUP_STRUCTURE,
    GroupStructure,
    PhysicalConstants,
)
from .exceptions import DomainError, UnitConsistencyError

logger = logging.getLogger(__name__)

REACTIONS = ("transport", "capture", "removal", "fission", "scattering")


def _frozen(values, shape, label: str) -> np.ndarray:
    array = np.array(values, dtype=float)
    if array.shape != shape:
        raise DomainError(f"{label} must have shape {shape}, got {array.shape}")
    if not np.all(np.isfinite(array)):
        raise DomainError(f"{label} contains non-finite values")
    if np.any(array < 0.0):
        raise DomainError(f"{label} contains negative values")
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class MaterialProperties:
    """
    Multigroup microscopic data of a single material.

    Attributes:
        name: Material name
        density: Mass density [g/cm³]
        molar_mass: Molar mass [g/mol]
        transport: Transport cross section per group
        capture: Radiative capture cross section per group
        removal: Removal cross section per group
        scattering: Group-to-group scattering matrix (row = origin group,
            column = destination group, downscatter only)
        fission: Fission cross section per group (None if non-fissionable)
        nu: Neutrons per fission per group (None if non-fissionable)
        units: Unit of the supplied cross sections, "barn" or "cm2"
    """

    name: str
    density: float  # [g/cm³]
    molar_mass: float  # [g/mol]
    transport: np.ndarray
    capture: np.ndarray
    removal: np.ndarray
    scattering: np.ndarray
    fission: Optional[np.ndarray] = None
    nu: Optional[np.ndarray] = None
    units: str = "barn"
    constants: PhysicalConstants = field(
        default=DEFAULT_CONSTANTS, repr=False, compare=False
    )

    def __post_init__(self):
        """Validate the data and normalize it to cm²."""
        if self.units == "barn":
            scale = self.constants.BARN_TO_CM2
        elif self.units == "cm2":
            scale = 1.0
        else:
            raise UnitConsistencyError(
                f"{self.name}: unknown cross-section unit {self.units!r}"
            )
        if not (self.density > 0.0 and self.molar_mass > 0.0):
            raise DomainError(f"{self.name}: density and molar mass must be positive")

        n = len(self.transport)
        for label in ("transport", "capture", "removal"):
            values = _frozen(getattr(self, label), (n,), f"{self.name} {label}")
            object.__setattr__(self, label, _frozen(values * scale, (n,), label))

        scattering = _frozen(self.scattering, (n, n), f"{self.name} scattering")
        if np.any(np.tril(scattering) != 0.0):
            raise DomainError(
                f"{self.name}: scattering matrix must be strictly upper triangular "
                "(downscatter only)"
            )
        object.__setattr__(
            self, "scattering", _frozen(scattering * scale, (n, n), "scattering")
        )

        if (self.fission is None) != (self.nu is None):
            raise DomainError(f"{self.name}: fission and nu must be given together")
        if self.fission is not None:
            fission = _frozen(self.fission, (n,), f"{self.name} fission")
            object.__setattr__(self, "fission", _frozen(fission * scale, (n,), "fission"))
            object.__setattr__(self, "nu", _frozen(self.nu, (n,), f"{self.name} nu"))

        # Data are stored in cm² from here on
        object.__setattr__(self, "units", "cm2")

    @property
    def num_groups(self) -> int:
        return len(self.transport)

    @property
    def is_fissionable(self) -> bool:
        return self.fission is not None

    def number_density(self, constants: Optional[PhysicalConstants] = None) -> float:
        """
        Atom number density N = ρ·N_A/M.

        Args:
            constants: Physical constants supplying N_A; defaults to the
                constants the material was loaded with

        Returns:
            Number density [atoms/cm³]
        """
        if constants is None:
            constants = self.constants
        return self.density * constants.AVOGADRO / self.molar_mass

    def microscopic(self, reaction: str) -> np.ndarray:
        """
        Microscopic cross section of a reaction [cm²].

        Non-fissionable materials return zeros for "fission".
        """
        if reaction not in REACTIONS:
            raise KeyError(f"Unknown reaction {reaction!r}, expected one of {REACTIONS}")
        if reaction == "fission" and not self.is_fissionable:
            return np.zeros(self.num_groups)
        return getattr(self, reaction)

    def nu_fission(self) -> np.ndarray:
        """ν·σ_f per group [cm²]."""
        if not self.is_fissionable:
            return np.zeros(self.num_groups)
        return self.nu * self.fission

    def macroscopic(self, reaction: str, number_density: Optional[float] = None) -> np.ndarray:
        """
        Macroscopic cross section Σ = N·σ [1/cm].

        Args:
            reaction: One of transport, capture, removal, fission, scattering
            number_density: Atom density to apply [atoms/cm³]; defaults to
                the material's own density

        Returns:
            Macroscopic cross section (vector, or matrix for scattering)
        """
        if number_density is None:
            number_density = self.number_density()
        return number_density * self.microscopic(reaction)


@dataclass(frozen=True)
class MaterialLibrary:
    """
    The four materials of the fuel-element unit cell.

    Attributes:
        coolant: Coolant filling the space between elements (sodium)
        cladding: Fuel-element cladding (iron)
        fissile: Fissile fuel isotope (U-235)
        fertile: Fertile fuel isotope (U-238)
        groups: Energy group structure shared by all materials
    """

    coolant: MaterialProperties
    cladding: MaterialProperties
    fissile: MaterialProperties
    fertile: MaterialProperties
    groups: GroupStructure = EIGHT_GROUP_STRUCTURE

    def __post_init__(self):
        for material in self.materials().values():
            if material.num_groups != self.groups.num_groups:
                raise DomainError(
                    f"{material.name} has {material.num_groups} groups, "
                    f"library expects {self.groups.num_groups}"
                )
        if not (self.fissile.is_fissionable and self.fertile.is_fissionable):
            raise DomainError("Fuel isotopes must carry fission data")

    def materials(self) -> Dict[str, MaterialProperties]:
        return {
            "coolant": self.coolant,
            "cladding": self.cladding,
            "fissile": self.fissile,
            "fertile": self.fertile,
        }


# Reference 8-group data [barn]
SODIUM_DATA = {
    "density": 0.927,  # [g/cm³]
    "molar_mass": 22.990,  # [g/mol]
    "transport": [1.5, 2.2, 3.6, 3.5, 4.0, 3.9, 7.3, 3.2],
    "capture": [0.0050, 0.0002, 0.0004, 0.0010, 0.0010, 0.0010, 0.0090, 0.0080],
    "removal": [0.623, 0.6908, 0.4458, 0.2900, 0.3500, 0.3000, 0.0400, 0.0000],
    "scattering": [
        [0.0, 0.5200, 0.0900, 0.0030, 0.0090, 0.0010, 0.0, 0.0],
        [0.0, 0.0, 0.6900, 0.0, 0.0004, 0.0004, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.4400, 0.0050, 0.0008, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.2900, 0.0, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.3500, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.3000, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0400],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    ],
}

IRON_DATA = {
    "density": 7.874,
    "molar_mass": 55.845,
    "transport": [2.2, 2.1, 2.4, 3.1, 4.5, 6.1, 6.9, 10.4],
    "capture": [0.0200, 0.0030, 0.0050, 0.0060, 0.0080, 0.0120, 0.0320, 0.0200],
    "removal": [1.0108, 0.4600, 0.1200, 0.1400, 0.2800, 0.0700, 0.0400, 0.0000],
    "scattering": [
        [0.0, 0.7500, 0.2000, 0.0500, 0.0100, 0.0008, 0.0, 0.0],
        [0.0, 0.0, 0.3300, 0.1000, 0.0200, 0.0100, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.1200, 0.0, 0.0, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.1400, 0.0, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.2800, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0700, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0400],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    ],
}

# Molar mass of natural-composition uranium metal, used for both isotopes
URANIUM_MOLAR_MASS = 238.03  # [g/mol]

U235_DATA = {
    "transport": [4.2, 4.8, 6.2, 8.7, 11.7, 13.9, 17.7, 33.0],
    "capture": [0.0400, 0.0900, 0.18, 0.32, 0.53, 0.79, 1.71, 5.76],
    "removal": [1.3940, 0.8530, 0.4746, 0.3120, 0.1500, 0.0800, 0.0100, 0.0000],
    "fission": [1.23, 1.24, 1.18, 1.40, 1.74, 2.16, 4.36, 15.06],
    "nu": [2.90, 2.59, 2.48, 2.44, 2.43, 2.42, 2.42, 2.42],
    "scattering": [
        [0.0, 0.7200, 0.4800, 0.1600, 0.0300, 0.0040, 0.0, 0.0],
        [0.0, 0.0, 0.7200, 0.1200, 0.0100, 0.0030, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.4300, 0.0400, 0.0040, 0.0006, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.2900, 0.0200, 0.0020, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.1400, 0.0100, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0800, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0100],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    ],
}

U238_DATA = {
    "transport": [4.3, 4.8, 6.3, 9.4, 11.7, 12.7, 13.1, 11.0],
    "capture": [0.0100, 0.0900, 0.1100, 0.1500, 0.2600, 0.4700, 0.8400, 1.4700],
    "removal": [2.293, 1.4900, 0.3759, 0.2935, 0.2000, 0.0900, 0.0100, 0.0000],
    "fission": [0.58, 0.20, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    "nu": [2.91, 2.58, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    "scattering": [
        [0.0, 1.2800, 0.7800, 0.2000, 0.0300, 0.0030, 0.0, 0.0],
        [0.0, 0.0, 1.0500, 0.4200, 0.0100, 0.0100, 0.0, 0.0],
        [0.0, 0.0, 0.0, 0.3300, 0.0400, 0.0050, 0.0009, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.2900, 0.0030, 0.0005, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.1800, 0.0200, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0900, 0.0],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0100],
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    ],
}


def reference_library(
    fuel_density: float = 17.0,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> MaterialLibrary:
    """
    Build the reference 8-group library of the design.

    Args:
        fuel_density: Density of the uranium metal fuel [g/cm³]
        constants: Physical constants used for unit conversion

    Returns:
        MaterialLibrary with sodium, iron, U-235 and U-238
    """
    logger.debug("Building reference library with fuel density %.3f g/cm3", fuel_density)
    return MaterialLibrary(
        coolant=MaterialProperties(name="Sodium", constants=constants, **SODIUM_DATA),
        cladding=MaterialProperties(name="Iron", constants=constants, **IRON_DATA),
        fissile=MaterialProperties(
            name="U-235",
            density=fuel_density,
            molar_mass=URANIUM_MOLAR_MASS,
            constants=constants,
            **U235_DATA,
        ),
        fertile=MaterialProperties(
            name="U-238",
            density=fuel_density,
            molar_mass=URANIUM_MOLAR_MASS,
            constants=constants,
            **U238_DATA,
        ),
    )
