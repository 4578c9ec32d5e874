"""
Physical Constants and Energy Group Structure

This module holds the fundamental constants used by the zero-dimensional
fast-reactor model and the 8-group energy structure of its cross-section
library.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import math

import numpy as np
from scipy.special import jn_zeros

from .exceptions import DomainError


@dataclass(frozen=True)
class PhysicalConstants:
    """Fundamental physical constants used in reactor physics calculations."""

    # Avogadro's number [atoms/mol]
    AVOGADRO: float = 6.02214076e23

    # Barn to cm² conversion
    BARN_TO_CM2: float = 1e-24

    # MeV to Joules conversion
    MEV_TO_JOULES: float = 1.602176634e-13

    # Recoverable energy per fission [MeV]
    ENERGY_PER_FISSION_MEV: float = 200.0

    # First zero of the Bessel function J0
    BESSEL_J0_FIRST_ZERO: float = float(jn_zeros(0, 1)[0])

    @property
    def energy_per_fission_j(self) -> float:
        """Recoverable energy per fission [J]."""
        return self.ENERGY_PER_FISSION_MEV * self.MEV_TO_JOULES


DEFAULT_CONSTANTS = PhysicalConstants()


@dataclass(frozen=True)
class GroupStructure:
    """
    Ordered multigroup energy structure, fastest group first.

    Attributes:
        lower_energies: Lower bound of each group [keV]
        lethargy_widths: Lethargy width of each group (None for the open
            bottom group)
        chi: Fission spectrum fraction born into each group
    """

    lower_energies: Tuple[float, ...]
    lethargy_widths: Tuple[Optional[float], ...]
    chi: Tuple[float, ...]

    def __post_init__(self):
        n = len(self.chi)
        if len(self.lower_energies) != n or len(self.lethargy_widths) != n:
            raise DomainError("Group bounds, widths and chi must have equal length")
        if any(c < 0.0 for c in self.chi):
            raise DomainError("Fission spectrum fractions must be non-negative")
        if abs(sum(self.chi) - 1.0) > 1e-6:
            raise DomainError(f"Fission spectrum must sum to 1, got {sum(self.chi):.8f}")
        if any(hi <= lo for hi, lo in zip(self.lower_energies, self.lower_energies[1:])):
            raise DomainError("Groups must be ordered from highest to lowest energy")

    @property
    def num_groups(self) -> int:
        return len(self.chi)

    @property
    def upper_energies(self) -> Tuple[float, ...]:
        """Upper bound of each group [keV]."""
        first = self.lower_energies[0] * math.exp(self.lethargy_widths[0])
        return (first,) + tuple(self.lower_energies[:-1])

    def fission_spectrum(self) -> np.ndarray:
        """Fission spectrum as an array."""
        return np.array(self.chi, dtype=float)


EIGHT_GROUP_STRUCTURE = GroupStructure(
    lower_energies=(2200.0, 820.0, 300.0, 110.0, 40.0, 15.0, 0.750, 0.0),
    lethargy_widths=(1.5, 1.0, 1.0, 1.0, 1.0, 1.0, 3.0, None),
    chi=(0.365, 0.396, 0.173, 0.050, 0.012, 0.003, 0.001, 0.0),
)
