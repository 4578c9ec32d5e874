"""
Model Options and Logging Setup

ModelOptions collects the policy switches of the zero-dimensional model.
The defaults reproduce the reference design calculation.
"""

from dataclasses import dataclass
import logging

from .exceptions import DomainError

NUMBER_DENSITY_BASES = ("coolant", "material")


@dataclass(frozen=True)
class ModelOptions:
    """
    Policy switches for homogenization and the diffusion solve.

    Attributes:
        number_density_basis: "coolant" evaluates every material at the
            coolant number density (the reference calculation); "material"
            uses each material's own rho*N_A/M
        extrapolated_buckling: Use extrapolated radius and height for the
            buckling and the flux shape
        reject_negative_flux: Raise instead of warn on negative group flux
        condition_limit: Largest acceptable 2-norm condition number of the
            loss matrix
    """

    number_density_basis: str = "coolant"
    extrapolated_buckling: bool = False
    reject_negative_flux: bool = False
    condition_limit: float = 1e12

    def __post_init__(self):
        if self.number_density_basis not in NUMBER_DENSITY_BASES:
            raise DomainError(
                f"number_density_basis must be one of {NUMBER_DENSITY_BASES}, "
                f"got {self.number_density_basis!r}"
            )
        if not self.condition_limit > 1.0:
            raise DomainError("condition_limit must be greater than 1")


DEFAULT_OPTIONS = ModelOptions()


def configure_logging(level: str = "WARNING") -> None:
    """Attach a console handler to the package logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
