"""
Error Types for the Fast Micro-Reactor Model

Every failure raised by the package derives from ReactorModelError, so a
driver can catch the whole family at once. Domain and unit errors are also
ValueErrors; numerical failures are also ArithmeticErrors.
"""


class ReactorModelError(Exception):
    """Base class for all errors raised by fmr_core."""


class DomainError(ReactorModelError, ValueError):
    """An input lies outside its physically valid range."""


class DegenerateGeometryError(DomainError):
    """The core geometry cannot form a valid unit cell."""


class UnitConsistencyError(ReactorModelError, ValueError):
    """Nuclear data were supplied in an unknown or inconsistent unit."""


class NumericalFailure(ReactorModelError, ArithmeticError):
    """A numerical method could not produce a trustworthy result."""


class SingularSystemError(NumericalFailure):
    """The group-coupling matrix is singular or ill-conditioned."""


class InvalidFluxError(NumericalFailure):
    """The solved group flux is non-finite or (in strict mode) negative."""


class ConvergenceError(NumericalFailure):
    """An iterative method exhausted its iteration budget."""


class CriticalEnrichmentNotFound(NumericalFailure):
    """
    No enrichment inside the search bounds reaches the target k_eff.

    Attributes:
        target: Requested k_eff
        k_eff_range: (k_eff at lower bound, k_eff at upper bound)
    """

    def __init__(self, target: float, k_eff_range: tuple):
        self.target = target
        self.k_eff_range = k_eff_range
        super().__init__(
            f"Target k_eff {target:.5f} is unreachable: k_eff spans "
            f"{k_eff_range[0]:.5f} to {k_eff_range[1]:.5f} over the enrichment bounds"
        )
