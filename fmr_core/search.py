"""
Critical Enrichment Search

Finds the fuel enrichment at which the core reaches a target k_eff by
bracketed root finding on k_eff(x) - target, re-running the homogenizer
and the diffusion solver at every trial enrichment.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import logging
import math

import scipy.optimize as sopt

from .config import DEFAULT_OPTIONS, ModelOptions
from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .exceptions import ConvergenceError, CriticalEnrichmentNotFound, DomainError
from .geometry import CellGeometry
from .homogenization import validate_enrichment
from .materials import MaterialLibrary
from .neutronics import compute_k_eff

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KEffTarget:
    """
    Design target for k_eff with its uncertainty band.

    Attributes:
        value: Target k_eff
        uncertainty: Half-width of the acceptance band
    """

    value: float = 1.035
    uncertainty: float = 0.005

    def __post_init__(self):
        if not (self.value > 0.0 and self.uncertainty >= 0.0):
            raise DomainError("Target k_eff must be positive with non-negative uncertainty")

    @property
    def bounds(self) -> Tuple[float, float]:
        return self.value - self.uncertainty, self.value + self.uncertainty

    def contains(self, k_eff: float) -> bool:
        low, high = self.bounds
        return low <= k_eff <= high

    def classify(self, k_eff: float) -> str:
        """Return "within", "above" or "below" the band."""
        low, high = self.bounds
        if k_eff > high:
            return "above"
        if k_eff < low:
            return "below"
        return "within"


REFERENCE_TARGET = KEffTarget()


@dataclass
class EnrichmentSearchResult:
    """
    Outcome of a critical enrichment search.

    Attributes:
        enrichment: Enrichment reaching the target
        k_eff: k_eff at that enrichment
        target: Target k_eff
        iterations: Root-finder iterations
        guesses: Every enrichment evaluated, in order
        results: k_eff for each guess
    """

    enrichment: float
    k_eff: float
    target: float
    iterations: int
    guesses: List[float] = field(default_factory=list)
    results: List[float] = field(default_factory=list)


def search_critical_enrichment(
    target_k_eff: float,
    geometry: CellGeometry,
    materials: MaterialLibrary,
    initial_guess: float = 0.8,
    bounds: Tuple[float, float] = (0.0, 1.0),
    xtol: float = 1e-10,
    max_iterations: int = 100,
    options: ModelOptions = DEFAULT_OPTIONS,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> EnrichmentSearchResult:
    """
    Search for the enrichment giving a target k_eff.

    The initial guess splits the bounds; Brent's method then runs on
    whichever half brackets the sign change of k_eff(x) - target.

    Args:
        target_k_eff: k_eff to reach
        geometry: Core and element dimensions
        materials: Material library
        initial_guess: Starting enrichment, inside the bounds
        bounds: Admissible enrichment interval, within [0, 1]
        xtol: Absolute enrichment tolerance
        max_iterations: Iteration budget of the root finder
        options: Model options
        constants: Physical constants

    Returns:
        EnrichmentSearchResult

    Raises:
        CriticalEnrichmentNotFound: If the target is not bracketed by the bounds
        ConvergenceError: If the iteration budget is exhausted
    """
    low, high = (validate_enrichment(b) for b in bounds)
    guess = validate_enrichment(initial_guess)
    if not low < high:
        raise DomainError(f"Enrichment bounds must be increasing, got {bounds}")
    if not low <= guess <= high:
        raise DomainError(f"Initial guess {guess} lies outside bounds {bounds}")
    if not (math.isfinite(target_k_eff) and target_k_eff > 0.0):
        raise DomainError(f"Target k_eff must be positive, got {target_k_eff}")

    guesses: List[float] = []
    results: List[float] = []

    def residual(x: float) -> float:
        k_eff, _ = compute_k_eff(x, geometry, materials, options, constants)
        guesses.append(x)
        results.append(k_eff)
        logger.debug("Iteration %d: x=%.10f k_eff=%.8f", len(guesses), x, k_eff)
        return k_eff - target_k_eff

    f_low = residual(low)
    f_high = residual(high)
    if f_low * f_high > 0.0:
        raise CriticalEnrichmentNotFound(target_k_eff, (results[0], results[1]))

    f_guess = residual(guess) if low < guess < high else None
    for x, f in ((low, f_low), (high, f_high), (guess, f_guess)):
        if f == 0.0:
            k_eff = results[guesses.index(x)]
            return EnrichmentSearchResult(x, k_eff, target_k_eff, 0, guesses, results)
    if f_guess is None:
        a, b = low, high
    elif f_low * f_guess < 0.0:
        a, b = low, guess
    else:
        a, b = guess, high

    zero_value, info = sopt.brentq(
        residual, a, b, xtol=xtol, maxiter=max_iterations,
        full_output=True, disp=False,
    )
    if not info.converged:
        raise ConvergenceError(
            f"Enrichment search did not converge in {max_iterations} iterations "
            f"({info.flag})"
        )

    k_eff, _ = compute_k_eff(zero_value, geometry, materials, options, constants)
    logger.info(
        "Critical enrichment for k_eff=%.5f: x=%.8f after %d iterations",
        target_k_eff, zero_value, info.iterations,
    )
    return EnrichmentSearchResult(
        enrichment=float(zero_value),
        k_eff=k_eff,
        target=target_k_eff,
        iterations=info.iterations,
        guesses=guesses,
        results=results,
    )


def find_critical_enrichment(
    target_k_eff: float,
    geometry: CellGeometry,
    materials: MaterialLibrary,
    initial_guess: float = 0.8,
    **kwargs,
) -> float:
    """
    Enrichment at which the core reaches target_k_eff.

    Keyword arguments are passed to search_critical_enrichment.
    """
    result = search_critical_enrichment(
        target_k_eff, geometry, materials, initial_guess, **kwargs
    )
    return result.enrichment
