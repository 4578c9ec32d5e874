"""
Fast Micro-Reactor Core Model Package

A zero-dimensional, 8-group diffusion model of a small sodium-cooled fast
reactor core with metallic uranium fuel.

Modules:
    - constants: Physical constants and energy group structure
    - materials: 8-group material library
    - geometry: Core and unit-cell geometry
    - homogenization: Cell homogenization of cross sections
    - neutronics: Multigroup diffusion solver and flux normalization
    - search: Critical enrichment search
    - sensitivity: Enrichment and dimension sensitivity of k_eff
    - thermal: Hot-channel thermal-hydraulics
    - reactor: Design model integrating all components
"""

import logging

from .config import ModelOptions
from .constants import EIGHT_GROUP_STRUCTURE, GroupStructure, PhysicalConstants
from .exceptions import (
    ConvergenceError,
    CriticalEnrichmentNotFound,
    DegenerateGeometryError,
    DomainError,
    InvalidFluxError,
    NumericalFailure,
    ReactorModelError,
    SingularSystemError,
    UnitConsistencyError,
)
from .geometry import CellGeometry
from .homogenization import HomogenizedCrossSections, homogenize, homogenized_cross_sections
from .materials import MaterialLibrary, MaterialProperties, reference_library
from .neutronics import FluxSolution, compute_k_eff, normalize_flux, solve
from .reactor import FastMicroReactor, create_fast_micro_reactor
from .search import KEffTarget, find_critical_enrichment, search_critical_enrichment
from .sensitivity import (
    dimension_sensitivity,
    enrichment_sensitivity,
    k_eff_enrichment_derivative,
)
from .thermal import HotChannelAnalysis

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"

__all__ = [
    "ModelOptions",
    "PhysicalConstants",
    "GroupStructure",
    "EIGHT_GROUP_STRUCTURE",
    "ReactorModelError",
    "DomainError",
    "DegenerateGeometryError",
    "UnitConsistencyError",
    "NumericalFailure",
    "SingularSystemError",
    "InvalidFluxError",
    "ConvergenceError",
    "CriticalEnrichmentNotFound",
    "CellGeometry",
    "MaterialProperties",
    "MaterialLibrary",
    "reference_library",
    "HomogenizedCrossSections",
    "homogenize",
    "homogenized_cross_sections",
    "FluxSolution",
    "solve",
    "compute_k_eff",
    "normalize_flux",
    "KEffTarget",
    "search_critical_enrichment",
    "find_critical_enrichment",
    "enrichment_sensitivity",
    "k_eff_enrichment_derivative",
    "dimension_sensitivity",
    "HotChannelAnalysis",
    "FastMicroReactor",
    "create_fast_micro_reactor",
]
