"""
Fast Micro-Reactor Design Model

This module provides the top-level design model that ties the material
library, the cell homogenizer, the diffusion solver, the enrichment search,
the sensitivity analyzer and the hot-channel model together.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import json
import logging
from datetime import datetime

import numpy as np

from .config import ModelOptions
from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .geometry import CellGeometry
from .homogenization import validate_enrichment
from .materials import MaterialLibrary, URANIUM_MOLAR_MASS, reference_library
from .neutronics import (
    normalize_flux,
    reactivity,
    reactivity_pcm,
    solve_cell,
    spectrum_summary,
)
from .search import KEffTarget, search_critical_enrichment
from .sensitivity import (
    dimension_sensitivity,
    enrichment_sensitivity,
    k_eff_enrichment_derivative,
)
from .thermal import HotChannelAnalysis
from .utils import atom_to_weight_fraction

logger = logging.getLogger(__name__)


@dataclass
class FastMicroReactor:
    """
    Zero-dimensional design model of a small sodium-cooled fast reactor.

    Attributes:
        thermal_power: Thermal power output [MW]
        enrichment: U-235 atom fraction of the uranium metal fuel
        fuel_density: Uranium metal density [g/cm³]
        peaking_factor: Hot-channel power peaking factor
        mass_flow_rate: Sodium mass flow [kg/s]
        inlet_temperature: Sodium inlet temperature [K]
        enrichment_step: Relative enrichment step δx/x for sensitivity
        dimension_step: Core dimension perturbation δ [cm]
    """

    thermal_power: float = 1.0  # [MW]
    enrichment: float = 0.798
    fuel_density: float = 17.0  # [g/cm³]
    peaking_factor: float = 1.2
    mass_flow_rate: float = 5.0  # [kg/s]
    inlet_temperature: float = 673.15  # [K]
    enrichment_step: float = 0.1
    dimension_step: float = 10.0  # [cm]
    geometry: CellGeometry = field(default_factory=CellGeometry)
    options: ModelOptions = field(default_factory=ModelOptions)
    target: KEffTarget = field(default_factory=KEffTarget)
    constants: PhysicalConstants = DEFAULT_CONSTANTS

    # Computed components (initialized in __post_init__)
    library: MaterialLibrary = field(init=False)
    thermal: HotChannelAnalysis = field(init=False)

    def __post_init__(self):
        """Initialize all physics components."""
        self.enrichment = validate_enrichment(self.enrichment)
        self.library = reference_library(self.fuel_density, self.constants)
        self.thermal = HotChannelAnalysis(
            geometry=self.geometry,
            thermal_power=self.thermal_power * 1e6,
            mass_flow_rate=self.mass_flow_rate,
            inlet_temperature=self.inlet_temperature,
            peaking_factor=self.peaking_factor,
            extrapolated_shape=self.options.extrapolated_buckling,
        )

    def _solve(self, enrichment: Optional[float] = None):
        if enrichment is None:
            enrichment = self.enrichment
        return solve_cell(enrichment, self.geometry, self.library, self.options, self.constants)

    def calculate_criticality(self) -> Dict[str, Any]:
        """
        Calculate criticality of the design.

        Returns dictionary with:
        - k-effective and its verdict against the target band
        - Reactivity
        - Geometric buckling
        """
        _, solution = self._solve()
        k_eff = solution.k_eff
        if solution.negative_groups:
            logger.warning(
                "Negative flux in group(s) %s at x=%.6f",
                [g + 1 for g in solution.negative_groups],
                self.enrichment,
            )
        b_r, b_z, b_total = self.geometry.get_buckling_geometric(
            self.options.extrapolated_buckling, self.constants
        )

        return {
            "k_effective": k_eff,
            "target": {
                "value": self.target.value,
                "uncertainty": self.target.uncertainty,
                "verdict": self.target.classify(k_eff),
            },
            "reactivity": {
                "delta_k_over_k": reactivity(k_eff),
                "pcm": reactivity_pcm(k_eff),
            },
            "buckling": {
                "radial_cm2": b_r,
                "axial_cm2": b_z,
                "total_cm2": b_total,
                "extrapolated": self.options.extrapolated_buckling,
            },
            "negative_flux_groups": [g + 1 for g in solution.negative_groups],
        }

    def calculate_critical_enrichment(self) -> Dict[str, Any]:
        """Enrichment that meets the target k_eff."""
        result = search_critical_enrichment(
            self.target.value,
            self.geometry,
            self.library,
            initial_guess=self.enrichment,
            options=self.options,
            constants=self.constants,
        )
        return {
            "target_k_eff": result.target,
            "enrichment": result.enrichment,
            "k_effective": result.k_eff,
            "iterations": result.iterations,
            "evaluations": len(result.guesses),
        }

    def calculate_neutron_flux(self) -> Dict[str, Any]:
        """
        Calculate neutron flux characteristics.

        Returns dictionary with group fluxes normalized to the thermal power.
        """
        xs, solution = self._solve()
        flux = normalize_flux(
            solution,
            xs,
            self.geometry,
            self.thermal_power * 1e6,
            self.options.extrapolated_buckling,
            self.constants,
        )
        return {
            "average_flux_n_cm2_s": flux.total_average,
            "peak_flux_n_cm2_s": flux.total_peak,
            "peak_to_average": flux.peak_to_average,
            "group_average_flux_n_cm2_s": flux.average.tolist(),
            "group_peak_flux_n_cm2_s": flux.peak.tolist(),
            "spectrum": spectrum_summary(solution, self.library.groups),
            "macroscopic_cross_sections": xs.as_dict(),
        }

    def calculate_core_inventory(self) -> Dict[str, Any]:
        """
        Calculate core material inventory.

        Returns fuel loading, uranium inventory and power densities.
        """
        n = self.geometry.num_fuel_elements
        fuel_volume = n * self.geometry.fuel_volume  # [cm³]
        u_mass = fuel_volume * self.fuel_density / 1000.0  # [kg]
        u235_mass = u_mass * atom_to_weight_fraction(self.enrichment)

        core_volume_m3 = self.geometry.core_volume * 1e-6
        power_density = self.thermal_power / core_volume_m3

        return {
            "num_fuel_elements": n,
            "total_fuel_volume_cm3": fuel_volume,
            "uranium_mass_kg": u_mass,
            "uranium_moles": u_mass * 1000.0 / URANIUM_MOLAR_MASS,
            "u235_mass_kg": u235_mass,
            "u238_mass_kg": u_mass - u235_mass,
            "specific_power_MW_tHM": self.thermal_power / (u_mass / 1000.0),
            "power_density_MW_m3": power_density,
            "peak_power_density_MW_m3": power_density * self.peaking_factor,
        }

    def calculate_sensitivities(self) -> Dict[str, Any]:
        """
        Sensitivity of k_eff to enrichment and core dimensions.
        """
        args = (self.geometry, self.library)
        kwargs = {"options": self.options, "constants": self.constants}
        _, solution = self._solve()
        derivative = k_eff_enrichment_derivative(self.enrichment, *args, **kwargs)

        return {
            "enrichment": {
                "relative_step": self.enrichment_step,
                "delta_k_over_k": enrichment_sensitivity(
                    self.enrichment, self.enrichment_step, *args, **kwargs
                ),
                "dk_dx": derivative,
                "relative_derivative": derivative * self.enrichment / solution.k_eff,
            },
            "dimension": {
                "delta_cm": self.dimension_step,
                "increase_delta_k_over_k": dimension_sensitivity(
                    self.dimension_step, *args, self.enrichment, **kwargs
                ),
                "decrease_delta_k_over_k": dimension_sensitivity(
                    -self.dimension_step, *args, self.enrichment, **kwargs
                ),
            },
        }

    def calculate_thermal_hydraulics(self) -> Dict[str, Any]:
        """Hot-channel thermal-hydraulic conditions."""
        summary = self.thermal.get_thermal_summary()
        summary["thermal_resistances_mK_W"] = self.thermal.calculate_thermal_resistances()
        return summary

    def run_full_analysis(self) -> Dict[str, Any]:
        """
        Run complete core design analysis.

        Returns comprehensive dictionary with all calculated parameters.
        """
        logger.info("Running full analysis at x=%.4f, %.3f MW", self.enrichment, self.thermal_power)
        analysis = {
            "metadata": {
                "model": "Fast Micro-Reactor Model v1.0",
                "timestamp": datetime.now().isoformat(),
                "thermal_power_MW": self.thermal_power,
                "enrichment": self.enrichment,
                "number_density_basis": self.options.number_density_basis,
            },
            "geometry": self.geometry.summary(),
            "criticality": self.calculate_criticality(),
            "critical_enrichment": self.calculate_critical_enrichment(),
            "neutron_flux": self.calculate_neutron_flux(),
            "sensitivity": self.calculate_sensitivities(),
            "thermal_hydraulics": self.calculate_thermal_hydraulics(),
            "core_inventory": self.calculate_core_inventory(),
        }

        return analysis

    def print_summary(self):
        """Print formatted summary of the design analysis."""
        crit = self.calculate_criticality()
        search = self.calculate_critical_enrichment()
        flux = self.calculate_neutron_flux()
        sens = self.calculate_sensitivities()
        th = self.calculate_thermal_hydraulics()
        inv = self.calculate_core_inventory()

        print("=" * 70)
        print("           FAST MICRO-REACTOR DESIGN SUMMARY")
        print("=" * 70)

        print(f"\n{'CORE PARAMETERS':^70}")
        print("-" * 70)
        print(f"  Thermal Power:          {self.thermal_power:>10.3f} MW")
        print(f"  U-235 Enrichment:       {self.enrichment:>10.4f} atom frac.")
        print(f"  Core Diameter:          {self.geometry.core_diameter:>10.1f} cm")
        print(f"  Core Height:            {self.geometry.core_height:>10.1f} cm")
        print(f"  Fuel Elements:          {inv['num_fuel_elements']:>10d}")

        print(f"\n{'CRITICALITY':^70}")
        print("-" * 70)
        print(f"  k_eff:                  {crit['k_effective']:>10.5f}")
        print(f"  Target:                 {self.target.value:>10.3f} ± {self.target.uncertainty:.3f}"
              f" ({crit['target']['verdict']})")
        print(f"  Reactivity:             {crit['reactivity']['pcm']:>10.1f} pcm")
        print(f"  Buckling B²:            {crit['buckling']['total_cm2']:>10.3e} cm⁻²")
        print(f"  Critical Enrichment:    {search['enrichment']:>10.5f}")

        print(f"\n{'NEUTRON FLUX':^70}")
        print("-" * 70)
        print(f"  Average Flux:           {flux['average_flux_n_cm2_s']:>10.3e} n/cm²/s")
        print(f"  Peak Flux:              {flux['peak_flux_n_cm2_s']:>10.3e} n/cm²/s")
        for g, phi in enumerate(flux["group_average_flux_n_cm2_s"], start=1):
            print(f"    Group {g}:              {phi:>10.3e} n/cm²/s")

        print(f"\n{'SENSITIVITY':^70}")
        print("-" * 70)
        enr, dim = sens["enrichment"], sens["dimension"]
        print(f"  Δk/k, δx/x = ±{enr['relative_step']:.2f}:     {enr['delta_k_over_k']:>10.5f}")
        print(f"  Δk/k, δ = +{dim['delta_cm']:.0f} cm:        {dim['increase_delta_k_over_k']:>10.5f}")
        print(f"  Δk/k, δ = -{dim['delta_cm']:.0f} cm:        {dim['decrease_delta_k_over_k']:>10.5f}")

        print(f"\n{'THERMAL-HYDRAULICS':^70}")
        print("-" * 70)
        print(f"  Coolant Inlet Temp:     {th['inlet_temp_K']:>10.1f} K")
        print(f"  Avg Outlet Temp:        {th['avg_outlet_temp_K']:>10.1f} K")
        print(f"  Hot Outlet Temp:        {th['hot_outlet_temp_K']:>10.1f} K")
        print(f"  Reynolds Number:        {th['reynolds_number']:>10.1f}")
        print(f"  Peak Fuel Centerline:   {th['peak_fuel_centerline_K']:>10.1f} K")
        print(f"  Boiling Margin:         {th['boiling_margin_K']:>10.1f} K")
        print(f"  Fuel Melt Margin:       {th['fuel_melt_margin_K']:>10.1f} K")

        print(f"\n{'CORE INVENTORY':^70}")
        print("-" * 70)
        print(f"  Uranium Mass:           {inv['uranium_mass_kg']:>10.1f} kg")
        print(f"  U-235 Mass:             {inv['u235_mass_kg']:>10.1f} kg")
        print(f"  Power Density:          {inv['power_density_MW_m3']:>10.3f} MW/m³")

        print("\n" + "=" * 70)

    def to_json(self, filepath: Optional[str] = None) -> str:
        """
        Export analysis results to JSON.

        Args:
            filepath: Optional file path to save JSON

        Returns:
            JSON string
        """
        analysis = self.run_full_analysis()
        json_str = json.dumps(analysis, indent=2, default=_json_default)

        if filepath:
            with open(filepath, 'w') as f:
                f.write(json_str)

        return json_str


def _json_default(value):
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    return str(value)


def create_fast_micro_reactor(
    power_mw: float = 1.0,
    enrichment: float = 0.798,
    **kwargs
) -> FastMicroReactor:
    """
    Factory function to create a fast micro-reactor design model.

    Args:
        power_mw: Thermal power in MW
        enrichment: U-235 atom fraction in [0, 1]
        **kwargs: Additional parameters passed to FastMicroReactor

    Returns:
        Configured FastMicroReactor instance
    """
    return FastMicroReactor(
        thermal_power=power_mw,
        enrichment=enrichment,
        **kwargs
    )
