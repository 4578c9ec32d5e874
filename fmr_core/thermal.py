"""
Thermal-Hydraulics Module for the Sodium-Cooled Fast Micro-Reactor

This module implements the hot-channel calculation of a single fuel
element and its share of the sodium flow:
- Sodium thermophysical properties
- Convective heat transfer (Dittus-Boelter or laminar limit)
- Chopped-cosine axial heat generation
- Coolant, cladding and fuel temperature profiles
- Boiling and fuel-melt margins

Lengths are converted from the geometry's cm to m; everything here is SI.
"""

from dataclasses import dataclass, field
from typing import Dict
import logging
import math

import numpy as np

from .exceptions import DomainError
from .geometry import CellGeometry
from .utils import celsius_to_kelvin

logger = logging.getLogger(__name__)

CM_TO_M = 1e-2

# Metallic uranium melting point [K]
URANIUM_MELTING_TEMPERATURE = 1405.3

# Dittus-Boelter is applied above this Reynolds number
TURBULENT_REYNOLDS = 1.0e4

# Fully developed laminar Nusselt number
LAMINAR_NUSSELT = 3.66


@dataclass(frozen=True)
class SodiumProperties:
    """
    Liquid sodium properties, taken constant over the core.

    Attributes:
        density: [kg/m³]
        molar_heat_capacity: [J/mol/K]
        molar_mass: [kg/mol]
        kinematic_viscosity: [m²/s]
        thermal_conductivity: [W/m/K]
        boiling_temperature: At atmospheric pressure [K]
        freezing_temperature: [K]
    """

    density: float = 927.0
    molar_heat_capacity: float = 28.230
    molar_mass: float = 22.990e-3
    kinematic_viscosity: float = 0.5e-6
    thermal_conductivity: float = 142.0
    boiling_temperature: float = celsius_to_kelvin(882.94)
    freezing_temperature: float = celsius_to_kelvin(97.72)

    @property
    def specific_heat(self) -> float:
        """Specific heat capacity [J/kg/K]."""
        return self.molar_heat_capacity / self.molar_mass

    @property
    def dynamic_viscosity(self) -> float:
        """Dynamic viscosity [Pa·s]."""
        return self.kinematic_viscosity * self.density

    @property
    def prandtl_number(self) -> float:
        return self.dynamic_viscosity * self.specific_heat / self.thermal_conductivity


@dataclass(frozen=True)
class FuelElementConductivities:
    """Thermal conductivities of the fuel element [W/m/K]."""

    fuel: float = 27.5  # uranium metal
    cladding: float = 80.4  # iron


@dataclass
class HotChannelAnalysis:
    """
    Single-element channel model of the core.

    Every fuel element gets an equal share of the power and of the flow;
    the hot channel carries the peaking factor on top.

    Attributes:
        geometry: Core and element dimensions
        thermal_power: Core thermal power [W]
        mass_flow_rate: Total sodium mass flow [kg/s]
        inlet_temperature: Sodium inlet temperature [K]
        peaking_factor: Hot-channel power peaking factor
        extrapolated_shape: Use the extrapolated height for the axial shape,
            following ModelOptions.extrapolated_buckling
    """

    geometry: CellGeometry
    thermal_power: float = 1.0e6  # [W]
    mass_flow_rate: float = 5.0  # [kg/s]
    inlet_temperature: float = 673.15  # [K] (400°C)
    peaking_factor: float = 1.2
    extrapolated_shape: bool = False
    coolant: SodiumProperties = field(default_factory=SodiumProperties)
    conductivities: FuelElementConductivities = field(
        default_factory=FuelElementConductivities
    )

    def __post_init__(self):
        """Validate operating conditions."""
        if not self.thermal_power > 0.0:
            raise DomainError("Thermal power must be positive")
        if not self.mass_flow_rate > 0.0:
            raise DomainError("Mass flow rate must be positive")
        if not self.peaking_factor >= 1.0:
            raise DomainError("Peaking factor must be at least 1")
        if self.inlet_temperature <= self.coolant.freezing_temperature:
            raise DomainError(
                f"Inlet temperature {self.inlet_temperature:.1f} K would freeze the sodium "
                f"(freezing point {self.coolant.freezing_temperature:.1f} K)"
            )

    @property
    def height(self) -> float:
        """Active height [m]."""
        return self.geometry.core_height * CM_TO_M

    @property
    def shape_height(self) -> float:
        """Height of the axial cosine [m]."""
        if self.extrapolated_shape:
            return self.geometry.extrapolated_height * CM_TO_M
        return self.height

    @property
    def element_radius(self) -> float:
        """Fuel element outer radius [m]."""
        return self.geometry.element_diameter * CM_TO_M / 2.0

    @property
    def channel_flow_area(self) -> float:
        """
        Coolant flow area per element [m²].

        Unit-cell area minus the element cross section.
        """
        cell_area = self.geometry.core_area * CM_TO_M**2 / self.geometry.num_fuel_elements
        return cell_area - math.pi * self.element_radius**2

    @property
    def core_flow_area(self) -> float:
        """Total coolant flow area [m²]."""
        return self.channel_flow_area * self.geometry.num_fuel_elements

    @property
    def hydraulic_diameter(self) -> float:
        """
        Calculate hydraulic diameter [m].

        D_h = 4 * A / P_wetted
        """
        wetted_perimeter = 2.0 * math.pi * self.element_radius
        return 4.0 * self.channel_flow_area / wetted_perimeter

    @property
    def coolant_velocity(self) -> float:
        """Average sodium velocity [m/s]."""
        return self.mass_flow_rate / (self.coolant.density * self.core_flow_area)

    @property
    def channel_mass_flow(self) -> float:
        """Mass flow per element [kg/s]."""
        return self.mass_flow_rate / self.geometry.num_fuel_elements

    @property
    def element_power(self) -> float:
        """Average power per element [W]."""
        return self.thermal_power / self.geometry.num_fuel_elements

    def calculate_reynolds_number(self) -> float:
        return self.coolant_velocity * self.hydraulic_diameter / self.coolant.kinematic_viscosity

    def calculate_nusselt_number(self) -> float:
        """
        Nusselt number of the channel.

        Uses Dittus-Boelter correlation for turbulent flow:
        Nu = 0.023 * Re^0.8 * Pr^0.4
        and the laminar limit otherwise.
        """
        Re = self.calculate_reynolds_number()
        if Re > TURBULENT_REYNOLDS:
            return 0.023 * Re**0.8 * self.coolant.prandtl_number**0.4
        return LAMINAR_NUSSELT

    def calculate_heat_transfer_coefficient(self) -> float:
        """Convective heat transfer coefficient [W/m²/K]."""
        return (
            self.calculate_nusselt_number()
            * self.coolant.thermal_conductivity
            / self.hydraulic_diameter
        )

    def calculate_thermal_resistances(self) -> Dict[str, float]:
        """
        Per-length thermal resistances from fuel centre to coolant [m·K/W].

        Returns:
            Dictionary with fuel, cladding, film and total resistance
        """
        d_outer = self.geometry.element_diameter
        d_fuel = self.geometry.fuel_diameter
        h = self.calculate_heat_transfer_coefficient()

        resistances = {
            "fuel": 1.0 / (4.0 * math.pi * self.conductivities.fuel),
            "cladding": math.log(d_outer / d_fuel) / (2.0 * math.pi * self.conductivities.cladding),
            "film": 1.0 / (2.0 * math.pi * self.element_radius * h),
        }
        resistances["total"] = sum(resistances.values())
        return resistances

    def axial_shape_integral(self) -> float:
        """∫cos(πz/H_e)dz over the active height [m]."""
        H, H_e = self.height, self.shape_height
        return 2.0 * H_e / math.pi * math.sin(math.pi * H / (2.0 * H_e))

    def peak_linear_heat_rate(self, hot: bool = True) -> float:
        """
        Linear heat rate at the core midplane [W/m].

        The average channel integrates to the element power; the hot
        channel is scaled by the peaking factor.
        """
        q0 = self.element_power / self.axial_shape_integral()
        return q0 * self.peaking_factor if hot else q0

    def linear_heat_rate(self, z, hot: bool = True):
        """Linear heat rate at height z from the midplane [W/m]."""
        z = np.asarray(z, dtype=float)
        return self.peak_linear_heat_rate(hot) * np.cos(np.pi * z / self.shape_height)

    def coolant_temperature(self, z, hot: bool = True):
        """
        Bulk sodium temperature at height z from the midplane [K].

        T(z) = T_in + q'₀/(ṁ·c_p)·(H_e/π)·[sin(πz/H_e) + sin(πH/2H_e)]
        """
        z = np.asarray(z, dtype=float)
        H, H_e = self.height, self.shape_height
        rise = (
            self.peak_linear_heat_rate(hot)
            / (self.channel_mass_flow * self.coolant.specific_heat)
            * H_e / np.pi
            * (np.sin(np.pi * z / H_e) + math.sin(math.pi * H / (2.0 * H_e)))
        )
        return self.inlet_temperature + rise

    def outlet_temperature(self, hot: bool = True) -> float:
        """Sodium outlet temperature [K]."""
        return float(self.coolant_temperature(self.height / 2.0, hot))

    def calculate_temperature_profiles(
        self,
        z_points: int = 101,
        hot: bool = True,
    ) -> Dict[str, np.ndarray]:
        """
        Axial temperature distribution of a channel.

        Args:
            z_points: Number of axial points
            hot: Hot channel (with peaking) or average channel

        Returns:
            Dictionary of arrays: z [m], coolant, clad_surface,
            fuel_surface and fuel_centerline [K]
        """
        z = np.linspace(-self.height / 2.0, self.height / 2.0, z_points)
        resistances = self.calculate_thermal_resistances()
        q = self.linear_heat_rate(z, hot)

        coolant = self.coolant_temperature(z, hot)
        clad_surface = coolant + q * resistances["film"]
        fuel_surface = clad_surface + q * resistances["cladding"]
        centerline = fuel_surface + q * resistances["fuel"]

        return {
            "z": z,
            "coolant": coolant,
            "clad_surface": clad_surface,
            "fuel_surface": fuel_surface,
            "fuel_centerline": centerline,
        }

    def get_thermal_summary(self, z_points: int = 101) -> Dict[str, float]:
        """
        Get summary of key thermal-hydraulic parameters.

        Returns:
            Dictionary of flow conditions, temperatures and margins
        """
        profiles = self.calculate_temperature_profiles(z_points, hot=True)
        peak_centerline = float(np.max(profiles["fuel_centerline"]))
        peak_clad = float(np.max(profiles["clad_surface"]))

        if peak_clad >= self.coolant.boiling_temperature:
            logger.warning("Hot-channel wall temperature %.1f K reaches sodium boiling", peak_clad)
        if peak_centerline >= URANIUM_MELTING_TEMPERATURE:
            logger.warning("Hot-channel centerline %.1f K reaches fuel melting", peak_centerline)

        return {
            "mass_flow_rate_kg_s": self.mass_flow_rate,
            "coolant_velocity_m_s": self.coolant_velocity,
            "hydraulic_diameter_m": self.hydraulic_diameter,
            "reynolds_number": self.calculate_reynolds_number(),
            "prandtl_number": self.coolant.prandtl_number,
            "nusselt_number": self.calculate_nusselt_number(),
            "heat_transfer_coeff_W_m2K": self.calculate_heat_transfer_coefficient(),
            "peak_linear_heat_rate_W_m": self.peak_linear_heat_rate(hot=True),
            "inlet_temp_K": self.inlet_temperature,
            "avg_outlet_temp_K": self.outlet_temperature(hot=False),
            "hot_outlet_temp_K": self.outlet_temperature(hot=True),
            "peak_clad_temp_K": peak_clad,
            "peak_fuel_centerline_K": peak_centerline,
            "boiling_margin_K": self.coolant.boiling_temperature - peak_clad,
            "fuel_melt_margin_K": URANIUM_MELTING_TEMPERATURE - peak_centerline,
        }
