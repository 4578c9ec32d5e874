"""
Utility Functions for the Fast Micro-Reactor Model

Unit conversions shared by the neutronics, thermal and reporting code.
"""


def delta_k_to_pcm(delta_k: float) -> float:
    """
    Convert reactivity from Δk/k to pcm.

    Args:
        delta_k: Reactivity as Δk/k

    Returns:
        Reactivity in pcm
    """
    return delta_k * 1e5


def celsius_to_kelvin(celsius: float) -> float:
    """Convert temperature from Celsius to Kelvin."""
    return celsius + 273.15


def atom_to_weight_fraction(
    atom_fraction: float,
    fissile_mass: float = 235.0439,
    fertile_mass: float = 238.0508,
) -> float:
    """
    Convert a U-235 atom fraction to a weight fraction.

    Args:
        atom_fraction: U-235 atoms per uranium atom
        fissile_mass: U-235 atomic mass [amu]
        fertile_mass: U-238 atomic mass [amu]

    Returns:
        U-235 mass per uranium mass
    """
    fissile = atom_fraction * fissile_mass
    return fissile / (fissile + (1.0 - atom_fraction) * fertile_mass)
