#!/usr/bin/env python3
"""
Example Fast Micro-Reactor Design Calculation

This script demonstrates how to use the fmr_core package to evaluate a
1 MW sodium-cooled fast reactor core with metallic uranium fuel.

Usage:
    python run_design.py [--power POWER] [--enrichment ENRICHMENT]

Example:
    python run_design.py --power 1.0 --enrichment 0.798
"""

import argparse
import logging
import os
import sys

import numpy as np

# Add parent directory to path for importing fmr_core
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fmr_core.config import ModelOptions, configure_logging
from fmr_core.exceptions import ReactorModelError
from fmr_core.reactor import create_fast_micro_reactor
from fmr_core.sensitivity import dimension_sensitivity_curve, k_eff_curve

logger = logging.getLogger("run_design")


def run_basic_design(power_mw: float, enrichment: float, options: ModelOptions):
    """
    Run the reference design calculation and print its summary.

    Args:
        power_mw: Thermal power in MW
        enrichment: U-235 atom fraction
        options: Model options
    """
    print("\n" + "=" * 70)
    print("       FAST MICRO-REACTOR DESIGN CALCULATION")
    print(f"       {power_mw:.2f} MW Sodium-Cooled Fast Reactor")
    print("=" * 70)

    reactor = create_fast_micro_reactor(
        power_mw=power_mw,
        enrichment=enrichment,
        options=options,
    )
    reactor.print_summary()

    return reactor


def run_criticality_sweep(power_mw: float, options: ModelOptions):
    """
    Sweep k_eff over the enrichment range.
    """
    print("\n" + "=" * 70)
    print("       PARAMETRIC STUDY: EFFECT OF ENRICHMENT")
    print("=" * 70)

    reactor = create_fast_micro_reactor(power_mw=power_mw, options=options)
    enrichments = np.linspace(0.0, 1.0, 11)
    k_values = k_eff_curve(enrichments, reactor.geometry, reactor.library, options)

    print(f"\n{'Enrichment':>12} {'k_effective':>12} {'Target band':>14}")
    print("-" * 42)
    for x, k_eff in zip(enrichments, k_values):
        print(f"{x:>12.2f} {k_eff:>12.5f} {reactor.target.classify(k_eff):>14}")


def run_enrichment_search(power_mw: float, options: ModelOptions):
    """
    Find the enrichment that meets the k_eff target.
    """
    print("\n" + "=" * 70)
    print("       CRITICAL ENRICHMENT SEARCH")
    print("=" * 70)

    reactor = create_fast_micro_reactor(power_mw=power_mw, options=options)
    search = reactor.calculate_critical_enrichment()

    print(f"\n  Target k_eff:           {search['target_k_eff']:.4f}")
    print(f"  Enrichment:             {search['enrichment']:.6f}")
    print(f"  k_eff at enrichment:    {search['k_effective']:.8f}")
    print(f"  Iterations:             {search['iterations']}")


def run_sensitivity_study(power_mw: float, enrichment: float, options: ModelOptions):
    """
    Dimension sensitivity of k_eff over ±40 cm.
    """
    print("\n" + "=" * 70)
    print("       SENSITIVITY TO CORE DIMENSIONS")
    print("=" * 70)

    reactor = create_fast_micro_reactor(power_mw=power_mw, enrichment=enrichment, options=options)
    deltas = np.arange(-40.0, 41.0, 10.0)
    curve = dimension_sensitivity_curve(
        deltas, reactor.geometry, reactor.library, enrichment, options
    )

    print(f"\n{'δ [cm]':>10} {'Δk/k':>12}")
    print("-" * 24)
    for delta, change in zip(deltas, curve):
        print(f"{delta:>10.1f} {change:>12.5f}")

    sens = reactor.calculate_sensitivities()["enrichment"]
    print(f"\n  Δk/k for δx/x = ±{sens['relative_step']:.2f}: {sens['delta_k_over_k']:.5f}")
    print(f"  x·(dk/dx)/k:             {sens['relative_derivative']:.5f}")


def run_thermal_analysis(power_mw: float, enrichment: float, options: ModelOptions):
    """
    Hot-channel thermal-hydraulic analysis.
    """
    print("\n" + "=" * 70)
    print("       HOT-CHANNEL THERMAL ANALYSIS")
    print("=" * 70)

    reactor = create_fast_micro_reactor(power_mw=power_mw, enrichment=enrichment, options=options)
    profiles = reactor.thermal.calculate_temperature_profiles(z_points=11)

    print(f"\n{'z [m]':>8} {'Coolant':>10} {'Clad':>10} {'Fuel surf':>10} {'Centerline':>11}")
    print("-" * 53)
    for i, z in enumerate(profiles["z"]):
        print(
            f"{z:>8.3f} {profiles['coolant'][i]:>10.1f} {profiles['clad_surface'][i]:>10.1f} "
            f"{profiles['fuel_surface'][i]:>10.1f} {profiles['fuel_centerline'][i]:>11.1f}"
        )

    summary = reactor.thermal.get_thermal_summary()
    print(f"\n  Boiling margin:         {summary['boiling_margin_K']:.1f} K")
    print(f"  Fuel melt margin:       {summary['fuel_melt_margin_K']:.1f} K")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Fast Micro-Reactor Design Calculation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # Reference design with defaults
  %(prog)s --power 2 --enrichment 0.85
  %(prog)s --study search           # Critical enrichment search
  %(prog)s --study all              # Run all analyses
        """
    )

    parser.add_argument(
        "--power",
        type=float,
        default=1.0,
        help="Thermal power in MW (default: 1.0)"
    )
    parser.add_argument(
        "--enrichment",
        type=float,
        default=0.798,
        help="U-235 atom fraction (default: 0.798, range: 0-1)"
    )
    parser.add_argument(
        "--study",
        choices=["criticality", "search", "sensitivity", "thermal", "all"],
        help="Run specific study type"
    )
    parser.add_argument(
        "--extrapolated-buckling",
        action="store_true",
        help="Use extrapolated core dimensions for leakage"
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Output JSON file path"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)"
    )

    args = parser.parse_args()
    configure_logging(args.log_level)

    if not 0.0 <= args.enrichment <= 1.0:
        print(f"Error: Enrichment must be an atom fraction in [0, 1], got {args.enrichment}")
        sys.exit(1)

    options = ModelOptions(extrapolated_buckling=args.extrapolated_buckling)

    try:
        if args.study == "criticality":
            run_criticality_sweep(args.power, options)
        elif args.study == "search":
            run_enrichment_search(args.power, options)
        elif args.study == "sensitivity":
            run_sensitivity_study(args.power, args.enrichment, options)
        elif args.study == "thermal":
            run_thermal_analysis(args.power, args.enrichment, options)
        elif args.study == "all":
            run_basic_design(args.power, args.enrichment, options)
            run_criticality_sweep(args.power, options)
            run_enrichment_search(args.power, options)
            run_sensitivity_study(args.power, args.enrichment, options)
            run_thermal_analysis(args.power, args.enrichment, options)
        else:
            reactor = run_basic_design(args.power, args.enrichment, options)

            if args.output:
                reactor.to_json(args.output)
                print(f"\nResults exported to: {args.output}")

    except ReactorModelError as e:
        logger.error("Design calculation failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
