"""
Compare the flux schemes on single Riemann problems against the exact Godunov flux.

This script demonstrates:
1. Interface fluxes of every scheme for Sod's shock tube
2. Deviation from the exact (Godunov) flux
3. Mass flux across a velocity sweep through the sonic point

Run from the fvflux directory:
    python scripts/compare_flux_schemes.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import numpy as np
import matplotlib.pyplot as plt
from loguru import logger

from fvflux import GasProperties, FluxFunction, select_flux_scheme, setup_logging


def sod_fluxes(gas):
    """Interface flux of every scheme for Sod's problem."""
    rhoL, vxL, vyL, pL = 1.0, 0.0, 0.0, 1.0
    rhoR, vxR, vyR, pR = 0.125, 0.0, 0.0, 0.1

    results = {}
    for flux_function in FluxFunction:
        scheme = select_flux_scheme(flux_function, gas)
        results[flux_function.value] = scheme.compute_flux(rhoL, rhoR, vxL, vxR, vyL, vyR, pL, pR)
    return results


def print_sod_table(results):
    exact = results['godunov']

    print("\n" + "=" * 80)
    print("SOD SHOCK TUBE INTERFACE FLUX")
    print("=" * 80)
    print(f"\n{'Scheme':<10} {'mass':<12} {'x-mom':<12} {'y-mom':<12} {'energy':<12} {'rel. err':<10}")
    print("-" * 80)
    for name, F in results.items():
        err = np.linalg.norm(F - exact) / np.linalg.norm(exact)
        print(f"{name:<10} {F[0]:<12.6f} {F[1]:<12.6f} {F[2]:<12.6f} {F[3]:<12.6f} {err:<10.2e}")


def velocity_sweep(gas, n=201):
    """Mass flux of a weak pressure jump convected at Mach -2 ... 2."""
    c = np.sqrt(gas.gamma)
    mach = np.linspace(-2.0, 2.0, n)
    u = mach * c

    rhoL, pL = np.full(n, 1.0), np.full(n, 1.0)
    rhoR, pR = np.full(n, 0.8), np.full(n, 0.8)
    v = np.zeros(n)

    mass_flux = {}
    for flux_function in FluxFunction:
        scheme = select_flux_scheme(flux_function, gas)
        F = scheme.compute_flux(rhoL, rhoR, u, u, v, v, pL, pR)
        mass_flux[flux_function.value] = F[0]
    return mach, mass_flux


def plot_velocity_sweep(mach, mass_flux):
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    fig.suptitle('Mass flux through a convected pressure jump', fontsize=14, fontweight='bold')

    exact = mass_flux['godunov']
    for name, F in mass_flux.items():
        style = 'k-' if name == 'godunov' else '-'
        axes[0].plot(mach, F, style, linewidth=2 if name == 'godunov' else 1, label=name)
        if name != 'godunov':
            axes[1].plot(mach, F - exact, linewidth=1, label=name)

    axes[0].set_xlabel('Mach number')
    axes[0].set_ylabel('Mass flux')
    axes[0].set_title('Interface mass flux')
    axes[0].legend(ncol=2)
    axes[0].grid(True, alpha=0.3)

    axes[1].set_xlabel('Mach number')
    axes[1].set_ylabel('Difference to exact')
    axes[1].set_title('Deviation from the Godunov flux')
    axes[1].grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig('flux_scheme_comparison.png', dpi=150, bbox_inches='tight')
    logger.info("Saved plot to: flux_scheme_comparison.png")


if __name__ == "__main__":
    setup_logging("INFO", show_time=False)
    gas = GasProperties(gamma=1.4)

    print_sod_table(sod_fluxes(gas))

    mach, mass_flux = velocity_sweep(gas)
    plot_velocity_sweep(mach, mass_flux)

    plt.show()
