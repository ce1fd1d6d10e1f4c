"""
Viscous fluxes for the 2D Navier-Stokes equations.

Newtonian stress with Stokes' hypothesis and Fourier heat conduction, with the
temperature gradient expressed through the ideal gas law in terms of the
pressure and density gradients.
"""

import numpy as np
from typing import Tuple

from .gas import GasProperties
from .state import RHO, VX, VY, P, MX, MY, E


def correct_gradients(grad_x: np.ndarray, grad_y: np.ndarray, dq: np.ndarray,
                      bary_vec: np.ndarray, bary_dist: np.ndarray
                      ) -> Tuple[np.ndarray, np.ndarray]:
    """
    Non-orthogonal correction of face gradients.

    The component of the averaged gradient along the unit centroid-to-centroid
    vector e is replaced by the difference quotient dq / dist measured along e.
    The tangential part is left untouched.

    Args:
        grad_x, grad_y: Averaged gradients (n_vars, n_faces)
        dq: Neighbour minus owner element state (n_vars, n_faces)
        bary_vec: Centroid-to-centroid vectors (n_faces, 2)
        bary_dist: Their lengths (n_faces,)

    Returns:
        Corrected grad_x, grad_y
    """
    ex = bary_vec[:, 0] / bary_dist
    ey = bary_vec[:, 1] / bary_dist
    correction = grad_x * ex + grad_y * ey - dq / bary_dist
    return grad_x - correction * ex, grad_y - correction * ey


class DiffusiveFlux:
    """Viscous flux evaluator for a constant viscosity gas."""

    def __init__(self, gas: GasProperties):
        self.gas = gas

    def compute(self, state: np.ndarray, grad_x: np.ndarray,
                grad_y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Viscous fluxes in x and y.

        Args:
            state: Mean primitive state [rho, vx, vy, p] (4, n_faces)
            grad_x: x-derivatives of the primitive variables (4, n_faces)
            grad_y: y-derivatives of the primitive variables (4, n_faces)

        Returns:
            f, g: Viscous flux in x and y (4, n_faces); the mass component is zero
        """
        mu = self.gas.mu
        rho = state[RHO]
        vx = state[VX]
        vy = state[VY]
        p = state[P]

        dvx_dx = grad_x[VX]
        dvx_dy = grad_y[VX]
        dvy_dx = grad_x[VY]
        dvy_dy = grad_y[VY]

        tau_xx = mu * (4.0 / 3.0 * dvx_dx - 2.0 / 3.0 * dvy_dy)
        tau_yy = mu * (4.0 / 3.0 * dvy_dy - 2.0 / 3.0 * dvx_dx)
        tau_xy = mu * (dvx_dy + dvy_dx)

        # k dT/dx with T = p / (rho R) and k = mu cp / Pr
        heat = mu * self.gas.gamma / (self.gas.gm1 * self.gas.Pr * rho * rho)
        q_x = heat * (rho * grad_x[P] - p * grad_x[RHO])
        q_y = heat * (rho * grad_y[P] - p * grad_y[RHO])

        f = np.zeros_like(state, dtype=float)
        f[MX] = tau_xx
        f[MY] = tau_xy
        f[E] = vx * tau_xx + vy * tau_xy + q_x

        g = np.zeros_like(state, dtype=float)
        g[MX] = tau_xy
        g[MY] = tau_yy
        g[E] = vx * tau_xy + vy * tau_yy + q_y

        return f, g
