"""
Exact Riemann solver for the 1D Euler equations (Toro, ch. 4).

Vectorized over faces: every argument may be an array of the same shape and
the star-region pressure is found with Newton-Raphson iterations applied to
all faces at once.

The solution is self-similar and is sampled along the ray x/t = s. For the
Godunov flux s = 0, i.e. the state sitting on the interface.
"""

import numpy as np
from loguru import logger
from typing import Tuple

from .gas import GasProperties


def _pressure_function(p: np.ndarray, rhoK: np.ndarray, pK: np.ndarray,
                       cK: np.ndarray, gamma: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Pressure function f_K(p) and its derivative for one side K.

    Shock branch (p > pK) from the Rankine-Hugoniot relations, rarefaction
    branch (p <= pK) from the isentropic relations.
    """
    gm1 = gamma - 1
    gp1 = gamma + 1

    A = 2 / (gp1 * rhoK)
    B = gm1 / gp1 * pK
    q = np.sqrt(A / (p + B))
    f_shock = (p - pK) * q
    df_shock = q * (1 - 0.5 * (p - pK) / (p + B))

    p_rat = (p / pK)**(gm1 / (2 * gamma))
    f_raref = 2 * cK / gm1 * (p_rat - 1)
    df_raref = p_rat / (rhoK * cK)

    shock = p > pK
    return np.where(shock, f_shock, f_raref), np.where(shock, df_shock, df_raref)


def star_state(rhoL, rhoR, uL, uR, pL, pR, gas: GasProperties,
               tol: float = 1e-12, max_iter: int = 50) -> Tuple[np.ndarray, np.ndarray]:
    """
    Pressure and velocity in the star region between the two nonlinear waves.

    Args:
        rhoL, rhoR: Densities
        uL, uR: Normal velocities
        pL, pR: Pressures
        gas: Gas properties
        tol: Relative pressure change at which Newton stops
        max_iter: Iteration cap

    Returns:
        p_star, u_star
    """
    gamma = gas.gamma
    rhoL, rhoR, uL, uR, pL, pR = np.broadcast_arrays(
        *(np.asarray(v, dtype=float) for v in (rhoL, rhoR, uL, uR, pL, pR)))
    cL = np.sqrt(gamma * pL / rhoL)
    cR = np.sqrt(gamma * pR / rhoR)
    du = uR - uL

    # Primitive-variable (PVRS) initial guess
    p_floor = tol * np.minimum(pL, pR)
    p = 0.5 * (pL + pR) - 0.125 * du * (rhoL + rhoR) * (cL + cR)
    p = np.maximum(p, p_floor)

    change = np.full(p.shape, np.inf)
    for _ in range(max_iter):
        fL, dfL = _pressure_function(p, rhoL, pL, cL, gamma)
        fR, dfR = _pressure_function(p, rhoR, pR, cR, gamma)

        p_new = p - (fL + fR + du) / (dfL + dfR)
        p_new = np.maximum(p_new, p_floor)

        change = 2 * np.abs(p_new - p) / (p_new + p)
        p = p_new
        if np.all(change < tol):
            break
    else:
        n_open = np.count_nonzero(~(change < tol))
        logger.warning(f"Exact Riemann solver: star pressure not converged after "
                       f"{max_iter} iteration(s) at {n_open} face(s)")

    fL, _ = _pressure_function(p, rhoL, pL, cL, gamma)
    fR, _ = _pressure_function(p, rhoR, pR, cR, gamma)
    u = 0.5 * (uL + uR) + 0.5 * (fR - fL)
    return p, u


def _sample_left(rhoK, uK, pK, cK, p_star, u_star, s, gamma):
    """
    Sample the solution left of the contact.

    The right side is sampled with the same routine applied to the mirrored
    problem (u -> -u, s -> -s).
    """
    gm1 = gamma - 1
    gp1 = gamma + 1
    g6 = gm1 / gp1

    rho = rhoK.copy()
    u = uK.copy()
    p = pK.copy()

    # Left shock
    shock = p_star > pK
    if np.any(shock):
        pm = p_star[shock] / pK[shock]
        S = uK[shock] - cK[shock] * np.sqrt(gp1 / (2 * gamma) * pm + gm1 / (2 * gamma))
        behind = s[shock] > S
        idx = np.flatnonzero(shock)[behind]
        pm = pm[behind]
        rho[idx] = rhoK[idx] * (pm + g6) / (pm * g6 + 1)
        u[idx] = u_star[idx]
        p[idx] = p_star[idx]

    # Left rarefaction
    raref = ~shock
    if np.any(raref):
        head = uK - cK
        c_star = cK * (p_star / pK)**(gm1 / (2 * gamma))
        tail = u_star - c_star

        star = raref & (s > head) & (s > tail)
        rho[star] = rhoK[star] * (p_star[star] / pK[star])**(1 / gamma)
        u[star] = u_star[star]
        p[star] = p_star[star]

        fan = raref & (s > head) & (s <= tail)
        if np.any(fan):
            c = 2 / gp1 * (cK[fan] + 0.5 * gm1 * (uK[fan] - s[fan]))
            u[fan] = 2 / gp1 * (cK[fan] + 0.5 * gm1 * uK[fan] + s[fan])
            rho[fan] = rhoK[fan] * (c / cK[fan])**(2 / gm1)
            p[fan] = pK[fan] * (c / cK[fan])**(2 * gamma / gm1)

    return rho, u, p


def exact_riemann(rhoL, rhoR, uL, uR, pL, pR, gas: GasProperties, s=0.0,
                  tol: float = 1e-12, max_iter: int = 50
                  ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Exact solution of the Riemann problem sampled at x/t = s.

    Args:
        rhoL, rhoR: Densities
        uL, uR: Normal velocities
        pL, pR: Pressures
        gas: Gas properties
        s: Sampling speed x/t (0 gives the interface state)

    Returns:
        rho, u, p on the sampling ray. Faces where the data generate a vacuum
        are returned as NaN.
    """
    gamma = gas.gamma
    arrays = np.broadcast_arrays(
        *(np.asarray(v, dtype=float) for v in (rhoL, rhoR, uL, uR, pL, pR, s)))
    shape = arrays[0].shape
    rhoL, rhoR, uL, uR, pL, pR, s = (np.ravel(a) for a in arrays)

    cL = np.sqrt(gamma * pL / rhoL)
    cR = np.sqrt(gamma * pR / rhoR)

    # Pressure positivity condition
    vacuum = 2 / (gamma - 1) * (cL + cR) <= uR - uL
    if np.any(vacuum):
        logger.warning(f"Exact Riemann solver: vacuum generated at {np.count_nonzero(vacuum)} face(s)")

    p_star, u_star = star_state(rhoL, rhoR, uL, uR, pL, pR, gas, tol=tol, max_iter=max_iter)

    rho_l, u_l, p_l = _sample_left(rhoL, uL, pL, cL, p_star, u_star, s, gamma)
    rho_r, u_r, p_r = _sample_left(rhoR, -uR, pR, cR, p_star, -u_star, -s, gamma)

    left = s <= u_star
    rho = np.where(left, rho_l, rho_r)
    u = np.where(left, u_l, -u_r)
    p = np.where(left, p_l, p_r)

    rho[vacuum] = np.nan
    u[vacuum] = np.nan
    p[vacuum] = np.nan

    return rho.reshape(shape), u.reshape(shape), p.reshape(shape)
