"""
Volumetric source terms and their integration over the mesh elements.

Extensible architecture: a source term is evaluated pointwise at quadrature
points and integrated per element by the SourceEvaluator.

Notation:
    x - coordinates (..., 2)
    S - source rate array (4, ...) ordered [rho, x-momentum, y-momentum, energy]
"""

import numpy as np
from abc import ABC, abstractmethod
from functools import partial
from typing import Callable, List, Optional

from loguru import logger

from .gas import GasProperties
from .integrator import parallel_for
from .mesh import Mesh2D, MeshFields
from .state import N_VARS


class SourceTerm(ABC):
    """Abstract base class for source terms."""

    @abstractmethod
    def evaluate(self, x: np.ndarray, time: float) -> np.ndarray:
        """
        Evaluate the source rate at points.

        Args:
            x: Coordinates of shape (..., 2)
            time: Simulation time

        Returns:
            S: Source rate array of shape (4, ...)
        """
        pass


class FunctionSourceTerm(SourceTerm):
    """
    Source term given by a user function.

    The function receives the coordinates (..., 2) and the time and returns
    the source rate of shape (4, ...).
    """

    def __init__(self, source_func: Callable[[np.ndarray, float], np.ndarray]):
        self.source_func = source_func

    def evaluate(self, x: np.ndarray, time: float) -> np.ndarray:
        return np.asarray(self.source_func(x, time), dtype=float)


class CompositeSourceTerm(SourceTerm):
    """Combines multiple source terms."""

    def __init__(self, sources: List[SourceTerm] = None):
        self.sources = sources if sources is not None else []

    def add(self, source: SourceTerm):
        """Add a source term to the composite."""
        self.sources.append(source)

    def evaluate(self, x: np.ndarray, time: float) -> np.ndarray:
        x = np.asarray(x, dtype=float)
        if not self.sources:
            return np.zeros((N_VARS,) + x.shape[:-1])

        S_total = self.sources[0].evaluate(x, time)
        for source in self.sources[1:]:
            S_total = S_total + source.evaluate(x, time)
        return S_total


class ManufacturedSolution:
    """
    Travelling sine wave along x + y used for verification.

        rho = 2 + A sin(theta),  vx = vy = 1,  E = rho^2
        theta = pi f (x + y) - 2 pi t
    """

    def __init__(self, gas: GasProperties, amplitude: float = 0.1, frequency: float = 1.0):
        self.gas = gas
        self.amplitude = amplitude
        self.frequency = frequency

    def phase(self, x: np.ndarray, time: float) -> np.ndarray:
        x = np.asarray(x, dtype=float)
        return np.pi * self.frequency * (x[..., 0] + x[..., 1]) - 2.0 * np.pi * time

    def primitive(self, x: np.ndarray, time: float) -> np.ndarray:
        """Primitive state [rho, vx, vy, p] of shape (4, ...)."""
        theta = self.phase(x, time)
        rho = 2.0 + self.amplitude * np.sin(theta)
        ones = np.ones_like(rho)
        p = self.gas.gm1 * (rho * rho - rho)
        return np.array([rho, ones, ones, p])


class ManufacturedSource(ManufacturedSolution, SourceTerm):
    """
    Source term that manufactures ManufacturedSolution from the Euler
    equations, with the heat-conduction contribution added in viscous mode.
    """

    def __init__(self, gas: GasProperties, amplitude: float = 0.1, frequency: float = 1.0,
                 viscous: Optional[bool] = None):
        super().__init__(gas, amplitude, frequency)
        self.viscous = gas.is_viscous if viscous is None else viscous

    def evaluate(self, x: np.ndarray, time: float) -> np.ndarray:
        gamma = self.gas.gamma
        amp = self.amplitude
        om = np.pi * self.frequency
        a = 2.0 * np.pi

        theta = self.phase(x, time)
        cos_theta = np.cos(theta)
        sin_2theta = np.sin(2.0 * theta)

        S = np.empty((N_VARS,) + theta.shape)
        S[0] = (-a + 2.0 * om) * cos_theta
        S[1] = (-a + om * (3.0 * gamma - 1.0)) * cos_theta + amp * om * self.gas.gm1 * sin_2theta
        S[2] = S[1]
        S[3] = ((2.0 + 6.0 * gamma) * om - 4.0 * a) * cos_theta + amp * (2.0 * om * gamma - a) * sin_2theta
        if self.viscous:
            S[3] += 2.0 * self.gas.mu * gamma * om * om / self.gas.Pr * np.sin(theta)

        return amp * S


class SourceEvaluator:
    """
    Gauss quadrature of a source term over every interior element.

    elem_source[:, e] = sum_g S(x_g, t) w_g, overwriting the previous value.
    """

    def __init__(self, mesh: Mesh2D, source: SourceTerm, n_threads: int = 1):
        if n_threads < 1:
            raise ValueError(f"n_threads must be >= 1, got {n_threads}")
        self.mesh = mesh
        self.source = source
        self.n_threads = n_threads
        logger.debug(f"SourceEvaluator: {type(source).__name__}, "
                     f"{mesh.w_gp.shape[1]} points per element")

    def _integrate_chunk(self, fields: MeshFields, time: float, start: int, stop: int):
        S = self.source.evaluate(self.mesh.x_gp[start:stop], time)
        fields.elem_source[:, start:stop] = np.einsum('veg,eg->ve', S, self.mesh.w_gp[start:stop])

    def compute(self, fields: MeshFields, time: float) -> np.ndarray:
        """
        Returns:
            fields.elem_source (4, n_elems)
        """
        parallel_for(partial(self._integrate_chunk, fields, time), self.mesh.n_elems, self.n_threads)
        return fields.elem_source
