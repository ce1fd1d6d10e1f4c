"""
Flow state representation for the 2D Euler / Navier-Stokes equations.

Two views of the same state are provided:

Conservative variables:
    rho - density [kg/m³]
    mx  - x-momentum per volume [kg/(m²·s)]
    my  - y-momentum per volume [kg/(m²·s)]
    E   - total energy per volume [J/m³]

Primitive variables:
    rho - density [kg/m³]
    vx  - x-velocity [m/s]
    vy  - y-velocity [m/s]
    p   - pressure [Pa]

Array form is always (4, n) with the variables in the order listed above.
"""

import numpy as np
from dataclasses import dataclass

from .gas import GasProperties

# Variable indices in the (4, n) array layout
RHO = 0
VX = 1
VY = 2
P = 3
MX = 1
MY = 2
E = 3
N_VARS = 4


@dataclass
class ConservativeState:
    """
    Flow state stored as conservative variables.

    Primitive variables are computed as properties:
        vx, vy, p, T, c, H, mach
    """
    rho: np.ndarray     # Density [kg/m³]
    mx: np.ndarray      # x-momentum per volume [kg/(m²·s)]
    my: np.ndarray      # y-momentum per volume [kg/(m²·s)]
    E: np.ndarray       # Total energy per volume [J/m³]
    gas: GasProperties

    @property
    def vx(self) -> np.ndarray:
        return self.mx / self.rho

    @property
    def vy(self) -> np.ndarray:
        return self.my / self.rho

    @property
    def kinetic_energy(self) -> np.ndarray:
        """Kinetic energy per volume [J/m³]."""
        return 0.5 * (self.mx**2 + self.my**2) / self.rho

    @property
    def p(self) -> np.ndarray:
        """Pressure from total energy [Pa]."""
        return self.gas.gm1 * (self.E - self.kinetic_energy)

    @property
    def T(self) -> np.ndarray:
        """Temperature from ideal gas law [K]."""
        return self.p / (self.rho * self.gas.R)

    @property
    def c(self) -> np.ndarray:
        """Speed of sound [m/s]."""
        return np.sqrt(self.gas.gamma * self.p / self.rho)

    @property
    def H(self) -> np.ndarray:
        """Total specific enthalpy [J/kg]."""
        return (self.E + self.p) / self.rho

    @property
    def mach(self) -> np.ndarray:
        return np.sqrt(self.vx**2 + self.vy**2) / self.c

    def is_physical(self) -> bool:
        """True when density is positive and energy exceeds the kinetic floor."""
        return bool(np.all(self.rho > 0) and np.all(self.E > self.kinetic_energy))

    def to_primitive(self) -> 'PrimitiveState':
        return PrimitiveState(rho=self.rho, vx=self.vx, vy=self.vy, p=self.p, gas=self.gas)

    def to_array(self) -> np.ndarray:
        """Array of shape (4, n): [rho, mx, my, E]."""
        return np.array([self.rho, self.mx, self.my, self.E], dtype=float)

    @classmethod
    def from_array(cls, U: np.ndarray, gas: GasProperties) -> 'ConservativeState':
        return cls(rho=U[RHO], mx=U[MX], my=U[MY], E=U[E], gas=gas)


@dataclass
class PrimitiveState:
    """
    Flow state stored as primitive variables.

    This is the form consumed by the flux kernels and stored per element and
    per side by the mesh fields.
    """
    rho: np.ndarray     # Density [kg/m³]
    vx: np.ndarray      # x-velocity [m/s]
    vy: np.ndarray      # y-velocity [m/s]
    p: np.ndarray       # Pressure [Pa]
    gas: GasProperties

    @property
    def E(self) -> np.ndarray:
        """Total energy per volume [J/m³]."""
        return self.gas.gm1_inv * self.p + 0.5 * self.rho * (self.vx**2 + self.vy**2)

    @property
    def T(self) -> np.ndarray:
        return self.p / (self.rho * self.gas.R)

    @property
    def c(self) -> np.ndarray:
        """Speed of sound [m/s]."""
        return np.sqrt(self.gas.gamma * self.p / self.rho)

    @property
    def H(self) -> np.ndarray:
        """Total specific enthalpy [J/kg]."""
        return (self.E + self.p) / self.rho

    @property
    def mach(self) -> np.ndarray:
        return np.sqrt(self.vx**2 + self.vy**2) / self.c

    def is_physical(self) -> bool:
        """True when density and pressure are positive everywhere."""
        return bool(np.all(self.rho > 0) and np.all(self.p > 0))

    def to_conservative(self) -> ConservativeState:
        return ConservativeState(rho=self.rho, mx=self.rho * self.vx, my=self.rho * self.vy,
                                 E=self.E, gas=self.gas)

    def to_array(self) -> np.ndarray:
        """Array of shape (4, n): [rho, vx, vy, p]."""
        return np.array([self.rho, self.vx, self.vy, self.p], dtype=float)

    @classmethod
    def from_array(cls, W: np.ndarray, gas: GasProperties) -> 'PrimitiveState':
        return cls(rho=W[RHO], vx=W[VX], vy=W[VY], p=W[P], gas=gas)

    @classmethod
    def uniform(cls, n: int, rho: float, vx: float, vy: float, p: float,
                gas: GasProperties) -> 'PrimitiveState':
        """Constant state repeated over n entries."""
        return cls(rho=np.full(n, rho, dtype=float), vx=np.full(n, vx, dtype=float),
                   vy=np.full(n, vy, dtype=float), p=np.full(n, p, dtype=float), gas=gas)
