"""
Gas model and transport properties for a calorically perfect gas.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GasProperties:
    """
    Thermodynamic and transport constants shared by every flux component.

    Instances are immutable so one object can be handed to many schemes and
    threads at once.
    """
    gamma: float = 1.4          # Ratio of specific heats
    R: float = 287.0            # Specific gas constant [J/(kg·K)]
    mu: float = 0.0             # Dynamic viscosity [Pa·s]
    Pr: float = 0.72            # Prandtl number

    def __post_init__(self):
        if self.gamma <= 1.0:
            raise ValueError(f"gamma must be > 1, got {self.gamma}")
        if self.R <= 0.0:
            raise ValueError(f"R must be positive, got {self.R}")
        if self.mu < 0.0:
            raise ValueError(f"mu must be non-negative, got {self.mu}")
        if self.Pr <= 0.0:
            raise ValueError(f"Pr must be positive, got {self.Pr}")

    @property
    def gm1(self) -> float:
        """gamma - 1."""
        return self.gamma - 1.0

    @property
    def gm1_inv(self) -> float:
        """1 / (gamma - 1)."""
        return 1.0 / (self.gamma - 1.0)

    @property
    def cp(self) -> float:
        """Specific heat at constant pressure [J/(kg·K)]."""
        return self.gamma * self.R / (self.gamma - 1)

    @property
    def cv(self) -> float:
        """Specific heat at constant volume [J/(kg·K)]."""
        return self.R / (self.gamma - 1)

    @property
    def is_viscous(self) -> bool:
        return self.mu > 0.0
