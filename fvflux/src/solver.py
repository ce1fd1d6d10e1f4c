"""
Flux evaluation driver wiring configuration to the numerical components.
"""

import numpy as np
from dataclasses import dataclass
from typing import Union

from loguru import logger

from .diffusion import DiffusiveFlux
from .flux import FluxFunction, parse_flux_function, select_flux_scheme
from .gas import GasProperties
from .integrator import (EulerFaceFlux, FaceFluxIntegrator, NavierStokesFaceFlux,
                         accumulate_side_fluxes)
from .mesh import Mesh2D, MeshFields
from .sources import CompositeSourceTerm, SourceEvaluator, SourceTerm


@dataclass
class SolverConfig:
    """Configuration for the flux evaluation."""
    flux_function: Union[FluxFunction, str] = FluxFunction.HLLC  # See FluxFunction for options
    viscous: bool = False           # Add the Navier-Stokes viscous flux
    n_threads: int = 1              # Worker threads for the face and element loops
    check_finite: bool = True       # Raise if any face flux is NaN/Inf
    trap_fp_errors: bool = False    # Raise on the first invalid floating point operation

    def __post_init__(self):
        self.flux_function = parse_flux_function(self.flux_function)
        if self.n_threads < 1:
            raise ValueError(f"n_threads must be >= 1, got {self.n_threads}")


class FluxSolver:
    """
    Right-hand side evaluation of the 2D finite volume scheme.

    Time integration, boundary conditions and reconstruction are left to the
    caller: it fills MeshFields (element and side states, gradients in viscous
    mode) and gets back side fluxes, element sources and the element residual.
    """

    def __init__(self, mesh: Mesh2D, gas: GasProperties, config: SolverConfig = None):
        """
        Initialize the solver.

        Args:
            mesh: Computational mesh
            gas: Gas properties
            config: Solver configuration

        Raises:
            ValueError: On an invalid configuration, before any evaluation
        """
        self.mesh = mesh
        self.gas = gas
        self.config = config if config is not None else SolverConfig()

        self.flux_scheme = select_flux_scheme(self.config.flux_function, gas)

        if self.config.viscous:
            if not gas.is_viscous:
                logger.warning("Viscous mode selected with mu = 0; the viscous flux vanishes")
            self.face_flux = NavierStokesFaceFlux(self.flux_scheme, DiffusiveFlux(gas))
        else:
            self.face_flux = EulerFaceFlux(self.flux_scheme)

        self.integrator = FaceFluxIntegrator(mesh, self.face_flux,
                                             n_threads=self.config.n_threads,
                                             check_finite=self.config.check_finite,
                                             trap_fp_errors=self.config.trap_fp_errors)

        self.source_terms = CompositeSourceTerm()
        self.source_evaluator = SourceEvaluator(mesh, self.source_terms,
                                                n_threads=self.config.n_threads)

        logger.debug(f"FluxSolver: {type(self.face_flux).__name__} with "
                     f"{type(self.flux_scheme).__name__}, {self.config.n_threads} thread(s)")

    def create_fields(self) -> MeshFields:
        return self.mesh.create_fields()

    def add_source_term(self, source: SourceTerm):
        """Add a source term to the solver."""
        self.source_terms.add(source)

    def compute_fluxes(self, fields: MeshFields) -> np.ndarray:
        """Length-scaled side fluxes (4, n_sides)."""
        return self.integrator.compute(fields)

    def compute_sources(self, fields: MeshFields, time: float = 0.0) -> np.ndarray:
        """Integrated element sources (4, n_elems)."""
        return self.source_evaluator.compute(fields, time)

    def evaluate(self, fields: MeshFields, time: float = 0.0) -> np.ndarray:
        """
        Residual d(U * area)/dt of every interior element.

        Returns:
            R: (4, n_elems) = integrated source - sum of outgoing side fluxes
        """
        self.compute_fluxes(fields)
        self.compute_sources(fields, time)
        net_flux = accumulate_side_fluxes(self.mesh, fields)[:, :self.mesh.n_elems]
        return fields.elem_source - net_flux
