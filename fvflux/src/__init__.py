"""
2D Finite Volume Flux Package
=============================

Numerical-flux core of an unstructured finite volume solver for the 2D
compressible Euler / Navier-Stokes equations.

Features:
- Eleven flux schemes behind one FluxScheme interface (Godunov, Roe, HLL,
  HLLE, HLLC, Lax-Friedrichs, Steger-Warming, central, AUSMD, AUSMDV, van Leer)
- Vectorized exact Riemann solver
- Viscous flux with non-orthogonal gradient correction
- Conservative face flux integration on a side/element arena
- Gauss quadrature of volumetric source terms
- Thread-parallel face and element loops

State representation (primitive variables, as stored on the mesh):
    rho - density [kg/m³]
    vx  - x-velocity [m/s]
    vy  - y-velocity [m/s]
    p   - pressure [Pa]

Example:
    gas = GasProperties(gamma=1.4)
    mesh = Mesh2D.rectangle(32, 32, periodic=True)
    solver = FluxSolver(mesh, gas, SolverConfig(flux_function='roe'))

    fields = mesh.create_fields()
    fields.elem_pvar[:] = ...            # element states
    reconstruct_first_order(mesh, fields)
    R = solver.evaluate(fields, time=0.0)
"""

from .gas import GasProperties
from .state import ConservativeState, PrimitiveState
from .riemann import exact_riemann, star_state
from .flux import (
    FluxScheme, GodunovFlux, RoeFlux, HLLFlux, HLLEFlux, HLLCFlux,
    LaxFriedrichsFlux, StegerWarmingFlux, CentralFlux, AUSMDFlux, AUSMDVFlux,
    VanLeerFlux, FluxFunction, select_flux_scheme,
)
from .diffusion import DiffusiveFlux, correct_gradients
from .mesh import Mesh2D, MeshFields
from .reconstruction import reconstruct_first_order, reconstruct_linear
from .integrator import (
    FaceFlux, EulerFaceFlux, NavierStokesFaceFlux, FaceFluxIntegrator,
    rotate_to_normal, rotate_from_normal, parallel_for, accumulate_side_fluxes,
)
from .sources import (
    SourceTerm, FunctionSourceTerm, CompositeSourceTerm,
    ManufacturedSolution, ManufacturedSource, SourceEvaluator,
)
from .solver import FluxSolver, SolverConfig
from .log import setup_logging

__all__ = [
    # Gas properties
    'GasProperties',

    # Flow state
    'ConservativeState',
    'PrimitiveState',

    # Exact Riemann solver
    'exact_riemann',
    'star_state',

    # Flux schemes
    'FluxScheme',
    'GodunovFlux',
    'RoeFlux',
    'HLLFlux',
    'HLLEFlux',
    'HLLCFlux',
    'LaxFriedrichsFlux',
    'StegerWarmingFlux',
    'CentralFlux',
    'AUSMDFlux',
    'AUSMDVFlux',
    'VanLeerFlux',
    'FluxFunction',
    'select_flux_scheme',

    # Viscous flux
    'DiffusiveFlux',
    'correct_gradients',

    # Mesh
    'Mesh2D',
    'MeshFields',
    'reconstruct_first_order',
    'reconstruct_linear',

    # Face flux integration
    'FaceFlux',
    'EulerFaceFlux',
    'NavierStokesFaceFlux',
    'FaceFluxIntegrator',
    'rotate_to_normal',
    'rotate_from_normal',
    'parallel_for',
    'accumulate_side_fluxes',

    # Source terms
    'SourceTerm',
    'FunctionSourceTerm',
    'CompositeSourceTerm',
    'ManufacturedSolution',
    'ManufacturedSource',
    'SourceEvaluator',

    # Solver
    'FluxSolver',
    'SolverConfig',

    # Logging
    'setup_logging',
]

__version__ = '1.0.0'
