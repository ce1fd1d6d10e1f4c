"""
fvflux - 2D Finite Volume Flux Core
===================================

Re-exports all public components from fvflux.src
"""

from fvflux.src import (
    # Gas properties
    GasProperties,
    # Flow state
    ConservativeState,
    PrimitiveState,
    # Exact Riemann solver
    exact_riemann,
    star_state,
    # Flux schemes
    FluxScheme,
    GodunovFlux,
    RoeFlux,
    HLLFlux,
    HLLEFlux,
    HLLCFlux,
    LaxFriedrichsFlux,
    StegerWarmingFlux,
    CentralFlux,
    AUSMDFlux,
    AUSMDVFlux,
    VanLeerFlux,
    FluxFunction,
    select_flux_scheme,
    # Viscous flux
    DiffusiveFlux,
    correct_gradients,
    # Mesh
    Mesh2D,
    MeshFields,
    reconstruct_first_order,
    reconstruct_linear,
    # Face flux integration
    FaceFlux,
    EulerFaceFlux,
    NavierStokesFaceFlux,
    FaceFluxIntegrator,
    rotate_to_normal,
    rotate_from_normal,
    parallel_for,
    accumulate_side_fluxes,
    # Source terms
    SourceTerm,
    FunctionSourceTerm,
    CompositeSourceTerm,
    ManufacturedSolution,
    ManufacturedSource,
    SourceEvaluator,
    # Solver
    FluxSolver,
    SolverConfig,
    # Logging
    setup_logging,
)
from fvflux.src import __version__

__all__ = [
    'GasProperties',
    'ConservativeState',
    'PrimitiveState',
    'exact_riemann',
    'star_state',
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
    'DiffusiveFlux',
    'correct_gradients',
    'Mesh2D',
    'MeshFields',
    'reconstruct_first_order',
    'reconstruct_linear',
    'FaceFlux',
    'EulerFaceFlux',
    'NavierStokesFaceFlux',
    'FaceFluxIntegrator',
    'rotate_to_normal',
    'rotate_from_normal',
    'parallel_for',
    'accumulate_side_fluxes',
    'SourceTerm',
    'FunctionSourceTerm',
    'CompositeSourceTerm',
    'ManufacturedSolution',
    'ManufacturedSource',
    'SourceEvaluator',
    'FluxSolver',
    'SolverConfig',
    'setup_logging',
]
