"""
Pytest tests for the solver configuration and residual evaluation.
"""

import numpy as np
import pytest
import sys
from pathlib import Path

from loguru import logger

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from fvflux.src import (
    GasProperties, Mesh2D, FluxSolver, SolverConfig, FluxFunction, FunctionSourceTerm,
    ManufacturedSource, EulerFaceFlux, NavierStokesFaceFlux, HLLCFlux, RoeFlux,
    reconstruct_first_order,
)


@pytest.fixture
def gas():
    return GasProperties(gamma=1.4)


@pytest.fixture
def periodic_mesh():
    return Mesh2D.rectangle(5, 4, lx=2.0, ly=2.0, periodic=True, triangles=True)


@pytest.fixture
def warnings_log():
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


def uniform_fields(solver, rho=1.2, vx=0.5, vy=0.25, p=0.9):
    fields = solver.create_fields()
    fields.elem_pvar[:] = np.array([rho, vx, vy, p])[:, None]
    reconstruct_first_order(solver.mesh, fields)
    return fields


def constant_source(value):
    return FunctionSourceTerm(lambda x, t: np.full((4,) + x.shape[:-1], value))


class TestSolverConfig:

    def test_defaults(self):
        config = SolverConfig()

        assert config.flux_function is FluxFunction.HLLC
        assert not config.viscous
        assert config.n_threads == 1

    def test_string_flux_function(self):
        assert SolverConfig(flux_function='Roe').flux_function is FluxFunction.ROE

    def test_unknown_flux_function(self):
        with pytest.raises(ValueError, match="Unknown flux function"):
            SolverConfig(flux_function='rusanov')

    def test_invalid_thread_count(self):
        with pytest.raises(ValueError, match="n_threads"):
            SolverConfig(n_threads=0)


class TestFluxSolver:

    def test_selected_components(self, gas, periodic_mesh):
        solver = FluxSolver(periodic_mesh, gas, SolverConfig(flux_function='roe'))

        assert isinstance(solver.flux_scheme, RoeFlux)
        assert isinstance(solver.face_flux, EulerFaceFlux)

    def test_default_config(self, gas, periodic_mesh):
        solver = FluxSolver(periodic_mesh, gas)

        assert isinstance(solver.flux_scheme, HLLCFlux)

    def test_viscous_mode(self, periodic_mesh):
        solver = FluxSolver(periodic_mesh, GasProperties(mu=1e-3), SolverConfig(viscous=True))

        assert isinstance(solver.face_flux, NavierStokesFaceFlux)

    def test_viscous_mode_without_viscosity_warns(self, gas, periodic_mesh, warnings_log):
        FluxSolver(periodic_mesh, gas, SolverConfig(viscous=True))

        assert len(warnings_log) == 1
        assert "mu = 0" in warnings_log[0]

    @pytest.mark.parametrize("flux_function", ['hllc', 'roe', 'ausmd', 'vanleer'])
    def test_uniform_flow_residual_vanishes(self, gas, periodic_mesh, flux_function):
        solver = FluxSolver(periodic_mesh, gas, SolverConfig(flux_function=flux_function))
        fields = uniform_fields(solver)

        R = solver.evaluate(fields)

        assert R.shape == (4, periodic_mesh.n_elems)
        np.testing.assert_allclose(R, 0.0, atol=1e-12)

    def test_uniform_flow_with_ghost_cells(self, gas):
        """Ghosts holding the same state close the balance on a bounded mesh."""
        mesh = Mesh2D.rectangle(3, 3, triangles=True)
        solver = FluxSolver(mesh, gas)
        fields = uniform_fields(solver)

        np.testing.assert_allclose(solver.evaluate(fields), 0.0, atol=1e-12)

    def test_viscous_uniform_flow(self, periodic_mesh):
        solver = FluxSolver(periodic_mesh, GasProperties(mu=1e-2), SolverConfig(viscous=True))
        fields = uniform_fields(solver)

        np.testing.assert_allclose(solver.evaluate(fields), 0.0, atol=1e-12)

    def test_constant_source(self, gas, periodic_mesh):
        solver = FluxSolver(periodic_mesh, gas)
        solver.add_source_term(constant_source(3.0))
        fields = uniform_fields(solver)

        R = solver.evaluate(fields, time=1.0)

        expected = 3.0 * periodic_mesh.elem_area[:periodic_mesh.n_elems]
        np.testing.assert_allclose(R, np.broadcast_to(expected, R.shape), rtol=1e-10, atol=1e-12)

    def test_sources_accumulate(self, gas, periodic_mesh):
        solver = FluxSolver(periodic_mesh, gas)
        solver.add_source_term(constant_source(1.0))
        solver.add_source_term(constant_source(2.0))
        fields = solver.create_fields()

        S = solver.compute_sources(fields)

        np.testing.assert_allclose(S[2], 3.0 * periodic_mesh.elem_area[:periodic_mesh.n_elems])

    def test_global_conservation(self, gas, periodic_mesh):
        """Interior fluxes cancel: the summed residual equals the summed source."""
        solver = FluxSolver(periodic_mesh, gas)
        solver.add_source_term(ManufacturedSource(gas))

        rng = np.random.default_rng(5)
        fields = uniform_fields(solver)
        n = periodic_mesh.n_total_elems
        fields.elem_pvar[0] += rng.uniform(-0.2, 0.2, n)
        fields.elem_pvar[3] += rng.uniform(-0.2, 0.2, n)
        reconstruct_first_order(periodic_mesh, fields)

        R = solver.evaluate(fields, time=0.3)

        np.testing.assert_allclose(R.sum(axis=1), fields.elem_source.sum(axis=1), atol=1e-12)

    def test_threaded_solver_matches_serial(self, gas, periodic_mesh):
        serial = FluxSolver(periodic_mesh, gas, SolverConfig(flux_function='hllc'))
        threaded = FluxSolver(periodic_mesh, gas, SolverConfig(flux_function='hllc', n_threads=4))

        rng = np.random.default_rng(2)
        fields_serial = uniform_fields(serial)
        fields_serial.elem_pvar[1] += rng.uniform(-0.3, 0.3, periodic_mesh.n_total_elems)
        reconstruct_first_order(periodic_mesh, fields_serial)
        fields_threaded = threaded.create_fields()
        fields_threaded.elem_pvar[:] = fields_serial.elem_pvar
        reconstruct_first_order(periodic_mesh, fields_threaded)

        np.testing.assert_array_equal(threaded.compute_fluxes(fields_threaded),
                                      serial.compute_fluxes(fields_serial))

    def test_non_finite_state_rejected(self, gas, periodic_mesh):
        solver = FluxSolver(periodic_mesh, gas)
        fields = uniform_fields(solver)
        fields.elem_pvar[3, 0] = np.nan
        reconstruct_first_order(periodic_mesh, fields)

        with pytest.raises(FloatingPointError):
            solver.evaluate(fields)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
