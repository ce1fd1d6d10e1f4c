"""
Performance benchmark of the face flux integration.

Times one residual evaluation per flux scheme and thread count on a
periodic triangular mesh.

Run from the fvflux directory:
    python scripts/benchmark_performance.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import time
import numpy as np
from fvflux import (GasProperties, Mesh2D, FluxSolver, SolverConfig, FluxFunction,
                    ManufacturedSource, reconstruct_linear, setup_logging)


def run_benchmark(mesh, gas, flux_function, n_threads=1, n_repeat=20):
    """Average wall time of one residual evaluation."""
    config = SolverConfig(flux_function=flux_function, n_threads=n_threads)
    solver = FluxSolver(mesh, gas, config)
    solver.add_source_term(ManufacturedSource(gas))

    # Manufactured solution and its exact gradients as initial state
    solution = ManufacturedSource(gas)
    fields = solver.create_fields()
    fields.elem_pvar[:] = solution.primitive(mesh.elem_centroid, 0.0)

    rho = fields.elem_pvar[0]
    drho = solution.amplitude * np.pi * solution.frequency * np.cos(
        solution.phase(mesh.elem_centroid, 0.0))
    for grad in (fields.elem_grad_x, fields.elem_grad_y):
        grad[0] = drho
        grad[3] = gas.gm1 * (2.0 * rho - 1.0) * drho
    reconstruct_linear(mesh, fields)

    solver.evaluate(fields)  # warm up
    start_time = time.perf_counter()
    for _ in range(n_repeat):
        solver.evaluate(fields)
    end_time = time.perf_counter()

    return (end_time - start_time) / n_repeat


if __name__ == "__main__":
    setup_logging("WARNING")

    n = 64
    mesh = Mesh2D.rectangle(n, n, lx=2.0, ly=2.0, periodic=True, triangles=True)
    gas = GasProperties(gamma=1.4)

    print("=" * 80)
    print("FLUX INTEGRATION BENCHMARK")
    print("=" * 80)
    print(f"\nMesh: {mesh.n_elems} elements, {len(mesh.faces)} faces")

    thread_counts = [1, 2, 4]
    results = {}

    print(f"\n{'Scheme':<10}" + "".join(f"{f'{t} thread(s) [ms]':<20}" for t in thread_counts)
          + f"{'Speedup':<10}")
    print("-" * 80)

    for flux_function in FluxFunction:
        times = [run_benchmark(mesh, gas, flux_function, n_threads=t) for t in thread_counts]
        results[flux_function.value] = times

        row = "".join(f"{1000 * t:<20.2f}" for t in times)
        print(f"{flux_function.value:<10}{row}{times[0] / min(times):<10.2f}")

    fastest = min(results, key=lambda name: results[name][0])
    slowest = max(results, key=lambda name: results[name][0])

    print("\n" + "=" * 80)
    print("SUMMARY")
    print("=" * 80)
    print(f"\nFastest scheme (serial): {fastest} ({1000 * results[fastest][0]:.2f} ms)")
    print(f"Slowest scheme (serial): {slowest} ({1000 * results[slowest][0]:.2f} ms)")
    print(f"Throughput ({fastest}): {len(mesh.faces) / results[fastest][0] / 1e6:.2f} M faces/s")
    print("=" * 80)
