"""
Face flux integration over an unstructured mesh.

For every physical face the two side states are rotated into the face frame,
the convective flux is evaluated by the selected scheme (and the viscous flux
subtracted in Navier-Stokes mode), the result is rotated back, scaled by the
face length and written to the owning side. The mirror side receives the
exact negation, which makes the scheme conservative by construction.

The loop over faces is split into static contiguous chunks that run on a
thread pool; every chunk is numpy-vectorized.
"""

import numpy as np
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, List, Tuple

from loguru import logger

from .diffusion import DiffusiveFlux, correct_gradients
from .flux import FluxScheme
from .mesh import Mesh2D, MeshFields
from .state import RHO, VX, VY, P, MX, MY, E


def rotate_to_normal(vx, vy, nx, ny):
    """Global velocity -> (normal, tangential) components."""
    return nx * vx + ny * vy, -ny * vx + nx * vy


def rotate_from_normal(fn, ft, nx, ny):
    """(normal, tangential) components -> global x, y components."""
    return nx * fn - ny * ft, ny * fn + nx * ft


def create_work_chunks(total_work: int, n_threads: int) -> List[Tuple[int, int]]:
    """Static contiguous chunks, at most one per thread."""
    n_chunks = max(1, min(n_threads, total_work))
    bounds = np.linspace(0, total_work, n_chunks + 1).astype(int)
    return [(int(start), int(stop)) for start, stop in zip(bounds[:-1], bounds[1:]) if stop > start]


def parallel_for(work_function: Callable[[int, int], None], total_work: int,
                 n_threads: int = 1):
    """
    Run work_function(start, stop) over [0, total_work) in static chunks.

    With one thread the chunk runs inline. Otherwise the chunks run on a
    thread pool; the first exception raised by any chunk is re-raised after
    all chunks have finished.
    """
    chunks = create_work_chunks(total_work, n_threads)
    if n_threads <= 1 or len(chunks) <= 1:
        for start, stop in chunks:
            work_function(start, stop)
        return

    with ThreadPoolExecutor(max_workers=n_threads) as executor:
        futures = [executor.submit(work_function, start, stop) for start, stop in chunks]
        for future in futures:
            future.result()


class FaceFlux(ABC):
    """Flux per unit length through a set of sides, in the global frame."""

    def __init__(self, scheme: FluxScheme):
        self.scheme = scheme

    def convective_flux(self, mesh: Mesh2D, fields: MeshFields,
                        sides: np.ndarray) -> np.ndarray:
        """Rotate, evaluate the scheme and rotate back."""
        nx = mesh.side_normal[sides, 0]
        ny = mesh.side_normal[sides, 1]
        WL = fields.side_pvar[:, sides]
        WR = fields.side_pvar[:, mesh.side_connection[sides]]

        vnL, vtL = rotate_to_normal(WL[VX], WL[VY], nx, ny)
        vnR, vtR = rotate_to_normal(WR[VX], WR[VY], nx, ny)

        Fn = self.scheme.compute_flux_vectorized(WL[RHO], WR[RHO], vnL, vnR,
                                                 vtL, vtR, WL[P], WR[P])

        F = np.empty_like(Fn)
        F[RHO] = Fn[0]
        F[MX], F[MY] = rotate_from_normal(Fn[1], Fn[2], nx, ny)
        F[E] = Fn[3]
        return F

    @abstractmethod
    def compute(self, mesh: Mesh2D, fields: MeshFields, sides: np.ndarray) -> np.ndarray:
        """
        Args:
            mesh: Mesh arena
            fields: Current side/element states
            sides: Indices of the owning sides to evaluate

        Returns:
            Flux per unit length (4, len(sides))
        """
        pass


class EulerFaceFlux(FaceFlux):
    """Inviscid face flux."""

    def compute(self, mesh, fields, sides):
        return self.convective_flux(mesh, fields, sides)


class NavierStokesFaceFlux(FaceFlux):
    """
    Convective flux minus the normal projection of the viscous flux.

    The viscous flux uses the mean of the two side states and the mean of the
    two element gradients, corrected along the centroid-to-centroid vector
    with the difference of the element states.
    """

    def __init__(self, scheme: FluxScheme, diffusion: DiffusiveFlux):
        super().__init__(scheme)
        self.diffusion = diffusion

    def compute(self, mesh, fields, sides):
        F = self.convective_flux(mesh, fields, sides)

        conn = mesh.side_connection[sides]
        elemL = mesh.side_elem[sides]
        elemR = mesh.side_elem[conn]

        state = 0.5 * (fields.side_pvar[:, sides] + fields.side_pvar[:, conn])
        grad_x = 0.5 * (fields.elem_grad_x[:, elemL] + fields.elem_grad_x[:, elemR])
        grad_y = 0.5 * (fields.elem_grad_y[:, elemL] + fields.elem_grad_y[:, elemR])
        dq = fields.elem_pvar[:, elemR] - fields.elem_pvar[:, elemL]

        grad_x, grad_y = correct_gradients(grad_x, grad_y, dq,
                                           mesh.side_bary_vec[sides],
                                           mesh.side_bary_dist[sides])

        f, g = self.diffusion.compute(state, grad_x, grad_y)
        return F - (f * mesh.side_normal[sides, 0] + g * mesh.side_normal[sides, 1])


class FaceFluxIntegrator:
    """
    Integrates the face flux over all faces of a mesh.

    Each physical face is visited once through mesh.faces; the owning side
    receives F * length and its connection -F * length. Chunks therefore
    write disjoint columns of side_flux and need no locking.
    """

    def __init__(self, mesh: Mesh2D, face_flux: FaceFlux, n_threads: int = 1,
                 check_finite: bool = True, trap_fp_errors: bool = False):
        """
        Args:
            mesh: Mesh arena
            face_flux: Euler or Navier-Stokes face flux
            n_threads: Number of worker threads
            check_finite: Raise FloatingPointError if any flux is NaN/Inf
            trap_fp_errors: Evaluate under numpy.errstate(... 'raise') so the
                first invalid operation raises FloatingPointError
        """
        if n_threads < 1:
            raise ValueError(f"n_threads must be >= 1, got {n_threads}")
        self.mesh = mesh
        self.face_flux = face_flux
        self.n_threads = n_threads
        self.check_finite = check_finite
        self.trap_fp_errors = trap_fp_errors

    def _integrate_chunk(self, fields: MeshFields, start: int, stop: int):
        mesh = self.mesh
        sides = mesh.faces[start:stop]

        # errstate is thread-local, so it is set inside the chunk
        if self.trap_fp_errors:
            with np.errstate(divide='raise', over='raise', invalid='raise'):
                F = self.face_flux.compute(mesh, fields, sides)
        else:
            F = self.face_flux.compute(mesh, fields, sides)

        F *= mesh.side_length[sides]
        fields.side_flux[:, sides] = F
        fields.side_flux[:, mesh.side_connection[sides]] = -F

    def compute(self, fields: MeshFields) -> np.ndarray:
        """
        Overwrite fields.side_flux with the length-scaled face fluxes.

        Returns:
            fields.side_flux (4, n_sides)

        Raises:
            FloatingPointError: On trapped IEEE errors or non-finite fluxes
        """
        parallel_for(partial(self._integrate_chunk, fields), len(self.mesh.faces), self.n_threads)

        if self.check_finite:
            bad = ~np.all(np.isfinite(fields.side_flux), axis=0)
            if np.any(bad):
                n_bad = np.count_nonzero(bad)
                logger.error(f"Non-finite flux on {n_bad} side(s), first at side {np.flatnonzero(bad)[0]}")
                raise FloatingPointError(f"Non-finite flux on {n_bad} side(s)")

        return fields.side_flux


def accumulate_side_fluxes(mesh: Mesh2D, fields: MeshFields) -> np.ndarray:
    """
    Sum of outgoing side fluxes per element, ghosts included.

    Returns:
        (4, n_total_elems)
    """
    total = np.zeros((fields.side_flux.shape[0], mesh.n_total_elems))
    np.add.at(total, (slice(None), mesh.side_elem), fields.side_flux)
    return total
