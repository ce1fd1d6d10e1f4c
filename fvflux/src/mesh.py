"""
Unstructured 2D mesh stored as a side/element arena.

Every physical face is represented by two directed sides, one per adjacent
element. A side knows its owning element, its mirror side ("connection"), its
outward unit normal with respect to the owning element, its length and
midpoint, and the vector from the owner's centroid to the neighbour's.

Elements 0..n_elems-1 are the interior cells. Boundary edges that are not
matched periodically receive a ghost element (the owner's centroid reflected
across the edge) so every side has a mirror; filling ghost states is left to
the boundary-condition layer.

Vectors are stored as (n, 2) arrays, flow fields as (n_vars, n) arrays.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from loguru import logger

from .state import N_VARS

# Barycentric coordinates of the degree-2 triangle rule (weights 1/3 each)
_GP_MAJOR = 2.0 / 3.0
_GP_MINOR = 1.0 / 6.0


@dataclass
class MeshFields:
    """
    Per-iteration field storage for a Mesh2D.

    side_pvar   - reconstructed primitive state per side (4, n_sides)
    side_flux   - length-scaled flux per side, global frame (4, n_sides)
    elem_pvar   - primitive state per element incl. ghosts (4, n_total)
    elem_grad_x - x-gradient of the primitive state (4, n_total)
    elem_grad_y - y-gradient of the primitive state (4, n_total)
    elem_source - integrated source per interior element (4, n_elems)
    """
    side_pvar: np.ndarray
    side_flux: np.ndarray
    elem_pvar: np.ndarray
    elem_grad_x: np.ndarray
    elem_grad_y: np.ndarray
    elem_source: np.ndarray


@dataclass
class Mesh2D:
    """
    Side/element arena of an unstructured 2D finite volume mesh.

    Derived on construction:
        n_sides, n_total_elems, side_bary_dist, faces

    `faces` holds exactly one side per physical face (the one with the lower
    index), so a loop over it writes every side accumulator exactly once.
    """
    elem_centroid: np.ndarray       # (n_total, 2), ghosts included
    elem_area: np.ndarray           # (n_total,)
    x_gp: np.ndarray                # (n_elems, n_gp, 2) quadrature points
    w_gp: np.ndarray                # (n_elems, n_gp) quadrature weights
    side_elem: np.ndarray           # (n_sides,) owning element
    side_connection: np.ndarray     # (n_sides,) mirror side
    side_normal: np.ndarray         # (n_sides, 2) outward unit normal
    side_length: np.ndarray         # (n_sides,)
    side_midpoint: np.ndarray       # (n_sides, 2)
    side_bary_vec: np.ndarray       # (n_sides, 2) owner centroid -> neighbour centroid
    n_elems: int                    # Number of interior elements
    normal_tol: float = field(default=1e-10, repr=False)

    def __post_init__(self):
        self.elem_centroid = np.asarray(self.elem_centroid, dtype=float)
        self.elem_area = np.asarray(self.elem_area, dtype=float)
        self.x_gp = np.asarray(self.x_gp, dtype=float)
        self.w_gp = np.asarray(self.w_gp, dtype=float)
        self.side_elem = np.asarray(self.side_elem, dtype=np.intp)
        self.side_connection = np.asarray(self.side_connection, dtype=np.intp)
        self.side_normal = np.asarray(self.side_normal, dtype=float)
        self.side_length = np.asarray(self.side_length, dtype=float)
        self.side_midpoint = np.asarray(self.side_midpoint, dtype=float)
        self.side_bary_vec = np.asarray(self.side_bary_vec, dtype=float)

        self.n_sides = len(self.side_elem)
        self.n_total_elems = len(self.elem_area)
        self._validate()

        self.side_bary_dist = np.linalg.norm(self.side_bary_vec, axis=1)
        if np.any(self.side_bary_dist <= 0.0):
            raise ValueError("Coincident element centroids across a side")

        self.faces = np.flatnonzero(np.arange(self.n_sides) < self.side_connection)

        logger.debug(f"Mesh2D: {self.n_elems} elements "
                     f"({self.n_total_elems - self.n_elems} ghosts), "
                     f"{self.n_sides} sides, {len(self.faces)} faces")

    def _validate(self):
        """Check array shapes and the side connectivity invariants."""
        n_sides = self.n_sides
        n_total = self.n_total_elems

        for name in ('side_connection', 'side_length'):
            if getattr(self, name).shape != (n_sides,):
                raise ValueError(f"{name} must have shape ({n_sides},)")
        for name in ('side_normal', 'side_midpoint', 'side_bary_vec'):
            if getattr(self, name).shape != (n_sides, 2):
                raise ValueError(f"{name} must have shape ({n_sides}, 2)")
        if self.elem_centroid.shape != (n_total, 2):
            raise ValueError(f"elem_centroid must have shape ({n_total}, 2)")
        if not 0 < self.n_elems <= n_total:
            raise ValueError(f"n_elems must be in 1..{n_total}, got {self.n_elems}")
        if self.x_gp.ndim != 3 or self.x_gp.shape[0] != self.n_elems or self.x_gp.shape[2] != 2:
            raise ValueError(f"x_gp must have shape ({self.n_elems}, n_gp, 2)")
        if self.w_gp.shape != self.x_gp.shape[:2]:
            raise ValueError(f"w_gp must have shape {self.x_gp.shape[:2]}")

        if np.any((self.side_elem < 0) | (self.side_elem >= n_total)):
            raise ValueError("Side owning element out of range")
        if np.any((self.side_connection < 0) | (self.side_connection >= n_sides)):
            raise ValueError("Side connection out of range")

        sides = np.arange(n_sides)
        if np.any(self.side_connection == sides):
            raise ValueError("Side connected to itself")
        if np.any(self.side_connection[self.side_connection] != sides):
            raise ValueError("Side connections are not pairwise (connection of connection != side)")

        if np.any(np.abs(np.linalg.norm(self.side_normal, axis=1) - 1.0) > self.normal_tol):
            raise ValueError("Side normals must be unit vectors")
        if np.any(self.side_length <= 0.0):
            raise ValueError("Side lengths must be positive")
        if np.any(self.elem_area <= 0.0):
            raise ValueError("Element areas must be positive")

    @property
    def side_neighbour(self) -> np.ndarray:
        """Element on the far side of every side."""
        return self.side_elem[self.side_connection]

    def create_fields(self) -> MeshFields:
        """Zero-initialised field storage matching this mesh."""
        return MeshFields(
            side_pvar=np.zeros((N_VARS, self.n_sides)),
            side_flux=np.zeros((N_VARS, self.n_sides)),
            elem_pvar=np.zeros((N_VARS, self.n_total_elems)),
            elem_grad_x=np.zeros((N_VARS, self.n_total_elems)),
            elem_grad_y=np.zeros((N_VARS, self.n_total_elems)),
            elem_source=np.zeros((N_VARS, self.n_elems)),
        )

    @classmethod
    def from_polygons(cls, points: np.ndarray, cells: Sequence[Sequence[int]],
                      periodic_shifts: Sequence[Tuple[float, float]] = (),
                      tol: float = 1e-9) -> 'Mesh2D':
        """
        Build the arena from polygonal cells.

        Args:
            points: Vertex coordinates (n_points, 2)
            cells: Vertex indices of every cell, either orientation
            periodic_shifts: Translations pairing boundary edges; an edge with
                midpoint m is linked to the edge with midpoint m + shift
            tol: Matching tolerance for periodic midpoints, relative to the
                extent of the point cloud
        """
        points = np.asarray(points, dtype=float)
        n_elems = len(cells)

        centroid = np.empty((n_elems, 2))
        area = np.empty(n_elems)
        oriented = []
        for e, cell in enumerate(cells):
            idx = np.asarray(cell, dtype=np.intp)
            x, y = points[idx, 0], points[idx, 1]
            x_next, y_next = np.roll(x, -1), np.roll(y, -1)
            cross = x * y_next - x_next * y
            signed_area = 0.5 * np.sum(cross)
            if signed_area == 0.0:
                raise ValueError(f"Degenerate cell {e}")

            # Shoelace centroid, valid for either orientation
            centroid[e, 0] = np.sum((x + x_next) * cross) / (6.0 * signed_area)
            centroid[e, 1] = np.sum((y + y_next) * cross) / (6.0 * signed_area)
            area[e] = abs(signed_area)
            oriented.append(idx if signed_area > 0.0 else idx[::-1])

        # One side per cell edge, counter-clockwise
        side_elem = np.concatenate([np.full(len(idx), e, dtype=np.intp)
                                    for e, idx in enumerate(oriented)])
        v0 = np.concatenate(oriented)
        v1 = np.concatenate([np.roll(idx, -1) for idx in oriented])

        p0 = points[v0]
        p1 = points[v1]
        d = p1 - p0
        length = np.linalg.norm(d, axis=1)
        normal = np.column_stack([d[:, 1], -d[:, 0]]) / length[:, None]
        midpoint = 0.5 * (p0 + p1)
        n_sides = len(side_elem)

        # Interior edges share their two vertices
        connection = np.full(n_sides, -1, dtype=np.intp)
        open_edges = {}
        for i in range(n_sides):
            key = (min(v0[i], v1[i]), max(v0[i], v1[i]))
            j = open_edges.pop(key, None)
            if j is None:
                open_edges[key] = i
            else:
                connection[i] = j
                connection[j] = i

        # Neighbour centroid offset across periodic sides
        offset = np.zeros((n_sides, 2))
        scale = tol * max(np.ptp(points[:, 0]), np.ptp(points[:, 1]))
        for shift in periodic_shifts:
            shift = np.asarray(shift, dtype=float)
            boundary = np.flatnonzero(connection < 0)
            if len(boundary) == 0:
                break
            for i, j in _match_points(midpoint[boundary] + shift, midpoint[boundary], scale):
                i = boundary[i]
                j = boundary[j]
                if i == j or connection[i] >= 0 or connection[j] >= 0:
                    continue
                connection[i] = j
                connection[j] = i
                offset[i] = -shift
                offset[j] = shift

        # Ghost element and ghost side for every remaining boundary edge
        boundary = np.flatnonzero(connection < 0)
        n_ghosts = len(boundary)
        if n_ghosts:
            owner = side_elem[boundary]
            nb = normal[boundary]
            dn = np.sum((centroid[owner] - midpoint[boundary]) * nb, axis=1)
            ghost_centroid = centroid[owner] - 2.0 * dn[:, None] * nb

            ghost_elem = n_elems + np.arange(n_ghosts)
            ghost_side = n_sides + np.arange(n_ghosts)
            connection[boundary] = ghost_side

            centroid = np.vstack([centroid, ghost_centroid])
            area = np.concatenate([area, area[owner]])
            side_elem = np.concatenate([side_elem, ghost_elem])
            connection = np.concatenate([connection, boundary])
            normal = np.vstack([normal, -nb])
            length = np.concatenate([length, length[boundary]])
            midpoint = np.vstack([midpoint, midpoint[boundary]])
            offset = np.vstack([offset, np.zeros((n_ghosts, 2))])

        bary_vec = centroid[side_elem[connection]] + offset - centroid[side_elem]

        x_gp, w_gp = _fan_quadrature(points, oriented, centroid[:n_elems])

        logger.debug(f"Mesh2D.from_polygons: {n_ghosts} boundary edges, "
                     f"{len(periodic_shifts)} periodic direction(s)")

        return cls(elem_centroid=centroid, elem_area=area, x_gp=x_gp, w_gp=w_gp,
                   side_elem=side_elem, side_connection=connection,
                   side_normal=normal, side_length=length, side_midpoint=midpoint,
                   side_bary_vec=bary_vec, n_elems=n_elems)

    @classmethod
    def rectangle(cls, nx: int, ny: int, lx: float = 1.0, ly: float = 1.0,
                  periodic: bool = False, triangles: bool = False,
                  x0: float = 0.0, y0: float = 0.0) -> 'Mesh2D':
        """
        Structured rectangle [x0, x0 + lx] x [y0, y0 + ly] as an unstructured mesh.

        Args:
            nx, ny: Number of cells in x and y
            lx, ly: Domain size
            periodic: Link opposite boundaries instead of adding ghosts
            triangles: Split every quad into two triangles
        """
        x = np.linspace(x0, x0 + lx, nx + 1)
        y = np.linspace(y0, y0 + ly, ny + 1)
        X, Y = np.meshgrid(x, y)
        points = np.column_stack([X.ravel(), Y.ravel()])

        def vertex(i, j):
            return j * (nx + 1) + i

        cells = []
        for j in range(ny):
            for i in range(nx):
                p00, p10 = vertex(i, j), vertex(i + 1, j)
                p01, p11 = vertex(i, j + 1), vertex(i + 1, j + 1)
                if triangles:
                    cells.append([p00, p10, p11])
                    cells.append([p00, p11, p01])
                else:
                    cells.append([p00, p10, p11, p01])

        shifts = ((lx, 0.0), (0.0, ly)) if periodic else ()
        return cls.from_polygons(points, cells, periodic_shifts=shifts)


def _match_points(targets: np.ndarray, points: np.ndarray, tol: float) -> List[Tuple[int, int]]:
    """
    Pairs (k, j) where points[j] is the point nearest to targets[k] within tol.

    Points are hashed into square buckets of size tol; a target only looks at
    its own bucket and the eight around it.
    """
    buckets = {}
    for j, key in enumerate(map(tuple, np.floor(points / tol).astype(np.int64))):
        buckets.setdefault(key, []).append(j)

    pairs = []
    for k, (bx, by) in enumerate(np.floor(targets / tol).astype(np.int64)):
        candidates = [j for dx in (-1, 0, 1) for dy in (-1, 0, 1)
                      for j in buckets.get((bx + dx, by + dy), ())]
        if not candidates:
            continue
        dist = np.linalg.norm(points[candidates] - targets[k], axis=1)
        nearest = np.argmin(dist)
        if dist[nearest] < tol:
            pairs.append((k, candidates[nearest]))
    return pairs


def _fan_quadrature(points: np.ndarray, cells, centroid: np.ndarray
                    ) -> Tuple[np.ndarray, np.ndarray]:
    """
    Quadrature points from a fan triangulation around each centroid.

    Each sub-triangle uses the three-point rule exact for quadratics, so the
    weights of a cell sum to its area. Cells with fewer edges are padded with
    zero-weight points at the centroid.
    """
    n_gp = 3 * max(len(idx) for idx in cells)
    x_gp = np.repeat(centroid[:, None, :], n_gp, axis=1)
    w_gp = np.zeros((len(cells), n_gp))

    for e, idx in enumerate(cells):
        c = centroid[e]
        a = points[idx]
        b = points[np.roll(idx, -1)]
        tri_area = 0.5 * ((a[:, 0] - c[0]) * (b[:, 1] - c[1]) - (b[:, 0] - c[0]) * (a[:, 1] - c[1]))

        gp = np.concatenate([_GP_MAJOR * c + _GP_MINOR * (a + b),
                             _GP_MAJOR * a + _GP_MINOR * (c + b),
                             _GP_MAJOR * b + _GP_MINOR * (c + a)])
        n = len(gp)
        x_gp[e, :n] = gp
        w_gp[e, :n] = np.tile(tri_area / 3.0, 3)

    return x_gp, w_gp
