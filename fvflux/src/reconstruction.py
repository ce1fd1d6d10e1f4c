"""
Side-state reconstruction from element states.

These are the simplest producers of MeshFields.side_pvar; limited schemes
belong to the caller.
"""

import numpy as np

from .mesh import Mesh2D, MeshFields


def reconstruct_first_order(mesh: Mesh2D, fields: MeshFields) -> np.ndarray:
    """
    First-order reconstruction (piecewise constant) - most stable.

    Every side takes the primitive state of its owning element.

    Returns:
        side_pvar (4, n_sides), written in place
    """
    fields.side_pvar[:] = fields.elem_pvar[:, mesh.side_elem]
    return fields.side_pvar


def reconstruct_linear(mesh: Mesh2D, fields: MeshFields) -> np.ndarray:
    """
    Unlimited linear reconstruction to the side midpoints.

    Uses the element gradients in fields.elem_grad_x / elem_grad_y. Exact for
    linear fields, but not monotone near discontinuities.

    Returns:
        side_pvar (4, n_sides), written in place
    """
    e = mesh.side_elem
    d = mesh.side_midpoint - mesh.elem_centroid[e]
    fields.side_pvar[:] = (fields.elem_pvar[:, e]
                           + fields.elem_grad_x[:, e] * d[:, 0]
                           + fields.elem_grad_y[:, e] * d[:, 1])
    return fields.side_pvar
