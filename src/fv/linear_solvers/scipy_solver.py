"""Sparse-matrix view of the five-point systems, used for residual reporting."""

import numpy as np
from scipy.sparse import csr_matrix

from meshing.structured_grid import E, W, N, S


def links_to_csr(a_0: np.ndarray, links: np.ndarray, nx: int, ny: int) -> csr_matrix:
    """Build A with A[k, k] = a_0[k] and A[k, nb] = -a_nb.

    Parameters
    ----------
    a_0 : np.ndarray
        Central coefficients, length nx * ny.
    links : np.ndarray
        Neighbour coefficients, shape (nx * ny, 4).
    nx, ny : int
        Grid size.

    Returns
    -------
    csr_matrix
        System matrix, shape (nx * ny, nx * ny).
    """
    n = nx * ny
    k = np.arange(n)
    i = k % nx
    j = k // nx

    rows = [k]
    cols = [k]
    data = [a_0]

    # Only neighbours that exist; out-of-grid links are dropped
    for column, has_nb, offset in (
        (E, i < nx - 1, 1),
        (W, i > 0, -1),
        (N, j < ny - 1, nx),
        (S, j > 0, -nx),
    ):
        rows.append(k[has_nb])
        cols.append(k[has_nb] + offset)
        data.append(-links[has_nb, column])

    return csr_matrix(
        (np.concatenate(data), (np.concatenate(rows), np.concatenate(cols))),
        shape=(n, n),
    )


def algebraic_residual(a_0, links, source, field, nx, ny) -> float:
    """L2 norm of A x - b for the current coefficients and field."""
    A = links_to_csr(a_0, links, nx, ny)
    return float(np.linalg.norm(A @ field - source))
