"""Fixed-sweep Gauss-Seidel solvers for the five-point stencil.

Both solvers sweep the grid lexicographically (i fastest), updating the field
in place so later cells in a sweep already see the new values of earlier
ones. The sweep count is fixed; there is no convergence test. Neighbours
outside the grid are never read, so boundary cells only need zero links
toward them.
"""

from numba import njit

from meshing.structured_grid import E, W, N, S


@njit(inline="always", cache=True, nogil=True)
def _neighbour_sum(field, links, k, i, j, nx, ny):
    acc = 0.0
    if i < nx - 1:
        acc += links[k, E] * field[k + 1]
    if i > 0:
        acc += links[k, W] * field[k - 1]
    if j < ny - 1:
        acc += links[k, N] * field[k + nx]
    if j > 0:
        acc += links[k, S] * field[k - nx]
    return acc


@njit(cache=True, nogil=True, error_model="numpy")
def solver_correction(field, a_0, links, source, nx, ny, sweep_count, relax_factor):
    """
    Under-relaxed Gauss-Seidel sweeps for the momentum equations.

    field <- field + relax_factor * ((sum(a_nb * field_nb) + source) / a_0 - field)

    Parameters
    ----------
    field : ndarray (n_cells,)
        Unknown, updated in place.
    a_0 : ndarray (n_cells,)
        Central coefficients. Must be non-zero; a zero entry produces NaN/inf.
    links : ndarray (n_cells, 4)
        Neighbour coefficients (E, W, N, S).
    source : ndarray (n_cells,)
        Right-hand side.
    nx, ny : int
        Grid size.
    sweep_count : int
        Number of sweeps.
    relax_factor : float
        Under-relaxation factor.
    """
    for _ in range(sweep_count):
        for j in range(ny):
            for i in range(nx):
                k = j * nx + i
                acc = _neighbour_sum(field, links, k, i, j, nx, ny) + source[k]
                field[k] = field[k] + relax_factor * (acc / a_0[k] - field[k])


@njit(cache=True, nogil=True, error_model="numpy")
def solver(field, a_0, links, source, nx, ny, sweep_count):
    """
    Plain Gauss-Seidel sweeps for the pressure-correction equation.

    Same sweep as ``solver_correction`` with an implicit relaxation of 1.

    Parameters
    ----------
    field : ndarray (n_cells,)
        Unknown, updated in place. Callers zero it before each outer iteration.
    a_0 : ndarray (n_cells,)
        Central coefficients.
    links : ndarray (n_cells, 4)
        Neighbour coefficients (E, W, N, S).
    source : ndarray (n_cells,)
        Right-hand side.
    nx, ny : int
        Grid size.
    sweep_count : int
        Number of sweeps.
    """
    for _ in range(sweep_count):
        for j in range(ny):
            for i in range(nx):
                k = j * nx + i
                acc = _neighbour_sum(field, links, k, i, j, nx, ny) + source[k]
                field[k] = acc / a_0[k]
