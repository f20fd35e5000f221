"""Pressure-correction (continuity) equation coefficients.

For an interior cell P and an interior neighbour Q across a face of area A,
the face velocity responds to the correction as

    u_f' = d_f * (pc_P - pc_Q),   d_f = A * (1/a_0P + 1/a_0Q) / 2

so the link is rho * A * d_f. Wall faces carry no correction. The source is
the mass imbalance of the current face velocities written as a net inflow,
so the system has the same form as the momentum one:

    a_p0 * pc_P = sum(a_nb * pc_nb) + source_p
"""

from numba import njit

from meshing.structured_grid import E, W, N, S, FACE_E, FACE_N


@njit(cache=True, nogil=True, error_model="numpy")
def face_conductance(a_0, k, q, area):
    """d_f for the face between cells k and q."""
    return 0.5 * area * (1.0 / a_0[k] + 1.0 / a_0[q])


@njit(cache=True, nogil=True, error_model="numpy")
def get_links_pressure_correction(faces, a_0, nx, ny, dx, dy, rho, plinks, a_p0, source_p):
    """
    Assemble pressure-correction links, central coefficients and sources in place.

    Parameters
    ----------
    faces : ndarray (n_cells, 2)
        Rhie-Chow face velocities of the current iteration.
    a_0 : ndarray (n_cells,)
        Momentum central coefficients of the current iteration.
    nx, ny : int
        Grid size.
    dx, dy : float
        Cell spacing.
    rho : float
        Density.
    plinks, a_p0, source_p : ndarray
        Output arrays, overwritten.
    """
    for j in range(ny):
        for i in range(nx):
            k = j * nx + i

            # ––– boundary ring: pc is extrapolated after the solve ––––––––
            if i == 0 or i == nx - 1 or j == 0 or j == ny - 1:
                plinks[k, E] = 0.0
                plinks[k, W] = 0.0
                plinks[k, N] = 0.0
                plinks[k, S] = 0.0
                a_p0[k] = 1.0
                source_p[k] = 0.0
                continue

            a_e = rho * dy * face_conductance(a_0, k, k + 1, dy) if i < nx - 2 else 0.0
            a_w = rho * dy * face_conductance(a_0, k, k - 1, dy) if i > 1 else 0.0
            a_n = rho * dx * face_conductance(a_0, k, k + nx, dx) if j < ny - 2 else 0.0
            a_s = rho * dx * face_conductance(a_0, k, k - nx, dx) if j > 1 else 0.0

            plinks[k, E] = a_e
            plinks[k, W] = a_w
            plinks[k, N] = a_n
            plinks[k, S] = a_s
            a_p0[k] = a_e + a_w + a_n + a_s

            outflow = (
                (faces[k, FACE_E] - faces[k - 1, FACE_E]) * dy
                + (faces[k, FACE_N] - faces[k - nx, FACE_N]) * dx
            )
            source_p[k] = -rho * outflow
