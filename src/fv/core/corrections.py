"""SIMPLE correction step.

All three kernels read the same (already extrapolated) pressure correction
``pc`` and each writes a single field group, so their order among themselves
does not matter. Cell and face velocities are corrected on the interior only;
the Dirichlet ring is never touched.
"""

from numba import njit

from meshing.structured_grid import FACE_E, FACE_N
from fv.assembly.pressure_correction_links import face_conductance


@njit(cache=True, nogil=True, error_model="numpy")
def correct_cell_velocities(u, v, pc, a_0, nx, ny, dx, dy, relax_uv):
    """u -= relax_uv * dV * d(pc)/dx / a_0, likewise for v."""
    for j in range(1, ny - 1):
        for i in range(1, nx - 1):
            k = j * nx + i
            u[k] -= relax_uv * 0.5 * (pc[k + 1] - pc[k - 1]) * dy / a_0[k]
            v[k] -= relax_uv * 0.5 * (pc[k + nx] - pc[k - nx]) * dx / a_0[k]


@njit(cache=True, nogil=True, error_model="numpy")
def correct_face_velocities(faces, pc, a_0, nx, ny, dx, dy, relax_uv):
    """Face-local correction u_f += relax_uv * d_f * (pc_P - pc_Q) on interior faces."""
    for j in range(1, ny - 1):
        for i in range(1, nx - 1):
            k = j * nx + i
            if i < nx - 2:
                d_e = face_conductance(a_0, k, k + 1, dy)
                faces[k, FACE_E] += relax_uv * d_e * (pc[k] - pc[k + 1])
            if j < ny - 2:
                d_n = face_conductance(a_0, k, k + nx, dx)
                faces[k, FACE_N] += relax_uv * d_n * (pc[k] - pc[k + nx])


@njit(cache=True, nogil=True)
def correct_pressure(p, pc, relax_p):
    """p += relax_p * pc on every cell.

    pc is a zero-gradient copy on the boundary ring, so p stays one too.
    """
    for k in range(p.shape[0]):
        p[k] += relax_p * pc[k]
