"""Residual bookkeeping for convergence diagnostics."""

from dataclasses import dataclass, field
from typing import List

from numba import njit

from meshing.structured_grid import E, W, N, S


@njit(cache=True, nogil=True)
def linear_system_residual(phi, a_0, links, source, nx, ny):
    """L1 norm of a_0 * phi - sum(a_nb * phi_nb) - source over all cells."""
    total = 0.0
    for j in range(ny):
        for i in range(nx):
            k = j * nx + i
            r = a_0[k] * phi[k] - source[k]
            if i < nx - 1:
                r -= links[k, E] * phi[k + 1]
            if i > 0:
                r -= links[k, W] * phi[k - 1]
            if j < ny - 1:
                r -= links[k, N] * phi[k + nx]
            if j > 0:
                r -= links[k, S] * phi[k - nx]
            total += abs(r)
    return total


@dataclass
class Residuals:
    """Append-only residual history, one entry per outer iteration and equation."""

    u: List[float] = field(default_factory=list)
    v: List[float] = field(default_factory=list)
    p: List[float] = field(default_factory=list)

    def save_u_residual(self, u, a_0, links, source_x, nx, ny):
        self.u.append(float(linear_system_residual(u, a_0, links, source_x, nx, ny)))

    def save_v_residual(self, v, a_0, links, source_y, nx, ny):
        self.v.append(float(linear_system_residual(v, a_0, links, source_y, nx, ny)))

    def save_pressure_residual(self, pc, a_p0, plinks, source_p, nx, ny):
        self.p.append(float(linear_system_residual(pc, a_p0, plinks, source_p, nx, ny)))

    def __len__(self):
        return len(self.u)
