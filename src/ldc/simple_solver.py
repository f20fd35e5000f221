"""SIMPLE solver for the lid-driven cavity.

This module implements the collocated finite volume solver with SIMPLE
pressure-velocity coupling, Rhie-Chow face interpolation and fixed-sweep
Gauss-Seidel inner solvers.
"""

import logging

import numpy as np

from .base_solver import LidDrivenCavitySolver
from .datastructures import SimpleParameters, SimpleSolverFields

from meshing.structured_grid import StructuredGrid
from fv.assembly.momentum_links import get_links_momentum, scheme_id
from fv.assembly.rhie_chow import get_face_velocities
from fv.assembly.pressure_correction_links import get_links_pressure_correction
from fv.core.corrections import correct_cell_velocities, correct_face_velocities, correct_pressure
from fv.core.helpers import aggregate_magnitude, apply_velocity_boundary_conditions, extrapolate_to_boundary
from fv.core.parameters import correct_parameters
from fv.core.residuals import Residuals
from fv.linear_solvers.gauss_seidel import solver, solver_correction
from fv.linear_solvers.scipy_solver import algebraic_residual

log = logging.getLogger(__name__)


class SimpleSolver(LidDrivenCavitySolver):
    """Collocated SIMPLE solver for the lid-driven cavity.

    One call to ``iterate`` performs a full outer iteration: momentum
    assembly, under-relaxed momentum sweeps for u and v, Rhie-Chow face
    velocities, pressure-correction assembly and sweeps, and the correction
    step. All arrays live in ``self.arrays`` and are mutated in place.

    Parameters
    ----------
    params : SimpleParameters, optional
        Full parameter set.
    **kwargs
        Fields of SimpleParameters, e.g. ``SimpleSolver(nx=20, ny=20, Re=100)``.
    """

    Parameters = SimpleParameters

    def __init__(self, params=None, **kwargs):
        super().__init__(params, **kwargs)

        self.grid = StructuredGrid(self.params.nx, self.params.ny)
        self.rho = self.params.rho
        self.nu = correct_parameters(self.params.Re, self.params.lid_velocity)
        self._scheme = scheme_id(self.params.convection_scheme)

        self.arrays = SimpleSolverFields.allocate(self.grid.n_cells)
        apply_velocity_boundary_conditions(
            self.arrays.u, self.arrays.v, self.grid.nx, self.grid.ny, self.params.lid_velocity
        )
        self.residuals = Residuals()

        self._init_fields(*self.grid.cell_centers())

    # Read access for plotting and the run loop
    @property
    def x(self):
        return self.grid.x

    @property
    def y(self):
        return self.grid.y

    @property
    def u(self):
        return self.arrays.u

    @property
    def v(self):
        return self.arrays.v

    @property
    def p(self):
        return self.arrays.p

    @property
    def pc(self):
        return self.arrays.pc

    @property
    def faces(self):
        return self.arrays.faces

    @property
    def re(self):
        return self.params.Re

    @re.setter
    def re(self, value):
        # nu first: params stay unchanged if Re is rejected
        self.nu = correct_parameters(value, self.params.lid_velocity)
        self.params.Re = value

    def correct_parameters(self):
        """Re-derive the viscosity from the current Re."""
        self.nu = correct_parameters(self.params.Re, self.params.lid_velocity)

    def iterate(self) -> bool:
        """Perform one SIMPLE outer iteration.

        Returns
        -------
        bool
            False once sum|u| is NaN; the fields are not meaningful after that.
        """
        a = self.arrays
        g = self.grid
        prm = self.params
        nx, ny, dx, dy = g.nx, g.ny, g.dx, g.dy

        # Momentum links from the current faces and pressure
        get_links_momentum(
            a.p, a.faces, nx, ny, dx, dy, self.rho, self.nu, prm.lid_velocity, self._scheme,
            a.links, a.a_0, a.source_x, a.source_y,
        )

        # Partial momentum solves
        self.residuals.save_u_residual(a.u, a.a_0, a.links, a.source_x, nx, ny)
        solver_correction(a.u, a.a_0, a.links, a.source_x, nx, ny,
                          prm.momentum_sweeps, prm.momentum_relax)

        self.residuals.save_v_residual(a.v, a.a_0, a.links, a.source_y, nx, ny)
        solver_correction(a.v, a.a_0, a.links, a.source_y, nx, ny,
                          prm.momentum_sweeps, prm.momentum_relax)

        # Face velocities and continuity
        get_face_velocities(a.u, a.v, a.p, a.a_0, nx, ny, dx, dy, a.faces)
        get_links_pressure_correction(a.faces, a.a_0, nx, ny, dx, dy, self.rho,
                                      a.plinks, a.a_p0, a.source_p)

        # Pressure correction starts from zero every iteration
        a.pc[:] = 0.0
        self.residuals.save_pressure_residual(a.pc, a.a_p0, a.plinks, a.source_p, nx, ny)
        solver(a.pc, a.a_p0, a.plinks, a.source_p, nx, ny, prm.pressure_sweeps)
        extrapolate_to_boundary(a.pc, nx, ny)

        # Corrections, all from the same pc
        correct_cell_velocities(a.u, a.v, a.pc, a.a_0, nx, ny, dx, dy, prm.relax_uv)
        correct_face_velocities(a.faces, a.pc, a.a_0, nx, ny, dx, dy, prm.relax_uv)
        correct_pressure(a.p, a.pc, prm.relax_p)

        return not np.isnan(aggregate_magnitude(a.u))

    def mass_imbalance(self) -> float:
        """sum|source_p| from the latest pressure-correction assembly."""
        return float(np.sum(np.abs(self.arrays.source_p)))

    def _compute_algebraic_residuals(self):
        """Return algebraic residuals for the SIMPLE systems.

        - Momentum residuals: ||A u - b|| with this iteration's coefficients
        - Continuity residual: mass imbalance sum|source_p|
        """
        a = self.arrays
        nx, ny = self.grid.nx, self.grid.ny
        return {
            "u_residual": algebraic_residual(a.a_0, a.links, a.source_x, a.u, nx, ny),
            "v_residual": algebraic_residual(a.a_0, a.links, a.source_y, a.v, nx, ny),
            "continuity_residual": self.mass_imbalance(),
        }
