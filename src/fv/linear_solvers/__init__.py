"""Linear solvers for FV method."""

from .gauss_seidel import solver, solver_correction
from .scipy_solver import algebraic_residual, links_to_csr

__all__ = ["solver", "solver_correction", "algebraic_residual", "links_to_csr"]
