"""Lid-driven cavity solver framework.

Solver Hierarchy:
-----------------
LidDrivenCavitySolver (abstract base - outer run loop, results, export)
└── SimpleSolver (collocated finite volume with SIMPLE algorithm)
"""

from .base_solver import LidDrivenCavitySolver
from .datastructures import (
    Parameters,
    SimpleParameters,
    Metrics,
    Fields,
    TimeSeries,
    SimpleSolverFields,
)
from .simple_solver import SimpleSolver

__all__ = [
    # Base classes
    "LidDrivenCavitySolver",
    # Configurations
    "Parameters",
    "SimpleParameters",
    # Data structures
    "Metrics",
    "Fields",
    "TimeSeries",
    "SimpleSolverFields",
    # Concrete solvers
    "SimpleSolver",
]
