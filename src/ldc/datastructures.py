"""Data structures for solver configuration and results.

Structure:
- Parameters: Input configuration (logged to MLflow at start)
- Metrics: Output results (logged to MLflow at end)
- Fields: Spatial solution data
- TimeSeries: Convergence history
- SimpleSolverFields: Internal SIMPLE arrays (the grid's field state)
"""

import math
from dataclasses import dataclass, asdict
from typing import Optional, List

import numpy as np
import pandas as pd


# ========================================================
# Parameters (Input Configuration)
# ========================================================


@dataclass
class Parameters:
    """Base solver parameters - input configuration."""

    Re: float = 100
    lid_velocity: float = 1.0
    nx: int = 20
    ny: int = 20
    max_iterations: int = 1000
    tolerance: float = 1e-7
    method: str = ""

    def validate(self):
        """Raise ValueError on values the solver cannot run with."""
        if self.nx < 4 or self.ny < 4:
            raise ValueError(f"nx and ny must be at least 4, got {self.nx}x{self.ny}")
        if not self.Re > 0:
            raise ValueError(f"Re must be positive, got {self.Re}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {self.tolerance}")

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])

    def to_mlflow(self) -> dict:
        """Flat dict of loggable parameters."""
        return {k: v for k, v in asdict(self).items() if v != ""}


@dataclass
class SimpleParameters(Parameters):
    """SIMPLE parameters (extends Parameters with relaxation and sweep settings).

    relax_uv and relax_p scale the correction step. momentum_relax is the
    damping inside the momentum sweeps and is deliberately independent of
    relax_uv.
    """

    rho: float = 1.0
    relax_uv: float = 0.8  # cell/face velocity correction
    relax_p: float = 0.1  # pressure correction
    momentum_sweeps: int = 4
    momentum_relax: float = 0.2  # inner Gauss-Seidel damping
    pressure_sweeps: int = 20
    convection_scheme: str = "Upwind"
    method: str = "FV-SIMPLE"

    def validate(self):
        super().validate()
        for name in ("relax_uv", "relax_p", "momentum_relax"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        for name in ("momentum_sweeps", "pressure_sweeps"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if not self.rho > 0:
            raise ValueError(f"rho must be positive, got {self.rho}")
        if self.convection_scheme not in ("Upwind", "Hybrid"):
            raise ValueError(
                f"convection_scheme must be 'Upwind' or 'Hybrid', got '{self.convection_scheme}'"
            )


# ========================================================
# Metrics (Output Results)
# ========================================================


@dataclass
class Metrics:
    """Solver metrics - output results computed during/after solving."""

    iterations: int = 0
    converged: bool = False
    diverged: bool = False
    final_residual: float = float("inf")
    wall_time_seconds: float = 0.0
    u_momentum_residual: float = 0.0
    v_momentum_residual: float = 0.0
    continuity_residual: float = 0.0

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])

    def to_mlflow(self) -> dict:
        """Numeric metrics only; non-finite values are dropped."""
        out = {}
        for k, v in asdict(self).items():
            v = float(v)
            if math.isfinite(v):
                out[k] = v
        return out


# ========================================================
# Fields (Spatial Solution Data)
# ========================================================


@dataclass
class Fields:
    """Spatial solution fields (u, v, p) on cell centres (x, y)."""

    u: np.ndarray
    v: np.ndarray
    p: np.ndarray
    x: np.ndarray
    y: np.ndarray

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to DataFrame with one row per cell."""
        return pd.DataFrame(asdict(self))


# ========================================================
# Time Series (Convergence History)
# ========================================================


@dataclass
class TimeSeries:
    """Convergence history (one value per iteration)."""

    rel_iter_residual: List[float]
    u_residual: List[float]
    v_residual: List[float]
    continuity_residual: Optional[List[float]]

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to DataFrame with one row per iteration."""
        return pd.DataFrame({k: v for k, v in asdict(self).items() if v is not None})

    def to_mlflow_batch(self, timestamp_ms: int = 0) -> list:
        """MLflow Metric entities for a batch upload, one per value and step."""
        from mlflow.entities import Metric

        batch = []
        for key, values in asdict(self).items():
            if values is None:
                continue
            for step, value in enumerate(values):
                if math.isfinite(value):
                    batch.append(Metric(key=key, value=float(value), timestamp=timestamp_ms, step=step))
        return batch


# =============================================================
# SIMPLE field state
# ============================================================


@dataclass
class SimpleSolverFields:
    """Internal SIMPLE arrays, flat over cells (index j * nx + i).

    links/plinks have columns (E, W, N, S); faces has columns
    (east face, north face).
    """

    # Solution state
    u: np.ndarray
    v: np.ndarray
    p: np.ndarray
    pc: np.ndarray

    # Momentum system
    links: np.ndarray
    a_0: np.ndarray
    source_x: np.ndarray
    source_y: np.ndarray

    # Pressure-correction system
    plinks: np.ndarray
    a_p0: np.ndarray
    source_p: np.ndarray

    # Face velocities
    faces: np.ndarray

    @classmethod
    def allocate(cls, n_cells: int):
        """Allocate all arrays zero-initialised."""
        return cls(
            u=np.zeros(n_cells),
            v=np.zeros(n_cells),
            p=np.zeros(n_cells),
            pc=np.zeros(n_cells),
            links=np.zeros((n_cells, 4)),
            a_0=np.zeros(n_cells),
            source_x=np.zeros(n_cells),
            source_y=np.zeros(n_cells),
            plinks=np.zeros((n_cells, 4)),
            a_p0=np.zeros(n_cells),
            source_p=np.zeros(n_cells),
            faces=np.zeros((n_cells, 2)),
        )
