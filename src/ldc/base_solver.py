"""Abstract base solver for lid-driven cavity problem."""

from abc import ABC, abstractmethod
import logging
import time
from pathlib import Path

import numpy as np
import mlflow

from .datastructures import TimeSeries, Metrics, Fields
from fv.core.helpers import aggregate_magnitude

log = logging.getLogger(__name__)


class LidDrivenCavitySolver(ABC):
    """Abstract base solver for lid-driven cavity problem.

    Handles:
    - Parameter management (input configuration)
    - Metrics tracking (output results)
    - Outer run loop with iteration cap and stopping threshold
    - MLflow live logging and HDF5 export

    Subclasses must:
    - Set Parameters class attribute (e.g., SimpleParameters)
    - Implement iterate() - one outer iteration, returning False on divergence
    - Call _init_fields(x, y) after setting up grid
    - Implement _compute_algebraic_residuals() for Ax-b residuals
    """

    Parameters = None  # Subclasses set this to their parameter dataclass

    def __init__(self, params=None, **kwargs):
        """Initialize solver with parameters.

        Parameters
        ----------
        params : Parameters, optional
            Parameters object. If not provided, kwargs are used to create params.
        **kwargs
            Configuration parameters passed to Parameters class if params is None.
        """
        if params is None:
            if self.Parameters is None:
                raise ValueError("Subclass must define Parameters class attribute")
            params = self.Parameters(**kwargs)
        elif kwargs:
            raise TypeError("Pass either a Parameters object or keyword arguments, not both")

        params.validate()
        self.params = params
        self.metrics = Metrics()
        self.fields = None  # Initialized by subclass via _init_fields()
        self.time_series = None  # Populated after solve()

    def _init_fields(self, x: np.ndarray, y: np.ndarray):
        """Pre-allocate the output Fields for every cell centre.

        Parameters
        ----------
        x : np.ndarray
            X coordinates of all cells (1D array, index order)
        y : np.ndarray
            Y coordinates of all cells (1D array, index order)
        """
        n_points = len(x)
        self.fields = Fields(
            u=np.zeros(n_points),
            v=np.zeros(n_points),
            p=np.zeros(n_points),
            x=x.copy(),
            y=y.copy(),
        )

    @abstractmethod
    def iterate(self) -> bool:
        """Perform one outer iteration.

        Returns
        -------
        bool
            True while running, False once the solution has diverged.
        """

    def _finalize_fields(self):
        """Copy final solution from internal arrays to output fields."""
        self.fields.u[:] = self.arrays.u
        self.fields.v[:] = self.arrays.v
        self.fields.p[:] = self.arrays.p

    @abstractmethod
    def _compute_algebraic_residuals(self):
        """Compute algebraic residuals (Ax - b) for the discretized equations.

        Returns
        -------
        dict
            Dictionary with keys 'u_residual', 'v_residual', 'continuity_residual'.
        """

    def _store_results(self, residual_history, final_iter_count, is_converged,
                       is_diverged, wall_time):
        """Store solve results in self.fields, self.time_series, and self.metrics."""
        rel_iter_residuals = [r["rel_iter"] for r in residual_history]
        u_residuals = [r["u_eq"] for r in residual_history]
        v_residuals = [r["v_eq"] for r in residual_history]
        continuity_residuals = [r.get("continuity", None) for r in residual_history]

        if all(c is None for c in continuity_residuals):
            continuity_residuals = None

        self._finalize_fields()

        self.time_series = TimeSeries(
            rel_iter_residual=rel_iter_residuals,
            u_residual=u_residuals,
            v_residual=v_residuals,
            continuity_residual=continuity_residuals,
        )

        self.metrics = Metrics(
            iterations=final_iter_count,
            converged=is_converged,
            diverged=is_diverged,
            final_residual=rel_iter_residuals[-1] if rel_iter_residuals else float("inf"),
            wall_time_seconds=wall_time,
            u_momentum_residual=u_residuals[-1] if u_residuals else 0.0,
            v_momentum_residual=v_residuals[-1] if v_residuals else 0.0,
            continuity_residual=continuity_residuals[-1] if continuity_residuals else 0.0,
        )

    def solve(self, tolerance: float = None, max_iter: int = None, callback=None):
        """Iterate until the relative change of sum|u| drops below tolerance.

        The change is (S_k - S_{k-1}) / S_k with S_k = sum|u| after iteration k,
        or the plain difference while S_k is zero. The loop also stops at
        max_iter and, immediately, when iterate() reports divergence.

        Stores results in solver attributes:
        - self.fields : Fields dataclass with solution fields
        - self.time_series : TimeSeries dataclass with time series data
        - self.metrics : Metrics dataclass with solver metrics

        Parameters
        ----------
        tolerance : float, optional
            Convergence tolerance. If None, uses params.tolerance.
        max_iter : int, optional
            Maximum iterations. If None, uses params.max_iterations.
        callback : callable, optional
            Called as callback(solver, iteration) after every healthy iteration.
        """
        if tolerance is None:
            tolerance = self.params.tolerance
        if max_iter is None:
            max_iter = self.params.max_iterations

        residual_history = []
        time_start = time.time()
        mlflow_time = 0.0
        final_iter_count = 0
        is_converged = False
        is_diverged = False

        var = aggregate_magnitude(self.arrays.u)

        for i in range(max_iter):
            final_iter_count = i + 1

            if not self.iterate():
                is_diverged = True
                log.error(f"Solution diverged at iteration {i} (sum|u| is NaN)")
                break

            last_var = var
            var = aggregate_magnitude(self.arrays.u)
            rel_iter_residual = abs((var - last_var) / var) if var != 0.0 else abs(var - last_var)

            eq_residuals = self._compute_algebraic_residuals()
            residual_history.append({
                "rel_iter": rel_iter_residual,
                "u_eq": eq_residuals["u_residual"],
                "v_eq": eq_residuals["v_residual"],
                "continuity": eq_residuals.get("continuity_residual", None),
            })

            if callback is not None:
                callback(self, i)

            is_converged = rel_iter_residual <= tolerance

            if i % 50 == 0 or is_converged:
                log.info(f"Iteration {i}: rel_change={rel_iter_residual:.6e}, "
                         f"continuity={eq_residuals.get('continuity_residual', float('nan')):.6e}")

                if mlflow.active_run():
                    t_log_start = time.time()
                    live_metrics = {
                        "rel_iter_residual": rel_iter_residual,
                        "u_residual": eq_residuals["u_residual"],
                        "v_residual": eq_residuals["v_residual"],
                    }
                    if "continuity_residual" in eq_residuals:
                        live_metrics["continuity_residual"] = eq_residuals["continuity_residual"]
                    mlflow.log_metrics(live_metrics, step=i)
                    mlflow_time += time.time() - t_log_start

            if is_converged:
                log.info(f"Converged at iteration {i}")
                break

        wall_time = time.time() - time_start - mlflow_time
        log.info(f"Solver finished in {wall_time:.2f} seconds (excl. {mlflow_time:.2f}s logging).")

        self._store_results(residual_history, final_iter_count, is_converged, is_diverged, wall_time)

    def save(self, filepath):
        """Save params, metrics, time_series and fields to an HDF5 file.

        Parameters
        ----------
        filepath : str or Path
            Output file path (use .h5 extension).
        """
        if self.time_series is None:
            raise RuntimeError("Nothing to save, call solve() first")

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        import pandas as pd
        with pd.HDFStore(filepath, mode="w", complevel=5) as store:
            store["params"] = self.params.to_dataframe()
            store["metrics"] = self.metrics.to_dataframe()
            store["time_series"] = self.time_series.to_dataframe()
            store["fields"] = self.fields.to_dataframe()
