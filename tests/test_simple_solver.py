"""Tests for the SIMPLE solver: outer iteration, run loop, results and export."""

import numpy as np
import pandas as pd
import pytest

from ldc import SimpleParameters, SimpleSolver


def run_iterations(solver, n):
    for _ in range(n):
        assert solver.iterate()
    return solver


# ============================================================================
# Construction
# ============================================================================

class TestConstruction:
    """Parameters, viscosity and initial state."""

    def test_kwargs_and_params_object(self, small_grid_params):
        a = SimpleSolver(**small_grid_params)
        b = SimpleSolver(SimpleParameters(**small_grid_params))
        assert a.params == b.params
        assert a.nu == pytest.approx(0.01)

    def test_params_and_kwargs_together_rejected(self, small_grid_params):
        with pytest.raises(TypeError):
            SimpleSolver(SimpleParameters(**small_grid_params), nx=10)

    @pytest.mark.parametrize("bad", [{"nx": 3}, {"Re": -1}, {"relax_p": 0.0}, {"convection_scheme": "QUICK"}])
    def test_invalid_parameters_rejected(self, small_grid_params, bad):
        with pytest.raises(ValueError):
            SimpleSolver(**{**small_grid_params, **bad})

    def test_boundary_conditions_applied_at_construction(self, small_grid_params):
        solver = SimpleSolver(**{**small_grid_params, "lid_velocity": 2.0})
        g = solver.grid
        assert np.all(solver.u[g.lid_mask] == 2.0)
        assert np.all(solver.u[~g.lid_mask] == 0.0)
        assert np.all(solver.v == 0.0)
        assert np.all(solver.p == 0.0)

    def test_reynolds_setter_updates_viscosity(self, small_grid_params):
        solver = SimpleSolver(**small_grid_params)
        solver.re = 400
        assert solver.params.Re == 400
        assert solver.nu == pytest.approx(1 / 400)

    @pytest.mark.parametrize("bad_re", [-5, 0])
    def test_rejected_reynolds_leaves_state_unchanged(self, small_grid_params, bad_re):
        solver = SimpleSolver(**small_grid_params)
        with pytest.raises(ValueError):
            solver.re = bad_re
        assert solver.params.Re == 100
        assert solver.nu == pytest.approx(0.01)

    def test_correct_parameters_follows_reynolds(self, small_grid_params):
        solver = SimpleSolver(**small_grid_params)
        solver.params.Re = 250
        solver.correct_parameters()
        assert solver.nu == pytest.approx(1 / 250)


# ============================================================================
# Outer iteration
# ============================================================================

class TestIterate:
    """One SIMPLE iteration at a time."""

    def test_boundary_values_never_change(self, small_grid_params):
        solver = run_iterations(SimpleSolver(**small_grid_params), 25)
        g = solver.grid
        assert np.all(solver.u[g.lid_mask] == 1.0)
        assert np.all(solver.u[g.boundary_mask & ~g.lid_mask] == 0.0)
        assert np.all(solver.v[g.boundary_mask] == 0.0)

    def test_central_coefficients_positive(self, small_grid_params):
        solver = run_iterations(SimpleSolver(**small_grid_params), 10)
        assert np.all(solver.arrays.a_0 > 0)

    def test_pressure_has_zero_normal_gradient(self, small_grid_params):
        solver = run_iterations(SimpleSolver(**small_grid_params), 10)
        p2 = solver.grid.reshape(solver.p)
        assert np.array_equal(p2[0, 1:-1], p2[1, 1:-1])
        assert np.array_equal(p2[1:-1, -1], p2[1:-1, -2])

    def test_deterministic(self, small_grid_params):
        a = run_iterations(SimpleSolver(**small_grid_params), 20)
        b = run_iterations(SimpleSolver(**small_grid_params), 20)
        assert np.array_equal(a.u, b.u)
        assert np.array_equal(a.v, b.v)
        assert np.array_equal(a.p, b.p)

    def test_residual_history_one_entry_per_iteration(self, small_grid_params):
        solver = run_iterations(SimpleSolver(**small_grid_params), 7)
        assert len(solver.residuals) == 7
        assert len(solver.residuals.v) == 7
        assert len(solver.residuals.p) == 7

    def test_pressure_residual_is_mass_imbalance(self, small_grid_params):
        solver = run_iterations(SimpleSolver(**small_grid_params), 5)
        assert solver.residuals.p[-1] == pytest.approx(solver.mass_imbalance(), rel=1e-12)

    def test_residuals_decay(self, medium_grid_params):
        solver = run_iterations(SimpleSolver(**medium_grid_params), 100)
        u_res = np.array(solver.residuals.u)
        assert np.all(np.isfinite(u_res))
        assert u_res[-10:].mean() < u_res[:10].mean()

    @pytest.mark.parametrize("scheme", ["Upwind", "Hybrid"])
    def test_schemes_stay_finite(self, small_grid_params, scheme):
        solver = SimpleSolver(**small_grid_params, convection_scheme=scheme)
        run_iterations(solver, 20)
        assert np.all(np.isfinite(solver.u))

    def test_inviscid_limit_diverges(self, small_grid_params):
        solver = SimpleSolver(**{**small_grid_params, "Re": float("inf")})
        assert solver.nu == 0.0
        assert solver.iterate() is False


# ============================================================================
# Run loop and results
# ============================================================================

class TestSolve:
    """solve(): stopping, results and export."""

    def test_iteration_cap(self, small_grid_params):
        solver = SimpleSolver(**small_grid_params)
        solver.solve(tolerance=0.0, max_iter=30)
        assert solver.metrics.iterations == 30
        assert not solver.metrics.converged
        assert len(solver.time_series.rel_iter_residual) == 30
        assert np.array_equal(solver.fields.u, solver.u)

    def test_loose_tolerance_stops_immediately(self, small_grid_params):
        solver = SimpleSolver(**small_grid_params)
        solver.solve(tolerance=10.0)
        assert solver.metrics.converged
        assert solver.metrics.iterations == 1

    def test_divergence_stops_run(self, small_grid_params):
        solver = SimpleSolver(**{**small_grid_params, "Re": float("inf")})
        solver.solve(max_iter=50)
        assert solver.metrics.diverged
        assert not solver.metrics.converged
        assert solver.metrics.iterations == 1
        assert solver.time_series.rel_iter_residual == []

    def test_callback_sees_every_iteration(self, small_grid_params):
        seen = []
        solver = SimpleSolver(**small_grid_params)
        solver.solve(tolerance=0.0, max_iter=12, callback=lambda s, i: seen.append(i))
        assert seen == list(range(12))

    def test_metrics_for_mlflow_are_finite(self, small_grid_params):
        solver = SimpleSolver(**small_grid_params)
        solver.solve(max_iter=10)
        metrics = solver.metrics.to_mlflow()
        assert metrics["iterations"] == 10.0
        assert all(np.isfinite(v) for v in metrics.values())
        assert len(solver.time_series.to_mlflow_batch()) == 4 * 10

    def test_save_before_solve_rejected(self, small_grid_params, tmp_path):
        with pytest.raises(RuntimeError):
            SimpleSolver(**small_grid_params).save(tmp_path / "run.h5")

    def test_save_hdf5(self, small_grid_params, tmp_path):
        solver = SimpleSolver(**small_grid_params)
        solver.solve(max_iter=15)
        path = tmp_path / "out" / "run.h5"
        solver.save(path)

        params = pd.read_hdf(path, "params")
        fields = pd.read_hdf(path, "fields")
        series = pd.read_hdf(path, "time_series")
        assert params["nx"].iloc[0] == small_grid_params["nx"]
        assert len(fields) == solver.grid.n_cells
        assert np.array_equal(fields["u"].values, solver.u)
        assert len(series) == 15
