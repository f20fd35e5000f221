"""Tests for post-processing against benchmark data, and the Re = 100 benchmark itself."""

import numpy as np
import pytest

from ldc import SimpleSolver
from postprocessing import (
    GHIA_RE100,
    GHIA_RE100_VORTEX_CENTER,
    compute_ghia_errors,
    compute_streamfunction,
    extract_centerline_u,
    extract_centerline_v,
    find_vortex_center,
)


def synthetic_vortex(n=41):
    """psi = -sin(pi x) sin(pi y), centred at (0.5, 0.5)."""
    x = np.linspace(0, 1, n)
    y = np.linspace(0, 1, n)
    X, Y = np.meshgrid(x, y)
    u = -np.pi * np.sin(np.pi * X) * np.cos(np.pi * Y)
    v = np.pi * np.cos(np.pi * X) * np.sin(np.pi * Y)
    return x, y, u.ravel(), v.ravel()


class TestPostprocessing:
    """Centrelines, stream function and vortex location on known fields."""

    def test_ghia_tables(self):
        assert len(GHIA_RE100["u"]) == 17
        assert len(GHIA_RE100["v"]) == 17
        assert GHIA_RE100["u"]["u"].iloc[-1] == 1.0

    def test_centerlines_of_linear_fields(self):
        x = np.linspace(0, 1, 11)
        y = np.linspace(0, 1, 11)
        X, Y = np.meshgrid(x, y)
        ys = np.array([0.1, 0.35, 0.9])
        assert np.allclose(extract_centerline_u(x, y, Y.ravel(), ys), ys)
        assert np.allclose(extract_centerline_v(x, y, X.ravel(), ys), ys)

    def test_streamfunction_of_uniform_flow(self):
        x = np.linspace(0, 1, 6)
        y = np.linspace(0, 1, 5)
        psi = compute_streamfunction(x, y, np.ones(30))
        assert psi.shape == (5, 6)
        assert np.allclose(psi, np.repeat(y[:, None], 6, axis=1))

    def test_vortex_center(self):
        x, y, u, _ = synthetic_vortex()
        xc, yc, psi_min = find_vortex_center(x, y, u)
        assert xc == pytest.approx(0.5, abs=0.02)
        assert yc == pytest.approx(0.5, abs=0.02)
        assert psi_min == pytest.approx(-1.0, abs=0.02)

    def test_ghia_errors_of_fluid_at_rest(self):
        x = np.linspace(0, 1, 10)
        zeros = np.zeros(100)
        errors = compute_ghia_errors(x, x, zeros, zeros)
        assert errors["u_max"] == pytest.approx(1.0)
        assert errors["v_max"] == pytest.approx(0.24533)
        assert errors["u_rms"] <= errors["u_max"]


@pytest.fixture(scope="module")
def solved():
    """Converged 20x20 Re = 100 run, shared by the benchmark tests."""
    solver = SimpleSolver(Re=100, nx=20, ny=20, max_iterations=2000, tolerance=1e-7)
    solver.solve()
    return solver


class TestCavityBenchmark:
    """20x20 cavity at Re = 100."""

    @pytest.mark.slow
    def test_converges(self, solved):
        assert solved.metrics.converged
        assert not solved.metrics.diverged
        assert np.all(np.isfinite(solved.fields.u))

    @pytest.mark.slow
    def test_mass_conservation(self, solved):
        assert solved.mass_imbalance() < 1e-5

    @pytest.mark.slow
    def test_primary_vortex_location(self, solved):
        xc, yc, psi_min = find_vortex_center(solved.x, solved.y, solved.fields.u)
        x_ref, y_ref = GHIA_RE100_VORTEX_CENTER
        assert psi_min < 0
        assert xc == pytest.approx(x_ref, abs=0.05)
        assert yc == pytest.approx(y_ref, abs=0.05)

    @pytest.mark.slow
    def test_centerline_profiles(self, solved):
        errors = compute_ghia_errors(solved.x, solved.y, solved.fields.u, solved.fields.v)
        assert errors["u_rms"] < 0.1
        assert errors["v_rms"] < 0.1
