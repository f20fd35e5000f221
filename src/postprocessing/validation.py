"""Comparison with Ghia, Ghia & Shin (1982) lid-driven cavity data."""

import numpy as np
import pandas as pd
from scipy.integrate import cumulative_trapezoid
from scipy.interpolate import RectBivariateSpline

# Re = 100 centreline profiles: u(y) at x = 0.5 and v(x) at y = 0.5
GHIA_RE100 = {
    "u": pd.DataFrame({
        "y": [0.0, 0.0547, 0.0625, 0.0703, 0.1016, 0.1719, 0.2813, 0.4531, 0.5,
              0.6172, 0.7344, 0.8516, 0.9531, 0.9609, 0.9688, 0.9766, 1.0],
        "u": [0.0, -0.03717, -0.04192, -0.04775, -0.06434, -0.10150, -0.15662, -0.21090,
              -0.20581, -0.13641, 0.00332, 0.23151, 0.68717, 0.73722, 0.78871, 0.84123, 1.0],
    }),
    "v": pd.DataFrame({
        "x": [0.0, 0.0625, 0.0703, 0.0781, 0.0938, 0.1563, 0.2266, 0.2344, 0.5,
              0.8047, 0.8594, 0.9063, 0.9453, 0.9531, 0.9609, 0.9688, 1.0],
        "v": [0.0, 0.09233, 0.10091, 0.10890, 0.12317, 0.16077, 0.17507, 0.17527, 0.05454,
              -0.24533, -0.22445, -0.16914, -0.10313, -0.08864, -0.07391, -0.05906, 0.0],
    }),
}

# Primary vortex centre (x, y) for Re = 100
GHIA_RE100_VORTEX_CENTER = (0.6172, 0.7344)


def _spline(x, y, phi):
    """Bicubic spline of a flat cell field with phi_2d[j, i] layout."""
    phi_2d = np.asarray(phi).reshape(len(y), len(x))
    return RectBivariateSpline(x, y, phi_2d.T)


def extract_centerline_u(x, y, u, y_points=None, x_line=0.5):
    """u along the vertical line x = x_line."""
    y_points = np.asarray(y if y_points is None else y_points, dtype=float)
    return _spline(x, y, u)(np.full_like(y_points, x_line), y_points, grid=False)


def extract_centerline_v(x, y, v, x_points=None, y_line=0.5):
    """v along the horizontal line y = y_line."""
    x_points = np.asarray(x if x_points is None else x_points, dtype=float)
    return _spline(x, y, v)(x_points, np.full_like(x_points, y_line), grid=False)


def compute_streamfunction(x, y, u):
    """Stream function psi(x, y) = integral of u dy from the bottom wall.

    Returns
    -------
    np.ndarray
        psi with shape (ny, nx).
    """
    u_2d = np.asarray(u).reshape(len(y), len(x))
    return cumulative_trapezoid(u_2d, y, axis=0, initial=0.0)


def find_vortex_center(x, y, u, resolution=201):
    """Locate the primary vortex as the minimum of the stream function.

    The stream function is splined and sampled on a uniform
    ``resolution x resolution`` lattice strictly inside the cavity.

    Returns
    -------
    (float, float, float)
        x and y of the centre and psi there.
    """
    psi = compute_streamfunction(x, y, u)
    spline = RectBivariateSpline(x, y, psi.T)

    xs = np.linspace(x[1], x[-2], resolution)
    ys = np.linspace(y[1], y[-2], resolution)
    psi_fine = spline(xs, ys)  # shape (len(xs), len(ys))

    i, j = np.unravel_index(np.argmin(psi_fine), psi_fine.shape)
    return float(xs[i]), float(ys[j]), float(psi_fine[i, j])


def compute_ghia_errors(x, y, u, v):
    """Max and RMS deviation from the Re = 100 centreline profiles."""
    ghia_u = GHIA_RE100["u"]
    ghia_v = GHIA_RE100["v"]

    u_line = extract_centerline_u(x, y, u, ghia_u["y"].values)
    v_line = extract_centerline_v(x, y, v, ghia_v["x"].values)

    du = u_line - ghia_u["u"].values
    dv = v_line - ghia_v["v"].values

    return {
        "u_max": float(np.max(np.abs(du))),
        "u_rms": float(np.sqrt(np.mean(du**2))),
        "v_max": float(np.max(np.abs(dv))),
        "v_rms": float(np.sqrt(np.mean(dv**2))),
    }
