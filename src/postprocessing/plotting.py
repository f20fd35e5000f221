"""Plots of cavity solutions: fields, convergence history and centreline profiles."""

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.animation import FuncAnimation, PillowWriter

from .validation import GHIA_RE100, extract_centerline_u, extract_centerline_v

log = logging.getLogger(__name__)


def _save(fig, output_path):
    if output_path is None:
        return None
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, bbox_inches="tight")
    return output_path


def plot_fields(x, y, u, v, p, output_path=None, title="Cavity Flow Pressure+velocity"):
    """Pressure colour map with the velocity field as arrows.

    Parameters
    ----------
    x, y : np.ndarray
        Cell-centre coordinates along each axis (lengths nx, ny).
    u, v, p : np.ndarray
        Flat cell fields of length nx * ny.
    output_path : str or Path, optional
        Where to save the figure. If None, figure is not saved.

    Returns
    -------
    Path or None
    """
    shape = (len(y), len(x))
    sns.set_style("white")

    fig, ax = plt.subplots(figsize=(6, 5))
    mesh = ax.pcolormesh(x, y, np.reshape(p, shape), cmap="viridis", shading="auto")
    ax.quiver(x, y, np.reshape(u, shape), np.reshape(v, shape), color="white")
    fig.colorbar(mesh, ax=ax, label="p")

    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_title(title)
    ax.set_aspect("equal")

    path = _save(fig, output_path)
    plt.close(fig)
    return path


def plot_convergence(time_series_df: pd.DataFrame, output_path=None, title="Convergence History"):
    """Residual history on a log scale, one line per column."""
    if time_series_df.empty:
        log.warning("No timeseries data available for convergence plot")
        return None

    sns.set_style("darkgrid")

    df_long = (
        time_series_df.assign(iteration=np.arange(len(time_series_df)))
        .melt(id_vars="iteration", var_name="residual_type", value_name="residual_value")
        .dropna()
    )
    df_long = df_long[df_long["residual_value"] > 0]

    fig, ax = plt.subplots()
    sns.lineplot(data=df_long, x="iteration", y="residual_value", hue="residual_type", ax=ax)
    ax.set_yscale("log")
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Residual")
    ax.set_title(title)

    path = _save(fig, output_path)
    plt.close(fig)
    return path


def plot_centerline_comparison(x, y, u, v, output_path=None, label="FV-SIMPLE"):
    """Centreline u(y) and v(x) against the Ghia et al. Re = 100 profiles."""
    sns.set_style("darkgrid")

    ys = np.linspace(0.0, 1.0, 101)
    xs = np.linspace(0.0, 1.0, 101)
    u_line = extract_centerline_u(x, y, u, ys)
    v_line = extract_centerline_v(x, y, v, xs)

    fig, (ax_u, ax_v) = plt.subplots(1, 2, figsize=(10, 4))

    ax_u.plot(u_line, ys, label=label)
    ax_u.plot(GHIA_RE100["u"]["u"], GHIA_RE100["u"]["y"], "o", mfc="none", label="Ghia et al.")
    ax_u.set_xlabel("u")
    ax_u.set_ylabel("y")
    ax_u.set_title("u at x = 0.5")
    ax_u.legend()

    ax_v.plot(xs, v_line, label=label)
    ax_v.plot(GHIA_RE100["v"]["x"], GHIA_RE100["v"]["v"], "o", mfc="none", label="Ghia et al.")
    ax_v.set_xlabel("x")
    ax_v.set_ylabel("v")
    ax_v.set_title("v at y = 0.5")
    ax_v.legend()

    path = _save(fig, output_path)
    plt.close(fig)
    return path


class FieldAnimation:
    """Collects field snapshots during a solve and renders them as a GIF.

    Pass ``capture`` as the ``callback`` of ``solve``.

    Parameters
    ----------
    every : int
        Keep one snapshot per ``every`` iterations.
    """

    def __init__(self, every: int = 25):
        if every < 1:
            raise ValueError(f"every must be >= 1, got {every}")
        self.every = every
        self.x = None
        self.y = None
        self.frames = []

    def capture(self, solver, iteration):
        if iteration % self.every:
            return
        if self.x is None:
            self.x = np.array(solver.x)
            self.y = np.array(solver.y)
        self.frames.append((iteration, solver.u.copy(), solver.v.copy(), solver.p.copy()))

    __call__ = capture

    def save(self, output_path, fps: int = 25, title="Cavity Flow Pressure+velocity"):
        """Write the collected frames with the Pillow writer."""
        if not self.frames:
            log.warning("No frames captured, animation not written")
            return None

        shape = (len(self.y), len(self.x))
        _, u0, v0, p0 = self.frames[0]

        fig, ax = plt.subplots(figsize=(6, 5))
        mesh = ax.pcolormesh(self.x, self.y, p0.reshape(shape), cmap="viridis", shading="auto")
        arrows = ax.quiver(self.x, self.y, u0.reshape(shape), v0.reshape(shape), color="white")
        ax.set_aspect("equal")

        def update(frame):
            iteration, u, v, p = frame
            p_2d = p.reshape(shape)
            mesh.set_array(p_2d)
            mesh.set_clim(p_2d.min(), p_2d.max())
            arrows.set_UVC(u.reshape(shape), v.reshape(shape))
            ax.set_title(f"{title} (iteration {iteration})")
            return mesh, arrows

        animation = FuncAnimation(fig, update, frames=self.frames, blit=False)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        animation.save(output_path, writer=PillowWriter(fps=fps))
        plt.close(fig)
        return output_path
