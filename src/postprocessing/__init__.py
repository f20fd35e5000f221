"""Validation against benchmark data and plotting of cavity solutions."""

from .validation import (
    GHIA_RE100,
    GHIA_RE100_VORTEX_CENTER,
    extract_centerline_u,
    extract_centerline_v,
    compute_streamfunction,
    find_vortex_center,
    compute_ghia_errors,
)
from .plotting import (
    plot_fields,
    plot_convergence,
    plot_centerline_comparison,
    FieldAnimation,
)

__all__ = [
    "GHIA_RE100",
    "GHIA_RE100_VORTEX_CENTER",
    "extract_centerline_u",
    "extract_centerline_v",
    "compute_streamfunction",
    "find_vortex_center",
    "compute_ghia_errors",
    "plot_fields",
    "plot_convergence",
    "plot_centerline_comparison",
    "FieldAnimation",
]
