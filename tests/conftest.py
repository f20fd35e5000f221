"""Pytest configuration and fixtures for the cavity solver tests."""

import sys
from pathlib import Path

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def small_grid():
    """6x6 grid: a 4x4 interior, so some interior cells have no ring neighbour."""
    from meshing import StructuredGrid

    return StructuredGrid(6, 6)


@pytest.fixture
def small_grid_params():
    """Parameters for a small 8x8 cavity."""
    return {
        "Re": 100,
        "nx": 8,
        "ny": 8,
        "tolerance": 1e-7,
        "max_iterations": 200,
        "lid_velocity": 1.0,
    }


@pytest.fixture
def medium_grid_params():
    """Parameters for the 20x20 Re = 100 benchmark setup."""
    return {
        "Re": 100,
        "nx": 20,
        "ny": 20,
        "tolerance": 1e-7,
        "max_iterations": 2000,
        "lid_velocity": 1.0,
    }


@pytest.fixture
def rng():
    return np.random.default_rng(2689)
