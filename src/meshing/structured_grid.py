"""
StructuredGrid: fixed rectangular mesh for the collocated lid-driven cavity.

Indexing Conventions:
- Every cell-based array is flat with length nx * ny.
- Cell (i, j) lives at idx(i, j) = j * nx + i, i along x and j along y.
- Reshaping a cell array to 2D gives shape (ny, nx), i.e. field_2d[j, i].

Stencil Conventions:
- Neighbour coefficient arrays (links, plinks) have shape (n_cells, 4) with
  columns E, W, N, S.
- Face velocity arrays have shape (n_cells, 2): column FACE_E is the normal
  velocity on the east face of each cell, column FACE_N on its north face.
  The west (south) face of cell k is the east (north) face of k - 1 (k - nx).

Boundary Ring:
- The outermost row/column of cells holds Dirichlet velocities. The top row
  (j = ny - 1, corners included) is the moving lid.
"""

import numpy as np

# Link columns
E, W, N, S = 0, 1, 2, 3

# Face columns
FACE_E, FACE_N = 0, 1


class StructuredGrid:
    """Uniform nx x ny grid on the unit square.

    Parameters
    ----------
    nx, ny : int
        Number of cells along x and y.
    """

    def __init__(self, nx: int, ny: int):
        if nx < 4 or ny < 4:
            raise ValueError(f"Grid needs at least 4x4 cells, got {nx}x{ny}")

        # --- Size ---
        self.nx = int(nx)
        self.ny = int(ny)
        self.n_cells = self.nx * self.ny

        # --- Spacing (dx * nx = dy * ny = 1) ---
        self.dx = 1.0 / self.nx
        self.dy = 1.0 / self.ny
        self.cell_volume = self.dx * self.dy

        # --- Cell-centre coordinates ---
        self.x = np.linspace(0.0, 1.0, self.nx)
        self.y = np.linspace(0.0, 1.0, self.ny)
        self.x.setflags(write=False)
        self.y.setflags(write=False)

        # --- Boundary tagging ---
        mask = np.zeros((self.ny, self.nx), dtype=bool)
        mask[0, :] = mask[-1, :] = mask[:, 0] = mask[:, -1] = True
        self.boundary_mask = mask.ravel()
        self.boundary_mask.setflags(write=False)

        lid = np.zeros((self.ny, self.nx), dtype=bool)
        lid[-1, :] = True
        self.lid_mask = lid.ravel()
        self.lid_mask.setflags(write=False)

    def idx(self, i: int, j: int) -> int:
        """Flat index of cell (i, j)."""
        return j * self.nx + i

    @property
    def shape(self):
        """Shape of a cell array reshaped to 2D."""
        return (self.ny, self.nx)

    def reshape(self, field: np.ndarray) -> np.ndarray:
        """View a flat cell array as (ny, nx)."""
        return field.reshape(self.shape)

    def cell_centers(self):
        """Flattened (x, y) coordinates of every cell, in index order."""
        X, Y = np.meshgrid(self.x, self.y)
        return X.ravel(), Y.ravel()

    def __repr__(self):
        return f"StructuredGrid(nx={self.nx}, ny={self.ny})"
