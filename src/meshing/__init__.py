"""Structured mesh for the lid-driven cavity."""

from .structured_grid import StructuredGrid, E, W, N, S, FACE_E, FACE_N

__all__ = ["StructuredGrid", "E", "W", "N", "S", "FACE_E", "FACE_N"]
