"""Finite volume building blocks for the collocated SIMPLE solver.

Assembly kernels, sweep solvers and correction kernels operate in place on
flat cell arrays indexed as ``j * nx + i`` (see ``meshing.structured_grid``).
"""
