"""Coefficient assembly and face interpolation kernels."""

from .momentum_links import get_links_momentum
from .rhie_chow import get_face_velocities
from .pressure_correction_links import get_links_pressure_correction

__all__ = ["get_links_momentum", "get_face_velocities", "get_links_pressure_correction"]
