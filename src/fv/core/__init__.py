"""Parameter derivation, boundary helpers, corrections and residual tracking."""

from .parameters import correct_parameters
from .residuals import Residuals, linear_system_residual

__all__ = ["correct_parameters", "Residuals", "linear_system_residual"]
