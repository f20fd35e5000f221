"""Cross-project utilities (environment loading, MLflow)."""

from utilities.config import load_environment, parameters_from_config  # noqa: F401

__all__ = [
    "load_environment",
    "parameters_from_config",
]
