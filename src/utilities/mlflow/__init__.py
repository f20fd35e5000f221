"""MLflow utilities for experiment tracking and artifact management."""

from .io import setup_mlflow_tracking, set_experiment

__all__ = [
    "setup_mlflow_tracking",
    "set_experiment",
]
