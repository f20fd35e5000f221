"""MLflow I/O utilities for experiment tracking."""

import logging
import os
from pathlib import Path

import mlflow
from mlflow.exceptions import MlflowException

log = logging.getLogger(__name__)


def setup_mlflow_tracking(mode: str = "local", tracking_uri: str = None) -> str:
    """Configure MLflow tracking and return the tracking URI in use.

    Parameters
    ----------
    mode : str
        "local" for a file-based ./mlruns store, "remote" to use
        ``tracking_uri`` or the MLFLOW_TRACKING_URI environment variable.
    tracking_uri : str, optional
        Explicit tracking URI for remote mode.
    """
    if mode == "local":
        os.environ.pop("MLFLOW_TRACKING_URI", None)
        mlruns_path = Path.cwd() / "mlruns"
        uri = mlruns_path.as_uri()
    elif mode == "remote":
        uri = tracking_uri or os.environ.get("MLFLOW_TRACKING_URI")
        if not uri:
            raise RuntimeError("Remote MLflow mode needs a tracking URI (set MLFLOW_TRACKING_URI)")
    else:
        uri = mlflow.get_tracking_uri()
        log.warning(f"Unknown MLflow mode '{mode}'. Using existing URI: {uri}")
        return uri

    mlflow.set_tracking_uri(uri)
    log.info(f"MLflow tracking URI: {uri}")
    return uri


def set_experiment(experiment_name: str) -> str:
    """Select (or create) an experiment, falling back to a restored name on failure."""
    try:
        mlflow.set_experiment(experiment_name)
    except MlflowException as exc:
        experiment_name = f"{experiment_name}-restored"
        log.warning(f"MLflow set_experiment failed ({exc}); using '{experiment_name}'")
        mlflow.set_experiment(experiment_name)
    return experiment_name
