"""Environment (JSON) loading for the cavity solver.

The environment file describes the physical and grid setup, e.g.::

    {"nx": 20, "ny": 20, "re": 100}

JSON is a subset of YAML, so OmegaConf reads it directly. Values are merged
onto the structured ``SimpleParameters`` schema, which rejects unknown keys
and wrong types before any solver state exists.
"""

import logging
from dataclasses import fields
from pathlib import Path

import yaml
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from ldc.datastructures import SimpleParameters

log = logging.getLogger(__name__)

# Accepted spellings in environment files
ALIASES = {
    "re": "Re",
    "reynolds": "Re",
    "u_lid": "lid_velocity",
    "alpha_uv": "relax_uv",
    "alpha_p": "relax_p",
}


def _normalise_keys(cfg: dict) -> dict:
    out = {}
    for key, value in cfg.items():
        name = ALIASES.get(str(key).lower(), key)
        if name in out:
            raise ValueError(f"Parameter '{name}' given more than once")
        out[name] = value
    return out


def parameters_from_config(cfg, overrides=None) -> SimpleParameters:
    """Build validated SimpleParameters from a mapping or DictConfig.

    Parameters
    ----------
    cfg : dict or DictConfig
        Environment values.
    overrides : dict, optional
        Values taking precedence over ``cfg`` (None entries are ignored).

    Returns
    -------
    SimpleParameters
    """
    if isinstance(cfg, DictConfig):
        cfg = OmegaConf.to_container(cfg, resolve=True)
    if not isinstance(cfg, dict):
        raise ValueError(f"Environment must be a mapping, got {type(cfg).__name__}")

    values = _normalise_keys(cfg)
    if overrides:
        values.update({k: v for k, v in _normalise_keys(overrides).items() if v is not None})

    for required in ("nx", "ny", "Re"):
        if required not in values:
            raise ValueError(f"Environment is missing required parameter '{required}'")

    schema = OmegaConf.structured(SimpleParameters)
    try:
        merged = OmegaConf.merge(schema, values)
    except OmegaConfBaseException as e:
        raise ValueError(f"Invalid environment: {e}") from e

    params = SimpleParameters(**{f.name: merged[f.name] for f in fields(SimpleParameters)})
    params.validate()
    return params


def load_environment(path, overrides=None) -> SimpleParameters:
    """Read a JSON environment file into SimpleParameters.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file is malformed or describes an invalid setup.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Environment file not found: {path}")

    try:
        cfg = OmegaConf.load(path)
    except yaml.YAMLError as e:
        raise ValueError(f"Environment file {path} is not valid JSON: {e}") from e

    params = parameters_from_config(cfg, overrides)
    log.info(f"Loaded environment {path.name}: Re={params.Re}, grid={params.nx}x{params.ny}")
    return params
