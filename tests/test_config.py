"""Tests for environment file loading."""

import json

import pytest

from ldc import SimpleParameters
from utilities import load_environment, parameters_from_config


@pytest.fixture
def write_env(tmp_path):
    def _write(content, name="env.json"):
        path = tmp_path / name
        path.write_text(content if isinstance(content, str) else json.dumps(content))
        return path

    return _write


class TestLoadEnvironment:
    """JSON environment -> SimpleParameters."""

    def test_minimal_file(self, write_env):
        params = load_environment(write_env({"nx": 20, "ny": 30, "re": 100}))
        assert isinstance(params, SimpleParameters)
        assert (params.nx, params.ny, params.Re) == (20, 30, 100.0)
        assert params.relax_uv == 0.8
        assert params.relax_p == 0.1

    def test_optional_values(self, write_env):
        params = load_environment(write_env({
            "nx": 10, "ny": 10, "Re": 400, "u_lid": 2.0, "convection_scheme": "Hybrid",
        }))
        assert params.lid_velocity == 2.0
        assert params.convection_scheme == "Hybrid"

    def test_overrides_take_precedence(self, write_env):
        path = write_env({"nx": 20, "ny": 20, "re": 100})
        params = load_environment(path, overrides={"nx": 40, "Re": None})
        assert params.nx == 40
        assert params.Re == 100.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_environment(tmp_path / "nope.json")

    def test_malformed_json(self, write_env):
        with pytest.raises(ValueError):
            load_environment(write_env('{"nx": 20, "ny": '))

    @pytest.mark.parametrize("content", [
        {"nx": 20, "ny": 20},                       # no Reynolds number
        {"nx": 20, "ny": 20, "re": 100, "cfl": 1},  # unknown key
        {"nx": "twenty", "ny": 20, "re": 100},      # wrong type
        {"nx": 2, "ny": 20, "re": 100},             # too small
        {"nx": 20, "ny": 20, "re": 100, "Re": 50},  # duplicate
    ])
    def test_invalid_environment(self, write_env, content):
        with pytest.raises(ValueError):
            load_environment(write_env(content))

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError):
            parameters_from_config([1, 2, 3])
