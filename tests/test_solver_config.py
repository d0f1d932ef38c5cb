"""
Tests for the YAML configuration layer (solver_config).

Covers:
- Defaults when no file exists
- Merging a partial file over the defaults
- Malformed files
- Environment variable override and the cached singleton
"""

import pytest

from common.constants import CONFIG_PATH_ENV_VAR, DEFAULT_CONSOLE_LOG_LEVEL
from solver_config import DEFAULTS, SolverConfig, get_config, reset_config
from solver_exceptions import InvalidConfigError


@pytest.fixture
def config_file(tmp_path):
    """Fixture: partial config overriding two keys"""
    path = tmp_path / "solver.yaml"
    path.write_text(
        "logging:\n  console_level: DEBUG\nsolver:\n  trace: true\n",
        encoding="utf-8",
    )
    return path


class TestSolverConfig:
    """Tests for SolverConfig"""

    def test_defaults_when_missing(self, tmp_path):
        cfg = SolverConfig.load(tmp_path / "nope.yaml")
        assert cfg.source is None
        assert cfg.get("logging.console_level") == DEFAULT_CONSOLE_LOG_LEVEL
        assert cfg.get("solver.trace") is False

    def test_partial_file_merges(self, config_file):
        cfg = SolverConfig.load(config_file)
        assert cfg.source == config_file
        assert cfg.get("logging.console_level") == "DEBUG"
        assert cfg.get("solver.trace") is True
        assert cfg.get("logging.file_level") == DEFAULTS["logging"]["file_level"]
        assert cfg.get("solver.show_statistics") is False

    def test_get_default_for_unknown_keys(self):
        cfg = SolverConfig()
        assert cfg.get("solver.unknown", 42) == 42
        assert cfg.get("solver.trace.deeper") is None

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert SolverConfig.load(path).as_dict() == DEFAULTS

    def test_as_dict_is_a_copy(self):
        cfg = SolverConfig()
        data = cfg.as_dict()
        data["solver"]["trace"] = True
        assert cfg.get("solver.trace") is False
        assert DEFAULTS["solver"]["trace"] is False

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("logging: [unclosed\n", encoding="utf-8")
        with pytest.raises(InvalidConfigError) as exc_info:
            SolverConfig.load(path)
        assert exc_info.value.context["config_path"] == str(path)
        assert exc_info.value.original_exception is not None

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(InvalidConfigError):
            SolverConfig.load(path)


class TestGetConfig:
    """Tests for the process-wide singleton"""

    def test_env_var_selects_file(self, config_file, monkeypatch):
        monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(config_file))
        reset_config()
        assert get_config().get("solver.trace") is True

    def test_cached_until_reset(self, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(tmp_path / "missing.yaml"))
        first = get_config()
        assert get_config() is first
        reset_config()
        assert get_config() is not first

    def test_explicit_path_reloads(self, config_file, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(tmp_path / "missing.yaml"))
        assert get_config().get("solver.trace") is False
        assert get_config(config_file).get("solver.trace") is True
