"""Unit tests for craftmapper config module.

Tests YAML configuration loading, environment variable overrides,
validation and accessors.
"""

import logging
from pathlib import Path

import pytest
import yaml

from craftmapper.combine_client import DEFAULT_API_URL
from craftmapper.config import (
    DEFAULT_CONFIG,
    ConfigurationError,
    _deep_merge,
    _resolve_path,
    get_api_config,
    get_exploration_config,
    get_log_level,
    get_store_path,
    load_config,
)


class TestDeepMerge:
    """Tests for _deep_merge helper function."""

    def test_merge_nested_dicts(self):
        base = {"outer": {"a": 1, "b": 2}}
        override = {"outer": {"b": 3}}

        assert _deep_merge(base, override) == {"outer": {"a": 1, "b": 3}}

    def test_merge_does_not_modify_base(self):
        base = {"a": 1}
        original_base = base.copy()

        _deep_merge(base, {"b": 2})

        assert base == original_base


class TestResolvePath:
    """Tests for _resolve_path helper function."""

    def test_resolve_none_returns_none(self, tmp_path: Path):
        assert _resolve_path(None, tmp_path) is None

    def test_resolve_absolute_path(self, tmp_path: Path):
        absolute = tmp_path / "abs.db"
        assert _resolve_path(str(absolute), Path("/elsewhere")) == absolute

    def test_resolve_relative_path(self, tmp_path: Path):
        assert _resolve_path("data/items.db", tmp_path) == (tmp_path / "data/items.db").resolve()


class TestDefaults:
    """Tests for defaults when no config file exists."""

    def test_default_sections(self):
        for section in ("store", "api", "exploration", "logging"):
            assert section in DEFAULT_CONFIG

    def test_load_without_file(self, tmp_path: Path):
        config = load_config(base_dir=tmp_path)

        assert config["api"]["url"] == DEFAULT_API_URL
        assert config["exploration"]["max_successes"] == 500000
        assert config["exploration"]["max_attempts"] == 2500000
        assert config["exploration"]["pacing_ms"] == 50
        assert config["api"]["max_rate_limit_retries"] is None

    def test_default_store_path_resolves_to_base_dir(self, tmp_path: Path):
        config = load_config(base_dir=tmp_path)
        assert get_store_path(config) == (tmp_path / "items.db").resolve()

    def test_load_does_not_mutate_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CRAFTMAPPER_DB_PATH", str(tmp_path / "other.db"))

        load_config(base_dir=tmp_path)

        assert DEFAULT_CONFIG["store"]["path"] == "items.db"


class TestConfigFile:
    """Tests for YAML config files."""

    def test_explicit_file(self, tmp_path: Path):
        config_file = tmp_path / "conf" / "mapper.yaml"
        config_file.parent.mkdir()
        config_file.write_text(
            yaml.safe_dump(
                {
                    "store": {"path": "crafts.db"},
                    "exploration": {"max_successes": 10},
                }
            )
        )

        config = load_config(config_path=config_file)

        # Relative store paths resolve against the config file's directory
        assert get_store_path(config) == (config_file.parent / "crafts.db").resolve()
        assert config["exploration"]["max_successes"] == 10
        assert config["exploration"]["max_attempts"] == 2500000

    def test_env_config_path(self, tmp_path: Path, monkeypatch):
        config_file = tmp_path / "env.yaml"
        config_file.write_text("exploration:\n  max_attempts: 7\n")
        monkeypatch.setenv("CRAFTMAPPER_CONFIG_PATH", str(config_file))

        config = load_config(base_dir=tmp_path)

        assert config["exploration"]["max_attempts"] == 7

    def test_default_file_in_base_dir(self, tmp_path: Path):
        (tmp_path / "craftmapper.yaml").write_text("logging:\n  level: DEBUG\n")

        config = load_config(base_dir=tmp_path)

        assert config["logging"]["level"] == "DEBUG"

    def test_missing_explicit_file_uses_defaults(self, tmp_path: Path):
        config = load_config(config_path=tmp_path / "missing.yaml", base_dir=tmp_path)
        assert config["exploration"]["max_successes"] == 500000

    def test_invalid_explicit_file_raises(self, tmp_path: Path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("store: [unclosed\n")

        with pytest.raises(ConfigurationError):
            load_config(config_path=config_file)

    def test_non_mapping_explicit_file_raises(self, tmp_path: Path):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_config(config_path=config_file)

    def test_invalid_default_file_is_ignored(self, tmp_path: Path):
        (tmp_path / "craftmapper.yaml").write_text("store: [unclosed\n")

        config = load_config(base_dir=tmp_path)

        assert config["logging"]["level"] == "INFO"

    def test_empty_file(self, tmp_path: Path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        config = load_config(config_path=config_file)

        assert config["api"]["url"] == DEFAULT_API_URL


class TestEnvOverrides:
    """Tests for environment variable overrides."""

    def test_db_path_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CRAFTMAPPER_DB_PATH", str(tmp_path / "env.db"))

        config = load_config(base_dir=tmp_path)

        assert get_store_path(config) == tmp_path / "env.db"

    def test_api_url_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CRAFTMAPPER_API_URL", "http://localhost:8080/pair")

        config = load_config(base_dir=tmp_path)

        assert get_api_config(config)["api_url"] == "http://localhost:8080/pair"

    def test_env_beats_file(self, tmp_path: Path, monkeypatch):
        config_file = tmp_path / "c.yaml"
        config_file.write_text("logging:\n  level: ERROR\n")
        monkeypatch.setenv("CRAFTMAPPER_LOG_LEVEL", "WARNING")

        config = load_config(config_path=config_file)

        assert get_log_level(config) == logging.WARNING


class TestValidation:
    """Tests for value validation."""

    @pytest.mark.parametrize(
        "section",
        [
            {"exploration": {"max_successes": -1}},
            {"exploration": {"max_attempts": "lots"}},
            {"exploration": {"pacing_ms": -5}},
            {"api": {"max_rate_limit_retries": -2}},
        ],
    )
    def test_invalid_values_raise(self, tmp_path: Path, section):
        config_file = tmp_path / "c.yaml"
        config_file.write_text(yaml.safe_dump(section))

        with pytest.raises(ConfigurationError):
            load_config(config_path=config_file)


    def test_zero_bounds_are_valid(self, tmp_path: Path):
        config_file = tmp_path / "c.yaml"
        config_file.write_text("exploration:\n  max_successes: 0\n  max_attempts: 0\n")

        config = load_config(config_path=config_file)

        assert get_exploration_config(config)["max_attempts"] == 0


class TestAccessors:
    """Tests for config accessors."""

    def test_get_api_config(self, tmp_path: Path):
        config = load_config(base_dir=tmp_path)
        api = get_api_config(config)

        assert set(api) == {
            "api_url",
            "referer",
            "user_agent",
            "timeout",
            "default_retry_after",
            "max_rate_limit_retries",
        }
        assert api["default_retry_after"] == 60

    def test_get_exploration_config_converts_pacing(self, tmp_path: Path):
        config = load_config(base_dir=tmp_path)
        assert get_exploration_config(config)["pacing_interval"] == pytest.approx(0.05)

    def test_get_log_level_unknown_name(self):
        assert get_log_level({"logging": {"level": "CHATTY"}}) == logging.INFO
