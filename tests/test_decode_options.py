"""Tests for decoder options loaded from YAML config and environment."""

import logging

import pytest

from constants import Constants, _load_yaml_config
from registry_index.options import DecodeOptions


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep real user config and environment out of these tests."""
    monkeypatch.delenv(Constants.ENV_CONFIG, raising=False)
    monkeypatch.delenv(Constants.ENV_STRICT, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


def write_config(path, text):
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestDecodeOptions:
    """Option precedence and validation."""

    def test_defaults_without_config(self):
        options = DecodeOptions.from_config()
        assert options.reject_unknown_schema is False
        assert options.max_workers == Constants.BATCH_MAX_WORKERS

    def test_explicit_config_path(self, tmp_path):
        path = write_config(tmp_path / "custom.yml", "decoder:\n  reject_unknown_schema: true\n  max_workers: 9\n")
        options = DecodeOptions.from_config(path)
        assert options.reject_unknown_schema is True
        assert options.max_workers == 9

    def test_config_from_env_var(self, tmp_path, monkeypatch):
        path = write_config(tmp_path / "env.yml", "decoder:\n  max_workers: 3\n")
        monkeypatch.setenv(Constants.ENV_CONFIG, path)
        assert DecodeOptions.from_config().max_workers == 3

    def test_config_discovered_in_cwd(self, tmp_path):
        write_config(tmp_path / "regindex.yml", "decoder:\n  reject_unknown_schema: yes\n")
        assert DecodeOptions.from_config().reject_unknown_schema is True

    def test_env_strict_overrides_config(self, tmp_path, monkeypatch):
        path = write_config(tmp_path / "c.yml", "decoder:\n  reject_unknown_schema: true\n")
        monkeypatch.setenv(Constants.ENV_STRICT, "0")
        assert DecodeOptions.from_config(path).reject_unknown_schema is False

    def test_keyword_overrides_win(self, monkeypatch):
        monkeypatch.setenv(Constants.ENV_STRICT, "true")
        options = DecodeOptions.from_config(reject_unknown_schema=False, max_workers=None)
        assert options.reject_unknown_schema is False
        assert options.max_workers == Constants.BATCH_MAX_WORKERS

    def test_invalid_values_ignored(self, tmp_path, caplog):
        path = write_config(tmp_path / "bad.yml", "decoder:\n  reject_unknown_schema: perhaps\n  max_workers: -2\n")
        with caplog.at_level(logging.WARNING):
            options = DecodeOptions.from_config(path)
        assert options == DecodeOptions()
        assert "reject_unknown_schema" in caplog.text
        assert "max_workers" in caplog.text

    def test_invalid_env_strict_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv(Constants.ENV_STRICT, "sometimes")
        with caplog.at_level(logging.WARNING):
            assert DecodeOptions.from_config().reject_unknown_schema is False
        assert Constants.ENV_STRICT in caplog.text


class TestLoadYamlConfig:
    """Config file loading fallbacks."""

    def test_missing_explicit_path(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert _load_yaml_config(str(tmp_path / "nope.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_invalid_yaml(self, tmp_path, caplog):
        path = write_config(tmp_path / "broken.yml", "decoder: [unclosed\n")
        with caplog.at_level(logging.WARNING):
            assert _load_yaml_config(path) == {}
        assert "Failed to load config" in caplog.text

    def test_non_mapping_top_level(self, tmp_path):
        path = write_config(tmp_path / "list.yml", "- a\n- b\n")
        assert _load_yaml_config(path) == {}

    def test_non_mapping_decoder_section(self, tmp_path):
        path = write_config(tmp_path / "s.yml", "decoder: strict\n")
        assert DecodeOptions.from_config(path) == DecodeOptions()
