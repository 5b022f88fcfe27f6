"""Tests for yahoo_quotes.core.config."""

import os

import pytest
from pydantic import ValidationError

from yahoo_quotes.core.config import (
    ConnectorConfig,
    YahooQuotesConfig,
    _auto_cast,
    _merge_env_vars,
    load_config,
)
from yahoo_quotes.core.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """No stray YAHOO_QUOTES_* variables or ./yahoo-quotes.yml."""
    for key in list(os.environ):
        if key.startswith("YAHOO_QUOTES_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


class TestConnectorConfig:
    def test_defaults(self):
        c = ConnectorConfig()
        assert c.chart_url == "https://query1.finance.yahoo.com/v8/finance/chart"
        assert c.search_url == "https://query2.finance.yahoo.com/v1/finance/search"
        assert c.cookie_url == "https://fc.yahoo.com"
        assert c.crumb_url == "https://query1.finance.yahoo.com/v1/test/getcrumb"
        assert c.auth_retries == 1
        assert c.max_events_limit == 250
        assert c.proxy is None
        assert "Mozilla" in c.user_agent

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError, match="timeout must be > 0"):
            ConnectorConfig(timeout=0)

    def test_auth_retries_bounded(self):
        with pytest.raises(ValidationError, match="between 0 and 3"):
            ConnectorConfig(auth_retries=4)
        with pytest.raises(ValidationError, match="between 0 and 3"):
            ConnectorConfig(auth_retries=-1)

    def test_zero_retries_allowed(self):
        assert ConnectorConfig(auth_retries=0).auth_retries == 0

    def test_events_limit_positive(self):
        with pytest.raises(ValidationError, match="max_events_limit"):
            ConnectorConfig(max_events_limit=0)

    def test_blank_user_agent_rejected(self):
        with pytest.raises(ValidationError, match="must not be blank"):
            ConnectorConfig(user_agent="   ")

    def test_frozen(self):
        c = ConnectorConfig()
        with pytest.raises(ValidationError):
            c.timeout = 1.0


class TestLoadConfig:
    def test_defaults_without_file_or_env(self):
        config = load_config()
        assert isinstance(config, YahooQuotesConfig)
        assert config.connector == ConnectorConfig()

    def test_yaml_loading(self, tmp_path):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text("connector:\n  timeout: 12.5\n  auth_retries: 2\n")
        config = load_config(config_path=str(yaml_file))
        assert config.connector.timeout == 12.5
        assert config.connector.auth_retries == 2

    def test_default_file_in_cwd(self, tmp_path):
        (tmp_path / "yahoo-quotes.yml").write_text("connector:\n  region: GB\n")
        config = load_config()
        assert config.connector.region == "GB"

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        yaml_file = tmp_path / "other.yml"
        yaml_file.write_text("connector:\n  lang: de-DE\n")
        monkeypatch.setenv("YAHOO_QUOTES_CONFIG", str(yaml_file))
        config = load_config()
        assert config.connector.lang == "de-DE"

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text("connector:\n  auth_retries: 2\n")
        monkeypatch.setenv("YAHOO_QUOTES_CONNECTOR__AUTH_RETRIES", "3")
        config = load_config(config_path=str(yaml_file))
        assert config.connector.auth_retries == 3

    def test_env_proxy(self, monkeypatch):
        monkeypatch.setenv("YAHOO_QUOTES_CONNECTOR__PROXY", "http://proxy.local:3128")
        config = load_config()
        assert config.connector.proxy == "http://proxy.local:3128"

    def test_invalid_value_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("YAHOO_QUOTES_CONNECTOR__TIMEOUT", "-1")
        with pytest.raises(ConfigError):
            load_config()

    def test_missing_config_file_raises(self):
        with pytest.raises(ConfigError, match="not found"):
            load_config(config_path="/nonexistent/file.yml")

    def test_missing_env_config_file_raises(self, monkeypatch):
        monkeypatch.setenv("YAHOO_QUOTES_CONFIG", "/nonexistent/file.yml")
        with pytest.raises(ConfigError, match="YAHOO_QUOTES_CONFIG"):
            load_config()

    def test_explicit_path_beats_env_path(self, tmp_path, monkeypatch):
        explicit = tmp_path / "explicit.yml"
        explicit.write_text("connector:\n  auth_retries: 2\n")
        monkeypatch.setenv("YAHOO_QUOTES_CONFIG", "/nonexistent/file.yml")
        config = load_config(config_path=str(explicit))
        assert config.connector.auth_retries == 2

    def test_non_mapping_yaml_raises(self, tmp_path):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(config_path=str(yaml_file))

    def test_broken_yaml_raises(self, tmp_path):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text("connector: [unclosed\n")
        with pytest.raises(ConfigError, match="parse YAML"):
            load_config(config_path=str(yaml_file))

    def test_empty_yaml_uses_defaults(self, tmp_path):
        yaml_file = tmp_path / "config.yml"
        yaml_file.write_text("")
        config = load_config(config_path=str(yaml_file))
        assert config.connector.auth_retries == 1


class TestAutoCast:
    def test_true(self):
        assert _auto_cast("true") is True
        assert _auto_cast("TRUE") is True

    def test_false(self):
        assert _auto_cast("false") is False

    def test_int(self):
        assert _auto_cast("42") == 42

    def test_float(self):
        assert _auto_cast("3.14") == 3.14

    def test_string(self):
        assert _auto_cast("en-US") == "en-US"


class TestMergeEnvVars:
    def test_simple_override(self, monkeypatch):
        monkeypatch.setenv("TEST_CONNECTOR__TIMEOUT", "5")
        result = _merge_env_vars({"connector": {"timeout": 30}}, "TEST_")
        assert result["connector"]["timeout"] == 5

    def test_creates_nested_structure(self, monkeypatch):
        monkeypatch.setenv("TEST_CONNECTOR__REGION", "GB")
        result = _merge_env_vars({}, "TEST_")
        assert result["connector"]["region"] == "GB"

    def test_does_not_mutate_base(self, monkeypatch):
        monkeypatch.setenv("TEST_CONNECTOR__REGION", "GB")
        base = {"connector": {"region": "US"}}
        _merge_env_vars(base, "TEST_")
        assert base["connector"]["region"] == "US"

    def test_skips_config_key(self, monkeypatch):
        monkeypatch.setenv("TEST_CONFIG", "/some/path")
        result = _merge_env_vars({}, "TEST_")
        assert "config" not in result
