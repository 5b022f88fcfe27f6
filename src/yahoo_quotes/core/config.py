"""Configuration loading, validation, and access."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from yahoo_quotes.core.exceptions import ConfigError

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class ConnectorConfig(BaseModel):
    """Endpoints and transport settings for the yahoo! finance connector."""

    model_config = ConfigDict(frozen=True)

    chart_url: str = "https://query1.finance.yahoo.com/v8/finance/chart"
    search_url: str = "https://query2.finance.yahoo.com/v1/finance/search"
    quote_summary_url: str = "https://query2.finance.yahoo.com/v10/finance/quoteSummary"
    quote_url: str = "https://query1.finance.yahoo.com/v7/finance/quote"
    options_url: str = "https://query1.finance.yahoo.com/v7/finance/options"
    options_page_url: str = "https://finance.yahoo.com/quote"
    events_url: str = "https://query1.finance.yahoo.com/v1/finance/visualization"
    cookie_url: str = "https://fc.yahoo.com"
    crumb_url: str = "https://query1.finance.yahoo.com/v1/test/getcrumb"

    timeout: float = 30.0
    user_agent: str = _DEFAULT_USER_AGENT
    proxy: str | None = None

    auth_retries: int = 1
    max_events_limit: int = 250
    lang: str = "en-US"
    region: str = "US"

    @field_validator("timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be > 0")
        return v

    @field_validator("auth_retries")
    @classmethod
    def auth_retries_bounded(cls, v: int) -> int:
        if v < 0 or v > 3:
            raise ValueError("auth_retries must be between 0 and 3")
        return v

    @field_validator("max_events_limit")
    @classmethod
    def events_limit_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_events_limit must be >= 1")
        return v

    @field_validator("user_agent")
    @classmethod
    def user_agent_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("user_agent must not be blank")
        return v


class YahooQuotesConfig(BaseModel):
    """Root configuration for yahoo-quotes."""

    model_config = ConfigDict(frozen=True)

    connector: ConnectorConfig = ConnectorConfig()


def load_config(
    config_path: str | None = None,
    env_prefix: str = "YAHOO_QUOTES_",
) -> YahooQuotesConfig:
    """Build the connector settings from environment, YAML file and defaults.

    Later sources win: built-in defaults, then ``yahoo-quotes.yml`` (or the
    file named by ``config_path`` / ``YAHOO_QUOTES_CONFIG``), then
    ``YAHOO_QUOTES_*`` variables. Nested keys use ``__`` in variable names::

        YAHOO_QUOTES_CONNECTOR__AUTH_RETRIES=2    # crumb refreshes per call
        YAHOO_QUOTES_CONNECTOR__TIMEOUT=10        # seconds per request
        YAHOO_QUOTES_CONNECTOR__PROXY=http://proxy:3128

    Raises:
        ConfigError: Missing file, unreadable YAML, or a value the
            ``ConnectorConfig`` validators reject (for example
            ``auth_retries`` outside 0..3).
    """
    try:
        yaml_path = _resolve_config_path(config_path)
        base: dict = {}
        if yaml_path is not None:
            base = _load_yaml(yaml_path)

        merged = _merge_env_vars(base, env_prefix)
        return YahooQuotesConfig.model_validate(merged)
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Pick the YAML file: explicit path, then $YAHOO_QUOTES_CONFIG, then ./yahoo-quotes.yml.

    A path that was asked for but does not exist is an error; a missing
    default file just means no YAML layer.
    """
    candidates = (
        (explicit, "config_path"),
        (os.environ.get("YAHOO_QUOTES_CONFIG"), "YAHOO_QUOTES_CONFIG"),
    )
    for value, source in candidates:
        if not value:
            continue
        p = Path(value)
        if not p.exists():
            raise ConfigError(
                f"Config file not found: {value} (from {source})",
                context={"field": source, "value": value},
            )
        return p

    default = Path("yahoo-quotes.yml")
    return default if default.exists() else None


def _load_yaml(path: Path) -> dict:
    """Read a YAML mapping such as ``{"connector": {"timeout": 10}}``; empty file -> ``{}``."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config: {e}",
            context={"field": "config_file", "value": str(path)},
        ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"YAML config must be a mapping, got {type(data).__name__}",
            context={"field": "config_file", "value": str(path)},
        )
    return data


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay ``YAHOO_QUOTES_*`` variables onto the YAML mapping.

    ``YAHOO_QUOTES_CONNECTOR__USER_AGENT`` becomes ``connector.user_agent``.
    """
    result = dict(base)

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        parts = [p.lower() for p in key[len(prefix) :].split("__")]

        # YAHOO_QUOTES_CONFIG points at the file, it is not a setting
        if parts == ["config"]:
            continue

        target = result
        for part in parts[:-1]:
            nested = target.get(part)
            target[part] = dict(nested) if isinstance(nested, dict) else {}
            target = target[part]
        target[parts[-1]] = _auto_cast(value)

    return result


def _auto_cast(value: str) -> str | int | float | bool:
    """Turn "true"/"false" and numeric strings into bool/int/float.

    ``AUTH_RETRIES=2`` must reach the validator as ``2``, ``TIMEOUT=2.5`` as
    ``2.5``; a proxy URL stays a string.
    """
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            pass
    return value
