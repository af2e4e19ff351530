"""Configuration management for the Firebolt client.

Handles TOML config files, environment variables, named profiles,
and configuration precedence resolution.

Precedence order (highest to lowest):
1. Explicit overrides passed to resolve_config()
2. Environment variables (FIREBOLT_CLIENT_ID, FIREBOLT_ACCOUNT, ...)
3. Named profile (argument, FIREBOLT_PROFILE env var, or default_profile)
4. Built-in defaults
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator

from firebolt_client.core.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "firebolt-client" / "config.toml"

DEFAULT_API_ENDPOINT = "api.app.firebolt.io"
DEFAULT_TIMEOUT = 60.0

_ENV_VARS: dict[str, str] = {
    "FIREBOLT_CLIENT_ID": "client_id",
    "FIREBOLT_CLIENT_SECRET": "client_secret",  # pragma: allowlist secret
    "FIREBOLT_ACCOUNT": "account",
    "FIREBOLT_DATABASE": "database",
    "FIREBOLT_ENGINE": "engine",
    "FIREBOLT_API_ENDPOINT": "api_endpoint",
    "FIREBOLT_TIMEOUT": "timeout",
}

_DEFAULTS: dict[str, Any] = {
    "client_id": None,
    "client_secret": None,
    "account": None,
    "database": None,
    "engine": None,
    "api_endpoint": DEFAULT_API_ENDPOINT,
    "timeout": DEFAULT_TIMEOUT,
}


def _validate_timeout(v: float) -> float:
    if v <= 0:
        msg = f"Invalid timeout: {v}. Must be positive"
        raise ValueError(msg)
    return v


class FireboltProfile(BaseModel):
    client_id: str | None = None
    client_secret: str | None = None
    account: str | None = None
    database: str | None = None
    engine: str | None = None
    api_endpoint: str = DEFAULT_API_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        return _validate_timeout(v)


class AppConfig(BaseModel):
    default_profile: str | None = None
    profiles: dict[str, FireboltProfile] = {}


class ResolvedConfig(BaseModel):
    client_id: str | None = None
    client_secret: str | None = None
    account: str | None = None
    database: str | None = None
    engine: str | None = None
    api_endpoint: str = DEFAULT_API_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    active_profile: str | None = None
    sources: dict[str, str] = {}

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        return _validate_timeout(v)


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file.

    Returns default AppConfig if file doesn't exist.
    Raises ConfigurationError on malformed TOML or invalid config.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {config_path}: {e}"
        raise ConfigurationError(msg) from e

    try:
        return AppConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ConfigurationError(msg) from e


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    **overrides: Any,
) -> ResolvedConfig:
    """Resolve configuration using precedence chain.

    overrides > env > profile > built-in defaults.
    """
    sources: dict[str, str] = {}
    resolved: dict[str, Any] = dict(_DEFAULTS)
    for key in resolved:
        sources[key] = "default"

    # Named profile
    effective_profile = profile_name
    if not effective_profile:
        effective_profile = os.environ.get("FIREBOLT_PROFILE")
    if not effective_profile:
        effective_profile = config.default_profile

    if effective_profile:
        if effective_profile not in config.profiles:
            available = (
                ", ".join(sorted(config.profiles.keys())) if config.profiles else "none"
            )
            msg = f"Unknown profile: '{effective_profile}'. Available profiles: {available}"
            raise ConfigurationError(msg)
        profile = config.profiles[effective_profile]
        for key in profile.model_fields_set:
            resolved[key] = getattr(profile, key)
            sources[key] = f"profile: {effective_profile}"

    # Environment variables
    for env_var, field_name in _ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is not None:
            if field_name == "timeout":
                try:
                    resolved[field_name] = float(value)
                except ValueError:
                    msg = f"Invalid {env_var} value: '{value}'. Must be a number"
                    raise ConfigurationError(msg) from None
            else:
                resolved[field_name] = value
            sources[field_name] = f"env: {env_var}"

    # Explicit overrides (highest priority)
    for field_name, value in overrides.items():
        if field_name not in _DEFAULTS:
            msg = f"Unknown configuration key: '{field_name}'"
            raise ConfigurationError(msg)
        if value is not None:
            resolved[field_name] = value
            sources[field_name] = "override"

    resolved["active_profile"] = effective_profile
    resolved["sources"] = sources
    try:
        return ResolvedConfig(**resolved)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
