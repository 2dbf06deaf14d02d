"""Relay settings from environment and optional YAML file"""
from __future__ import annotations

import os
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from .credentials import mask_secret
from .profiles import get_provider_profile

logger = logging.getLogger(__name__)

KEY_ENV_BY_PROVIDER = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

URL_ENV_BY_PROVIDER = {
    "openai": "OPENAI_API_URL",
    "anthropic": "ANTHROPIC_API_URL",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _read_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}")
        return default


def _read_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def load_env():
    """Populate the environment from a .env file in the working directory"""
    load_dotenv(find_dotenv(usecwd=True))


def timeout_from_env() -> Optional[float]:
    return _read_float("RELAY_TIMEOUT", None)


def verbose_from_env() -> bool:
    return _read_bool("RELAY_VERBOSE", False)


@dataclass(frozen=True)
class RelaySettings:
    provider: str = "openai"
    api_url: str = ""
    api_key: str = ""
    timeout: Optional[float] = None
    verbose: bool = False

    @property
    def as_dict(self) -> dict:
        return {
            "provider": self.provider,
            "api_url": self.api_url,
            "api_key": mask_secret(self.api_key),
            "timeout": self.timeout,
            "verbose": self.verbose,
        }

    def problems(self) -> list:
        """Return a list of configuration errors, empty when usable"""
        errors = []
        if not self.api_url:
            errors.append("API URL not set (RELAY_API_URL)")
        if not self.api_key:
            errors.append(f"API key not set (RELAY_API_KEY or {KEY_ENV_BY_PROVIDER.get(self.provider, 'RELAY_API_KEY')})")
        if self.timeout is not None and self.timeout <= 0:
            errors.append(f"Invalid timeout: {self.timeout}")
        return errors


def settings_from_env() -> RelaySettings:
    """Build settings from process environment"""
    provider = os.getenv("RELAY_PROVIDER", "openai").strip().lower()
    profile = get_provider_profile(provider)

    api_url = (
        os.getenv("RELAY_API_URL")
        or os.getenv(URL_ENV_BY_PROVIDER.get(provider, ""), "")
        or profile.default_url
    )
    api_key = os.getenv("RELAY_API_KEY") or os.getenv(KEY_ENV_BY_PROVIDER.get(provider, ""), "")

    return RelaySettings(
        provider=provider,
        api_url=api_url,
        api_key=api_key,
        timeout=timeout_from_env(),
        verbose=verbose_from_env(),
    )


def _load_yaml(config_file: Path) -> Dict[str, Any]:
    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Error loading settings from {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {config_file} must contain a mapping")
    return data


def load_settings(config_file: Optional[str] = None) -> RelaySettings:
    """
    Load relay settings

    Resolution order (later wins):
        1. .env file via python-dotenv (does not override set variables)
        2. process environment
        3. YAML file given by config_file or RELAY_CONFIG_FILE

    Args:
        config_file: Optional YAML settings path

    Returns:
        RelaySettings
    """
    load_env()
    settings = settings_from_env()

    config_file = config_file or os.getenv("RELAY_CONFIG_FILE")
    if not config_file:
        return settings

    path = Path(config_file)
    if not path.exists():
        logger.warning(f"Settings file not found: {path}")
        return settings

    data = _load_yaml(path)
    overrides = {}
    if "provider" in data:
        overrides["provider"] = str(data["provider"]).strip().lower()
        profile = get_provider_profile(overrides["provider"])
        if overrides["provider"] != settings.provider and not os.getenv("RELAY_API_URL"):
            overrides["api_url"] = profile.default_url
    for key in ("api_url", "api_key"):
        if data.get(key) is not None:
            overrides[key] = str(data[key])
    if data.get("timeout") is not None:
        overrides["timeout"] = float(data["timeout"])
    if "verbose" in data:
        overrides["verbose"] = bool(data["verbose"])

    logger.info(f"Loaded settings from {path}")
    return replace(settings, **overrides)
