"""Credential sources: positional arguments, configuration JSON and secret payloads"""
import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .schemas import Credentials

logger = logging.getLogger(__name__)


class CredentialsError(ValueError):
    """Raised when a configuration or secret payload lacks usable credentials"""
    pass


def mask_secret(value: Optional[str]) -> str:
    """Mask a secret for display, keeping only a short prefix and suffix"""
    if not value:
        return ""
    if len(value) <= 8:
        return "***"
    return f"{value[:3]}...{value[-4:]}"


def from_args(endpoint: str, api_key: str) -> Credentials:
    """Build credentials from positional arguments"""
    return Credentials(endpoint=endpoint, api_key=api_key)


def _from_mapping(data: Any, provider: Optional[str], source: str) -> Credentials:
    if not isinstance(data, dict):
        raise CredentialsError(f"{source} must be a JSON object")

    section: Dict[str, Any] = data
    if "url" not in data:
        # Preferred provider first, then any nested section
        keys = ([provider] if provider else []) + [k for k in data if k != provider]
        nested = [data[k] for k in keys if isinstance(data.get(k), dict)]
        if not nested:
            wanted = provider or "provider"
            raise CredentialsError(f"{source} has no 'url' and no '{wanted}' section")
        section = nested[0]

    try:
        return Credentials.model_validate(section)
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise CredentialsError(f"{source} is missing or has invalid fields: {missing}") from e


def from_config(config_json: str, provider: str = "openai") -> Credentials:
    """
    Parse credentials from a configuration string

    Args:
        config_json: JSON text of the form {"openai": {"url": ..., "apiKey": ...}}
        provider: Section holding the credentials, falls back to "openai"

    Returns:
        Credentials

    Raises:
        json.JSONDecodeError: config_json is not valid JSON
        CredentialsError: the section or its fields are missing
    """
    data = json.loads(config_json)
    if not isinstance(data, dict):
        raise CredentialsError("Configuration must be a JSON object")
    for name in (provider, "openai"):
        if isinstance(data.get(name), dict):
            return _from_mapping(data[name], None, "Configuration")
    raise CredentialsError(f"Configuration has no '{provider}' section")


def from_secret(secret: str, provider: Optional[str] = None) -> Credentials:
    """
    Parse credentials from a separately injected secret payload

    Accepts either a flat {"url", "apiKey"} object or one nested under a
    provider key such as {"openai": {...}} or {"anthropic": {...}}.

    Args:
        secret: JSON text of the secret payload
        provider: Preferred provider section when the payload is nested

    Returns:
        Credentials
    """
    if not secret:
        raise CredentialsError("Secret payload is empty")
    data = json.loads(secret)
    credentials = _from_mapping(data, provider, "Secret payload")
    logger.debug(
        f"Loaded secret credentials for {credentials.endpoint} "
        f"(key {mask_secret(credentials.api_key.get_secret_value())})"
    )
    return credentials
