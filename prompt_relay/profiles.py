"""Provider profiles with ENV-based switching"""
import os
from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional
import logging

from .schemas import ChatMessage

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "application/json, text/plain, */*"

OPENAI_DEFAULT_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_DEFAULT_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_MAX_TOKENS = 4096


class ProviderProfile(ABC):
    """Base class for chat-completion provider profiles"""

    name: str = ""
    default_url: str = ""

    def build_headers(self, api_key: str) -> Dict[str, str]:
        """
        Build request headers for the provider

        Args:
            api_key: Opaque credential; surrounding whitespace is trimmed like any header value

        Returns:
            Header mapping including content negotiation and auth headers
        """
        headers = {
            "Accept": ACCEPT_HEADER,
            "Content-Type": "application/json",
        }
        headers.update(self.auth_headers(api_key))
        # Header values are sent trimmed, an empty key still reaches the remote
        return {k: v.strip() for k, v in headers.items()}

    @abstractmethod
    def auth_headers(self, api_key: str) -> Dict[str, str]:
        """Provider-specific authorization headers"""
        pass

    @abstractmethod
    def build_payload(self, model: str, prompt: str) -> Dict[str, Any]:
        """Build the single-turn chat-completion body"""
        pass

    @staticmethod
    def user_messages(prompt: str) -> List[Dict[str, str]]:
        return [ChatMessage(role="user", content=prompt).model_dump()]


class OpenAIProfile(ProviderProfile):
    """OpenAI-style API: bearer token, streaming disabled"""

    name = "openai"
    default_url = OPENAI_DEFAULT_URL

    def auth_headers(self, api_key: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"}

    def build_payload(self, model: str, prompt: str) -> Dict[str, Any]:
        return {
            "model": model,
            "messages": self.user_messages(prompt),
            "stream": False,
        }


class AnthropicProfile(ProviderProfile):
    """Anthropic-style API: x-api-key header, version header, max token cap"""

    name = "anthropic"
    default_url = ANTHROPIC_DEFAULT_URL

    def __init__(self, max_tokens: int = ANTHROPIC_MAX_TOKENS, version: str = ANTHROPIC_VERSION):
        self.max_tokens = max_tokens
        self.version = version

    def auth_headers(self, api_key: str) -> Dict[str, str]:
        return {
            "anthropic-version": self.version,
            "x-api-key": api_key,
        }

    def build_payload(self, model: str, prompt: str) -> Dict[str, Any]:
        return {
            "max_tokens": self.max_tokens,
            "model": model,
            "messages": self.user_messages(prompt),
        }


PROFILES = {
    "openai": OpenAIProfile,
    "anthropic": AnthropicProfile,
}


def get_provider_profile(provider: Optional[str] = None) -> ProviderProfile:
    """
    Factory function to get a provider profile based on ENV or parameters

    Args:
        provider: Provider name ('openai', 'anthropic').
                  Defaults to RELAY_PROVIDER env var or 'openai'

    Returns:
        ProviderProfile instance
    """
    provider = (provider or os.getenv("RELAY_PROVIDER", "openai")).strip().lower()

    logger.debug(f"Creating provider profile: {provider}")

    if provider not in PROFILES:
        raise ValueError(
            f"Unknown provider: {provider}. "
            f"Valid options: {', '.join(sorted(PROFILES))}"
        )
    return PROFILES[provider]()
