"""
Prompt Relay package.
Sends one prompt to an OpenAI- or Anthropic-style chat-completion API and
returns a single JSON result string.
"""

__version__ = "0.1.0"

from .profiles import (  # noqa: F401
    ProviderProfile,
    OpenAIProfile,
    AnthropicProfile,
    get_provider_profile,
)
from .schemas import Credentials, ChatRequest, RelayResult  # noqa: F401
from .credentials import CredentialsError, from_config, from_secret  # noqa: F401
from .relay import (  # noqa: F401
    PromptRelay,
    resolve_model,
    run_relay,
    run_relay_config,
    run_relay_secret,
    is_success,
)

__all__ = [
    "ProviderProfile",
    "OpenAIProfile",
    "AnthropicProfile",
    "get_provider_profile",
    "Credentials",
    "ChatRequest",
    "RelayResult",
    "CredentialsError",
    "from_config",
    "from_secret",
    "PromptRelay",
    "resolve_model",
    "run_relay",
    "run_relay_config",
    "run_relay_secret",
    "is_success",
]
