"""Single-request relay to chat-completion APIs"""
import asyncio
import json
import logging
from typing import Optional, Union

import httpx

from .credentials import from_args, from_config, from_secret, mask_secret
from .profiles import ProviderProfile, get_provider_profile
from .schemas import ChatRequest, Credentials, RelayResult

logger = logging.getLogger(__name__)

# Shortcuts exposed by the original deployment for fixed models
MODEL_ALIASES = {
    "gpt4": "gpt-4-turbo-preview",
    "gpt3n5": "gpt-3.5-turbo-0125",
}


def resolve_model(name: str) -> str:
    """Map a model alias to its identifier, passing other names through"""
    return MODEL_ALIASES.get(name, name)


class PromptRelay:
    """Forward one prompt to a chat-completion endpoint and normalize the outcome"""

    def __init__(
        self,
        profile: Optional[Union[ProviderProfile, str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        verbose: bool = False,
    ):
        """
        Initialize relay

        Args:
            profile: Provider profile or its name (defaults to RELAY_PROVIDER env),
                     resolved on first use
            timeout: Request timeout in seconds, None for no timeout
            transport: Optional httpx transport, used to stub the remote service
            verbose: Emit debug diagnostics about the outgoing request
        """
        self._profile = profile
        self.timeout = timeout
        self.transport = transport
        self.verbose = verbose

    @property
    def profile(self) -> ProviderProfile:
        """Lazy resolve the provider profile"""
        if self._profile is None or isinstance(self._profile, str):
            self._profile = get_provider_profile(self._profile)
        return self._profile

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport, follow_redirects=True)

    async def relay(self, endpoint: str, api_key: str, model: str, prompt: str) -> RelayResult:
        """
        Send one chat-completion request

        Args:
            endpoint: API URL, not validated beyond what httpx enforces
            api_key: Opaque credential for the provider's auth header
            model: Model identifier, echoed back
            prompt: User message content, echoed back

        Returns:
            RelayResult with all fields on 2xx, only ``status`` otherwise

        Raises:
            httpx.HTTPError: on transport failure
        """
        request = ChatRequest(model=model, prompt=prompt)
        headers = self.profile.build_headers(api_key)
        payload = self.profile.build_payload(request.model, request.prompt)

        if self.verbose:
            logger.debug(
                f"POST {endpoint} provider={self.profile.name} model={model} "
                f"key={mask_secret(api_key)}"
            )

        async with self._client() as client:
            http_request = client.build_request("POST", endpoint, headers=headers, json=payload)
            response = await client.send(http_request, stream=True)
            try:
                if not response.is_success:
                    # Error body is left unread
                    logger.info(f"{self.profile.name} request rejected with status {response.status_code}")
                    return RelayResult.failure(response.status_code)

                await response.aread()
                reply = response.text
            finally:
                await response.aclose()

        if self.verbose:
            logger.debug(f"Received {len(reply)} characters from {endpoint}")

        return RelayResult.success(endpoint, request, response.status_code, reply)

    async def relay_credentials(self, credentials: Credentials, model: str, prompt: str) -> RelayResult:
        """Send one request using a parsed Credentials object"""
        return await self.relay(
            credentials.endpoint,
            credentials.api_key.get_secret_value(),
            model,
            prompt,
        )


def describe_error(exc: BaseException) -> str:
    """Textual description of an error, never empty"""
    return str(exc) or exc.__class__.__name__


async def _guarded(coro_factory) -> str:
    try:
        result = await coro_factory()
    except Exception as e:
        logger.warning(f"Relay failed: {e.__class__.__name__}: {describe_error(e)}")
        return describe_error(e)
    return result.to_json()


async def run_relay(
    endpoint: str,
    api_key: str,
    model: str,
    prompt: str,
    relay: Optional[PromptRelay] = None,
) -> str:
    """
    Relay a prompt and always return exactly one string

    Returns:
        JSON-encoded RelayResult, or the error's text when anything raised
    """
    async def call():
        relayer = relay or PromptRelay()
        credentials = from_args(endpoint, api_key)
        return await relayer.relay_credentials(credentials, model, prompt)

    return await _guarded(call)


async def run_relay_config(
    config_json: str,
    model: str,
    prompt: str,
    relay: Optional[PromptRelay] = None,
) -> str:
    """Relay using credentials from a {"openai": {"url", "apiKey"}} configuration string"""
    async def call():
        relayer = relay or PromptRelay()
        credentials = from_config(config_json, provider=relayer.profile.name)
        return await relayer.relay_credentials(credentials, model, prompt)

    return await _guarded(call)


async def run_relay_secret(
    secret: str,
    model: str,
    prompt: str,
    relay: Optional[PromptRelay] = None,
) -> str:
    """Relay using credentials from a separately injected secret payload"""
    async def call():
        relayer = relay or PromptRelay()
        credentials = from_secret(secret, provider=relayer.profile.name)
        return await relayer.relay_credentials(credentials, model, prompt)

    return await _guarded(call)


def is_success(output: str) -> bool:
    """Check whether a relay output string carries a reply"""
    try:
        data = json.loads(output)
    except ValueError:
        return False
    return isinstance(data, dict) and "reply" in data


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)
