"""Adapter construction keyed on provider type."""

import httpx

from quackchat.models.providers import ProviderConfig, ProviderType
from quackchat.providers.base import DEFAULT_TIMEOUT_SECONDS, ProviderAdapter
from quackchat.providers.claude import ClaudeAdapter
from quackchat.providers.gemini import GeminiAdapter
from quackchat.providers.openai import OpenAIAdapter

ADAPTERS: dict[ProviderType, type[ProviderAdapter]] = {
    ProviderType.OPENAI: OpenAIAdapter,
    ProviderType.GEMINI: GeminiAdapter,
    ProviderType.CLAUDE: ClaudeAdapter,
}


def adapter_class(provider: ProviderType) -> type[ProviderAdapter]:
    """Get the adapter class for a provider."""
    return ADAPTERS[provider]


def create_adapter(
    provider: ProviderType,
    api_key: str,
    config: ProviderConfig | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ProviderAdapter:
    """
    Create a provider adapter.

    Args:
        provider: Provider type
        api_key: Vendor API key
        config: Model and sampling configuration (vendor defaults if None)
        timeout: Deadline in seconds for each HTTP call
        transport: Optional httpx transport

    Returns:
        Adapter for the provider

    Raises:
        ValueError: If the API key is blank

    Examples:
        >>> adapter = create_adapter(ProviderType.CLAUDE, api_key="sk-ant-...")
        >>> adapter.display_name
        'Anthropic claude-3-5-sonnet-20241022'
    """
    if not api_key or not api_key.strip():
        raise ValueError(f"{provider.label} provider requires a non-empty API key")

    return adapter_class(provider)(
        api_key.strip(), config, timeout=timeout, transport=transport
    )
