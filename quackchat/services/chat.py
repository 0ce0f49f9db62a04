"""Provider selection and the uniform chat surface."""

from collections.abc import Sequence

import httpx

from quackchat.core.config import ProvidersConfig
from quackchat.core.errors import (
    ChatServiceError,
    ConfigurationError,
    EmptyInputError,
    ProviderError,
    SystemPromptGenerationError,
)
from quackchat.core.logging import get_logger
from quackchat.models.chat import Message
from quackchat.models.providers import ProviderStatus, ProviderType
from quackchat.providers import ProviderAdapter, adapter_class, create_adapter
from quackchat.services.credentials import CredentialStore

logger = get_logger(__name__)

PROVIDER_ORDER: tuple[ProviderType, ...] = (
    ProviderType.OPENAI,
    ProviderType.GEMINI,
    ProviderType.CLAUDE,
)

NO_PROVIDERS_MESSAGE = (
    "No AI providers are configured. Please add at least one API key in Settings."
)
INITIALIZATION_FAILED_MESSAGE = (
    "Unable to initialize chat service. Please check your API keys in Settings."
)


class ChatService:
    """
    Chat entry point over whichever provider is usable.

    Selects a provider from the stored credentials and preference, binds the
    matching adapter and exposes the uniform send contract. Adapter failures
    are re-raised with the provider display name as prefix.
    """

    def __init__(
        self,
        store: CredentialStore,
        config: ProvidersConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the chat service.

        Args:
            store: Credential store holding keys and the provider preference
            config: Provider configuration (defaults if None)
            transport: Optional httpx transport passed to adapters
        """
        self.store = store
        self.config = config or ProvidersConfig()
        self._transport = transport
        self._provider: ProviderType | None = None
        self._adapter: ProviderAdapter | None = None

    @property
    def provider(self) -> ProviderType | None:
        """Provider of the bound adapter."""
        return self._provider

    @property
    def adapter(self) -> ProviderAdapter | None:
        """Bound adapter, if any."""
        return self._adapter

    def get_available_providers(self) -> list[ProviderType]:
        """
        Get providers that have a non-empty API key, in fixed order.

        Returns:
            Available provider types
        """
        return [provider for provider in PROVIDER_ORDER if self.store.get_api_key(provider)]

    def get_selected_provider(self) -> ProviderType | None:
        """
        Get the provider to use for the next send.

        The stored preference wins when it is available; otherwise the first
        available provider is used.

        Returns:
            Selected provider, or None if no provider is available
        """
        available = self.get_available_providers()
        preferred = self.store.get_preferred_provider()

        if preferred in available:
            return ProviderType(preferred)

        if not available:
            return None

        if preferred:
            logger.warning(
                "Preferred provider not available, using fallback",
                extra={"requested": preferred, "fallback": available[0].value},
            )
        return available[0]

    def create_adapter(self, provider: ProviderType) -> ProviderAdapter:
        """
        Create an adapter for a provider using the stored key.

        Raises:
            ConfigurationError: If the provider has no stored key
        """
        api_key = self.store.get_api_key(provider)
        if not api_key:
            raise ConfigurationError(f"{provider.label} API key is not configured")

        defaults = adapter_class(provider).default_config()
        return create_adapter(
            provider,
            api_key,
            self.config.overrides_for(provider).apply(defaults),
            timeout=self.config.timeout_seconds,
            transport=self._transport,
        )

    def create_from_selected_provider(self) -> ProviderAdapter | None:
        """
        Bind the adapter of the selected provider.

        Returns:
            The bound adapter, or None when no provider is usable
        """
        provider = self.get_selected_provider()
        if provider is None:
            return None

        self._adapter = self.create_adapter(provider)
        self._provider = provider
        logger.info(
            "Chat provider selected",
            extra={"provider": provider.value, "model": self._adapter.model_name},
        )
        return self._adapter

    def _require_adapter(self) -> ProviderAdapter:
        adapter = self._adapter or self.create_from_selected_provider()
        if adapter is None:
            raise ConfigurationError(self.get_missing_provider_message())
        return adapter

    async def send_message(
        self,
        user_input: str,
        system_prompt: str | None = None,
        history: Sequence[Message] = (),
    ) -> str:
        """
        Send a message through the selected provider.

        Args:
            user_input: User message
            system_prompt: Optional agent system prompt
            history: Prior conversation messages, oldest first

        Returns:
            Assistant reply

        Raises:
            EmptyInputError: If the input is blank
            ConfigurationError: If no provider is usable
            ChatServiceError: If the provider call fails
        """
        if not user_input.strip():
            raise EmptyInputError("User input cannot be empty")

        adapter = self._require_adapter()
        try:
            return await adapter.send_message(user_input, system_prompt, history)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Chat request failed",
                extra={"provider": adapter.provider.value, "error": str(exc)},
                exc_info=not isinstance(exc, ProviderError),
            )
            raise ChatServiceError(
                f"{adapter.display_name}: {exc}",
                provider=adapter.provider,
                display_name=adapter.display_name,
            ) from exc

    async def generate_system_prompt(self, agent_name: str, agent_context: str) -> str:
        """
        Generate a system prompt for an agent with the selected provider.

        Args:
            agent_name: Agent name
            agent_context: Agent context

        Returns:
            Generated system prompt

        Raises:
            EmptyInputError: If name or context is blank
            ConfigurationError: If no provider is usable
            SystemPromptGenerationError: If the provider call fails
        """
        if not agent_name.strip() or not agent_context.strip():
            raise EmptyInputError(
                "Please enter both agent name and context before generating system prompt"
            )

        adapter = self._require_adapter()
        try:
            return await adapter.generate_system_prompt(agent_name, agent_context)
        except Exception as exc:  # noqa: BLE001
            raise SystemPromptGenerationError(
                f"Failed to generate system prompt with {adapter.provider.label}: {exc}",
                provider=adapter.provider,
            ) from exc

    async def test_connection(self) -> bool:
        """Check the bound (or selected) provider; never raises."""
        try:
            adapter = self._require_adapter()
        except ConfigurationError:
            return False
        return await adapter.test_connection()

    def get_provider_statuses(self) -> list[ProviderStatus]:
        """
        Get availability for every known provider.

        Returns:
            One status per provider, in fixed order
        """
        available = self.get_available_providers()
        selected = self.get_selected_provider()
        statuses = []
        for provider in PROVIDER_ORDER:
            config = self.config.overrides_for(provider).apply(
                adapter_class(provider).default_config()
            )
            statuses.append(
                ProviderStatus(
                    provider=provider,
                    display_name=f"{adapter_class(provider).display_prefix} {config.model}",
                    model=config.model,
                    available=provider in available,
                    selected=provider == selected,
                )
            )
        return statuses

    def get_missing_provider_message(self) -> str:
        """
        Explain why no provider can be used.

        Returns:
            User-facing diagnostic text
        """
        available = self.get_available_providers()
        if not available:
            return NO_PROVIDERS_MESSAGE

        preferred = self.store.get_preferred_provider()
        if preferred and preferred not in available:
            return (
                f"{preferred.upper()} API key is missing. "
                "Please add it in Settings or select a different provider."
            )

        return INITIALIZATION_FAILED_MESSAGE
