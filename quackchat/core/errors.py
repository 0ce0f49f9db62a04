"""Exception hierarchy for chat, provider and storage failures."""

from quackchat.models.providers import ProviderType


class QuackChatError(Exception):
    """Base exception for all QuackChat errors."""

    pass


class ConfigurationError(QuackChatError):
    """Raised when no usable provider is configured."""

    pass


class EmptyInputError(QuackChatError):
    """Raised when a required text input is blank."""

    pass


class ProviderError(QuackChatError):
    """
    Raised when a vendor call fails.

    Covers non-2xx responses and transport failures. ``status_code`` is None
    when the request never produced a response.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: ProviderType,
        model: str,
        status_code: int | None = None,
        code: str | int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.model = model
        self.status_code = status_code
        self.code = code


class MalformedResponseError(ProviderError):
    """Raised when a successful response lacks the expected content."""

    pass


class SafetyBlockedError(ProviderError):
    """Raised when the vendor refuses to answer for safety reasons."""

    pass


class ChatServiceError(QuackChatError):
    """Adapter failure surfaced through ChatService, prefixed with the display name."""

    def __init__(self, message: str, *, provider: ProviderType, display_name: str) -> None:
        super().__init__(message)
        self.provider = provider
        self.display_name = display_name


class SystemPromptGenerationError(QuackChatError):
    """Raised when generating an agent system prompt fails."""

    def __init__(self, message: str, *, provider: ProviderType | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class AgentNotFoundError(QuackChatError):
    """Raised when an agent id does not exist in the store."""

    pass


class ConversationNotFoundError(QuackChatError):
    """Raised when a conversation id is unknown."""

    pass


class ConversationBusyError(QuackChatError):
    """Raised when a conversation already has a request in flight."""

    pass
