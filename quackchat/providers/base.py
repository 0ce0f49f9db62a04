"""Base class for vendor chat adapters."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, Final, Self

import httpx

from quackchat.core.errors import MalformedResponseError, ProviderError, SafetyBlockedError
from quackchat.core.logging import get_logger
from quackchat.core.security import redact_secrets
from quackchat.models.chat import Message, MessageRole
from quackchat.models.providers import ProviderConfig, ProviderType

logger = get_logger(__name__)

MAX_HISTORY_MESSAGES: Final = 10
SYSTEM_PROMPT_MAX_TOKENS: Final = 500
DEFAULT_TIMEOUT_SECONDS: Final = 30.0


@dataclass(frozen=True)
class VendorRequest:
    """A single outbound HTTP call, independent of the client that sends it."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)
    payload: dict[str, Any] | None = None


def recent_history(history: Sequence[Message]) -> list[Message]:
    """Keep only the most recent messages that are sent upstream."""
    return list(history)[-MAX_HISTORY_MESSAGES:]


def wire_role(message: Message) -> str:
    """Map a message author to the vendor role name."""
    return "user" if message.role == MessageRole.USER else "assistant"


def clean_system_prompt(system_prompt: str | None) -> str | None:
    """Trim a system prompt, treating blank text as absent."""
    if system_prompt is None:
        return None
    return system_prompt.strip() or None


def error_body(response: httpx.Response) -> dict[str, Any]:
    """
    Parse the ``error`` object of a failed response, tolerating bad bodies.

    Returns:
        The vendor error object, or an empty dict
    """
    try:
        data = response.json()
    except ValueError:
        return {}
    if not isinstance(data, dict):
        return {}
    error = data.get("error")
    return error if isinstance(error, dict) else {}


class ProviderAdapter(ABC):
    """
    Translates the uniform chat contract into one vendor's HTTP API.

    Subclasses build vendor requests, extract reply text and normalize vendor
    error bodies. Sending, the fallback-model retry and connection checks
    live here.
    """

    provider: ClassVar[ProviderType]
    vendor_name: ClassVar[str]
    display_prefix: ClassVar[str]
    default_config: ClassVar[type[ProviderConfig]]

    def __init__(
        self,
        api_key: str,
        config: ProviderConfig | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            api_key: Vendor API key
            config: Model and sampling configuration (vendor defaults if None)
            timeout: Deadline in seconds for each HTTP call
            transport: Optional httpx transport, used to fake the vendor in tests
        """
        self.api_key = api_key
        self.config = config if config is not None else self.default_config()
        self.timeout = timeout
        self._transport = transport

    @property
    def model_name(self) -> str:
        """Get the model this adapter calls."""
        return self.config.model

    @property
    def display_name(self) -> str:
        """Get the provider display name, including the model."""
        return f"{self.display_prefix} {self.config.model}"

    @property
    def uses_fallback_model(self) -> bool:
        """Whether this adapter already targets its fallback model."""
        return self.config.model == self.config.fallback_model

    def with_model(self, model: str) -> Self:
        """Build a sibling adapter that differs only in its model."""
        return type(self)(
            self.api_key,
            self.config.model_copy(update={"model": model}),
            timeout=self.timeout,
            transport=self._transport,
        )

    async def send_message(
        self,
        user_input: str,
        system_prompt: str | None = None,
        history: Sequence[Message] = (),
    ) -> str:
        """
        Send one chat turn and return the reply text.

        On any provider failure other than a safety block the whole request
        is retried once with the fallback model.

        Args:
            user_input: Current user message
            system_prompt: Optional agent system prompt
            history: Prior conversation messages, oldest first

        Returns:
            Reply text

        Raises:
            ProviderError: If the call (and the fallback, if attempted) fails
        """
        request = self.build_chat_request(
            user_input.strip(), clean_system_prompt(system_prompt), recent_history(history)
        )

        try:
            return await self._complete(request)
        except SafetyBlockedError:
            raise
        except ProviderError as exc:
            if self.uses_fallback_model:
                raise
            logger.warning(
                "Primary model failed, retrying with fallback model",
                extra={
                    "provider": self.provider.value,
                    "model": self.config.model,
                    "fallback_model": self.config.fallback_model,
                    "error": str(exc),
                },
            )

        fallback = self.with_model(self.config.fallback_model)
        return await fallback.send_message(user_input, system_prompt, history)

    async def generate_system_prompt(self, agent_name: str, agent_context: str) -> str:
        """
        Draft a system prompt for an agent. Single attempt, no fallback.

        Uses this adapter's configured model rather than a fixed
        per-vendor model.

        Args:
            agent_name: Agent name
            agent_context: Free-text agent description

        Returns:
            Generated system prompt
        """
        request = self.build_system_prompt_request(agent_name.strip(), agent_context.strip())
        return await self._complete(request)

    async def test_connection(self) -> bool:
        """
        Check that the vendor accepts this adapter's key.

        Returns:
            True when the vendor answered with a success status
        """
        try:
            response = await self._send(self.build_connection_test_request())
        except Exception as exc:  # noqa: BLE001
            logger.info(
                "Provider connection test failed",
                extra={"provider": self.provider.value, "error": str(exc)},
            )
            return False
        return response.is_success

    async def _complete(self, request: VendorRequest) -> str:
        response = await self._send(request)
        if not response.is_success:
            raise self.parse_error(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise self.malformed("Response body is not valid JSON") from exc

        return self.extract_content(data)

    async def _send(self, request: VendorRequest) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                return await client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    params=request.params,
                    json=request.payload,
                )
            # ValueError covers requests httpx cannot encode, e.g. a non-ASCII key header
            except (httpx.HTTPError, ValueError) as exc:
                detail = redact_secrets(str(exc)) or type(exc).__name__
                raise ProviderError(
                    f"{self.vendor_name} API error ({self.config.model}): "
                    f"request failed - {detail}",
                    provider=self.provider,
                    model=self.config.model,
                ) from exc

    def malformed(self, detail: str) -> MalformedResponseError:
        """Build the error for a successful response without usable content."""
        return MalformedResponseError(
            f"Invalid response from {self.vendor_name} {self.config.model}: {detail}",
            provider=self.provider,
            model=self.config.model,
        )

    def parse_error(self, response: httpx.Response) -> ProviderError:
        """
        Normalize a non-2xx response into a ProviderError.

        Uses ``error.message`` and ``error.code`` from the body when present,
        else the HTTP reason phrase and status code.
        """
        error = error_body(response)
        message = error.get("message") or response.reason_phrase
        code = error.get("code") or response.status_code
        return ProviderError(
            f"{self.vendor_name} API error ({self.config.model}): {code} - {message}",
            provider=self.provider,
            model=self.config.model,
            status_code=response.status_code,
            code=code,
        )

    @abstractmethod
    def build_chat_request(
        self, user_input: str, system_prompt: str | None, history: list[Message]
    ) -> VendorRequest:
        """Build the vendor request for a chat turn; history is already truncated."""

    @abstractmethod
    def build_system_prompt_request(self, agent_name: str, agent_context: str) -> VendorRequest:
        """Build the vendor request that drafts an agent system prompt."""

    @abstractmethod
    def build_connection_test_request(self) -> VendorRequest:
        """Build a minimal request that proves the key works."""

    @abstractmethod
    def extract_content(self, data: Any) -> str:
        """Extract reply text from a decoded success body."""
