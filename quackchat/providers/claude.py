"""Anthropic Claude messages adapter."""

from typing import Any, Final

import httpx

from quackchat.core.errors import ProviderError
from quackchat.models.chat import Message
from quackchat.models.providers import ClaudeConfig, ProviderType
from quackchat.providers.base import (
    SYSTEM_PROMPT_MAX_TOKENS,
    ProviderAdapter,
    VendorRequest,
    error_body,
    wire_role,
)
from quackchat.providers.prompts import combined_system_prompt_request

BASE_URL: Final = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION: Final = "2023-06-01"
CONNECTION_TEST_MAX_TOKENS: Final = 10

FRIENDLY_ERRORS: Final = {
    "authentication_error": "Invalid Claude API key. Please check your API key in Settings.",
    "permission_error": "Claude API access denied. Please check your API key permissions.",
    "rate_limit_error": "Claude API rate limit exceeded. Please try again in a moment.",
}


def ensure_alternating(messages: list[dict[str, str]]) -> list[dict[str, str]]:
    """
    Enforce Claude's strict user/assistant alternation.

    Consecutive same-role messages are merged with a blank line between
    them, then a leading assistant message is dropped.

    Args:
        messages: Role/content dicts in conversation order

    Returns:
        New list that alternates roles and starts with a user message
    """
    merged: list[dict[str, str]] = []
    for message in messages:
        if merged and merged[-1]["role"] == message["role"]:
            merged[-1] = {
                "role": message["role"],
                "content": f"{merged[-1]['content']}\n\n{message['content']}",
            }
        else:
            merged.append(dict(message))

    if merged and merged[0]["role"] != "user":
        merged.pop(0)

    return merged


class ClaudeAdapter(ProviderAdapter):
    """
    Claude adapter.

    The system prompt goes in the top-level ``system`` field and the message
    array must alternate roles.
    """

    provider = ProviderType.CLAUDE
    vendor_name = "Claude"
    display_prefix = "Anthropic"
    default_config = ClaudeConfig

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def _messages_request(self, payload: dict[str, Any]) -> VendorRequest:
        return VendorRequest(
            method="POST",
            url=f"{BASE_URL}/messages",
            headers=self._headers(),
            payload=payload,
        )

    def build_messages(self, user_input: str, history: list[Message]) -> list[dict[str, str]]:
        """Build the alternating ``messages`` array for a chat turn."""
        messages = [{"role": wire_role(msg), "content": msg.content} for msg in history]
        messages.append({"role": "user", "content": user_input})
        return ensure_alternating(messages)

    def build_chat_request(
        self, user_input: str, system_prompt: str | None, history: list[Message]
    ) -> VendorRequest:
        payload: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "messages": self.build_messages(user_input, history),
        }
        if system_prompt:
            payload["system"] = system_prompt
        return self._messages_request(payload)

    def build_system_prompt_request(self, agent_name: str, agent_context: str) -> VendorRequest:
        return self._messages_request(
            {
                "model": self.config.model,
                "max_tokens": SYSTEM_PROMPT_MAX_TOKENS,
                "temperature": self.config.temperature,
                "messages": [
                    {
                        "role": "user",
                        "content": combined_system_prompt_request(agent_name, agent_context),
                    }
                ],
            }
        )

    def build_connection_test_request(self) -> VendorRequest:
        return self._messages_request(
            {
                "model": self.config.model,
                "max_tokens": CONNECTION_TEST_MAX_TOKENS,
                "messages": [{"role": "user", "content": "Hello"}],
            }
        )

    def parse_error(self, response: httpx.Response) -> ProviderError:
        """Normalize a Claude error, keyed on ``error.type``."""
        error = error_body(response)
        error_type = error.get("type") or response.status_code
        message = FRIENDLY_ERRORS.get(
            str(error_type), error.get("message") or response.reason_phrase
        )
        return ProviderError(
            f"Claude API error ({self.config.model}): {error_type} - {message}",
            provider=self.provider,
            model=self.config.model,
            status_code=response.status_code,
            code=error_type,
        )

    def extract_content(self, data: Any) -> str:
        blocks = data.get("content") if isinstance(data, dict) else None
        if not isinstance(blocks, list) or not blocks:
            raise self.malformed("No content blocks found")

        text_block = next(
            (block for block in blocks if isinstance(block, dict) and block.get("type") == "text"),
            None,
        )
        text = text_block.get("text") if text_block is not None else None
        if not isinstance(text, str) or not text:
            raise self.malformed("No text content found")

        return text.strip()
