"""OpenAI chat completions adapter."""

from typing import Any, Final

from quackchat.models.chat import Message
from quackchat.models.providers import OpenAIConfig, ProviderType
from quackchat.providers.base import (
    SYSTEM_PROMPT_MAX_TOKENS,
    ProviderAdapter,
    VendorRequest,
    wire_role,
)
from quackchat.providers.prompts import SYSTEM_PROMPT_WRITER_ROLE, system_prompt_request

BASE_URL: Final = "https://api.openai.com/v1"


class OpenAIAdapter(ProviderAdapter):
    """
    OpenAI adapter.

    Sends the conversation as a role-tagged message array with an optional
    leading system message.
    """

    provider = ProviderType.OPENAI
    vendor_name = "OpenAI"
    display_prefix = "OpenAI"
    default_config = OpenAIConfig

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def build_messages(
        self, user_input: str, system_prompt: str | None, history: list[Message]
    ) -> list[dict[str, str]]:
        """Build the ``messages`` array for a chat turn."""
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.extend({"role": wire_role(msg), "content": msg.content} for msg in history)
        messages.append({"role": "user", "content": user_input})
        return messages

    def _completion_request(self, messages: list[dict[str, str]], max_tokens: int) -> VendorRequest:
        return VendorRequest(
            method="POST",
            url=f"{BASE_URL}/chat/completions",
            headers=self._headers(),
            payload={
                "model": self.config.model,
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": self.config.temperature,
                "stream": False,
            },
        )

    def build_chat_request(
        self, user_input: str, system_prompt: str | None, history: list[Message]
    ) -> VendorRequest:
        messages = self.build_messages(user_input, system_prompt, history)
        return self._completion_request(messages, self.config.max_tokens)

    def build_system_prompt_request(self, agent_name: str, agent_context: str) -> VendorRequest:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT_WRITER_ROLE},
            {"role": "user", "content": system_prompt_request(agent_name, agent_context)},
        ]
        return self._completion_request(messages, SYSTEM_PROMPT_MAX_TOKENS)

    def build_connection_test_request(self) -> VendorRequest:
        return VendorRequest(method="GET", url=f"{BASE_URL}/models", headers=self._headers())

    def extract_content(self, data: Any) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not isinstance(content, str) or not content:
            raise self.malformed("No content generated")

        return content.strip()
