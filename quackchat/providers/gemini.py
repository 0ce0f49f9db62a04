"""Google Gemini generateContent adapter."""

from typing import Any, Final

from quackchat.core.errors import SafetyBlockedError
from quackchat.models.chat import Message, MessageRole
from quackchat.models.providers import GeminiConfig, ProviderType
from quackchat.providers.base import (
    SYSTEM_PROMPT_MAX_TOKENS,
    ProviderAdapter,
    VendorRequest,
)
from quackchat.providers.prompts import combined_system_prompt_request

BASE_URL: Final = "https://generativelanguage.googleapis.com/v1beta"

SAFETY_CATEGORIES: Final = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
SAFETY_THRESHOLD: Final = "BLOCK_MEDIUM_AND_ABOVE"


def build_prompt(user_input: str, system_prompt: str | None, history: list[Message]) -> str:
    """
    Flatten a chat turn into Gemini's single text prompt.

    Args:
        user_input: Current user message, already trimmed
        system_prompt: Optional system prompt, already trimmed
        history: Prior messages, already truncated

    Returns:
        Consolidated prompt text
    """
    prompt = ""
    if system_prompt:
        prompt += f"System Instructions: {system_prompt}\n\n"

    if history:
        prompt += "Conversation History:\n"
        for msg in history:
            speaker = "User" if msg.role == MessageRole.USER else "Assistant"
            prompt += f"{speaker}: {msg.content}\n"
        prompt += "\n"

    prompt += f"User: {user_input}\n\nAssistant:"
    return prompt


class GeminiAdapter(ProviderAdapter):
    """
    Gemini adapter.

    Gemini receives one consolidated prompt instead of a message array; the
    API key travels as the ``key`` query parameter.
    """

    provider = ProviderType.GEMINI
    vendor_name = "Gemini"
    display_prefix = "Google"
    default_config = GeminiConfig

    config: GeminiConfig

    def _generate_request(self, prompt: str, max_tokens: int, *, safety: bool) -> VendorRequest:
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topK": self.config.top_k,
                "topP": self.config.top_p,
                "maxOutputTokens": max_tokens,
            },
        }
        if safety:
            payload["safetySettings"] = [
                {"category": category, "threshold": SAFETY_THRESHOLD}
                for category in SAFETY_CATEGORIES
            ]

        return VendorRequest(
            method="POST",
            url=f"{BASE_URL}/models/{self.config.model}:generateContent",
            params={"key": self.api_key},
            payload=payload,
        )

    def build_chat_request(
        self, user_input: str, system_prompt: str | None, history: list[Message]
    ) -> VendorRequest:
        prompt = build_prompt(user_input, system_prompt, history)
        return self._generate_request(prompt, self.config.max_tokens, safety=True)

    def build_system_prompt_request(self, agent_name: str, agent_context: str) -> VendorRequest:
        prompt = combined_system_prompt_request(agent_name, agent_context)
        return self._generate_request(prompt, SYSTEM_PROMPT_MAX_TOKENS, safety=False)

    def build_connection_test_request(self) -> VendorRequest:
        return VendorRequest(method="GET", url=f"{BASE_URL}/models", params={"key": self.api_key})

    def extract_content(self, data: Any) -> str:
        try:
            candidate = data["candidates"][0]
        except (KeyError, IndexError, TypeError):
            candidate = None

        if not isinstance(candidate, dict):
            raise self.malformed("No candidates found")

        if candidate.get("finishReason") == "SAFETY":
            raise SafetyBlockedError(
                f"Gemini {self.config.model} blocked the response due to safety concerns. "
                "Please try rephrasing your message.",
                provider=self.provider,
                model=self.config.model,
            )

        try:
            content = candidate["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not isinstance(content, str) or not content:
            raise self.malformed("No content generated")

        return content.strip()
