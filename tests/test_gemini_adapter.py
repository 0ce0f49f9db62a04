"""Tests for the Gemini adapter."""

import httpx
import pytest
from vendor_fakes import FakeVendor, conversation, gemini_reply, gemini_safety_block

from quackchat.core.errors import MalformedResponseError, SafetyBlockedError
from quackchat.models.providers import GeminiConfig
from quackchat.providers import GeminiAdapter
from quackchat.providers.gemini import SAFETY_CATEGORIES, build_prompt


@pytest.fixture
def adapter(vendor: FakeVendor) -> GeminiAdapter:
    """Gemini adapter talking to the fake vendor."""
    return GeminiAdapter("test-gemini-key", transport=vendor.transport)


class TestBuildPrompt:
    """Test prompt flattening."""

    def test_input_only(self) -> None:
        """Test prompt without system prompt or history."""
        assert build_prompt("Hello", None, []) == "User: Hello\n\nAssistant:"

    def test_system_prompt_and_history(self) -> None:
        """Test the full prompt layout."""
        prompt = build_prompt("How are you?", "Be kind.", conversation(2))

        assert prompt == (
            "System Instructions: Be kind.\n\n"
            "Conversation History:\n"
            "User: message 0\n"
            "Assistant: message 1\n"
            "\n"
            "User: How are you?\n\nAssistant:"
        )


class TestGeminiRequest:
    """Test the outbound generateContent request."""

    async def test_model_in_path_and_key_in_query(
        self, adapter: GeminiAdapter, vendor: FakeVendor
    ) -> None:
        """Test endpoint layout."""
        vendor.responses.append(gemini_reply("hi"))

        await adapter.send_message("Hello")

        request = vendor.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v1beta/models/gemini-2.0-flash:generateContent"
        assert request.url.params["key"] == "test-gemini-key"

    async def test_generation_config_and_safety_settings(
        self, adapter: GeminiAdapter, vendor: FakeVendor
    ) -> None:
        """Test sampling settings and safety thresholds."""
        vendor.responses.append(gemini_reply("hi"))

        await adapter.send_message("Hello")

        body = vendor.body()
        assert body["generationConfig"] == {
            "temperature": 0.7,
            "topK": 40,
            "topP": 0.95,
            "maxOutputTokens": 1000,
        }
        assert [setting["category"] for setting in body["safetySettings"]] == list(
            SAFETY_CATEGORIES
        )
        assert {setting["threshold"] for setting in body["safetySettings"]} == {
            "BLOCK_MEDIUM_AND_ABOVE"
        }

    async def test_single_user_content_with_prompt(
        self, adapter: GeminiAdapter, vendor: FakeVendor
    ) -> None:
        """Test the prompt is sent as one user part."""
        vendor.responses.append(gemini_reply("hi"))

        await adapter.send_message(" Hello ", "Be kind.")

        assert vendor.body()["contents"] == [
            {
                "role": "user",
                "parts": [{"text": "System Instructions: Be kind.\n\nUser: Hello\n\nAssistant:"}],
            }
        ]


class TestGeminiResponse:
    """Test reply extraction and safety handling."""

    async def test_returns_first_part_text(
        self, adapter: GeminiAdapter, vendor: FakeVendor
    ) -> None:
        """Test extraction from the first candidate."""
        vendor.responses.append(gemini_reply("  hi there  "))

        assert await adapter.send_message("Hello") == "hi there"

    async def test_safety_block_is_not_retried(
        self, adapter: GeminiAdapter, vendor: FakeVendor
    ) -> None:
        """Test that a safety block surfaces without a fallback call."""
        vendor.responses.append(gemini_safety_block())

        with pytest.raises(SafetyBlockedError) as exc_info:
            await adapter.send_message("Hello")

        assert "blocked the response due to safety concerns" in str(exc_info.value)
        assert len(vendor.requests) == 1

    async def test_no_candidates_is_malformed(self, vendor: FakeVendor) -> None:
        """Test empty candidate list."""
        adapter = GeminiAdapter(
            "test-gemini-key",
            GeminiConfig(model="gemini-1.5-flash"),
            transport=vendor.transport,
        )
        vendor.responses.append(httpx.Response(200, json={"candidates": []}))

        with pytest.raises(MalformedResponseError) as exc_info:
            await adapter.send_message("Hello")

        assert str(exc_info.value) == (
            "Invalid response from Gemini gemini-1.5-flash: No candidates found"
        )

    async def test_malformed_primary_falls_back(
        self, adapter: GeminiAdapter, vendor: FakeVendor
    ) -> None:
        """Test that an empty reply triggers the fallback model."""
        vendor.responses.extend([gemini_reply(""), gemini_reply("from fallback")])

        assert await adapter.send_message("Hello") == "from fallback"
        assert vendor.models() == ["gemini-2.0-flash", "gemini-1.5-flash"]


class TestGeminiSystemPrompt:
    """Test system prompt generation."""

    async def test_request_has_no_safety_settings(
        self, adapter: GeminiAdapter, vendor: FakeVendor
    ) -> None:
        """Test system prompt request layout."""
        vendor.responses.append(gemini_reply("You are Quill."))

        result = await adapter.generate_system_prompt("Quill", "Writes poems")

        body = vendor.body()
        assert result == "You are Quill."
        assert "safetySettings" not in body
        assert body["generationConfig"]["maxOutputTokens"] == 500
        assert "Quill" in body["contents"][0]["parts"][0]["text"]

    def test_display_name(self, adapter: GeminiAdapter) -> None:
        """Test display name uses the Google prefix."""
        assert adapter.display_name == "Google gemini-2.0-flash"
