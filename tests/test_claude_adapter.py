"""Tests for the Claude adapter."""

import httpx
import pytest
from vendor_fakes import FakeVendor, claude_reply, vendor_error

from quackchat.core.errors import MalformedResponseError, ProviderError
from quackchat.models.chat import Message, MessageRole
from quackchat.models.providers import ClaudeConfig
from quackchat.providers import ClaudeAdapter
from quackchat.providers.claude import FRIENDLY_ERRORS, ensure_alternating


@pytest.fixture
def adapter(vendor: FakeVendor) -> ClaudeAdapter:
    """Claude adapter talking to the fake vendor."""
    return ClaudeAdapter("sk-ant-test", transport=vendor.transport)


@pytest.fixture
def fallback_adapter(vendor: FakeVendor) -> ClaudeAdapter:
    """Claude adapter already on its fallback model, so errors surface directly."""
    return ClaudeAdapter(
        "sk-ant-test",
        ClaudeConfig(model="claude-3-sonnet-20240229"),
        transport=vendor.transport,
    )


class TestEnsureAlternating:
    """Test role alternation repair."""

    def test_merges_consecutive_roles(self) -> None:
        """Test same-role runs are joined with a blank line."""
        messages = [
            {"role": "user", "content": "a"},
            {"role": "user", "content": "b"},
            {"role": "assistant", "content": "c"},
            {"role": "assistant", "content": "d"},
        ]

        assert ensure_alternating(messages) == [
            {"role": "user", "content": "a\n\nb"},
            {"role": "assistant", "content": "c\n\nd"},
        ]

    def test_drops_leading_assistant(self) -> None:
        """Test the first message is always from the user."""
        messages = [
            {"role": "assistant", "content": "greeting"},
            {"role": "user", "content": "hi"},
        ]

        assert ensure_alternating(messages) == [{"role": "user", "content": "hi"}]

    def test_does_not_mutate_input(self) -> None:
        """Test the input list is left untouched."""
        messages = [{"role": "user", "content": "a"}, {"role": "user", "content": "b"}]

        ensure_alternating(messages)

        assert messages[0] == {"role": "user", "content": "a"}


class TestClaudeRequest:
    """Test the outbound messages request."""

    async def test_headers_and_endpoint(self, adapter: ClaudeAdapter, vendor: FakeVendor) -> None:
        """Test auth and version headers."""
        vendor.responses.append(claude_reply("hi"))

        await adapter.send_message("Hello")

        request = vendor.requests[0]
        assert str(request.url) == "https://api.anthropic.com/v1/messages"
        assert request.headers["Authorization"] == "Bearer sk-ant-test"
        assert request.headers["anthropic-version"] == "2023-06-01"

    async def test_system_prompt_is_top_level(
        self, adapter: ClaudeAdapter, vendor: FakeVendor
    ) -> None:
        """Test system prompt placement and fixed fields."""
        vendor.responses.append(claude_reply("hi"))

        await adapter.send_message("Hello", "Be brief.")

        body = vendor.body()
        assert body["system"] == "Be brief."
        assert body["model"] == "claude-3-5-sonnet-20241022"
        assert body["max_tokens"] == 1000
        assert body["temperature"] == 0.7
        assert body["messages"] == [{"role": "user", "content": "Hello"}]

    async def test_no_system_field_without_prompt(
        self, adapter: ClaudeAdapter, vendor: FakeVendor
    ) -> None:
        """Test the system field is omitted when absent."""
        vendor.responses.append(claude_reply("hi"))

        await adapter.send_message("Hello")

        assert "system" not in vendor.body()

    async def test_history_is_merged_with_input(
        self, adapter: ClaudeAdapter, vendor: FakeVendor
    ) -> None:
        """Test history alternation repair before sending."""
        history = [
            Message(role=MessageRole.USER, content="a"),
            Message(role=MessageRole.USER, content="b"),
            Message(role=MessageRole.ASSISTANT, content="c"),
        ]
        vendor.responses.append(claude_reply("hi"))

        await adapter.send_message("d", history=history)

        assert vendor.body()["messages"] == [
            {"role": "user", "content": "a\n\nb"},
            {"role": "assistant", "content": "c"},
            {"role": "user", "content": "d"},
        ]


class TestClaudeResponse:
    """Test reply extraction."""

    async def test_returns_first_text_block(
        self, adapter: ClaudeAdapter, vendor: FakeVendor
    ) -> None:
        """Test non-text blocks are skipped."""
        vendor.responses.append(
            httpx.Response(
                200,
                json={
                    "content": [
                        {"type": "tool_use", "id": "t1"},
                        {"type": "text", "text": " answer "},
                    ]
                },
            )
        )

        assert await adapter.send_message("Hello") == "answer"

    async def test_empty_content_is_malformed(
        self, fallback_adapter: ClaudeAdapter, vendor: FakeVendor
    ) -> None:
        """Test empty content list."""
        vendor.responses.append(httpx.Response(200, json={"content": []}))

        with pytest.raises(MalformedResponseError) as exc_info:
            await fallback_adapter.send_message("Hello")

        assert "No content blocks found" in str(exc_info.value)

    async def test_no_text_block_is_malformed(
        self, fallback_adapter: ClaudeAdapter, vendor: FakeVendor
    ) -> None:
        """Test content without text blocks."""
        vendor.responses.append(
            httpx.Response(200, json={"content": [{"type": "tool_use", "id": "t1"}]})
        )

        with pytest.raises(MalformedResponseError) as exc_info:
            await fallback_adapter.send_message("Hello")

        assert "No text content found" in str(exc_info.value)


class TestClaudeErrors:
    """Test error normalization."""

    async def test_authentication_error_is_friendly(
        self, fallback_adapter: ClaudeAdapter, vendor: FakeVendor
    ) -> None:
        """Test friendly message for auth failures."""
        vendor.responses.append(
            vendor_error(401, {"type": "authentication_error", "message": "invalid x-api-key"})
        )

        with pytest.raises(ProviderError) as exc_info:
            await fallback_adapter.send_message("Hello")

        assert str(exc_info.value) == (
            "Claude API error (claude-3-sonnet-20240229): authentication_error - "
            "Invalid Claude API key. Please check your API key in Settings."
        )
        assert exc_info.value.code == "authentication_error"

    @pytest.mark.parametrize(
        ("status", "error_type"),
        [
            (401, "authentication_error"),
            (403, "permission_error"),
            (429, "rate_limit_error"),
        ],
    )
    async def test_known_error_types_are_friendly(
        self, fallback_adapter: ClaudeAdapter, vendor: FakeVendor, status: int, error_type: str
    ) -> None:
        """Test each known error type replaces the vendor message."""
        vendor.responses.append(
            vendor_error(status, {"type": error_type, "message": "vendor detail"})
        )

        with pytest.raises(ProviderError) as exc_info:
            await fallback_adapter.send_message("Hello")

        assert str(exc_info.value) == (
            f"Claude API error (claude-3-sonnet-20240229): {error_type} - "
            f"{FRIENDLY_ERRORS[error_type]}"
        )
        assert exc_info.value.code == error_type
        assert exc_info.value.status_code == status

    def test_friendly_messages_cover_known_types(self) -> None:
        """Test the friendly message table."""
        assert set(FRIENDLY_ERRORS) == {
            "authentication_error",
            "permission_error",
            "rate_limit_error",
        }
        assert FRIENDLY_ERRORS["rate_limit_error"] == (
            "Claude API rate limit exceeded. Please try again in a moment."
        )

    async def test_unknown_error_type_uses_vendor_message(
        self, fallback_adapter: ClaudeAdapter, vendor: FakeVendor
    ) -> None:
        """Test vendor message passthrough."""
        vendor.responses.append(
            vendor_error(529, {"type": "overloaded_error", "message": "Overloaded"})
        )

        with pytest.raises(ProviderError) as exc_info:
            await fallback_adapter.send_message("Hello")

        assert str(exc_info.value) == (
            "Claude API error (claude-3-sonnet-20240229): overloaded_error - Overloaded"
        )
        assert exc_info.value.status_code == 529


class TestClaudeConnection:
    """Test connection checks and system prompt generation."""

    async def test_connection_sends_short_message(
        self, adapter: ClaudeAdapter, vendor: FakeVendor
    ) -> None:
        """Test the minimal connection probe."""
        vendor.responses.append(claude_reply("Hi"))

        assert await adapter.test_connection() is True
        body = vendor.body()
        assert body["max_tokens"] == 10
        assert body["messages"] == [{"role": "user", "content": "Hello"}]

    async def test_system_prompt_request_is_single_user_message(
        self, adapter: ClaudeAdapter, vendor: FakeVendor
    ) -> None:
        """Test system prompt generation payload."""
        vendor.responses.append(claude_reply("You are Quill."))

        result = await adapter.generate_system_prompt("Quill", "Writes poems")

        body = vendor.body()
        assert result == "You are Quill."
        assert body["max_tokens"] == 500
        assert "system" not in body
        assert len(body["messages"]) == 1
        assert "Writes poems" in body["messages"][0]["content"]
