"""Scripted vendor endpoints for adapter and API tests."""

import json
from typing import Any

import httpx

from quackchat.models.chat import Message, MessageRole


class FakeVendor:
    """
    Scripted vendor endpoint that records every request.

    Responses (or exceptions) are consumed in order; an unexpected extra
    request fails the test.
    """

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected vendor request: {request.method} {request.url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def body(self, index: int = -1) -> dict[str, Any]:
        """Decoded JSON body of a recorded request."""
        data: dict[str, Any] = json.loads(self.requests[index].content)
        return data

    def models(self) -> list[str]:
        """Model requested by each recorded call."""
        models = []
        for request in self.requests:
            if request.url.host == "generativelanguage.googleapis.com":
                models.append(request.url.path.rsplit("/", 1)[-1].split(":")[0])
            else:
                models.append(json.loads(request.content)["model"])
        return models


def openai_reply(text: Any) -> httpx.Response:
    return httpx.Response(
        200, json={"choices": [{"message": {"role": "assistant", "content": text}}]}
    )


def gemini_reply(text: Any, finish_reason: str = "STOP") -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "candidates": [
                {
                    "content": {"role": "model", "parts": [{"text": text}]},
                    "finishReason": finish_reason,
                }
            ]
        },
    )


def gemini_safety_block() -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"finishReason": "SAFETY"}]})


def claude_reply(text: Any) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "id": "msg_1",
            "type": "message",
            "role": "assistant",
            "content": [{"type": "text", "text": text}],
        },
    )


def vendor_error(status_code: int, error: dict[str, Any] | None = None) -> httpx.Response:
    if error is None:
        return httpx.Response(status_code)
    return httpx.Response(status_code, json={"error": error})


def conversation(count: int) -> list[Message]:
    """Alternating user/assistant history with numbered contents."""
    return [
        Message(
            role=MessageRole.USER if i % 2 == 0 else MessageRole.ASSISTANT,
            content=f"message {i}",
        )
        for i in range(count)
    ]
