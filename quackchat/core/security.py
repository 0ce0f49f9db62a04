"""Identifier generation and secret redaction helpers."""

import re
import secrets
import time
from typing import Final

REDACTED: Final = "<redacted>"

_BEARER_PATTERN = re.compile(r"(?i)(bearer\s+)[a-z0-9_\-\.]+")
_QUERY_KEY_PATTERN = re.compile(r"([?&]key=)[^&\s\"']+")

_last_message_ns = 0


def generate_request_id() -> str:
    """
    Generate a unique request ID.

    Returns:
        A unique request ID
    """
    return f"req_{secrets.token_hex(16)}"


def generate_message_id() -> str:
    """
    Generate a creation-ordered message ID.

    IDs are nanosecond timestamps, bumped when the clock has not advanced so
    later messages always compare greater.
    """
    global _last_message_ns
    now = time.time_ns()
    if now <= _last_message_ns:
        now = _last_message_ns + 1
    _last_message_ns = now
    return str(now)


def generate_conversation_id() -> str:
    """Generate a conversation ID."""
    return f"conv_{secrets.token_hex(8)}"


def generate_agent_id() -> str:
    """Generate an agent ID."""
    return f"agent_{secrets.token_hex(8)}"


def redact_secrets(text: str) -> str:
    """
    Mask API keys in free text.

    Handles bearer tokens and ``key=`` query parameters (Gemini puts the key
    in the URL).
    """
    text = _BEARER_PATTERN.sub(rf"\g<1>{REDACTED}", text)
    return _QUERY_KEY_PATTERN.sub(rf"\g<1>{REDACTED}", text)
