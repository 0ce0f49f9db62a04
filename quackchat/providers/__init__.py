"""Vendor chat adapters."""

from quackchat.providers.base import MAX_HISTORY_MESSAGES, ProviderAdapter, VendorRequest
from quackchat.providers.claude import ClaudeAdapter
from quackchat.providers.factory import adapter_class, create_adapter
from quackchat.providers.gemini import GeminiAdapter
from quackchat.providers.openai import OpenAIAdapter

__all__ = [
    "MAX_HISTORY_MESSAGES",
    "ClaudeAdapter",
    "GeminiAdapter",
    "OpenAIAdapter",
    "ProviderAdapter",
    "VendorRequest",
    "adapter_class",
    "create_adapter",
]
