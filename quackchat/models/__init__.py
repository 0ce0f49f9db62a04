"""Data models for the application."""

from quackchat.models.agents import (
    Agent,
    AgentCreateRequest,
    SystemPromptRequest,
    SystemPromptResponse,
)
from quackchat.models.chat import (
    ChatRequest,
    ChatResponse,
    ConversationResponse,
    Message,
    MessageRole,
)
from quackchat.models.providers import (
    ClaudeConfig,
    GeminiConfig,
    OpenAIConfig,
    ProviderConfig,
    ProviderStatus,
    ProviderType,
)

__all__ = [
    "Agent",
    "AgentCreateRequest",
    "ChatRequest",
    "ChatResponse",
    "ClaudeConfig",
    "ConversationResponse",
    "GeminiConfig",
    "Message",
    "MessageRole",
    "OpenAIConfig",
    "ProviderConfig",
    "ProviderStatus",
    "ProviderType",
    "SystemPromptRequest",
    "SystemPromptResponse",
]
