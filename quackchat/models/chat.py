"""Chat-related models."""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from quackchat.core.security import generate_message_id
from quackchat.models.providers import ProviderType


class MessageRole(StrEnum):
    """Author of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single conversation entry. Never persisted."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_message_id, description="Creation-ordered id")
    role: MessageRole = Field(description="Message author")
    content: str = Field(description="Message text")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    is_error: bool = Field(
        default=False, description="Assistant-authored error entry, never sent upstream"
    )


class ChatRequest(BaseModel):
    """Request model for chat endpoint."""

    message: str = Field(description="User message to send")
    conversation_id: str | None = Field(
        default=None, description="Conversation to continue; a new one is created if omitted"
    )
    agent_id: str | None = Field(default=None, description="Agent steering the reply")


class ChatResponse(BaseModel):
    """Response model for chat endpoint."""

    conversation_id: str = Field(description="Conversation the reply belongs to")
    message: Message = Field(description="Assistant reply or error entry")
    provider: ProviderType | None = Field(default=None, description="Provider that was used")
    model: str | None = Field(default=None, description="Primary model of that provider")


class ConversationResponse(BaseModel):
    """Transcript of a conversation."""

    conversation_id: str = Field(description="Conversation id")
    messages: list[Message] = Field(description="Messages in creation order")
