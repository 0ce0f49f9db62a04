"""Volatile in-memory conversation transcripts."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from quackchat.core.errors import ConversationBusyError, ConversationNotFoundError
from quackchat.core.logging import get_logger
from quackchat.core.security import generate_conversation_id
from quackchat.models.chat import Message

logger = get_logger(__name__)


@dataclass
class Conversation:
    """Ordered message list plus the in-flight flag."""

    id: str
    messages: list[Message] = field(default_factory=list)
    in_flight: bool = False


class ConversationManager:
    """
    Holds conversations in memory.

    Nothing is persisted; transcripts live until cleared or the process
    exits. At most one chat request may be in flight per conversation.
    """

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}

    def create(self) -> Conversation:
        """Create an empty conversation."""
        conversation = Conversation(id=generate_conversation_id())
        self._conversations[conversation.id] = conversation
        logger.debug("Conversation created", extra={"conversation_id": conversation.id})
        return conversation

    def get(self, conversation_id: str) -> Conversation:
        """
        Get a conversation.

        Raises:
            ConversationNotFoundError: If the id is unknown
        """
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(f"Conversation not found: {conversation_id}")
        return conversation

    def get_or_create(self, conversation_id: str | None) -> Conversation:
        """Get a conversation by id, creating a new one when id is None."""
        if conversation_id is None:
            return self.create()
        return self.get(conversation_id)

    def messages(self, conversation_id: str) -> list[Message]:
        """Get a copy of a conversation's messages in creation order."""
        return list(self.get(conversation_id).messages)

    def append(self, conversation_id: str, message: Message) -> Message:
        """Append a message to a conversation."""
        self.get(conversation_id).messages.append(message)
        return message

    def clear(self, conversation_id: str) -> None:
        """
        Remove all messages from a conversation.

        Raises:
            ConversationNotFoundError: If the id is unknown
            ConversationBusyError: If a request is in flight
        """
        conversation = self.get(conversation_id)
        if conversation.in_flight:
            raise ConversationBusyError(
                f"Cannot clear conversation {conversation_id} while a request is in progress"
            )
        conversation.messages.clear()
        logger.info("Conversation cleared", extra={"conversation_id": conversation_id})

    @asynccontextmanager
    async def reserve(self, conversation_id: str) -> AsyncIterator[Conversation]:
        """
        Mark a conversation busy for the duration of one request.

        Raises:
            ConversationBusyError: If a request is already in flight
        """
        conversation = self.get(conversation_id)
        if conversation.in_flight:
            raise ConversationBusyError(
                f"A request is already in progress for conversation {conversation_id}"
            )

        conversation.in_flight = True
        try:
            yield conversation
        finally:
            conversation.in_flight = False
