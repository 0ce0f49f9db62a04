"""Services for the application."""

from quackchat.services.chat import ChatService
from quackchat.services.conversations import Conversation, ConversationManager
from quackchat.services.credentials import (
    CredentialStore,
    InMemoryKeyValueStore,
    JSONFileKeyValueStore,
    KeyValueStore,
)

__all__ = [
    "ChatService",
    "Conversation",
    "ConversationManager",
    "CredentialStore",
    "InMemoryKeyValueStore",
    "JSONFileKeyValueStore",
    "KeyValueStore",
]
