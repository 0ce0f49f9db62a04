"""Request-scoped access to application services."""

from fastapi import Request

from quackchat.agents.chat import ChatAgent
from quackchat.services.chat import ChatService
from quackchat.services.conversations import ConversationManager
from quackchat.services.credentials import CredentialStore


def get_credential_store(request: Request) -> CredentialStore:
    """Get the credential store from application state."""
    store: CredentialStore = request.app.state.credential_store
    return store


def get_conversations(request: Request) -> ConversationManager:
    """Get the conversation manager from application state."""
    conversations: ConversationManager = request.app.state.conversations
    return conversations


def get_chat_service(request: Request) -> ChatService:
    """Build a ChatService over the current credentials."""
    return ChatService(
        request.app.state.credential_store,
        request.app.state.settings.providers,
        transport=request.app.state.http_transport,
    )


def get_chat_agent(request: Request) -> ChatAgent:
    """Build the chat agent for this request."""
    return ChatAgent(
        store=get_credential_store(request),
        conversations=get_conversations(request),
        service_factory=lambda: get_chat_service(request),
    )
