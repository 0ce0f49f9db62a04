"""Conversation-level chat agent."""

from collections.abc import Callable

from quackchat.core.errors import (
    AgentNotFoundError,
    ChatServiceError,
    ConfigurationError,
    EmptyInputError,
)
from quackchat.core.logging import get_logger
from quackchat.models.agents import Agent
from quackchat.models.chat import ChatResponse, Message, MessageRole
from quackchat.providers.prompts import agent_persona_prompt
from quackchat.services.chat import ChatService
from quackchat.services.conversations import ConversationManager
from quackchat.services.credentials import CredentialStore

logger = get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Something went wrong while getting a response. Please try again."


def resolve_system_prompt(agent: Agent | None) -> str | None:
    """
    Get the system prompt for an agent.

    Uses the generated prompt when present, otherwise a persona prompt built
    from the agent's name and context.
    """
    if agent is None:
        return None
    if agent.system_prompt and agent.system_prompt.strip():
        return agent.system_prompt
    return agent_persona_prompt(agent.name, agent.context)


class ChatAgent:
    """
    Drives one chat turn within a conversation.

    Appends the user message and the assistant reply to the transcript.
    Provider and configuration failures become assistant-authored error
    entries instead of exceptions.
    """

    def __init__(
        self,
        store: CredentialStore,
        conversations: ConversationManager,
        service_factory: Callable[[], ChatService],
    ) -> None:
        """
        Initialize the chat agent.

        Args:
            store: Credential store holding agents
            conversations: Conversation transcripts
            service_factory: Builds a ChatService bound to current credentials
        """
        self.store = store
        self.conversations = conversations
        self.service_factory = service_factory

    async def chat(
        self,
        message: str,
        conversation_id: str | None = None,
        agent_id: str | None = None,
    ) -> ChatResponse:
        """
        Send a message and record the reply.

        Args:
            message: User message
            conversation_id: Conversation to continue (None starts a new one)
            agent_id: Agent steering the reply (None for no agent)

        Returns:
            Chat response with the assistant message or error entry

        Raises:
            EmptyInputError: If the message is blank
            AgentNotFoundError: If the agent id is unknown
            ConversationNotFoundError: If the conversation id is unknown
            ConversationBusyError: If the conversation has a request in flight
        """
        if not message.strip():
            raise EmptyInputError("User input cannot be empty")

        agent = None
        if agent_id is not None:
            agent = self.store.get_agent(agent_id)
            if agent is None:
                raise AgentNotFoundError(f"Agent not found: {agent_id}")

        conversation = self.conversations.get_or_create(conversation_id)

        async with self.conversations.reserve(conversation.id):
            history = [msg for msg in conversation.messages if not msg.is_error]
            self.conversations.append(
                conversation.id, Message(role=MessageRole.USER, content=message.strip())
            )

            assistant: Message | None = None
            try:
                service = self.service_factory()
                logger.info(
                    "Processing chat message",
                    extra={
                        "conversation_id": conversation.id,
                        "agent_id": agent_id,
                        "history_length": len(history),
                    },
                )

                try:
                    reply = await service.send_message(
                        message, resolve_system_prompt(agent), history
                    )
                except (ChatServiceError, ConfigurationError) as exc:
                    logger.warning(
                        "Chat message failed",
                        extra={"conversation_id": conversation.id, "error": str(exc)},
                    )
                    assistant = Message(
                        role=MessageRole.ASSISTANT, content=str(exc), is_error=True
                    )
                else:
                    assistant = Message(role=MessageRole.ASSISTANT, content=reply)
                    logger.info(
                        "Chat message processed successfully",
                        extra={
                            "conversation_id": conversation.id,
                            "provider": service.provider.value if service.provider else None,
                            "reply_length": len(reply),
                        },
                    )
            finally:
                # An unexpected exception still leaves an error entry for the user turn
                if assistant is None:
                    assistant = Message(
                        role=MessageRole.ASSISTANT,
                        content=UNEXPECTED_ERROR_MESSAGE,
                        is_error=True,
                    )
                self.conversations.append(conversation.id, assistant)

        adapter = service.adapter
        return ChatResponse(
            conversation_id=conversation.id,
            message=assistant,
            provider=service.provider,
            model=adapter.model_name if adapter is not None else None,
        )
