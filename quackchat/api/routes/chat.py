"""Chat endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from quackchat.agents.chat import ChatAgent
from quackchat.api.dependencies import get_chat_agent, get_conversations
from quackchat.core.errors import (
    AgentNotFoundError,
    ConversationBusyError,
    ConversationNotFoundError,
    EmptyInputError,
)
from quackchat.core.logging import get_logger
from quackchat.models.chat import ChatRequest, ChatResponse, ConversationResponse
from quackchat.services.conversations import ConversationManager

logger = get_logger(__name__)
router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    chat_agent: ChatAgent = Depends(get_chat_agent),
) -> ChatResponse:
    """
    Send a message and get the assistant reply.

    Provider and configuration failures are returned as an assistant error
    entry with ``is_error`` set, not as an HTTP error.

    Args:
        payload: Chat request with message, conversation and agent
        chat_agent: Chat agent (injected)

    Returns:
        Chat response with the assistant message

    Raises:
        HTTPException: For blank input, unknown ids or a busy conversation
    """
    try:
        return await chat_agent.chat(
            message=payload.message,
            conversation_id=payload.conversation_id,
            agent_id=payload.agent_id,
        )
    except EmptyInputError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except (AgentNotFoundError, ConversationNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConversationBusyError as e:
        logger.warning("Rejected concurrent chat request", extra={"error": str(e)})
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.get("/{conversation_id}/messages", response_model=ConversationResponse)
async def get_messages(
    conversation_id: str,
    conversations: ConversationManager = Depends(get_conversations),
) -> ConversationResponse:
    """
    Get a conversation transcript.

    Raises:
        HTTPException: If the conversation is unknown
    """
    try:
        messages = conversations.messages(conversation_id)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return ConversationResponse(conversation_id=conversation_id, messages=messages)


@router.delete("/{conversation_id}", status_code=204)
async def clear_conversation(
    conversation_id: str,
    conversations: ConversationManager = Depends(get_conversations),
) -> None:
    """
    Clear a conversation transcript.

    Raises:
        HTTPException: If the conversation is unknown or has a request in flight
    """
    try:
        conversations.clear(conversation_id)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConversationBusyError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
