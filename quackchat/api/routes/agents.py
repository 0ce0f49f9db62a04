"""Agent management endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from quackchat.api.dependencies import get_chat_service, get_credential_store
from quackchat.core.errors import ConfigurationError, EmptyInputError, SystemPromptGenerationError
from quackchat.core.logging import get_logger
from quackchat.models.agents import (
    Agent,
    AgentCreateRequest,
    SystemPromptRequest,
    SystemPromptResponse,
)
from quackchat.services.chat import ChatService
from quackchat.services.credentials import CredentialStore

logger = get_logger(__name__)
router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("", response_model=list[Agent])
async def list_agents(store: CredentialStore = Depends(get_credential_store)) -> list[Agent]:
    """List stored agents."""
    return store.list_agents()


@router.post("", response_model=Agent, status_code=201)
async def create_agent(
    payload: AgentCreateRequest,
    store: CredentialStore = Depends(get_credential_store),
) -> Agent:
    """
    Create an agent.

    Raises:
        HTTPException: If name or context is blank
    """
    if not payload.name.strip() or not payload.context.strip():
        raise HTTPException(status_code=422, detail="Please enter both agent name and context")

    return store.create_agent(payload.name, payload.context, payload.system_prompt)


@router.delete("/{agent_id}", status_code=204)
async def delete_agent(
    agent_id: str,
    store: CredentialStore = Depends(get_credential_store),
) -> None:
    """
    Delete an agent.

    Raises:
        HTTPException: If the agent does not exist
    """
    if not store.delete_agent(agent_id):
        raise HTTPException(status_code=404, detail=f"Agent not found: {agent_id}")


@router.post("/system-prompt", response_model=SystemPromptResponse)
async def generate_system_prompt(
    payload: SystemPromptRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> SystemPromptResponse:
    """
    Generate a system prompt for a prospective agent.

    Uses the selected provider with a single attempt.

    Raises:
        HTTPException: 422 for blank input, 400 when no provider is usable,
            502 when the provider call fails
    """
    try:
        system_prompt = await chat_service.generate_system_prompt(payload.name, payload.context)
    except EmptyInputError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ConfigurationError as e:
        raise HTTPException(
            status_code=400,
            detail="No AI provider available. Please configure an API key in Settings.",
        ) from e
    except SystemPromptGenerationError as e:
        logger.error("System prompt generation failed", extra={"error": str(e)})
        raise HTTPException(status_code=502, detail=str(e)) from e

    return SystemPromptResponse(
        system_prompt=system_prompt,
        provider=chat_service.provider,  # type: ignore[arg-type]
    )
