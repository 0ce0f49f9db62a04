"""Agent persona models."""

from pydantic import BaseModel, ConfigDict, Field

from quackchat.models.providers import ProviderType


class Agent(BaseModel):
    """
    User-defined persona.

    Serialized with the ``systemPrompt`` key so stored agent lists stay
    readable by the overlay.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Unique agent id")
    name: str = Field(description="Agent name")
    context: str = Field(description="Free-text description of the agent's purpose")
    system_prompt: str | None = Field(
        default=None, alias="systemPrompt", description="Optional generated system prompt"
    )


class AgentCreateRequest(BaseModel):
    """Create an agent."""

    name: str = Field(min_length=1, description="Agent name")
    context: str = Field(min_length=1, description="Agent context")
    system_prompt: str | None = Field(default=None, description="Optional system prompt")


class SystemPromptRequest(BaseModel):
    """Generate a system prompt for a prospective agent."""

    name: str = Field(description="Agent name")
    context: str = Field(description="Agent context")


class SystemPromptResponse(BaseModel):
    """Generated system prompt."""

    system_prompt: str = Field(description="Generated prompt text")
    provider: ProviderType = Field(description="Provider that generated it")
