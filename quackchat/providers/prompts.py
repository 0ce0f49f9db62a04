"""Prompt templates shared by the provider adapters."""

from typing import Final

SYSTEM_PROMPT_WRITER_ROLE: Final = (
    "You are a helpful assistant that creates detailed system prompts for AI agents. "
    "Create a comprehensive system prompt that defines the agent's role, behavior, "
    "and capabilities based on the provided name and context."
)

_SYSTEM_PROMPT_REQUEST: Final = """Create a detailed system prompt for an AI agent with the following details:

Agent Name: {name}
Agent Context: {context}

The system prompt should:
1. Define the agent's primary role and purpose
2. Specify the agent's personality and communication style
3. Outline key capabilities and areas of expertise
4. Include any behavioral guidelines or constraints
5. Be clear, concise, and actionable

Please provide only the system prompt without any additional explanation."""


def system_prompt_request(agent_name: str, agent_context: str) -> str:
    """Render the instruction asking a model to draft an agent system prompt."""
    return _SYSTEM_PROMPT_REQUEST.format(name=agent_name, context=agent_context)


def combined_system_prompt_request(agent_name: str, agent_context: str) -> str:
    """Writer role and request in a single user turn, for vendors without a system slot."""
    return f"{SYSTEM_PROMPT_WRITER_ROLE}\n\n{system_prompt_request(agent_name, agent_context)}"


def agent_persona_prompt(agent_name: str, agent_context: str) -> str:
    """Minimal system prompt for an agent that has no generated prompt."""
    return f"You are {agent_name}. {agent_context}"
