"""API key, provider preference and agent storage."""

import json
import os
from pathlib import Path
from typing import Final, Protocol

from pydantic import TypeAdapter, ValidationError

from quackchat.core.logging import get_logger
from quackchat.core.security import generate_agent_id
from quackchat.models.agents import Agent
from quackchat.models.providers import ProviderType

logger = get_logger(__name__)

SELECTED_PROVIDER_KEY: Final = "selected_provider"
AGENTS_KEY: Final = "agents"

DEFAULT_AGENT_NAME: Final = "Helper Bot"
DEFAULT_AGENT_CONTEXT: Final = "Assists users with general tasks."

_agent_list = TypeAdapter(list[Agent])


def api_key_name(provider: ProviderType) -> str:
    """Storage key holding a provider's API key."""
    return f"{provider.value}_api_key"


class KeyValueStore(Protocol):
    """String key-value storage."""

    def get_string(self, key: str) -> str | None: ...

    def set_string(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Volatile key-value store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get_string(self, key: str) -> str | None:
        return self._data.get(key)

    def set_string(self, key: str, value: str) -> None:
        self._data[key] = value


class JSONFileKeyValueStore:
    """
    Key-value store persisted as a single JSON object.

    A missing file reads as empty. Each write replaces the file atomically.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(
                "Ignoring unreadable key-value store",
                extra={"path": str(self.path), "error": str(exc)},
            )
            return {}

        if not isinstance(data, dict):
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def get_string(self, key: str) -> str | None:
        return self._load().get(key)

    def set_string(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)


class CredentialStore:
    """
    Typed access to provider credentials and agents.

    Wraps a string key-value backend using the overlay's key names:
    ``<provider>_api_key``, ``selected_provider`` and ``agents``.
    """

    def __init__(self, backend: KeyValueStore) -> None:
        """
        Initialize the credential store.

        Args:
            backend: Key-value backend
        """
        self.backend = backend

    def get_api_key(self, provider: ProviderType) -> str | None:
        """
        Get the stored API key for a provider.

        Returns:
            Trimmed key, or None when absent or blank
        """
        value = self.backend.get_string(api_key_name(provider))
        if value is None or not value.strip():
            return None
        return value.strip()

    def set_api_key(self, provider: ProviderType, api_key: str) -> None:
        """Store an API key; blank text clears it."""
        self.backend.set_string(api_key_name(provider), api_key.strip())
        logger.info(
            "Provider API key updated",
            extra={"provider": provider.value, "cleared": not api_key.strip()},
        )

    def get_preferred_provider(self) -> str | None:
        """Get the raw stored provider preference."""
        value = self.backend.get_string(SELECTED_PROVIDER_KEY)
        return value or None

    def set_preferred_provider(self, provider: ProviderType) -> None:
        """Store the preferred provider."""
        self.backend.set_string(SELECTED_PROVIDER_KEY, provider.value)

    def list_agents(self) -> list[Agent]:
        """
        List stored agents.

        A malformed ``agents`` value is logged and read as an empty list.
        """
        raw = self.backend.get_string(AGENTS_KEY)
        if not raw:
            return []

        try:
            return _agent_list.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Stored agent list is malformed", extra={"error": str(exc)})
            return []

    def get_agent(self, agent_id: str) -> Agent | None:
        """Get an agent by id."""
        return next((agent for agent in self.list_agents() if agent.id == agent_id), None)

    def create_agent(self, name: str, context: str, system_prompt: str | None = None) -> Agent:
        """
        Create and store an agent.

        Args:
            name: Agent name
            context: Agent context
            system_prompt: Optional system prompt; blank text is stored as absent

        Returns:
            Created agent
        """
        agent = Agent(
            id=generate_agent_id(),
            name=name.strip(),
            context=context.strip(),
            system_prompt=(system_prompt or "").strip() or None,
        )
        self._save_agents([*self.list_agents(), agent])
        logger.info("Agent created", extra={"agent_id": agent.id, "agent_name": agent.name})
        return agent

    def delete_agent(self, agent_id: str) -> bool:
        """
        Delete an agent by id.

        Returns:
            True if an agent was removed
        """
        agents = self.list_agents()
        remaining = [agent for agent in agents if agent.id != agent_id]
        if len(remaining) == len(agents):
            return False

        self._save_agents(remaining)
        logger.info("Agent deleted", extra={"agent_id": agent_id})
        return True

    def seed_default_agent(self) -> Agent | None:
        """
        Create the default Helper Bot agent when no agents exist.

        Returns:
            The seeded agent, or None if agents already exist
        """
        if self.list_agents():
            return None
        return self.create_agent(DEFAULT_AGENT_NAME, DEFAULT_AGENT_CONTEXT)

    def _save_agents(self, agents: list[Agent]) -> None:
        payload = _agent_list.dump_json(agents, by_alias=True, exclude_none=True)
        self.backend.set_string(AGENTS_KEY, payload.decode("utf-8"))
