"""Provider-related models and enums."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ProviderType(StrEnum):
    """Supported AI provider types, in selection order."""

    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"

    @property
    def label(self) -> str:
        """Short human-readable provider name."""
        return _LABELS[self]


_LABELS = {
    ProviderType.OPENAI: "OpenAI",
    ProviderType.GEMINI: "Gemini",
    ProviderType.CLAUDE: "Claude",
}


class ProviderConfig(BaseModel):
    """Per-adapter model and sampling configuration."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(description="Primary model identifier")
    fallback_model: str = Field(description="Model retried once after a primary failure")
    max_tokens: int = Field(default=1000, ge=1, description="Maximum output tokens")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")


class OpenAIConfig(ProviderConfig):
    """OpenAI chat completions configuration."""

    model: str = "gpt-4-turbo-preview"
    fallback_model: str = "gpt-4"


class GeminiConfig(ProviderConfig):
    """Gemini generateContent configuration."""

    model: str = "gemini-2.0-flash"
    fallback_model: str = "gemini-1.5-flash"
    top_k: int = Field(default=40, ge=1, description="Top-K sampling")
    top_p: float = Field(default=0.95, gt=0.0, le=1.0, description="Nucleus sampling")


class ClaudeConfig(ProviderConfig):
    """Anthropic messages configuration."""

    model: str = "claude-3-5-sonnet-20241022"
    fallback_model: str = "claude-3-sonnet-20240229"


class ProviderStatus(BaseModel):
    """Availability of a provider for the current credentials."""

    provider: ProviderType = Field(description="Provider type")
    display_name: str = Field(description="Provider display name")
    model: str = Field(description="Primary model name")
    available: bool = Field(description="Whether a non-empty API key is stored")
    selected: bool = Field(description="Whether this provider is used for the next send")


class ProvidersResponse(BaseModel):
    """Provider overview returned to the overlay."""

    providers: list[ProviderStatus] = Field(description="Status for every known provider")
    available: list[ProviderType] = Field(description="Providers with a stored API key")
    selected: ProviderType | None = Field(default=None, description="Provider used for chat")
    message: str | None = Field(
        default=None, description="Diagnostic shown when no provider is usable"
    )


class SelectProviderRequest(BaseModel):
    """Store the preferred provider."""

    provider: ProviderType = Field(description="Preferred provider")


class APIKeyUpdateRequest(BaseModel):
    """Store or clear a provider API key."""

    api_key: str = Field(default="", description="API key; blank clears the stored key")


class ConnectionTestResponse(BaseModel):
    """Result of a provider connectivity check."""

    provider: ProviderType = Field(description="Provider checked")
    connected: bool = Field(description="Whether the vendor accepted the request")
