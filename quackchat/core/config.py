"""Configuration management."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from quackchat.models.providers import ProviderConfig, ProviderType


class ProviderOverrides(BaseModel):
    """Optional overrides applied on top of an adapter's built-in defaults."""

    model: str | None = Field(default=None, description="Primary model")
    fallback_model: str | None = Field(default=None, description="Fallback model")
    max_tokens: int | None = Field(default=None, ge=1, description="Maximum output tokens")
    temperature: float | None = Field(
        default=None, ge=0.0, le=2.0, description="Sampling temperature"
    )

    def apply(self, config: ProviderConfig) -> ProviderConfig:
        """
        Return a copy of ``config`` with the overrides that are set.

        Args:
            config: Adapter default configuration

        Returns:
            Configuration with overrides applied
        """
        updates = self.model_dump(exclude_none=True)
        if not updates:
            return config
        return config.model_copy(update=updates)


class ProvidersConfig(BaseModel):
    """Configuration for all AI providers."""

    timeout_seconds: float = Field(
        default=30.0, gt=0, description="Deadline for a single vendor request"
    )
    openai: ProviderOverrides = Field(default_factory=ProviderOverrides)
    gemini: ProviderOverrides = Field(default_factory=ProviderOverrides)
    claude: ProviderOverrides = Field(default_factory=ProviderOverrides)

    def overrides_for(self, provider: ProviderType) -> ProviderOverrides:
        """Get overrides for a provider."""
        overrides: ProviderOverrides = getattr(self, provider.value)
        return overrides


class StorageConfig(BaseModel):
    """Credential and agent storage configuration."""

    backend: Literal["file", "memory"] = Field(
        default="file", description="Key-value backend: file or memory"
    )
    path: str = Field(default="data/store.json", description="JSON file for the file backend")
    seed_default_agent: bool = Field(
        default=True, description="Create the Helper Bot agent when no agents exist"
    )


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = Field(default="QuackChat", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")

    # Server
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8765, description="Server port")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")

    # CORS
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # AI Providers
    providers: ProvidersConfig = Field(
        default_factory=ProvidersConfig, description="AI provider configurations"
    )

    # Storage
    storage: StorageConfig = Field(
        default_factory=StorageConfig, description="Credential and agent storage"
    )

    # Configuration file path
    config_file: str = Field(
        default="config/main.yaml",
        description="Path to configuration file",
    )

    model_config = SettingsConfigDict(
        env_prefix="QC_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    def load_yaml_config(self) -> dict[str, Any]:
        """
        Load configuration from YAML file.

        Returns:
            Configuration dictionary
        """
        config_path = Path(self.config_file)
        if not config_path.exists():
            return {}

        with open(config_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def merge_yaml_config(self) -> None:
        """Merge YAML configuration into settings."""
        yaml_config = self.load_yaml_config()

        for key, value in yaml_config.items():
            if hasattr(self, key):
                if key == "providers" and isinstance(value, dict):
                    self.providers = ProvidersConfig(**value)
                elif key == "storage" and isinstance(value, dict):
                    self.storage = StorageConfig(**value)
                else:
                    setattr(self, key, value)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Application settings
    """
    settings = Settings()

    if os.path.exists(settings.config_file):
        settings.merge_yaml_config()

    return settings
