"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from vendor_fakes import FakeVendor

from quackchat.core.config import Settings, StorageConfig
from quackchat.main import create_app
from quackchat.models.providers import ProviderType
from quackchat.services.credentials import CredentialStore, InMemoryKeyValueStore

TEST_KEYS = {
    ProviderType.OPENAI: "sk-test-openai",
    ProviderType.GEMINI: "test-gemini-key",
    ProviderType.CLAUDE: "sk-ant-test",
}


@pytest.fixture
def settings() -> Settings:
    """
    Provide deterministic settings for tests.

    Uses the in-memory backend so tests never touch a local store file.
    """
    return Settings(
        config_file="does-not-exist.yaml",
        storage=StorageConfig(backend="memory", seed_default_agent=False),
    )


@pytest.fixture
def store() -> CredentialStore:
    """Credential store with no keys configured."""
    return CredentialStore(InMemoryKeyValueStore())


@pytest.fixture
def configured_store(store: CredentialStore) -> CredentialStore:
    """Credential store with keys for every provider."""
    for provider, key in TEST_KEYS.items():
        store.set_api_key(provider, key)
    return store


@pytest.fixture
def vendor() -> FakeVendor:
    """Vendor endpoint with no scripted responses; tests append to ``responses``."""
    return FakeVendor()


@pytest.fixture
def client(settings: Settings, store: CredentialStore, vendor: FakeVendor) -> Iterator[TestClient]:
    """
    Create a test client for the FastAPI app.

    Yields:
        TestClient wired to the in-memory store and the fake vendor
    """
    app = create_app(settings=settings, credential_store=store, http_transport=vendor.transport)
    with TestClient(app) as test_client:
        yield test_client
