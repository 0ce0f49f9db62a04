"""Provider configuration endpoints."""

from fastapi import APIRouter, Depends

from quackchat.api.dependencies import get_chat_service, get_credential_store
from quackchat.core.logging import get_logger
from quackchat.models.providers import (
    APIKeyUpdateRequest,
    ConnectionTestResponse,
    ProvidersResponse,
    ProviderType,
    SelectProviderRequest,
)
from quackchat.services.chat import ChatService
from quackchat.services.credentials import CredentialStore

logger = get_logger(__name__)
router = APIRouter(prefix="/providers", tags=["providers"])


def _overview(chat_service: ChatService) -> ProvidersResponse:
    selected = chat_service.get_selected_provider()
    return ProvidersResponse(
        providers=chat_service.get_provider_statuses(),
        available=chat_service.get_available_providers(),
        selected=selected,
        message=chat_service.get_missing_provider_message() if selected is None else None,
    )


@router.get("", response_model=ProvidersResponse)
async def list_providers(
    chat_service: ChatService = Depends(get_chat_service),
) -> ProvidersResponse:
    """
    Get provider availability and the provider used for chat.

    ``message`` explains the problem when no provider is usable.
    """
    return _overview(chat_service)


@router.put("/selected", response_model=ProvidersResponse)
async def select_provider(
    payload: SelectProviderRequest,
    store: CredentialStore = Depends(get_credential_store),
    chat_service: ChatService = Depends(get_chat_service),
) -> ProvidersResponse:
    """
    Store the preferred provider.

    The preference is kept even when the provider has no key yet; selection
    falls back to the first available provider until one is added.
    """
    store.set_preferred_provider(payload.provider)
    logger.info("Preferred provider updated", extra={"provider": payload.provider.value})
    return _overview(chat_service)


@router.put("/{provider}/api-key", response_model=ProvidersResponse)
async def update_api_key(
    provider: ProviderType,
    payload: APIKeyUpdateRequest,
    store: CredentialStore = Depends(get_credential_store),
    chat_service: ChatService = Depends(get_chat_service),
) -> ProvidersResponse:
    """Store or clear a provider API key."""
    store.set_api_key(provider, payload.api_key)
    return _overview(chat_service)


@router.post("/{provider}/test", response_model=ConnectionTestResponse)
async def test_provider(
    provider: ProviderType,
    store: CredentialStore = Depends(get_credential_store),
    chat_service: ChatService = Depends(get_chat_service),
) -> ConnectionTestResponse:
    """
    Check that a provider accepts its stored key.

    A provider without a key reports ``connected: false``.
    """
    if not store.get_api_key(provider):
        return ConnectionTestResponse(provider=provider, connected=False)

    adapter = chat_service.create_adapter(provider)
    connected = await adapter.test_connection()
    logger.info(
        "Provider connection tested",
        extra={"provider": provider.value, "connected": connected},
    )
    return ConnectionTestResponse(provider=provider, connected=connected)
