from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import (
    conflict,
    get_current_user,
    get_db_session,
    not_found,
    require_permission,
)
from src.api.schemas.catalog import ProviderCreate, ProviderResponse, ProviderUpdate
from src.api.schemas.users import ActionResponse
from src.domain.models import Identity
from src.domain.errors import ConflictError, NotFoundError
from src.domain.services.catalog import ProviderService

router = APIRouter(prefix="/providers", tags=["Providers"])

# Providers share the course catalog gate
manage_providers = require_permission("create_courses")


@router.get("", response_model=list[ProviderResponse])
async def list_providers(
    active_only: bool = False,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(get_current_user),
) -> list[ProviderResponse]:
    """Return providers ordered by name."""
    providers = await ProviderService(session).list_providers(active_only=active_only)
    return [ProviderResponse.model_validate(provider) for provider in providers]


@router.post("", response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
async def create_provider(
    payload: ProviderCreate,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_providers),
) -> ProviderResponse:
    try:
        provider = await ProviderService(session).create_provider(user, payload.model_dump())
    except ConflictError as exc:
        raise conflict(str(exc)) from exc
    return ProviderResponse.model_validate(provider)


@router.get("/{provider_id}", response_model=ProviderResponse)
async def get_provider(
    provider_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(get_current_user),
) -> ProviderResponse:
    try:
        provider = await ProviderService(session).get_provider(provider_id)
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc
    return ProviderResponse.model_validate(provider)


@router.patch("/{provider_id}", response_model=ProviderResponse)
async def update_provider(
    provider_id: str,
    payload: ProviderUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_providers),
) -> ProviderResponse:
    try:
        provider = await ProviderService(session).update_provider(
            user, provider_id, payload.model_dump(exclude_unset=True)
        )
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc
    except ConflictError as exc:
        raise conflict(str(exc)) from exc
    return ProviderResponse.model_validate(provider)


@router.delete("/{provider_id}", response_model=ActionResponse)
async def delete_provider(
    provider_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: Identity = Depends(manage_providers),
) -> ActionResponse:
    """Delete a provider; its courses stay and lose the provider link."""
    try:
        await ProviderService(session).delete_provider(user, provider_id)
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc
    return ActionResponse(message="Provider deleted")
