"""Credential API routes.

Stores credentials for the authenticated principal and lists their metadata.
Secrets are never returned from these endpoints; see the credential security
routes for the PIN-gated reveal.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from keybastion.core.logging import get_logger
from keybastion.domain.services.password_forge import GenerationOptions
from keybastion.infrastructure.api.dependencies import (
    AuthenticatedPrincipal,
    CredentialServiceDep,
)
from keybastion.infrastructure.api.schemas import CredentialResponse, SaveCredentialRequest
from keybastion.infrastructure.persistence.database import get_db_session
from keybastion.infrastructure.persistence.models import CredentialModel

logger = get_logger(__name__)

router = APIRouter()


def _to_response(credential: CredentialModel) -> CredentialResponse:
    return CredentialResponse(
        id=credential.id,
        account_name=credential.account_name,
        service_url=credential.service_url,
        notes=credential.notes,
        category_id=credential.category_id,
        password_length=credential.password_length,
        include_lowercase=credential.include_lowercase,
        include_uppercase=credential.include_uppercase,
        include_numbers=credential.include_numbers,
        include_special=credential.include_special,
        password_strength=credential.password_strength,
        created_at=credential.created_at,
    )


def _generation_options(request: SaveCredentialRequest) -> GenerationOptions | None:
    if request.password_length is None:
        return None
    return GenerationOptions(
        length=request.password_length,
        include_lowercase=bool(request.include_lowercase),
        include_uppercase=bool(request.include_uppercase),
        include_numbers=bool(request.include_numbers),
        include_special=bool(request.include_special),
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CredentialResponse,
)
async def save_credential(
    request: SaveCredentialRequest,
    principal: AuthenticatedPrincipal,
    service: CredentialServiceDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> CredentialResponse:
    """Encrypt and store a credential owned by the caller."""
    credential = await service.create(
        owner_id=principal.id,
        account_name=request.account_name,
        password=request.password,
        service_url=request.service_url,
        notes=request.notes,
        category_id=request.category_id,
        generation=_generation_options(request),
        password_strength=request.password_strength,
    )
    await session.commit()
    await session.refresh(credential)
    return _to_response(credential)


@router.get("", response_model=list[CredentialResponse])
async def list_credentials(
    principal: AuthenticatedPrincipal,
    service: CredentialServiceDep,
) -> list[CredentialResponse]:
    """List the caller's own credentials without their secrets."""
    credentials = await service.list_for_owner(principal.id)
    return [_to_response(c) for c in credentials]
