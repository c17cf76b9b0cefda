"""Credential security API routes.

Security PIN setup and the PIN-gated reveal of a stored secret.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from keybastion.application.services.pin_gate import (
    CredentialNotFoundError,
    InvalidPinFormatError,
    PinMismatchError,
    PinNotSetError,
)
from keybastion.core.logging import get_logger
from keybastion.infrastructure.api.dependencies import AuthenticatedPrincipal, PinGateDep
from keybastion.infrastructure.api.routes.passwords_router import NO_CACHE_HEADERS
from keybastion.infrastructure.api.schemas import (
    ErrorResponse,
    PinRequest,
    PinRequiredResponse,
    RevealResponse,
    SetPinResponse,
)
from keybastion.infrastructure.persistence.database import get_db_session
from keybastion.infrastructure.security.secret_cipher import CryptoError

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/set-pin",
    response_model=SetPinResponse,
    responses={400: {"model": ErrorResponse, "description": "PIN must be 4 to 6 digits"}},
)
async def set_pin(
    request: PinRequest,
    principal: AuthenticatedPrincipal,
    pin_gate: PinGateDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> SetPinResponse | JSONResponse:
    """Set or replace the caller's security PIN."""
    try:
        await pin_gate.set_pin(principal.id, request.pin or "")
    except InvalidPinFormatError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid PIN format", "message": str(e)},
        )
    except CredentialNotFoundError:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Not found", "message": "Principal not found"},
        )

    await session.commit()
    return SetPinResponse(message="Security PIN set successfully")


@router.post(
    "/credentials/{credential_id}/verify-pin",
    response_model=RevealResponse,
    responses={
        400: {"model": ErrorResponse, "description": "PIN is required"},
        401: {"model": ErrorResponse, "description": "Invalid PIN"},
        403: {"model": PinRequiredResponse, "description": "Security PIN not set"},
        404: {"model": ErrorResponse, "description": "Credential not found"},
        500: {"model": ErrorResponse, "description": "Stored secret could not be decrypted"},
    },
)
async def verify_pin_and_reveal(
    credential_id: str,
    request: PinRequest,
    principal: AuthenticatedPrincipal,
    pin_gate: PinGateDep,
    response: Response,
) -> RevealResponse | JSONResponse:
    """Check the caller's PIN and return the credential's decrypted secret."""
    if not request.pin:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "PIN is required"},
        )

    try:
        plaintext = await pin_gate.authorize_reveal(principal.id, credential_id, request.pin)
    except PinNotSetError:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={
                "error": "Security PIN not set",
                "needsPin": True,
                "message": "Set a security PIN before viewing passwords",
            },
        )
    except PinMismatchError:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Invalid PIN"},
        )
    except CredentialNotFoundError:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Credential not found"},
        )
    except CryptoError:
        logger.error(
            "Stored secret could not be decrypted",
            principal_id=principal.id,
            credential_id=credential_id,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Decryption failed"},
            headers=NO_CACHE_HEADERS,
        )

    response.headers.update(NO_CACHE_HEADERS)
    return RevealResponse(password=plaintext)
