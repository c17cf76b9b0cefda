"""Password generation and evaluation API routes.

Both endpoints are public and stateless.
"""

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse

from keybastion.core.logging import get_logger
from keybastion.domain.services.password_forge import (
    GenerationOptions,
    InvalidParametersError,
)
from keybastion.infrastructure.api.dependencies import PasswordForgeDep
from keybastion.infrastructure.api.schemas import (
    ErrorResponse,
    PasswordEvaluationRequest,
    PasswordEvaluationResponse,
    PasswordGenerationRequest,
    PasswordGenerationResponse,
)

logger = get_logger(__name__)

router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.post(
    "/generate",
    response_model=PasswordGenerationResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid parameters"}},
)
async def generate_password(
    request: PasswordGenerationRequest,
    forge: PasswordForgeDep,
) -> PasswordGenerationResponse | JSONResponse:
    """Generate a random password with the requested character classes."""
    options = GenerationOptions(
        length=request.length,
        include_lowercase=request.include_lowercase,
        include_uppercase=request.include_uppercase,
        include_numbers=request.include_numbers,
        include_special=request.include_special,
    )
    try:
        password = forge.generate_with(options)
    except InvalidParametersError as e:
        logger.info("Password generation rejected", length=request.length, reason=str(e))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid parameters", "message": str(e)},
        )

    return PasswordGenerationResponse(
        password=password,
        strength=forge.evaluate_strength(password),
    )


@router.post(
    "/evaluate",
    response_model=PasswordEvaluationResponse,
    responses={400: {"model": ErrorResponse, "description": "Empty password"}},
)
async def evaluate_password(
    request: PasswordEvaluationRequest,
    forge: PasswordForgeDep,
    response: Response,
) -> PasswordEvaluationResponse | JSONResponse:
    """Score a password from 0 to 100."""
    if not request.password:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid parameters", "message": "Password must not be empty"},
            headers=NO_CACHE_HEADERS,
        )

    response.headers.update(NO_CACHE_HEADERS)
    return PasswordEvaluationResponse(strength=forge.evaluate_strength(request.password))
