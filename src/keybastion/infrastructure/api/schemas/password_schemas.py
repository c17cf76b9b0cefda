"""Pydantic schemas for password generation and evaluation."""

from pydantic import BaseModel, ConfigDict, Field

from keybastion.domain.services.password_forge import DEFAULT_LENGTH, MAX_LENGTH


class PasswordGenerationRequest(BaseModel):
    """Request body for password generation. Every field has a default."""

    model_config = ConfigDict(populate_by_name=True)

    length: int = Field(
        DEFAULT_LENGTH,
        description=f"Number of characters, at most {MAX_LENGTH}",
        json_schema_extra={"maximum": MAX_LENGTH},
    )
    include_lowercase: bool = Field(True, alias="includeLowercase")
    include_uppercase: bool = Field(True, alias="includeUppercase")
    include_numbers: bool = Field(True, alias="includeNumbers")
    include_special: bool = Field(True, alias="includeSpecial")


class PasswordGenerationResponse(BaseModel):
    """A generated password with its strength score."""

    password: str
    strength: int = Field(..., ge=0, le=100)


class PasswordEvaluationRequest(BaseModel):
    """Request body for strength evaluation."""

    password: str | None = None


class PasswordEvaluationResponse(BaseModel):
    """Strength score of a password."""

    strength: int = Field(..., ge=0, le=100)
