"""Pydantic schemas for credential endpoints.

Credential responses never carry the secret or its ciphertext; the password
field is always the ``[PROTECTED]`` placeholder.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

PROTECTED_PLACEHOLDER = "[PROTECTED]"


class SaveCredentialRequest(BaseModel):
    """Request body for storing a credential."""

    model_config = ConfigDict(populate_by_name=True)

    account_name: str = Field(..., min_length=1, max_length=255, alias="accountName")
    password: str = Field(..., min_length=1)
    service_url: str = Field(..., min_length=1, max_length=1024, alias="serviceUrl")
    notes: str | None = None
    category_id: str | None = Field(None, alias="categoryId")

    password_length: int | None = Field(None, alias="passwordLength")
    include_lowercase: bool | None = Field(None, alias="includeLowercase")
    include_uppercase: bool | None = Field(None, alias="includeUppercase")
    include_numbers: bool | None = Field(None, alias="includeNumbers")
    include_special: bool | None = Field(None, alias="includeSpecial")
    password_strength: int | None = Field(None, ge=0, le=100, alias="passwordStrength")


class CredentialResponse(BaseModel):
    """Credential metadata."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    account_name: str = Field(..., alias="accountName")
    password: str = PROTECTED_PLACEHOLDER
    service_url: str = Field(..., alias="serviceUrl")
    notes: str | None = None
    category_id: str | None = Field(None, alias="categoryId")
    password_length: int | None = Field(None, alias="passwordLength")
    include_lowercase: bool | None = Field(None, alias="includeLowercase")
    include_uppercase: bool | None = Field(None, alias="includeUppercase")
    include_numbers: bool | None = Field(None, alias="includeNumbers")
    include_special: bool | None = Field(None, alias="includeSpecial")
    password_strength: int | None = Field(None, alias="passwordStrength")
    created_at: datetime | None = Field(None, alias="createdAt")
