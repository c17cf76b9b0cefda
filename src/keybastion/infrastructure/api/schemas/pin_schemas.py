"""Pydantic schemas for the PIN gate endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class PinRequest(BaseModel):
    """Request body carrying a security PIN.

    Format is checked by the PIN gate, not here, so a bad PIN yields the
    gate's error body.
    """

    pin: str | None = None


class SetPinResponse(BaseModel):
    """Confirmation of a PIN change."""

    message: str


class RevealResponse(BaseModel):
    """The decrypted secret of a credential."""

    password: str


class PinRequiredResponse(BaseModel):
    """Body returned when the principal has no PIN yet."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    needs_pin: bool = Field(True, alias="needsPin")
    message: str
