"""Account DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class SubmitVerificationDTO(BaseModel):
    """Identity details a user submits to become a verified seller."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    full_name: str
    city: str

    @field_validator("full_name", "city")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("This field may not be blank.")
        return v


class ReviewVerificationDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    approve: bool
    reason: str = ""
