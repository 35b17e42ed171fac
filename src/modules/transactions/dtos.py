"""Transaction DTOs for the Service Layer.

Framework-agnostic inputs built by the API layer from validated
serializer data.  DTOs are immutable (``frozen=True``).

Action inputs (dropoff company, agent, confirmation code) are allowed to
be blank here: a missing selection is reported by the service as
``InvalidSelection`` so that the check order stays NotFound, then
validation, then authorization.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.transactions.identity import normalize_phone

# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


class CreateTransactionDTO(BaseModel):
    """Open a payment request against a listing.

    When the caller is the listing's seller the ``buyer_*`` fields describe
    the buyer the request is meant for; otherwise the caller is the buyer
    and the fields only add delivery contact details.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    listing_id: UUID
    buyer_name: str = Field(default="", max_length=150)
    buyer_phone: str = Field(default="", max_length=32)
    buyer_email: str = Field(default="", max_length=254)
    buyer_city: str = Field(default="", max_length=100)
    delivery_city: str = Field(default="", max_length=100)
    delivery_address: str = Field(default="", max_length=255)
    delivery_notes: str = ""

    @field_validator("buyer_phone")
    @classmethod
    def phone_must_have_digits(cls, v: str) -> str:
        if v and not normalize_phone(v):
            raise ValueError("Phone number must contain digits.")
        return v


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


class ShipDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    dropoff_company: str = ""
    dropoff_city: str = ""
    dropoff_note: str = ""


class AssignAgentDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    agent_id: str = ""


class ConfirmationCodeDTO(BaseModel):
    """Handoff code typed by the agent (deliver) or the buyer (confirm)."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    code: str = ""

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.upper()


class RecordPaymentDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    reference: str = Field(default="", max_length=100)


class CloseTransactionDTO(BaseModel):
    """Reason given when cancelling or refunding."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    reason: str = ""
