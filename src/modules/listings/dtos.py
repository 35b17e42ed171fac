"""Listing DTOs for the Service Layer.

``CreateListingDTO`` validates the publishing form; ``UpdateListingDTO``
carries a partial update where ``None`` means "leave unchanged".
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from modules.listings.constants import (
    MAX_PRICE_XAF,
    ListingCategory,
    ListingVisibility,
)


class CreateListingDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    price: int = Field(gt=0, le=MAX_PRICE_XAF)
    delivery_fee: int = Field(default=0, ge=0, le=MAX_PRICE_XAF)
    category: ListingCategory = ListingCategory.OTHER
    condition: str = ""
    image_url: str = ""
    visibility: ListingVisibility = ListingVisibility.PUBLIC
    is_pre_order: bool = False
    expected_arrival: Optional[date] = None
    pre_order_note: str = ""

    @model_validator(mode="after")
    def pre_order_needs_arrival(self):
        if self.is_pre_order and self.expected_arrival is None:
            raise ValueError("Pre-order listings need an expected arrival date.")
        return self


class UpdateListingDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[int] = Field(default=None, gt=0, le=MAX_PRICE_XAF)
    delivery_fee: Optional[int] = Field(default=None, ge=0, le=MAX_PRICE_XAF)
    category: Optional[ListingCategory] = None
    condition: Optional[str] = None
    image_url: Optional[str] = None
    visibility: Optional[ListingVisibility] = None
    is_pre_order: Optional[bool] = None
    expected_arrival: Optional[date] = None
    pre_order_note: Optional[str] = None
    is_active: Optional[bool] = None
