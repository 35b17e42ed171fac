"""Listing model (a seller's post).

Prices are whole XAF.  Listings are soft-deleted so that transactions
opened against them keep a valid reference.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import SoftDeleteModel
from modules.listings.constants import ListingCategory, ListingVisibility


class Listing(SoftDeleteModel):
    seller = models.ForeignKey(
        "accounts.Profile",
        on_delete=models.PROTECT,
        related_name="listings",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    price = models.PositiveIntegerField()
    delivery_fee = models.PositiveIntegerField(default=0)
    category = models.CharField(
        max_length=20,
        choices=ListingCategory.choices,
        default=ListingCategory.OTHER,
    )
    condition = models.CharField(max_length=50, blank=True, default="")
    image_url = models.URLField(blank=True, default="")
    visibility = models.CharField(
        max_length=10,
        choices=ListingVisibility.choices,
        default=ListingVisibility.PUBLIC,
    )
    is_pre_order = models.BooleanField(default=False)
    expected_arrival = models.DateField(null=True, blank=True)
    pre_order_note = models.CharField(max_length=255, blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "listings"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["seller", "-created_at"], name="listings_seller_idx"),
            models.Index(fields=["category"], name="listings_category_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.price} XAF)"
