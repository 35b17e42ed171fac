"""Listing domain constants."""

from django.db import models


class ListingVisibility(models.TextChoices):
    PUBLIC = "PUBLIC", "Public"
    PRIVATE = "PRIVATE", "Private"


class ListingCategory(models.TextChoices):
    ELECTRONICS = "electronics", "Electronics"
    FASHION = "fashion", "Fashion"
    HOME = "home", "Home & Garden"
    VEHICLES = "vehicles", "Vehicles"
    OTHER = "other", "Other"


# XAF has no minor unit; amounts are whole francs.
MAX_PRICE_XAF = 100_000_000
