"""Listing DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.listings.constants import MAX_PRICE_XAF, ListingCategory, ListingVisibility
from modules.listings.models import Listing


class ListingInputSerializer(serializers.Serializer):
    """Validates create (all required fields) and partial update payloads."""

    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.IntegerField(min_value=1, max_value=MAX_PRICE_XAF)
    delivery_fee = serializers.IntegerField(
        required=False, min_value=0, max_value=MAX_PRICE_XAF
    )
    category = serializers.ChoiceField(choices=ListingCategory.choices, required=False)
    condition = serializers.CharField(required=False, allow_blank=True, max_length=50)
    image_url = serializers.URLField(required=False, allow_blank=True)
    visibility = serializers.ChoiceField(
        choices=ListingVisibility.choices, required=False
    )
    is_pre_order = serializers.BooleanField(required=False)
    expected_arrival = serializers.DateField(required=False, allow_null=True)
    pre_order_note = serializers.CharField(
        required=False, allow_blank=True, max_length=255
    )
    is_active = serializers.BooleanField(required=False)


class ListingSerializer(serializers.ModelSerializer):
    seller_name = serializers.CharField(source="seller.name", read_only=True)
    seller_city = serializers.CharField(source="seller.city", read_only=True)

    class Meta:
        model = Listing
        fields = [
            "id",
            "seller_id",
            "seller_name",
            "seller_city",
            "title",
            "description",
            "price",
            "delivery_fee",
            "category",
            "condition",
            "image_url",
            "visibility",
            "is_pre_order",
            "expected_arrival",
            "pre_order_note",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
