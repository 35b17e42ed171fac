"""Notification DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.notifications.constants import NotificationType
from modules.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            "id",
            "recipient_id",
            "message",
            "type",
            "is_read",
            "transaction_id",
            "created_at",
        ]
        read_only_fields = fields


class MarkReadSerializer(serializers.Serializer):
    """Either explicit ``ids`` or a set of ``types`` to clear."""

    ids = serializers.ListField(child=serializers.UUIDField(), required=False)
    types = serializers.ListField(
        child=serializers.ChoiceField(choices=NotificationType.choices),
        required=False,
    )

    def validate(self, attrs):
        if not attrs.get("ids") and not attrs.get("types"):
            raise serializers.ValidationError("Provide 'ids' or 'types'.")
        return attrs


class TypesQuerySerializer(serializers.Serializer):
    types = serializers.ListField(
        child=serializers.ChoiceField(choices=NotificationType.choices),
        required=False,
    )
