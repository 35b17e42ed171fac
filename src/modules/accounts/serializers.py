"""Profile DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.constants import ROLE_PRIORITY, Role
from modules.accounts.models import Profile


class SubmitVerificationSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=150)
    city = serializers.CharField(max_length=100)


class RejectVerificationSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, default="", allow_blank=True)


class GrantRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=Role.choices)


class ProfileSerializer(serializers.ModelSerializer):
    roles = serializers.SerializerMethodField()
    primary_role = serializers.CharField(read_only=True)
    acting_role = serializers.CharField(read_only=True)

    class Meta:
        model = Profile
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "city",
            "avatar_url",
            "verification_status",
            "roles",
            "primary_role",
            "acting_role",
            "created_at",
        ]
        read_only_fields = fields

    def get_roles(self, obj: Profile) -> list[str]:
        return [role for role in ROLE_PRIORITY if role in obj.roles]


class AgentSerializer(serializers.ModelSerializer):
    """Compact view used when an admin picks a delivery agent."""

    class Meta:
        model = Profile
        fields = ["id", "name", "phone", "city"]
        read_only_fields = fields
