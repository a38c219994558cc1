"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Profile of the signed-in user."""

    display_name = serializers.ReadOnlyField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "display_name",
            "first_name",
            "last_name",
            "student_number",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class UserLookupSerializer(serializers.ModelSerializer):
    """Short representation used by the participant picker."""

    display_name = serializers.ReadOnlyField()

    class Meta:
        model = User
        fields = ["id", "display_name", "student_number"]
        read_only_fields = fields


class UserSearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=100, default="")
    limit = serializers.IntegerField(required=False, min_value=1, max_value=20, default=20)
