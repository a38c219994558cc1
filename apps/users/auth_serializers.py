"""Serializers for authentication flows."""

from __future__ import annotations

from rest_framework import exceptions  # type: ignore
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer  # type: ignore

from .models import CustomUser


class AccountTokenObtainSerializer(TokenObtainPairSerializer):
    """Issues JWT pairs only to accounts in good standing."""

    def validate(self, attrs):  # type: ignore
        data = super().validate(attrs)
        user: CustomUser = self.user  # type: ignore
        if user.deleted_at is not None or user.status != CustomUser.Status.ACTIVE:
            raise exceptions.AuthenticationFailed(
                "Account is not active.", code="account_inactive"
            )
        return data

    @classmethod
    def get_token(cls, user):  # type: ignore
        token = super().get_token(user)
        token["email"] = user.email
        return token
