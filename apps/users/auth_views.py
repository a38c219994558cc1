"""Views for authentication flows (token obtain and refresh)."""

from __future__ import annotations

from rest_framework_simplejwt.views import TokenObtainPairView  # type: ignore

from .auth_serializers import AccountTokenObtainSerializer


class TokenObtainView(TokenObtainPairView):
    serializer_class = AccountTokenObtainSerializer
