"""User API views."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .serializers import UserLookupSerializer, UserSearchQuerySerializer, UserSerializer
from .services import search_active_users


class MeView(APIView):
    """Returns the profile of the current user."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        return Response(UserSerializer(request.user).data)


class UserSearchView(APIView):
    """Looks up active users to add as reservation participants."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        query = UserSearchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        users = search_active_users(query.validated_data["q"], query.validated_data["limit"])
        return Response({"items": UserLookupSerializer(users, many=True).data})
