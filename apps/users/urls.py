"""URL declarations for the users app."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import MeView, UserSearchView

urlpatterns = [
    path('me/', MeView.as_view(), name='user-me'),
    path('search/', UserSearchView.as_view(), name='user-search'),
]
