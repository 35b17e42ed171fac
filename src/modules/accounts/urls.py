"""Accounts URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from modules.accounts.views import MeView, ProfileViewSet

router = DefaultRouter(trailing_slash=True)
router.register("profiles", ProfileViewSet, basename="profile")

urlpatterns = [
    path("me", MeView.as_view(), name="me"),
    *router.urls,
]
