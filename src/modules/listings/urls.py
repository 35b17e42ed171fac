"""Listing URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.listings.views import ListingViewSet

router = DefaultRouter(trailing_slash=True)
router.register("listings", ListingViewSet, basename="listing")

urlpatterns = router.urls
