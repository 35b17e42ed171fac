"""Transaction URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.transactions.views import TransactionViewSet

router = DefaultRouter(trailing_slash=True)
router.register("transactions", TransactionViewSet, basename="transaction")

urlpatterns = router.urls
