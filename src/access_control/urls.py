"""Routing for permission administration endpoints."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import PermissionViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r"permissions", PermissionViewSet, basename="permission")

urlpatterns = [
    path("", include(router.urls)),
]
