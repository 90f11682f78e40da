"""URL patterns for authentication and user management endpoints."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import (
    CurrentUserView,
    LoginView,
    LogoutAllView,
    LogoutView,
    PasswordChangeView,
    RefreshView,
    RegisterView,
    UserViewSet,
)

router = SimpleRouter(trailing_slash=False)
router.register(r"users", UserViewSet, basename="user")

urlpatterns = [
    path("register", RegisterView.as_view(), name="auth-register"),
    path("login", LoginView.as_view(), name="auth-login"),
    path("token/refresh", RefreshView.as_view(), name="auth-refresh"),
    path("logout", LogoutView.as_view(), name="auth-logout"),
    path("logout-all", LogoutAllView.as_view(), name="auth-logout-all"),
    path("user", CurrentUserView.as_view(), name="auth-user"),
    path("user/password", PasswordChangeView.as_view(), name="auth-password"),
    path("", include(router.urls)),
]
