"""Authentication endpoints (register, login, refresh, logout, profile) and admin user management."""

import logging
from typing import Any

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import AuthenticationFailed, PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from access_control.permissions import IsAdminRole
from .models import Role
from .serializers import (
    AdminUserSerializer,
    LoginSerializer,
    PasswordChangeSerializer,
    RegisterSerializer,
    UserDetailSerializer,
)
from .services import TokenService

logger = logging.getLogger(__name__)

User = get_user_model()


class RegisterView(APIView):
    permission_classes: list[Any] = []

    def post(self, request):
        """Register a new user and return their profile.

        Asking for the admin role needs an admin caller unless
        ``ALLOW_ADMIN_SELF_REGISTRATION`` is enabled.
        """
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if serializer.validated_data.get("role") == Role.ADMIN and not _may_grant_admin(request):
            raise PermissionDenied()
        user = serializer.save()
        return Response(UserDetailSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes: list[Any] = []

    def post(self, request):
        """Authenticate and return the user together with access + refresh tokens."""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        access, refresh = TokenService.generate_tokens(user)
        return Response(
            {"user": UserDetailSerializer(user).data, "access": access, "refresh": refresh}
        )


class RefreshView(APIView):
    permission_classes: list[Any] = []

    def post(self, request):
        """Exchange a valid refresh token for new access/refresh tokens."""
        refresh_token = request.data.get("refresh")
        if not refresh_token:
            raise AuthenticationFailed("Refresh token required")

        payload = TokenService.decode_token(refresh_token, expected_type="refresh")
        if TokenService.is_token_blocked(payload.get("jti", "")):
            raise AuthenticationFailed("Refresh token revoked")

        user = _get_active_user(payload.get("sub"))
        if not user:
            raise AuthenticationFailed("User not found or inactive")

        if payload.get("ver") != user.token_version:
            raise AuthenticationFailed("Invalid or revoked refresh token")

        # Refresh tokens are single use.
        TokenService.block_token(payload["jti"], payload["exp"])
        access, new_refresh = TokenService.generate_tokens(user)
        return Response({"access": access, "refresh": new_refresh})


class LogoutView(APIView):
    """Invalidate the current access token by blocklisting its jti."""

    def post(self, request):
        token = _get_bearer_token(request)
        payload = TokenService.decode_token(token, expected_type="access")
        TokenService.block_token(payload["jti"], payload["exp"])
        return Response(status=status.HTTP_204_NO_CONTENT)


class LogoutAllView(APIView):
    """Invalidate all existing tokens for the current user across devices."""

    def post(self, request):
        TokenService.revoke_all(request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CurrentUserView(APIView):
    def get(self, request):
        """Return the current user's profile."""
        return Response(UserDetailSerializer(request.user).data)


class PasswordChangeView(APIView):
    def post(self, request):
        """Change the caller's password; other sessions stay valid."""
        serializer = PasswordChangeSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(status=status.HTTP_204_NO_CONTENT)


class UserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Admin-only user management; DELETE deactivates instead of removing the row."""

    serializer_class = AdminUserSerializer
    permission_classes = [IsAdminRole]
    queryset = User.objects.all()

    def update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.token_version = (instance.token_version or 1) + 1
        instance.save(update_fields=["is_active", "token_version", "updated_at"])
        logger.info("User %s deactivated by %s", instance.pk, self.request.user.pk)


def _may_grant_admin(request) -> bool:
    if getattr(settings, "ALLOW_ADMIN_SELF_REGISTRATION", False):
        return True
    caller = getattr(request, "user", None)
    return bool(getattr(caller, "is_authenticated", False) and getattr(caller, "is_admin", False))


def _get_active_user(user_id):
    """Retrieve an active user by id, or None if missing/inactive."""
    if not user_id:
        return None
    try:
        user = User.objects.get(id=user_id)
    except (User.DoesNotExist, ValueError):
        return None
    if not user.is_active:
        return None
    return user


def _get_bearer_token(request) -> str | None:
    """Extract the Bearer token from Authorization header if present."""
    auth_header = request.META.get("HTTP_AUTHORIZATION", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1]
    return None
