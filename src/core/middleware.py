"""Middleware to authenticate requests via JWT and Redis blocklist."""

from typing import Optional

from django.contrib.auth.models import AnonymousUser
from django.utils.deprecation import MiddlewareMixin
from rest_framework.exceptions import AuthenticationFailed

from authentication.models import User
from authentication.services import BlocklistUnavailable, TokenService

from .response import service_unavailable, unauthorized


class JWTAuthMiddleware(MiddlewareMixin):
    """Decode the access JWT, check blocklist and token version, attach request.user.

    Requests without a Bearer header continue anonymously; views decide
    whether that is acceptable. A header that is present but invalid is
    rejected right here with 401.
    """

    def process_request(self, request):  # type: ignore[override]
        """Authenticate request using Bearer access token if present."""
        auth_header = request.META.get("HTTP_AUTHORIZATION", "")
        if not auth_header or not auth_header.startswith("Bearer "):
            request.user = AnonymousUser()
            return None

        token = auth_header.split(" ", 1)[1]

        try:
            payload = TokenService.decode_token(token, expected_type="access")
            jti = payload.get("jti")
            if not jti:
                return unauthorized()

            if TokenService.is_token_blocked(jti):
                return unauthorized()

            user = self._get_user(payload.get("sub"))
            if not user or not user.is_active:
                return unauthorized()

            # logout-all and deactivation bump token_version.
            if payload.get("ver") != user.token_version:
                return unauthorized()

            request.user = user
            return None

        except AuthenticationFailed:
            return unauthorized()
        except BlocklistUnavailable:
            return service_unavailable()

    @staticmethod
    def _get_user(user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        try:
            return User.objects.get(id=user_id)
        except (User.DoesNotExist, ValueError):
            return None


__all__ = ["JWTAuthMiddleware"]
