"""Bridge between the JWT middleware and DRF's authentication hook.

``JWTAuthMiddleware`` has already validated the bearer token and attached the
caller to the Django request. This authenticator only surfaces that caller to
DRF, and advertises the Bearer scheme so DRF answers missing credentials with
401 rather than 403.
"""

from typing import Any, Optional, Tuple

from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Expose ``request._request.user`` (set by middleware) to DRF."""

    def authenticate(self, request) -> Optional[Tuple[Any, None]]:
        django_request = getattr(request, "_request", None)
        user = getattr(django_request, "user", None)
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        return user, None

    def authenticate_header(self, request) -> str:
        return 'Bearer realm="api"'


__all__ = ["MiddlewareUserAuthentication"]
