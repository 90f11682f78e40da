"""DRF permission classes mapping HTTP methods onto resolver operations."""

from rest_framework import permissions

from .resolver import Operation, can_access


class IsAuthenticatedCaller(permissions.BasePermission):
    """Any active, token-authenticated user."""

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        return bool(user and getattr(user, "is_authenticated", False))


class IsAdminRole(IsAuthenticatedCaller):
    """Global admin role only."""

    def has_permission(self, request, view) -> bool:
        return super().has_permission(request, view) and getattr(request.user, "is_admin", False)


class ResolverPermission(IsAuthenticatedCaller):
    """Object-level check delegating to ``access_control.resolver.can_access``.

    DRF runs this after ``get_object`` has found the row, so a missing id
    yields 404 before any authorization decision is made.
    """

    METHOD_OPERATIONS = {
        "GET": Operation.READ,
        "HEAD": Operation.READ,
        "OPTIONS": Operation.READ,
        "POST": Operation.WRITE,
        "PUT": Operation.WRITE,
        "PATCH": Operation.WRITE,
        "DELETE": Operation.DELETE,
    }

    def has_object_permission(self, request, view, obj) -> bool:
        # Views may pin an operation per action (e.g. untagging is a write, not a delete).
        overrides = getattr(view, "resolver_operations", {})
        operation = overrides.get(getattr(view, "action", None)) or self.METHOD_OPERATIONS.get(request.method)
        if operation is None:
            return False
        return can_access(request.user, obj, operation)


__all__ = ["IsAdminRole", "IsAuthenticatedCaller", "ResolverPermission"]
