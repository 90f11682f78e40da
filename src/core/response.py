"""JSON error responses for code paths that run outside DRF (middleware)."""

from django.http import JsonResponse
from rest_framework import status


def error_response(message: str, status_code: int) -> JsonResponse:
    """Return the standard `{ "message": ... }` error body."""

    return JsonResponse({"message": message}, status=status_code)


def unauthorized() -> JsonResponse:
    return error_response(
        "Authentication credentials were not provided or are invalid, token revoked, or user is inactive.",
        status.HTTP_401_UNAUTHORIZED,
    )


def service_unavailable() -> JsonResponse:
    return error_response(
        "Authentication service unavailable (blocklist).",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )


__all__ = ["error_response", "unauthorized", "service_unavailable"]
