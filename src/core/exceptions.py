"""Error taxonomy and the exception handler producing `{ "message": ... }` bodies."""

import logging
from typing import Any

from django.conf import settings
from django.db import DatabaseError, IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.views import set_rollback

from authentication.services import BlocklistUnavailable

logger = logging.getLogger(__name__)

UNAUTHENTICATED_MESSAGE = (
    "Authentication credentials were not provided or are invalid, token revoked, or user is inactive."
)
FORBIDDEN_MESSAGE = "You do not have permission to perform this action on this resource."
UNEXPECTED_MESSAGE = "Internal server error."


class ConflictError(APIException):
    """A unique constraint or referential rule prevents the write."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state of the resource."
    default_code = "conflict"


def _first_message(detail: Any) -> str:
    """Flatten DRF error detail (dict/list/str) into one human-readable line."""

    if isinstance(detail, dict):
        if "detail" in detail:
            return _first_message(detail["detail"])
        for field, value in detail.items():
            message = _first_message(value)
            if field == "non_field_errors":
                return message
            return f"{field}: {message}"
        return "Invalid input."
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid input."
    return str(detail)


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Map every error to `{ "message": str }` with the status carrying the class.

    - 400 validation (also carries the field-level `errors`), 401 unauthenticated,
      403 unauthorized, 404 not found, 409 conflict.
    - Blocklist outages fail closed with 503.
    - Anything else is logged with its traceback and answered with a generic 500.
    """

    if isinstance(exc, BlocklistUnavailable):
        return Response(
            {"message": "Authentication service unavailable (blocklist)."},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, (IntegrityError, ProtectedError)):
        exc = ConflictError()

    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled %s in %s",
            type(exc).__name__,
            type(view).__name__ if view is not None else "unknown view",
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        set_rollback()
        message = UNEXPECTED_MESSAGE
        if isinstance(exc, DatabaseError):
            message = "Storage error, please retry later."
        return Response({"message": message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    # DRF reports NotAuthenticated as 403 when no authenticate header is set.
    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    if response.status_code == status.HTTP_401_UNAUTHORIZED:
        if getattr(settings, "DEBUG_AUTH_ERRORS", False):
            body = {"message": _first_message(response.data)}
        else:
            body = {"message": UNAUTHENTICATED_MESSAGE}
    elif response.status_code == status.HTTP_403_FORBIDDEN:
        body = {"message": FORBIDDEN_MESSAGE}
    elif isinstance(exc, ValidationError):
        body = {"message": _first_message(response.data), "errors": response.data}
    else:
        body = {"message": _first_message(response.data)}

    response.data = body
    return response


__all__ = ["ConflictError", "custom_exception_handler"]
