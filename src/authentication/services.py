"""Credential checks with lazy hash upgrade, and the JWT token service."""

import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Tuple

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from django.utils import timezone as django_timezone
from rest_framework.exceptions import AuthenticationFailed

from core.redis_client import get_redis_client

from .passwords import hash_password, is_legacy_hash, verify_password

logger = logging.getLogger(__name__)


class BlocklistUnavailable(Exception):
    """Raised when Redis blocklist cannot be checked (fail-closed)."""


def authenticate_credentials(email: str, password: str):
    """Return the active user matching ``email``/``password``, else None.

    A successful match against a legacy bcrypt hash re-hashes the password
    with scrypt. That upgrade runs in its own savepoint; if the write fails
    it is logged and the login still succeeds.
    """
    User = get_user_model()
    user = User.objects.get_by_email(email)
    if user is None or not user.is_active:
        return None

    stored = user.password_hash
    if not verify_password(password, stored):
        return None

    if is_legacy_hash(stored):
        upgrade_password_hash(user, password)

    user.last_login = django_timezone.now()
    User.objects.filter(pk=user.pk).update(last_login=user.last_login)
    return user


def upgrade_password_hash(user, raw_password: str) -> bool:
    """Persist a current-scheme hash for ``user``; never raises on storage errors."""
    new_hash = hash_password(raw_password)
    try:
        with transaction.atomic():
            type(user).objects.filter(pk=user.pk).update(password_hash=new_hash)
    except DatabaseError:
        logger.warning("Password hash upgrade failed for user %s", user.pk, exc_info=True)
        return False
    user.password_hash = new_hash
    logger.info("Upgraded legacy password hash for user %s", user.pk)
    return True


class TokenService:
    """Handle JWT issuance, decoding, and blocklist operations."""

    ALGORITHM = "HS256"
    BLOCKLIST_PREFIX = "blocklist:token:"

    @classmethod
    def access_ttl(cls) -> timedelta:
        return timedelta(minutes=settings.ACCESS_TOKEN_TTL_MINUTES)

    @classmethod
    def refresh_ttl(cls) -> timedelta:
        return timedelta(hours=settings.REFRESH_TOKEN_TTL_HOURS)

    @classmethod
    def generate_tokens(cls, user) -> Tuple[str, str]:
        """Generate signed access and refresh tokens for the given user."""

        now = datetime.now(timezone.utc)
        access_payload = cls._build_payload(user, "access", now, cls.access_ttl())
        refresh_payload = cls._build_payload(user, "refresh", now, cls.refresh_ttl())

        access_token = jwt.encode(access_payload, settings.SECRET_KEY, algorithm=cls.ALGORITHM)
        refresh_token = jwt.encode(refresh_payload, settings.SECRET_KEY, algorithm=cls.ALGORITHM)
        return access_token, refresh_token

    @classmethod
    def _build_payload(cls, user, token_type: str, issued_at: datetime, ttl: timedelta) -> dict[str, Any]:
        exp = issued_at + ttl
        return {
            "sub": str(user.id),
            "jti": str(uuid.uuid4()),
            "exp": int(exp.timestamp()),
            "iat": int(issued_at.timestamp()),
            "role": user.role,
            "type": token_type,
            "ver": user.token_version,
        }

    @classmethod
    def decode_token(cls, token: str, expected_type: str | None = None) -> dict[str, Any]:
        """Decode and validate a JWT; optionally enforce token type."""

        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[cls.ALGORITHM])
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationFailed("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationFailed("Invalid token") from exc

        if expected_type and payload.get("type") != expected_type:
            raise AuthenticationFailed("Invalid token type")

        return payload

    @classmethod
    def block_token(cls, jti: str, exp: int) -> None:
        """Add token jti to blocklist until its expiration timestamp."""

        client = get_redis_client()
        ttl_seconds = max(1, exp - int(time.time()))
        try:
            client.setex(f"{cls.BLOCKLIST_PREFIX}{jti}", ttl_seconds, "1")
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while blocklisting") from exc

    @classmethod
    def is_token_blocked(cls, jti: str) -> bool:
        """Check if a token jti is present in the blocklist."""

        client = get_redis_client()
        try:
            return client.get(f"{cls.BLOCKLIST_PREFIX}{jti}") is not None
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while checking blocklist") from exc

    @staticmethod
    def revoke_all(user) -> None:
        """Invalidate every token issued to ``user`` so far."""
        user.token_version = (user.token_version or 1) + 1
        user.save(update_fields=["token_version", "updated_at"])


__all__ = [
    "BlocklistUnavailable",
    "TokenService",
    "authenticate_credentials",
    "upgrade_password_hash",
]
