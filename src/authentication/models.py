"""Custom User model: email identity, scrypt/bcrypt password hash, global role.

Django's groups/permissions (PermissionsMixin) are not used; fine-grained
access lives in ``access_control.Permission`` rows per category.
"""

from typing import ClassVar, Optional

from django.contrib.auth.models import AbstractBaseUser
from django.db import models

from .managers import UserManager
from .passwords import hash_password, verify_password


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    USER = "user", "User"


class User(AbstractBaseUser):
    """User identified by email; ``role`` overrides per-category permissions for admins."""

    # The hash lives in password_hash; drop AbstractBaseUser's password column.
    password = None

    email = models.EmailField(max_length=255, unique=True)
    password_hash = models.CharField(max_length=255)
    role = models.CharField(max_length=50, choices=Role.choices, default=Role.USER)
    is_active = models.BooleanField(default=True)
    token_version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS: ClassVar[list[str]] = []

    objects = UserManager()

    class Meta:
        ordering = ["created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.email

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def set_password(self, raw_password: Optional[str]) -> None:  # type: ignore[override]
        """Store a scrypt hash; ``None`` leaves an unusable empty hash."""

        self.password_hash = "" if raw_password is None else hash_password(raw_password)

    def check_password(self, raw_password: Optional[str]) -> bool:  # type: ignore[override]
        if raw_password is None:
            return False
        return verify_password(raw_password, self.password_hash)


__all__ = ["Role", "User"]
