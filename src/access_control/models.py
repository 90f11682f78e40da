"""Per-user, per-category permission grants."""

from django.conf import settings
from django.db import models


class PermissionType(models.TextChoices):
    READ = "read", "Read"
    WRITE = "write", "Write"
    NONE = "none", "None"


class Permission(models.Model):
    """Current grant of ``permission_type`` to ``user`` on ``category``.

    One row per (user, category); setting a new type replaces the old one.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="category_permissions"
    )
    category = models.ForeignKey(
        "categories.Category", on_delete=models.CASCADE, related_name="permissions"
    )
    permission_type = models.CharField(max_length=50, choices=PermissionType.choices)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "category"], name="user_category_unique"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.user_id} -> {self.category_id}: {self.permission_type}"


__all__ = ["Permission", "PermissionType"]
