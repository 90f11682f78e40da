"""Category tree that scopes articles and per-user permissions."""

from django.conf import settings
from django.db import models


class Category(models.Model):
    """Named node in the knowledge-base hierarchy."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_categories",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name

    def ancestor_ids(self) -> list[int]:
        """Walk ``parent`` links upward; stops if a loop is already present."""
        seen: list[int] = []
        node = self.parent
        while node is not None and node.pk not in seen and node.pk != self.pk:
            seen.append(node.pk)
            node = node.parent
        return seen


__all__ = ["Category"]
