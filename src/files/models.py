"""Uploaded file metadata; the bytes live in Django's default storage."""

from django.conf import settings
from django.db import models


class File(models.Model):
    """An uploaded binary, optionally attached to an article or a category."""

    filename = models.CharField(max_length=255)
    original_name = models.CharField(max_length=255)
    file = models.FileField(upload_to="files/%Y/%m", max_length=500)
    file_type = models.CharField(max_length=255, blank=True)
    file_size = models.BigIntegerField(default=0)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="uploaded_files",
    )
    article = models.ForeignKey(
        "articles.Article",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="files",
    )
    category = models.ForeignKey(
        "categories.Category",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="files",
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-uploaded_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.original_name


__all__ = ["File"]
