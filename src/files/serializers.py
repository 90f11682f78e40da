"""Serializers for file metadata and the multipart upload form."""

from rest_framework import serializers
from rest_framework.reverse import reverse

from articles.models import Article
from categories.models import Category
from .models import File


class FileSerializer(serializers.ModelSerializer):
    file_path = serializers.CharField(source="file.name", read_only=True)
    url = serializers.SerializerMethodField()

    class Meta:
        model = File
        fields = [
            "id",
            "filename",
            "original_name",
            "file_path",
            "url",
            "file_type",
            "file_size",
            "uploaded_by",
            "article",
            "category",
            "uploaded_at",
        ]
        read_only_fields = fields

    def get_url(self, obj) -> str:
        """Download link; the raw storage URL is never handed out."""
        return reverse("file-download", kwargs={"pk": obj.pk}, request=self.context.get("request"))


class UploadSerializer(serializers.Serializer):
    """Optional placement of an upload; the binaries themselves come from ``request.FILES``."""

    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )
    article = serializers.PrimaryKeyRelatedField(
        queryset=Article.objects.all(), required=False, allow_null=True
    )


__all__ = ["FileSerializer", "UploadSerializer"]
