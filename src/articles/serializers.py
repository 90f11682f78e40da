"""Serializers for Article and Tag CRUD."""

from rest_framework import serializers

from categories.models import Category
from .models import Article, Tag
from .services import create_article, update_article


class TagSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ["id", "name", "color", "created_at"]
        read_only_fields = ["id", "created_at"]
        extra_kwargs = {"color": {"required": False, "allow_null": True, "allow_blank": True}}


class ArticleSerializer(serializers.ModelSerializer):
    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )
    author = serializers.PrimaryKeyRelatedField(read_only=True)
    tags = TagSerializer(many=True, read_only=True)

    class Meta:
        """Expose article fields; authorship, publish time and timestamps are read-only."""
        model = Article
        fields = [
            "id",
            "title",
            "content",
            "category",
            "author",
            "is_published",
            "published_at",
            "tags",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "author", "published_at", "tags", "created_at", "updated_at"]

    def create(self, validated_data):
        return create_article(self.context["request"].user, **validated_data)

    def update(self, instance, validated_data):
        return update_article(instance, **validated_data)


class ArticleTagSerializer(serializers.Serializer):
    tag = serializers.PrimaryKeyRelatedField(queryset=Tag.objects.all())


__all__ = ["ArticleSerializer", "ArticleTagSerializer", "TagSerializer"]
