"""Serializers for Category CRUD."""

from rest_framework import serializers

from .models import Category
from .services import create_category, update_category, would_create_cycle


class CategorySerializer(serializers.ModelSerializer):
    parent = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )
    created_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        """Expose category fields; ownership and timestamps are read-only."""
        model = Category
        fields = ["id", "name", "description", "parent", "created_by", "created_at", "updated_at"]
        read_only_fields = ["id", "created_by", "created_at", "updated_at"]
        extra_kwargs = {"description": {"required": False, "allow_null": True, "allow_blank": True}}

    def validate_parent(self, value):
        if self.instance is not None and would_create_cycle(self.instance, value):
            raise serializers.ValidationError("A category cannot be its own ancestor.")
        return value

    def create(self, validated_data):
        return create_category(self.context["request"].user, **validated_data)

    def update(self, instance, validated_data):
        return update_category(instance, **validated_data)


__all__ = ["CategorySerializer"]
