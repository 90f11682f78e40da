"""Serializers for the per-category Permission table."""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from categories.models import Category
from .models import Permission, PermissionType
from .services import set_user_permission, update_permission


class PermissionSerializer(serializers.ModelSerializer):
    """Admin payload for Permission rows.

    ``user`` and ``category`` are primary keys; ``permission_type`` must be one
    of ``read``, ``write`` or ``none``.
    """

    user = serializers.PrimaryKeyRelatedField(queryset=get_user_model().objects.all())
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all())
    permission_type = serializers.ChoiceField(choices=PermissionType.choices)

    class Meta:
        model = Permission
        fields = ["id", "user", "category", "permission_type", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]
        # Creation is an upsert, so the pair's uniqueness is handled by the service.
        validators = []

    def validate(self, attrs):
        """Moving an existing row onto another row's (user, category) pair is rejected."""
        if self.instance is None:
            return attrs
        user = attrs.get("user", self.instance.user)
        category = attrs.get("category", self.instance.category)
        clash = Permission.objects.filter(user=user, category=category).exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError("Permission for this user and category already exists.")
        return attrs

    def create(self, validated_data):
        permission, created = set_user_permission(
            validated_data["user"], validated_data["category"], validated_data["permission_type"]
        )
        self.created = created
        return permission

    def update(self, instance, validated_data):
        return update_permission(instance, **validated_data)


__all__ = ["PermissionSerializer"]
