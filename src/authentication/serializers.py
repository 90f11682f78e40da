"""Serializers for authentication flows and admin user management."""

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed

from .models import Role
from .passwords import hash_password
from .services import authenticate_credentials

User = get_user_model()


def _password_field(**kwargs):
    return serializers.CharField(
        write_only=True,
        min_length=settings.PASSWORD_MIN_LENGTH,
        max_length=128,
        trim_whitespace=False,
        **kwargs,
    )


class RegisterSerializer(serializers.Serializer):
    """Validate and create a user; ``role`` defaults to ``user``."""

    email = serializers.EmailField(max_length=255)
    password = _password_field()
    role = serializers.ChoiceField(choices=Role.choices, required=False, default=Role.USER)

    @staticmethod
    def validate_email(value):
        """Ensure email is unique before creation."""
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already exists")
        return value

    def create(self, validated_data):
        return User.objects.create_user(**validated_data)


class LoginSerializer(serializers.Serializer):
    """Authenticate a user via email/password."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        """Authenticate credentials and attach the user to validated_data."""
        user = authenticate_credentials(attrs["email"], attrs["password"])
        if user is None:
            raise AuthenticationFailed("Invalid email or password")
        attrs["user"] = user
        return attrs


class UserDetailSerializer(serializers.ModelSerializer):
    """User payload for responses; never includes the password hash."""

    class Meta:
        model = User
        fields = ["id", "email", "role", "is_active", "last_login", "created_at", "updated_at"]
        read_only_fields = fields


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True, trim_whitespace=False)
    new_password = _password_field()

    def validate_current_password(self, value):
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect")
        return value

    def save(self, **kwargs):
        user = self.context["request"].user
        user.password_hash = hash_password(self.validated_data["new_password"])
        user.save(update_fields=["password_hash", "updated_at"])
        return user


class AdminUserSerializer(serializers.ModelSerializer):
    """Admin-facing create/update of users; the password is optional on update."""

    password = _password_field(required=False)

    class Meta:
        model = User
        fields = ["id", "email", "password", "role", "is_active", "last_login", "created_at", "updated_at"]
        read_only_fields = ["id", "last_login", "created_at", "updated_at"]

    def validate_email(self, value):
        qs = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Email already exists")
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})
        return attrs

    def create(self, validated_data):
        return User.objects.create_user(**validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        if password:
            instance.password_hash = hash_password(password)
        return super().update(instance, validated_data)


__all__ = [
    "AdminUserSerializer",
    "LoginSerializer",
    "PasswordChangeSerializer",
    "RegisterSerializer",
    "UserDetailSerializer",
]
