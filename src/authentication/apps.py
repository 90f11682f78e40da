"""App configuration for authentication components."""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Holds the custom User model, password hashing and token services."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
