"""App configuration for the access_control Django application."""

from django.apps import AppConfig


class AccessControlConfig(AppConfig):
    """Permission table, authorization resolver and DRF permission classes."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "access_control"
