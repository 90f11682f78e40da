from django.apps import AppConfig
from django.db.models.signals import post_migrate


class ScriptsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "scripts"

    def ready(self):
        from .seeding import seed_after_migrate

        post_migrate.connect(seed_after_migrate, sender=self)
