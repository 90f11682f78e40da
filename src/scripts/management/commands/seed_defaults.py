"""Seed the default accounts, a sample category and a welcome article."""

from django.core.management.base import BaseCommand

from scripts.seeding import DEFAULT_USERS, reset_defaults, seed_defaults


class Command(BaseCommand):
    help = (
        "Create admin@example.com and user@example.com, a 'General' category "
        "readable by the user, and a welcome article. Safe to run repeatedly. "
        "Use --reset to remove previously seeded data first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Remove the seeded accounts, category and article before seeding again.",
        )

    def handle(self, *args, **options):
        if options.get("reset"):
            self.stdout.write("Resetting previously seeded data...")
            reset_defaults()
            self.stdout.write(self.style.WARNING("Seeded data cleared."))

        self.stdout.write("Seeding default data...")
        seed_defaults()
        for email, password, role in DEFAULT_USERS:
            self.stdout.write(f"  {role}: {email} / {password}")
        self.stdout.write(self.style.SUCCESS("Seed completed."))
