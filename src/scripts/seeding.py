"""Default accounts and sample content for a fresh install."""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from access_control.models import PermissionType
from access_control.services import set_user_permission
from articles.models import Article
from categories.models import Category
from categories.services import create_category

logger = logging.getLogger(__name__)

DEFAULT_USERS = (
    ("admin@example.com", "admin123", "admin"),
    ("user@example.com", "user123", "user"),
)
SAMPLE_CATEGORY = "General"
WELCOME_TITLE = "Welcome to the knowledge base"
WELCOME_CONTENT = (
    "<p>This article was created by the seeder. Organise articles into "
    "categories and grant users read or write access per category.</p>"
)


def seed_default_users() -> dict:
    """Create the demo admin and user if missing; returns ``{role: user}``."""
    User = get_user_model()
    users = {}
    for email, password, role in DEFAULT_USERS:
        user = User.objects.get_by_email(email)
        if user is None:
            user = User.objects.create_user(email, password, role=role)
            logger.info("Created default %s account %s", role, email)
        users[role] = user
    return users


def seed_sample_content(admin, member) -> Category:
    """A "General" category owned by ``admin``, readable by ``member``, with one article."""
    category = Category.objects.filter(name=SAMPLE_CATEGORY, parent__isnull=True).first()
    if category is None:
        category = create_category(admin, name=SAMPLE_CATEGORY, description="Default category")
    set_user_permission(member, category, PermissionType.READ)
    Article.objects.get_or_create(
        title=WELCOME_TITLE,
        category=category,
        defaults={"content": WELCOME_CONTENT, "author": admin},
    )
    return category


def seed_defaults() -> None:
    with transaction.atomic():
        users = seed_default_users()
        seed_sample_content(users["admin"], users["user"])


def reset_defaults() -> None:
    """Remove what ``seed_defaults`` creates; other data is left alone."""
    User = get_user_model()
    emails = [email for email, _, _ in DEFAULT_USERS]
    with transaction.atomic():
        Article.objects.filter(title=WELCOME_TITLE, author__email__in=emails).delete()
        category = Category.objects.filter(name=SAMPLE_CATEGORY, parent__isnull=True).first()
        if category is not None and not category.articles.exists() and not category.children.exists():
            category.delete()
        # Articles authored by the demo users protect them from deletion; park those on no author.
        Article.objects.filter(author__email__in=emails).update(author=None)
        User.objects.filter(email__in=emails).delete()


def seed_after_migrate(sender, **kwargs) -> None:
    """``post_migrate`` hook: seed only when ``SEED_DEFAULT_USERS`` is on."""
    if settings.SEED_DEFAULT_USERS:
        seed_defaults()
