"""Category writes, including the creator's self-grant."""

import logging

from django.db import transaction
from django.db.models import ProtectedError

from access_control.models import PermissionType
from access_control.services import set_user_permission
from core.exceptions import ConflictError
from .models import Category

logger = logging.getLogger(__name__)


def create_category(creator, **fields) -> Category:
    """Create a category and grant ``creator`` write on it, as one transaction."""
    with transaction.atomic():
        category = Category.objects.create(created_by=creator, **fields)
        if creator is not None:
            set_user_permission(creator, category, PermissionType.WRITE)
    logger.info("Category %s created by %s", category.pk, getattr(creator, "pk", None))
    return category


def update_category(category: Category, **patch) -> Category:
    """Apply only the supplied fields (last write wins)."""
    for field, value in patch.items():
        setattr(category, field, value)
    category.save()
    return category


def would_create_cycle(category: Category, new_parent: Category | None) -> bool:
    """True if making ``new_parent`` the parent of ``category`` closes a loop."""
    if new_parent is None or category.pk is None:
        return False
    if new_parent.pk == category.pk:
        return True
    return category.pk in new_parent.ancestor_ids()


def delete_category(category_id: int) -> bool:
    """Delete by id; False if there was no such row.

    Categories that still hold articles or child categories are refused with
    ``ConflictError``; their permission rows go with them.
    """
    try:
        deleted, _ = Category.objects.filter(pk=category_id).delete()
    except ProtectedError as exc:
        raise ConflictError("Category still contains articles or subcategories.") from exc
    if deleted:
        logger.info("Category %s deleted", category_id)
    return bool(deleted)


__all__ = ["create_category", "delete_category", "update_category", "would_create_cycle"]
