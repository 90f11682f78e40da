"""Permission table writes with upsert semantics."""

import logging
from typing import Tuple

from django.db import IntegrityError, transaction

from .models import Permission

logger = logging.getLogger(__name__)


def set_user_permission(user, category, permission_type: str) -> Tuple[Permission, bool]:
    """Create or replace the (user, category) grant; returns ``(row, created)``.

    A concurrent insert of the same pair loses the race on the unique
    constraint and is retried as an update, so the latest type wins.
    """
    try:
        with transaction.atomic():
            permission, created = Permission.objects.update_or_create(
                user=user, category=category, defaults={"permission_type": permission_type}
            )
    except IntegrityError:
        permission = Permission.objects.get(user=user, category=category)
        permission.permission_type = permission_type
        permission.save(update_fields=["permission_type", "updated_at"])
        created = False
    logger.info(
        "Permission %s set for user %s on category %s (created=%s)",
        permission_type,
        permission.user_id,
        permission.category_id,
        created,
    )
    return permission, created


def update_permission(permission: Permission, **patch) -> Permission:
    """Apply a partial update; moving onto an existing (user, category) pair is a conflict."""
    for field, value in patch.items():
        setattr(permission, field, value)
    permission.save()
    return permission


def remove_user_permission(user_id: int, category_id: int) -> bool:
    deleted, _ = Permission.objects.filter(user_id=user_id, category_id=category_id).delete()
    if deleted:
        logger.info("Permission removed for user %s on category %s", user_id, category_id)
    return bool(deleted)


def delete_permission(permission_id: int) -> bool:
    deleted, _ = Permission.objects.filter(pk=permission_id).delete()
    return bool(deleted)


__all__ = ["delete_permission", "remove_user_permission", "set_user_permission", "update_permission"]
