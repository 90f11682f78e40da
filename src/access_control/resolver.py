"""Authorization resolver: the single place deciding who may touch what.

``can_access(user, target, operation)`` answers for a Category, Article or
File. Rules, first match wins:

1. unauthenticated callers are denied;
2. admins are allowed everything;
3. deleting an article is reserved to its author;
4. writing an article needs authorship or ``write`` on its category;
5. reading an article needs authorship or ``read``/``write`` on its category;
6. reading a category needs ``read``/``write`` on it, or having created it;
7. writing or deleting a category is admin-only;
8. files are readable by their uploader or through the article/category they
   are attached to, and writable/deletable by their uploader only.

The category permission is the single Permission row for (user, category);
no row means ``none``. Parent categories grant nothing to their children.

The resolver only reads; it returns booleans and leaves the HTTP mapping
(403/404) to the views.
"""

from enum import Enum
from typing import Iterable, Mapping, Optional, TypeVar

from django.db.models import Q, QuerySet

from articles.models import Article
from categories.models import Category
from files.models import File

from .models import Permission, PermissionType

READABLE = (PermissionType.READ, PermissionType.WRITE)

T = TypeVar("T")


class Operation(str, Enum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"


def _is_authenticated(user) -> bool:
    return user is not None and getattr(user, "is_authenticated", False) and getattr(user, "id", None) is not None


def _is_admin(user) -> bool:
    return getattr(user, "role", None) == "admin"


def resolve_category_permission(
    user, category_id: Optional[int], grants: Optional[Mapping[int, str]] = None
) -> str:
    """Return the caller's permission type on ``category_id`` (``none`` if absent).

    ``grants`` is an optional pre-fetched ``{category_id: permission_type}``
    map used by batch filters to avoid one query per item.
    """
    if category_id is None or not _is_authenticated(user):
        return PermissionType.NONE
    if grants is not None:
        return grants.get(category_id, PermissionType.NONE)
    found = (
        Permission.objects.filter(user_id=user.id, category_id=category_id)
        .values_list("permission_type", flat=True)
        .first()
    )
    return found or PermissionType.NONE


def load_grants(user) -> dict[int, str]:
    """All of the caller's grants as ``{category_id: permission_type}``."""
    if not _is_authenticated(user):
        return {}
    return dict(Permission.objects.filter(user_id=user.id).values_list("category_id", "permission_type"))


def can_contribute(user, category_id: Optional[int]) -> bool:
    """May the caller create content (articles, files) inside ``category_id``?"""
    if not _is_authenticated(user):
        return False
    if _is_admin(user):
        return True
    return resolve_category_permission(user, category_id) == PermissionType.WRITE


def can_access(user, target, operation, grants: Optional[Mapping[int, str]] = None) -> bool:
    if not _is_authenticated(user):
        return False
    if _is_admin(user):
        return True
    try:
        operation = Operation(operation)
    except ValueError:
        return False

    if isinstance(target, Article):
        return _article_access(user, target, operation, grants)
    if isinstance(target, Category):
        if operation is Operation.READ:
            if target.created_by_id is not None and target.created_by_id == user.id:
                return True
            return resolve_category_permission(user, target.pk, grants) in READABLE
        return False
    if isinstance(target, File):
        return _file_access(user, target, operation, grants)
    return False


def _article_access(user, article: Article, operation: Operation, grants) -> bool:
    is_author = article.author_id is not None and article.author_id == user.id
    if operation is Operation.DELETE:
        return is_author
    if is_author:
        return True
    granted = resolve_category_permission(user, article.category_id, grants)
    if operation is Operation.WRITE:
        return granted == PermissionType.WRITE
    return granted in READABLE


def _file_access(user, file: File, operation: Operation, grants) -> bool:
    if file.uploaded_by_id is not None and file.uploaded_by_id == user.id:
        return True
    if operation is not Operation.READ:
        return False
    if file.article_id is not None and can_access(user, file.article, Operation.READ, grants):
        return True
    if file.category_id is not None:
        return resolve_category_permission(user, file.category_id, grants) in READABLE
    return False


def filter_readable(user, items: Iterable[T]) -> list[T]:
    """Keep the items the caller may read, de-duplicated by primary key.

    Used to post-filter results fetched without permission scoping (search).
    """
    if not _is_authenticated(user):
        return []
    grants = None if _is_admin(user) else load_grants(user)
    seen: set = set()
    visible: list[T] = []
    for item in items:
        key = (type(item), item.pk)
        if key in seen:
            continue
        seen.add(key)
        if can_access(user, item, Operation.READ, grants):
            visible.append(item)
    return visible


def _readable_category_q(user, prefix: str = "") -> Q:
    return Q(
        **{
            f"{prefix}permissions__user_id": user.id,
            f"{prefix}permissions__permission_type__in": READABLE,
        }
    )


def visible_categories(user) -> QuerySet:
    """Categories the caller created or may read through a grant (same rule as ``can_access``)."""
    if not _is_authenticated(user):
        return Category.objects.none()
    if _is_admin(user):
        return Category.objects.all()
    return Category.objects.filter(Q(created_by_id=user.id) | _readable_category_q(user)).distinct()


def visible_articles(user) -> QuerySet:
    """Articles the caller authored or can read through their category."""
    if not _is_authenticated(user):
        return Article.objects.none()
    if _is_admin(user):
        return Article.objects.all()
    return Article.objects.filter(Q(author_id=user.id) | _readable_category_q(user, "category__")).distinct()


def visible_files(user) -> QuerySet:
    """Files the caller uploaded or can read through their article or category."""
    if not _is_authenticated(user):
        return File.objects.none()
    if _is_admin(user):
        return File.objects.all()
    readable_articles = visible_articles(user).order_by().values("pk")
    return File.objects.filter(
        Q(uploaded_by_id=user.id)
        | Q(article__in=readable_articles)
        | _readable_category_q(user, "category__")
    ).distinct()


__all__ = [
    "Operation",
    "can_access",
    "can_contribute",
    "filter_readable",
    "load_grants",
    "resolve_category_permission",
    "visible_articles",
    "visible_categories",
    "visible_files",
]
