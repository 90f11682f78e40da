"""Article and tag persistence helpers."""

import logging

from django.db.models import Q
from django.utils import timezone

from .models import Article, ArticleTag, Tag

logger = logging.getLogger(__name__)


def _sync_published_at(article: Article) -> None:
    if article.is_published and article.published_at is None:
        article.published_at = timezone.now()
    elif not article.is_published:
        article.published_at = None


def create_article(author, **fields) -> Article:
    article = Article(author=author, **fields)
    _sync_published_at(article)
    article.save()
    return article


def update_article(article: Article, **patch) -> Article:
    """Apply only the supplied fields; concurrent writers overwrite each other."""
    for field, value in patch.items():
        setattr(article, field, value)
    _sync_published_at(article)
    article.save()
    return article


def delete_article(article_id: int) -> bool:
    """Delete by id; returns False when no such article existed."""
    deleted, _ = Article.objects.filter(pk=article_id).delete()
    if deleted:
        logger.info("Article %s deleted", article_id)
    return bool(deleted)


def search_articles(query: str):
    """Case-insensitive substring match over title and content.

    Not scoped by permission: callers post-filter with
    ``access_control.resolver.filter_readable``.
    """
    query = (query or "").strip()
    if not query:
        return Article.objects.none()
    return Article.objects.filter(Q(title__icontains=query) | Q(content__icontains=query))


def add_tag(article: Article, tag: Tag) -> bool:
    """Attach ``tag``; attaching twice is a no-op. Returns True if a link was created."""
    _, created = ArticleTag.objects.get_or_create(article=article, tag=tag)
    return created


def remove_tag(article: Article, tag_id: int) -> bool:
    deleted, _ = ArticleTag.objects.filter(article=article, tag_id=tag_id).delete()
    return bool(deleted)


def delete_tag(tag_id: int) -> bool:
    deleted, _ = Tag.objects.filter(pk=tag_id).delete()
    return bool(deleted)


__all__ = [
    "add_tag",
    "create_article",
    "delete_article",
    "delete_tag",
    "remove_tag",
    "search_articles",
    "update_article",
]
