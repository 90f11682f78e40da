"""Article and Tag endpoints guarded by the authorization resolver."""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from access_control.permissions import IsAdminRole, IsAuthenticatedCaller, ResolverPermission
from access_control.resolver import Operation, can_contribute, filter_readable, visible_articles
from core.query_params import int_param
from .models import Article, Tag
from .serializers import ArticleSerializer, ArticleTagSerializer, TagSerializer
from .services import add_tag, delete_article, delete_tag, remove_tag, search_articles

_TRUE_VALUES = {"1", "true", "yes"}


class ArticleViewSet(viewsets.ModelViewSet):
    serializer_class = ArticleSerializer
    permission_classes = [ResolverPermission]
    # Untagging edits the article; it is not an article delete.
    resolver_operations = {"detach_tag": Operation.WRITE}

    def get_queryset(self):
        """Listing shows only readable articles; by-id lookups stay unscoped (404 before 403)."""
        if self.action != "list":
            return Article.objects.select_related("category", "author").prefetch_related("tags")
        qs = visible_articles(self.request.user)
        params = self.request.query_params
        category_id = int_param(params, "category")
        if category_id is not None:
            qs = qs.filter(category_id=category_id)
        author_id = int_param(params, "author")
        if author_id is not None:
            qs = qs.filter(author_id=author_id)
        if params.get("published") is not None:
            qs = qs.filter(is_published=params["published"].lower() in _TRUE_VALUES)
        return qs.select_related("category", "author").prefetch_related("tags")

    def perform_create(self, serializer):
        """Filing into a category needs write on it; uncategorised drafts are open to all."""
        category = serializer.validated_data.get("category")
        if category is not None and not can_contribute(self.request.user, category.pk):
            raise PermissionDenied()
        serializer.save()

    def update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)

    def perform_update(self, serializer):
        """Moving an article needs write on the destination category.

        Taking it out of every category hides it from that category's readers,
        so only its author or an admin may do that.
        """
        article = serializer.instance
        user = self.request.user
        if "category" in serializer.validated_data:
            target = serializer.validated_data["category"]
            if target is None:
                if article.category_id is not None and not (user.is_admin or article.author_id == user.id):
                    raise PermissionDenied()
            elif target.pk != article.category_id and not can_contribute(user, target.pk):
                raise PermissionDenied()
        serializer.save()

    def perform_destroy(self, instance):
        delete_article(instance.pk)

    @action(detail=False, methods=["get"])
    def search(self, request):
        """Substring search over title/content, then drop what the caller cannot read."""
        results = search_articles(request.query_params.get("q", ""))
        visible = filter_readable(request.user, results.select_related("category", "author"))
        return Response(self.get_serializer(visible, many=True).data)

    @action(detail=True, methods=["get", "post"], url_path="tags")
    def article_tags(self, request, pk=None):
        article = self.get_object()
        code = status.HTTP_200_OK
        if request.method == "POST":
            payload = ArticleTagSerializer(data=request.data)
            payload.is_valid(raise_exception=True)
            if add_tag(article, payload.validated_data["tag"]):
                code = status.HTTP_201_CREATED
        return Response(TagSerializer(article.tags.all(), many=True).data, status=code)

    @action(detail=True, methods=["delete"], url_path=r"tags/(?P<tag_id>\d+)")
    def detach_tag(self, request, pk=None, tag_id=None):
        article = self.get_object()
        if not remove_tag(article, int(tag_id)):
            return Response({"message": "Tag is not attached to this article"}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TagViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Tags are shared labels: anyone signed in may list or create them, admins delete."""

    serializer_class = TagSerializer
    queryset = Tag.objects.all()

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAdminRole()]
        return [IsAuthenticatedCaller()]

    def perform_destroy(self, instance):
        delete_tag(instance.pk)


__all__ = ["ArticleViewSet", "TagViewSet"]
