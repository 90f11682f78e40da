"""Category endpoints: readable listing for everyone, mutations for admins."""

from rest_framework import viewsets

from access_control.permissions import IsAdminRole, ResolverPermission
from access_control.resolver import visible_categories
from .models import Category
from .serializers import CategorySerializer
from .services import delete_category


class CategoryViewSet(viewsets.ModelViewSet):
    serializer_class = CategorySerializer
    queryset = Category.objects.all()

    def get_permissions(self):
        if self.action == "create":
            return [IsAdminRole()]
        return [ResolverPermission()]

    def get_queryset(self):
        """Listing is scoped to readable categories; by-id lookups are not.

        Lookups stay unscoped so that a missing id is a 404 and an existing
        but unreadable one is a 403.
        """
        if self.action == "list":
            return visible_categories(self.request.user).order_by("id")
        return Category.objects.all()

    def update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)

    def perform_destroy(self, instance):
        delete_category(instance.pk)


__all__ = ["CategoryViewSet"]
