"""Admin endpoints managing per-category permissions."""

from rest_framework import status, viewsets
from rest_framework.response import Response

from core.query_params import int_param

from .models import Permission
from .permissions import IsAdminRole
from .serializers import PermissionSerializer
from .services import delete_permission


class PermissionViewSet(viewsets.ModelViewSet):
    """CRUD over Permission rows. POST upserts on (user, category)."""

    serializer_class = PermissionSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        """Optionally narrow the listing with ``?user=`` and/or ``?category=``."""
        qs = Permission.objects.select_related("user", "category")
        params = self.request.query_params
        for param, field in (("user", "user_id"), ("category", "category_id")):
            value = int_param(params, param)
            if value is not None:
                qs = qs.filter(**{field: value})
        return qs

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        code = status.HTTP_201_CREATED if serializer.created else status.HTTP_200_OK
        return Response(serializer.data, status=code)

    def update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)

    def perform_destroy(self, instance):
        delete_permission(instance.pk)


__all__ = ["PermissionViewSet"]
