"""File library endpoints: list, upload, metadata, download and delete."""

from django.http import FileResponse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from access_control.permissions import IsAuthenticatedCaller, ResolverPermission
from access_control.resolver import Operation, can_access, can_contribute, visible_files
from .models import File
from .serializers import FileSerializer, UploadSerializer
from .services import delete_file, store_uploads

UPLOAD_FIELDS = ("files", "file")


class FileViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = FileSerializer
    permission_classes = [ResolverPermission]

    def get_queryset(self):
        if self.action == "list":
            return visible_files(self.request.user)
        return File.objects.select_related("article")

    def perform_destroy(self, instance):
        delete_file(instance.pk)

    @action(
        detail=False,
        methods=["post"],
        parser_classes=[MultiPartParser, FormParser],
        permission_classes=[IsAuthenticatedCaller],
    )
    def upload(self, request):
        """Store every part sent as ``files`` (or a single ``file``).

        A target category needs write on it; a target article needs write on
        the article.
        """
        uploads = [item for field in UPLOAD_FIELDS for item in request.FILES.getlist(field)]
        if not uploads:
            raise ValidationError({"file": ["No file uploaded."]})

        placement = UploadSerializer(data=request.data)
        placement.is_valid(raise_exception=True)
        category = placement.validated_data.get("category")
        article = placement.validated_data.get("article")
        if category is not None and not can_contribute(request.user, category.pk):
            raise PermissionDenied()
        if article is not None and not can_access(request.user, article, Operation.WRITE):
            raise PermissionDenied()

        created = store_uploads(request.user, uploads, article=article, category=category)
        data = self.get_serializer(created, many=True).data
        return Response({"files": data}, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"])
    def download(self, request, pk=None):
        record = self.get_object()
        try:
            handle = record.file.open("rb")
        except FileNotFoundError as exc:
            raise NotFound("File content is missing.") from exc
        return FileResponse(
            handle,
            as_attachment=True,
            filename=record.original_name,
            content_type=record.file_type or "application/octet-stream",
        )


__all__ = ["FileViewSet"]
