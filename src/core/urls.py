"""Root URL configuration for the knowledge base API."""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .views import StatsView

api_patterns = [
    path("", include("authentication.urls")),
    path("", include("categories.urls")),
    path("", include("articles.urls")),
    path("", include("access_control.urls")),
    path("", include("files.urls")),
    path("stats", StatsView.as_view(), name="stats"),
    path("schema", SpectacularAPIView.as_view(), name="schema"),
    path("docs", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
]

# Uploads are only reachable through /api/files/:id/download, which applies access control.
urlpatterns = [
    path("api/", include(api_patterns)),
]
