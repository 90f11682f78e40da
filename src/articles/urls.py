"""Routing for articles and the shared tag vocabulary."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import ArticleViewSet, TagViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r"articles", ArticleViewSet, basename="article")
router.register(r"tags", TagViewSet, basename="tag")

urlpatterns = [
    path("", include(router.urls)),
]
