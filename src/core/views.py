"""Dashboard counters, scoped to what the caller can see."""

from django.contrib.auth import get_user_model
from rest_framework.response import Response
from rest_framework.views import APIView

from access_control.resolver import visible_articles, visible_categories, visible_files


class StatsView(APIView):
    def get(self, request):
        user = request.user
        return Response(
            {
                "totalArticles": visible_articles(user).count(),
                "totalCategories": visible_categories(user).count(),
                "activeUsers": get_user_model().objects.filter(is_active=True).count(),
                "totalFiles": visible_files(user).count(),
            }
        )


__all__ = ["StatsView"]
