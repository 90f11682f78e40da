"""Dashboard counters respect what the caller may see."""

from __future__ import annotations

from access_control.models import PermissionType
from access_control.services import set_user_permission
from articles.models import Article
from categories.models import Category
from files.models import File
from tests.utils import FakeRedisTestCase, auth_client, create_user


class StatsApiTests(FakeRedisTestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_user("admin@test.com", role="admin")
        cls.user = create_user("user@test.com")
        create_user("gone@test.com", is_active=False)

        docs = Category.objects.create(name="Docs")
        secret = Category.objects.create(name="Secret")
        set_user_permission(cls.user, docs, PermissionType.READ)
        Article.objects.create(title="A", content="C", category=docs, author=cls.admin)
        Article.objects.create(title="B", content="C", category=secret, author=cls.admin)
        File.objects.create(filename="f.txt", original_name="f.txt", file="files/f.txt", category=secret)

    def test_admin_sees_everything(self):
        body = auth_client(self.admin).get("/api/stats").json()
        self.assertEqual(
            body, {"totalArticles": 2, "totalCategories": 2, "activeUsers": 2, "totalFiles": 1}
        )

    def test_user_counts_are_scoped(self):
        body = auth_client(self.user).get("/api/stats").json()
        self.assertEqual(
            body, {"totalArticles": 1, "totalCategories": 1, "activeUsers": 2, "totalFiles": 0}
        )

    def test_requires_authentication(self):
        self.assertEqual(self.client.get("/api/stats").status_code, 401)
