"""Permission administration: upsert semantics and admin-only access."""

from __future__ import annotations

from access_control.models import Permission, PermissionType
from access_control.services import set_user_permission
from categories.models import Category
from tests.utils import FakeRedisTestCase, auth_client, create_user


class PermissionApiTests(FakeRedisTestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_user("admin@test.com", role="admin")
        cls.user = create_user("user@test.com")
        cls.category = Category.objects.create(name="Docs", created_by=cls.admin)
        cls.other = Category.objects.create(name="Other", created_by=cls.admin)

    def test_non_admin_cannot_manage_permissions(self):
        client = auth_client(self.user)
        self.assertEqual(client.get("/api/permissions").status_code, 403)
        response = client.post(
            "/api/permissions",
            {"user": self.user.pk, "category": self.category.pk, "permission_type": "write"},
            format="json",
        )
        self.assertEqual(response.status_code, 403)

    def test_post_upserts_single_row(self):
        client = auth_client(self.admin)
        payload = {"user": self.user.pk, "category": self.category.pk, "permission_type": "read"}

        first = client.post("/api/permissions", payload, format="json")
        self.assertEqual(first.status_code, 201)

        second = client.post("/api/permissions", {**payload, "permission_type": "write"}, format="json")
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json()["id"], first.json()["id"])

        rows = Permission.objects.filter(user=self.user, category=self.category)
        self.assertEqual(rows.count(), 1)
        self.assertEqual(rows.get().permission_type, PermissionType.WRITE)

    def test_invalid_permission_type_400(self):
        response = auth_client(self.admin).post(
            "/api/permissions",
            {"user": self.user.pk, "category": self.category.pk, "permission_type": "owner"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("permission_type", response.json()["errors"])

    def test_list_filters(self):
        set_user_permission(self.user, self.category, PermissionType.READ)
        set_user_permission(self.user, self.other, PermissionType.WRITE)
        set_user_permission(self.admin, self.category, PermissionType.WRITE)
        client = auth_client(self.admin)

        self.assertEqual(len(client.get("/api/permissions").json()), 3)
        self.assertEqual(len(client.get(f"/api/permissions?user={self.user.pk}").json()), 2)
        body = client.get(f"/api/permissions?user={self.user.pk}&category={self.other.pk}").json()
        self.assertEqual([row["permission_type"] for row in body], ["write"])
        response = client.get("/api/permissions", {"user": "²", "category": "٣"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 3)

    def test_update_onto_existing_pair_rejected(self):
        set_user_permission(self.user, self.category, PermissionType.READ)
        moving, _ = set_user_permission(self.user, self.other, PermissionType.READ)
        response = auth_client(self.admin).patch(
            f"/api/permissions/{moving.pk}", {"category": self.category.pk}, format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_patch_and_delete(self):
        grant, _ = set_user_permission(self.user, self.category, PermissionType.READ)
        client = auth_client(self.admin)

        response = client.patch(f"/api/permissions/{grant.pk}", {"permission_type": "none"}, format="json")
        self.assertEqual(response.status_code, 200)
        grant.refresh_from_db()
        self.assertEqual(grant.permission_type, PermissionType.NONE)

        self.assertEqual(client.delete(f"/api/permissions/{grant.pk}").status_code, 204)
        self.assertEqual(client.delete(f"/api/permissions/{grant.pk}").status_code, 404)
