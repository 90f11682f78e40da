"""Rule-by-rule checks for access_control.resolver."""

from __future__ import annotations

from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from access_control.models import PermissionType
from access_control.resolver import (
    Operation,
    can_access,
    can_contribute,
    filter_readable,
    resolve_category_permission,
    visible_articles,
    visible_categories,
    visible_files,
)
from access_control.services import remove_user_permission, set_user_permission
from articles.models import Article
from categories.models import Category
from files.models import File
from tests.utils import create_user


class ResolverTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_user("admin@test.com", role="admin")
        cls.author = create_user("author@test.com")
        cls.reader = create_user("reader@test.com")
        cls.writer = create_user("writer@test.com")
        cls.outsider = create_user("outsider@test.com")

        cls.docs = Category.objects.create(name="Docs", created_by=cls.admin)
        cls.child = Category.objects.create(name="Docs/Child", parent=cls.docs, created_by=cls.admin)
        set_user_permission(cls.reader, cls.docs, PermissionType.READ)
        set_user_permission(cls.writer, cls.docs, PermissionType.WRITE)
        set_user_permission(cls.author, cls.docs, PermissionType.READ)

        cls.article = Article.objects.create(title="Guide", content="Body", category=cls.docs, author=cls.author)
        cls.child_article = Article.objects.create(
            title="Nested", content="Body", category=cls.child, author=cls.admin
        )
        cls.orphan = Article.objects.create(title="Draft", content="Body", author=cls.author)

    def test_unauthenticated_is_denied(self):
        for operation in Operation:
            self.assertFalse(can_access(AnonymousUser(), self.article, operation))
            self.assertFalse(can_access(None, self.docs, operation))

    def test_admin_is_allowed_everything(self):
        for target in (self.article, self.docs, self.child_article):
            for operation in Operation:
                self.assertTrue(can_access(self.admin, target, operation))

    def test_article_delete_is_author_only(self):
        self.assertTrue(can_access(self.author, self.article, Operation.DELETE))
        self.assertFalse(can_access(self.writer, self.article, Operation.DELETE))
        self.assertFalse(can_access(self.reader, self.article, Operation.DELETE))

    def test_article_write_needs_authorship_or_write_grant(self):
        self.assertTrue(can_access(self.author, self.article, Operation.WRITE))
        self.assertTrue(can_access(self.writer, self.article, Operation.WRITE))
        self.assertFalse(can_access(self.reader, self.article, Operation.WRITE))
        self.assertFalse(can_access(self.outsider, self.article, Operation.WRITE))

    def test_article_read_needs_authorship_or_any_grant(self):
        self.assertTrue(can_access(self.reader, self.article, Operation.READ))
        self.assertTrue(can_access(self.writer, self.article, Operation.READ))
        self.assertTrue(can_access(self.author, self.orphan, Operation.READ))
        self.assertFalse(can_access(self.outsider, self.article, Operation.READ))
        self.assertFalse(can_access(self.reader, self.orphan, Operation.READ))

    def test_parent_grant_does_not_reach_children(self):
        self.assertFalse(can_access(self.reader, self.child, Operation.READ))
        self.assertFalse(can_access(self.writer, self.child_article, Operation.READ))

    def test_category_read_and_admin_only_writes(self):
        self.assertTrue(can_access(self.reader, self.docs, Operation.READ))
        self.assertFalse(can_access(self.outsider, self.docs, Operation.READ))
        self.assertFalse(can_access(self.writer, self.docs, Operation.WRITE))
        self.assertFalse(can_access(self.writer, self.docs, Operation.DELETE))

    def test_none_grant_equals_no_row(self):
        set_user_permission(self.outsider, self.docs, PermissionType.NONE)
        self.assertEqual(resolve_category_permission(self.outsider, self.docs.pk), PermissionType.NONE)
        self.assertFalse(can_access(self.outsider, self.article, Operation.READ))

    def test_revoking_a_grant_takes_effect_immediately(self):
        self.assertTrue(can_access(self.reader, self.article, Operation.READ))
        self.assertTrue(remove_user_permission(self.reader.pk, self.docs.pk))
        self.assertFalse(can_access(self.reader, self.article, Operation.READ))

    def test_can_contribute(self):
        self.assertTrue(can_contribute(self.admin, self.child.pk))
        self.assertTrue(can_contribute(self.writer, self.docs.pk))
        self.assertFalse(can_contribute(self.reader, self.docs.pk))
        self.assertFalse(can_contribute(AnonymousUser(), self.docs.pk))

    def test_unknown_operation_is_denied(self):
        self.assertFalse(can_access(self.author, self.article, "publish"))

    def test_file_rules(self):
        attached = File.objects.create(
            filename="a.txt", original_name="a.txt", file="files/a.txt", uploaded_by=self.outsider, article=self.article
        )
        in_category = File.objects.create(
            filename="b.txt", original_name="b.txt", file="files/b.txt", uploaded_by=self.outsider, category=self.docs
        )
        loose = File.objects.create(filename="c.txt", original_name="c.txt", file="files/c.txt", uploaded_by=self.outsider)

        self.assertTrue(can_access(self.outsider, loose, Operation.DELETE))
        self.assertTrue(can_access(self.reader, attached, Operation.READ))
        self.assertTrue(can_access(self.reader, in_category, Operation.READ))
        self.assertFalse(can_access(self.reader, loose, Operation.READ))
        self.assertFalse(can_access(self.writer, in_category, Operation.WRITE))
        self.assertEqual(
            set(visible_files(self.reader).values_list("pk", flat=True)), {attached.pk, in_category.pk}
        )

    def test_filter_readable_deduplicates_and_drops_unreadable(self):
        items = [self.article, self.article, self.child_article, self.orphan]
        self.assertEqual(filter_readable(self.reader, items), [self.article])
        self.assertEqual(filter_readable(self.author, items), [self.article, self.orphan])
        self.assertEqual(filter_readable(AnonymousUser(), items), [])

    def test_visible_querysets_match_point_checks(self):
        for user in (self.admin, self.author, self.reader, self.writer, self.outsider):
            expected = {a.pk for a in Article.objects.all() if can_access(user, a, Operation.READ)}
            self.assertEqual(set(visible_articles(user).values_list("pk", flat=True)), expected)
            expected = {c.pk for c in Category.objects.all() if can_access(user, c, Operation.READ)}
            self.assertEqual(set(visible_categories(user).values_list("pk", flat=True)), expected)
