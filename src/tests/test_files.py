"""File library: uploads, placement checks, downloads and deletion."""

from __future__ import annotations

import os
from unittest import mock

from django.conf import settings
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.test import SimpleTestCase, override_settings
from rest_framework.exceptions import ValidationError

from access_control.models import PermissionType
from access_control.services import set_user_permission
from articles.models import Article
from categories.models import Category
from files.models import File
from files.services import sanitise_filename, store_upload, store_uploads
from tests.utils import FakeRedisTestCase, auth_client, create_user


def _upload(name="notes.txt", content=b"hello world", content_type="text/plain"):
    return SimpleUploadedFile(name, content, content_type=content_type)


def _stored_paths():
    return {os.path.join(root, name) for root, _, names in os.walk(settings.MEDIA_ROOT) for name in names}


class SanitiseFilenameTests(SimpleTestCase):
    def test_strips_directories_and_unsafe_characters(self):
        self.assertEqual(sanitise_filename("../../etc/passwd"), "passwd")
        self.assertEqual(sanitise_filename("C:\\Users\\me\\report final.pdf"), "report_final.pdf")
        self.assertEqual(sanitise_filename("archive...tar.gz"), "archive.tar.gz")

    def test_rejects_empty_names(self):
        for name in ("", "...", "__"):
            with self.subTest(name=name):
                with self.assertRaises(ValidationError):
                    sanitise_filename(name)


class FileApiTests(FakeRedisTestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_user("admin@test.com", role="admin")
        cls.writer = create_user("writer@test.com")
        cls.reader = create_user("reader@test.com")
        cls.outsider = create_user("outsider@test.com")
        cls.docs = Category.objects.create(name="Docs", created_by=cls.admin)
        set_user_permission(cls.writer, cls.docs, PermissionType.WRITE)
        set_user_permission(cls.reader, cls.docs, PermissionType.READ)
        cls.article = Article.objects.create(title="Guide", content="Body", category=cls.docs, author=cls.admin)

    def test_upload_multiple_files_into_category(self):
        response = auth_client(self.writer).post(
            "/api/files/upload",
            {"files": [_upload("a.txt"), _upload("b.txt")], "category": self.docs.pk},
            format="multipart",
        )
        self.assertEqual(response.status_code, 201)
        files = response.json()["files"]
        self.assertEqual([f["original_name"] for f in files], ["a.txt", "b.txt"])
        for item in files:
            self.assertEqual(item["category"], self.docs.pk)
            self.assertEqual(item["file_size"], len(b"hello world"))
            self.assertTrue(default_storage.exists(item["file_path"]))
            self.assertTrue(item["url"].endswith(f"/api/files/{item['id']}/download"))

    def test_single_file_field_accepted(self):
        response = auth_client(self.outsider).post("/api/files/upload", {"file": _upload()}, format="multipart")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(response.json()["files"]), 1)

    def test_upload_without_file_400(self):
        response = auth_client(self.writer).post("/api/files/upload", {"category": self.docs.pk}, format="multipart")
        self.assertEqual(response.status_code, 400)

    def test_upload_into_unwritable_category_403(self):
        response = auth_client(self.reader).post(
            "/api/files/upload", {"file": _upload(), "category": self.docs.pk}, format="multipart"
        )
        self.assertEqual(response.status_code, 403)
        self.assertFalse(File.objects.exists())

    def test_upload_onto_article_needs_write(self):
        self.assertEqual(
            auth_client(self.reader)
            .post("/api/files/upload", {"file": _upload(), "article": self.article.pk}, format="multipart")
            .status_code,
            403,
        )
        self.assertEqual(
            auth_client(self.writer)
            .post("/api/files/upload", {"file": _upload(), "article": self.article.pk}, format="multipart")
            .status_code,
            201,
        )

    @override_settings(FILE_UPLOAD_MAX_BYTES=10)
    def test_oversized_upload_rejected(self):
        response = auth_client(self.writer).post(
            "/api/files/upload", {"file": _upload(content=b"x" * 11)}, format="multipart"
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(File.objects.exists())

    def test_listing_and_download_follow_read_access(self):
        uploaded = auth_client(self.writer).post(
            "/api/files/upload", {"file": _upload(), "category": self.docs.pk}, format="multipart"
        ).json()["files"][0]
        private = auth_client(self.outsider).post(
            "/api/files/upload", {"file": _upload("private.txt")}, format="multipart"
        ).json()["files"][0]

        reader = auth_client(self.reader)
        self.assertEqual([f["id"] for f in reader.get("/api/files").json()], [uploaded["id"]])
        self.assertEqual(reader.get(f"/api/files/{private['id']}").status_code, 403)

        download = reader.get(f"/api/files/{uploaded['id']}/download")
        self.assertEqual(download.status_code, 200)
        self.assertEqual(b"".join(download.streaming_content), b"hello world")
        self.assertIn("notes.txt", download["Content-Disposition"])

    def test_delete_is_uploader_only_and_removes_binary(self):
        uploaded = auth_client(self.writer).post(
            "/api/files/upload", {"file": _upload(), "category": self.docs.pk}, format="multipart"
        ).json()["files"][0]

        self.assertEqual(auth_client(self.reader).delete(f"/api/files/{uploaded['id']}").status_code, 403)

        with self.captureOnCommitCallbacks(execute=True):
            response = auth_client(self.writer).delete(f"/api/files/{uploaded['id']}")
        self.assertEqual(response.status_code, 204)
        self.assertFalse(File.objects.filter(pk=uploaded["id"]).exists())
        self.assertFalse(default_storage.exists(uploaded["file_path"]))

    def test_missing_file_404(self):
        client = auth_client(self.admin)
        self.assertEqual(client.get("/api/files/999999").status_code, 404)
        self.assertEqual(client.delete("/api/files/999999").status_code, 404)

    @override_settings(FILE_UPLOAD_MAX_BYTES=10)
    def test_batch_with_one_oversized_part_writes_nothing(self):
        before = _stored_paths()
        response = auth_client(self.writer).post(
            "/api/files/upload",
            {"files": [_upload("small.txt", b"ok"), _upload("big.txt", b"x" * 11)], "category": self.docs.pk},
            format="multipart",
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(File.objects.exists())
        self.assertEqual(_stored_paths(), before)

    def test_failed_row_insert_removes_every_stored_binary(self):
        before = _stored_paths()
        with mock.patch.object(File, "save", autospec=True, side_effect=[None, DatabaseError("insert failed")]):
            with self.assertRaises(DatabaseError):
                store_uploads(self.writer, [_upload("a.txt"), _upload("b.txt")], category=self.docs)
        self.assertFalse(File.objects.exists())
        self.assertEqual(_stored_paths(), before)

    def test_store_upload_keeps_original_name_and_binary(self):
        record = store_upload(self.writer, _upload("Q3 report.txt"), category=self.docs)
        self.assertEqual(record.original_name, "Q3 report.txt")
        self.assertTrue(record.filename.endswith("_Q3_report.txt"))
        self.assertEqual(record.file_type, "text/plain")
        self.assertTrue(default_storage.exists(record.file.name))
