"""Password hashing: scrypt format, legacy bcrypt verification, malformed input."""

from __future__ import annotations

import bcrypt
from django.test import SimpleTestCase

from authentication.passwords import SCRYPT_KEY_LENGTH, hash_password, is_legacy_hash, verify_password


def _legacy(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


class PasswordHashingTests(SimpleTestCase):
    def test_hash_has_digest_and_salt(self):
        stored = hash_password("Secret123")
        digest, salt = stored.split(".")
        self.assertEqual(len(digest), SCRYPT_KEY_LENGTH * 2)
        self.assertEqual(len(salt), 32)

    def test_hashes_are_salted(self):
        self.assertNotEqual(hash_password("Secret123"), hash_password("Secret123"))

    def test_verify_current_scheme(self):
        stored = hash_password("Secret123")
        self.assertTrue(verify_password("Secret123", stored))
        self.assertFalse(verify_password("secret123", stored))

    def test_verify_legacy_bcrypt(self):
        stored = _legacy("OldSecret1")
        self.assertTrue(is_legacy_hash(stored))
        self.assertTrue(verify_password("OldSecret1", stored))
        self.assertFalse(verify_password("wrong", stored))

    def test_malformed_values_never_raise(self):
        for stored in (None, "", "no-separator", "zz.salt", "a.b.c", ".salt", "$2b$garbage", "plaintext"):
            with self.subTest(stored=stored):
                self.assertFalse(verify_password("anything", stored))

    def test_plaintext_storage_is_not_accepted(self):
        self.assertFalse(verify_password("hunter22", "hunter22"))
