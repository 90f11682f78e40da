"""Shared helpers for tests (user creation, token clients, fake Redis)."""

from __future__ import annotations

from typing import Dict
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from authentication.services import TokenService

User = get_user_model()


class FakeRedis:
    """Minimal Redis stub supporting the commands used by TokenService."""

    def __init__(self):
        self._store: Dict[str, str] = {}

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Mimic Redis SETEX; TTL is ignored in tests, value stored in-memory."""
        self._store[key] = value

    def get(self, key: str):
        """Return stored value for key or None, matching Redis GET semantics."""
        return self._store.get(key)


def create_user(email: str, password: str = "Password123", role: str = "user", **extra):
    """Create a user with a current-scheme password hash."""
    return User.objects.create_user(email, password, role=role, **extra)


def auth_client(user) -> APIClient:
    """Return an APIClient authenticated with a fresh access token."""
    token, _ = TokenService.generate_tokens(user)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


class FakeRedisTestCase(TestCase):
    """TestCase with the Redis clients swapped for one in-memory fake per class."""

    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.fake_redis = FakeRedis()
        cls.patchers = [
            mock.patch("core.redis_client.get_redis_client", return_value=cls.fake_redis),
            mock.patch("authentication.services.get_redis_client", return_value=cls.fake_redis),
        ]
        for patcher in cls.patchers:
            patcher.start()

    @classmethod
    def tearDownClass(cls):
        for patcher in cls.patchers:
            patcher.stop()
        super().tearDownClass()
