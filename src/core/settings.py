"""Django settings for the Knowledge Base API.

Environment-driven configuration for Postgres, Redis, uploads, and security defaults.
"""
import os
from pathlib import Path
from urllib.parse import urlparse

from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent


def _get_env(name: str, default: str | None = None) -> str | None:
    """Read an environment variable with an optional fallback."""
    return os.environ.get(name, default)


def _get_bool(name: str, default: str = "False") -> bool:
    return _get_env(name, default) == "True"


def _parse_database_url(url: str) -> dict:
    """Parse a DATABASE_URL into a Django DATABASES entry.

    ``postgres://`` / ``postgresql://`` URLs map to the PostgreSQL backend and
    ``sqlite:///path`` URLs to SQLite (handy for local development).
    """
    parsed = urlparse(url)
    if parsed.scheme == "sqlite":
        return {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": parsed.path.lstrip("/") or ":memory:",
        }
    return {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": parsed.path.lstrip("/"),
        "USER": parsed.username,
        "PASSWORD": parsed.password,
        "HOST": parsed.hostname,
        "PORT": parsed.port or "5432",
    }


SECRET_KEY = _get_env("SECRET_KEY", "dev-secret-key-change-me")
DEBUG = _get_bool("DEBUG", "True")
if not DEBUG and SECRET_KEY in ("change-me", "dev-secret-key-change-me"):
    raise ImproperlyConfigured("SECRET_KEY must be set in production")
ALLOWED_HOSTS = [
    h.strip()
    for h in _get_env("ALLOWED_HOSTS", "localhost,127.0.0.1,0.0.0.0").split(",")
    if h.strip()
]

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
    "rest_framework",
    "drf_spectacular",
    "core",
    "authentication",
    "categories",
    "access_control",
    "articles",
    "files",
    "scripts",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Bearer tokens replace cookie sessions, so CSRF/session middleware is not installed.
    "core.middleware.JWTAuthMiddleware",
]

ROOT_URLCONF = "core.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "core.wsgi.application"

DATABASE_URL = _get_env("DATABASE_URL")
if DATABASE_URL:
    DATABASES = {"default": _parse_database_url(DATABASE_URL)}
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": _get_env("POSTGRES_DB", "knowledge_base"),
            "USER": _get_env("POSTGRES_USER", "knowledge_base"),
            "PASSWORD": _get_env("POSTGRES_PASSWORD", "knowledge_base"),
            "HOST": _get_env("POSTGRES_HOST", "localhost"),
            "PORT": _get_env("POSTGRES_PORT", "5432"),
        }
    }

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Uploaded binaries go through Django's storage API; swap STORAGES["default"]
# for an object-storage backend without touching the files app.
MEDIA_URL = "/uploads/"
MEDIA_ROOT = Path(_get_env("UPLOAD_DIR", str(BASE_DIR / "uploads")))
FILE_UPLOAD_MAX_BYTES = int(_get_env("FILE_UPLOAD_MAX_BYTES", str(10 * 1024 * 1024)))

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_USER_MODEL = "authentication.User"
PASSWORD_MIN_LENGTH = int(_get_env("PASSWORD_MIN_LENGTH", "8"))

ALLOW_ADMIN_SELF_REGISTRATION = _get_bool("ALLOW_ADMIN_SELF_REGISTRATION")
DEBUG_AUTH_ERRORS = _get_bool("DEBUG_AUTH_ERRORS")
SEED_DEFAULT_USERS = _get_bool("SEED_DEFAULT_USERS")
REDIS_URL = _get_env("REDIS_URL", "redis://localhost:6379/0")
ACCESS_TOKEN_TTL_MINUTES = int(_get_env("ACCESS_TOKEN_TTL_MINUTES", "15"))
REFRESH_TOKEN_TTL_HOURS = int(_get_env("REFRESH_TOKEN_TTL_HOURS", "24"))

LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django.request": {
            "handlers": ["console"],
            "level": "ERROR",
            "propagate": False,
        },
    },
}

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": ["core.authentication.MiddlewareUserAuthentication"],
    "DEFAULT_PERMISSION_CLASSES": ["access_control.permissions.IsAuthenticatedCaller"],
    "EXCEPTION_HANDLER": "core.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "UNAUTHENTICATED_USER": "django.contrib.auth.models.AnonymousUser",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Knowledge Base API",
    "DESCRIPTION": (
        "OpenAPI schema for the knowledge base backend: categories, articles, "
        "files and tags guarded by per-category read/write permissions."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "SERVE_PUBLIC": True,
    "APPEND_COMPONENTS": {
        "securitySchemes": {
            "bearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
            }
        }
    },
    "SECURITY": [{"bearerAuth": []}],
}
