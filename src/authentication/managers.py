"""Custom user manager creating users with scrypt password hashes."""

from django.contrib.auth.base_user import BaseUserManager

from .passwords import hash_password


class UserManager(BaseUserManager):
    """Manager to create users with hashed passwords and a role."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str, **extra_fields):
        if not email:
            raise ValueError("The Email must be set")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.password_hash = hash_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields):
        """Create a regular user unless another ``role`` is given."""
        extra_fields.setdefault("role", "user")
        if password is None:
            raise ValueError("Password must be provided")
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str, **extra_fields):
        """Create an admin; used by ``createsuperuser``."""
        extra_fields["role"] = "admin"
        extra_fields.setdefault("is_active", True)
        return self._create_user(email, password, **extra_fields)

    def get_by_email(self, email: str):
        """Case-insensitive lookup; returns None when absent."""
        return self.filter(email__iexact=email).first()


__all__ = ["UserManager"]
