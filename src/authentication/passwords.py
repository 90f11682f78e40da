"""Password hashing with scrypt, plus verification of legacy bcrypt hashes.

Stored formats:

* current: ``<hex scrypt digest>.<hex salt>`` (64-byte key, N=16384, r=8, p=1;
  the hex salt string itself is the scrypt salt)
* legacy: bcrypt modular-crypt strings starting with ``$2a$``, ``$2b$`` or ``$2y$``

Legacy hashes still verify, and the login path re-hashes them with scrypt
after a successful check (see ``authentication.services``).
"""

import hashlib
import hmac
import secrets

import bcrypt

SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_KEY_LENGTH = 64
SALT_BYTES = 16
SEPARATOR = "."
LEGACY_PREFIXES = ("$2a$", "$2b$", "$2y$")


def _scrypt(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=SCRYPT_KEY_LENGTH,
    )


def hash_password(password: str) -> str:
    """Hash ``password`` with the current scheme."""
    salt = secrets.token_hex(SALT_BYTES)
    return f"{_scrypt(password, salt).hex()}{SEPARATOR}{salt}"


def is_legacy_hash(stored: str | None) -> bool:
    return bool(stored) and stored.startswith(LEGACY_PREFIXES)


def verify_password(supplied: str, stored: str | None) -> bool:
    """Return True if ``supplied`` matches ``stored`` under either scheme.

    Unparseable stored values yield False; this function does not raise.
    """
    if not stored or supplied is None:
        return False

    if is_legacy_hash(stored):
        try:
            return bcrypt.checkpw(supplied.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            return False

    parts = stored.split(SEPARATOR)
    if len(parts) != 2 or not all(parts):
        return False
    digest_hex, salt = parts
    try:
        expected = bytes.fromhex(digest_hex)
        candidate = _scrypt(supplied, salt)
    except ValueError:
        return False
    if len(expected) != len(candidate):
        return False
    return hmac.compare_digest(expected, candidate)


__all__ = ["hash_password", "verify_password", "is_legacy_hash"]
