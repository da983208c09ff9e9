"""Password hashing primitives."""

from __future__ import annotations

import hashlib
import hmac
import secrets

import bcrypt

PBKDF2_ALGORITHM = "pbkdf2_sha256"
PBKDF2_ITERATIONS = 260_000
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
TEMP_PASSWORD_ALPHABET = "abcdefghjkmnpqrstuvwxyzABCDEFGHJKMNPQRSTUVWXYZ23456789"


def _derive(password: str, salt: str, iterations: int) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return digest.hex()


def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Return a salted PBKDF2 hash encoded as ``algorithm$iterations$salt$digest``."""
    salt = secrets.token_hex(16)
    return f"{PBKDF2_ALGORITHM}${iterations}${salt}${_derive(password, salt, iterations)}"


def is_legacy_hash(hashed_password: str | None) -> bool:
    """bcrypt hashes carried over from imported accounts."""
    return bool(hashed_password) and hashed_password.startswith(BCRYPT_PREFIXES)


def _verify_bcrypt(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def verify_password(password: str, hashed_password: str | None) -> bool:
    """Constant-time check of a password against a stored hash.

    Accepts PBKDF2 hashes and legacy bcrypt hashes; any other format never
    verifies.
    """
    if not hashed_password:
        return False
    if is_legacy_hash(hashed_password):
        return _verify_bcrypt(password, hashed_password)
    try:
        algorithm, iterations, salt, expected = hashed_password.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != PBKDF2_ALGORITHM:
        return False
    return hmac.compare_digest(_derive(password, salt, rounds), expected)


def generate_temp_password(length: int = 10) -> str:
    """Random human-typable password for admin resets."""
    return "".join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))
