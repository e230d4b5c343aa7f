"""Password hashing utilities."""

import base64
import hashlib

import bcrypt


def _pre_hash(password: str) -> bytes:
    """SHA-256 the password so inputs longer than bcrypt's 72-byte limit still count.

    The digest is base64-encoded since bcrypt rejects NUL bytes.
    """
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password for storage.

    Args:
        password: Plain-text password
        rounds: bcrypt cost factor

    Returns:
        bcrypt hash as a string
    """
    hashed = bcrypt.hashpw(_pre_hash(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain-text password against a stored hash.

    Args:
        password: Plain-text password
        password_hash: Stored bcrypt hash

    Returns:
        True if the password matches
    """
    try:
        return bcrypt.checkpw(_pre_hash(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False
