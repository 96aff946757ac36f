"""
Password hashing

Stored format: pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>
"""

import hashlib
import hmac
import secrets
from typing import Optional

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 260000
SALT_BYTES = 16


def hash_password(password: str, iterations: int = ITERATIONS) -> str:
    """Hash a password with a fresh random salt"""
    salt = secrets.token_hex(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return f"{ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Check a password against a stored hash. Malformed or missing hashes never match."""
    if not password_hash:
        return False

    try:
        algorithm, iterations, salt, expected = password_hash.split("$")
        rounds = int(iterations)
    except ValueError:
        return False

    if algorithm != ALGORITHM:
        return False

    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), rounds)
    return hmac.compare_digest(digest.hex(), expected)
