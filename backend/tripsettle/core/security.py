"""
Security utilities for shared dashboard passwords and share keys.
"""
import hashlib
import secrets
import string
import bcrypt
from tripsettle.core.config import settings

SHARE_KEY_ALPHABET = string.ascii_letters + string.digits


def _pre_hash_password(password: str) -> bytes:
    """
    Pre-hash password with SHA256 to support passwords longer than 72 bytes.
    Returns bytes (32 bytes) which is well under bcrypt's 72-byte limit.
    """
    return hashlib.sha256(password.encode('utf-8')).digest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    pre_hashed = _pre_hash_password(plain_password)
    # hashed_password is a string starting with $2b$
    return bcrypt.checkpw(pre_hashed, hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """Hash a password with SHA256 pre-hash + bcrypt."""
    pre_hashed = _pre_hash_password(password)
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pre_hashed, salt)
    # Return as string for database storage
    return hashed.decode('utf-8')


def generate_share_key(length: int = None) -> str:
    """Generate a random alphanumeric key for shared dashboard URLs."""
    length = length or settings.SHARE_KEY_LENGTH
    return "".join(secrets.choice(SHARE_KEY_ALPHABET) for _ in range(length))
