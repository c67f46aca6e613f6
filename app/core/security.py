import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

import bcrypt

from app.core import config

logger = logging.getLogger(__name__)

# bcrypt hard limit
MAX_PASSWORD_BYTES = 72


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes read back from SQLite as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password with a salted bcrypt digest.

    Length limits are enforced by request validation; this is only ever
    called with passwords of at most 72 UTF-8 bytes.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor (defaults to BCRYPT_ROUNDS)

    Returns:
        bcrypt hash string

    Raises:
        ValueError: If the password exceeds bcrypt's 72-byte limit
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > MAX_PASSWORD_BYTES:
        raise ValueError("Password too long (bcrypt limit 72 bytes)")
    salt = bcrypt.gensalt(rounds=rounds or config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a password against its bcrypt hash.

    bcrypt.checkpw compares digests in constant time.

    Returns:
        True if password matches hash, False otherwise
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(password_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification failed on malformed hash: {e}")
        return False


def generate_session_token() -> str:
    """Return 256 bits from the OS CSPRNG as 64 hex characters."""
    return secrets.token_hex(32)
