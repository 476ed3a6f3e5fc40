"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks. Passwords
are truncated to 72 bytes (bcrypt's limit).
"""

import bcrypt

from carepoint.config import settings


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    Development uses a low work factor so registration stays fast in
    tests; everywhere else uses 12 rounds (~100ms per hash).
    """
    rounds = 4 if settings.environment == "development" else 12
    pw_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False
