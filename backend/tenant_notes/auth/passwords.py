"""
Password hashing with bcrypt.

Only the hash is stored. `verify_password` is a constant-time comparison
performed by bcrypt itself.
"""

import logging
from typing import Optional

import bcrypt

from tenant_notes.config import settings

logger = logging.getLogger(__name__)


def hash_password(plain: str, rounds: Optional[int] = None) -> str:
    """Return a bcrypt hash (salt included) for `plain`. Cost defaults to PASSWORD_HASH_ROUNDS."""
    cost = rounds if rounds is not None else settings.password_hash_rounds
    hashed = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=cost))
    return hashed.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """
    Check `plain` against a stored bcrypt hash.

    A malformed stored hash counts as a mismatch so a corrupt row
    produces the same 401 as a wrong password.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False
