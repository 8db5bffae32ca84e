"""Password hashing and session tokens.

Passwords are hashed with bcrypt. Session tokens are Fernet tokens over a
small JSON claim set; Fernet's embedded timestamp gives us expiry checks
without a session table.
"""
import json
import logging
import os
from functools import lru_cache
from typing import Optional

import bcrypt
from cryptography.fernet import Fernet, InvalidToken

from proposal_maker.config.settings import get_settings

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


@lru_cache(maxsize=1)
def get_session_key() -> bytes:
    """Return the Fernet key used to sign session tokens."""
    key = get_settings().session_secret_key or os.getenv("SESSION_SECRET_KEY")
    if key:
        return key.encode()
    logger.warning(
        "SESSION_SECRET_KEY not set: using a per-process key. "
        "Sessions will not survive a restart."
    )
    return Fernet.generate_key()


def create_session_token(account_id: int) -> str:
    claims = json.dumps({"sub": account_id})
    return Fernet(get_session_key()).encrypt(claims.encode()).decode()


def read_session_token(token: str) -> Optional[int]:
    """Return the account id in *token*, or None if invalid or expired."""
    ttl = get_settings().session_ttl_seconds
    try:
        claims = json.loads(Fernet(get_session_key()).decrypt(token.encode(), ttl=ttl))
    except (InvalidToken, ValueError):
        return None
    sub = claims.get("sub") if isinstance(claims, dict) else None
    return sub if isinstance(sub, int) else None
