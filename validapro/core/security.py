from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt

from validapro.config import get_settings

logger = logging.getLogger(__name__)

_HASH_SCHEME = "pbkdf2_sha256"


def _hash_password(password: str, salt: str, rounds: int) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        rounds,
    )
    return digest.hex()


def hash_password(password: str, *, rounds: Optional[int] = None) -> str:
    if rounds is None:
        rounds = get_settings().PASSWORD_PBKDF2_ROUNDS
    salt = secrets.token_hex(16)
    return f"{_HASH_SCHEME}${rounds}${salt}${_hash_password(password, salt, rounds)}"


def verify_password(password: str, stored_hash: Optional[str]) -> bool:
    if not password or not stored_hash:
        return False
    parts = stored_hash.split("$")
    if len(parts) != 4 or parts[0] != _HASH_SCHEME:
        return False
    _, rounds_text, salt, expected = parts
    try:
        rounds = int(rounds_text)
    except ValueError:
        return False
    return hmac.compare_digest(_hash_password(password, salt, rounds), expected)


@lru_cache
def _process_secret() -> str:
    logger.warning("JWT_SECRET is not set; using a per-process secret. Tokens will not survive a restart.")
    return secrets.token_urlsafe(32)


def _jwt_secret() -> str:
    return get_settings().JWT_SECRET or _process_secret()


def create_access_token(
    user_id: int,
    role: str,
    store_id: Optional[int],
    *,
    expires_minutes: Optional[int] = None,
) -> str:
    settings = get_settings()
    if expires_minutes is None:
        expires_minutes = settings.JWT_EXPIRES_MINUTES
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "store_id": store_id,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, _jwt_secret(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and verify a bearer token; raises ``jwt.PyJWTError`` when invalid."""
    settings = get_settings()
    return jwt.decode(
        token,
        _jwt_secret(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )


def get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None
