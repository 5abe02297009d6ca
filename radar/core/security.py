"""JWT and admin API key utilities."""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from radar.config import settings
from radar.core.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

ADMIN_API_KEY_PREFIX = "radar_"


def create_access_token(
    subject: str,
    *,
    is_admin: bool = False,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Create a JWT access token."""
    logger.info("Creating access token", extra={"subject": subject, "is_admin": is_admin})
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode: dict[str, Any] = {
        "sub": subject,
        "exp": expire,
        "type": "access",
        "is_admin": is_admin,
    }
    if extra_claims:
        to_encode.update(extra_claims)

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str, expected_type: str = "access") -> dict[str, Any]:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise InvalidTokenError(str(e)) from e

    token_type = payload.get("type")
    if token_type != expected_type:
        logger.warning("Token type mismatch", extra={"expected": expected_type, "got": token_type})
        raise InvalidTokenError(f"Expected {expected_type} token, got {token_type}")

    if payload.get("sub") is None:
        logger.warning("Token missing subject")
        raise InvalidTokenError("Token missing subject")

    return payload


def generate_admin_api_key(token_bytes: int = 32) -> str:
    """Generate a plaintext admin API key for cron callers."""
    return f"{ADMIN_API_KEY_PREFIX}{secrets.token_urlsafe(token_bytes)}"


def hash_admin_api_key(api_key: str) -> str:
    """HMAC an admin API key with the server-side pepper."""
    normalized = api_key.strip()
    return hmac.new(
        settings.get_admin_api_key_pepper(),
        normalized.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def is_valid_admin_api_key(api_key: str) -> bool:
    """Compare a presented key against configured keys in constant time."""
    candidate = hash_admin_api_key(api_key)
    return any(
        hmac.compare_digest(candidate, hash_admin_api_key(configured))
        for configured in settings.get_admin_api_keys()
    )
