"""Administrator authentication for every radar and pipeline route."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated, Literal

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from radar.core.exceptions import InvalidTokenError
from radar.core.security import decode_token, hash_admin_api_key, is_valid_admin_api_key

logger = logging.getLogger(__name__)

AUTHENTICATION_REQUIRED_DETAIL = "Authentication required"
INVALID_CREDENTIALS_DETAIL = "Invalid or expired credentials"
ADMIN_REQUIRED_DETAIL = "Admin access required"

bearer_scheme = HTTPBearer(auto_error=False)
admin_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


@dataclass(frozen=True)
class AdminCapability:
    """Proof that the caller is an administrator, passed to handlers that need it."""

    subject: str
    method: Literal["token", "api_key"]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    api_key: Annotated[str | None, Security(admin_api_key_header)],
) -> AdminCapability:
    """Resolve the caller to an admin capability or fail with 401/403.

    Cron callers send ``X-API-Key``; the dashboard sends a bearer token whose
    ``is_admin`` claim must be true.
    """
    candidate = (api_key or "").strip()
    if candidate:
        if is_valid_admin_api_key(candidate):
            # Only a hash prefix is ever logged or exposed as the subject.
            return AdminCapability(
                subject=f"api_key:{hash_admin_api_key(candidate)[:12]}",
                method="api_key",
            )
        logger.warning("Admin API key rejected")
        raise _unauthorized(INVALID_CREDENTIALS_DETAIL)

    if credentials is None:
        raise _unauthorized(AUTHENTICATION_REQUIRED_DETAIL)

    try:
        payload = decode_token(credentials.credentials)
    except InvalidTokenError as e:
        raise _unauthorized(INVALID_CREDENTIALS_DETAIL) from e

    subject = str(payload["sub"])
    if payload.get("is_admin") is not True:
        logger.warning("Non-admin caller rejected", extra={"subject": subject})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ADMIN_REQUIRED_DETAIL)

    return AdminCapability(subject=subject, method="token")


AdminUser = Annotated[AdminCapability, Depends(require_admin)]
