"""Route guard — reads the session issued by the hosted auth service.

Sessions are never created here.  The access token arrives as a Bearer
header (API clients) or the ``access_token`` cookie (browser navigation)
and is validated with the shared JWT secret.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, Request
from jose import ExpiredSignatureError, JWTError, jwt

from hr_records.auth.schemas import AuthSession
from hr_records.common.exceptions import LoginRequired
from hr_records.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "access_token"


def _extract_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


def decode_session(token: str) -> AuthSession:
    """Validate *token*; raises ``LoginRequired`` when it is not usable."""
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise LoginRequired("Session has expired.")
    except JWTError:
        raise LoginRequired("Invalid session token.")

    if not payload.get("sub"):
        raise LoginRequired("Session token has no subject.")

    expires_at = payload.get("exp")
    return AuthSession(
        user_id=str(payload["sub"]),
        email=payload.get("email"),
        role=payload.get("role"),
        expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc) if expires_at else None,
    )


# ── Dependencies ────────────────────────────────────────────────────

async def get_session(request: Request) -> Optional[AuthSession]:
    """The current session, or ``None`` when absent or invalid."""
    token = _extract_token(request)
    if not token:
        return None
    try:
        return decode_session(token)
    except LoginRequired as exc:
        logger.info("Rejected session on %s: %s", request.url.path, exc.reason)
        return None


async def require_session(
    session: Optional[AuthSession] = Depends(get_session),
) -> AuthSession:
    """Protected routes: no session → redirect to the login route."""
    if session is None:
        raise LoginRequired()
    return session
