"""
Portfolio API - Request Dependencies
====================================

Admin bearer tokens and the annotated dependency aliases used by routers.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.config import settings
from portfolio_api.core.database import get_db
from portfolio_api.core.exceptions import UnauthorizedError
from portfolio_api.core.models import Admin

TOKEN_TYPE = "access"

# Missing credentials are reported as our own 401, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    admin_id: UUID,
    username: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Sign an admin token.

    Args:
        admin_id: Stored as the ``sub`` claim
        username: Echoed back by /admin/verify
        expires_delta: Lifetime, ACCESS_TOKEN_EXPIRE_MINUTES by default
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(admin_id),
        "username": username,
        "type": TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "jti": secrets.token_hex(16),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Verify signature and expiry; raises UnauthorizedError otherwise."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise UnauthorizedError("Invalid or expired token") from e


async def get_current_admin(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Admin:
    """Resolve the bearer token to an existing admin or raise 401."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    claims = decode_token(credentials.credentials)
    if claims.get("type") != TOKEN_TYPE:
        raise UnauthorizedError("Invalid token type")

    try:
        admin_id = UUID(claims.get("sub") or "")
    except ValueError as e:
        raise UnauthorizedError("Invalid token payload") from e

    admin = await db.get(Admin, admin_id)
    if admin is None:
        raise UnauthorizedError("Admin not found")
    return admin


CurrentAdmin = Annotated[Admin, Depends(get_current_admin)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
