"""
Portfolio API - Admin Authentication
====================================

Login, token verification and first-admin bootstrap.
"""

from uuid import uuid4

import structlog
from fastapi import APIRouter, HTTPException, status
from passlib.hash import bcrypt
from sqlalchemy import func, select

from portfolio_api.api.deps import CurrentAdmin, DbSession, create_access_token
from portfolio_api.core.config import settings
from portfolio_api.core.exceptions import UnauthorizedError
from portfolio_api.core.models import Admin
from portfolio_api.core.schemas import (
    AdminInfo,
    AdminLogin,
    MessageResponse,
    TokenResponse,
    VerifyResponse,
)

router = APIRouter(prefix="/admin", tags=["Admin"])

logger = structlog.get_logger()


# ==========================================================================
# Helper Functions
# ==========================================================================

def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a hash."""
    return bcrypt.verify(password, password_hash)


# ==========================================================================
# Login / Verify
# ==========================================================================

@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login and get a token",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(data: AdminLogin, db: DbSession) -> TokenResponse:
    """
    Authenticate the admin and issue a 24h bearer token.

    Unknown username and wrong password produce the same 401.
    """
    result = await db.execute(select(Admin).where(Admin.username == data.username))
    admin = result.scalar_one_or_none()

    if admin is None or not verify_password(data.password, admin.password_hash):
        logger.info("admin_login_failed", username=data.username)
        raise UnauthorizedError("Invalid credentials")

    logger.info("admin_login", username=admin.username)
    return TokenResponse(
        token=create_access_token(admin.id, admin.username),
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


async def _verify(current_admin: CurrentAdmin) -> VerifyResponse:
    return VerifyResponse(valid=True, user=AdminInfo.model_validate(current_admin))


router.add_api_route(
    "/verify",
    _verify,
    methods=["GET", "POST"],
    response_model=VerifyResponse,
    summary="Verify the bearer token",
    responses={401: {"description": "Missing, invalid or expired token"}},
)


# ==========================================================================
# Bootstrap
# ==========================================================================

@router.post(
    "/initialize",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create the first admin account",
    responses={
        201: {"description": "Admin created"},
        400: {"description": "Admin already initialized"},
    },
)
async def initialize_admin(db: DbSession) -> MessageResponse:
    """
    Create the first admin from ADMIN_USERNAME / ADMIN_PASSWORD / ADMIN_EMAIL.

    Only works while no admin exists.
    """
    count = (await db.execute(select(func.count()).select_from(Admin))).scalar() or 0
    if count > 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admin already initialized",
        )

    admin = Admin(
        id=uuid4(),
        username=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL,
        password_hash=hash_password(settings.ADMIN_PASSWORD),
    )
    db.add(admin)
    await db.commit()

    logger.info("admin_initialized", username=admin.username)
    return MessageResponse(message="Admin initialized successfully", success=True)
