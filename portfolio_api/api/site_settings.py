"""
Portfolio API - Site Settings
=============================

Single-row display settings. Both settings tables are created with their
defaults on first read.
"""

from datetime import datetime, timezone
from uuid import uuid4

from fastapi import APIRouter
from sqlalchemy import select

from portfolio_api.api.deps import CurrentAdmin, DbSession
from portfolio_api.core.models import ContactSettings, SiteSettings
from portfolio_api.core.schemas import (
    ContactSettingsResponse,
    ContactSettingsUpdate,
    SiteSettingsResponse,
    SiteSettingsUpdate,
)

router = APIRouter(prefix="/settings", tags=["Settings"])
contact_router = APIRouter(prefix="/contact-settings", tags=["Settings"])

SECTIONS = ("home_page", "contact_page", "visibility", "social_links")


async def get_or_create_site_settings(db) -> SiteSettings:
    result = await db.execute(select(SiteSettings).limit(1))
    site_settings = result.scalar_one_or_none()
    if site_settings is None:
        site_settings = SiteSettings(id=uuid4())
        db.add(site_settings)
        await db.commit()
        await db.refresh(site_settings)
    return site_settings


async def get_or_create_contact_settings(db) -> ContactSettings:
    result = await db.execute(select(ContactSettings).limit(1))
    contact_settings = result.scalar_one_or_none()
    if contact_settings is None:
        contact_settings = ContactSettings(id=uuid4())
        db.add(contact_settings)
        await db.commit()
        await db.refresh(contact_settings)
    return contact_settings


# ==========================================================================
# Site Settings
# ==========================================================================

@router.get("", response_model=SiteSettingsResponse, summary="Get site settings")
async def get_site_settings(db: DbSession) -> SiteSettingsResponse:
    return SiteSettingsResponse.model_validate(await get_or_create_site_settings(db))


@router.put("", response_model=SiteSettingsResponse, summary="Update site settings")
async def update_site_settings(
    data: SiteSettingsUpdate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> SiteSettingsResponse:
    """Merge each provided section into the stored one; omitted keys keep their values."""
    site_settings = await get_or_create_site_settings(db)

    for section in SECTIONS:
        patch = getattr(data, section)
        if patch is None:
            continue
        merged = {**getattr(site_settings, section), **patch.model_dump(exclude_unset=True)}
        # Reassign so the JSON column is flagged dirty
        setattr(site_settings, section, merged)

    await db.commit()
    await db.refresh(site_settings)
    return SiteSettingsResponse.model_validate(site_settings)


# ==========================================================================
# Contact Settings
# ==========================================================================

@contact_router.get("", response_model=ContactSettingsResponse, summary="Get contact settings")
async def get_contact_settings(db: DbSession) -> ContactSettingsResponse:
    return ContactSettingsResponse.model_validate(await get_or_create_contact_settings(db))


@contact_router.put("", response_model=ContactSettingsResponse, summary="Update contact settings")
async def update_contact_settings(
    data: ContactSettingsUpdate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> ContactSettingsResponse:
    """Empty or missing fields keep their current value."""
    contact_settings = await get_or_create_contact_settings(db)

    for field, value in data.model_dump(exclude_unset=True).items():
        if value:
            setattr(contact_settings, field, value)
    contact_settings.last_updated = datetime.now(timezone.utc)

    await db.commit()
    await db.refresh(contact_settings)
    return ContactSettingsResponse.model_validate(contact_settings)
