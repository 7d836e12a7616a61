"""
Portfolio API - Experiences
===========================

Work history entries: public listing, admin-only management.
"""

from typing import Optional
from uuid import UUID, uuid4

from fastapi import APIRouter, status
from sqlalchemy import select

from portfolio_api.api.deps import CurrentAdmin, DbSession
from portfolio_api.core.exceptions import NotFoundError
from portfolio_api.core.models import Experience
from portfolio_api.core.schemas import (
    ExperienceCreate,
    ExperienceResponse,
    ExperienceUpdate,
    MessageResponse,
)

router = APIRouter(prefix="/experiences", tags=["Experiences"])


async def get_experience_or_404(experience_id: UUID, db) -> Experience:
    """Get experience by ID or raise 404."""
    experience = await db.get(Experience, experience_id)
    if experience is None:
        raise NotFoundError("Experience not found")
    return experience


@router.get("", response_model=list[ExperienceResponse], summary="List experiences")
async def list_experiences(db: DbSession) -> list[ExperienceResponse]:
    result = await db.execute(select(Experience).order_by(Experience.start_date.desc()))
    return [ExperienceResponse.model_validate(e) for e in result.scalars().all()]


@router.get(
    "/current",
    response_model=Optional[ExperienceResponse],
    summary="Get current role",
)
async def get_current_experience(db: DbSession) -> Optional[ExperienceResponse]:
    """The current role, or null when there is none."""
    result = await db.execute(
        select(Experience)
        .where(Experience.is_current_role.is_(True))
        .order_by(Experience.start_date.desc())
    )
    experience = result.scalars().first()
    return ExperienceResponse.model_validate(experience) if experience else None


@router.post(
    "",
    response_model=ExperienceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create experience",
)
async def create_experience(
    data: ExperienceCreate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> ExperienceResponse:
    experience = Experience(id=uuid4(), **data.model_dump())
    db.add(experience)
    await db.commit()
    await db.refresh(experience)
    return ExperienceResponse.model_validate(experience)


@router.put("/{experience_id}", response_model=ExperienceResponse, summary="Update experience")
async def update_experience(
    experience_id: UUID,
    data: ExperienceUpdate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> ExperienceResponse:
    experience = await get_experience_or_404(experience_id, db)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(experience, field, value)

    await db.commit()
    await db.refresh(experience)
    return ExperienceResponse.model_validate(experience)


@router.delete("/{experience_id}", response_model=MessageResponse, summary="Delete experience")
async def delete_experience(
    experience_id: UUID,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> MessageResponse:
    experience = await get_experience_or_404(experience_id, db)
    await db.delete(experience)
    await db.commit()
    return MessageResponse(message="Experience deleted successfully")
