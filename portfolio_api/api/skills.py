"""
Portfolio API - Skills
======================

Public skill listing and admin-only management.
"""

from uuid import UUID, uuid4

from fastapi import APIRouter, status
from sqlalchemy import select

from portfolio_api.api.deps import CurrentAdmin, DbSession
from portfolio_api.core.exceptions import NotFoundError
from portfolio_api.core.models import Skill
from portfolio_api.core.schemas import MessageResponse, SkillCreate, SkillResponse, SkillUpdate

router = APIRouter(prefix="/skills", tags=["Skills"])


async def get_skill_or_404(skill_id: UUID, db) -> Skill:
    """Get skill by ID or raise 404."""
    skill = await db.get(Skill, skill_id)
    if skill is None:
        raise NotFoundError("Skill not found")
    return skill


@router.get("", response_model=list[SkillResponse], summary="List skills")
async def list_skills(db: DbSession) -> list[SkillResponse]:
    """All skills, ordered by category then name."""
    result = await db.execute(select(Skill).order_by(Skill.category, Skill.name))
    return [SkillResponse.model_validate(skill) for skill in result.scalars().all()]


@router.get(
    "/category/{category}",
    response_model=list[SkillResponse],
    summary="List skills in a category",
)
async def list_skills_by_category(category: str, db: DbSession) -> list[SkillResponse]:
    result = await db.execute(
        select(Skill).where(Skill.category == category).order_by(Skill.name)
    )
    return [SkillResponse.model_validate(skill) for skill in result.scalars().all()]


@router.post(
    "",
    response_model=SkillResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create skill",
)
async def create_skill(data: SkillCreate, current_admin: CurrentAdmin, db: DbSession) -> SkillResponse:
    skill = Skill(id=uuid4(), **data.model_dump())
    db.add(skill)
    await db.commit()
    await db.refresh(skill)
    return SkillResponse.model_validate(skill)


@router.put("/{skill_id}", response_model=SkillResponse, summary="Update skill")
async def update_skill(
    skill_id: UUID,
    data: SkillUpdate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> SkillResponse:
    skill = await get_skill_or_404(skill_id, db)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(skill, field, value)

    await db.commit()
    await db.refresh(skill)
    return SkillResponse.model_validate(skill)


@router.delete("/{skill_id}", response_model=MessageResponse, summary="Delete skill")
async def delete_skill(skill_id: UUID, current_admin: CurrentAdmin, db: DbSession) -> MessageResponse:
    skill = await get_skill_or_404(skill_id, db)
    await db.delete(skill)
    await db.commit()
    return MessageResponse(message="Skill deleted successfully")
