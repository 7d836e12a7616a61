"""
Portfolio API - Projects
========================

Portfolio projects: public listing, admin-only management.
"""

from uuid import UUID, uuid4

from fastapi import APIRouter, status
from sqlalchemy import select

from portfolio_api.api.deps import CurrentAdmin, DbSession
from portfolio_api.core.exceptions import NotFoundError
from portfolio_api.core.models import Project
from portfolio_api.core.schemas import (
    MessageResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["Projects"])


async def get_project_or_404(project_id: UUID, db) -> Project:
    """Get project by ID or raise 404."""
    project = await db.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


@router.get("", response_model=list[ProjectResponse], summary="List projects")
async def list_projects(db: DbSession) -> list[ProjectResponse]:
    """All projects, most recently started first."""
    result = await db.execute(select(Project).order_by(Project.start_date.desc()))
    return [ProjectResponse.model_validate(p) for p in result.scalars().all()]


@router.get("/current", response_model=list[ProjectResponse], summary="List current projects")
async def list_current_projects(db: DbSession) -> list[ProjectResponse]:
    result = await db.execute(
        select(Project)
        .where(Project.is_current_project.is_(True))
        .order_by(Project.start_date.desc())
    )
    return [ProjectResponse.model_validate(p) for p in result.scalars().all()]


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
)
async def create_project(
    data: ProjectCreate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> ProjectResponse:
    project = Project(id=uuid4(), **data.model_dump())
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return ProjectResponse.model_validate(project)


@router.put("/{project_id}", response_model=ProjectResponse, summary="Update project")
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> ProjectResponse:
    project = await get_project_or_404(project_id, db)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(project, field, value)

    await db.commit()
    await db.refresh(project)
    return ProjectResponse.model_validate(project)


@router.delete("/{project_id}", response_model=MessageResponse, summary="Delete project")
async def delete_project(
    project_id: UUID,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> MessageResponse:
    project = await get_project_or_404(project_id, db)
    await db.delete(project)
    await db.commit()
    return MessageResponse(message="Project deleted successfully")
