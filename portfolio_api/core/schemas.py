"""
Portfolio API - Pydantic Schemas
================================

Request and response schemas for API validation.
"""

from datetime import date, datetime
from typing import Any, ClassVar, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from portfolio_api.core.models import (
    ContactStatus,
    PhaseStatus,
    PlanStatus,
    TaskStatus,
)


# ==========================================================================
# Base Schemas
# ==========================================================================

class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class TimestampSchema(BaseSchema):
    """Schema with timestamp fields."""

    created_at: datetime
    updated_at: datetime


class PartialUpdateSchema(BaseSchema):
    """
    Base for PUT bodies where omitted fields keep their stored value.

    Fields listed in ``not_null`` map to NOT NULL columns and may be left
    out, but not sent as an explicit null.
    """

    not_null: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulled = [
            name for name in self.not_null
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self


class MessageResponse(BaseSchema):
    """Generic message response."""

    message: str
    success: bool = True


class ErrorResponse(BaseSchema):
    """Error response schema."""

    error: str
    detail: Optional[str] = None
    code: Optional[str] = None


class HealthResponse(BaseSchema):
    """Health check response."""

    status: str
    message: str
    version: str
    environment: str


# ==========================================================================
# Admin / Auth Schemas
# ==========================================================================

class AdminLogin(BaseSchema):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)


class TokenResponse(BaseSchema):
    token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until the token expires


class AdminInfo(BaseSchema):
    id: UUID
    username: str


class VerifyResponse(BaseSchema):
    valid: bool
    user: AdminInfo


# ==========================================================================
# Project Schemas
# ==========================================================================

class ProjectCreate(BaseSchema):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    tech_stack: list[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, max_length=2000)
    demo_link: Optional[str] = Field(None, max_length=2000)
    github_link: Optional[str] = Field(None, max_length=2000)
    is_current_project: bool = False
    progress: Optional[int] = Field(None, ge=0, le=100)
    start_date: datetime
    end_date: Optional[datetime] = None


class ProjectUpdate(PartialUpdateSchema):
    """Partial update; only provided fields are changed."""

    not_null = ("title", "description", "tech_stack", "is_current_project", "start_date")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    tech_stack: Optional[list[str]] = None
    image_url: Optional[str] = Field(None, max_length=2000)
    demo_link: Optional[str] = Field(None, max_length=2000)
    github_link: Optional[str] = Field(None, max_length=2000)
    is_current_project: Optional[bool] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ProjectResponse(TimestampSchema):
    id: UUID
    title: str
    description: str
    tech_stack: list[str]
    image_url: Optional[str]
    demo_link: Optional[str]
    github_link: Optional[str]
    is_current_project: bool
    progress: Optional[int]
    start_date: datetime
    end_date: Optional[datetime]


# ==========================================================================
# Skill Schemas
# ==========================================================================

class SkillCreate(BaseSchema):
    name: str = Field(min_length=1, max_length=100)
    category: str = Field(min_length=1, max_length=100)
    proficiency: int = Field(ge=0, le=100)
    icon: Optional[str] = Field(None, max_length=255)


class SkillUpdate(PartialUpdateSchema):
    not_null = ("name", "category", "proficiency")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    proficiency: Optional[int] = Field(None, ge=0, le=100)
    icon: Optional[str] = Field(None, max_length=255)


class SkillResponse(TimestampSchema):
    id: UUID
    name: str
    category: str
    proficiency: int
    icon: Optional[str]


# ==========================================================================
# Experience Schemas
# ==========================================================================

class ExperienceCreate(BaseSchema):
    company: str = Field(min_length=1, max_length=255)
    role: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    start_date: datetime
    end_date: Optional[datetime] = None
    responsibilities: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    is_current_role: bool = False


class ExperienceUpdate(PartialUpdateSchema):
    not_null = (
        "company",
        "role",
        "description",
        "start_date",
        "responsibilities",
        "technologies",
        "is_current_role",
    )

    company: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    responsibilities: Optional[list[str]] = None
    technologies: Optional[list[str]] = None
    is_current_role: Optional[bool] = None


class ExperienceResponse(TimestampSchema):
    id: UUID
    company: str
    role: str
    description: str
    start_date: datetime
    end_date: Optional[datetime]
    responsibilities: list[str]
    technologies: list[str]
    is_current_role: bool


# ==========================================================================
# Contact Schemas
# ==========================================================================

class ContactCreate(BaseSchema):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    message: str = Field(min_length=1, max_length=10000)


class ContactReply(BaseSchema):
    reply: str = Field(min_length=1)


class ContactResponse(BaseSchema):
    id: UUID
    name: str
    email: str
    message: str
    created_at: datetime
    status: ContactStatus
    reply: Optional[str] = None
    reply_date: Optional[datetime] = None


class ContactThreadResponse(BaseSchema):
    """Submissions from one sender, oldest message first."""

    email: str
    name: str
    messages: list[ContactResponse]
    total_messages: int
    has_unreplied: bool
    latest_message: ContactResponse


# ==========================================================================
# Settings Schemas
# ==========================================================================

class HomePageUpdate(BaseSchema):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    show_chat_bot: Optional[bool] = None


class ContactPageUpdate(BaseSchema):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class VisibilityUpdate(BaseSchema):
    show_skills: Optional[bool] = None
    show_projects: Optional[bool] = None
    show_experiences: Optional[bool] = None


class SocialLinksUpdate(BaseSchema):
    github: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None


class SiteSettingsUpdate(BaseSchema):
    """Each provided section is merged into the stored one."""

    home_page: Optional[HomePageUpdate] = None
    contact_page: Optional[ContactPageUpdate] = None
    visibility: Optional[VisibilityUpdate] = None
    social_links: Optional[SocialLinksUpdate] = None


class SiteSettingsResponse(BaseSchema):
    home_page: dict[str, Any]
    contact_page: dict[str, Any]
    visibility: dict[str, Any]
    social_links: dict[str, Any]
    updated_at: datetime


class ContactSettingsUpdate(BaseSchema):
    connect_with_me_title: Optional[str] = None
    open_for_opportunities_title: Optional[str] = None
    open_for_opportunities_text: Optional[str] = None
    github_link: Optional[str] = None
    linkedin_link: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ContactSettingsResponse(BaseSchema):
    connect_with_me_title: str
    open_for_opportunities_title: str
    open_for_opportunities_text: str
    github_link: str
    linkedin_link: str
    email: str
    phone: str
    last_updated: datetime


# ==========================================================================
# Learning Plan Schemas
# ==========================================================================

class PlanCreate(BaseSchema):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    goals: list[str] = Field(default_factory=list)
    status: PlanStatus = PlanStatus.ACTIVE
    start_date: Optional[datetime] = None
    target_end_date: Optional[datetime] = None


class PlanUpdate(PartialUpdateSchema):
    not_null = ("title", "goals", "status")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    goals: Optional[list[str]] = None
    status: Optional[PlanStatus] = None
    start_date: Optional[datetime] = None
    target_end_date: Optional[datetime] = None
    actual_end_date: Optional[datetime] = None


class PlanResponse(TimestampSchema):
    id: UUID
    title: str
    description: Optional[str]
    goals: list[str]
    status: PlanStatus
    start_date: Optional[datetime]
    target_end_date: Optional[datetime]
    actual_end_date: Optional[datetime]


class PhaseCreate(BaseSchema):
    plan_id: UUID
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    order: int = Field(0, ge=0)
    status: PhaseStatus = PhaseStatus.NOT_STARTED


class PhaseUpdate(PartialUpdateSchema):
    not_null = ("title", "order", "status")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    order: Optional[int] = Field(None, ge=0)
    status: Optional[PhaseStatus] = None


class PhaseResponse(TimestampSchema):
    id: UUID
    plan_id: UUID
    title: str
    description: Optional[str]
    order: int
    status: PhaseStatus


class TaskCreate(BaseSchema):
    plan_id: UUID
    phase_id: Optional[UUID] = None
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    aim: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING


class TaskUpdate(PartialUpdateSchema):
    not_null = ("title", "status", "total_time_spent")

    phase_id: Optional[UUID] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    aim: Optional[str] = None
    status: Optional[TaskStatus] = None
    total_time_spent: Optional[int] = Field(None, ge=0)


class TaskResponse(TimestampSchema):
    id: UUID
    plan_id: UUID
    phase_id: Optional[UUID]
    title: str
    description: Optional[str]
    aim: Optional[str]
    status: TaskStatus
    total_time_spent: int


class PlanDetailResponse(BaseSchema):
    plan: PlanResponse
    phases: list[PhaseResponse]
    tasks: list[TaskResponse]


class CascadeDeleteResponse(BaseSchema):
    """Outcome of a cascading delete; ``complete`` is False if cleanup stopped early."""

    message: str
    success: bool = True
    complete: bool
    deleted: dict[str, int]
    failed_step: Optional[str] = None


# ==========================================================================
# Time Tracking Schemas
# ==========================================================================

class TimeLogResponse(TimestampSchema):
    id: UUID
    task_id: UUID
    start_time: datetime
    end_time: Optional[datetime]
    duration: int
    is_active: bool


class ActiveTimerResponse(BaseSchema):
    active_timer: Optional[TimeLogResponse] = None


class TimerStopResponse(BaseSchema):
    time_log: TimeLogResponse
    total_time_spent: int


class TaskTimeBreakdown(BaseSchema):
    task_id: UUID
    title: str
    total_time_spent: int
    total_hours: str
    status: TaskStatus


class PlanStats(BaseSchema):
    plan_id: UUID
    total_seconds: int
    total_hours: str
    total_tasks: int
    completed_tasks: int
    completion_percentage: float
    task_breakdown: list[TaskTimeBreakdown]


class DailyStats(BaseSchema):
    date: date
    total_seconds: int
    total_hours: str
    sessions_count: int
    time_logs: list[TimeLogResponse]


class WeeklyStats(BaseSchema):
    week_start: date
    week_end: date
    total_seconds: int
    total_hours: str
    sessions_count: int
    daily_breakdown: dict[str, int]


# ==========================================================================
# Comment Schemas
# ==========================================================================

class CommentCreate(BaseSchema):
    content: str = Field(min_length=1, max_length=5000)
    author: str = Field(min_length=1, max_length=255)


class AdminCommentCreate(BaseSchema):
    content: str = Field(min_length=1, max_length=5000)
    author: str = Field("Admin", min_length=1, max_length=255)


class CommentResponse(TimestampSchema):
    id: UUID
    task_id: UUID
    content: str
    author: str
    is_admin_comment: bool
