"""
Portfolio API - Database Models
===============================

SQLAlchemy models for all entities.

Learning records (plans, phases, tasks, time logs, comments) reference each
other by id only, without foreign keys. Referential cleanup is done by
``portfolio_api.core.learning.cascade``.
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_api.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize to UTC. Naive values (SQLite drops tzinfo on read) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


# ==========================================================================
# Enums
# ==========================================================================

class ContactStatus(str, enum.Enum):
    """Reply state of a contact submission."""
    PENDING = "pending"
    REPLIED = "replied"


class PlanStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"
    ARCHIVED = "archived"


class PhaseStatus(str, enum.Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# ==========================================================================
# Mixins
# ==========================================================================

class UUIDPrimaryKeyMixin:
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )


# ==========================================================================
# Admin
# ==========================================================================

class Admin(Base, UUIDPrimaryKeyMixin):
    """Site administrator account."""

    __tablename__ = "admins"

    username: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Admin {self.username}>"


# ==========================================================================
# Portfolio Content
# ==========================================================================

class Project(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "projects"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    tech_stack: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    demo_link: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    github_link: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    is_current_project: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    progress: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # 0-100
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Project {self.title}>"


class Skill(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "skills"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    proficiency: Mapped[int] = mapped_column(Integer, nullable=False)  # 0-100
    icon: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Skill {self.name}>"


class Experience(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "experiences"

    company: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    responsibilities: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    technologies: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    is_current_role: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Experience {self.role} @ {self.company}>"


# ==========================================================================
# Contact
# ==========================================================================

class Contact(Base, UUIDPrimaryKeyMixin):
    """
    Contact form submission.

    Only the reply fields change after creation.
    """

    __tablename__ = "contacts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    status: Mapped[ContactStatus] = mapped_column(
        Enum(ContactStatus, values_callable=_enum_values),
        default=ContactStatus.PENDING,
        nullable=False,
    )
    reply: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reply_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Contact {self.email} {self.status.value}>"


# ==========================================================================
# Settings (single-row tables)
# ==========================================================================

DEFAULT_HOME_PAGE = {
    "title": "Welcome to My Portfolio",
    "subtitle": "Full Stack Developer",
    "description": "I build modern web applications with cutting-edge technologies",
    "show_chat_bot": True,
}

DEFAULT_CONTACT_PAGE = {
    "title": "Let's Connect",
    "subtitle": "Get in Touch",
    "description": "I am open to discussing new projects and opportunities",
    "phone": "",
    "email": "",
}

DEFAULT_VISIBILITY = {
    "show_skills": True,
    "show_projects": True,
    "show_experiences": True,
}

DEFAULT_SOCIAL_LINKS = {
    "github": "",
    "linkedin": "",
    "twitter": "",
}


class SiteSettings(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Site-wide display settings, stored as one row of JSON sections."""

    __tablename__ = "site_settings"

    home_page: Mapped[dict] = mapped_column(
        JSON, default=lambda: dict(DEFAULT_HOME_PAGE), nullable=False
    )
    contact_page: Mapped[dict] = mapped_column(
        JSON, default=lambda: dict(DEFAULT_CONTACT_PAGE), nullable=False
    )
    visibility: Mapped[dict] = mapped_column(
        JSON, default=lambda: dict(DEFAULT_VISIBILITY), nullable=False
    )
    social_links: Mapped[dict] = mapped_column(
        JSON, default=lambda: dict(DEFAULT_SOCIAL_LINKS), nullable=False
    )


class ContactSettings(Base, UUIDPrimaryKeyMixin):
    """Texts and links shown on the contact page."""

    __tablename__ = "contact_settings"

    connect_with_me_title: Mapped[str] = mapped_column(
        String(255), default="Connect With Me", nullable=False
    )
    open_for_opportunities_title: Mapped[str] = mapped_column(
        String(255), default="Open for Opportunities", nullable=False
    )
    open_for_opportunities_text: Mapped[str] = mapped_column(
        Text,
        default=(
            "I'm currently interested in new backend development opportunities. "
            "Feel free to reach out if you'd like to discuss potential collaboration!"
        ),
        nullable=False,
    )
    github_link: Mapped[str] = mapped_column(String(2000), default="", nullable=False)
    linkedin_link: Mapped[str] = mapped_column(String(2000), default="", nullable=False)
    email: Mapped[str] = mapped_column(String(255), default="contact@example.com", nullable=False)
    phone: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


# ==========================================================================
# Learning Tracker
# ==========================================================================

class LearningPlan(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Top-level learning goal containing phases and tasks."""

    __tablename__ = "learning_plans"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    goals: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    status: Mapped[PlanStatus] = mapped_column(
        Enum(PlanStatus, values_callable=_enum_values),
        default=PlanStatus.ACTIVE,
        nullable=False,
    )
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    target_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<LearningPlan {self.title}>"


class Phase(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "learning_phases"

    plan_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[PhaseStatus] = mapped_column(
        Enum(PhaseStatus, values_callable=_enum_values),
        default=PhaseStatus.NOT_STARTED,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Phase {self.order}: {self.title}>"


class LearningTask(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "learning_tasks"

    plan_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    phase_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    aim: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, values_callable=_enum_values),
        default=TaskStatus.PENDING,
        nullable=False,
    )
    total_time_spent: Mapped[int] = mapped_column(
        Integer, default=0, server_default=text("0"), nullable=False
    )  # seconds

    def __repr__(self) -> str:
        return f"<LearningTask {self.title}>"


class TimeLog(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A single start/stop timer session attributed to a task."""

    __tablename__ = "time_logs"
    __table_args__ = (
        # At most one running timer per task
        Index(
            "uq_time_logs_active_task",
            "task_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    task_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    duration: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # seconds
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        state = "active" if self.is_active else f"{self.duration}s"
        return f"<TimeLog {self.task_id} {state}>"


class TaskComment(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "task_comments"

    task_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    is_admin_comment: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
