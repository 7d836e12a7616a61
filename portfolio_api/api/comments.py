"""
Portfolio API - Task Comments
=============================

Anyone may read and post comments on a learning task; admin comments are
flagged and comment deletion is admin-only.
"""

from uuid import UUID, uuid4

from fastapi import APIRouter, status
from sqlalchemy import select

from portfolio_api.api.deps import CurrentAdmin, DbSession
from portfolio_api.core.exceptions import NotFoundError
from portfolio_api.core.models import LearningTask, TaskComment
from portfolio_api.core.schemas import (
    AdminCommentCreate,
    CommentCreate,
    CommentResponse,
    MessageResponse,
)

router = APIRouter(prefix="/learning", tags=["Comments"])


async def _ensure_task(task_id: UUID, db) -> None:
    if await db.get(LearningTask, task_id) is None:
        raise NotFoundError("Task not found")


async def _add_comment(db, task_id: UUID, content: str, author: str, is_admin: bool) -> TaskComment:
    await _ensure_task(task_id, db)
    comment = TaskComment(
        id=uuid4(),
        task_id=task_id,
        content=content,
        author=author,
        is_admin_comment=is_admin,
    )
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return comment


@router.get(
    "/tasks/{task_id}/comments",
    response_model=list[CommentResponse],
    summary="List task comments",
)
async def list_comments(task_id: UUID, db: DbSession) -> list[CommentResponse]:
    """Comments on a task, oldest first."""
    result = await db.execute(
        select(TaskComment)
        .where(TaskComment.task_id == task_id)
        .order_by(TaskComment.created_at)
    )
    return [CommentResponse.model_validate(c) for c in result.scalars().all()]


@router.post(
    "/tasks/{task_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a comment",
)
async def add_comment(task_id: UUID, data: CommentCreate, db: DbSession) -> CommentResponse:
    comment = await _add_comment(db, task_id, data.content, data.author, is_admin=False)
    return CommentResponse.model_validate(comment)


@router.post(
    "/tasks/{task_id}/comments/admin",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an admin comment",
)
async def add_admin_comment(
    task_id: UUID,
    data: AdminCommentCreate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> CommentResponse:
    comment = await _add_comment(db, task_id, data.content, data.author, is_admin=True)
    return CommentResponse.model_validate(comment)


@router.delete("/comments/{comment_id}", response_model=MessageResponse, summary="Delete a comment")
async def delete_comment(comment_id: UUID, current_admin: CurrentAdmin, db: DbSession) -> MessageResponse:
    comment = await db.get(TaskComment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")

    await db.delete(comment)
    await db.commit()
    return MessageResponse(message="Comment deleted successfully")
