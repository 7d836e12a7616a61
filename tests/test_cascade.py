"""
Cascade delete tests for plans, phases and tasks.
"""

from uuid import uuid4

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.learning import cascade, delete_phase, delete_plan
from portfolio_api.core.models import (
    LearningPlan,
    LearningTask,
    Phase,
    TaskComment,
    TimeLog,
    utcnow,
)


async def _count(db: AsyncSession, model, *criteria) -> int:
    return await db.scalar(select(func.count()).select_from(model).where(*criteria))


async def _populate_plan(db: AsyncSession, plan: LearningPlan) -> list[LearningTask]:
    """Two phases, three tasks, one time log and one comment per task."""
    phases = [
        Phase(id=uuid4(), plan_id=plan.id, title=f"Phase {i}", order=i) for i in range(2)
    ]
    tasks = [
        LearningTask(
            id=uuid4(),
            plan_id=plan.id,
            phase_id=phases[i % 2].id,
            title=f"Task {i}",
            total_time_spent=60,
        )
        for i in range(3)
    ]
    db.add_all(phases + tasks)
    for task in tasks:
        db.add(TimeLog(id=uuid4(), task_id=task.id, start_time=utcnow(), duration=60, is_active=False))
        db.add(TaskComment(id=uuid4(), task_id=task.id, content="Nice", author="Visitor"))
    await db.commit()
    return tasks


class TestDeletePlan:

    async def test_removes_all_children(self, db_session: AsyncSession, sample_plan):
        tasks = await _populate_plan(db_session, sample_plan)
        task_ids = [t.id for t in tasks]

        result = await delete_plan(db_session, sample_plan.id)

        assert result.complete
        assert result.deleted == {
            "plans": 1,
            "phases": 2,
            "tasks": 3,
            "time_logs": 3,
            "comments": 3,
        }
        assert await _count(db_session, LearningPlan, LearningPlan.id == sample_plan.id) == 0
        assert await _count(db_session, Phase, Phase.plan_id == sample_plan.id) == 0
        assert await _count(db_session, LearningTask, LearningTask.plan_id == sample_plan.id) == 0
        assert await _count(db_session, TimeLog, TimeLog.task_id.in_(task_ids)) == 0
        assert await _count(db_session, TaskComment, TaskComment.task_id.in_(task_ids)) == 0

    async def test_leaves_other_plans_alone(self, db_session: AsyncSession, sample_plan):
        other = LearningPlan(id=uuid4(), title="Other plan")
        db_session.add(other)
        await db_session.commit()
        other_tasks = await _populate_plan(db_session, other)
        await _populate_plan(db_session, sample_plan)

        await delete_plan(db_session, sample_plan.id)

        assert await _count(db_session, LearningTask, LearningTask.plan_id == other.id) == 3
        assert await _count(
            db_session, TimeLog, TimeLog.task_id.in_([t.id for t in other_tasks])
        ) == 3

    async def test_failed_step_reported_and_plan_stays_deleted(
        self, db_session: AsyncSession, sample_plan, monkeypatch
    ):
        await _populate_plan(db_session, sample_plan)

        async def broken_delete_tasks(db, plan_id, task_ids):
            raise OperationalError("DELETE FROM learning_tasks", {}, Exception("disk I/O error"))

        monkeypatch.setattr(cascade, "_delete_tasks", broken_delete_tasks)

        result = await delete_plan(db_session, sample_plan.id)

        assert not result.complete
        assert result.failed_step == "tasks"
        assert result.deleted == {"plans": 1, "phases": 2}
        assert await _count(db_session, LearningPlan, LearningPlan.id == sample_plan.id) == 0
        # Orphans remain for manual cleanup
        assert await _count(db_session, LearningTask, LearningTask.plan_id == sample_plan.id) == 3

    async def test_endpoint(self, client: AsyncClient, admin_headers: dict, sample_plan, db_session):
        await _populate_plan(db_session, sample_plan)

        response = await client.delete(
            f"/api/learning/plans/{sample_plan.id}", headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["complete"] is True
        assert data["deleted"]["tasks"] == 3

        response = await client.get(f"/api/learning/plans/{sample_plan.id}")
        assert response.status_code == 404

    async def test_endpoint_unknown_plan(self, client: AsyncClient, admin_headers: dict):
        response = await client.delete(f"/api/learning/plans/{uuid4()}", headers=admin_headers)
        assert response.status_code == 404


class TestDeletePhase:

    async def test_tasks_kept_and_unassigned(self, db_session: AsyncSession, sample_plan, sample_phase):
        tasks = [
            LearningTask(id=uuid4(), plan_id=sample_plan.id, phase_id=sample_phase.id, title=f"T{i}")
            for i in range(2)
        ]
        db_session.add_all(tasks)
        await db_session.commit()

        unassigned = await delete_phase(db_session, sample_phase.id)

        assert unassigned == 2
        assert await _count(db_session, Phase, Phase.id == sample_phase.id) == 0
        result = await db_session.execute(
            select(LearningTask.phase_id).where(LearningTask.id.in_([t.id for t in tasks]))
        )
        assert result.scalars().all() == [None, None]

    async def test_endpoint(self, client: AsyncClient, admin_headers: dict, sample_plan, sample_phase):
        response = await client.post(
            "/api/learning/tasks",
            json={"plan_id": str(sample_plan.id), "phase_id": str(sample_phase.id), "title": "T"},
            headers=admin_headers,
        )
        task_id = response.json()["id"]

        response = await client.delete(
            f"/api/learning/phases/{sample_phase.id}", headers=admin_headers
        )
        assert response.status_code == 200

        response = await client.get(f"/api/learning/tasks/{task_id}")
        assert response.status_code == 200
        assert response.json()["phase_id"] is None


class TestDeleteTask:

    async def test_removes_logs_and_comments(
        self, client: AsyncClient, admin_headers: dict, db_session: AsyncSession, sample_task
    ):
        db_session.add(TimeLog(id=uuid4(), task_id=sample_task.id, start_time=utcnow(), is_active=False))
        db_session.add(TaskComment(id=uuid4(), task_id=sample_task.id, content="Hi", author="A"))
        await db_session.commit()

        response = await client.delete(
            f"/api/learning/tasks/{sample_task.id}", headers=admin_headers
        )

        assert response.status_code == 200
        assert await _count(db_session, TimeLog, TimeLog.task_id == sample_task.id) == 0
        assert await _count(db_session, TaskComment, TaskComment.task_id == sample_task.id) == 0
