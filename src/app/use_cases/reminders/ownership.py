from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Task
from src.libs.result import Error, Result, Return


async def load_owned_task(uow: UnitOfWork, task_id: UUID, user_id: UUID) -> Result[Task]:
    """Task of the given user; other users' tasks look missing"""
    task: Optional[Task] = await uow.tasks.get_by_id(task_id)
    if task is None or task.user_id != user_id:
        return Return.err(Error("NOT_FOUND", "Task not found"))
    return Return.ok(task)
