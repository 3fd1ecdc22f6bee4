from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.reminder_repository import ReminderRepository
from src.adapter.repositories.task_repository import TaskRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import RepositoryUnavailable


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    SQLAlchemy implementation of UnitOfWork pattern

    Either wraps a request-scoped session, or (for background jobs) opens
    and closes its own session from session_factory on every use.
    """

    def __init__(
        self,
        session: Optional[AsyncSession] = None,
        session_factory: Optional[Callable[[], AsyncSession]] = None,
    ):
        if session is None and session_factory is None:
            raise ValueError("Either session or session_factory is required")
        self.session = session
        self.session_factory = session_factory
        self._owns_session = session is None

    async def __aenter__(self):
        if self._owns_session:
            self.session = self.session_factory()

        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.tasks = TaskRepository(self.session)
        self.reminders = ReminderRepository(self.session)
        return self

    async def __aexit__(self, *args):
        try:
            await self.rollback()
        finally:
            if self._owns_session:
                await self.session.close()
                self.session = None

    async def commit(self):
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise RepositoryUnavailable(str(exc)) from exc

    async def rollback(self):
        await self.session.rollback()
