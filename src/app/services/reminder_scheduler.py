"""
Reminder Scheduler

Polling driver for task reminders. Each tick reads the due reminders,
dispatches one notification per reminder and records the outcome with a
compare-and-set on the reminder state and due_at, so a reminder that was
disabled, re-armed or handled by another instance in the meantime is left
alone.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from src.app.services.clock import Clock
from src.app.services.email_templates import reminder_email
from src.app.services.notification_dispatcher import INotificationDispatcher, send_with_timeout
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import ReminderState
from src.domain.errors import RepositoryUnavailable
from src.domain.reminder_state_machine import DeliveryOutcome, Effect, Fire, is_due, transition

logger = logging.getLogger(__name__)

DEFAULT_DISPATCH_TIMEOUT = 10.0
DEFAULT_BATCH_SIZE = 100


@dataclass(frozen=True)
class DueReminder:
    """Detached view of a due reminder, safe to use after its unit of work"""

    task_id: UUID
    state: ReminderState
    due_at: datetime


@dataclass
class TickReport:
    """Summary of one tick"""

    started_at: Optional[datetime] = None
    due: int = 0
    sent: int = 0
    failed: int = 0
    conflicts: int = 0
    skipped: bool = False
    aborted: bool = False


class ReminderScheduler:
    """
    Periodic reminder delivery.

    Business Rules:
    - Only pending reminders with due_at <= now are picked up; reminders
      missed during downtime fire on the next tick
    - One dispatch attempt per reminder per tick, no automatic retry
    - A dispatch failure or timeout marks only that reminder failed
    - Repository failures abort the tick; the next tick starts over
    - Ticks never overlap on one scheduler instance
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        dispatcher: INotificationDispatcher,
        clock: Clock,
        dispatch_timeout: float = DEFAULT_DISPATCH_TIMEOUT,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self.uow_factory = uow_factory
        self.dispatcher = dispatcher
        self.clock = clock
        self.dispatch_timeout = dispatch_timeout
        self.batch_size = batch_size
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def tick(self) -> TickReport:
        """
        Run one polling cycle. Never raises.

        Returns:
            TickReport with counts, or skipped/aborted flags
        """
        report = TickReport(started_at=self.clock.now())

        if self._running:
            logger.warning("Reminder tick skipped: previous tick still running")
            report.skipped = True
            return report

        self._running = True
        try:
            await self._run(report)
        except RepositoryUnavailable as exc:
            report.aborted = True
            logger.error(f"Reminder tick aborted, repository unavailable: {exc}")
        except Exception:
            report.aborted = True
            logger.exception("Reminder tick aborted by unexpected error")
        finally:
            self._running = False

        if report.due or report.aborted:
            logger.info(
                f"Reminder tick at {report.started_at:%Y-%m-%d %H:%M:%S}: due={report.due} "
                f"sent={report.sent} failed={report.failed} conflicts={report.conflicts} "
                f"aborted={report.aborted}"
            )
        return report

    async def _run(self, report: TickReport) -> None:
        async with self.uow_factory() as uow:
            due = await uow.reminders.find_due(report.started_at, limit=self.batch_size)
            batch = [DueReminder(r.task_id, r.state, r.due_at) for r in due]

        report.due = len(batch)
        for item in batch:
            outcome = await self._deliver(item, report.started_at)
            committed = outcome is not None and await self._record(item, outcome)

            if not committed:
                report.conflicts += 1
            elif outcome.delivered:
                report.sent += 1
            else:
                report.failed += 1

    async def _deliver(self, item: DueReminder, now: datetime) -> Optional[DeliveryOutcome]:
        """Send one reminder; None when it was re-armed or left pending since find_due"""
        async with self.uow_factory() as uow:
            current = await uow.reminders.get_by_task_id(item.task_id)
            if (
                current is None
                or current.due_at != item.due_at
                or not is_due(current.state, current.due_at, now)
            ):
                logger.info(f"Reminder for task {item.task_id} changed before delivery, skipped")
                return None

            task = await uow.tasks.get_by_id(item.task_id)
            if task is None:
                return DeliveryOutcome.failure("Task no longer exists")

            owner = await uow.users.get_by_id(task.user_id)
            destination = current.destination or (owner.email if owner else None)
            subject, body = reminder_email(task)

        if not destination:
            return DeliveryOutcome.failure("No destination address")

        result = await send_with_timeout(
            self.dispatcher, destination, subject, body, timeout=self.dispatch_timeout
        )
        if result.is_err():
            logger.warning(
                f"Reminder for task {item.task_id} not delivered to {destination}: "
                f"{result.error.message}"
            )
            return DeliveryOutcome.failure(result.error.message)

        logger.info(f"Reminder for task {item.task_id} sent to {destination}")
        return DeliveryOutcome.success()

    async def _record(self, item: DueReminder, outcome: DeliveryOutcome) -> bool:
        step = transition(item.state, Fire(outcome))
        now = self.clock.now()

        extra = {"updated_at": now}
        if Effect.record_delivery in step.effects:
            extra.update(sent_at=now, last_error=None)
        if Effect.record_failure in step.effects:
            extra.update(failed_at=now, last_error=(outcome.error or "")[:500])

        async with self.uow_factory() as uow:
            changed = await uow.reminders.compare_and_set_state(
                item.task_id, item.state, step.next_state, expected_due_at=item.due_at, **extra
            )
            await uow.commit()

        if not changed:
            logger.warning(
                f"Reminder for task {item.task_id} changed during delivery; "
                f"{step.next_state.value} not recorded"
            )
        return changed
