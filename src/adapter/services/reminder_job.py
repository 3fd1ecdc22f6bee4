"""
APScheduler wiring for the background jobs.

The reminder tick runs at second 0 of every minute; credential
housekeeping runs every few minutes.
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from src.app.services.credential_store import CredentialStore
from src.app.services.reminder_scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

REMINDER_JOB_ID = "reminder-tick"
PURGE_JOB_ID = "credential-purge"


def build_job_scheduler(
    reminders: ReminderScheduler,
    credentials: CredentialStore,
    purge_interval_minutes: int = 5,
) -> AsyncIOScheduler:
    """Create (not start) the scheduler running reminder ticks and purges"""
    scheduler = AsyncIOScheduler(timezone="UTC")

    scheduler.add_job(
        reminders.tick,
        CronTrigger(second=0, timezone="UTC"),
        id=REMINDER_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    scheduler.add_job(
        _purge_credentials,
        IntervalTrigger(minutes=purge_interval_minutes),
        args=[credentials],
        id=PURGE_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler


async def _purge_credentials(credentials: CredentialStore) -> None:
    removed = await credentials.purge_expired()
    if removed:
        logger.info(f"Purged {removed} expired credential entries")
