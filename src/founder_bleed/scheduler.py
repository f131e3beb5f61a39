"""Recurring audit scheduler."""

import logging

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import Config, load_config
from .core.schedule import AuditFrequency
from .workflows import run_scheduled_audit

logger = logging.getLogger(__name__)

# APScheduler cron weekdays use mon..sun names
_CRON_DAYS = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


def build_trigger(config: Config) -> CronTrigger:
    """Cron trigger matching the configured audit frequency."""
    tz = config.timezone or "America/Toronto"
    hour = config.audit_hour

    if config.audit_frequency is AuditFrequency.WEEKLY:
        return CronTrigger(day_of_week=_CRON_DAYS[config.audit_day_of_week], hour=hour, minute=0, timezone=tz)
    if config.audit_frequency is AuditFrequency.MONTHLY:
        return CronTrigger(day=1, hour=hour, minute=0, timezone=tz)
    return CronTrigger(month=1, day=1, hour=hour, minute=0, timezone=tz)


def setup_scheduler(config: Config | None = None) -> BlockingScheduler:
    """Set up the recurring audit job."""
    config = config or load_config()

    scheduler = BlockingScheduler(timezone=config.timezone or "America/Toronto")
    scheduler.add_job(
        run_scheduled_audit,
        build_trigger(config),
        args=[config],
        id="scheduled_audit",
        replace_existing=True,
    )
    logger.info(
        f"Scheduled {config.audit_frequency.value} audit at {config.audit_hour:02d}:00 ({config.timezone})"
    )
    return scheduler


def run_scheduler() -> None:
    """Run the scheduler until interrupted."""
    scheduler = setup_scheduler()
    logger.info("Scheduler started")
    scheduler.start()
