"""Shared workflow layer between the CLI and the scheduler.

Each function wires adapters to the functional core: fetch events, assemble
or recalculate an audit, and persist it.
"""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from .adapters.composite_calendar import CompositeCalendarAdapter
from .adapters.file_audit_store import FileAuditStore
from .adapters.google_calendar import CalendarError
from .config import Config
from .core.audit import AuditResult, assemble_audit, recalculate
from .core.schedule import audit_period
from .ports import AuditStore, CalendarRepository

logger = logging.getLogger(__name__)


class AuditError(RuntimeError):
    """Raised when an audit can't be run or found."""

    pass


def get_store(config: Config) -> FileAuditStore:
    """Resolve the audit store from config."""
    return FileAuditStore(config.audits_path())


def get_calendar(config: Config) -> CompositeCalendarAdapter:
    """Build the calendar repository from config."""
    return CompositeCalendarAdapter(config)


def run_audit(
    config: Config,
    start: datetime,
    end: datetime,
    calendar: CalendarRepository | None = None,
    store: AuditStore | None = None,
) -> AuditResult:
    """
    Fetch events for a period, run the audit, and save it when a store is given.

    Raises AuditError when no calendar is configured, connected or reachable.
    """
    if end < start:
        raise AuditError(f"Audit end {end.date()} is before start {start.date()}")

    if calendar is None:
        if not config.calendar_accounts:
            raise AuditError("No calendar accounts configured in founder-bleed.conf")
        calendar = get_calendar(config)

    try:
        raw_events = calendar.fetch_range(start, end)
    except CalendarError as e:
        raise AuditError(str(e)) from e

    logger.info(f"Fetched {len(raw_events)} events for {start.date()} - {end.date()}")

    audit = assemble_audit(
        raw_events,
        start,
        end,
        config.rate_config(),
        strategy=config.rate_strategy,
        is_solo_founder=config.is_solo_founder,
        exclusions=config.exclusions,
    )

    logger.info(
        f"Audit {audit.audit_id}: {len(audit.events)} events, "
        f"{audit.metrics.total_hours:.1f}h, efficiency {audit.metrics.efficiency_score}%"
    )

    if store is not None:
        store.save(audit)
    return audit


def run_recalculation(
    config: Config,
    audit_id: str,
    store: AuditStore,
    tier_overrides: dict[str, str] | None = None,
    leave_overrides: dict[str, bool] | None = None,
) -> AuditResult:
    """Apply reconciliation edits to a stored audit and save the result."""
    audit = store.load(audit_id)
    if audit is None:
        raise AuditError(f"Audit not found: {audit_id}")

    unknown = [
        event_id
        for event_id in [*(tier_overrides or {}), *(leave_overrides or {})]
        if audit.find_event(event_id) is None
    ]
    if unknown:
        raise AuditError(f"Unknown event IDs for audit {audit_id}: {', '.join(unknown)}")

    updated = recalculate(
        audit,
        config.rate_config(),
        strategy=config.rate_strategy,
        tier_overrides=tier_overrides,
        leave_overrides=leave_overrides,
    )
    store.save(updated)
    logger.info(f"Recalculated audit {audit_id}")
    return updated


def run_scheduled_audit(config: Config, reference: datetime | None = None) -> AuditResult | None:
    """
    Audit the last completed period for the configured frequency.

    The period is computed in the configured timezone, not the host's.

    Errors are logged rather than raised so one failed run doesn't stop the scheduler.
    """
    reference = reference or datetime.now(ZoneInfo(config.timezone))
    start, end = audit_period(config.audit_frequency, reference)
    try:
        return run_audit(config, start, end, store=get_store(config))
    except AuditError as e:
        logger.error(f"Scheduled {config.audit_frequency.value} audit failed: {e}")
        return None
