"""Pure audit scheduling logic - no I/O dependencies."""

from datetime import date, datetime, time, timedelta
from enum import Enum


class AuditFrequency(Enum):
    """How often a recurring audit runs."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ANNUAL = "annual"


DEFAULT_DAY_OF_WEEK = 5  # Saturday (Monday = 0)
DEFAULT_HOUR = 3


def start_of_day(d: date, tzinfo=None) -> datetime:
    return datetime.combine(d, time.min, tzinfo=tzinfo)


def end_of_day(d: date, tzinfo=None) -> datetime:
    return datetime.combine(d, time.max, tzinfo=tzinfo)


def next_run_at(
    frequency: AuditFrequency,
    day_of_week: int = DEFAULT_DAY_OF_WEEK,
    hour: int = DEFAULT_HOUR,
    from_: datetime | None = None,
) -> datetime:
    """
    Next time a recurring audit should run, strictly after `from_`.

    Weekly runs land on `day_of_week`, monthly runs on the 1st and annual
    runs on January 1st, all at `hour`.
    """
    base = from_ or datetime.now()

    if frequency is AuditFrequency.WEEKLY:
        candidate = base.replace(hour=hour, minute=0, second=0, microsecond=0)
        diff = day_of_week - candidate.weekday()
        if diff < 0 or (diff == 0 and candidate <= base):
            diff += 7
        return candidate + timedelta(days=diff)

    if frequency is AuditFrequency.MONTHLY:
        candidate = base.replace(day=1, hour=hour, minute=0, second=0, microsecond=0)
        if candidate <= base:
            if candidate.month == 12:
                candidate = candidate.replace(year=candidate.year + 1, month=1)
            else:
                candidate = candidate.replace(month=candidate.month + 1)
        return candidate

    candidate = base.replace(month=1, day=1, hour=hour, minute=0, second=0, microsecond=0)
    if candidate <= base:
        candidate = candidate.replace(year=candidate.year + 1)
    return candidate


def audit_period(
    frequency: AuditFrequency,
    reference: datetime | None = None,
) -> tuple[datetime, datetime]:
    """
    The completed period a recurring audit covers.

    Weekly: the seven days ending yesterday. Monthly: the previous calendar
    month. Annual: the previous calendar year.
    """
    reference = reference or datetime.now()
    tz = reference.tzinfo
    today = reference.date()

    if frequency is AuditFrequency.WEEKLY:
        end = today - timedelta(days=1)
        start = end - timedelta(days=6)
    elif frequency is AuditFrequency.MONTHLY:
        end = today.replace(day=1) - timedelta(days=1)
        start = end.replace(day=1)
    else:
        start = date(today.year - 1, 1, 1)
        end = date(today.year - 1, 12, 31)

    return start_of_day(start, tz), end_of_day(end, tz)


def audit_days(start: datetime, end: datetime) -> int:
    """Inclusive day count for an audit period, never less than 1."""
    return max(1, (end.date() - start.date()).days + 1)
