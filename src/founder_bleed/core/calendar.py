"""Pure calendar domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime

from .metrics import round_half_up

ALL_DAY_WORK_MINUTES = 8 * 60


@dataclass
class RawEvent:
    """A calendar event as returned by a calendar provider."""

    id: str
    calendar_id: str
    title: str
    description: str
    start: datetime | None
    end: datetime | None
    is_all_day: bool = False
    attendees: int = 0
    has_meet_link: bool = False
    is_recurring: bool = False
    event_type: str | None = None

    def has_valid_times(self) -> bool:
        return self.start is not None and self.end is not None

    def day_span(self) -> int:
        """Number of calendar days the event covers, at least 1."""
        if not self.has_valid_times():
            return 1
        days = (self.end - self.start).total_seconds() / 86400
        return max(1, int(round_half_up(days)))

    def duration_minutes(self) -> int | None:
        """
        Working minutes for the event, or None without start/end.

        All-day events count as a full 8-hour working day per day spanned.
        """
        if not self.has_valid_times():
            return None
        if self.is_all_day:
            return self.day_span() * ALL_DAY_WORK_MINUTES
        minutes = (self.end - self.start).total_seconds() / 60
        return max(0, int(round_half_up(minutes)))


def is_excluded(title: str, exclusions: list[str]) -> bool:
    """Check if a title contains any exclusion phrase (case-insensitive)."""
    lowered = title.lower()
    return any(exclusion.lower() in lowered for exclusion in exclusions if exclusion)


def filter_excluded(events: list[RawEvent], exclusions: list[str]) -> list[RawEvent]:
    """
    Drop events whose title matches an exclusion.

    Pure function - no I/O.
    """
    if not exclusions:
        return list(events)
    return [e for e in events if not is_excluded(e.title, exclusions)]


def sort_events_by_start(events: list[RawEvent]) -> list[RawEvent]:
    """Sort events by start time; events without a start go last."""
    return sorted(events, key=lambda e: (e.start is None, e.start.timestamp() if e.start else 0))
