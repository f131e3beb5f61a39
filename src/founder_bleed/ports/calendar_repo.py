"""Calendar repository interface."""

from datetime import datetime
from typing import Protocol

from founder_bleed.core.calendar import RawEvent


class CalendarRepository(Protocol):
    """Interface for fetching calendar events from any backend."""

    def fetch_range(self, start: datetime, end: datetime) -> list[RawEvent]:
        """Fetch all events between start and end."""
        ...
