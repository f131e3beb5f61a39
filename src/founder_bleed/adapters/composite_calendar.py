"""Composite calendar adapter - combines multiple calendar accounts."""

from datetime import datetime

from founder_bleed.config import Config
from founder_bleed.core.calendar import RawEvent, sort_events_by_start

from .google_calendar import GoogleCalendarAdapter


class CompositeCalendarAdapter:
    """
    Composite calendar adapter over every configured Google account.

    Implements CalendarRepository protocol.
    """

    def __init__(self, config: Config):
        self.config = config
        self._adapters: list[GoogleCalendarAdapter] = [
            GoogleCalendarAdapter(
                config_folder=account.config_folder,
                label=account.label,
                calendars=account.calendars or None,
                client_secret_file=config.google_client_secret_file,
                timezone=config.timezone,
            )
            for account in config.calendar_accounts
        ]

    def fetch_range(self, start: datetime, end: datetime) -> list[RawEvent]:
        """Fetch events from all accounts, dropping duplicates of the same event."""
        events = []
        seen: set[tuple[str, str]] = set()

        for adapter in self._adapters:
            for event in adapter.fetch_range(start, end):
                key = (event.calendar_id, event.id)
                if event.id and key in seen:
                    continue
                seen.add(key)
                events.append(event)

        return sort_events_by_start(events)
