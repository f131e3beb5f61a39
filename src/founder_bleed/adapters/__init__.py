"""Adapters - I/O implementations of ports."""

from .google_calendar import (
    CalendarError,
    CalendarNotConnectedError,
    CalendarUnavailableError,
    GoogleCalendarAdapter,
)
from .composite_calendar import CompositeCalendarAdapter
from .file_audit_store import FileAuditStore

__all__ = [
    "GoogleCalendarAdapter",
    "CalendarError",
    "CalendarNotConnectedError",
    "CalendarUnavailableError",
    "CompositeCalendarAdapter",
    "FileAuditStore",
]
