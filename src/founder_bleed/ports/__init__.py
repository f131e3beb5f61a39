"""Ports - interfaces/protocols for external dependencies."""

from .calendar_repo import CalendarRepository
from .audit_store import AuditStore

__all__ = [
    "CalendarRepository",
    "AuditStore",
]
