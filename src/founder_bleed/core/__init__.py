"""Functional core - pure business logic with no I/O."""

from .leave import LeaveResult, detect_leave
from .metrics import (
    HOURS_PER_YEAR,
    TIERS,
    AuditMetrics,
    CalendarEvent,
    RateConfig,
    RateStrategy,
    compute_metrics,
)
from .classification import Classification, classify_event
from .planning import PlanningEvent, PlanningScore, event_planning_score, planning_score
from .roles import RoleRecommendation, recommend_roles
from .schedule import AuditFrequency, audit_period, next_run_at
from .calendar import RawEvent
from .audit import AuditEvent, AuditResult, assemble_audit, recalculate
from .report import format_audit_markdown

__all__ = [
    # Leave
    "LeaveResult",
    "detect_leave",
    # Metrics
    "HOURS_PER_YEAR",
    "TIERS",
    "AuditMetrics",
    "CalendarEvent",
    "RateConfig",
    "RateStrategy",
    "compute_metrics",
    # Classification
    "Classification",
    "classify_event",
    # Planning
    "PlanningEvent",
    "PlanningScore",
    "event_planning_score",
    "planning_score",
    # Roles
    "RoleRecommendation",
    "recommend_roles",
    # Schedule
    "AuditFrequency",
    "audit_period",
    "next_run_at",
    # Audit
    "RawEvent",
    "AuditEvent",
    "AuditResult",
    "assemble_audit",
    "recalculate",
    "format_audit_markdown",
]
