"""Pure audit assembly logic - no I/O dependencies."""

import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime

from .calendar import RawEvent, filter_excluded
from .classification import DEFAULT_BUSINESS_AREA, classify_event
from .leave import detect_leave
from .metrics import (
    DELEGABLE_TIERS,
    AuditMetrics,
    CalendarEvent,
    RateConfig,
    RateStrategy,
    compute_metrics,
    normalize_tier,
)
from .planning import PlanningEvent, PlanningScore, event_planning_score, planning_score
from .roles import RoleEvent, RoleRecommendation, RoleTask, recommend_roles
from .schedule import audit_days as count_audit_days

ALGORITHM_VERSION = "1.7"
LEAVE_TIER = "unclassified"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@dataclass
class AuditEvent:
    """A calendar event after leave detection and classification."""

    id: str
    calendar_id: str
    title: str
    description: str
    start: datetime | None
    end: datetime | None
    is_all_day: bool
    duration_minutes: int
    day_span: int = 1
    attendees: int = 0
    is_recurring: bool = False
    suggested_tier: str | None = None
    final_tier: str = LEAVE_TIER
    business_area: str | None = None
    vertical: str | None = None
    confidence: str | None = None
    keywords_matched: list[str] = field(default_factory=list)
    is_leave: bool = False
    leave_method: str = "none"
    leave_confidence: str = "low"
    planning_score: int = 0
    reconciled: bool = False

    @property
    def hours(self) -> float:
        return self.duration_minutes / 60

    def to_calendar_event(self) -> CalendarEvent:
        """Metrics input; all-day events are bucketed by duration, not swept."""
        return CalendarEvent(
            duration_minutes=self.duration_minutes,
            final_tier=self.final_tier,
            vertical=self.vertical or "business",
            is_leave=self.is_leave,
            start=None if self.is_all_day else self.start,
            end=None if self.is_all_day else self.end,
        )

    def to_planning_event(self) -> PlanningEvent:
        return PlanningEvent(
            title=self.title,
            description=self.description,
            duration_minutes=self.duration_minutes,
            is_recurring=self.is_recurring,
            is_all_day=self.is_all_day,
        )

    def to_role_event(self) -> RoleEvent:
        return RoleEvent(
            title=self.title,
            final_tier=self.final_tier,
            business_area=self.business_area or DEFAULT_BUSINESS_AREA,
            vertical=self.vertical or "business",
            duration_minutes=self.duration_minutes,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["start"] = _iso(self.start)
        data["end"] = _iso(self.end)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "AuditEvent":
        data = dict(data)
        data["start"] = _from_iso(data.get("start"))
        data["end"] = _from_iso(data.get("end"))
        return cls(**data)


@dataclass
class AuditResult:
    """Everything one audit run produced."""

    audit_id: str
    start: datetime
    end: datetime
    audit_days: int
    events: list[AuditEvent]
    metrics: AuditMetrics
    planning: PlanningScore
    roles: list[RoleRecommendation] = field(default_factory=list)
    leave_days: int = 0
    leave_hours_excluded: float = 0.0
    algorithm_version: str = ALGORITHM_VERSION
    created_at: datetime | None = None

    @property
    def leave_events(self) -> list[AuditEvent]:
        return [e for e in self.events if e.is_leave]

    def find_event(self, event_id: str) -> AuditEvent | None:
        for event in self.events:
            if event.id == event_id:
                return event
        return None

    def to_dict(self) -> dict:
        return {
            "audit_id": self.audit_id,
            "start": _iso(self.start),
            "end": _iso(self.end),
            "audit_days": self.audit_days,
            "events": [e.to_dict() for e in self.events],
            "metrics": self.metrics.to_dict(),
            "planning": asdict(self.planning),
            "roles": [asdict(r) for r in self.roles],
            "leave_days": self.leave_days,
            "leave_hours_excluded": self.leave_hours_excluded,
            "algorithm_version": self.algorithm_version,
            "created_at": _iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditResult":
        roles = []
        for role in data.get("roles", []):
            role = dict(role)
            role["tasks"] = [RoleTask(**t) for t in role.get("tasks", [])]
            roles.append(RoleRecommendation(**role))

        return cls(
            audit_id=data["audit_id"],
            start=_from_iso(data["start"]),
            end=_from_iso(data["end"]),
            audit_days=data["audit_days"],
            events=[AuditEvent.from_dict(e) for e in data.get("events", [])],
            metrics=AuditMetrics.from_dict(data["metrics"]),
            planning=PlanningScore(**data["planning"]),
            roles=roles,
            leave_days=data.get("leave_days", 0),
            leave_hours_excluded=data.get("leave_hours_excluded", 0.0),
            algorithm_version=data.get("algorithm_version", ALGORITHM_VERSION),
            created_at=_from_iso(data.get("created_at")),
        )


def tier_rates(rates: RateConfig) -> dict[str, float]:
    """Annual cost per delegable tier, blending engineering and business."""
    return {
        "senior": (rates.senior_engineering_rate + rates.senior_business_rate) / 2,
        "junior": (rates.junior_engineering_rate + rates.junior_business_rate) / 2,
        "ea": rates.ea_rate,
    }


def process_event(raw: RawEvent, is_solo_founder: bool = False) -> AuditEvent | None:
    """
    Run leave detection and classification on one raw event.

    Returns None for events that can't be measured (no start/end or no
    duration). Pure function - no I/O.
    """
    duration = raw.duration_minutes()
    if duration is None or duration <= 0:
        return None

    title = raw.title or "Untitled"
    description = raw.description or ""
    leave = detect_leave(title, description, raw.is_all_day, raw.event_type)

    event = AuditEvent(
        id=raw.id,
        calendar_id=raw.calendar_id,
        title=title,
        description=description,
        start=raw.start,
        end=raw.end,
        is_all_day=raw.is_all_day,
        duration_minutes=duration,
        day_span=raw.day_span(),
        attendees=raw.attendees,
        is_recurring=raw.is_recurring,
        is_leave=leave.is_leave,
        leave_method=leave.method,
        leave_confidence=leave.confidence,
    )
    event.planning_score = event_planning_score(event.to_planning_event())

    if leave.is_leave:
        return event

    classification = classify_event(title, description, raw.attendees, is_solo_founder)
    event.suggested_tier = classification.suggested_tier
    event.final_tier = normalize_tier(classification.suggested_tier)
    event.business_area = classification.business_area
    event.vertical = classification.vertical
    event.confidence = classification.confidence
    event.keywords_matched = classification.keywords_matched
    return event


def _derive(
    events: list[AuditEvent],
    audit_days: int,
    rates: RateConfig,
    strategy: RateStrategy,
) -> tuple[AuditMetrics, list[RoleRecommendation], int, float]:
    metrics = compute_metrics(
        [e.to_calendar_event() for e in events],
        rates,
        audit_days,
        strategy=strategy,
        resolve_overlaps=True,
    )
    roles = recommend_roles(
        [e.to_role_event() for e in events if not e.is_leave and e.final_tier in DELEGABLE_TIERS],
        audit_days,
        tier_rates(rates),
    )

    leave_days = 0
    leave_hours = 0.0
    for event in events:
        if event.is_leave:
            leave_days += event.day_span
            leave_hours += event.hours

    return metrics, roles, leave_days, leave_hours


def assemble_audit(
    raw_events: list[RawEvent],
    start: datetime,
    end: datetime,
    rates: RateConfig,
    strategy: RateStrategy = RateStrategy.BLEND,
    is_solo_founder: bool = False,
    exclusions: list[str] | None = None,
    audit_id: str | None = None,
    as_of: datetime | None = None,
) -> AuditResult:
    """
    Turn raw calendar events into a complete audit.

    Pure function - no I/O. Handles exclusions, leave detection,
    classification, metrics, planning score and role recommendations.
    """
    events = []
    for raw in filter_excluded(raw_events, exclusions or []):
        event = process_event(raw, is_solo_founder)
        if event is not None:
            events.append(event)

    days = count_audit_days(start, end)
    metrics, roles, leave_days, leave_hours = _derive(events, days, rates, strategy)

    planning = planning_score([e.to_planning_event() for e in events], days)

    return AuditResult(
        audit_id=audit_id or str(uuid.uuid4()),
        start=start,
        end=end,
        audit_days=days,
        events=events,
        metrics=metrics,
        planning=planning,
        roles=roles,
        leave_days=leave_days,
        leave_hours_excluded=leave_hours,
        created_at=as_of or datetime.now(),
    )


def recalculate(
    result: AuditResult,
    rates: RateConfig,
    strategy: RateStrategy = RateStrategy.BLEND,
    tier_overrides: dict[str, str] | None = None,
    leave_overrides: dict[str, bool] | None = None,
) -> AuditResult:
    """
    Apply user reconciliation edits and recompute derived figures.

    Overridden events are marked reconciled. The planning score depends only
    on raw calendar data, so it is carried over unchanged.
    Pure function - no I/O; the input result is not modified.
    """
    tier_overrides = tier_overrides or {}
    leave_overrides = leave_overrides or {}

    events = []
    for event in result.events:
        updated = event
        if event.id in leave_overrides:
            is_leave = leave_overrides[event.id]
            if is_leave:
                final_tier = LEAVE_TIER
            elif event.is_leave:
                final_tier = normalize_tier(event.suggested_tier)
            else:
                final_tier = event.final_tier
            updated = replace(
                updated,
                is_leave=is_leave,
                leave_method="user" if is_leave else "none",
                leave_confidence="high",
                final_tier=final_tier,
                reconciled=True,
            )
        if event.id in tier_overrides and not updated.is_leave:
            updated = replace(updated, final_tier=normalize_tier(tier_overrides[event.id]), reconciled=True)
        events.append(updated)

    metrics, roles, leave_days, leave_hours = _derive(events, result.audit_days, rates, strategy)

    return replace(
        result,
        events=events,
        metrics=metrics,
        roles=roles,
        leave_days=leave_days,
        leave_hours_excluded=leave_hours,
    )
