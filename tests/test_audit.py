"""Tests for core audit assembly and reconciliation."""

from datetime import datetime

import pytest

from founder_bleed.core.audit import (
    LEAVE_TIER,
    AuditResult,
    assemble_audit,
    process_event,
    recalculate,
    tier_rates,
)
from founder_bleed.core.calendar import RawEvent
from founder_bleed.core.metrics import RateConfig


@pytest.fixture
def rates():
    return RateConfig(
        senior_engineering_rate=100000,
        senior_business_rate=100000,
        junior_engineering_rate=50000,
        junior_business_rate=50000,
        ea_rate=30000,
        salary_annual=208000,
    )


@pytest.fixture
def raw_events():
    return [
        RawEvent(
            id="1",
            calendar_id="primary",
            title="Board meeting with investors",
            description="",
            start=datetime(2025, 1, 13, 10, 0),
            end=datetime(2025, 1, 13, 11, 0),
            attendees=3,
        ),
        RawEvent(
            id="2",
            calendar_id="primary",
            title="Fix login bug",
            description="",
            start=datetime(2025, 1, 13, 13, 0),
            end=datetime(2025, 1, 13, 15, 0),
        ),
        RawEvent(
            id="3",
            calendar_id="primary",
            title="Vacation",
            description="",
            start=datetime(2025, 1, 14),
            end=datetime(2025, 1, 15),
            is_all_day=True,
        ),
        RawEvent(
            id="4",
            calendar_id="primary",
            title="Lunch",
            description="",
            start=datetime(2025, 1, 13, 12, 0),
            end=datetime(2025, 1, 13, 13, 0),
        ),
        RawEvent(
            id="5",
            calendar_id="primary",
            title="Untimed",
            description="",
            start=datetime(2025, 1, 13, 9, 0),
            end=None,
        ),
    ]


@pytest.fixture
def audit(raw_events, rates):
    return assemble_audit(
        raw_events,
        datetime(2025, 1, 13),
        datetime(2025, 1, 19, 23, 59, 59),
        rates,
        exclusions=["lunch"],
        audit_id="a1",
        as_of=datetime(2025, 1, 20, 3, 0),
    )


class TestProcessEvent:
    def test_classifies_work_event(self, raw_events):
        event = process_event(raw_events[0])
        assert event.final_tier == "unique"
        assert event.suggested_tier == "unique"
        assert event.business_area == "Fundraising"
        assert event.is_leave is False
        assert event.duration_minutes == 60

    def test_leave_event_is_not_classified(self, raw_events):
        event = process_event(raw_events[2])
        assert event.is_leave is True
        assert event.leave_method == "keyword_title"
        assert event.final_tier == LEAVE_TIER
        assert event.suggested_tier is None
        assert event.duration_minutes == 480
        assert event.day_span == 1

    def test_untimed_event_is_dropped(self, raw_events):
        assert process_event(raw_events[4]) is None

    def test_solo_founder(self):
        raw = RawEvent(
            id="x",
            calendar_id="primary",
            title="Leadership offsite",
            description="",
            start=datetime(2025, 1, 13, 10, 0),
            end=datetime(2025, 1, 13, 12, 0),
        )
        assert process_event(raw, is_solo_founder=True).final_tier == "unique"
        assert process_event(raw).final_tier == "founder"

    def test_sets_event_planning_score(self, raw_events):
        # Short title plus a realistic duration
        assert process_event(raw_events[1]).planning_score == 50
        # "meeting" is a vague title
        assert process_event(raw_events[0]).planning_score == 30


class TestAssembleAudit:
    def test_events_and_exclusions(self, audit):
        assert [e.id for e in audit.events] == ["1", "2", "3"]
        assert audit.audit_id == "a1"
        assert audit.audit_days == 7

    def test_metrics(self, audit):
        m = audit.metrics
        assert m.total_hours == pytest.approx(3.0)
        assert m.hours_by_tier["unique"] == pytest.approx(1.0)
        assert m.hours_by_tier["senior"] == pytest.approx(2.0)
        assert m.founder_cost_total == pytest.approx(300.0)
        assert m.delegated_cost_total == pytest.approx(2 * 100000 / 2080)
        assert m.efficiency_score == 33
        assert m.reclaimable_hours == 2.0

    def test_leave_is_reported_separately(self, audit):
        assert [e.id for e in audit.leave_events] == ["3"]
        assert audit.leave_days == 1
        assert audit.leave_hours_excluded == pytest.approx(8.0)

    def test_no_roles_for_small_workload(self, audit):
        assert audit.roles == []

    def test_overlapping_events_count_once(self, rates):
        raw = [
            RawEvent("a", "primary", "Fix login bug", "", datetime(2025, 1, 13, 10, 0), datetime(2025, 1, 13, 12, 0)),
            RawEvent("b", "primary", "Investor pitch", "", datetime(2025, 1, 13, 11, 0), datetime(2025, 1, 13, 12, 0)),
        ]
        result = assemble_audit(raw, datetime(2025, 1, 13), datetime(2025, 1, 13, 23, 59), rates)
        assert result.metrics.total_hours == pytest.approx(2.0)
        assert result.metrics.hours_by_tier["unique"] == pytest.approx(1.0)
        assert result.metrics.hours_by_tier["senior"] == pytest.approx(1.0)

    def test_empty_calendar(self, rates):
        result = assemble_audit([], datetime(2025, 1, 13), datetime(2025, 1, 19), rates)
        assert result.events == []
        assert result.metrics.total_hours == 0
        assert result.planning.score == 0
        assert result.audit_id

    def test_round_trips_through_dict(self, audit):
        assert AuditResult.from_dict(audit.to_dict()) == audit

    def test_find_event(self, audit):
        assert audit.find_event("2").title == "Fix login bug"
        assert audit.find_event("missing") is None


class TestRecalculate:
    def test_tier_override(self, audit, rates):
        result = recalculate(audit, rates, tier_overrides={"2": "junior"})

        assert result.find_event("2").final_tier == "junior"
        assert result.find_event("2").reconciled is True
        assert result.metrics.hours_by_tier["junior"] == pytest.approx(2.0)
        assert result.metrics.hours_by_tier["senior"] == 0
        assert result.metrics.delegated_cost_total == pytest.approx(2 * 50000 / 2080)

    def test_input_is_not_modified(self, audit, rates):
        recalculate(audit, rates, tier_overrides={"2": "junior"})
        assert audit.find_event("2").final_tier == "senior"
        assert audit.metrics.hours_by_tier["senior"] == pytest.approx(2.0)

    def test_unmarking_leave_counts_the_hours(self, audit, rates):
        result = recalculate(audit, rates, leave_overrides={"3": False})

        event = result.find_event("3")
        assert event.is_leave is False
        assert event.final_tier == "senior"
        assert result.metrics.total_hours == pytest.approx(11.0)
        assert result.leave_days == 0
        assert result.leave_hours_excluded == 0

    def test_marking_leave_removes_the_hours(self, audit, rates):
        result = recalculate(audit, rates, leave_overrides={"2": True})

        event = result.find_event("2")
        assert event.is_leave is True
        assert event.leave_method == "user"
        assert event.final_tier == LEAVE_TIER
        assert result.metrics.total_hours == pytest.approx(1.0)
        assert result.leave_hours_excluded == pytest.approx(10.0)

    def test_tier_override_ignored_for_leave(self, audit, rates):
        result = recalculate(audit, rates, tier_overrides={"3": "ea"})
        assert result.find_event("3").final_tier == LEAVE_TIER
        assert result.metrics.hours_by_tier["ea"] == 0

    def test_planning_is_carried_over(self, audit, rates):
        result = recalculate(audit, rates, tier_overrides={"2": "ea"})
        assert result.planning == audit.planning


def test_tier_rates_blend_engineering_and_business():
    rates = RateConfig(120000, 80000, 60000, 40000, 30000)
    assert tier_rates(rates) == {"senior": 100000, "junior": 50000, "ea": 30000}
