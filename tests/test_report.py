"""Tests for audit report formatting."""

from datetime import datetime, timedelta

import pytest

from founder_bleed.core.audit import AuditEvent, assemble_audit
from founder_bleed.core.calendar import RawEvent
from founder_bleed.core.metrics import RateConfig
from founder_bleed.core.report import (
    format_audit_markdown,
    format_audit_sections,
    format_event_line,
    format_money,
)


@pytest.fixture
def rates():
    return RateConfig(100000, 100000, 50000, 50000, 30000)


def raw(event_id, title, start, minutes=60):
    return RawEvent(
        id=event_id,
        calendar_id="primary",
        title=title,
        description="",
        start=start,
        end=start + timedelta(minutes=minutes),
    )


class TestFormatMoney:
    def test_formats_amount(self):
        assert format_money(1234.5) == "$1,234.50"

    def test_negative(self):
        assert format_money(-50) == "-$50.00"

    def test_missing(self):
        assert format_money(None) == "n/a"


class TestFormatEventLine:
    def test_timed_event(self):
        event = AuditEvent(
            id="1",
            calendar_id="primary",
            title="Standup",
            description="",
            start=datetime(2025, 1, 15, 10, 0),
            end=datetime(2025, 1, 15, 10, 30),
            is_all_day=False,
            duration_minutes=30,
            final_tier="senior",
        )
        assert format_event_line(event) == "- Wed Jan 15 10:00 Standup [SENIOR, 0.5h]"

    def test_all_day_leave(self):
        event = AuditEvent(
            id="2",
            calendar_id="primary",
            title="Vacation",
            description="",
            start=datetime(2025, 1, 15),
            end=datetime(2025, 1, 16),
            is_all_day=True,
            duration_minutes=480,
            is_leave=True,
        )
        assert format_event_line(event) == "- Wed Jan 15 (all day) Vacation [LEAVE, 8.0h]"


class TestFormatAudit:
    def test_sections(self, rates):
        audit = assemble_audit(
            [raw("1", "Fix login bug", datetime(2025, 1, 13, 10, 0), 120)],
            datetime(2025, 1, 13),
            datetime(2025, 1, 19, 23, 59),
            rates,
            audit_id="a1",
        )
        sections = format_audit_sections(audit)

        assert set(sections) == {"summary", "tiers", "costs", "leave", "roles", "events"}
        assert "- Total Hours: 2.0" in sections["summary"]
        assert "- Senior: 2.0h" in sections["tiers"]
        assert "- Founder Cost: n/a" in sections["costs"]
        assert "- Arbitrage: n/a" in sections["costs"]
        assert sections["roles"] == "No roles to recommend yet."
        assert sections["leave"] == "- 0 leave days, 0.0h excluded"

    def test_event_list_is_truncated(self, rates):
        start = datetime(2025, 1, 13, 8, 0)
        events = [raw(str(i), f"Task {i}", start + timedelta(hours=i)) for i in range(25)]
        audit = assemble_audit(events, datetime(2025, 1, 13), datetime(2025, 1, 19), rates)

        sections = format_audit_sections(audit)
        assert sections["events"].count("\n- ") == 20
        assert sections["events"].endswith("- ... and 5 more")

    def test_markdown(self, rates):
        audit = assemble_audit([], datetime(2025, 1, 13), datetime(2025, 1, 19), rates, audit_id="a1")
        report = format_audit_markdown(audit)

        assert report.startswith("# Founder Bleed Audit a1")
        for heading in ("## Summary", "## Hours by Tier", "## Costs", "## Leave", "## Recommended Roles", "## Events"):
            assert heading in report
        assert "No events found in the selected period." in report
        assert "No events." in report
