"""Tests for the shared workflow layer."""

from datetime import datetime, timedelta
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from founder_bleed.adapters.file_audit_store import FileAuditStore
from founder_bleed.adapters.google_calendar import CalendarNotConnectedError, CalendarUnavailableError
from founder_bleed.config import CalendarAccount, Config
from founder_bleed.core.calendar import RawEvent
from founder_bleed.core.schedule import AuditFrequency, audit_period
from founder_bleed.workflows import (
    AuditError,
    get_store,
    run_audit,
    run_recalculation,
    run_scheduled_audit,
)

START = datetime(2025, 1, 13)
END = datetime(2025, 1, 19, 23, 59, 59)


class FakeCalendar:
    def __init__(self, events=None, error=None):
        self.events = events or []
        self.error = error
        self.calls = []

    def fetch_range(self, start, end):
        self.calls.append((start, end))
        if self.error:
            raise self.error
        return self.events


@pytest.fixture
def config(tmp_path):
    return Config(
        calendar_accounts=[CalendarAccount("/tmp/work", "work")],
        audits_dir=str(tmp_path / "audits"),
        exclusions=["lunch"],
        salary_annual=208000,
    )


@pytest.fixture
def calendar():
    return FakeCalendar(
        [
            RawEvent("1", "primary", "Fix login bug", "", datetime(2025, 1, 13, 10, 0), datetime(2025, 1, 13, 12, 0)),
            RawEvent("2", "primary", "Lunch", "", datetime(2025, 1, 13, 12, 0), datetime(2025, 1, 13, 13, 0)),
            RawEvent("3", "primary", "Leadership offsite", "", datetime(2025, 1, 14, 9, 0), datetime(2025, 1, 14, 11, 0)),
        ]
    )


class TestGetStore:
    def test_uses_configured_dir(self, config, tmp_path):
        store = get_store(config)
        assert store.audits_dir == tmp_path / "audits"


class TestRunAudit:
    def test_runs_and_saves(self, config, calendar):
        store = get_store(config)
        result = run_audit(config, START, END, calendar=calendar, store=store)

        assert calendar.calls == [(START, END)]
        assert [e.id for e in result.events] == ["1", "3"]
        assert result.metrics.total_hours == pytest.approx(4.0)
        assert store.load(result.audit_id) == result

    def test_solo_founder_from_config(self, config, calendar):
        result = run_audit(config, START, END, calendar=calendar)
        assert result.find_event("3").final_tier == "unique"

    def test_team_config(self, config, calendar):
        config.team_composition = {"founder": 1, "senior": 1}
        result = run_audit(config, START, END, calendar=calendar)
        assert result.find_event("3").final_tier == "founder"

    def test_without_store_nothing_is_saved(self, config, calendar):
        result = run_audit(config, START, END, calendar=calendar)
        assert get_store(config).exists(result.audit_id) is False

    def test_no_accounts(self, tmp_path):
        config = Config(audits_dir=str(tmp_path))
        with pytest.raises(AuditError, match="No calendar accounts"):
            run_audit(config, START, END)

    def test_not_connected(self, config):
        calendar = FakeCalendar(error=CalendarNotConnectedError("Calendar account 'work' is not connected"))
        with pytest.raises(AuditError, match="not connected"):
            run_audit(config, START, END, calendar=calendar)

    def test_calendar_unavailable(self, config):
        calendar = FakeCalendar(error=CalendarUnavailableError("Could not list calendars for 'work': 500"))
        with pytest.raises(AuditError, match="Could not list calendars"):
            run_audit(config, START, END, calendar=calendar)

    def test_end_before_start(self, config, calendar):
        with pytest.raises(AuditError):
            run_audit(config, END, START, calendar=calendar)

    def test_builds_calendar_from_config(self, config, calendar):
        with patch("founder_bleed.workflows.get_calendar", return_value=calendar) as mock_get:
            run_audit(config, START, END)
        mock_get.assert_called_once_with(config)


class TestRunRecalculation:
    def test_applies_overrides_and_saves(self, config, calendar):
        store = get_store(config)
        audit = run_audit(config, START, END, calendar=calendar, store=store)

        result = run_recalculation(config, audit.audit_id, store, tier_overrides={"1": "ea"})

        assert result.find_event("1").final_tier == "ea"
        assert store.load(audit.audit_id).find_event("1").final_tier == "ea"

    def test_missing_audit(self, config):
        with pytest.raises(AuditError, match="Audit not found"):
            run_recalculation(config, "nope", get_store(config), tier_overrides={"1": "ea"})

    def test_unknown_event(self, config, calendar):
        store = get_store(config)
        audit = run_audit(config, START, END, calendar=calendar, store=store)

        with pytest.raises(AuditError, match="ghost"):
            run_recalculation(config, audit.audit_id, store, leave_overrides={"ghost": True})


class TestRunScheduledAudit:
    def test_audits_last_period(self, config, calendar):
        config.audit_frequency = AuditFrequency.WEEKLY
        with patch("founder_bleed.workflows.get_calendar", return_value=calendar):
            result = run_scheduled_audit(config, datetime(2025, 1, 20, 3, 0))

        assert result.start == START
        assert result.audit_days == 7
        assert isinstance(get_store(config), FileAuditStore)
        assert get_store(config).exists(result.audit_id)

    def test_errors_are_logged_not_raised(self, tmp_path, caplog):
        config = Config(audits_dir=str(tmp_path))
        assert run_scheduled_audit(config, datetime(2025, 1, 20, 3, 0)) is None
        assert "Scheduled weekly audit failed" in caplog.text

    def test_aware_reference_keeps_its_zone(self, config):
        tokyo = ZoneInfo("Asia/Tokyo")
        with patch("founder_bleed.workflows.get_calendar", return_value=FakeCalendar()):
            result = run_scheduled_audit(config, datetime(2025, 1, 20, 1, 0, tzinfo=tokyo))

        assert result.start == datetime(2025, 1, 13, tzinfo=tokyo)
        assert result.start.tzinfo is tokyo
        assert result.end.date() == datetime(2025, 1, 19).date()

    def test_default_reference_uses_configured_timezone(self, config):
        config.timezone = "Asia/Tokyo"
        with patch("founder_bleed.workflows.get_calendar", return_value=FakeCalendar()), patch(
            "founder_bleed.workflows.audit_period", wraps=audit_period
        ) as mock_period:
            result = run_scheduled_audit(config)

        reference = mock_period.call_args.args[1]
        assert reference.tzinfo is ZoneInfo("Asia/Tokyo")
        assert result.start.tzinfo is ZoneInfo("Asia/Tokyo")
        assert result.end.date() == reference.date() - timedelta(days=1)
