"""Founder Bleed CLI - calendar time and delegation audits."""

import json
import logging
import sys
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import click

from .config import load_config
from .core.audit import AuditResult
from .core.classification import classify_event
from .core.leave import detect_leave
from .core.metrics import TIERS, CalendarEvent, compute_metrics
from .core.report import format_audit_markdown, format_money, format_tier_lines
from .core.schedule import end_of_day, next_run_at, start_of_day
from .workflows import AuditError, get_store, run_audit, run_recalculation


def _parse_date(value: str, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got '{value}'", param_hint=option)


def _parse_tier_overrides(values: tuple[str, ...]) -> dict[str, str]:
    """Parse EVENT_ID=TIER pairs."""
    overrides = {}
    for value in values:
        event_id, sep, tier = value.partition("=")
        tier = tier.strip().lower()
        if not sep or not event_id:
            raise click.BadParameter(f"expected EVENT_ID=TIER, got '{value}'", param_hint="--tier")
        if tier not in TIERS:
            raise click.BadParameter(
                f"unknown tier '{tier}' (choose from {', '.join(TIERS)})", param_hint="--tier"
            )
        overrides[event_id] = tier
    return overrides


def _echo_summary(audit: AuditResult) -> None:
    m = audit.metrics
    click.echo(f"Audit {audit.audit_id}")
    click.echo(f"  {audit.start.date()} - {audit.end.date()} ({audit.audit_days} days, {len(audit.events)} events)")
    click.echo(f"  Total hours:   {m.total_hours:.1f}")
    click.echo(f"  Efficiency:    {m.efficiency_score}%")
    click.echo(f"  Planning:      {audit.planning.score}%")
    click.echo(f"  Reclaimable:   {m.reclaimable_hours}h/week")
    click.echo(f"  Founder cost:  {format_money(m.founder_cost_total)}")
    click.echo(f"  Delegated:     {format_money(m.delegated_cost_total)}")
    click.echo(f"  Arbitrage:     {format_money(m.arbitrage)}")
    if audit.leave_days:
        click.echo(f"  Leave:         {audit.leave_days} days ({audit.leave_hours_excluded:.1f}h excluded)")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="founder-bleed")
def main(debug: bool):
    """Founder Bleed - find out where a founder's calendar time goes."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--start", "start_str", default=None, help="First day of the audit (YYYY-MM-DD)")
@click.option("--end", "end_str", default=None, help="Last day of the audit (YYYY-MM-DD, default: yesterday)")
@click.option("--days", default=7, show_default=True, help="Days to audit when --start is not given")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--no-save", is_flag=True, help="Don't store the audit")
def audit(start_str: str | None, end_str: str | None, days: int, as_json: bool, no_save: bool):
    """Run a calendar audit."""
    config = load_config()
    tz = ZoneInfo(config.timezone)

    end_day = _parse_date(end_str, "--end") if end_str else datetime.now(tz).date() - timedelta(days=1)
    if start_str:
        start_day = _parse_date(start_str, "--start")
    else:
        start_day = end_day - timedelta(days=max(days, 1) - 1)

    try:
        result = run_audit(
            config,
            start_of_day(start_day, tz),
            end_of_day(end_day, tz),
            store=None if no_save else get_store(config),
        )
    except AuditError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    _echo_summary(result)
    if not no_save:
        click.echo(f"\nSaved. View the report with: founder-bleed show {result.audit_id}")


@main.command()
@click.argument("title")
@click.option("--description", default="", help="Event description")
@click.option("--attendees", default=0, help="Number of attendees")
@click.option("--all-day", is_flag=True, help="Treat as an all-day event")
@click.option("--event-type", default=None, help="Provider event type (e.g. outOfOffice)")
def classify(title: str, description: str, attendees: int, all_day: bool, event_type: str | None):
    """Show leave detection and tier classification for one event."""
    config = load_config()

    leave = detect_leave(title, description, all_day, event_type)
    if leave.is_leave:
        click.echo(f"Leave: yes ({leave.method}, {leave.confidence} confidence)")
        return

    result = classify_event(title, description, attendees, config.is_solo_founder)
    click.echo("Leave: no")
    click.echo(f"Tier: {result.suggested_tier} ({result.confidence} confidence)")
    click.echo(f"Area: {result.business_area} ({result.vertical})")
    if result.keywords_matched:
        click.echo(f"Keywords: {', '.join(result.keywords_matched)}")


@main.command()
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--days", default=None, type=int, help="Audit period length (default: from file, else 7)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def metrics(events_file: str, days: int | None, as_json: bool):
    """Compute metrics from a JSON file of classified events."""
    config = load_config()

    try:
        with open(events_file) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        click.echo(f"Error: {events_file} is not valid JSON: {e}", err=True)
        sys.exit(1)

    if isinstance(data, dict):
        raw_events = data.get("events", [])
        days = days or data.get("audit_days")
    else:
        raw_events = data

    events = [CalendarEvent.from_dict(e) for e in raw_events]
    result = compute_metrics(events, config.rate_config(), days or 7, strategy=config.rate_strategy)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo(f"Total hours: {result.total_hours:.1f} over {result.working_days} days")
    click.echo(format_tier_lines(result))
    click.echo(f"Founder cost:   {format_money(result.founder_cost_total)}")
    click.echo(f"Delegated cost: {format_money(result.delegated_cost_total)}")
    click.echo(f"Arbitrage:      {format_money(result.arbitrage)}")
    click.echo(f"Efficiency:     {result.efficiency_score}%")
    click.echo(f"Reclaimable:    {result.reclaimable_hours}h/week")


@main.command()
@click.argument("audit_id")
@click.option("--tier", "tiers", multiple=True, help="Override a tier: EVENT_ID=TIER (repeatable)")
@click.option("--leave", "leave_ids", multiple=True, help="Mark an event as leave (repeatable)")
@click.option("--not-leave", "not_leave_ids", multiple=True, help="Mark an event as work (repeatable)")
def recalc(audit_id: str, tiers: tuple[str, ...], leave_ids: tuple[str, ...], not_leave_ids: tuple[str, ...]):
    """Reconcile a stored audit and recompute its figures."""
    tier_overrides = _parse_tier_overrides(tiers)
    leave_overrides = {event_id: True for event_id in leave_ids}
    leave_overrides.update({event_id: False for event_id in not_leave_ids})

    if not tier_overrides and not leave_overrides:
        click.echo("Nothing to change - pass --tier, --leave or --not-leave", err=True)
        sys.exit(1)

    config = load_config()
    try:
        result = run_recalculation(
            config,
            audit_id,
            get_store(config),
            tier_overrides=tier_overrides,
            leave_overrides=leave_overrides,
        )
    except AuditError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _echo_summary(result)


@main.command()
@click.argument("audit_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show(audit_id: str, as_json: bool):
    """Show a stored audit report."""
    store = get_store(load_config())

    result = store.load(audit_id)
    if result is None:
        click.echo(f"Error: Audit not found: {audit_id}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.echo(store.read_report(audit_id) or format_audit_markdown(result))


@main.command("list")
def list_audits():
    """List stored audits, newest first."""
    store = get_store(load_config())

    ids = store.list_ids()
    if not ids:
        click.echo("No audits yet. Run 'founder-bleed audit' to create one.")
        return

    for audit_id in ids:
        result = store.load(audit_id)
        if result is None:
            click.echo(f"{audit_id}  (unreadable)")
            continue
        click.echo(
            f"{audit_id}  {result.start.date()} - {result.end.date()}  "
            f"{result.metrics.total_hours:.1f}h  efficiency {result.metrics.efficiency_score}%"
        )


@main.command("cal-auth")
@click.option("--account", default=None, help="Label of account to authenticate (default: all)")
def cal_auth(account: str | None):
    """Authenticate with Google Calendar."""
    config = load_config()

    if not config.calendar_accounts:
        click.echo("No calendar accounts configured in founder-bleed.conf", err=True)
        sys.exit(1)

    if not config.google_client_secret_file:
        click.echo("GOOGLE_CLIENT_SECRET_FILE not set in founder-bleed.conf", err=True)
        sys.exit(1)

    from founder_bleed.adapters.google_calendar import GoogleCalendarAdapter

    for acct in config.calendar_accounts:
        if account and acct.label != account:
            continue

        click.echo(f"\nAuthenticating: {acct.label or acct.config_folder}")
        adapter = GoogleCalendarAdapter(
            config_folder=acct.config_folder,
            label=acct.label,
            client_secret_file=config.google_client_secret_file,
            timezone=config.timezone,
        )
        if adapter.authenticate():
            click.echo(f"  ✓ Token saved to {adapter._token_path}")
        else:
            click.echo("  ✗ Authentication failed", err=True)


@main.command("cal-list")
def cal_list():
    """List calendars visible to each configured account."""
    config = load_config()

    from founder_bleed.adapters.composite_calendar import CompositeCalendarAdapter

    composite = CompositeCalendarAdapter(config)
    if not composite._adapters:
        click.echo("No calendar accounts configured in founder-bleed.conf")
        return

    for adapter in composite._adapters:
        click.echo(f"\nAccount: {adapter.label} ({adapter.config_folder})")
        calendars = adapter.list_calendars()
        if not calendars:
            click.echo("  ✗ No calendars (not authenticated? run 'founder-bleed cal-auth')")
            continue
        for access, name in calendars:
            click.echo(f"    {access:16} {name}")
        if adapter.calendars:
            click.echo(f"  Filter: {', '.join(adapter.calendars)}")
        else:
            click.echo("  Filter: (primary calendar)")


@main.command()
@click.option("--next", "show_next", is_flag=True, help="Print the next run time and exit")
def schedule(show_next: bool):
    """Run recurring audits on the configured schedule."""
    config = load_config()
    upcoming = next_run_at(
        config.audit_frequency,
        config.audit_day_of_week,
        config.audit_hour,
        datetime.now(ZoneInfo(config.timezone)),
    )
    click.echo(f"Next {config.audit_frequency.value} audit: {upcoming:%a %b %d %Y %H:%M}")
    if show_next:
        return

    from .scheduler import run_scheduler

    click.echo("Press Ctrl+C to stop")
    try:
        run_scheduler()
    except (KeyboardInterrupt, SystemExit):
        click.echo("Scheduler stopped")


if __name__ == "__main__":
    main()
