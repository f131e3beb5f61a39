"""Pure audit report formatting - no I/O dependencies."""

from .audit import AuditEvent, AuditResult
from .metrics import TIERS, AuditMetrics
from .roles import RoleRecommendation

MAX_REPORT_EVENTS = 20

TIER_LABELS = {
    "unique": "Unique",
    "founder": "Founder",
    "senior": "Senior",
    "junior": "Junior",
    "ea": "EA",
}


def format_money(value: float | None) -> str:
    """Format a currency amount, or 'n/a' when it can't be computed."""
    if value is None:
        return "n/a"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_tier_lines(metrics: AuditMetrics) -> str:
    return "\n".join(
        f"- {TIER_LABELS[tier]}: {metrics.hours_by_tier[tier]:.1f}h" for tier in TIERS
    )


def format_role_line(role: RoleRecommendation) -> str:
    return (
        f"- {role.role_title} ({role.hours_per_week}h/week, "
        f"{format_money(role.cost_annual)}/year, area: {role.business_area})"
    )


def format_event_line(event: AuditEvent) -> str:
    """Format a single audited event for display."""
    tier = "LEAVE" if event.is_leave else event.final_tier.upper()
    when = event.start.strftime("%a %b %d %H:%M") if event.start else "-"
    if event.is_all_day and event.start:
        when = event.start.strftime("%a %b %d") + " (all day)"
    return f"- {when} {event.title} [{tier}, {event.hours:.1f}h]"


def format_audit_sections(audit: AuditResult) -> dict[str, str]:
    """
    Format an audit into markdown sections.

    Returns dict with keys: summary, tiers, costs, leave, roles, events
    """
    m = audit.metrics

    summary = f"""- Period: {audit.start.strftime('%b %d, %Y')} - {audit.end.strftime('%b %d, %Y')} ({audit.audit_days} days)
- Events: {len(audit.events)}
- Total Hours: {m.total_hours:.1f}
- Efficiency Score: {m.efficiency_score}%
- Planning Score: {audit.planning.score}%
- Reclaimable Hours: {m.reclaimable_hours}h/week"""

    costs = f"""- Founder Cost: {format_money(m.founder_cost_total)}
- Delegated Cost: {format_money(m.delegated_cost_total)}
- Arbitrage: {format_money(m.arbitrage)}"""

    leave = f"- {audit.leave_days} leave days, {audit.leave_hours_excluded:.1f}h excluded"

    roles = "\n".join(format_role_line(r) for r in audit.roles) or "No roles to recommend yet."

    events = "\n".join(format_event_line(e) for e in audit.events[:MAX_REPORT_EVENTS]) or "No events."
    if len(audit.events) > MAX_REPORT_EVENTS:
        events += f"\n- ... and {len(audit.events) - MAX_REPORT_EVENTS} more"

    return {
        "summary": summary,
        "tiers": format_tier_lines(m),
        "costs": costs,
        "leave": leave,
        "roles": roles,
        "events": events,
    }


def format_audit_markdown(audit: AuditResult) -> str:
    """Render a full markdown export of an audit."""
    sections = format_audit_sections(audit)
    return f"""# Founder Bleed Audit {audit.audit_id}

## Summary
{sections["summary"]}

## Hours by Tier
{sections["tiers"]}

## Costs
{sections["costs"]}

## Leave
{sections["leave"]}

{audit.planning.assessment}

## Recommended Roles
{sections["roles"]}

## Events
{sections["events"]}
"""
