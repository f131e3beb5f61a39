"""Pure role recommendation logic - clusters delegable work into hires."""

import math
from collections import defaultdict
from dataclasses import dataclass, field

from .metrics import DELEGABLE_TIERS, round_half_up

MIN_ROLE_HOURS_PER_WEEK = 8
MAX_ROLES = 5
MAX_TASKS_PER_ROLE = 10
WEEKS_PER_MONTH = 4.33
CONSOLIDATED = "Consolidated"

ENGINEERING_TITLES = {
    "Development": "Developer",
    "Design": "Designer",
    "Data/Analytics": "Data Analyst",
}

BUSINESS_TITLES = {
    "Finance": "Finance Manager",
    "Recruiting": "Talent Lead",
    "Marketing": "Marketing Manager",
    "Sales": "Account Manager",
}


@dataclass
class RoleEvent:
    """A delegable event as seen by role clustering."""

    title: str
    final_tier: str
    business_area: str
    vertical: str
    duration_minutes: int


@dataclass
class RoleTask:
    task: str
    hours_per_week: float


@dataclass
class RoleRecommendation:
    """A suggested hire that would absorb a cluster of delegable work."""

    role_title: str
    role_tier: str
    vertical: str | None
    business_area: str
    hours_per_week: int
    cost_weekly: int
    cost_monthly: int
    cost_annual: int
    tasks: list[RoleTask] = field(default_factory=list)


def role_title(tier: str, vertical: str | None, business_area: str) -> str:
    """Human-readable title for a recommended role."""
    if tier == "ea":
        return "Executive Assistant"

    prefix = {"senior": "Senior ", "junior": "Junior "}.get(tier, "")

    if business_area == CONSOLIDATED:
        if vertical == "engineering":
            return f"{prefix}Technical Coordinator"
        return f"{prefix}Operations Manager"

    if vertical == "engineering" and business_area in ENGINEERING_TITLES:
        return f"{prefix}{ENGINEERING_TITLES[business_area]}"

    if vertical == "business" and business_area in BUSINESS_TITLES:
        return BUSINESS_TITLES[business_area]

    return f"{prefix}{business_area} Specialist"


def _total_hours(events: list[RoleEvent]) -> float:
    return sum(e.duration_minutes / 60 for e in events)


def _build_role(
    tier: str,
    business_area: str,
    events: list[RoleEvent],
    weekly_hours: float,
    tier_rates: dict[str, float],
) -> RoleRecommendation:
    vertical = None if tier == "ea" else (events[0].vertical or "business")
    hours_per_week = math.ceil(weekly_hours)

    # Rates are full-time annual salaries
    cost_annual = tier_rates[tier] * (hours_per_week / 40)
    cost_weekly = cost_annual / 52
    cost_monthly = cost_weekly * WEEKS_PER_MONTH

    minutes_by_title: dict[str, int] = defaultdict(int)
    for event in events:
        minutes_by_title[event.title] += event.duration_minutes
    total_minutes = sum(minutes_by_title.values())

    tasks = [
        RoleTask(
            task=title,
            hours_per_week=round_half_up(minutes / total_minutes * weekly_hours, 1) if total_minutes else 0.0,
        )
        for title, minutes in minutes_by_title.items()
    ]
    tasks.sort(key=lambda t: t.hours_per_week, reverse=True)

    return RoleRecommendation(
        role_title=role_title(tier, vertical, business_area),
        role_tier=tier,
        vertical=vertical,
        business_area=business_area,
        hours_per_week=hours_per_week,
        cost_weekly=int(round_half_up(cost_weekly)),
        cost_monthly=int(round_half_up(cost_monthly)),
        cost_annual=int(round_half_up(cost_annual)),
        tasks=tasks[:MAX_TASKS_PER_ROLE],
    )


def recommend_roles(
    events: list[RoleEvent],
    audit_days: int,
    tier_rates: dict[str, float],
) -> list[RoleRecommendation]:
    """
    Group delegable work into recommended hires.

    Clusters of one tier + business area with enough weekly hours become a
    specialised role; smaller clusters are pooled per tier into a
    consolidated role. At most MAX_ROLES are returned, largest first.

    Pure function - no I/O.

    Args:
        events: Events with a final tier and business area
        audit_days: Length of the audit period in days
        tier_rates: Annual salary per delegable tier (senior, junior, ea)
    """
    clusters: dict[tuple[str, str], list[RoleEvent]] = defaultdict(list)
    for event in events:
        if event.final_tier in DELEGABLE_TIERS:
            clusters[(event.final_tier, event.business_area)].append(event)

    weekly_multiplier = 7 / max(audit_days, 1)
    recommendations = []
    consolidation: dict[str, list[RoleEvent]] = {tier: [] for tier in DELEGABLE_TIERS}

    for (tier, business_area), cluster in clusters.items():
        weekly_hours = _total_hours(cluster) * weekly_multiplier
        if weekly_hours >= MIN_ROLE_HOURS_PER_WEEK:
            recommendations.append(_build_role(tier, business_area, cluster, weekly_hours, tier_rates))
        else:
            consolidation[tier].extend(cluster)

    for tier, bucket in consolidation.items():
        if not bucket:
            continue
        weekly_hours = _total_hours(bucket) * weekly_multiplier
        if weekly_hours >= MIN_ROLE_HOURS_PER_WEEK:
            recommendations.append(_build_role(tier, CONSOLIDATED, bucket, weekly_hours, tier_rates))

    recommendations.sort(key=lambda r: r.hours_per_week, reverse=True)
    return recommendations[:MAX_ROLES]
