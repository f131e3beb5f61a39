"""Pure audit metrics computation - no I/O dependencies."""

import logging
import math
from collections import Counter, defaultdict
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum

logger = logging.getLogger(__name__)

# 52 weeks x 40 hours. Every annual-to-hourly conversion goes through this.
HOURS_PER_YEAR = 2080

TIERS = ("unique", "founder", "senior", "junior", "ea")
DELEGABLE_TIERS = ("senior", "junior", "ea")
DEFAULT_TIER = "senior"

TIER_PRIORITY = {"unique": 4, "founder": 3, "senior": 2, "junior": 1, "ea": 0}

ENGINEERING_VERTICALS = {"engineering", "technical"}
VERTICAL_RANK = {"engineering": 2, "business": 1, "universal": 0}

_END = 0
_START = 1


class RateStrategy(Enum):
    """How delegated senior/junior hours are priced."""

    BLEND = "blend"  # average of engineering and business rates
    BY_VERTICAL = "by_vertical"  # pick the rate matching each event's vertical


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positive values (2.5 -> 3)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def normalize_tier(tier: str | None) -> str:
    """Map a tier string onto one of TIERS, defaulting to senior."""
    normalized = (tier or "").strip().lower()
    if normalized in TIERS:
        return normalized
    if normalized:
        logger.debug(f"Unrecognised tier '{tier}', counting as {DEFAULT_TIER}")
    return DEFAULT_TIER


def normalize_vertical(vertical: str | None) -> str:
    """Map a vertical onto engineering, business or universal."""
    normalized = (vertical or "").strip().lower()
    if normalized in ENGINEERING_VERTICALS:
        return "engineering"
    if normalized == "business":
        return "business"
    return "universal"


def _parse_datetime(value) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None


@dataclass
class CalendarEvent:
    """A classified block of calendar time, as consumed by the metrics engine."""

    duration_minutes: int
    final_tier: str | None = DEFAULT_TIER
    vertical: str = "universal"
    is_leave: bool = False
    start: datetime | None = None
    end: datetime | None = None

    @property
    def tier(self) -> str:
        return normalize_tier(self.final_tier)

    @property
    def hours(self) -> float:
        return self.duration_minutes / 60

    @classmethod
    def from_dict(cls, data: dict) -> "CalendarEvent":
        """Create a CalendarEvent from a snake_case or camelCase mapping."""
        return cls(
            duration_minutes=int(data.get("duration_minutes", data.get("durationMinutes", 0)) or 0),
            final_tier=data.get("final_tier", data.get("finalTier")),
            vertical=data.get("vertical") or "universal",
            is_leave=bool(data.get("is_leave", data.get("isLeave", False))),
            start=_parse_datetime(data.get("start")),
            end=_parse_datetime(data.get("end")),
        )


@dataclass(frozen=True)
class RateConfig:
    """A snapshot of one founder's cost parameters. All rates are annual."""

    senior_engineering_rate: float
    senior_business_rate: float
    junior_engineering_rate: float
    junior_business_rate: float
    ea_rate: float
    salary_annual: float | None = None
    equity_percentage: float | None = None
    company_valuation: float | None = None
    vesting_period_years: float | None = None

    def founder_annual_cost(self) -> float | None:
        """Salary plus annualized equity, or None without a salary."""
        if self.salary_annual is None:
            return None

        annual = self.salary_annual
        if (
            self.equity_percentage is not None
            and self.company_valuation is not None
            and self.vesting_period_years is not None
            and self.vesting_period_years > 0
        ):
            annual += self.company_valuation * self.equity_percentage / 100 / self.vesting_period_years
        return annual

    def hourly_rate(
        self,
        tier: str,
        vertical: str = "universal",
        strategy: RateStrategy = RateStrategy.BLEND,
    ) -> float:
        """
        Hourly cost of delegating one hour of `tier` work.

        Only delegable tiers have a price; unique/founder return 0.
        """
        if tier == "ea":
            return self.ea_rate / HOURS_PER_YEAR

        if tier == "senior":
            engineering, business = self.senior_engineering_rate, self.senior_business_rate
        elif tier == "junior":
            engineering, business = self.junior_engineering_rate, self.junior_business_rate
        else:
            return 0.0

        if strategy is RateStrategy.BY_VERTICAL:
            vertical = normalize_vertical(vertical)
            if vertical == "engineering":
                return engineering / HOURS_PER_YEAR
            if vertical == "business":
                return business / HOURS_PER_YEAR

        return (engineering + business) / 2 / HOURS_PER_YEAR


@dataclass(frozen=True)
class AuditMetrics:
    """Computed metrics for one audit period."""

    total_hours: float
    working_days: int
    hours_by_tier: dict[str, float] = field(default_factory=lambda: {t: 0.0 for t in TIERS})
    founder_cost_total: float | None = None
    delegated_cost_total: float = 0.0
    arbitrage: float | None = None
    efficiency_score: int = 0
    reclaimable_hours: float = 0.0

    @property
    def delegable_hours(self) -> float:
        return sum(self.hours_by_tier[t] for t in DELEGABLE_TIERS)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AuditMetrics":
        hours = {t: float(data.get("hours_by_tier", {}).get(t, 0.0)) for t in TIERS}
        return cls(
            total_hours=data["total_hours"],
            working_days=data["working_days"],
            hours_by_tier=hours,
            founder_cost_total=data.get("founder_cost_total"),
            delegated_cost_total=data.get("delegated_cost_total", 0.0),
            arbitrage=data.get("arbitrage"),
            efficiency_score=data.get("efficiency_score", 0),
            reclaimable_hours=data.get("reclaimable_hours", 0.0),
        )


def _allocation_rank(key: tuple[str, str]) -> tuple[int, int]:
    tier, vertical = key
    return TIER_PRIORITY[tier], VERTICAL_RANK[vertical]


def allocate_hours(
    events: list[CalendarEvent],
    resolve_overlaps: bool = False,
) -> dict[tuple[str, str], float]:
    """
    Sum work hours per (tier, vertical).

    Leave events are skipped. With resolve_overlaps, timed events are swept
    along a timeline so overlapping spans count once, attributed to the
    highest-priority tier active at that moment. Events without a usable
    start/end always contribute their plain duration.

    Pure function - no I/O.
    """
    hours: dict[tuple[str, str], float] = defaultdict(float)
    points: list[tuple[datetime, int, tuple[str, str]]] = []

    for event in events:
        if event.is_leave:
            continue

        key = (event.tier, normalize_vertical(event.vertical))
        if resolve_overlaps and event.start and event.end and event.end > event.start:
            points.append((event.start, _START, key))
            points.append((event.end, _END, key))
        else:
            hours[key] += event.hours

    if not points:
        return hours

    # Ends sort before starts at the same instant so back-to-back events don't overlap
    points.sort(key=lambda p: (p[0], p[1]))

    active: Counter = Counter()
    prev_time = points[0][0]
    for time, kind, key in points:
        if time > prev_time:
            live = [k for k, count in active.items() if count > 0]
            if live:
                top = max(live, key=_allocation_rank)
                hours[top] += (time - prev_time).total_seconds() / 3600
        active[key] += 1 if kind == _START else -1
        prev_time = time

    return hours


def compute_metrics(
    events: list[CalendarEvent],
    rates: RateConfig,
    audit_days: int,
    *,
    strategy: RateStrategy = RateStrategy.BLEND,
    resolve_overlaps: bool = False,
) -> AuditMetrics:
    """
    Compute time and cost metrics for an audit period.

    Pure function - no I/O. Never raises on odd input: zero hours, missing
    salary or missing equity fields all resolve to safe defaults.

    Args:
        events: Classified events; leave events are excluded
        rates: The founder's salary/equity and delegated annual rates
        audit_days: Length of the audit period in days
        strategy: How senior/junior rates are chosen
        resolve_overlaps: Count overlapping timed events only once

    Returns:
        AuditMetrics for the period
    """
    work_events = [e for e in events if not e.is_leave]
    allocated = allocate_hours(work_events, resolve_overlaps=resolve_overlaps)

    hours_by_tier = {t: 0.0 for t in TIERS}
    for (tier, _vertical), hours in allocated.items():
        hours_by_tier[tier] += hours

    total_hours = sum(hours_by_tier.values())
    working_days = max(audit_days, 1)

    founder_cost_total = None
    annual_founder_cost = rates.founder_annual_cost()
    if annual_founder_cost is not None:
        founder_cost_total = annual_founder_cost / HOURS_PER_YEAR * total_hours

    if strategy is RateStrategy.BY_VERTICAL:
        delegated_cost_total = sum(
            hours * rates.hourly_rate(tier, vertical, strategy)
            for (tier, vertical), hours in allocated.items()
            if tier in DELEGABLE_TIERS
        )
    else:
        delegated_cost_total = sum(hours_by_tier[t] * rates.hourly_rate(t) for t in DELEGABLE_TIERS)

    arbitrage = None
    if founder_cost_total is not None:
        arbitrage = founder_cost_total - delegated_cost_total

    efficiency_score = 0
    reclaimable_hours = 0.0
    if total_hours > 0:
        high_value_hours = hours_by_tier["unique"] + hours_by_tier["founder"]
        efficiency_score = int(round_half_up(high_value_hours / total_hours * 100))

        weekly_hours = total_hours / (working_days / 7)
        delegable_hours = sum(hours_by_tier[t] for t in DELEGABLE_TIERS)
        reclaimable_hours = round_half_up(delegable_hours / total_hours * weekly_hours, 1)

    return AuditMetrics(
        total_hours=total_hours,
        working_days=working_days,
        hours_by_tier=hours_by_tier,
        founder_cost_total=founder_cost_total,
        delegated_cost_total=delegated_cost_total,
        arbitrage=arbitrage,
        efficiency_score=efficiency_score,
        reclaimable_hours=reclaimable_hours,
    )
