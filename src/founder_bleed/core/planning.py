"""Pure calendar planning-quality scoring - no I/O dependencies."""

from dataclasses import dataclass, field

from .metrics import round_half_up

VAGUE_TITLES = [
    "call",
    "meeting",
    "chat",
    "sync",
    "catch up",
    "touch base",
    "check in",
    "TBD",
    "busy",
]

COMPONENT_NAMES = (
    "event_coverage",
    "title_quality",
    "duration_accuracy",
    "recurring_usage",
    "description_quality",
)

MIN_REALISTIC_MINUTES = 15
MAX_REALISTIC_MINUTES = 240
WORK_HOURS_PER_WEEK = 40


@dataclass
class PlanningEvent:
    """The parts of an event that matter for planning quality."""

    title: str
    description: str
    duration_minutes: int
    is_recurring: bool = False
    is_all_day: bool = False


@dataclass
class PlanningScore:
    """Overall planning score with its components and a markdown assessment."""

    score: int
    components: dict[str, int] = field(default_factory=lambda: {c: 0 for c in COMPONENT_NAMES})
    assessment: str = ""


def _is_vague(title: str) -> bool:
    lowered = title.lower()
    return any(v.lower() in lowered for v in VAGUE_TITLES)


def _word_count(title: str) -> int:
    return len(title.split())


def _has_descriptive_title(event: PlanningEvent) -> bool:
    return _word_count(event.title) > 3 and not _is_vague(event.title)


def _has_realistic_duration(event: PlanningEvent) -> bool:
    return (
        not event.is_all_day
        and MIN_REALISTIC_MINUTES <= event.duration_minutes <= MAX_REALISTIC_MINUTES
    )


def _has_description(event: PlanningEvent) -> bool:
    return bool(event.description) and len(event.description) > 10


def _bullets(items: list[str], fallback: str) -> str:
    return "\n".join(f"- {item}" for item in items) if items else f"- {fallback}"


def planning_score(events: list[PlanningEvent], audit_days: int) -> PlanningScore:
    """
    Score how well a calendar is planned over an audit period.

    Pure function - no I/O.
    """
    if not events:
        return PlanningScore(
            score=0,
            assessment="## Your Planning Score: 0%\n\nNo events found in the selected period.",
        )

    count = len(events)
    total_hours = sum(e.duration_minutes / 60 for e in events)
    expected_hours = max(audit_days, 1) / 7 * WORK_HOURS_PER_WEEK

    event_coverage = min(100.0, total_hours / expected_hours * 100)
    descriptive = [e for e in events if _has_descriptive_title(e)]
    title_quality = len(descriptive) / count * 100
    duration_accuracy = len([e for e in events if _has_realistic_duration(e)]) / count * 100
    recurring_usage = len([e for e in events if e.is_recurring]) / count * 100
    description_quality = len([e for e in events if _has_description(e)]) / count * 100

    score = int(
        round_half_up(
            event_coverage * 0.25
            + title_quality * 0.25
            + duration_accuracy * 0.25
            + recurring_usage * 0.15
            + description_quality * 0.1
        )
    )

    strengths = []
    improvements = []
    recommendations = []

    if recurring_usage > 50:
        strengths.append(
            f"Good use of recurring events ({int(round_half_up(recurring_usage))}% of meetings are recurring)"
        )
    if title_quality > 70:
        strengths.append("Most events have descriptive titles")
    if description_quality > 50:
        strengths.append("Good use of event descriptions and agendas")

    if event_coverage < 50:
        improvements.append(
            f"Only {int(round_half_up(event_coverage))}% of your work hours have scheduled events"
        )
    vague_count = count - len(descriptive)
    if vague_count > 0:
        improvements.append(f'{vague_count} events have vague titles like "Call" or "Meeting"')
    if description_quality < 30:
        improvements.append("Consider adding agendas to your meetings")

    if event_coverage < 50:
        recommendations.append('Block time for deep work (consider adding "focus time" blocks)')
    if title_quality < 70:
        recommendations.append("Add context to meeting titles (who, what, outcome)")
    if duration_accuracy < 70:
        recommendations.append("Schedule buffer time between back-to-back meetings")

    numbered = (
        "\n".join(f"{i}. {rec}" for i, rec in enumerate(recommendations, start=1))
        or "1. Maintain your current calendar hygiene"
    )

    assessment = f"""## Your Planning Score: {score}%

### Strengths
{_bullets(strengths, "Keep adding details to your calendar events")}

### Areas to Improve
{_bullets(improvements, "Great job! Your calendar is well-organized")}

### Recommendations
{numbered}"""

    components = {
        "event_coverage": event_coverage,
        "title_quality": title_quality,
        "duration_accuracy": duration_accuracy,
        "recurring_usage": recurring_usage,
        "description_quality": description_quality,
    }
    return PlanningScore(
        score=score,
        components={name: int(round_half_up(value)) for name, value in components.items()},
        assessment=assessment,
    )


def event_planning_score(event: PlanningEvent) -> int:
    """Score a single event out of 100."""
    score = 0

    if not _is_vague(event.title):
        words = _word_count(event.title)
        if words > 3:
            score += 40
        elif words > 1:
            score += 20

    if _has_realistic_duration(event):
        score += 30

    if _has_description(event):
        score += 20

    if event.is_recurring:
        score += 10

    return score
