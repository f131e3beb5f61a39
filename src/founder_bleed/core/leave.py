"""Pure leave detection logic - no I/O dependencies."""

from dataclasses import dataclass

# Matched case-insensitively as substrings of title + description
LEAVE_KEYWORDS: dict[str, list[str]] = {
    "vacation": ["vacation", "holiday", "annual leave", "PTO", "paid time off"],
    "out_of_office": ["OOO", "out of office", "away", "traveling", "travel day"],
    "leave_types": [
        "sick leave",
        "sick day",
        "personal day",
        "bereavement",
        "parental leave",
        "maternity",
        "paternity",
    ],
    "blocked_time": ["time off", "day off", "off work", "not working", "unavailable"],
}

TITLE_KEYWORDS = ("vacation", "pto")

OUT_OF_OFFICE_EVENT_TYPE = "outOfOffice"


@dataclass(frozen=True)
class LeaveResult:
    """Outcome of leave detection for a single event."""

    is_leave: bool
    method: str
    confidence: str  # high | medium | low


def _all_keywords() -> list[str]:
    return [kw.lower() for keywords in LEAVE_KEYWORDS.values() for kw in keywords]


def detect_leave(
    title: str | None,
    description: str | None,
    is_all_day: bool = False,
    event_type: str | None = None,
) -> LeaveResult:
    """
    Decide whether an event is non-work time (vacation, sick leave, OOO).

    Checks run in precedence order and the first match wins:
    provider event type, then a "vacation"/"PTO" title, then any keyword
    in title + description.

    `is_all_day` is part of the signature but does not affect the result.
    Pure function - no I/O.
    """
    title_text = (title or "").lower()
    text = f"{title_text} {(description or '').lower()}"

    if event_type == OUT_OF_OFFICE_EVENT_TYPE:
        return LeaveResult(True, "provider_event_type", "high")

    if any(kw in title_text for kw in TITLE_KEYWORDS):
        return LeaveResult(True, "keyword_title", "high")

    if any(kw in text for kw in _all_keywords()):
        return LeaveResult(True, "keyword_match", "medium")

    return LeaveResult(False, "none", "low")
