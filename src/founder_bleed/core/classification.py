"""Pure event classification logic - no I/O dependencies."""

from dataclasses import dataclass, field

# Matched case-insensitively as substrings; areas are checked in this order
BUSINESS_AREA_KEYWORDS: dict[str, list[str]] = {
    "Strategy/Vision": ["strategy", "vision", "roadmap", "planning", "OKR", "goals", "priorities", "direction", "mission"],
    "Fundraising": ["investor", "pitch", "fundraising", "due diligence", "term sheet", "cap table", "board", "VC", "deck"],
    "Executive Hiring": ["executive", "C-level", "VP", "director", "leadership", "senior hire", "founder"],
    "Key Relationships": ["partner CEO", "investor meeting", "board member", "advisor", "mentor"],
    "Product": ["roadmap", "feature", "user story", "sprint", "backlog", "requirements", "PRD", "spec", "prioritization"],
    "Design": ["figma", "design", "UI", "UX", "mockup", "wireframe", "prototype", "user research", "usability"],
    "Development": ["code", "bug", "feature", "PR", "git", "deploy", "testing", "QA", "technical", "programming", "architecture"],
    "Sales": ["sales", "pitch", "proposal", "deal", "prospect", "lead", "demo", "closing", "pipeline", "outreach", "CRM"],
    "Marketing": ["content", "blog", "social", "campaign", "SEO", "ads", "brand", "copywriting", "newsletter", "launch"],
    "Customer Success": ["support", "customer", "ticket", "onboarding", "retention", "churn", "feedback", "NPS", "renewal"],
    "Partnerships": ["partnership", "integration", "API", "channel", "reseller", "affiliate", "co-marketing", "BD"],
    "Data/Analytics": ["dashboard", "metrics", "KPI", "analytics", "reporting", "data", "SQL", "tableau", "amplitude"],
    "Finance": ["invoice", "expense", "payroll", "accounting", "budget", "billing", "taxes", "xero", "quickbooks"],
    "Legal/Admin": ["contract", "NDA", "terms", "compliance", "agreement", "legal", "policy", "documentation"],
    "Recruiting Ops": ["resume", "sourcing", "scheduling interview", "applicant", "ATS", "job posting", "screening"],
    "Operations": ["scheduling", "admin", "travel", "calendar", "logistics", "office", "supplies", "errands", "facilities"],
    "Community": ["discord", "slack community", "forum", "documentation", "tutorial", "FAQ", "help center"],
}

# Checked in order; a later tier's match overrides an earlier one
TIER_KEYWORDS: dict[str, list[str]] = {
    "unique": ["board", "investor", "fundraise", "strategic", "vision", "deep work", "architecture", "strategy"],
    "founder": ["leadership", "executive", "strategy", "hiring senior", "partner CEO", "advisor"],
    "senior": ["architecture", "technical review", "project planning", "client meeting", "code review"],
    "junior": ["code review", "bug fix", "documentation", "testing", "QA"],
    "ea": ["scheduling", "travel", "expenses", "admin", "calendar", "invoice", "payroll", "receipts"],
}

ENGINEERING_AREAS = {"Development", "Design", "Data/Analytics"}
DEFAULT_BUSINESS_AREA = "Operations"
LARGE_MEETING_ATTENDEES = 5


@dataclass
class Classification:
    """Suggested delegation tier and business context for an event."""

    suggested_tier: str
    business_area: str
    vertical: str
    confidence: str
    keywords_matched: list[str] = field(default_factory=list)


def _first_match(text: str, keywords: list[str]) -> str | None:
    for keyword in keywords:
        if keyword.lower() in text:
            return keyword
    return None


def classify_event(
    title: str | None,
    description: str | None,
    attendees_count: int = 0,
    is_solo_founder: bool = False,
) -> Classification:
    """
    Suggest a delegation tier, business area and vertical for an event.

    Pure function - no I/O.
    """
    text = f"{title or ''} {description or ''}".lower()
    matched: list[str] = []

    business_area = DEFAULT_BUSINESS_AREA
    for area, keywords in BUSINESS_AREA_KEYWORDS.items():
        keyword = _first_match(text, keywords)
        if keyword:
            business_area = area
            matched.append(keyword)
            break

    vertical = "engineering" if business_area in ENGINEERING_AREAS else "business"

    tier = "senior"
    for candidate, keywords in TIER_KEYWORDS.items():
        keyword = _first_match(text, keywords)
        if keyword:
            tier = candidate
            matched.append(keyword)

    # Big meetings need the founder in the room
    if attendees_count >= LARGE_MEETING_ATTENDEES:
        tier = "unique" if is_solo_founder else "founder"

    if len(matched) >= 3:
        confidence = "high"
    elif matched:
        confidence = "medium"
    else:
        confidence = "low"

    if is_solo_founder and tier == "founder":
        tier = "unique"

    return Classification(
        suggested_tier=tier,
        business_area=business_area,
        vertical=vertical,
        confidence=confidence,
        keywords_matched=matched,
    )
