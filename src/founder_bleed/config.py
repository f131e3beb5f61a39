"""Configuration management for Founder Bleed."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.metrics import RateConfig, RateStrategy
from .core.schedule import DEFAULT_DAY_OF_WEEK, DEFAULT_HOUR, AuditFrequency

logger = logging.getLogger(__name__)

FOUNDER_BLEED_HOME = Path(os.environ.get("FOUNDER_BLEED_HOME", Path.home() / "founder-bleed"))
CONFIG_FILE = FOUNDER_BLEED_HOME / "config" / "founder-bleed.conf"
DATA_DIR = FOUNDER_BLEED_HOME / "data"

DEFAULT_RATES = {
    "senior_engineering": 100000.0,
    "senior_business": 100000.0,
    "junior_engineering": 50000.0,
    "junior_business": 50000.0,
    "ea": 30000.0,
}

_FLOAT_KEYS = {
    "salary_annual",
    "equity_percentage",
    "company_valuation",
    "vesting_period_years",
    "senior_engineering_rate",
    "senior_business_rate",
    "junior_engineering_rate",
    "junior_business_rate",
    "ea_rate",
}


@dataclass
class CalendarAccount:
    """A Google Calendar account configuration."""

    config_folder: str
    label: str | None = None
    calendars: list[str] = field(default_factory=list)


@dataclass
class Config:
    """Founder Bleed configuration."""

    calendar_accounts: list[CalendarAccount] = field(default_factory=list)
    google_client_secret_file: str = ""
    timezone: str = "America/Toronto"
    # Founder compensation (optional)
    salary_annual: float | None = None
    equity_percentage: float | None = None
    company_valuation: float | None = None
    vesting_period_years: float | None = None
    # Annual cost of delegated roles
    senior_engineering_rate: float = DEFAULT_RATES["senior_engineering"]
    senior_business_rate: float = DEFAULT_RATES["senior_business"]
    junior_engineering_rate: float = DEFAULT_RATES["junior_engineering"]
    junior_business_rate: float = DEFAULT_RATES["junior_business"]
    ea_rate: float = DEFAULT_RATES["ea"]
    # Audit settings
    rate_strategy: RateStrategy = RateStrategy.BLEND
    team_composition: dict[str, int] = field(default_factory=lambda: {"founder": 1})
    exclusions: list[str] = field(default_factory=list)
    audits_dir: str = ""
    audit_frequency: AuditFrequency = AuditFrequency.WEEKLY
    audit_day_of_week: int = DEFAULT_DAY_OF_WEEK
    audit_hour: int = DEFAULT_HOUR

    @property
    def is_solo_founder(self) -> bool:
        """Exactly one founder and nobody else on the team."""
        founders = self.team_composition.get("founder", 0)
        others = any(count > 0 for role, count in self.team_composition.items() if role != "founder")
        return founders == 1 and not others

    def rate_config(self) -> RateConfig:
        return RateConfig(
            senior_engineering_rate=self.senior_engineering_rate,
            senior_business_rate=self.senior_business_rate,
            junior_engineering_rate=self.junior_engineering_rate,
            junior_business_rate=self.junior_business_rate,
            ea_rate=self.ea_rate,
            salary_annual=self.salary_annual,
            equity_percentage=self.equity_percentage,
            company_valuation=self.company_valuation,
            vesting_period_years=self.vesting_period_years,
        )

    def audits_path(self) -> Path:
        if self.audits_dir:
            return Path(self.audits_dir).expanduser()
        return DATA_DIR / "audits"


def _strip_value(value: str) -> str:
    """Unquote a value, dropping inline comments."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_accounts(value: str) -> list[CalendarAccount]:
    # JSON format: [{"config_folder": "...", "label": "...", "calendars": [...]}]
    # Simple format: "path1:label1,path2:label2"
    accounts = []
    if value.startswith("["):
        try:
            for item in json.loads(value):
                accounts.append(
                    CalendarAccount(
                        config_folder=item["config_folder"],
                        label=item.get("label"),
                        calendars=item.get("calendars", []),
                    )
                )
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Failed to parse CALENDAR_ACCOUNTS JSON: {e}")
        return accounts

    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if ":" in entry:
            folder, label = entry.split(":", 1)
            accounts.append(CalendarAccount(folder.strip(), label.strip()))
        else:
            accounts.append(CalendarAccount(entry))
    return accounts


def _parse_team(value: str) -> dict[str, int]:
    """Parse "founder:1,senior:2" into a role -> headcount mapping."""
    team = {}
    for entry in value.split(","):
        role, sep, count = entry.partition(":")
        if not sep or not role.strip():
            continue
        try:
            team[role.strip().lower()] = int(count.strip())
        except ValueError:
            logger.warning(f"Invalid TEAM_COMPOSITION entry: {entry.strip()}")
    return team


def _parse_float(key: str, value: str) -> float | None:
    if not value:
        return None
    try:
        return float(value.replace(",", "").replace("_", ""))
    except ValueError:
        logger.warning(f"Invalid number for {key.upper()}: {value}")
        return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from founder-bleed.conf file."""
    config = Config()
    config_file = path or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        if key in _FLOAT_KEYS:
            number = _parse_float(key, value)
            # Required rates keep their defaults; compensation fields may be unset
            if number is not None or not key.endswith("_rate"):
                setattr(config, key, number)
            continue

        match key:
            case "calendar_accounts":
                config.calendar_accounts = _parse_accounts(value)
            case "google_client_secret_file":
                config.google_client_secret_file = value
            case "timezone":
                config.timezone = value
            case "rate_strategy":
                try:
                    config.rate_strategy = RateStrategy(value.lower())
                except ValueError:
                    logger.warning(f"Unknown RATE_STRATEGY '{value}', using {config.rate_strategy.value}")
            case "team_composition":
                config.team_composition = _parse_team(value)
            case "exclusions":
                config.exclusions = [e.strip() for e in value.split(",") if e.strip()]
            case "audits_dir":
                config.audits_dir = value
            case "audit_frequency":
                try:
                    config.audit_frequency = AuditFrequency(value.lower())
                except ValueError:
                    logger.warning(f"Unknown AUDIT_FREQUENCY '{value}', using {config.audit_frequency.value}")
            case "audit_day_of_week":
                if value.isdigit() and int(value) < 7:
                    config.audit_day_of_week = int(value)
                else:
                    logger.warning(f"Invalid AUDIT_DAY_OF_WEEK: {value}")
            case "audit_hour":
                if value.isdigit() and int(value) < 24:
                    config.audit_hour = int(value)
                else:
                    logger.warning(f"Invalid AUDIT_HOUR: {value}")

    return config
