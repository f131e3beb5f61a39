"""Google Calendar API adapter."""

import logging
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from founder_bleed.core.calendar import RawEvent

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]
MAX_RESULTS = 2500


class CalendarError(Exception):
    """Base class for calendar provider failures."""

    pass


class CalendarNotConnectedError(CalendarError):
    """Raised when an account has no usable OAuth token."""

    pass


class CalendarUnavailableError(CalendarError):
    """Raised when the provider can't list the account's calendars."""

    pass


class GoogleCalendarAdapter:
    """Fetches events from Google Calendar via the API."""

    def __init__(
        self,
        config_folder: str,
        label: str | None = None,
        calendars: list[str] | None = None,
        client_secret_file: str = "",
        timezone: str = "America/Toronto",
    ):
        self.config_folder = config_folder
        self.label = label or Path(config_folder).name
        self.calendars = calendars
        self.client_secret_file = client_secret_file
        self.timezone = timezone
        self._token_path = Path(config_folder).expanduser() / "token.json"

    def _save_token(self, creds) -> None:
        self._token_path.parent.mkdir(parents=True, exist_ok=True)
        self._token_path.write_text(creds.to_json())
        self._token_path.chmod(0o600)

    def _get_credentials(self):
        """Stored OAuth credentials for this account, or None if unusable."""
        from google.auth.exceptions import RefreshError
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials

        if not self._token_path.exists():
            logger.warning(f"{self.label}: no OAuth token at {self._token_path}")
            return None

        creds = Credentials.from_authorized_user_file(str(self._token_path), SCOPES)
        if not (creds.expired and creds.refresh_token):
            return creds

        try:
            creds.refresh(Request())
        except RefreshError as e:
            logger.warning(f"{self.label}: token refresh failed: {e}")
            return None
        self._save_token(creds)
        return creds

    def _build_service(self):
        """Calendar v3 API client, or None when the account isn't connected."""
        from googleapiclient.discovery import build

        creds = self._get_credentials()
        return build("calendar", "v3", credentials=creds) if creds else None

    def _calendar_entries(self, service) -> list[dict]:
        return service.calendarList().list().execute().get("items", [])

    def _resolve_calendar_ids(self, service) -> list[str]:
        """Map configured calendar names to IDs; the primary calendar when unset."""
        if not self.calendars:
            return ["primary"]

        by_name = {entry["summary"]: entry["id"] for entry in self._calendar_entries(service)}
        missing = [name for name in self.calendars if name not in by_name]
        if missing:
            logger.warning(f"{self.label}: calendars not found: {', '.join(missing)}")
        return [by_name[name] for name in self.calendars if name in by_name] or ["primary"]

    def authenticate(self) -> bool:
        """Run the installed-app OAuth flow and store the token."""
        from google_auth_oauthlib.flow import InstalledAppFlow

        secret_path = Path(self.client_secret_file).expanduser() if self.client_secret_file else None
        if secret_path is None or not secret_path.exists():
            logger.error(f"{self.label}: client secret file missing ({self.client_secret_file or 'not configured'})")
            return False

        flow = InstalledAppFlow.from_client_secrets_file(str(secret_path), SCOPES)
        self._save_token(flow.run_local_server(port=0))
        return True

    def fetch_range(self, start: datetime, end: datetime) -> list[RawEvent]:
        """
        Fetch all events between start and end across the account's calendars.

        Raises CalendarNotConnectedError when the account has no usable token and
        CalendarUnavailableError when its calendar list can't be read.
        A calendar that fails with an API error is logged and skipped.
        """
        from googleapiclient.errors import HttpError

        service = self._build_service()
        if not service:
            raise CalendarNotConnectedError(
                f"Calendar account '{self.label}' is not connected - run 'founder-bleed cal-auth'"
            )

        try:
            cal_ids = self._resolve_calendar_ids(service)
        except HttpError as e:
            raise CalendarUnavailableError(f"Could not list calendars for '{self.label}': {e}") from e

        events = []
        for cal_id in cal_ids:
            try:
                events.extend(self._fetch_calendar(service, cal_id, start, end))
            except HttpError as e:
                logger.warning(f"Google Calendar API error for {self.label}/{cal_id}: {e}")
        return events

    def _fetch_calendar(self, service, cal_id: str, start: datetime, end: datetime) -> list[RawEvent]:
        events = []
        page_token = None

        while True:
            result = (
                service.events()
                .list(
                    calendarId=cal_id,
                    timeMin=self._rfc3339(start),
                    timeMax=self._rfc3339(end),
                    singleEvents=True,
                    orderBy="startTime",
                    maxResults=MAX_RESULTS,
                    timeZone=self.timezone,
                    pageToken=page_token,
                )
                .execute()
            )

            for item in result.get("items", []):
                event = self._parse_item(item, cal_id)
                if event:
                    events.append(event)

            page_token = result.get("nextPageToken")
            if not page_token:
                break

        logger.debug(f"Fetched {len(events)} events from {self.label}/{cal_id}")
        return events

    def _rfc3339(self, dt: datetime) -> str:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=ZoneInfo(self.timezone))
        return dt.isoformat()

    def _parse_item(self, item: dict, cal_id: str) -> RawEvent | None:
        """Convert an API event resource into a RawEvent, or None to skip it."""
        if item.get("status") == "cancelled":
            return None

        for attendee in item.get("attendees", []):
            if attendee.get("self") and attendee.get("responseStatus") == "declined":
                return None

        start_raw = item.get("start", {})
        end_raw = item.get("end", {})

        if "date" in start_raw:
            # All-day event - attach timezone so it compares with timed events
            tz = ZoneInfo(self.timezone)
            start_dt = datetime.fromisoformat(start_raw["date"]).replace(tzinfo=tz)
            end_dt = datetime.fromisoformat(end_raw["date"]).replace(tzinfo=tz) if "date" in end_raw else None
            all_day = True
        elif "dateTime" in start_raw:
            start_dt = datetime.fromisoformat(start_raw["dateTime"])
            end_dt = datetime.fromisoformat(end_raw["dateTime"]) if "dateTime" in end_raw else None
            all_day = False
        else:
            return None

        return RawEvent(
            id=item.get("id", ""),
            calendar_id=cal_id,
            title=item.get("summary", "Untitled"),
            description=item.get("description", ""),
            start=start_dt,
            end=end_dt,
            is_all_day=all_day,
            attendees=len(item.get("attendees", [])),
            has_meet_link=bool(item.get("hangoutLink") or item.get("conferenceData")),
            is_recurring=bool(item.get("recurringEventId")),
            event_type=item.get("eventType"),
        )

    def list_calendars(self) -> list[tuple[str, str]]:
        """(access role, name) for each calendar the account can see."""
        from googleapiclient.errors import HttpError

        service = self._build_service()
        if not service:
            return []
        try:
            entries = self._calendar_entries(service)
        except HttpError as e:
            logger.warning(f"Google Calendar API error listing calendars for {self.label}: {e}")
            return []
        return [(entry.get("accessRole", ""), entry.get("summary", "")) for entry in entries]
