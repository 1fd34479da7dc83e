"""API clients for Jira, Tempo and Toggl."""

import logging
from datetime import datetime, timedelta

import requests

from models import ExistingEntry, IssueDetails, TempoWorklog, TogglTimeEntryPayload

logger = logging.getLogger(__name__)

TEMPO_BASE_URL = "https://api.tempo.io/4"
TOGGL_BASE_URL = "https://api.track.toggl.com/api/v9"


class ApiError(Exception):
    """User-friendly API error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _handle_api_error(response: requests.Response, service: str) -> str:
    """Convert HTTP errors to user-friendly messages."""
    status = response.status_code

    messages = {
        400: f"{service}: Bad request - {response.text[:200]}",
        401: f"{service}: Authentication failed. Check your API token!",
        403: f"{service}: Access denied. Check your permissions or API token!",
        404: f"{service}: Resource not found. Check the workspace/project IDs!",
        429: f"{service}: Too many requests. Wait a moment and try again.",
        500: f"{service}: Server error. The service may be temporarily unavailable.",
        502: f"{service}: Bad gateway. The service may be temporarily unavailable.",
        503: f"{service}: Service unavailable. Try again later.",
    }

    return messages.get(status, f"{service}: HTTP {status} - {response.reason}")


def _request(service: str, method: str, url: str, **kwargs) -> requests.Response:
    """Send a request, turning transport problems and HTTP errors into ApiError."""
    logger.debug("%s %s", method, url)
    try:
        r = requests.request(method, url, **kwargs)
    except requests.exceptions.ConnectionError:
        raise ApiError(f"{service}: Cannot connect to {url}. Check your network!")
    except requests.exceptions.Timeout:
        raise ApiError(f"{service}: Connection timed out. The server may be slow.")

    if not r.ok:
        raise ApiError(_handle_api_error(r, service), r.status_code)
    return r


class JiraClient:
    """Client for Jira REST API."""

    def __init__(self, email: str, api_token: str):
        self.email = email
        self.token = api_token

    def get_issue_details(self, issue_url: str) -> IssueDetails | None:
        """Fetch key and summary for the issue at ``issue_url``.

        Returns None if Jira does not answer with the issue.
        """
        r = requests.get(
            issue_url,
            auth=(self.email, self.token),
            headers={"Accept": "application/json"},
            params={"fields": "key,summary"},
            timeout=10,
        )
        if r.status_code != 200:
            logger.debug("Jira lookup for %s returned HTTP %s", issue_url, r.status_code)
            return None

        data = r.json()
        return IssueDetails(
            key=data.get("key") or "",
            summary=(data.get("fields") or {}).get("summary") or "",
        )


class TempoClient:
    """Client for Tempo REST API."""

    def __init__(self, api_token: str, base_url: str = TEMPO_BASE_URL):
        self.token = api_token
        self.base_url = base_url.rstrip("/")

    def fetch_worklogs(self, date_from: str, date_to: str) -> list[TempoWorklog]:
        """Fetch worklogs within a date range."""
        worklogs = []
        url = f"{self.base_url}/worklogs"
        params = {"from": date_from, "to": date_to, "limit": 1000}

        while url:
            r = _request(
                "Tempo",
                "GET",
                url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/json",
                },
                params=params,
                timeout=30,
            )
            data = r.json()

            worklogs.extend(TempoWorklog.from_api(item) for item in data.get("results", []))

            # Handle pagination
            url = data.get("metadata", {}).get("next")
            params = {}  # Clear params for pagination URLs

        return worklogs


class TogglClient:
    """Client for Toggl Track API v9."""

    def __init__(self, api_token: str, base_url: str = TOGGL_BASE_URL):
        self.token = api_token
        self.base_url = base_url.rstrip("/")

    @property
    def auth(self) -> tuple[str, str]:
        # Toggl takes the token as username with the literal password "api_token"
        return (self.token, "api_token")

    def fetch_time_entries(self, start_date: str, end_date: str) -> list[ExistingEntry]:
        """Fetch the current user's time entries within a date range.

        Both dates are inclusive. Toggl treats end_date as exclusive, so the
        request asks for one day more.
        """
        end_exclusive = datetime.strptime(end_date, "%Y-%m-%d") + timedelta(days=1)
        r = _request(
            "Toggl",
            "GET",
            f"{self.base_url}/me/time_entries",
            auth=self.auth,
            headers={"Content-Type": "application/json"},
            params={"start_date": start_date, "end_date": end_exclusive.strftime("%Y-%m-%d")},
            timeout=30,
        )
        return [ExistingEntry.from_api(item) for item in r.json() or []]

    def create_time_entry(self, entry: TogglTimeEntryPayload) -> dict:
        """Create a single time entry and return it as stored by Toggl."""
        r = _request(
            "Toggl",
            "POST",
            f"{self.base_url}/workspaces/{entry.workspace_id}/time_entries",
            auth=self.auth,
            headers={"Content-Type": "application/json"},
            json=entry.to_dict(),
            timeout=30,
        )
        return r.json()
