"""Tests for the HTTP clients with ``requests`` patched out."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from clients import ApiError, JiraClient, TempoClient, TogglClient, _handle_api_error
from models import IssueDetails, TogglTimeEntryPayload


def make_response(status_code=200, json_data=None, reason="OK", text=""):
    r = MagicMock(spec=requests.Response)
    r.status_code = status_code
    r.ok = status_code < 400
    r.reason = reason
    r.text = text
    r.json.return_value = json_data
    return r


TEMPO_ITEM = {
    "self": "https://api.tempo.io/4/worklogs/1",
    "tempoWorklogId": 1,
    "issue": {"self": "https://acme.atlassian.net/rest/api/3/issue/456", "id": 456},
    "timeSpentSeconds": 3600,
    "billableSeconds": 0,
    "startDate": "2025-10-01",
    "startTime": "09:00:00",
    "startDateTimeUtc": "2025-10-01T07:00:00Z",
    "description": "Standup",
    "createdAt": "2025-10-01T10:00:00Z",
    "updatedAt": "2025-10-01T10:00:00Z",
    "author": {"self": "https://acme.atlassian.net/user/abc", "accountId": "abc"},
    "attributes": {"self": "https://api.tempo.io/4/worklogs/1/attributes", "values": []},
}


class TestHandleApiError:

    @pytest.mark.parametrize("status, fragment", [
        (401, "Authentication failed"),
        (403, "Access denied"),
        (429, "Too many requests"),
        (503, "Service unavailable"),
    ])
    def test_known_statuses(self, status, fragment):
        message = _handle_api_error(make_response(status), "Toggl")
        assert message.startswith("Toggl: ")
        assert fragment in message

    def test_unknown_status(self):
        assert _handle_api_error(make_response(418, reason="I'm a teapot"), "Tempo") == (
            "Tempo: HTTP 418 - I'm a teapot"
        )


class TestTempoClient:

    @patch("clients.requests.request")
    def test_fetch_worklogs_follows_pagination(self, mock_request):
        second = dict(TEMPO_ITEM, tempoWorklogId=2)
        mock_request.side_effect = [
            make_response(json_data={"results": [TEMPO_ITEM], "metadata": {"next": "https://next"}}),
            make_response(json_data={"results": [second], "metadata": {}}),
        ]

        worklogs = TempoClient("token").fetch_worklogs("2025-10-01", "2025-10-08")

        assert [wl.tempo_worklog_id for wl in worklogs] == [1, 2]
        first_call, second_call = mock_request.call_args_list
        assert first_call.args == ("GET", "https://api.tempo.io/4/worklogs")
        assert first_call.kwargs["params"] == {"from": "2025-10-01", "to": "2025-10-08", "limit": 1000}
        assert first_call.kwargs["headers"]["Authorization"] == "Bearer token"
        assert second_call.args == ("GET", "https://next")
        assert second_call.kwargs["params"] == {}

    @patch("clients.requests.request")
    def test_parses_worklog(self, mock_request):
        mock_request.return_value = make_response(json_data={"results": [TEMPO_ITEM]})

        [wl] = TempoClient("token").fetch_worklogs("2025-10-01", "2025-10-08")

        assert wl.issue.self_url == "https://acme.atlassian.net/rest/api/3/issue/456"
        assert wl.issue.key == ""
        assert wl.start_date_time_utc == "2025-10-01T07:00:00Z"
        assert wl.author.account_id == "abc"

    @patch("clients.requests.request")
    def test_http_error_raises_api_error(self, mock_request):
        mock_request.return_value = make_response(401, reason="Unauthorized")

        with pytest.raises(ApiError) as exc_info:
            TempoClient("bad").fetch_worklogs("2025-10-01", "2025-10-08")

        assert exc_info.value.status_code == 401

    @patch("clients.requests.request", side_effect=requests.exceptions.ConnectionError())
    def test_connection_error_raises_api_error(self, mock_request):
        with pytest.raises(ApiError, match="Cannot connect"):
            TempoClient("token").fetch_worklogs("2025-10-01", "2025-10-08")

    @patch("clients.requests.request", side_effect=requests.exceptions.Timeout())
    def test_timeout_raises_api_error(self, mock_request):
        with pytest.raises(ApiError, match="timed out"):
            TempoClient("token").fetch_worklogs("2025-10-01", "2025-10-08")


class TestTogglClient:

    @patch("clients.requests.request")
    def test_fetch_time_entries(self, mock_request):
        mock_request.return_value = make_response(
            json_data=[{"id": 1, "start": "2025-10-01T09:00:00+00:00", "duration": 60}]
        )

        entries = TogglClient("tok").fetch_time_entries("2025-10-01", "2025-10-08")

        assert [e.start for e in entries] == ["2025-10-01T09:00:00+00:00"]
        kwargs = mock_request.call_args.kwargs
        assert kwargs["auth"] == ("tok", "api_token")
        assert kwargs["params"] == {"start_date": "2025-10-01", "end_date": "2025-10-09"}

    @pytest.mark.parametrize("end_date, sent", [
        ("2025-10-05", "2025-10-06"),
        ("2025-12-31", "2026-01-01"),
        ("2024-02-28", "2024-02-29"),
    ])
    @patch("clients.requests.request")
    def test_end_date_is_inclusive(self, mock_request, end_date, sent):
        mock_request.return_value = make_response(json_data=[])

        TogglClient("tok").fetch_time_entries("2025-09-29", end_date)

        assert mock_request.call_args.kwargs["params"]["end_date"] == sent

    @patch("clients.requests.request")
    def test_create_time_entry_omits_unset_fields(self, mock_request):
        mock_request.return_value = make_response(json_data={"id": 99})
        payload = TogglTimeEntryPayload(
            workspace_id=42,
            billable=False,
            start="2025-10-01T09:00:00Z",
            duration=600,
            description="WEB-1: fix bug",
            created_with="tempo-to-toggl-sync",
        )

        created = TogglClient("tok").create_time_entry(payload)

        assert created == {"id": 99}
        assert mock_request.call_args.args == (
            "POST", "https://api.track.toggl.com/api/v9/workspaces/42/time_entries"
        )
        body = mock_request.call_args.kwargs["json"]
        assert body == {
            "workspace_id": 42,
            "billable": False,
            "start": "2025-10-01T09:00:00Z",
            "duration": 600,
            "description": "WEB-1: fix bug",
            "created_with": "tempo-to-toggl-sync",
        }

    @patch("clients.requests.request")
    def test_create_failure_raises(self, mock_request):
        mock_request.return_value = make_response(400, text="workspace_id mismatch")
        payload = TogglTimeEntryPayload(1, True, "2025-10-01T09:00:00Z", 1, "", "x")

        with pytest.raises(ApiError, match="workspace_id mismatch"):
            TogglClient("tok").create_time_entry(payload)


class TestJiraClient:

    @patch("clients.requests.get")
    def test_get_issue_details(self, mock_get):
        mock_get.return_value = make_response(
            json_data={"key": "WEB-1", "fields": {"summary": "Fix login"}}
        )

        details = JiraClient("me@example.com", "secret").get_issue_details("https://x/issue/1")

        assert details == IssueDetails("WEB-1", "Fix login")
        assert mock_get.call_args.args == ("https://x/issue/1",)
        assert mock_get.call_args.kwargs["auth"] == ("me@example.com", "secret")

    @patch("clients.requests.get")
    def test_missing_issue_returns_none(self, mock_get):
        mock_get.return_value = make_response(404)

        assert JiraClient("me@example.com", "secret").get_issue_details("https://x/issue/1") is None

    @patch("clients.requests.get")
    def test_null_key_and_fields_become_empty_strings(self, mock_get):
        mock_get.return_value = make_response(json_data={"key": None, "fields": None})

        details = JiraClient("me@example.com", "secret").get_issue_details("https://x/issue/1")

        assert details == IssueDetails("", "")
