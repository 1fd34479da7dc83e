"""Data models for Tempo to Toggl sync."""

from dataclasses import asdict, dataclass, field

CREATED_WITH = "tempo-to-toggl-sync"


@dataclass(frozen=True)
class Issue:
    """A Jira issue referenced by a worklog.

    ``self_url`` identifies the issue; ``key`` and ``summary`` stay empty
    until the issue has been resolved against Jira.
    """

    self_url: str
    id: int | None = None
    key: str = ""  # e.g. WEB-6546
    summary: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Issue":
        return cls(
            self_url=data.get("self", ""),
            id=data.get("id"),
            key=data.get("key") or "",
            summary=data.get("summary") or "",
        )


@dataclass(frozen=True)
class IssueDetails:
    """Key and summary resolved for an issue URL; empty strings if unresolved."""

    key: str = ""
    summary: str = ""


@dataclass(frozen=True)
class Author:
    self_url: str
    account_id: str


@dataclass(frozen=True)
class TempoWorklog:
    """A worklog entry from Tempo."""

    tempo_worklog_id: int
    issue: Issue | None
    time_spent_seconds: int
    billable_seconds: int
    start_date: str  # YYYY-MM-DD
    start_time: str  # HH:mm:ss
    start_date_time_utc: str  # ISO timestamp
    description: str = ""
    created_at: str = ""
    updated_at: str = ""
    author: Author | None = None
    self_url: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "TempoWorklog":
        """Build a worklog from a Tempo API v4 result item."""
        issue = data.get("issue")
        author = data.get("author")
        return cls(
            tempo_worklog_id=data["tempoWorklogId"],
            issue=Issue.from_api(issue) if issue else None,
            time_spent_seconds=data.get("timeSpentSeconds", 0),
            billable_seconds=data.get("billableSeconds", 0),
            start_date=data.get("startDate", ""),
            start_time=data.get("startTime", ""),
            start_date_time_utc=data.get("startDateTimeUtc", ""),
            description=data.get("description") or "",
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
            author=Author(author.get("self", ""), author.get("accountId", "")) if author else None,
            self_url=data.get("self", ""),
        )


@dataclass
class TogglTimeEntryPayload:
    """Body of a Toggl ``POST /workspaces/{id}/time_entries`` request."""

    workspace_id: int
    billable: bool
    start: str  # ISO 8601
    duration: int  # seconds
    description: str
    created_with: str
    project_id: int | None = None
    task_id: int | None = None
    tags: list[str] | None = None

    def to_dict(self) -> dict:
        """Serialize for the Toggl API, leaving out optional fields that are unset."""
        data = asdict(self)
        for key in ("project_id", "task_id", "tags"):
            if data[key] is None:
                del data[key]
        return data


@dataclass(frozen=True)
class ExistingEntry:
    """The only part of a Toggl time entry needed to detect duplicates."""

    start: str

    @classmethod
    def from_api(cls, data: dict) -> "ExistingEntry":
        return cls(start=data["start"])


@dataclass(frozen=True)
class TransformConfig:
    """Settings applied to every Toggl entry created by one sync run."""

    workspace_id: int
    project_id: int | None = None
    task_id: int | None = None
    created_with: str = CREATED_WITH
    tags: tuple[str, ...] | None = None


@dataclass
class SyncResult:
    """Statistics for a single sync run."""

    tempo_entries_fetched: int = 0
    toggl_entries_fetched: int = 0
    unique_entries: int = 0
    duplicates_skipped: int = 0
    successfully_created: int = 0
    failed_to_create: int = 0
    errors: list[str] = field(default_factory=list)

    @classmethod
    def failed(cls, message: str) -> "SyncResult":
        """A zero-valued result carrying the error that aborted the run."""
        return cls(errors=[message])

    def to_dict(self) -> dict:
        return asdict(self)
