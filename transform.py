"""Conversion of Tempo worklogs into Toggl time entry payloads."""

from typing import Iterable

from models import CREATED_WITH, TempoWorklog, TogglTimeEntryPayload, TransformConfig


def build_description(worklog: TempoWorklog) -> str:
    """Compose the Toggl description, prefixed with the issue key or URL."""
    description = worklog.description or ""
    issue = worklog.issue

    if issue and issue.key:
        text = f"{issue.key}: {description}"
    elif issue and issue.self_url:
        text = f"{issue.self_url} | {description}"
    else:
        text = description

    return text.strip()


def transform_worklog(worklog: TempoWorklog, config: TransformConfig) -> TogglTimeEntryPayload:
    """Transform a single Tempo worklog into a Toggl time entry payload."""
    payload = TogglTimeEntryPayload(
        workspace_id=config.workspace_id,
        billable=worklog.billable_seconds > 0,
        start=worklog.start_date_time_utc,
        duration=worklog.time_spent_seconds,
        description=build_description(worklog),
        created_with=config.created_with or CREATED_WITH,
    )

    # Optional fields are left unset (and omitted on the wire) unless configured
    if config.project_id:
        payload.project_id = config.project_id
    if config.task_id:
        payload.task_id = config.task_id
    if config.tags:
        payload.tags = list(config.tags)

    return payload


def transform_worklogs(
    worklogs: Iterable[TempoWorklog], config: TransformConfig
) -> list[TogglTimeEntryPayload]:
    return [transform_worklog(wl, config) for wl in worklogs]
