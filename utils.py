"""Configuration loading and date helpers for Tempo to Toggl sync."""

import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Mapping

from dotenv import load_dotenv

from models import CREATED_WITH, TransformConfig

ENV_FILE = ".env"

REQUIRED_VARS = ["TOGGL_TOKEN", "TEMPO_TOKEN", "TOGGL_WORKSPACE_ID"]
OPTIONAL_INT_VARS = ["TOGGL_PROJECT_ID", "TOGGL_TASK_ID"]


class ConfigError(Exception):
    """Invalid or incomplete configuration."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass(frozen=True)
class AppConfig:
    toggl_token: str
    tempo_token: str
    toggl_workspace_id: int
    toggl_project_id: int | None = None
    toggl_task_id: int | None = None
    toggl_tags: tuple[str, ...] = ()
    jira_email: str | None = None
    jira_api_token: str | None = None

    @property
    def jira_enabled(self) -> bool:
        return bool(self.jira_email and self.jira_api_token)

    def transform_config(self) -> TransformConfig:
        return TransformConfig(
            workspace_id=self.toggl_workspace_id,
            project_id=self.toggl_project_id,
            task_id=self.toggl_task_id,
            created_with=CREATED_WITH,
            tags=self.toggl_tags or None,
        )


def _is_int(value: str) -> bool:
    try:
        int(value)
    except ValueError:
        return False
    return True


def validate_config(env: Mapping[str, str]) -> list[str]:
    """Validate environment variables and return list of error messages.

    Returns:
        Empty list if valid, otherwise list of error messages.
    """
    errors = []

    for name in REQUIRED_VARS:
        if not env.get(name):
            errors.append(f"Missing required environment variable: {name}")

    for name in ["TOGGL_WORKSPACE_ID", *OPTIONAL_INT_VARS]:
        value = env.get(name)
        if value and not _is_int(value):
            errors.append(f"{name} must be an integer, got '{value}'")

    # Jira credentials only make sense as a pair
    if bool(env.get("JIRA_EMAIL")) != bool(env.get("JIRA_API_TOKEN")):
        errors.append("JIRA_EMAIL and JIRA_API_TOKEN must be set together")

    return errors


def _optional_int(value: str | None) -> int | None:
    return int(value) if value else None


def load_config(env: Mapping[str, str] | None = None) -> AppConfig:
    """Load configuration from the environment (and ``.env`` if present).

    Raises:
        ConfigError: If required variables are missing or malformed.
    """
    if env is None:
        load_dotenv(ENV_FILE)
        env = os.environ

    errors = validate_config(env)
    if errors:
        raise ConfigError(errors)

    tags = tuple(t.strip() for t in env.get("TOGGL_TAGS", "").split(",") if t.strip())

    return AppConfig(
        toggl_token=env["TOGGL_TOKEN"],
        tempo_token=env["TEMPO_TOKEN"],
        toggl_workspace_id=int(env["TOGGL_WORKSPACE_ID"]),
        toggl_project_id=_optional_int(env.get("TOGGL_PROJECT_ID")),
        toggl_task_id=_optional_int(env.get("TOGGL_TASK_ID")),
        toggl_tags=tags,
        jira_email=env.get("JIRA_EMAIL") or None,
        jira_api_token=env.get("JIRA_API_TOKEN") or None,
    )


def load_config_safe() -> AppConfig | None:
    """Load config with user-friendly error messages.

    Returns:
        Config if valid, None if errors occurred.
    """
    try:
        return load_config()
    except ConfigError as e:
        print("[!] ERROR: configuration is incomplete:")
        for err in e.errors:
            print(f"    - {err}")
        print()
        print("    Set the variables in your environment or in .env")
        print("    (see .env.example for the required names).")
        return None


def get_week_dates(week_str: str) -> tuple[str, str]:
    """Get start and end date (Mon-Sun) for a week string YYYYWW."""
    year = int(week_str[:4])
    week = int(week_str[4:])
    # ISO week: Jan 4 is always in week 1
    jan4 = datetime(year, 1, 4)
    start_of_week1 = jan4 - timedelta(days=jan4.weekday())
    week_start = start_of_week1 + timedelta(weeks=week - 1)
    week_end = week_start + timedelta(days=6)
    return week_start.strftime("%Y-%m-%d"), week_end.strftime("%Y-%m-%d")


def get_current_week() -> str:
    """Get current week as YYYYWW."""
    return datetime.now().strftime("%G%V")
