"""Centralized regex patterns for worklog sync."""

import re


class Patterns:
    """Regex patterns used throughout the sync process."""

    # Week format: YYYYWW (e.g., 202605)
    WEEK_FORMAT = re.compile(r"^\d{6}$")

    # Date format: YYYY-MM-DD
    DATE_FORMAT = re.compile(r"^\d{4}-\d{2}-\d{2}$")
