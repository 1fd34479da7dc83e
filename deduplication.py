"""Duplicate detection between Tempo-derived payloads and existing Toggl entries."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from models import ExistingEntry, TogglTimeEntryPayload


class MalformedTimestamp(ValueError):
    """Raised when a timestamp cannot be parsed as ISO 8601."""


@dataclass
class DeduplicationResult:
    unique_entries: list[TogglTimeEntryPayload] = field(default_factory=list)
    duplicates: list[TogglTimeEntryPayload] = field(default_factory=list)
    skipped_count: int = 0


def normalize_timestamp(timestamp: str) -> str:
    """Normalize an ISO 8601 timestamp to a UTC instant.

    ``2025-10-01T09:00:00Z``, ``2025-10-01T09:00:00+00:00`` and
    ``2025-10-01T11:00:00+02:00`` all normalize to ``2025-10-01T09:00:00Z``.
    Timestamps without an offset are read as UTC.

    Raises:
        MalformedTimestamp: If the value is not a parsable timestamp.
    """
    if not isinstance(timestamp, str):
        raise MalformedTimestamp(f"Invalid timestamp: {timestamp!r}")
    try:
        parsed = datetime.fromisoformat(timestamp.strip())
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        instant = parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # OverflowError: shifting to UTC leaves the supported date range
        raise MalformedTimestamp(f"Invalid timestamp: {timestamp!r}") from None

    return instant.isoformat().replace("+00:00", "Z")


def _start_of(entry: ExistingEntry | dict) -> str:
    if isinstance(entry, dict):
        return entry.get("start")
    return entry.start


def filter_duplicate_entries(
    new_entries: Iterable[TogglTimeEntryPayload],
    existing_entries: Iterable[ExistingEntry | dict],
) -> DeduplicationResult:
    """Split new entries into unique ones and ones already present in Toggl.

    An entry is a duplicate when its start instant equals the start of an
    existing entry. Both output lists keep the order of ``new_entries``.
    """
    existing_starts = {normalize_timestamp(_start_of(e)) for e in existing_entries}

    result = DeduplicationResult()
    for entry in new_entries:
        if normalize_timestamp(entry.start) in existing_starts:
            result.duplicates.append(entry)
        else:
            result.unique_entries.append(entry)

    result.skipped_count = len(result.duplicates)
    return result
