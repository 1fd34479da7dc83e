"""Orchestrates synchronization of Tempo worklogs into Toggl."""

import asyncio
import logging
from typing import Callable, Protocol

from deduplication import filter_duplicate_entries
from enrichment import DEFAULT_MAX_CONCURRENCY, IssueLookup, enrich_worklogs
from models import ExistingEntry, SyncResult, TempoWorklog, TogglTimeEntryPayload, TransformConfig
from transform import transform_worklogs

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]


class WorklogSource(Protocol):
    def fetch_worklogs(self, date_from: str, date_to: str) -> list[TempoWorklog]: ...


class TimeEntrySink(Protocol):
    def fetch_time_entries(self, start_date: str, end_date: str) -> list[ExistingEntry]: ...

    def create_time_entry(self, entry: TogglTimeEntryPayload) -> dict: ...


def _error_message(error: Exception) -> str:
    return str(error) or "Unknown error occurred"


class SyncService:
    """Synchronizes time entries from Tempo to Toggl for a date range.

    Stages run in a fixed order: fetch Tempo worklogs, enrich them with Jira
    issue keys, fetch existing Toggl entries, transform, drop duplicates and
    create what is left. A failure in any stage before creation aborts the
    run; individual creation failures are only collected.
    """

    def __init__(
        self,
        tempo_client: WorklogSource,
        toggl_client: TimeEntrySink,
        transform_config: TransformConfig,
        issue_lookup: IssueLookup | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
    ):
        self.tempo_client = tempo_client
        self.toggl_client = toggl_client
        self.transform_config = transform_config
        self.issue_lookup = issue_lookup
        self.max_concurrency = max_concurrency
        self.dry_run = dry_run
        self.on_progress = on_progress

    def _progress(self, stage: str, message: str) -> None:
        logger.debug("[%s] %s", stage, message)
        if not self.on_progress:
            return
        # Reporting must not change the outcome of the run
        try:
            self.on_progress(stage, message)
        except Exception as e:
            logger.warning("Progress callback failed: %s", e)

    async def sync_time_entries(self, from_date: str, to_date: str) -> SyncResult:
        """Run one sync for ``from_date``..``to_date`` (YYYY-MM-DD).

        Never raises; every failure ends up in the returned result.
        """
        try:
            return await self._sync(from_date, to_date)
        except Exception as e:
            logger.error("Sync failed: %s", e)
            return SyncResult.failed(_error_message(e))

    async def _sync(self, from_date: str, to_date: str) -> SyncResult:
        result = SyncResult()

        self._progress("fetch_tempo", f"Fetching Tempo worklogs ({from_date} to {to_date})")
        worklogs = await asyncio.to_thread(self.tempo_client.fetch_worklogs, from_date, to_date)
        result.tempo_entries_fetched = len(worklogs)
        self._progress("fetch_tempo", f"Found {len(worklogs)} Tempo worklogs")

        if self.issue_lookup and worklogs:
            self._progress("enrich", "Looking up Jira issues")
            worklogs = await enrich_worklogs(worklogs, self.issue_lookup, self.max_concurrency)

        self._progress("fetch_toggl", "Fetching existing Toggl entries")
        existing = await asyncio.to_thread(self.toggl_client.fetch_time_entries, from_date, to_date)
        result.toggl_entries_fetched = len(existing)
        self._progress("fetch_toggl", f"Found {len(existing)} existing Toggl entries")

        payloads = transform_worklogs(worklogs, self.transform_config)

        dedup = filter_duplicate_entries(payloads, existing)
        result.unique_entries = len(dedup.unique_entries)
        result.duplicates_skipped = dedup.skipped_count
        self._progress(
            "dedupe",
            f"{len(dedup.unique_entries)} unique, {dedup.skipped_count} duplicate(s) skipped",
        )

        if self.dry_run:
            self._progress("create", f"Dry-run: would create {len(dedup.unique_entries)} entries")
            return result

        await self._create_entries(dedup.unique_entries, result)
        return result

    async def _create_entries(self, entries: list[TogglTimeEntryPayload], result: SyncResult) -> None:
        # One request at a time to stay within Toggl's rate limit
        for entry in entries:
            try:
                await asyncio.to_thread(self.toggl_client.create_time_entry, entry)
            except Exception as e:
                logger.warning("Failed to create entry starting %s: %s", entry.start, e)
                result.failed_to_create += 1
                result.errors.append(f"Failed to create entry: {_error_message(e)}")
                self._progress("create", f"FAILED {entry.start} {entry.description}")
            else:
                result.successfully_created += 1
                self._progress("create", f"Created {entry.start} {entry.description}")
