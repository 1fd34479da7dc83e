"""
Sync Tempo worklogs to Toggl Track.

Usage:
    # Interactive - asks for the date range
    python sync_tempo_to_toggl.py

    # Explicit date range
    python sync_tempo_to_toggl.py --from 2025-10-01 --to 2025-10-08

    # A whole ISO week, without creating anything
    python sync_tempo_to_toggl.py --week 202540 --dry-run
"""

import argparse
import asyncio
import json
import logging
import sys

from clients import JiraClient, TempoClient, TogglClient
from date_input import is_valid_date, is_valid_date_range, prompt_for_date_range
from models import SyncResult
from patterns import Patterns
from sync_service import SyncService
from utils import AppConfig, get_current_week, get_week_dates, load_config_safe

STEPS = {
    "fetch_tempo": "[1]",
    "enrich": "[2]",
    "fetch_toggl": "[3]",
    "dedupe": "[4]",
    "create": "[5]",
}


def print_progress(stage: str, message: str) -> None:
    marker = STEPS.get(stage, "[*]")
    if stage == "create" and not message.startswith("Dry-run"):
        print(f"    {message}")
    else:
        print(f"{marker} {message}")


def print_summary(result: SyncResult) -> None:
    print()
    print("Sync Results:")
    print("=" * 50)
    print(f"  Tempo entries fetched:    {result.tempo_entries_fetched}")
    print(f"  Toggl entries fetched:    {result.toggl_entries_fetched}")
    print(f"  Unique entries to sync:   {result.unique_entries}")
    print(f"  Duplicates skipped:       {result.duplicates_skipped}")
    print(f"  Successfully created:     {result.successfully_created}")
    print(f"  Failed to create:         {result.failed_to_create}")
    print("=" * 50)

    if result.errors:
        print()
        print("[!] Errors encountered:")
        for error in result.errors:
            print(f"    - {error}")

    print()
    if result.successfully_created > 0:
        print(f"[*] Successfully synced {result.successfully_created} entries.")
    elif result.duplicates_skipped > 0 and result.unique_entries == 0:
        print("[*] All entries already exist in Toggl. Nothing to sync.")
    elif not result.errors and result.unique_entries == 0:
        print("[*] No entries found to sync.")


def build_service(config: AppConfig, dry_run: bool, quiet: bool) -> SyncService:
    jira = JiraClient(config.jira_email, config.jira_api_token) if config.jira_enabled else None
    return SyncService(
        tempo_client=TempoClient(config.tempo_token),
        toggl_client=TogglClient(config.toggl_token),
        transform_config=config.transform_config(),
        issue_lookup=jira.get_issue_details if jira else None,
        dry_run=dry_run,
        on_progress=None if quiet else print_progress,
    )


def resolve_date_range(args: argparse.Namespace) -> tuple[str, str] | None:
    """Date range from --week, --from/--to, or the interactive prompt."""
    if args.week is not None:
        week = args.week or get_current_week()
        if not Patterns.WEEK_FORMAT.match(week):
            print(f"Error: Invalid week format '{week}'. Expected YYYYWW (e.g., 202605)")
            return None
        return get_week_dates(week)

    if args.date_from or args.date_to:
        for value in (args.date_from, args.date_to):
            if not value or not is_valid_date(value):
                print(f"Error: Invalid date '{value}'. Expected YYYY-MM-DD for both --from and --to")
                return None
        if not is_valid_date_range(args.date_from, args.date_to):
            print("Error: --to must be after --from (Toggl returns nothing for equal dates)")
            return None
        return args.date_from, args.date_to

    return prompt_for_date_range()


def main():
    parser = argparse.ArgumentParser(
        description="Sync Tempo worklogs to Toggl Track",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python sync_tempo_to_toggl.py
    python sync_tempo_to_toggl.py --from 2025-10-01 --to 2025-10-08
    python sync_tempo_to_toggl.py --week 202540 --dry-run
    python sync_tempo_to_toggl.py --from 2025-10-01 --to 2025-10-08 --json
        """,
    )
    parser.add_argument("--from", dest="date_from", help="Start date (YYYY-MM-DD)")
    parser.add_argument("--to", dest="date_to", help="End date (YYYY-MM-DD)")
    parser.add_argument(
        "--week",
        nargs="?",
        const="",
        help="Week to sync (YYYYWW) instead of --from/--to; bare --week means the current week",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be created without creating it"
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config_safe()
    if config is None:
        return 1

    if not args.json:
        print()
        print("=" * 50)
        print("SYNC TEMPO -> TOGGL" + (" | Mode: DRY-RUN" if args.dry_run else ""))
        print("=" * 50)
        print()

    try:
        date_range = resolve_date_range(args)
    except (EOFError, KeyboardInterrupt):
        print()
        print("[!] Aborted.")
        return 1
    if date_range is None:
        return 1
    date_from, date_to = date_range

    if not args.json:
        print(f"[*] Syncing {date_from} to {date_to}")
        if not config.jira_enabled:
            print("[*] Jira credentials not set, issue keys will not be resolved")
        print()

    service = build_service(config, args.dry_run, quiet=args.json)
    result = asyncio.run(service.sync_time_entries(date_from, date_to))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_summary(result)

    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
