"""Interactive date range prompt and date validation."""

from datetime import date, datetime

from patterns import Patterns


def is_valid_date_format(value: str) -> bool:
    return bool(Patterns.DATE_FORMAT.match(value))


def is_valid_date(value: str) -> bool:
    """True if ``value`` is YYYY-MM-DD and names a real calendar day."""
    if not is_valid_date_format(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def is_date_in_future(value: str, today: date | None = None) -> bool:
    today = today or date.today()
    return datetime.strptime(value, "%Y-%m-%d").date() > today


def is_valid_date_range(start_date: str, end_date: str) -> bool:
    """True if the end date is strictly after the start date.

    Toggl returns no entries when start_date == end_date.
    """
    return start_date < end_date


def prompt_for_valid_date(message: str, allow_future: bool = False) -> str:
    """Ask until the user enters a valid date."""
    while True:
        value = input(message).strip()

        if not is_valid_date_format(value):
            print("  [!] Invalid format. Please use YYYY-MM-DD (e.g., 2025-10-20)")
            continue

        if not is_valid_date(value):
            print("  [!] Invalid date. Please enter a valid calendar date")
            continue

        if not allow_future and is_date_in_future(value):
            print("  [!] Date cannot be in the future. Please enter today or a past date")
            continue

        return value


def prompt_for_date_range() -> tuple[str, str]:
    """Ask for start and end date; the end date must come after the start date."""
    print("[*] Note: end date must be at least 1 day after start date (Toggl API limitation)")
    print()

    start_date = prompt_for_valid_date("  Enter start date (YYYY-MM-DD): ")

    while True:
        end_date = prompt_for_valid_date("  Enter end date (YYYY-MM-DD): ")

        if start_date == end_date:
            print("  [!] End date must be different from start date")
            print("      (Toggl returns no entries when both dates are equal)")
            continue

        if not is_valid_date_range(start_date, end_date):
            print("  [!] End date must be after the start date")
            continue

        print()
        return start_date, end_date
