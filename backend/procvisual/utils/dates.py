"""Calendar date utilities."""
import calendar
from datetime import date, datetime
from typing import Union

from dateutil import parser
from dateutil.relativedelta import relativedelta


def parse_date(value: Union[str, date, datetime]) -> date:
    """
    Parse a transaction date into a calendar date.

    Supports:
    - date / datetime objects (time of day is dropped)
    - ISO dates: "2024-03-01"
    - ISO timestamps, with or without "Z": "2024-03-01T10:00:00Z"
    - Other formats understood by dateutil: "01 Mar 2024"

    Args:
        value: Raw date value

    Returns:
        date object

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if not value or not str(value).strip():
        raise ValueError("Empty date string")

    s = str(value).strip()

    try:
        return date.fromisoformat(s)
    except ValueError:
        pass

    try:
        return parser.isoparse(s).date()
    except ValueError:
        pass

    try:
        return parser.parse(s).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Unable to parse date: {s}. Expected ISO format (e.g., '2024-03-01')") from e


def add_months(d: date, months: int) -> date:
    """
    Advance a date by whole months keeping the day of month.

    Days that do not exist in the target month are clamped to its last day,
    so 2024-01-31 + 1 month is 2024-02-29.
    """
    return d + relativedelta(months=months)


def days_in_month(year: int, month_index: int) -> int:
    """Number of days in a month; ``month_index`` is 0-based (0 = January)."""
    return calendar.monthrange(year, month_index + 1)[1]


def previous_month(month_index: int, year: int) -> tuple:
    """Return (month_index, year) of the month before; January wraps to December."""
    if month_index == 0:
        return 11, year - 1
    return month_index - 1, year
