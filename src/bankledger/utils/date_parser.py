"""Date parsing utilities for statement text."""

from datetime import date, datetime
import re
from typing import Optional

from dateutil import parser as date_parser

# Leap year so that "29 Feb" survives month/day extraction.
_LEAP_DEFAULT = datetime(2000, 1, 1)

STATEMENT_PERIOD_PATTERN = re.compile(
    r"Statement\s+from\s+(\d{1,2}\s+\w+\s+\d{4})\s+to\s+(\d{1,2}\s+\w+\s+\d{4})",
    re.IGNORECASE,
)


def parse_full_date(date_str: str) -> date:
    """Parse a day-first full date such as "23/02/2023".

    Raises:
        ValueError: If date string cannot be parsed
    """
    try:
        return date_parser.parse(date_str.strip(), dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_day_month(date_str: str) -> tuple[int, int]:
    """Parse a year-less date such as "02 Apr" into (month, day).

    Raises:
        ValueError: If date string cannot be parsed
    """
    try:
        dt = date_parser.parse(date_str.strip(), default=_LEAP_DEFAULT)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
    return dt.month, dt.day


def resolve_year(
    month: int,
    day: int,
    window_start: Optional[date] = None,
    window_end: Optional[date] = None,
) -> date:
    """Place a month/day pair inside a statement window.

    The year of the window start is tried first, then the year of the window
    end. If neither candidate falls inside the window, the candidate closest
    to the window start wins. Without a window the current year is used.

    Raises:
        ValueError: If the month/day pair is not a valid date in any candidate year
    """
    if window_start is None:
        window_start = window_end or date.today()
    if window_end is None:
        window_end = window_start

    candidates = []
    for year in sorted({window_start.year, window_end.year}):
        try:
            candidates.append(date(year, month, day))
        except ValueError:
            continue
    if not candidates:
        raise ValueError(f"Invalid statement date: month {month}, day {day}")

    for candidate in candidates:
        if window_start <= candidate <= window_end:
            return candidate
    return min(candidates, key=lambda c: abs((c - window_start).days))


def parse_statement_period(line: str) -> Optional[tuple[date, date]]:
    """Extract the statement window from a header line, if present.

    Example: "Statement from 16 February 2024 to 15 March 2024"
    """
    match = STATEMENT_PERIOD_PATTERN.search(line)
    if match is None:
        return None
    try:
        start = date_parser.parse(match.group(1)).date()
        end = date_parser.parse(match.group(2)).date()
    except (ValueError, OverflowError):
        return None
    return start, end


def parse_date(date_str: str) -> date:
    """Parse an ISO or free-form date given on the command line.

    Raises:
        ValueError: If date string cannot be parsed
    """
    try:
        return date_parser.parse(date_str.strip()).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
