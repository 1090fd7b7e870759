"""
Scheduling Validators

Input validation for facade arguments. All failures raise InvalidFormatError
with a message safe to show to the end user.
"""

import re

from clinic_scheduling.clinic_scheduling.scheduling.errors import InvalidFormatError
from clinic_scheduling.clinic_scheduling.scheduling.timeutils import (
    DATE_FORMAT,
    format_clock_time,
    parse_clock_time,
    parse_date_string,
)


def validate_date_string(date_str: str, field_name: str = "date") -> str:
    """
    Validate date string format (YYYY-MM-DD).

    Args:
        date_str: Date string to validate
        field_name: Name of field for error messages

    Returns:
        str: Normalized "YYYY-MM-DD" date string

    Raises:
        InvalidFormatError: If date format is invalid
    """
    if not date_str:
        raise InvalidFormatError(f"{field_name} is required")

    date_str = str(date_str).strip()

    # Basic format check
    if not re.fullmatch(r"[0-9]{4}-[0-9]{2}-[0-9]{2}", date_str):
        raise InvalidFormatError(f"Invalid {field_name} format. Use YYYY-MM-DD")

    # Calendar check (rejects 2024-02-30)
    try:
        parsed = parse_date_string(date_str)
    except InvalidFormatError:
        raise InvalidFormatError(f"Invalid {field_name}: {date_str} is not a calendar date")

    return parsed.strftime(DATE_FORMAT)


def validate_clock_time(time_str: str, field_name: str = "time") -> str:
    """
    Validate a clock time (HH:MM, 24-hour).

    Returns:
        str: zero-padded "HH:MM"

    Raises:
        InvalidFormatError: If time format is invalid
    """
    if not time_str:
        raise InvalidFormatError(f"{field_name} is required")

    try:
        return format_clock_time(parse_clock_time(str(time_str).strip()))
    except InvalidFormatError:
        raise InvalidFormatError(f"Invalid {field_name} format. Use HH:MM")


def validate_docname(name: str, field_name: str = "name") -> str:
    """
    Validate a record id.

    Ensures the id is not empty, not too long and has no control characters.

    Raises:
        InvalidFormatError: If id is invalid
    """
    if not name:
        raise InvalidFormatError(f"{field_name} is required")

    name = str(name).strip()
    if not name:
        raise InvalidFormatError(f"{field_name} is required")

    # Length check
    if len(name) > 140:
        raise InvalidFormatError(f"{field_name} is too long")

    if re.search(r"[\x00-\x1f\x7f]", name):
        raise InvalidFormatError(f"Invalid {field_name}")

    return name
