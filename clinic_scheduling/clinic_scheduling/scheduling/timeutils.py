"""
Time Arithmetic

Pure helpers for the slot grid:
- Clock-time strings ("HH:MM") <-> minutes since midnight
- Slot sequence generation
- 12-hour display formatting
- Calendar date helpers (weekday, day offsets, "today" in a timezone)
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import List, Union

import pytz

from .errors import InvalidFormatError

logger = logging.getLogger(__name__)

DEFAULT_SLOT_INTERVAL = 30
MINUTES_PER_DAY = 24 * 60
DATE_FORMAT = "%Y-%m-%d"

_CLOCK_TIME_RE = re.compile(r"([0-9]{1,2}):([0-9]{2})")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_clock_time(value: str) -> int:
	"""
	Convert a "HH:MM" 24-hour clock time to minutes since midnight.

	Args:
		value: clock time string, no seconds, no timezone

	Returns:
		int: minutes since midnight

	Raises:
		InvalidFormatError: if the string is not two numeric components
			or hours/minutes fall outside [0, 23] / [0, 59]
	"""
	if not isinstance(value, str):
		raise InvalidFormatError(f"Invalid time {value!r}. Use HH:MM")

	# ASCII digits only
	match = _CLOCK_TIME_RE.fullmatch(value)
	if match is None:
		raise InvalidFormatError(f"Invalid time '{value}'. Use HH:MM")

	hours, minutes = int(match.group(1)), int(match.group(2))
	if not 0 <= hours <= 23 or not 0 <= minutes <= 59:
		raise InvalidFormatError(f"Time '{value}' is out of range")

	return hours * 60 + minutes


def format_clock_time(minutes: int) -> str:
	"""Format minutes since midnight as zero-padded "HH:MM"."""
	if minutes < 0 or minutes >= MINUTES_PER_DAY:
		raise InvalidFormatError(f"Minute offset {minutes} is outside a single day")
	return f"{minutes // 60:02d}:{minutes % 60:02d}"


def generate_slot_sequence(
	start_minutes: int,
	end_minutes: int,
	interval_minutes: int = DEFAULT_SLOT_INTERVAL
) -> List[int]:
	"""
	Generate slot start offsets in [start, end) stepping by interval.

	Returns an empty list when start >= end.
	"""
	if interval_minutes <= 0:
		raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")

	return list(range(start_minutes, end_minutes, interval_minutes))


def format_for_display(value: Union[int, str]) -> str:
	"""
	Convert a clock time to 12-hour display ("H:MM AM/PM").

	Accepts minutes since midnight or a "HH:MM" string.
	Hours 0 and 12 both display as 12.
	"""
	minutes = parse_clock_time(value) if isinstance(value, str) else value
	if minutes < 0 or minutes >= MINUTES_PER_DAY:
		raise InvalidFormatError(f"Minute offset {minutes} is outside a single day")

	hours, mins = divmod(minutes, 60)
	period = "PM" if hours >= 12 else "AM"
	return f"{hours % 12 or 12}:{mins:02d} {period}"


# ===== DATE HELPERS =====

def parse_date_string(value: Union[str, date]) -> date:
	"""Parse a "YYYY-MM-DD" calendar date."""
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value

	value = str(value).strip()
	if _DATE_RE.fullmatch(value) is None:
		raise InvalidFormatError(f"Invalid date '{value}'. Use YYYY-MM-DD")

	try:
		return datetime.strptime(value, DATE_FORMAT).date()
	except ValueError:
		raise InvalidFormatError(f"Invalid date '{value}'. Use YYYY-MM-DD")


def weekday_index(value: Union[str, date]) -> int:
	"""Day of week with 0=Sunday .. 6=Saturday."""
	return parse_date_string(value).isoweekday() % 7


def add_days(value: Union[str, date], days: int) -> str:
	"""Shift a calendar date by a number of days."""
	return (parse_date_string(value) + timedelta(days=days)).strftime(DATE_FORMAT)


def _get_timezone(tz_name: str):
	try:
		return pytz.timezone(tz_name)
	except pytz.UnknownTimeZoneError:
		logger.warning(f"Unknown timezone '{tz_name}', using UTC")
		return pytz.UTC


def now_datetime() -> datetime:
	"""Timezone-aware current UTC timestamp."""
	return datetime.now(pytz.UTC)


def get_today_date_string(tz_name: str = "UTC") -> str:
	"""
	Current calendar date in the given timezone.

	Args:
		tz_name: IANA timezone name (e.g. "Asia/Kolkata")

	Returns:
		str: "YYYY-MM-DD"
	"""
	tz = _get_timezone(tz_name)
	return now_datetime().astimezone(tz).strftime(DATE_FORMAT)


def format_date_display(value: Union[str, date], tz_name: str = "UTC") -> str:
	"""
	Human-readable date, e.g. "Mon, 10 Jun 2024".

	Plain dates are anchored at local midnight in tz_name so the weekday
	never shifts across a UTC boundary.
	"""
	tz = _get_timezone(tz_name)
	local = tz.localize(datetime.combine(parse_date_string(value), datetime.min.time()))
	return local.strftime("%a, %d %b %Y")
