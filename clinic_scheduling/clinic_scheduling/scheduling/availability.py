"""
Availability Service

Resolves the bookable slot grid for a doctor on a date:
- Working calendar (weekday gate + working window)
- Fixed slot interval
- Existing bookings (taken slots are flagged, never dropped)
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Union

from pydantic import BaseModel

from ..models.appointment import Appointment
from ..models.doctor import WorkingCalendar
from .errors import InvalidFormatError
from .overlap import get_taken_times
from .timeutils import (
	DATE_FORMAT,
	DEFAULT_SLOT_INTERVAL,
	format_clock_time,
	format_for_display,
	generate_slot_sequence,
	parse_date_string,
	weekday_index,
)


class Slot(BaseModel):
	"""A slot start time and whether it can still be booked."""

	time: str
	is_available: bool = True

	@property
	def display_time(self) -> str:
		return format_for_display(self.time)


def get_slot_times(
	calendar: WorkingCalendar,
	interval_minutes: int = DEFAULT_SLOT_INTERVAL
) -> List[str]:
	"""All slot labels inside the working window, ascending."""
	hours = calendar.working_hours
	offsets = generate_slot_sequence(hours.start_minutes, hours.end_minutes, interval_minutes)
	return [format_clock_time(offset) for offset in offsets]


def resolve_availability(
	calendar: WorkingCalendar,
	target_date: Union[date, str],
	existing_bookings: Iterable[Appointment],
	doctor_id: str,
	interval_minutes: int = DEFAULT_SLOT_INTERVAL
) -> List[Slot]:
	"""
	Obtiene los slots de un día con su disponibilidad.

	Args:
		calendar: doctor's working calendar
		target_date: date object or "YYYY-MM-DD"
		existing_bookings: appointments to reconcile against
		doctor_id: doctor whose bookings count
		interval_minutes: slot width

	Returns:
		list[Slot]: ascending by time, taken slots flagged is_available=False

	Algoritmo:
		1. Weekday of date (0=Sunday)
		2. Not a working day -> []
		3. Generate slot grid from working hours
		4. Mark slots held by active bookings as unavailable
	"""
	date_str = parse_date_string(target_date).strftime(DATE_FORMAT)

	if not calendar.works_on(weekday_index(date_str)):
		return []

	slot_times = get_slot_times(calendar, interval_minutes)
	if not slot_times:
		return []

	taken = get_taken_times(existing_bookings, doctor_id, date_str)

	return [Slot(time=slot_time, is_available=slot_time not in taken) for slot_time in slot_times]


def resolve_availability_range(
	calendar: WorkingCalendar,
	start_date: Union[date, str],
	end_date: Union[date, str],
	existing_bookings: Iterable[Appointment],
	doctor_id: str,
	interval_minutes: int = DEFAULT_SLOT_INTERVAL
) -> Dict[str, List[Slot]]:
	"""
	Obtiene disponibilidad para un rango de fechas (inclusive).

	Returns:
		dict: {
			"2024-06-10": [Slot, ...],
			...
		}
		Dates without slots are omitted.
	"""
	start_date = parse_date_string(start_date)
	end_date = parse_date_string(end_date)

	if start_date > end_date:
		raise InvalidFormatError("start_date must be on or before end_date")

	# Materialize once; the range loop scans it per day
	bookings = list(existing_bookings)

	result = {}
	current_date = start_date

	while current_date <= end_date:
		slots = resolve_availability(calendar, current_date, bookings, doctor_id, interval_minutes)
		if slots:
			result[current_date.strftime(DATE_FORMAT)] = slots
		current_date += timedelta(days=1)

	return result
