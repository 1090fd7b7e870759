"""
Conflict Detection Service

Detects double-booking conflicts between appointments. Two appointments
conflict when they share doctor, date and time and neither is CANCELLED.
"""

from typing import Any, Dict, Iterable, Optional, Set

from ..models.appointment import Appointment


def check_conflict(
	appointments: Iterable[Appointment],
	doctor_id: str,
	date: str,
	time: str,
	exclude_appointment: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Detecta conflictos con appointments existentes.

	Args:
		appointments: appointments to scan
		doctor_id: doctor to check
		date: calendar date "YYYY-MM-DD"
		time: slot start "HH:MM"
		exclude_appointment: id to skip (the record being rescheduled)

	Returns:
		dict: {
			"has_conflict": bool,
			"conflicting_appointments": [list of appointment ids]
		}
	"""
	conflicting = [
		appt.id
		for appt in appointments
		if appt.doctor_id == doctor_id
		and appt.date == date
		and appt.time == time
		and appt.is_active
		and appt.id != exclude_appointment
	]

	return {
		"has_conflict": bool(conflicting),
		"conflicting_appointments": conflicting,
	}


def get_taken_times(
	appointments: Iterable[Appointment],
	doctor_id: str,
	date: str
) -> Set[str]:
	"""Slot times held by active appointments for a doctor on a date."""
	return {
		appt.time
		for appt in appointments
		if appt.doctor_id == doctor_id and appt.date == date and appt.is_active
	}
