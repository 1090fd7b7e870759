"""
Scheduling Errors

Typed errors raised by the scheduling core. Callers (UI / API layers)
map each kind to user-facing copy:

- InvalidFormatError: malformed date/time input, shown verbatim
- NotFoundError: stale or deleted doctor/patient/appointment reference
- SlotConflictError: slot already held, caller refreshes availability
- InvalidTransitionError: status change rejected in strict mode
"""

from typing import Optional


class SchedulingError(Exception):
	"""Base class for all scheduling core errors."""
	pass


class InvalidFormatError(SchedulingError):
	"""Malformed clock time, date string or identifier."""
	pass


class NotFoundError(SchedulingError):
	"""Referenced record does not exist."""

	def __init__(self, entity: str, name: str, message: Optional[str] = None):
		self.entity = entity
		self.name = name
		super().__init__(message or f"{entity} '{name}' not found")


class SlotConflictError(SchedulingError):
	"""The (doctor, date, time) slot is held by a non-cancelled appointment."""

	def __init__(self, doctor_id: str, date: str, time: str, message: Optional[str] = None):
		self.doctor_id = doctor_id
		self.date = date
		self.time = time
		super().__init__(
			message or f"Slot {date} {time} for doctor '{doctor_id}' is already booked"
		)


class InvalidTransitionError(SchedulingError):
	"""Status change not allowed by the strict status machine."""
	pass
