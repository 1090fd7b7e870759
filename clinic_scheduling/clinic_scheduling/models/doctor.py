# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Doctor

A bookable provider and its recurring weekly availability.
The calendar is frozen: changes go through ClinicDirectory.update_working_calendar,
never in-place mutation while slots are being computed.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..scheduling.timeutils import parse_clock_time


class WorkingHours(BaseModel):
	"""Daily working window, "HH:MM" 24-hour."""

	model_config = ConfigDict(frozen=True)

	start: str = "09:00"
	end: str = "17:00"

	@property
	def start_minutes(self) -> int:
		return parse_clock_time(self.start)

	@property
	def end_minutes(self) -> int:
		return parse_clock_time(self.end)


class WorkingCalendar(BaseModel):
	"""
	Weekly availability pattern.

	working_days uses 0=Sunday .. 6=Saturday.
	"""

	model_config = ConfigDict(frozen=True)

	working_days: Tuple[int, ...] = (1, 2, 3, 4, 5)
	working_hours: WorkingHours = Field(default_factory=WorkingHours)

	@field_validator("working_days", mode="before")
	@classmethod
	def _normalize_days(cls, value):
		days = sorted(set(value))
		for day in days:
			if not isinstance(day, int) or not 0 <= day <= 6:
				raise ValueError(f"working day {day!r} must be an integer in 0..6")
		return tuple(days)

	def works_on(self, weekday: int) -> bool:
		return weekday in self.working_days


class Doctor(BaseModel):
	"""A provider with a working calendar."""

	id: str = ""
	name: str
	calendar: WorkingCalendar = Field(default_factory=WorkingCalendar)
	specialization: str = ""
	consultation_room: str = ""
	email: Optional[str] = None
	phone: Optional[str] = None
