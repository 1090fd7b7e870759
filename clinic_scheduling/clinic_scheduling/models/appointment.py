# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Appointment

Booking record for one (doctor, date, time) slot.

Invariant: for a fixed (doctor_id, date, time) at most one appointment
that is not CANCELLED exists. BookingLedger is the only writer.
"""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from ..scheduling.timeutils import now_datetime


def generate_id(prefix: str) -> str:
	"""Generate a prefixed short id, e.g. "apt-3f9a1c2b0"."""
	return f"{prefix}-{uuid.uuid4().hex[:9]}"


class AppointmentStatus(str, Enum):
	SCHEDULED = "SCHEDULED"
	COMPLETED = "COMPLETED"
	CANCELLED = "CANCELLED"
	NOSHOW = "NOSHOW"


class Appointment(BaseModel):
	"""
	Booked appointment.

	doctor_name / patient_name are copied at creation time and are not
	refreshed if the source record is renamed.
	"""

	id: str
	patient_id: str
	doctor_id: str
	doctor_name: str = ""
	patient_name: str = ""
	date: str
	time: str
	reason: str = ""
	status: AppointmentStatus = AppointmentStatus.SCHEDULED
	created_at: datetime = Field(default_factory=now_datetime)

	@property
	def is_active(self) -> bool:
		"""True when the appointment holds its slot."""
		return self.status != AppointmentStatus.CANCELLED


class AppointmentRequest(BaseModel):
	"""Request to book a slot."""

	patient_id: str
	doctor_id: str
	date: str
	time: str
	reason: str = ""
	status: AppointmentStatus = AppointmentStatus.SCHEDULED
