"""
Models Module

Records owned by the scheduling core:
- Doctor + WorkingCalendar (doctor.py)
- Patient (patient.py)
- Appointment + status + booking request (appointment.py)
"""

from .appointment import Appointment, AppointmentRequest, AppointmentStatus, generate_id
from .doctor import Doctor, WorkingCalendar, WorkingHours
from .patient import Patient

__all__ = [
	"Appointment",
	"AppointmentRequest",
	"AppointmentStatus",
	"Doctor",
	"Patient",
	"WorkingCalendar",
	"WorkingHours",
	"generate_id",
]
