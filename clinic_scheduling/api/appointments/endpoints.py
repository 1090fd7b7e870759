"""
Scheduling Facade

Operations exposed to UI/API collaborators. The facade composes the
availability resolver and the booking ledger; it holds no booking state
of its own.

Errors (InvalidFormatError, NotFoundError, SlotConflictError) propagate
unchanged. On SlotConflictError the caller should re-fetch
list_available_slots and let the user pick again.
"""

from typing import Any, Dict, List, Optional

from clinic_scheduling.api.shared import (
	validate_clock_time,
	validate_date_string,
	validate_docname,
)
from clinic_scheduling.config import SchedulingSettings, load_settings
from clinic_scheduling.clinic_scheduling.models import (
	Appointment,
	AppointmentRequest,
	AppointmentStatus,
	Doctor,
	Patient,
	WorkingCalendar,
)
from clinic_scheduling.clinic_scheduling.scheduling.availability import (
	Slot,
	resolve_availability,
	resolve_availability_range,
)
from clinic_scheduling.clinic_scheduling.scheduling.directory import ClinicDirectory
from clinic_scheduling.clinic_scheduling.scheduling.ledger import BookingLedger
from clinic_scheduling.clinic_scheduling.scheduling.store import get_store
from clinic_scheduling.clinic_scheduling.scheduling.timeutils import (
	add_days,
	format_date_display,
	get_today_date_string,
)

UPCOMING_WINDOW_DAYS = 7


class SchedulingFacade:
	"""
	Entry point for listing slots and booking appointments.

	Args:
		directory: doctor/patient rosters (new empty directory by default)
		ledger: booking ledger (built from settings by default)
		settings: SchedulingSettings (loaded from environment by default)
	"""

	def __init__(
		self,
		directory: Optional[ClinicDirectory] = None,
		ledger: Optional[BookingLedger] = None,
		settings: Optional[SchedulingSettings] = None
	):
		self.settings = settings or load_settings()
		if ledger is not None:
			self.directory = ledger.directory
		else:
			self.directory = directory or ClinicDirectory()
		self.ledger = ledger or BookingLedger(
			self.directory,
			store=get_store(self.settings.store_backend),
			strict_transitions=self.settings.strict_status_transitions,
		)

	# ===== SLOTS =====

	def list_available_slots(self, doctor_id: str, date: str) -> List[Slot]:
		"""
		Slot grid for a doctor on a date, taken slots flagged unavailable.

		Returns:
			list[Slot]: empty when the doctor does not work that weekday

		Example:
			>>> facade.list_available_slots("doc-1", "2024-06-10")
			[Slot(time='09:00', is_available=True), ...]
		"""
		doctor_id = validate_docname(doctor_id, "doctor_id")
		date = validate_date_string(date, "date")

		doctor = self.directory.get_doctor(doctor_id)
		bookings = self.ledger.list_appointments(doctor_id=doctor_id, date=date)

		return resolve_availability(
			doctor.calendar,
			date,
			bookings,
			doctor_id,
			interval_minutes=self.settings.slot_interval_minutes,
		)

	def list_available_slots_range(self, doctor_id: str, from_date: str, to_date: str) -> Dict[str, List[Slot]]:
		"""Slot grids for every working day in [from_date, to_date]."""
		doctor_id = validate_docname(doctor_id, "doctor_id")
		from_date = validate_date_string(from_date, "from_date")
		to_date = validate_date_string(to_date, "to_date")

		doctor = self.directory.get_doctor(doctor_id)
		bookings = self.ledger.list_appointments(doctor_id=doctor_id)

		return resolve_availability_range(
			doctor.calendar,
			from_date,
			to_date,
			bookings,
			doctor_id,
			interval_minutes=self.settings.slot_interval_minutes,
		)

	# ===== BOOKINGS =====

	def book_slot(self, request: AppointmentRequest) -> Appointment:
		"""
		Book a slot for a patient.

		Raises:
			InvalidFormatError: malformed date or time
			NotFoundError: unknown doctor or patient
			SlotConflictError: slot already taken
		"""
		request = request.model_copy(update={
			"doctor_id": validate_docname(request.doctor_id, "doctor_id"),
			"patient_id": validate_docname(request.patient_id, "patient_id"),
			"date": validate_date_string(request.date, "date"),
			"time": validate_clock_time(request.time, "time"),
		})
		return self.ledger.create_appointment(request)

	def reschedule_appointment(self, appointment_id: str, new_date: str, new_time: str) -> Appointment:
		appointment_id = validate_docname(appointment_id, "appointment_id")
		new_date = validate_date_string(new_date, "date")
		new_time = validate_clock_time(new_time, "time")
		return self.ledger.reschedule(appointment_id, new_date, new_time)

	def update_appointment_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment:
		appointment_id = validate_docname(appointment_id, "appointment_id")
		return self.ledger.update_status(appointment_id, status)

	def cancel_appointment(self, appointment_id: str) -> Appointment:
		return self.update_appointment_status(appointment_id, AppointmentStatus.CANCELLED)

	def get_appointment(self, appointment_id: str) -> Appointment:
		return self.ledger.get_appointment(validate_docname(appointment_id, "appointment_id"))

	def list_appointments(self, **filters: Any) -> List[Appointment]:
		return self.ledger.list_appointments(**filters)

	# ===== ROSTERS =====

	def register_doctor(self, doctor: Doctor) -> Doctor:
		"""Add a doctor after checking the working window parses."""
		self._validate_calendar(doctor.calendar)
		return self.directory.add_doctor(doctor)

	def register_patient(self, patient: Patient) -> Patient:
		return self.directory.add_patient(patient)

	def update_working_calendar(self, doctor_id: str, calendar: WorkingCalendar) -> Doctor:
		self._validate_calendar(calendar)
		return self.directory.update_working_calendar(validate_docname(doctor_id, "doctor_id"), calendar)

	def remove_doctor(self, doctor_id: str) -> int:
		"""
		Delete a doctor and cascade to their appointments.

		Returns:
			int: number of appointments removed
		"""
		doctor = self.directory.remove_doctor(validate_docname(doctor_id, "doctor_id"))
		return self.ledger.delete_by_doctor(doctor.id)

	def remove_patient(self, patient_id: str) -> int:
		"""Delete a patient and cascade to their appointments."""
		patient = self.directory.remove_patient(validate_docname(patient_id, "patient_id"))
		return self.ledger.delete_by_patient(patient.id)

	# ===== DASHBOARD QUERIES =====

	def get_doctor_agenda(self, doctor_id: str, today: Optional[str] = None) -> Dict[str, Any]:
		"""
		Scheduled appointments for a doctor.

		Returns:
			dict: {
				"date": today "YYYY-MM-DD",
				"display_date": today as "Mon, 10 Jun 2024",
				"today": appointments on today, by time,
				"upcoming": appointments in (today, today + 7 days], by date and time
			}
		"""
		doctor = self.directory.get_doctor(validate_docname(doctor_id, "doctor_id"))
		today = self._resolve_today(today)
		window_end = add_days(today, UPCOMING_WINDOW_DAYS)

		scheduled = self.ledger.list_appointments(doctor_id=doctor.id, status=AppointmentStatus.SCHEDULED)

		todays = sorted(
			(appt for appt in scheduled if appt.date == today),
			key=lambda appt: appt.time
		)
		upcoming = sorted(
			(appt for appt in scheduled if today < appt.date <= window_end),
			key=lambda appt: (appt.date, appt.time)
		)

		return {
			"date": today,
			"display_date": format_date_display(today, self.settings.timezone),
			"today": todays,
			"upcoming": upcoming,
		}

	def get_patient_history(self, patient_id: str) -> List[Appointment]:
		"""All appointments of a patient, most recent slot first."""
		patient = self.directory.get_patient(validate_docname(patient_id, "patient_id"))
		appointments = self.ledger.list_appointments(patient_id=patient.id)
		return sorted(appointments, key=lambda appt: (appt.date, appt.time), reverse=True)

	def get_patient_appointments(self, patient_id: str, today: Optional[str] = None) -> Dict[str, List[Appointment]]:
		"""
		A patient's appointments split for their overview.

		Returns:
			dict: {
				"upcoming": SCHEDULED appointments on or after today,
				"past": everything else
			}
			Both lists keep history order (most recent slot first).
		"""
		today = self._resolve_today(today)
		history = self.get_patient_history(patient_id)

		upcoming = [
			appt for appt in history
			if appt.date >= today and appt.status == AppointmentStatus.SCHEDULED
		]
		upcoming_ids = {appt.id for appt in upcoming}
		past = [appt for appt in history if appt.id not in upcoming_ids]

		return {"upcoming": upcoming, "past": past}

	def get_clinic_summary(self, today: Optional[str] = None) -> Dict[str, Any]:
		"""
		Headline counts for the admin overview.

		Returns:
			dict: {
				"doctors": int,
				"patients": int,
				"appointments_this_week": int (today .. today + 7, any status),
				"scheduled_today": int,
				"status_counts": {"SCHEDULED": int, "COMPLETED": int, "CANCELLED": int, "NOSHOW": int},
				"appointments_per_doctor": {doctor_id: int} (every registered doctor, any status)
			}
		"""
		today = self._resolve_today(today)
		window_end = add_days(today, UPCOMING_WINDOW_DAYS)
		doctors = self.directory.list_doctors()
		appointments = self.ledger.list_appointments()

		status_counts = {status.value: 0 for status in AppointmentStatus}
		per_doctor = {doctor.id: 0 for doctor in doctors}
		for appt in appointments:
			status_counts[appt.status.value] += 1
			if appt.doctor_id in per_doctor:
				per_doctor[appt.doctor_id] += 1

		return {
			"doctors": len(doctors),
			"patients": len(self.directory.list_patients()),
			"appointments_this_week": sum(1 for appt in appointments if today <= appt.date <= window_end),
			"scheduled_today": sum(
				1 for appt in appointments
				if appt.date == today and appt.status == AppointmentStatus.SCHEDULED
			),
			"status_counts": status_counts,
			"appointments_per_doctor": per_doctor,
		}

	# ===== HELPERS =====

	def _resolve_today(self, today: Optional[str]) -> str:
		if today:
			return validate_date_string(today, "today")
		return get_today_date_string(self.settings.timezone)

	@staticmethod
	def _validate_calendar(calendar: WorkingCalendar) -> None:
		validate_clock_time(calendar.working_hours.start, "working_hours.start")
		validate_clock_time(calendar.working_hours.end, "working_hours.end")
