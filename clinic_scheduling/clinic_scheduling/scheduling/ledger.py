"""
Booking Ledger

Authoritative appointment set. Every mutation runs its validation and its
write inside one critical section, so two concurrent callers can never both
see a slot as free and both commit it.

Failure paths raise before anything is written; records are replaced with
validated copies, never edited in place.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Dict, FrozenSet, List, Optional

from ..models.appointment import Appointment, AppointmentRequest, AppointmentStatus, generate_id
from .directory import ClinicDirectory
from .errors import InvalidFormatError, InvalidTransitionError, NotFoundError, SlotConflictError
from .overlap import check_conflict
from .store import AppointmentStore, InMemoryAppointmentStore
from .timeutils import DATE_FORMAT, format_clock_time, now_datetime, parse_clock_time, parse_date_string

logger = logging.getLogger(__name__)

# Strict mode: SCHEDULED may move to any terminal state, terminal states are final
STRICT_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
	AppointmentStatus.SCHEDULED: frozenset({
		AppointmentStatus.COMPLETED,
		AppointmentStatus.CANCELLED,
		AppointmentStatus.NOSHOW,
	}),
	AppointmentStatus.COMPLETED: frozenset(),
	AppointmentStatus.CANCELLED: frozenset(),
	AppointmentStatus.NOSHOW: frozenset(),
}


def _normalize_date(value: str) -> str:
	return parse_date_string(value).strftime(DATE_FORMAT)


def _normalize_time(value: str) -> str:
	return format_clock_time(parse_clock_time(value))


class BookingLedger:
	"""
	Owns the canonical appointment set.

	Args:
		directory: doctor/patient rosters used to resolve references
		store: storage backend (in-memory by default)
		strict_transitions: enforce STRICT_TRANSITIONS on status updates
		clock: callable returning the creation timestamp
	"""

	def __init__(
		self,
		directory: ClinicDirectory,
		store: Optional[AppointmentStore] = None,
		strict_transitions: bool = False,
		clock: Callable[[], datetime] = now_datetime
	):
		self.directory = directory
		self.store = store if store is not None else InMemoryAppointmentStore()
		self.strict_transitions = strict_transitions
		self.clock = clock
		self._lock = threading.RLock()

	# ===== WRITE PATH =====

	def create_appointment(self, request: AppointmentRequest) -> Appointment:
		"""
		Book a slot.

		Validación:
			1. Date/time format (InvalidFormatError)
			2. Doctor and patient exist (NotFoundError)
			3. No active appointment holds (doctor, date, time) (SlotConflictError)
			4. Assign id, stamp created_at, copy display names, append
		"""
		date = _normalize_date(request.date)
		time = _normalize_time(request.time)

		with self._lock:
			doctor = self.directory.get_doctor(request.doctor_id)
			patient = self.directory.get_patient(request.patient_id)

			if request.status != AppointmentStatus.CANCELLED:
				self._ensure_slot_free(doctor.id, date, time)

			appointment = Appointment(
				id=generate_id("apt"),
				patient_id=patient.id,
				doctor_id=doctor.id,
				doctor_name=doctor.name,
				patient_name=patient.name,
				date=date,
				time=time,
				reason=request.reason,
				status=request.status,
				created_at=self.clock(),
			)
			self.store.add(appointment)

		logger.info(
			f"Appointment booked: {appointment.id} "
			f"(Doctor: {doctor.id}, Patient: {patient.id}, Slot: {date} {time})"
		)
		return appointment.model_copy()

	def update_status(self, appointment_id: str, new_status: AppointmentStatus) -> Appointment:
		"""
		Change an appointment's status.

		Any status may move to any other unless strict_transitions is on.
		Moving a CANCELLED appointment back to an active status re-checks
		that its slot is still free.
		"""
		try:
			new_status = AppointmentStatus(new_status)
		except ValueError:
			raise InvalidFormatError(f"Unknown appointment status: {new_status}")

		with self._lock:
			current = self._get_or_raise(appointment_id)

			if self.strict_transitions and new_status != current.status:
				allowed = STRICT_TRANSITIONS[current.status]
				if new_status not in allowed:
					raise InvalidTransitionError(
						f"Cannot change appointment {appointment_id} from "
						f"{current.status.value} to {new_status.value}"
					)

			if not current.is_active and new_status != AppointmentStatus.CANCELLED:
				self._ensure_slot_free(current.doctor_id, current.date, current.time, exclude=current.id)

			updated = current.model_copy(update={"status": new_status})
			self.store.replace(updated)

		logger.info(f"Appointment {appointment_id} status: {current.status.value} -> {new_status.value}")
		return updated.model_copy()

	def reschedule(self, appointment_id: str, new_date: str, new_time: str) -> Appointment:
		"""
		Move an appointment to another slot of the same doctor.

		Status and id are preserved. Fails with SlotConflictError if another
		active appointment already holds the target slot.
		"""
		date = _normalize_date(new_date)
		time = _normalize_time(new_time)

		with self._lock:
			current = self._get_or_raise(appointment_id)

			if current.is_active:
				self._ensure_slot_free(current.doctor_id, date, time, exclude=current.id)

			updated = current.model_copy(update={"date": date, "time": time})
			self.store.replace(updated)

		logger.info(
			f"Appointment {appointment_id} rescheduled: "
			f"{current.date} {current.time} -> {date} {time}"
		)
		return updated.model_copy()

	def delete_by_doctor(self, doctor_id: str) -> int:
		"""Cascade-remove every appointment of a doctor."""
		with self._lock:
			removed = self.store.remove_where(lambda appt: appt.doctor_id == doctor_id)
		logger.info(f"delete_by_doctor: {removed} appointments removed for doctor {doctor_id}")
		return removed

	def delete_by_patient(self, patient_id: str) -> int:
		"""Cascade-remove every appointment of a patient."""
		with self._lock:
			removed = self.store.remove_where(lambda appt: appt.patient_id == patient_id)
		logger.info(f"delete_by_patient: {removed} appointments removed for patient {patient_id}")
		return removed

	# ===== READ PATH =====

	def get_appointment(self, appointment_id: str) -> Appointment:
		with self._lock:
			return self._get_or_raise(appointment_id).model_copy()

	def list_appointments(
		self,
		doctor_id: Optional[str] = None,
		patient_id: Optional[str] = None,
		date: Optional[str] = None,
		status: Optional[AppointmentStatus] = None
	) -> List[Appointment]:
		"""Snapshot of matching appointments in insertion order."""
		if date is not None:
			date = _normalize_date(date)

		with self._lock:
			records = self.store.all()

		return [
			appt.model_copy()
			for appt in records
			if (doctor_id is None or appt.doctor_id == doctor_id)
			and (patient_id is None or appt.patient_id == patient_id)
			and (date is None or appt.date == date)
			and (status is None or appt.status == status)
		]

	# ===== HELPERS =====

	def _get_or_raise(self, appointment_id: str) -> Appointment:
		appointment = self.store.get(appointment_id)
		if appointment is None:
			raise NotFoundError("Appointment", appointment_id)
		return appointment

	def _ensure_slot_free(self, doctor_id: str, date: str, time: str, exclude: Optional[str] = None) -> None:
		result = check_conflict(self.store.all(), doctor_id, date, time, exclude_appointment=exclude)
		if result["has_conflict"]:
			raise SlotConflictError(doctor_id, date, time)
