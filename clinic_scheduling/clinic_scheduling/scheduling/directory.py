"""
Clinic Directory

Doctor and patient rosters consulted by the booking ledger.
Records are replaced, never mutated, so readers always see a whole record.
"""

import logging
import threading
from typing import Dict, List, Optional

from ..models.appointment import generate_id
from ..models.doctor import Doctor, WorkingCalendar
from ..models.patient import Patient
from .errors import NotFoundError

logger = logging.getLogger(__name__)


class ClinicDirectory:
	"""In-memory doctor and patient rosters."""

	def __init__(self):
		self._lock = threading.Lock()
		self._doctors: Dict[str, Doctor] = {}
		self._patients: Dict[str, Patient] = {}

	# ===== DOCTORS =====

	def add_doctor(self, doctor: Doctor) -> Doctor:
		"""Register a doctor, assigning an id when missing."""
		if not doctor.id:
			doctor = doctor.model_copy(update={"id": generate_id("doc")})

		with self._lock:
			if doctor.id in self._doctors:
				raise ValueError(f"Doctor '{doctor.id}' already exists")
			self._doctors[doctor.id] = doctor

		logger.info(f"Doctor registered: {doctor.id} ({doctor.name})")
		return doctor

	def find_doctor(self, doctor_id: str) -> Optional[Doctor]:
		with self._lock:
			return self._doctors.get(doctor_id)

	def get_doctor(self, doctor_id: str) -> Doctor:
		doctor = self.find_doctor(doctor_id)
		if doctor is None:
			raise NotFoundError("Doctor", doctor_id)
		return doctor

	def list_doctors(self) -> List[Doctor]:
		with self._lock:
			return list(self._doctors.values())

	def update_working_calendar(self, doctor_id: str, calendar: WorkingCalendar) -> Doctor:
		"""Swap in a new calendar for a doctor."""
		with self._lock:
			doctor = self._doctors.get(doctor_id)
			if doctor is None:
				raise NotFoundError("Doctor", doctor_id)
			updated = doctor.model_copy(update={"calendar": calendar})
			self._doctors[doctor_id] = updated

		logger.info(f"Working calendar updated for doctor {doctor_id}")
		return updated

	def remove_doctor(self, doctor_id: str) -> Doctor:
		with self._lock:
			doctor = self._doctors.pop(doctor_id, None)
		if doctor is None:
			raise NotFoundError("Doctor", doctor_id)
		return doctor

	# ===== PATIENTS =====

	def add_patient(self, patient: Patient) -> Patient:
		"""Register a patient, assigning an id when missing."""
		if not patient.id:
			patient = patient.model_copy(update={"id": generate_id("pat")})

		with self._lock:
			if patient.id in self._patients:
				raise ValueError(f"Patient '{patient.id}' already exists")
			self._patients[patient.id] = patient

		logger.info(f"Patient registered: {patient.id}")
		return patient

	def find_patient(self, patient_id: str) -> Optional[Patient]:
		with self._lock:
			return self._patients.get(patient_id)

	def get_patient(self, patient_id: str) -> Patient:
		patient = self.find_patient(patient_id)
		if patient is None:
			raise NotFoundError("Patient", patient_id)
		return patient

	def list_patients(self) -> List[Patient]:
		with self._lock:
			return list(self._patients.values())

	def remove_patient(self, patient_id: str) -> Patient:
		with self._lock:
			patient = self._patients.pop(patient_id, None)
		if patient is None:
			raise NotFoundError("Patient", patient_id)
		return patient
