"""
Appointment Stores

Storage backends for the booking ledger. The ledger serializes every
read-check-write on its own lock, so a backend only has to keep single
operations consistent.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from ..models.appointment import Appointment


class AppointmentStore(ABC):
	"""
	Interfaz base para almacenes de appointments.

	Todos los backends deben implementar estos métodos.
	"""

	@abstractmethod
	def all(self) -> List[Appointment]:
		"""Every stored appointment in insertion order."""
		pass

	@abstractmethod
	def get(self, appointment_id: str) -> Optional[Appointment]:
		"""Appointment by id, or None."""
		pass

	@abstractmethod
	def add(self, appointment: Appointment) -> None:
		"""Insert a new appointment."""
		pass

	@abstractmethod
	def replace(self, appointment: Appointment) -> None:
		"""Overwrite the stored record with the same id."""
		pass

	@abstractmethod
	def remove_where(self, predicate: Callable[[Appointment], bool]) -> int:
		"""
		Remove matching appointments.

		Returns:
			int: number of removed records
		"""
		pass


class InMemoryAppointmentStore(AppointmentStore):
	"""Dict-backed store keyed by appointment id."""

	def __init__(self):
		self._records: Dict[str, Appointment] = {}

	def all(self) -> List[Appointment]:
		return list(self._records.values())

	def get(self, appointment_id: str) -> Optional[Appointment]:
		return self._records.get(appointment_id)

	def add(self, appointment: Appointment) -> None:
		if appointment.id in self._records:
			raise ValueError(f"Duplicate appointment id: {appointment.id}")
		self._records[appointment.id] = appointment

	def replace(self, appointment: Appointment) -> None:
		if appointment.id not in self._records:
			raise KeyError(appointment.id)
		self._records[appointment.id] = appointment

	def remove_where(self, predicate: Callable[[Appointment], bool]) -> int:
		doomed = [appt_id for appt_id, appt in self._records.items() if predicate(appt)]
		for appt_id in doomed:
			del self._records[appt_id]
		return len(doomed)


def get_store(backend: str = "memory") -> AppointmentStore:
	"""
	Factory para obtener el store correcto según backend.

	Args:
		backend: "memory"

	Raises:
		ValueError: si backend no es soportado
	"""
	if backend == "memory":
		return InMemoryAppointmentStore()
	else:
		raise ValueError(f"Unsupported store backend: {backend}")
