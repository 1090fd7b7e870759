"""
Tests for scheduling/ledger.py

Tests booking, the no-double-booking invariant, reschedules, status changes,
cascade deletes and concurrent booking attempts.
"""

import threading
import unittest
from datetime import date, datetime

import pytz

from clinic_scheduling.clinic_scheduling.models import (
	AppointmentRequest,
	AppointmentStatus,
	Doctor,
	Patient,
)
from clinic_scheduling.clinic_scheduling.scheduling.directory import ClinicDirectory
from clinic_scheduling.clinic_scheduling.scheduling.errors import (
	InvalidFormatError,
	InvalidTransitionError,
	NotFoundError,
	SlotConflictError,
)
from clinic_scheduling.clinic_scheduling.scheduling.ledger import BookingLedger
from clinic_scheduling.clinic_scheduling.scheduling.store import (
	InMemoryAppointmentStore,
	get_store,
)

FIXED_NOW = datetime(2024, 6, 1, 8, 0, tzinfo=pytz.UTC)


def build_directory():
	directory = ClinicDirectory()
	directory.add_doctor(Doctor(id="D1", name="Dr. Anita Sharma"))
	directory.add_doctor(Doctor(id="D2", name="Dr. Vikram Singh"))
	directory.add_patient(Patient(id="P1", name="Rahul Verma"))
	directory.add_patient(Patient(id="P2", name="Sneha Gupta"))
	return directory


def request(doctor_id="D1", patient_id="P1", date="2024-06-10", time="10:00", **kwargs):
	return AppointmentRequest(doctor_id=doctor_id, patient_id=patient_id, date=date, time=time, **kwargs)


class TestBookingLedger(unittest.TestCase):
	"""Tests for the booking write path."""

	def setUp(self):
		self.directory = build_directory()
		self.ledger = BookingLedger(self.directory, clock=lambda: FIXED_NOW)

	def test_create_appointment(self):
		"""Test a booking gets an id, timestamp and denormalized names."""
		appt = self.ledger.create_appointment(request(reason="Regular Checkup"))

		self.assertTrue(appt.id.startswith("apt-"))
		self.assertEqual(appt.status, AppointmentStatus.SCHEDULED)
		self.assertEqual(appt.doctor_name, "Dr. Anita Sharma")
		self.assertEqual(appt.patient_name, "Rahul Verma")
		self.assertEqual(appt.created_at, FIXED_NOW)
		self.assertEqual(appt.reason, "Regular Checkup")
		self.assertEqual(len(self.ledger.list_appointments()), 1)

	def test_create_normalizes_time(self):
		"""Test single-digit hours are stored zero-padded."""
		appt = self.ledger.create_appointment(request(time="9:00"))
		self.assertEqual(appt.time, "09:00")

	def test_unknown_doctor_or_patient(self):
		"""Test NotFoundError for missing references, nothing written."""
		with self.assertRaises(NotFoundError) as ctx:
			self.ledger.create_appointment(request(doctor_id="D9"))
		self.assertEqual(ctx.exception.entity, "Doctor")

		with self.assertRaises(NotFoundError) as ctx:
			self.ledger.create_appointment(request(patient_id="P9"))
		self.assertEqual(ctx.exception.entity, "Patient")

		self.assertEqual(self.ledger.list_appointments(), [])

	def test_not_found_checked_before_conflict(self):
		"""Test a missing patient wins over a taken slot."""
		self.ledger.create_appointment(request())
		with self.assertRaises(NotFoundError):
			self.ledger.create_appointment(request(patient_id="P9"))

	def test_invalid_time(self):
		"""Test malformed time is rejected before any write."""
		with self.assertRaises(InvalidFormatError):
			self.ledger.create_appointment(request(time="25:00"))
		self.assertEqual(self.ledger.list_appointments(), [])

	def test_book_cancel_rebook(self):
		"""Test a slot is reusable once its appointment is cancelled."""
		first = self.ledger.create_appointment(request())
		self.assertEqual(first.status, AppointmentStatus.SCHEDULED)

		with self.assertRaises(SlotConflictError) as ctx:
			self.ledger.create_appointment(request(patient_id="P2"))
		self.assertEqual(ctx.exception.time, "10:00")

		self.ledger.update_status(first.id, AppointmentStatus.CANCELLED)
		third = self.ledger.create_appointment(request(patient_id="P2"))

		self.assertEqual(third.status, AppointmentStatus.SCHEDULED)
		self.assertNotEqual(third.id, first.id)

	def test_same_time_different_doctor(self):
		"""Test the invariant is per doctor."""
		self.ledger.create_appointment(request(doctor_id="D1"))
		appt = self.ledger.create_appointment(request(doctor_id="D2"))
		self.assertEqual(appt.doctor_id, "D2")

	def test_returned_records_are_copies(self):
		"""Test callers cannot mutate ledger state through returned records."""
		appt = self.ledger.create_appointment(request())
		appt.time = "11:00"

		self.assertEqual(self.ledger.get_appointment(appt.id).time, "10:00")


class TestReschedule(unittest.TestCase):
	"""Tests for BookingLedger.reschedule."""

	def setUp(self):
		self.ledger = BookingLedger(build_directory())
		self.first = self.ledger.create_appointment(request(time="10:00"))
		self.second = self.ledger.create_appointment(request(patient_id="P2", time="11:00"))

	def test_reschedule_to_free_slot(self):
		"""Test date and time move, id and status stay."""
		moved = self.ledger.reschedule(self.first.id, "2024-06-11", "14:30")

		self.assertEqual(moved.id, self.first.id)
		self.assertEqual((moved.date, moved.time), ("2024-06-11", "14:30"))
		self.assertEqual(moved.status, AppointmentStatus.SCHEDULED)

	def test_reschedule_onto_taken_slot(self):
		"""Test SlotConflictError leaves the original record unchanged."""
		with self.assertRaises(SlotConflictError):
			self.ledger.reschedule(self.first.id, "2024-06-10", "11:00")

		current = self.ledger.get_appointment(self.first.id)
		self.assertEqual((current.date, current.time), ("2024-06-10", "10:00"))

	def test_reschedule_to_own_slot(self):
		"""Test the moving record is excluded from the conflict scan."""
		moved = self.ledger.reschedule(self.first.id, "2024-06-10", "10:00")
		self.assertEqual(moved.time, "10:00")

	def test_reschedule_onto_cancelled_slot(self):
		"""Test a cancelled appointment does not block the target slot."""
		self.ledger.update_status(self.second.id, AppointmentStatus.CANCELLED)
		moved = self.ledger.reschedule(self.first.id, "2024-06-10", "11:00")
		self.assertEqual(moved.time, "11:00")

	def test_reschedule_missing(self):
		"""Test NotFoundError for unknown ids."""
		with self.assertRaises(NotFoundError):
			self.ledger.reschedule("apt-missing", "2024-06-10", "12:00")


class TestStatusUpdates(unittest.TestCase):
	"""Tests for BookingLedger.update_status."""

	def setUp(self):
		self.directory = build_directory()
		self.ledger = BookingLedger(self.directory)
		self.appt = self.ledger.create_appointment(request())

	def test_any_transition_allowed_by_default(self):
		"""Test permissive mode lets COMPLETED go back to SCHEDULED."""
		self.ledger.update_status(self.appt.id, AppointmentStatus.COMPLETED)
		updated = self.ledger.update_status(self.appt.id, AppointmentStatus.SCHEDULED)
		self.assertEqual(updated.status, AppointmentStatus.SCHEDULED)

	def test_accepts_status_strings(self):
		"""Test plain status strings are accepted."""
		updated = self.ledger.update_status(self.appt.id, "NOSHOW")
		self.assertEqual(updated.status, AppointmentStatus.NOSHOW)

	def test_unknown_status(self):
		"""Test unknown statuses are rejected."""
		with self.assertRaises(InvalidFormatError):
			self.ledger.update_status(self.appt.id, "LOST")

	def test_missing_appointment(self):
		"""Test NotFoundError for unknown ids."""
		with self.assertRaises(NotFoundError):
			self.ledger.update_status("apt-missing", AppointmentStatus.COMPLETED)

	def test_reactivation_rechecks_slot(self):
		"""Test un-cancelling fails if the slot was rebooked meanwhile."""
		self.ledger.update_status(self.appt.id, AppointmentStatus.CANCELLED)
		self.ledger.create_appointment(request(patient_id="P2"))

		with self.assertRaises(SlotConflictError):
			self.ledger.update_status(self.appt.id, AppointmentStatus.SCHEDULED)
		self.assertEqual(self.ledger.get_appointment(self.appt.id).status, AppointmentStatus.CANCELLED)

	def test_strict_transitions(self):
		"""Test strict mode keeps terminal statuses final."""
		ledger = BookingLedger(self.directory, strict_transitions=True)
		appt = ledger.create_appointment(request())

		ledger.update_status(appt.id, AppointmentStatus.COMPLETED)
		with self.assertRaises(InvalidTransitionError):
			ledger.update_status(appt.id, AppointmentStatus.SCHEDULED)
		with self.assertRaises(InvalidTransitionError):
			ledger.update_status(appt.id, AppointmentStatus.CANCELLED)


class TestCascadeDelete(unittest.TestCase):
	"""Tests for delete_by_doctor / delete_by_patient."""

	def setUp(self):
		self.ledger = BookingLedger(build_directory())
		self.ledger.create_appointment(request(doctor_id="D1", patient_id="P1", time="09:00"))
		self.ledger.create_appointment(request(doctor_id="D1", patient_id="P2", time="09:30"))
		self.ledger.create_appointment(request(doctor_id="D2", patient_id="P1", time="09:00"))

	def test_delete_by_doctor(self):
		self.assertEqual(self.ledger.delete_by_doctor("D1"), 2)
		self.assertEqual([a.doctor_id for a in self.ledger.list_appointments()], ["D2"])

	def test_delete_by_patient(self):
		self.assertEqual(self.ledger.delete_by_patient("P1"), 2)
		self.assertEqual([a.patient_id for a in self.ledger.list_appointments()], ["P2"])

	def test_list_filters(self):
		"""Test list_appointments filters combine."""
		self.assertEqual(len(self.ledger.list_appointments(doctor_id="D1")), 2)
		self.assertEqual(len(self.ledger.list_appointments(doctor_id="D1", patient_id="P2")), 1)
		self.assertEqual(len(self.ledger.list_appointments(status=AppointmentStatus.CANCELLED)), 0)

	def test_list_date_filter_is_normalized(self):
		"""Test the date filter matches stored dates whatever form it is given in."""
		self.assertEqual(len(self.ledger.list_appointments(date=date(2024, 6, 10))), 3)
		self.assertEqual(len(self.ledger.list_appointments(date=" 2024-06-10 ")), 3)
		with self.assertRaises(InvalidFormatError):
			self.ledger.list_appointments(date="２０２４-06-10")


class TestConcurrentBooking(unittest.TestCase):
	"""Tests the invariant under concurrent booking attempts."""

	def test_exactly_one_booking_wins(self):
		"""Test N threads racing for one slot produce one booking and N-1 conflicts."""
		directory = build_directory()
		ledger = BookingLedger(directory)
		workers = 16
		barrier = threading.Barrier(workers)
		successes = []
		conflicts = []
		results_lock = threading.Lock()

		def attempt(index):
			barrier.wait()
			try:
				appt = ledger.create_appointment(request(patient_id="P1" if index % 2 else "P2"))
			except SlotConflictError as e:
				with results_lock:
					conflicts.append(e)
			else:
				with results_lock:
					successes.append(appt)

		threads = [threading.Thread(target=attempt, args=(i,)) for i in range(workers)]
		for thread in threads:
			thread.start()
		for thread in threads:
			thread.join()

		self.assertEqual(len(successes), 1)
		self.assertEqual(len(conflicts), workers - 1)
		self.assertEqual(len(ledger.list_appointments(doctor_id="D1", date="2024-06-10")), 1)

	def test_concurrent_reschedules_onto_one_slot(self):
		"""Test two appointments racing to the same slot: one moves, one conflicts."""
		ledger = BookingLedger(build_directory())
		a = ledger.create_appointment(request(time="09:00"))
		b = ledger.create_appointment(request(patient_id="P2", time="09:30"))
		barrier = threading.Barrier(2)
		outcomes = []

		def move(appt_id):
			barrier.wait()
			try:
				ledger.reschedule(appt_id, "2024-06-10", "15:00")
				outcomes.append("moved")
			except SlotConflictError:
				outcomes.append("conflict")

		threads = [threading.Thread(target=move, args=(appt_id,)) for appt_id in (a.id, b.id)]
		for thread in threads:
			thread.start()
		for thread in threads:
			thread.join()

		self.assertEqual(sorted(outcomes), ["conflict", "moved"])


class TestStore(unittest.TestCase):
	"""Tests for the store factory."""

	def test_memory_backend(self):
		self.assertIsInstance(get_store("memory"), InMemoryAppointmentStore)

	def test_unknown_backend(self):
		with self.assertRaises(ValueError):
			get_store("postgres")


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
