"""
Scheduling Services Module

This module provides core business logic for appointment scheduling:
- Time arithmetic and slot grid (timeutils.py)
- Availability calculation (availability.py)
- Conflict detection (overlap.py)
- Appointment storage backends (store.py)
- Doctor/patient rosters (directory.py)
- Booking ledger enforcing the no-double-booking invariant (ledger.py)
"""
