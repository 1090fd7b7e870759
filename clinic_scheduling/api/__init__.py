"""
Clinic Scheduling API

In-process entry points for UI/API collaborators.

Structure:
    api/
    ├── __init__.py              # This file
    ├── appointments/            # Scheduling facade
    │   ├── __init__.py          # Re-exports SchedulingFacade
    │   └── endpoints.py         # Facade operations
    └── shared/                  # Shared utilities
        ├── __init__.py          # Re-exports validators
        └── validators.py        # Input validators

Usage:
    from clinic_scheduling.api.appointments import SchedulingFacade

    facade = SchedulingFacade()
    slots = facade.list_available_slots("doc-1", "2024-06-10")
"""

from . import appointments
from . import shared

__all__ = [
    "appointments",
    "shared",
]
