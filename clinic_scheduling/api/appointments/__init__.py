"""
Appointments API

Re-exports the scheduling facade.
"""

from .endpoints import SchedulingFacade

__all__ = [
    "SchedulingFacade",
]
