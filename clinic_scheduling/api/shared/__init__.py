"""
Shared utilities for the Clinic Scheduling API.
"""

from .validators import (
    validate_clock_time,
    validate_date_string,
    validate_docname,
)

__all__ = [
    "validate_clock_time",
    "validate_date_string",
    "validate_docname",
]
