# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""Patient roster record."""

from typing import Optional

from pydantic import BaseModel


class Patient(BaseModel):
	id: str = ""
	name: str
	email: Optional[str] = None
	phone: Optional[str] = None
	dob: Optional[str] = None
	gender: Optional[str] = None
	address: Optional[str] = None
