"""
Clinic Scheduling settings.

Values come from environment variables (a local .env file is honoured):

	CLINIC_SLOT_INTERVAL_MINUTES     slot width, default 30
	CLINIC_TIMEZONE                  timezone used to resolve "today", default Asia/Kolkata
	CLINIC_STRICT_STATUS_TRANSITIONS true to make terminal statuses final
	CLINIC_STORE_BACKEND             appointment store backend, default "memory"
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchedulingSettings(BaseSettings):
	"""Scheduling configuration"""

	model_config = SettingsConfigDict(
		env_prefix="CLINIC_",
		env_file=".env",
		env_file_encoding="utf-8",
		extra="ignore",
	)

	slot_interval_minutes: int = Field(default=30, gt=0)
	timezone: str = "Asia/Kolkata"
	strict_status_transitions: bool = False
	store_backend: str = "memory"


def load_settings() -> SchedulingSettings:
	"""Build settings from the current environment."""
	return SchedulingSettings()
