"""
Scheduling Configuration

Loads the "Scheduling Settings" Single DocType into an immutable value object.
"""

from dataclasses import dataclass

import frappe
import pytz
from frappe.utils import cint

from advisor_scheduling.advisor_scheduling.scheduling.slots import DEFAULT_SLOT_INTERVAL_MINUTES


DEFAULT_MAX_DAYS_IN_ADVANCE = 14


@dataclass(frozen=True)
class SchedulingSettings:
	timezone: str = "UTC"
	slot_interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES
	default_max_days_in_advance: int = DEFAULT_MAX_DAYS_IN_ADVANCE
	match_scheduled_meeting_time_of_day: bool = False


def resolve_timezone(tz_name: str) -> str:
	"""
	Resuelve el nombre de timezone a usar en el cálculo.

	"system timezone" o vacío -> timezone del sistema.
	Un nombre inválido cae a UTC y queda en el Error Log.
	"""
	if not tz_name or tz_name == "system timezone":
		tz_name = frappe.utils.get_system_timezone()

	try:
		pytz.timezone(tz_name)
	except pytz.UnknownTimeZoneError:
		frappe.log_error(
			f"Invalid timezone '{tz_name}' in Scheduling Settings, usando UTC",
			"Scheduling Settings"
		)
		return "UTC"

	return tz_name


def get_scheduling_settings() -> SchedulingSettings:
	"""
	Lee Scheduling Settings (cacheado por Frappe).

	Returns:
		SchedulingSettings con defaults para campos vacíos
	"""
	doc = frappe.get_cached_doc("Scheduling Settings")

	return SchedulingSettings(
		timezone=resolve_timezone(doc.timezone),
		slot_interval_minutes=cint(doc.slot_interval_minutes) or DEFAULT_SLOT_INTERVAL_MINUTES,
		default_max_days_in_advance=(
			cint(doc.default_max_days_in_advance)
			if doc.default_max_days_in_advance not in (None, "")
			else DEFAULT_MAX_DAYS_IN_ADVANCE
		),
		match_scheduled_meeting_time_of_day=bool(cint(doc.match_scheduled_meeting_time_of_day)),
	)
