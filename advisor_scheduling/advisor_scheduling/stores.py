"""
Store Adapters

Reads the engine inputs out of the Frappe DocTypes:
- Availability Window -> availability windows of an advisor
- Calendar Event / Scheduled Meeting -> busy intervals
- Scheduling Link (+ Scheduling Link Question) -> SchedulingLinkConfig

Datetimes stored by Frappe are naive in the system timezone; they are
returned timezone-aware so the engine can compare them in the advisor zone.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import frappe
import pytz
from frappe import _
from frappe.utils import cint, get_datetime

from advisor_scheduling.advisor_scheduling.scheduling.models import (
	SOURCE_EXTERNAL_CALENDAR,
	SOURCE_SCHEDULED_MEETING,
	LinkQuestion,
	SchedulingLinkConfig,
)


def to_system_aware(value: Any) -> Optional[datetime]:
	"""Localiza un datetime naive de la DB en la timezone del sistema."""
	if not value:
		return None
	value = get_datetime(value)
	if value.tzinfo is not None:
		return value
	return pytz.timezone(frappe.utils.get_system_timezone()).localize(value)


def get_availability_windows(advisor: str, exclude: Optional[str] = None) -> List[Dict[str, Any]]:
	"""
	Obtiene las Availability Windows de un advisor.

	Args:
		advisor: User dueño de las ventanas
		exclude: nombre de una ventana a excluir (para ediciones)

	Returns:
		list[dict]: [{"name", "weekday", "start_time", "end_time"}, ...]
	"""
	filters: Dict[str, Any] = {"advisor": advisor}
	if exclude:
		filters["name"] = ["!=", exclude]

	return frappe.get_all(
		"Availability Window",
		filters=filters,
		fields=["name", "weekday", "start_time", "end_time"],
		order_by="start_time asc"
	)


def get_busy_intervals(advisor: str, from_datetime: datetime, to_datetime: datetime) -> List[Dict[str, Any]]:
	"""
	Obtiene el tiempo comprometido del advisor en un rango.

	Combina:
	- Calendar Event (eventos sincronizados de calendarios externos)
	- Scheduled Meeting no cancelados (reservas previas)

	Args:
		advisor: User del advisor
		from_datetime: inicio del rango (naive, timezone del sistema)
		to_datetime: fin del rango (naive, timezone del sistema)

	Returns:
		list[dict]: [{"start", "end", "source", "name"}, ...]; un registro con
		campos vacíos se devuelve igual y el motor lo descarta como DataError
	"""
	intervals: List[Dict[str, Any]] = []

	events = frappe.get_all(
		"Calendar Event",
		filters={
			"advisor": advisor,
			"start_datetime": ["<", to_datetime],
			"end_datetime": [">", from_datetime]
		},
		fields=["name", "start_datetime", "end_datetime"]
	)
	for event in events:
		intervals.append({
			"name": event.name,
			"start": to_system_aware(event.start_datetime),
			"end": to_system_aware(event.end_datetime),
			"source": SOURCE_EXTERNAL_CALENDAR
		})

	# El fin de un meeting es scheduled_for + duration_minutes; se filtra con
	# un margen de un día y el motor hace la comparación exacta
	meetings = frappe.get_all(
		"Scheduled Meeting",
		filters={
			"advisor": advisor,
			"status": ["!=", "Cancelled"],
			"scheduled_for": ["between", [from_datetime - timedelta(days=1), to_datetime]]
		},
		fields=["name", "scheduled_for", "duration_minutes"]
	)
	for meeting in meetings:
		start = to_system_aware(meeting.scheduled_for)
		duration = cint(meeting.duration_minutes)
		intervals.append({
			"name": meeting.name,
			"start": start,
			"end": start + timedelta(minutes=duration) if start and duration > 0 else None,
			"source": SOURCE_SCHEDULED_MEETING
		})

	return intervals


def get_link_config(scheduling_link: str) -> Tuple[SchedulingLinkConfig, str]:
	"""
	Obtiene la configuración de un Scheduling Link.

	Se asume que el link ya fue validado (vigencia y límite de usos) por quien
	llama. max_days_in_advance = 0 es un horizonte vacío válido; el default de
	Scheduling Settings se aplica al crear el link (SchedulingLink.before_insert).

	Returns:
		tuple: (SchedulingLinkConfig, advisor)
	"""
	if not frappe.db.exists("Scheduling Link", scheduling_link):
		frappe.throw(_(f"Scheduling Link '{scheduling_link}' no existe"), frappe.DoesNotExistError)

	link = frappe.get_doc("Scheduling Link", scheduling_link)

	questions = tuple(
		LinkQuestion(question_id=row.name, text=row.question)
		for row in sorted(link.custom_questions or [], key=lambda r: r.idx)
	)

	config = SchedulingLinkConfig(
		meeting_length=cint(link.meeting_length),
		max_days_in_advance=cint(link.max_days_in_advance),
		custom_questions=questions,
	)
	return config, link.advisor
