"""
Scheduling API Endpoints

Whitelisted functions for the advisor dashboard and the public scheduling page.

Advisor endpoints (authenticated):
- Manage the session user's Availability Windows (overlap-validated)

Public endpoints (guest access, rate limited):
- Compute offerable slots for a Scheduling Link
- Shape a visitor's chosen slot and answers into a booking payload
"""

from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

import frappe
from frappe import _
from frappe.utils import get_datetime, now_datetime

from advisor_scheduling.advisor_scheduling.config import SchedulingSettings, get_scheduling_settings
from advisor_scheduling.advisor_scheduling.scheduling.booking import build_booking_request
from advisor_scheduling.advisor_scheduling.scheduling.errors import (
	BookingRequestError,
	DataError,
	WindowValidationError,
)
from advisor_scheduling.advisor_scheduling.scheduling.models import (
	AvailabilityWindow,
	SchedulingLinkConfig,
	SlotComputation,
)
from advisor_scheduling.advisor_scheduling.scheduling.slots import (
	generate_available_slots,
	group_slots_by_date,
)
from advisor_scheduling.advisor_scheduling.scheduling.windows import suggest_window, validate_window
from advisor_scheduling.advisor_scheduling.stores import (
	get_availability_windows,
	get_busy_intervals,
	get_link_config,
	to_system_aware,
)

from advisor_scheduling.api.shared import (
	check_honeypot,
	check_rate_limit,
	sanitize_string,
	validate_datetime_string,
	validate_docname,
	validate_email,
	validate_time_string,
	validate_weekday,
)


# ===== ADVISOR: AVAILABILITY WINDOWS =====

@frappe.whitelist(methods=["GET"])
def get_my_availability() -> List[Dict[str, Any]]:
	"""
	Obtiene las Availability Windows del advisor en sesión.

	Returns:
		list[dict]: [
			{"id": "AW-00001", "weekday": "monday", "start_time": "09:00", "end_time": "17:00"},
			...
		]
	"""
	advisor = _require_advisor()

	windows = []
	for row in get_availability_windows(advisor):
		try:
			windows.append(AvailabilityWindow.from_record(row).as_dict())
		except DataError as e:
			frappe.logger("advisor_scheduling").warning(
				f"Availability Window {row.name} omitida: {e}"
			)

	return windows


@frappe.whitelist(methods=["POST"])
def add_availability_window(weekday: str, start_time: str, end_time: str) -> Dict[str, Any]:
	"""
	Crea una Availability Window para el advisor en sesión.

	El DocType ejecuta el validador de solapamiento; si la ventana se solapa
	con otra del mismo weekday no se guarda nada.

	Returns:
		dict: ventana creada
	"""
	advisor = _require_advisor()

	doc = frappe.get_doc({
		"doctype": "Availability Window",
		"advisor": advisor,
		"weekday": validate_weekday(weekday),
		"start_time": validate_time_string(start_time, "start_time"),
		"end_time": validate_time_string(end_time, "end_time")
	})
	doc.insert(ignore_permissions=True)

	frappe.logger("advisor_scheduling").info(
		f"Availability Window creada: {doc.name} ({advisor}, {doc.weekday} {doc.start_time}-{doc.end_time})"
	)

	return AvailabilityWindow.from_record(doc).as_dict()


@frappe.whitelist(methods=["POST"])
def update_availability_window(
	name: str,
	weekday: Optional[str] = None,
	start_time: Optional[str] = None,
	end_time: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Edita una Availability Window del advisor en sesión.

	La propia ventana se excluye de la validación de solapamiento.

	Returns:
		dict: ventana actualizada
	"""
	doc = _get_own_window(name)

	if weekday:
		doc.weekday = validate_weekday(weekday)
	if start_time:
		doc.start_time = validate_time_string(start_time, "start_time")
	if end_time:
		doc.end_time = validate_time_string(end_time, "end_time")

	doc.save(ignore_permissions=True)

	return AvailabilityWindow.from_record(doc).as_dict()


@frappe.whitelist(methods=["POST", "DELETE"])
def delete_availability_window(name: str) -> Dict[str, Any]:
	"""Elimina una Availability Window del advisor en sesión."""
	doc = _get_own_window(name)
	frappe.delete_doc("Availability Window", doc.name, ignore_permissions=True)

	return {"success": True, "name": doc.name}


@frappe.whitelist(methods=["GET", "POST"])
def check_availability_window(
	weekday: str,
	start_time: str,
	end_time: str,
	name: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Valida una ventana ANTES de guardarla (para mostrar el error en el modal).

	Args:
		weekday: día de la semana
		start_time: HH:MM
		end_time: HH:MM
		name: ventana en edición (se excluye de la comparación)

	Returns:
		dict: {
			"valid": bool,
			"errors": list[str],
			"conflicting_window": dict | None
		}
	"""
	advisor = _require_advisor()

	if name:
		name = validate_docname(name, "name")

	candidate = {
		"name": name,
		"weekday": validate_weekday(weekday),
		"start_time": validate_time_string(start_time, "start_time"),
		"end_time": validate_time_string(end_time, "end_time")
	}

	try:
		validate_window(candidate, get_availability_windows(advisor, exclude=name), exclude_id=name)
	except WindowValidationError as e:
		conflict = e.conflicting_window
		return {
			"valid": False,
			"errors": [str(e)],
			"conflicting_window": conflict.as_dict() if conflict else None
		}

	return {"valid": True, "errors": [], "conflicting_window": None}


@frappe.whitelist(methods=["GET"])
def suggest_availability_window() -> Optional[Dict[str, Any]]:
	"""
	Propone una ventana nueva que no se solape con las existentes.

	Returns:
		dict | None: ventana sugerida, o None si no se encontró hueco
	"""
	advisor = _require_advisor()
	suggestion = suggest_window(get_availability_windows(advisor))
	return suggestion.as_dict() if suggestion else None


# ===== PUBLIC: SLOTS & BOOKING =====

@frappe.whitelist(allow_guest=True, methods=["GET"])
def get_available_slots(scheduling_link: str) -> Dict[str, Any]:
	"""
	Obtiene los slots ofertables de un Scheduling Link.

	Rate limited: 30 requests per minute per IP.

	Args:
		scheduling_link: nombre del Scheduling Link

	Returns:
		dict: {
			"slots": [{"start": "2026-01-19 09:00:00", "end": "2026-01-19 09:30:00"}, ...],
			"days": {"2026-01-19": [...], ...},
			"no_availability": bool,
			"skipped": int,  (ventanas/intervalos omitidos por datos incompletos)
			"timezone": "America/Bogota",
			"meeting_length": 30,
			"questions": [{"question_id": str, "question": str}, ...]
		}

	Example:
		```javascript
		frappe.call({
			method: "advisor_scheduling.api.scheduling_api.get_available_slots",
			args: {scheduling_link: "3f2a9c1b7e"},
			callback: function(r) {
				console.log(r.message.days);
			}
		});
		```
	"""
	check_rate_limit("get_available_slots", limit=30, seconds=60)
	scheduling_link = validate_docname(scheduling_link, "scheduling_link")

	try:
		result, config, _advisor, settings = _compute_link_slots(scheduling_link)

		return {
			"slots": [slot.as_dict() for slot in result.slots],
			"days": {
				day: [slot.as_dict() for slot in day_slots]
				for day, day_slots in group_slots_by_date(result.slots).items()
			},
			"no_availability": result.is_empty,
			"skipped": len(result.skipped),
			"timezone": settings.timezone,
			"meeting_length": config.meeting_length,
			"questions": [
				{"question_id": q.question_id, "question": q.text}
				for q in config.custom_questions
			]
		}

	except frappe.ValidationError:
		raise
	except Exception as e:
		frappe.log_error(f"Error in get_available_slots: {str(e)}", "API Error")
		frappe.throw(_("Error al obtener slots disponibles"))


@frappe.whitelist(allow_guest=True, methods=["POST"])
def prepare_booking(
	scheduling_link: str,
	slot_start: str,
	email: str,
	linkedin: str,
	answers: Any = None,
	honeypot: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Arma el payload de reserva para el slot elegido por el visitante.

	El slot se revalida contra un snapshot fresco de disponibilidad; el commit
	(y la serialización de reservas concurrentes) es responsabilidad del
	Booking Store.

	Rate limited: 10 requests per minute per IP.

	Args:
		scheduling_link: nombre del Scheduling Link
		slot_start: inicio del slot en hora local del advisor (YYYY-MM-DD HH:MM:SS)
		email: email del visitante
		linkedin: perfil de LinkedIn del visitante
		answers: {"<question_id>": "respuesta"} o lista de {"question_id", "answer"} (JSON)
		honeypot: campo oculto anti-bots

	Returns:
		dict: {
			"scheduling_link": str,
			"advisor": str,
			"scheduled_for": "2026-01-19T09:00:00",
			"duration_minutes": 30,
			"email": str,
			"linkedin": str,
			"answers": [{"question_id", "question", "answer"}, ...]
		}
	"""
	check_rate_limit("prepare_booking", limit=10, seconds=60)
	check_honeypot(honeypot)

	scheduling_link = validate_docname(scheduling_link, "scheduling_link")
	slot_start = validate_datetime_string(slot_start, "slot_start")
	email = validate_email(email)
	linkedin = sanitize_string(linkedin, max_length=300)

	try:
		if isinstance(answers, str):
			answers = frappe.parse_json(answers)

		requested_start = get_datetime(slot_start).replace(second=0, microsecond=0)

		result, config, advisor, _settings = _compute_link_slots(scheduling_link)

		chosen = next(
			(slot for slot in result.slots if slot.start.replace(tzinfo=None) == requested_start),
			None
		)
		if chosen is None:
			frappe.throw(_("El horario elegido ya no está disponible"), frappe.ValidationError)

		try:
			request = build_booking_request(chosen, config, email, linkedin, answers)
		except BookingRequestError as e:
			frappe.throw(_(str(e)), frappe.ValidationError)

		payload = request.as_payload()
		payload["scheduling_link"] = scheduling_link
		payload["advisor"] = advisor

		return payload

	except frappe.ValidationError:
		raise
	except Exception as e:
		frappe.log_error(f"Error in prepare_booking: {str(e)}", "API Error")
		frappe.throw(_("Error al preparar la reserva"))


# ===== HELPERS =====

def _require_advisor() -> str:
	"""Retorna el usuario en sesión; los Guest no gestionan disponibilidad."""
	if frappe.session.user == "Guest":
		frappe.throw(_("Debe iniciar sesión"), frappe.PermissionError)
	return frappe.session.user


def _get_own_window(name: str) -> Any:
	"""Obtiene una Availability Window verificando que sea del advisor en sesión."""
	advisor = _require_advisor()
	name = validate_docname(name, "name")

	if not frappe.db.exists("Availability Window", name):
		frappe.throw(_(f"Availability Window '{name}' no existe"), frappe.DoesNotExistError)

	doc = frappe.get_doc("Availability Window", name)
	if doc.advisor != advisor:
		frappe.throw(_("No tiene permiso sobre esta ventana"), frappe.PermissionError)

	return doc


def _compute_link_slots(
	scheduling_link: str
) -> Tuple[SlotComputation, SchedulingLinkConfig, str, SchedulingSettings]:
	"""
	Carga el snapshot (ventanas, busy intervals, config) y genera los slots.

	Raises:
		frappe.ValidationError: si la configuración del link es inválida
	"""
	settings = get_scheduling_settings()
	config, advisor = get_link_config(scheduling_link)

	now = now_datetime()
	horizon_end = now + timedelta(days=config.max_days_in_advance + 1)

	result = generate_available_slots(
		get_availability_windows(advisor),
		get_busy_intervals(advisor, now, horizon_end),
		config.meeting_length,
		config.max_days_in_advance,
		to_system_aware(now),
		timezone=settings.timezone,
		slot_interval_minutes=settings.slot_interval_minutes,
		match_scheduled_time_of_day=settings.match_scheduled_meeting_time_of_day,
	)

	logger = frappe.logger("advisor_scheduling")
	for skipped in result.skipped:
		logger.warning(f"Scheduling Link {scheduling_link}: registro omitido ({skipped})")

	if result.error is not None:
		frappe.log_error(
			f"Scheduling Link {scheduling_link}: {result.error}",
			"Slot Generation"
		)
		frappe.throw(_(f"Configuración inválida del Scheduling Link: {result.error}"), frappe.ValidationError)

	if result.is_empty:
		logger.info(f"Scheduling Link {scheduling_link}: sin disponibilidad en el horizonte")

	return result, config, advisor, settings
