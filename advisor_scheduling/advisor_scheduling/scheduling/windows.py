"""
Availability Window Validation

Prevents an advisor from declaring overlapping recurring windows:
- Two windows overlap if they share a weekday and their [start, end) intersect
- Touching windows (end == start of the other) are allowed
- Zero-length or inverted windows are rejected as malformed
"""

from datetime import time
from typing import Any, Iterable, List, Optional

from .errors import DataError, WindowValidationError
from .models import WEEKDAYS, AvailabilityWindow


# Propuestas para una ventana nueva cuando el día ya está ocupado
FALLBACK_TIME_RANGES = (
	(time(18, 0), time(22, 0)),
	(time(13, 0), time(17, 0)),
	(time(9, 0), time(12, 0)),
)


def overlaps(a: AvailabilityWindow, b: AvailabilityWindow) -> bool:
	"""
	Dos ventanas se solapan si:
	- Son del mismo weekday
	- a.start < b.end AND a.end > b.start
	"""
	if a.weekday != b.weekday:
		return False
	return a.start_time < b.end_time and a.end_time > b.start_time


def has_overlap(candidate: AvailabilityWindow, existing_windows: Iterable[AvailabilityWindow]) -> bool:
	"""True si candidate se solapa con alguna de existing_windows."""
	return any(overlaps(candidate, window) for window in existing_windows)


def find_overlapping_window(
	candidate: AvailabilityWindow,
	existing_windows: Iterable[Any],
	exclude_id: Optional[str] = None
) -> Optional[AvailabilityWindow]:
	"""
	Busca la primera ventana existente que se solapa con candidate.

	Args:
		candidate: ventana nueva o editada
		existing_windows: ventanas ya guardadas del advisor (dataclasses o registros)
		exclude_id: id de la ventana en edición, que no cuenta contra sí misma

	Returns:
		AvailabilityWindow en conflicto, o None
	"""
	for record in existing_windows:
		# Una ventana guardada mal formada no bloquea a las demás
		try:
			window = AvailabilityWindow.from_record(record)
		except DataError:
			continue
		if exclude_id and window.id == exclude_id:
			continue
		if overlaps(candidate, window):
			return window
	return None


def validate_window(
	candidate: Any,
	existing_windows: Iterable[Any],
	exclude_id: Optional[str] = None
) -> AvailabilityWindow:
	"""
	Valida una ventana antes de persistirla.

	Args:
		candidate: ventana a crear/editar (dataclass o registro)
		existing_windows: ventanas ya guardadas del mismo advisor
		exclude_id: en ediciones, id de la ventana editada

	Returns:
		AvailabilityWindow normalizada

	Raises:
		WindowValidationError: si está mal formada o se solapa con otra
	"""
	try:
		window = AvailabilityWindow.from_record(candidate)
	except DataError as e:
		raise WindowValidationError(str(e)) from e

	if window.start_time >= window.end_time:
		raise WindowValidationError(
			f"{window.weekday.capitalize()}: Start Time ({window.start_time.strftime('%H:%M')}) "
			f"must be earlier than End Time ({window.end_time.strftime('%H:%M')})"
		)

	conflict = find_overlapping_window(window, existing_windows, exclude_id=exclude_id or window.id)
	if conflict is not None:
		raise WindowValidationError(
			f"{window.label()} overlaps with {conflict.label()}",
			conflicting_window=conflict,
		)

	return window


def validate_window_set(windows: Iterable[Any]) -> List[AvailabilityWindow]:
	"""
	Valida un lote completo de ventanas (p.ej. guardar todo el modal de una vez).

	Cada ventana se compara con las anteriores del lote.

	Raises:
		WindowValidationError: en la primera ventana inválida o solapada
	"""
	accepted: List[AvailabilityWindow] = []
	for record in windows:
		window = validate_window(record, accepted)
		accepted.append(window)
	return accepted


def suggest_window(existing_windows: Iterable[Any]) -> Optional[AvailabilityWindow]:
	"""
	Propone una ventana nueva que no se solape con las existentes.

	Algoritmo:
		1. Default: monday 09:00-17:00
		2. Si monday ya tiene ventanas, usar el primer weekday sin ventanas
		3. Si aún se solapa, probar 18-22, 13-17, 09-12 en ese día
		4. Si nada sirve, retornar None
	"""
	windows = _valid_windows(existing_windows)
	used_days = {w.weekday for w in windows}

	proposal = AvailabilityWindow(weekday="monday", start_time=time(9, 0), end_time=time(17, 0))

	if "monday" in used_days:
		free_day = next((day for day in WEEKDAYS if day not in used_days), None)
		if free_day:
			proposal = AvailabilityWindow(weekday=free_day, start_time=time(9, 0), end_time=time(17, 0))

	if not has_overlap(proposal, windows):
		return proposal

	for start, end in FALLBACK_TIME_RANGES:
		alternative = AvailabilityWindow(weekday=proposal.weekday, start_time=start, end_time=end)
		if not has_overlap(alternative, windows):
			return alternative

	return None


def _valid_windows(records: Iterable[Any]) -> List[AvailabilityWindow]:
	"""Normaliza registros, omitiendo los mal formados."""
	windows: List[AvailabilityWindow] = []
	for record in records:
		try:
			windows.append(AvailabilityWindow.from_record(record))
		except DataError:
			continue
	return windows
