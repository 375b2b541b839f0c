"""
Slot Generation Service

Turns an advisor's weekly availability windows into concrete, bookable slots:
- Walks every day of the booking horizon
- Steps through each matching window at min(slot interval, duration)
- Drops past slots and slots that conflict with busy intervals

Pure: every input, including the reference "now", is passed explicitly.
"""

from datetime import date, datetime, time, timedelta
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pytz

from .conflicts import find_conflict
from .errors import DataError, InvalidInputError
from .models import (
	WEEKDAYS,
	AvailabilityWindow,
	BusyInterval,
	SlotCandidate,
	SlotComputation,
)


DEFAULT_SLOT_INTERVAL_MINUTES = 30


def generate_available_slots(
	windows: Iterable[Any],
	busy_intervals: Iterable[Any],
	duration_minutes: int,
	max_days_in_advance: int,
	reference_now: datetime,
	timezone: Optional[str] = None,
	slot_interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
	match_scheduled_time_of_day: bool = False
) -> SlotComputation:
	"""
	Genera los slots ofertables para un horizonte de reserva.

	Args:
		windows: ventanas semanales del advisor (dataclasses o registros)
		busy_intervals: tiempo comprometido (dataclasses o registros)
		duration_minutes: duración de la reunión (> 0)
		max_days_in_advance: horizonte en días (>= 0); 0 no ofrece slots
		reference_now: instante de referencia; solo se ofrecen slots posteriores
		timezone: zona del advisor (pytz); None = cálculo naive en hora local
		slot_interval_minutes: tope del paso entre inicios de slots
		match_scheduled_time_of_day: regla heredada de hora:minuto exacto para
			Scheduled Meetings (ver conflicts.conflicts)

	Returns:
		SlotComputation: slots ordenados, entidades descartadas y error (si lo hay)

	Algoritmo:
		1. Validar parámetros (falla cerrada con InvalidInputError)
		2. Normalizar ventanas e intervalos; los mal formados van a skipped
		3. Para cada día desde la fecha de reference_now hasta +max_days (inclusive):
			a. Ventanas del weekday, ordenadas por start_time
			b. Candidatos cada step mientras start + duración <= fin de ventana
			c. Descartar start <= reference_now y conflictos
		4. Retornar lista ordenada
	"""
	# 1. Validar parámetros
	try:
		_validate_parameters(duration_minutes, max_days_in_advance, slot_interval_minutes)
		tz = _get_timezone(timezone)
		now = _localize(reference_now, tz, "reference_now")
	except InvalidInputError as e:
		return SlotComputation(error=e)

	# 2. Normalizar entradas, tolerando registros individuales rotos
	skipped: List[DataError] = []
	windows_by_day = _group_windows_by_weekday(windows, skipped)
	intervals = _collect_busy_intervals(busy_intervals, tz, skipped)

	if max_days_in_advance == 0:
		return SlotComputation(skipped=tuple(skipped))

	duration = timedelta(minutes=duration_minutes)
	step = timedelta(minutes=min(slot_interval_minutes, duration_minutes))

	slots: List[SlotCandidate] = []

	# 3. Recorrer el horizonte día por día
	start_date = now.date()
	for offset in range(max_days_in_advance + 1):
		current_date = start_date + timedelta(days=offset)
		day_windows = windows_by_day.get(WEEKDAYS[current_date.weekday()])
		if not day_windows:
			continue

		day_slots: Dict[datetime, SlotCandidate] = {}

		for window in day_windows:
			window_start = _combine(current_date, window.start_time, tz)
			window_end = _combine(current_date, window.end_time, tz)

			current_start = window_start
			while True:
				current_end = _shift(current_start, duration, tz)

				# El slot debe caber completo en la ventana
				if current_end > window_end:
					break

				if current_start > now and current_start not in day_slots:
					slot = SlotCandidate(start=current_start, end=current_end)
					if find_conflict(slot, intervals, match_scheduled_time_of_day) is None:
						day_slots[current_start] = slot

				current_start = _shift(current_start, step, tz)

		# Ventanas solapadas (no validadas) podrían desordenar el día
		slots.extend(day_slots[key] for key in sorted(day_slots))

	# 4. Ya están ordenados por construcción
	return SlotComputation(slots=tuple(slots), skipped=tuple(skipped))


@lru_cache(maxsize=256, typed=True)
def _generate_cached(
	windows: Tuple[AvailabilityWindow, ...],
	busy_intervals: Tuple[BusyInterval, ...],
	duration_minutes: int,
	max_days_in_advance: int,
	reference_now: datetime,
	timezone: Optional[str],
	slot_interval_minutes: int,
	match_scheduled_time_of_day: bool
) -> SlotComputation:
	return generate_available_slots(
		windows,
		busy_intervals,
		duration_minutes,
		max_days_in_advance,
		reference_now,
		timezone=timezone,
		slot_interval_minutes=slot_interval_minutes,
		match_scheduled_time_of_day=match_scheduled_time_of_day,
	)


def compute_available_slots_cached(
	windows: Sequence[AvailabilityWindow],
	busy_intervals: Sequence[BusyInterval],
	duration_minutes: int,
	max_days_in_advance: int,
	reference_now: datetime,
	timezone: Optional[str] = None,
	slot_interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
	match_scheduled_time_of_day: bool = False
) -> SlotComputation:
	"""
	Versión memoizada de generate_available_slots, para consumidores del motor
	que recalculan con el mismo snapshot y el mismo reference_now (p.ej. un
	job que precalcula varios links). Los endpoints usan la versión sin cache
	porque reference_now cambia en cada request.

	La clave es la tupla completa de entradas, así que ventanas e intervalos
	deben ser dataclasses (hashables), no dicts. El cache es tipado: 1 y True
	(o 30 y 30.0) son claves distintas y las entradas inválidas fallan igual.
	"""
	return _generate_cached(
		tuple(windows),
		tuple(busy_intervals),
		duration_minutes,
		max_days_in_advance,
		reference_now,
		timezone,
		slot_interval_minutes,
		match_scheduled_time_of_day,
	)


def group_slots_by_date(slots: Iterable[SlotCandidate]) -> Dict[str, List[SlotCandidate]]:
	"""
	Agrupa slots por fecha, preservando el orden.

	Returns:
		dict: {"2026-01-19": [SlotCandidate, ...], ...}
	"""
	grouped: Dict[str, List[SlotCandidate]] = {}
	for slot in slots:
		grouped.setdefault(slot.start.strftime("%Y-%m-%d"), []).append(slot)
	return grouped


def _validate_parameters(duration_minutes: Any, max_days_in_advance: Any, slot_interval_minutes: Any) -> None:
	"""Valida duración, horizonte e intervalo (enteros, no bool)."""
	if not _is_int(duration_minutes) or duration_minutes <= 0:
		raise InvalidInputError(f"duration_minutes must be > 0, got {duration_minutes!r}")
	if not _is_int(max_days_in_advance) or max_days_in_advance < 0:
		raise InvalidInputError(f"max_days_in_advance must be >= 0, got {max_days_in_advance!r}")
	if not _is_int(slot_interval_minutes) or slot_interval_minutes <= 0:
		raise InvalidInputError(f"slot_interval_minutes must be > 0, got {slot_interval_minutes!r}")


def _is_int(value: Any) -> bool:
	return isinstance(value, int) and not isinstance(value, bool)


def _get_timezone(tz_name: Optional[str]) -> Optional[pytz.tzinfo.BaseTzInfo]:
	if not tz_name:
		return None
	try:
		return pytz.timezone(tz_name)
	except pytz.UnknownTimeZoneError as e:
		raise InvalidInputError(f"Unknown timezone: {tz_name!r}") from e


def _localize(value: Any, tz: Optional[pytz.tzinfo.BaseTzInfo], field_name: str) -> datetime:
	"""
	Lleva un datetime a la zona del cálculo.

	- Con tz: naive se interpreta en tz, aware se convierte a tz
	- Sin tz: solo se aceptan naive
	"""
	if not isinstance(value, datetime):
		raise InvalidInputError(f"{field_name} must be a datetime, got {type(value).__name__}")

	if tz is None:
		if value.tzinfo is not None:
			raise InvalidInputError(f"{field_name} is timezone-aware but no timezone was given")
		return value

	if value.tzinfo is None:
		return tz.localize(value)
	return value.astimezone(tz)


def _combine(day: date, wall_time: time, tz: Optional[pytz.tzinfo.BaseTzInfo]) -> datetime:
	naive = datetime.combine(day, wall_time)
	return tz.localize(naive) if tz is not None else naive


def _shift(value: datetime, delta: timedelta, tz: Optional[pytz.tzinfo.BaseTzInfo]) -> datetime:
	# normalize corrige el offset al cruzar un cambio de horario
	return tz.normalize(value + delta) if tz is not None else value + delta


def _group_windows_by_weekday(
	windows: Iterable[Any],
	skipped: List[DataError]
) -> Dict[str, List[AvailabilityWindow]]:
	"""Agrupa ventanas válidas por weekday, ordenadas por start_time."""
	by_day: Dict[str, List[AvailabilityWindow]] = {}

	for record in windows or []:
		try:
			window = AvailabilityWindow.from_record(record)
		except DataError as e:
			skipped.append(e)
			continue

		if window.start_time >= window.end_time:
			skipped.append(DataError(f"Availability window {window.label()} has no duration", record))
			continue

		by_day.setdefault(window.weekday, []).append(window)

	for day_windows in by_day.values():
		day_windows.sort(key=lambda w: (w.start_time, w.end_time))

	return by_day


def _collect_busy_intervals(
	busy_intervals: Iterable[Any],
	tz: Optional[pytz.tzinfo.BaseTzInfo],
	skipped: List[DataError]
) -> List[BusyInterval]:
	"""Normaliza los busy intervals a la zona del cálculo."""
	intervals: List[BusyInterval] = []

	for record in busy_intervals or []:
		try:
			interval = BusyInterval.from_record(record)
			start = _localize(interval.start, tz, "start")
			end = _localize(interval.end, tz, "end")
		except DataError as e:
			skipped.append(e)
			continue
		except InvalidInputError as e:
			skipped.append(DataError(f"Busy interval rejected: {e}", record))
			continue

		intervals.append(BusyInterval(start=start, end=end, source=interval.source))

	return intervals
