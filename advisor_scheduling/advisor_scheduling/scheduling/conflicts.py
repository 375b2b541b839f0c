"""
Conflict Detection

Decides whether a candidate slot collides with already committed time.
"""

from typing import Iterable, Optional

from .models import SOURCE_SCHEDULED_MEETING, BusyInterval, SlotCandidate


def conflicts(
	slot: SlotCandidate,
	interval: BusyInterval,
	match_scheduled_time_of_day: bool = False
) -> bool:
	"""
	Detecta si un slot choca con un busy interval.

	Condición de overlap (igual para todas las fuentes):
		slot.start < interval.end AND slot.end > interval.start
	Contener o estar contenido cuenta como conflicto; tocarse no.

	Args:
		slot: slot candidato
		interval: tiempo comprometido
		match_scheduled_time_of_day: si True, un Scheduled Meeting además bloquea
			cualquier slot que empiece a la misma hora:minuto, sin importar la fecha.
			Apagado por defecto (ver Scheduling Settings).

	Returns:
		bool: True si hay conflicto
	"""
	if match_scheduled_time_of_day and interval.source == SOURCE_SCHEDULED_MEETING:
		if (slot.start.hour, slot.start.minute) == (interval.start.hour, interval.start.minute):
			return True

	return slot.start < interval.end and slot.end > interval.start


def find_conflict(
	slot: SlotCandidate,
	intervals: Iterable[BusyInterval],
	match_scheduled_time_of_day: bool = False
) -> Optional[BusyInterval]:
	"""Retorna el primer busy interval que choca con slot, o None."""
	for interval in intervals:
		if conflicts(slot, interval, match_scheduled_time_of_day):
			return interval
	return None
