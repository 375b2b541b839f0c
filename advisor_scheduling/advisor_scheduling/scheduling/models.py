"""
Scheduling Models

Immutable value objects exchanged between the stores, the engine and the API:
- AvailabilityWindow: recurring weekly window of an advisor
- BusyInterval: already committed time (external calendar / scheduled meeting)
- SlotCandidate: offerable slot produced by the generator
- SchedulingLinkConfig / LinkQuestion: public link constraints
- BookingRequest / BookingAnswer: payload for the booking store
- SlotComputation: result of one slot generation
"""

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import DataError, InvalidInputError


WEEKDAYS = (
	"monday",
	"tuesday",
	"wednesday",
	"thursday",
	"friday",
	"saturday",
	"sunday",
)

SOURCE_EXTERNAL_CALENDAR = "external_calendar"
SOURCE_SCHEDULED_MEETING = "scheduled_meeting"
BUSY_SOURCES = (SOURCE_EXTERNAL_CALENDAR, SOURCE_SCHEDULED_MEETING)

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _field(record: Any, name: str) -> Any:
	"""Lee un campo de un dict, frappe._dict o documento."""
	if isinstance(record, dict):
		return record.get(name)
	return getattr(record, name, None)


def to_time(time_value: Union[time, timedelta, str]) -> time:
	"""
	Convierte diferentes formatos de tiempo a datetime.time.

	Args:
		time_value: time, timedelta (desde medianoche, como lo devuelve
			un campo Time de Frappe) o string "HH:MM[:SS]"

	Returns:
		datetime.time object

	Raises:
		ValueError: si el valor no se puede convertir
	"""
	if isinstance(time_value, time):
		return time_value.replace(tzinfo=None)
	elif isinstance(time_value, timedelta):
		if time_value < timedelta(0) or time_value >= timedelta(days=1):
			raise ValueError(f"Time out of range: {time_value}")
		return (datetime.min + time_value).time()
	elif isinstance(time_value, str):
		value = time_value.strip()
		for fmt in ("%H:%M:%S", "%H:%M"):
			try:
				return datetime.strptime(value, fmt).time()
			except ValueError:
				continue
		# Frappe puede devolver microsegundos ("09:00:00.000000")
		return datetime.strptime(value, "%H:%M:%S.%f").time()
	else:
		raise ValueError(f"Cannot convert {type(time_value)} to time")


def to_datetime(value: Union[datetime, str]) -> datetime:
	"""Convierte datetime o string ISO ("YYYY-MM-DD HH:MM:SS") a datetime."""
	if isinstance(value, datetime):
		return value
	if isinstance(value, str):
		return datetime.fromisoformat(value.strip())
	raise ValueError(f"Cannot convert {type(value)} to datetime")


def normalize_weekday(value: Any) -> str:
	"""Devuelve el weekday en minúsculas ("Monday" -> "monday")."""
	if not value:
		raise ValueError("weekday is required")
	weekday = str(value).strip().lower()
	if weekday not in WEEKDAYS:
		raise ValueError(f"Unknown weekday: {value!r}")
	return weekday


@dataclass(frozen=True)
class AvailabilityWindow:
	"""Ventana semanal recurrente [start_time, end_time) de un advisor."""

	weekday: str
	start_time: time
	end_time: time
	id: Optional[str] = None

	@classmethod
	def from_record(cls, record: Any) -> "AvailabilityWindow":
		"""
		Construye una ventana desde un dict o documento de Frappe.

		Acepta "id" o "name" como identificador.

		Raises:
			DataError: si falta weekday, start_time o end_time, o no se pueden parsear
		"""
		if isinstance(record, cls):
			return record

		weekday = _field(record, "weekday")
		start_time = _field(record, "start_time")
		end_time = _field(record, "end_time")
		window_id = _field(record, "id") or _field(record, "name")

		if not weekday or start_time in (None, "") or end_time in (None, ""):
			raise DataError("Availability window is missing weekday, start_time or end_time", record)

		try:
			return cls(
				weekday=normalize_weekday(weekday),
				start_time=to_time(start_time),
				end_time=to_time(end_time),
				id=str(window_id) if window_id else None,
			)
		except ValueError as e:
			raise DataError(f"Malformed availability window: {e}", record) from e

	def label(self) -> str:
		"""Ej: "Monday 09:00-17:00 (AW-0001)"."""
		text = f"{self.weekday.capitalize()} {self.start_time.strftime('%H:%M')}-{self.end_time.strftime('%H:%M')}"
		if self.id:
			text += f" ({self.id})"
		return text

	def as_dict(self) -> Dict[str, Any]:
		return {
			"id": self.id,
			"weekday": self.weekday,
			"start_time": self.start_time.strftime("%H:%M"),
			"end_time": self.end_time.strftime("%H:%M"),
		}


@dataclass(frozen=True)
class BusyInterval:
	"""Bloque de tiempo ya comprometido."""

	start: datetime
	end: datetime
	source: str = SOURCE_EXTERNAL_CALENDAR

	@classmethod
	def from_record(cls, record: Any) -> "BusyInterval":
		"""
		Construye un intervalo desde un dict o documento.

		Raises:
			DataError: si faltan campos, la fuente es desconocida o end < start
		"""
		if isinstance(record, cls):
			return record

		start = _field(record, "start")
		end = _field(record, "end")
		source = _field(record, "source") or SOURCE_EXTERNAL_CALENDAR

		if not start or not end:
			raise DataError("Busy interval is missing start or end", record)
		if source not in BUSY_SOURCES:
			raise DataError(f"Unknown busy interval source: {source!r}", record)

		try:
			start = to_datetime(start)
			end = to_datetime(end)
		except ValueError as e:
			raise DataError(f"Malformed busy interval: {e}", record) from e

		if end < start:
			raise DataError("Busy interval ends before it starts", record)

		return cls(start=start, end=end, source=source)


@dataclass(frozen=True)
class SlotCandidate:
	"""Slot ofertable de exactamente duration_minutes."""

	start: datetime
	end: datetime

	def as_dict(self) -> Dict[str, str]:
		return {
			"start": self.start.strftime(DATETIME_FORMAT),
			"end": self.end.strftime(DATETIME_FORMAT),
		}


@dataclass(frozen=True)
class LinkQuestion:
	"""Pregunta personalizada de un Scheduling Link, con identidad estable."""

	question_id: str
	text: str


@dataclass(frozen=True)
class SchedulingLinkConfig:
	"""Restricciones del link público usadas por el generador y el builder."""

	meeting_length: int
	max_days_in_advance: int
	custom_questions: Tuple[LinkQuestion, ...] = ()

	@classmethod
	def from_prompts(
		cls,
		meeting_length: int,
		max_days_in_advance: int,
		prompts: Optional[List[str]] = None
	) -> "SchedulingLinkConfig":
		"""Construye la config desde una lista de textos; el id es la posición."""
		questions = tuple(
			LinkQuestion(question_id=str(idx), text=text)
			for idx, text in enumerate(prompts or [])
		)
		return cls(
			meeting_length=meeting_length,
			max_days_in_advance=max_days_in_advance,
			custom_questions=questions,
		)

	def validate(self) -> None:
		"""
		Raises:
			InvalidInputError: si meeting_length <= 0 o max_days_in_advance < 0
		"""
		if not isinstance(self.meeting_length, int) or self.meeting_length <= 0:
			raise InvalidInputError(f"meeting_length must be > 0, got {self.meeting_length!r}")
		if not isinstance(self.max_days_in_advance, int) or self.max_days_in_advance < 0:
			raise InvalidInputError(
				f"max_days_in_advance must be >= 0, got {self.max_days_in_advance!r}"
			)


@dataclass(frozen=True)
class BookingAnswer:
	question_id: str
	question: str
	answer: str


@dataclass(frozen=True)
class BookingRequest:
	"""Payload para el Booking Store (que es quien hace el commit)."""

	slot_start: datetime
	duration_minutes: int
	email: str
	linkedin: str
	answers: Tuple[BookingAnswer, ...] = ()

	def as_payload(self) -> Dict[str, Any]:
		"""
		Returns:
			dict: {
				"scheduled_for": "2026-01-19T09:00:00",  (hora local, sin offset)
				"duration_minutes": 30,
				"email": str,
				"linkedin": str,
				"answers": [{"question_id", "question", "answer"}, ...]
			}
		"""
		return {
			"scheduled_for": self.slot_start.strftime("%Y-%m-%dT%H:%M:%S"),
			"duration_minutes": self.duration_minutes,
			"email": self.email,
			"linkedin": self.linkedin,
			"answers": [
				{
					"question_id": a.question_id,
					"question": a.question,
					"answer": a.answer,
				}
				for a in self.answers
			],
		}


@dataclass(frozen=True)
class SlotComputation:
	"""
	Resultado de una generación de slots.

	- slots: slots ordenados por start
	- skipped: DataError por cada ventana/intervalo descartado
	- error: InvalidInputError si la generación falló cerrada
	"""

	slots: Tuple[SlotCandidate, ...] = ()
	skipped: Tuple[DataError, ...] = field(default=(), compare=False)
	error: Optional[InvalidInputError] = field(default=None, compare=False)

	@property
	def is_empty(self) -> bool:
		"""Sin disponibilidad en el horizonte (no es un error)."""
		return self.error is None and not self.slots

	def raise_for_error(self) -> None:
		if self.error is not None:
			raise self.error
