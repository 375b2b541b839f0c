"""
Booking Request Builder

Shapes a chosen slot plus the visitor's contact data and answers into the
payload the booking store receives. Does not commit anything.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .errors import BookingRequestError
from .models import BookingAnswer, BookingRequest, SchedulingLinkConfig, SlotCandidate


AnswersInput = Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]


def build_booking_request(
	slot: SlotCandidate,
	link_config: SchedulingLinkConfig,
	email: str,
	linkedin: str,
	answers: Optional[AnswersInput] = None
) -> BookingRequest:
	"""
	Construye el BookingRequest para un slot elegido.

	Args:
		slot: slot elegido por el visitante
		link_config: configuración del Scheduling Link
		email: email del visitante (requerido)
		linkedin: perfil de LinkedIn del visitante (requerido)
		answers: respuestas asociadas por identidad de pregunta, como
			{"<question_id>": "respuesta"} o [{"question_id": ..., "answer": ...}]

	Returns:
		BookingRequest con slot_start en hora local sin offset

	Raises:
		BookingRequestError: si falta un dato de contacto, una respuesta,
			hay preguntas desconocidas o el slot no dura meeting_length
	"""
	email = (email or "").strip()
	linkedin = (linkedin or "").strip()
	if not email or not linkedin:
		raise BookingRequestError("Email and LinkedIn are required")

	duration = int((slot.end - slot.start).total_seconds() // 60)
	if duration != link_config.meeting_length:
		raise BookingRequestError(
			f"Slot lasts {duration} minutes but the link books {link_config.meeting_length}-minute meetings"
		)

	answers_by_id = _answers_by_question_id(answers)

	known_ids = {q.question_id for q in link_config.custom_questions}
	unknown = [question_id for question_id in answers_by_id if question_id not in known_ids]
	if unknown:
		raise BookingRequestError(f"Unknown question id(s): {', '.join(sorted(unknown))}")

	booking_answers: List[BookingAnswer] = []
	missing: List[str] = []

	# Se respeta el orden de las preguntas del link
	for question in link_config.custom_questions:
		answer = str(answers_by_id.get(question.question_id) or "").strip()
		if not answer:
			missing.append(question.text)
			continue
		booking_answers.append(
			BookingAnswer(question_id=question.question_id, question=question.text, answer=answer)
		)

	if missing:
		raise BookingRequestError(f"Please answer all questions: {'; '.join(missing)}")

	slot_start = slot.start.replace(tzinfo=None)

	return BookingRequest(
		slot_start=slot_start,
		duration_minutes=link_config.meeting_length,
		email=email,
		linkedin=linkedin,
		answers=tuple(booking_answers),
	)


def _answers_by_question_id(answers: Optional[AnswersInput]) -> Dict[str, Any]:
	"""Normaliza las respuestas a {question_id: answer}."""
	if not answers:
		return {}

	if isinstance(answers, Mapping):
		return {str(key): value for key, value in answers.items()}

	result: Dict[str, Any] = {}
	for item in answers:
		question_id = item.get("question_id")
		if question_id is None or question_id == "":
			raise BookingRequestError("Every answer must reference a question_id")
		result[str(question_id)] = item.get("answer")
	return result
