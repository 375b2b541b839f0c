# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Scheduling Link DocType

Link público compartible: duración de la reunión, horizonte de reserva
y preguntas personalizadas para el visitante.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import cint

from advisor_scheduling.advisor_scheduling.config import get_scheduling_settings


class SchedulingLink(Document):
	"""
	Scheduling Link with validations.

	Validations:
	- advisor required
	- meeting_length > 0
	- max_days_in_advance >= 0
	- Custom questions must not be blank
	"""

	def before_insert(self) -> None:
		"""
		Completa max_days_in_advance con el default de Scheduling Settings.

		Solo al crear: un Int guardado vacío queda en 0, que ya significa
		"sin slots", así que el default no se puede aplicar al leer.
		"""
		if self.max_days_in_advance in (None, ""):
			self.max_days_in_advance = get_scheduling_settings().default_max_days_in_advance

	def validate(self) -> None:
		"""
		Validación antes de guardar.
		"""
		if not self.advisor:
			frappe.throw(_("Advisor es requerido"))

		self._validate_meeting_length()
		self._validate_max_days_in_advance()
		self._validate_questions()

	def _validate_meeting_length(self) -> None:
		"""Valida que meeting_length sea mayor que 0."""
		if cint(self.meeting_length) <= 0:
			frappe.throw(_("Meeting Length debe ser mayor que 0"))

	def _validate_max_days_in_advance(self) -> None:
		"""Valida que max_days_in_advance no sea negativo."""
		if cint(self.max_days_in_advance) < 0:
			frappe.throw(_("Max Days In Advance no puede ser negativo"))

	def _validate_questions(self) -> None:
		"""Valida que ninguna pregunta esté vacía y limpia espacios."""
		for idx, row in enumerate(self.custom_questions or [], 1):
			question = (row.question or "").strip()
			if not question:
				frappe.throw(_(f"Fila {idx}: la pregunta no puede estar vacía"))
			row.question = question
