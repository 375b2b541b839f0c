# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Availability Window DocType

Franja semanal recurrente en la que un advisor acepta reuniones.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from advisor_scheduling.advisor_scheduling.scheduling.errors import WindowValidationError
from advisor_scheduling.advisor_scheduling.scheduling.windows import validate_window
from advisor_scheduling.advisor_scheduling.stores import get_availability_windows


class AvailabilityWindow(Document):
	"""
	Availability Window with overlap validation.

	Validations:
	- advisor, weekday, start_time, end_time required
	- start_time < end_time
	- No overlap with the advisor's other windows on the same weekday
	  (touching windows are allowed)
	"""

	def validate(self) -> None:
		"""
		Validación antes de guardar.
		"""
		self._validate_required_fields()
		self._validate_against_other_windows()

	def _validate_required_fields(self) -> None:
		"""Valida campos requeridos."""
		if not self.advisor:
			frappe.throw(_("Advisor es requerido"))

		if not self.weekday:
			frappe.throw(_("Weekday es requerido"))

		# 00:00 se carga como timedelta(0), que es falsy
		if self.start_time in (None, "") or self.end_time in (None, ""):
			frappe.throw(_("Start Time y End Time son requeridos"))

	def _validate_against_other_windows(self) -> None:
		"""
		Ejecuta el validador de solapamiento contra las demás ventanas del advisor.

		En ediciones la propia ventana se excluye de la comparación.
		"""
		exclude = None if self.is_new() else self.name
		existing = get_availability_windows(self.advisor, exclude=exclude)

		try:
			validate_window(
				{
					"name": exclude,
					"weekday": self.weekday,
					"start_time": self.start_time,
					"end_time": self.end_time
				},
				existing,
				exclude_id=exclude
			)
		except WindowValidationError as e:
			frappe.throw(_(str(e)), frappe.ValidationError, title=_("Ventana inválida"))
