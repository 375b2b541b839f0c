# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Calendar Event DocType

Evento sincronizado desde un calendario externo conectado. Bloquea
disponibilidad del advisor (busy interval con source external_calendar).
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import get_datetime


class CalendarEvent(Document):
	def validate(self) -> None:
		"""Valida advisor requerido y start_datetime < end_datetime."""
		if not self.advisor:
			frappe.throw(_("Advisor es requerido"))

		if not self.start_datetime or not self.end_datetime:
			frappe.throw(_("Start DateTime y End DateTime son requeridos"))

		if get_datetime(self.start_datetime) >= get_datetime(self.end_datetime):
			frappe.throw(_("Start DateTime debe ser menor que End DateTime"))
