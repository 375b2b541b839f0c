# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Scheduled Meeting DocType

Reunión ya reservada por un visitante a través de un Scheduling Link.
Mientras no esté cancelada bloquea disponibilidad (source scheduled_meeting).
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import cint


class ScheduledMeeting(Document):
	def validate(self) -> None:
		"""Valida advisor, scheduled_for y duration_minutes > 0."""
		if not self.advisor:
			frappe.throw(_("Advisor es requerido"))

		if not self.scheduled_for:
			frappe.throw(_("Scheduled For es requerido"))

		if cint(self.duration_minutes) <= 0:
			frappe.throw(_("Duration Minutes debe ser mayor que 0"))
