# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Scheduling Settings DocType (Single)

Configuración global del cálculo de slots.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import cint


class SchedulingSettings(Document):
	def validate(self) -> None:
		"""Valida slot_interval_minutes > 0 y default_max_days_in_advance >= 0."""
		if cint(self.slot_interval_minutes) <= 0:
			frappe.throw(_("Slot Interval Minutes debe ser mayor que 0"))

		if cint(self.default_max_days_in_advance) < 0:
			frappe.throw(_("Default Max Days In Advance no puede ser negativo"))
