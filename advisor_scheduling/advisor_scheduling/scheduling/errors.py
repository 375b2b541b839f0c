"""
Scheduling Errors

Exceptions raised by the availability and slot engine. The Frappe layer
(DocTypes, API) translates them into frappe.ValidationError.
"""

from typing import Any, Optional


class SchedulingError(Exception):
	"""Base para errores del motor de disponibilidad."""
	pass


class WindowValidationError(SchedulingError):
	"""
	Una ventana de disponibilidad es inválida.

	Se lanza cuando la ventana se solapa con otra del mismo weekday
	o cuando start_time >= end_time.
	"""

	def __init__(self, message: str, conflicting_window: Optional[Any] = None):
		super().__init__(message)
		self.conflicting_window = conflicting_window


class DataError(SchedulingError):
	"""Un registro individual (ventana o busy interval) está incompleto o mal formado."""

	def __init__(self, message: str, record: Any = None):
		super().__init__(message)
		self.record = record


class InvalidInputError(SchedulingError):
	"""Parámetros de cálculo inválidos (duración, horizonte, reference_now)."""
	pass


class BookingRequestError(SchedulingError):
	"""La solicitud de reserva del visitante está incompleta."""
	pass
