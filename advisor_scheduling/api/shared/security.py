"""
Public Endpoint Protection

Guards the guest-facing scheduling page (slot listing and booking
preparation) against request floods and form-filling bots.
"""

import frappe
from frappe import _
from frappe.utils import cint


RATE_LIMIT_PREFIX = "rate_limit:advisor_scheduling"


# ===================
# Rate Limiting
# ===================

def check_rate_limit(action: str, limit: int = 10, seconds: int = 60) -> None:
    """
    Cuenta un request del visitante para `action` y corta al superar el límite.

    El contador vive en frappe.cache (Redis) con TTL `seconds`, una clave
    por acción e IP.

    Raises:
        frappe.TooManyRequestsError: si ya hubo `limit` requests en la ventana
    """
    ip = get_client_ip()
    key = _rate_limit_key(action, ip)
    hits = cint(frappe.cache.get_value(key) or 0)

    if hits >= limit:
        frappe.log_error(
            title=_("Rate Limit Exceeded"),
            message=f"{action}: {ip} superó {limit} requests en {seconds}s"
        )
        frappe.throw(
            _("Too many requests. Please wait a moment and try again."),
            frappe.TooManyRequestsError
        )

    frappe.cache.set_value(key, hits + 1, expires_in_sec=seconds)


def reset_rate_limit(action: str, ip: str = None) -> None:
    """Borra el contador de `action` para una IP (por defecto, la del request actual)."""
    frappe.cache.delete_value(_rate_limit_key(action, ip or get_client_ip()))


def get_client_ip() -> str:
    """
    IP del visitante, respetando proxies (X-Forwarded-For, luego X-Real-IP).

    Fuera de un request HTTP (jobs, tests) retorna "local".
    """
    request = getattr(frappe.local, "request", None)
    if request is None:
        return "local"

    # El primer elemento de la cadena es el cliente original
    forwarded_for = request.headers.get("X-Forwarded-For", "")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP", "")
    if real_ip:
        return real_ip.strip()

    return request.remote_addr or "unknown"


def _rate_limit_key(action: str, ip: str) -> str:
    return f"{RATE_LIMIT_PREFIX}:{action}:{ip}"


# ===================
# Honeypot
# ===================

def check_honeypot(honeypot_value: str = None) -> None:
    """
    Rechaza el envío si el campo oculto del formulario de reserva trae valor.

    Raises:
        frappe.ValidationError: mensaje genérico, sin revelar el motivo
    """
    if not honeypot_value:
        return

    frappe.log_error(
        title=_("Bot Detected (Honeypot)"),
        message=f"IP: {get_client_ip()}, valor: {str(honeypot_value)[:100]}"
    )
    frappe.throw(_("Invalid request"), frappe.ValidationError)
