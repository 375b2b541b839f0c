"""
Scheduling Validators

Input validation for the availability and booking endpoints.
"""

import re
import frappe
from frappe import _
from frappe.utils import validate_email_address

from advisor_scheduling.advisor_scheduling.scheduling.models import WEEKDAYS


def sanitize_string(value: str, max_length: int = 500) -> str:
    """
    General string sanitization.

    Args:
        value: String to sanitize
        max_length: Maximum allowed length

    Returns:
        str: Sanitized string (None for empty input)
    """
    if not value:
        return None

    value = str(value).strip()

    if len(value) > max_length:
        value = value[:max_length]

    # Remove null bytes and other control characters
    value = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", value)

    return value


def validate_datetime_string(datetime_str: str, field_name: str = "datetime") -> str:
    """
    Validate datetime string format (YYYY-MM-DD HH:MM[:SS] or YYYY-MM-DDTHH:MM[:SS]).

    Returns:
        str: Validated datetime string

    Raises:
        frappe.ValidationError: If datetime format is invalid
    """
    if not datetime_str:
        frappe.throw(_(f"{field_name} is required"), frappe.ValidationError)

    datetime_str = str(datetime_str).strip()

    if not re.match(r"^\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}(:\d{2})?$", datetime_str):
        frappe.throw(
            _(f"Invalid {field_name} format. Use YYYY-MM-DD HH:MM:SS"),
            frappe.ValidationError,
        )

    return datetime_str


def validate_time_string(time_str: str, field_name: str = "time") -> str:
    """
    Validate wall-clock time format (HH:MM or HH:MM:SS).

    Returns:
        str: Validated time string

    Raises:
        frappe.ValidationError: If time format is invalid
    """
    if not time_str:
        frappe.throw(_(f"{field_name} is required"), frappe.ValidationError)

    time_str = str(time_str).strip()

    if not re.match(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$", time_str):
        frappe.throw(_(f"Invalid {field_name} format. Use HH:MM"), frappe.ValidationError)

    return time_str


def validate_weekday(weekday: str) -> str:
    """
    Validate a weekday name and return it as the Select option ("Monday").

    Raises:
        frappe.ValidationError: If weekday is unknown
    """
    value = str(weekday or "").strip().lower()
    if value not in WEEKDAYS:
        frappe.throw(_(f"Invalid weekday: {weekday}"), frappe.ValidationError)
    return value.capitalize()


def validate_email(email: str) -> str:
    """
    Validate an email address.

    Raises:
        frappe.ValidationError: If email is missing or invalid
    """
    email = sanitize_string(email, max_length=140)
    if not email:
        frappe.throw(_("Email is required"), frappe.ValidationError)

    if not validate_email_address(email):
        frappe.throw(_("Invalid email address"), frappe.ValidationError)

    return email.lower()


def validate_docname(name: str, field_name: str = "name") -> str:
    """
    Validate a document name (ID).

    Ensures the name is not too long and doesn't contain injection patterns.

    Raises:
        frappe.ValidationError: If name is invalid
    """
    if not name:
        frappe.throw(_(f"{field_name} is required"), frappe.ValidationError)

    name = str(name).strip()

    if len(name) > 140:
        frappe.throw(_(f"{field_name} is too long"), frappe.ValidationError)

    dangerous_patterns = [
        r"<script",
        r"javascript:",
        r"onclick",
        r"onerror",
        r"SELECT\s+",
        r"INSERT\s+",
        r"UPDATE\s+",
        r"DELETE\s+",
        r"DROP\s+",
        r"UNION\s+",
        r"--",
        r";",
    ]

    for pattern in dangerous_patterns:
        if re.search(pattern, name, re.IGNORECASE):
            frappe.throw(_(f"Invalid {field_name}"), frappe.ValidationError)

    return name
