"""
Shared utilities for Advisor Scheduling API.

Rate limiting, honeypot checks and input validators used by the
availability and booking endpoints.
"""

from .security import (
    check_rate_limit,
    get_client_ip,
    check_honeypot,
    reset_rate_limit,
)

from .validators import (
    sanitize_string,
    validate_datetime_string,
    validate_docname,
    validate_email,
    validate_time_string,
    validate_weekday,
)

__all__ = [
    # Security
    "check_rate_limit",
    "get_client_ip",
    "check_honeypot",
    "reset_rate_limit",
    # Validators
    "sanitize_string",
    "validate_datetime_string",
    "validate_docname",
    "validate_email",
    "validate_time_string",
    "validate_weekday",
]
