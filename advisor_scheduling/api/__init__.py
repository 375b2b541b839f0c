"""
Advisor Scheduling API

This module provides a modular API structure for availability and booking.

Structure:
    api/
    ├── __init__.py              # This file
    ├── availability/            # Advisor availability windows domain
    │   └── __init__.py          # Re-exports from scheduling_api
    ├── booking/                 # Public scheduling page domain
    │   └── __init__.py          # Re-exports from scheduling_api
    ├── shared/                  # Shared utilities
    │   ├── __init__.py
    │   ├── security.py          # Rate limiting, honeypot
    │   └── validators.py        # Input validators
    └── scheduling_api.py        # All endpoints

Usage:
    frappe.call("advisor_scheduling.api.booking.get_available_slots", ...)
    frappe.call("advisor_scheduling.api.scheduling_api.get_available_slots", ...)
"""

from . import availability
from . import booking
from . import shared

__all__ = [
    "availability",
    "booking",
    "shared",
]
