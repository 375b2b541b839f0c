"""
Availability API Domain

Lets the signed-in advisor manage recurring weekly availability windows.
"""

from advisor_scheduling.api.scheduling_api import (
    get_my_availability,
    add_availability_window,
    update_availability_window,
    delete_availability_window,
    check_availability_window,
    suggest_availability_window,
)

__all__ = [
    "get_my_availability",
    "add_availability_window",
    "update_availability_window",
    "delete_availability_window",
    "check_availability_window",
    "suggest_availability_window",
]
