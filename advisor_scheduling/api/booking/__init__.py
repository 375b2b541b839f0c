"""
Booking API Domain

Public scheduling page: offerable slots and booking payload preparation.
"""

from advisor_scheduling.api.scheduling_api import (
    get_available_slots,
    prepare_booking,
)

__all__ = [
    "get_available_slots",
    "prepare_booking",
]
