"""
Scheduling Services Module

Pure availability and slot computation engine (no Frappe imports):
- Value objects (models.py)
- Engine errors (errors.py)
- Availability window overlap validation (windows.py)
- Slot vs busy interval conflict detection (conflicts.py)
- Slot generation over the booking horizon (slots.py)
- Booking payload construction (booking.py)
"""
