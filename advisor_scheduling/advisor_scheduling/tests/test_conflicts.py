"""
Tests for scheduling/conflicts.py

Tests the half-open overlap rule between slots and busy intervals and
the opt-in same-time-of-day rule for scheduled meetings.
"""

import unittest
from datetime import datetime

from advisor_scheduling.advisor_scheduling.scheduling.conflicts import conflicts, find_conflict
from advisor_scheduling.advisor_scheduling.scheduling.models import (
	SOURCE_EXTERNAL_CALENDAR,
	SOURCE_SCHEDULED_MEETING,
	BusyInterval,
	SlotCandidate,
)


def slot(start, end):
	return SlotCandidate(start=start, end=end)


def busy(start, end, source=SOURCE_EXTERNAL_CALENDAR):
	return BusyInterval(start=start, end=end, source=source)


class TestConflicts(unittest.TestCase):
	"""Tests for conflicts()."""

	def setUp(self):
		self.slot = slot(datetime(2026, 1, 19, 10, 0), datetime(2026, 1, 19, 10, 30))

	def test_partial_overlap(self):
		self.assertTrue(conflicts(self.slot, busy(datetime(2026, 1, 19, 10, 15), datetime(2026, 1, 19, 11, 0))))
		self.assertTrue(conflicts(self.slot, busy(datetime(2026, 1, 19, 9, 45), datetime(2026, 1, 19, 10, 15))))

	def test_touching_intervals_do_not_conflict(self):
		self.assertFalse(conflicts(self.slot, busy(datetime(2026, 1, 19, 10, 30), datetime(2026, 1, 19, 11, 0))))
		self.assertFalse(conflicts(self.slot, busy(datetime(2026, 1, 19, 9, 30), datetime(2026, 1, 19, 10, 0))))

	def test_containment_conflicts(self):
		# El intervalo contiene al slot
		self.assertTrue(conflicts(self.slot, busy(datetime(2026, 1, 19, 9, 0), datetime(2026, 1, 19, 12, 0))))
		# El slot contiene al intervalo
		self.assertTrue(conflicts(self.slot, busy(datetime(2026, 1, 19, 10, 10), datetime(2026, 1, 19, 10, 20))))

	def test_identical_interval_conflicts(self):
		self.assertTrue(conflicts(self.slot, busy(self.slot.start, self.slot.end)))

	def test_scheduled_meeting_uses_same_rule_by_default(self):
		meeting = busy(datetime(2026, 1, 12, 10, 0), datetime(2026, 1, 12, 10, 30), SOURCE_SCHEDULED_MEETING)

		self.assertFalse(conflicts(self.slot, meeting))
		self.assertFalse(conflicts(self.slot, meeting, match_scheduled_time_of_day=False))

	def test_same_time_of_day_rule_is_opt_in(self):
		"""Con el flag, un meeting de otra fecha bloquea la misma hora:minuto."""
		meeting = busy(datetime(2026, 1, 12, 10, 0), datetime(2026, 1, 12, 10, 30), SOURCE_SCHEDULED_MEETING)

		self.assertTrue(conflicts(self.slot, meeting, match_scheduled_time_of_day=True))

		later_slot = slot(datetime(2026, 1, 19, 10, 30), datetime(2026, 1, 19, 11, 0))
		self.assertFalse(conflicts(later_slot, meeting, match_scheduled_time_of_day=True))

	def test_flag_does_not_affect_external_events(self):
		event = busy(datetime(2026, 1, 12, 10, 0), datetime(2026, 1, 12, 10, 30))

		self.assertFalse(conflicts(self.slot, event, match_scheduled_time_of_day=True))


class TestFindConflict(unittest.TestCase):
	"""Tests for find_conflict()."""

	def test_returns_first_conflicting_interval(self):
		candidate = slot(datetime(2026, 1, 19, 10, 0), datetime(2026, 1, 19, 10, 30))
		free = busy(datetime(2026, 1, 19, 8, 0), datetime(2026, 1, 19, 9, 0))
		blocking = busy(datetime(2026, 1, 19, 10, 0), datetime(2026, 1, 19, 11, 0), SOURCE_SCHEDULED_MEETING)

		self.assertIs(find_conflict(candidate, [free, blocking]), blocking)

	def test_none_without_conflicts(self):
		candidate = slot(datetime(2026, 1, 19, 10, 0), datetime(2026, 1, 19, 10, 30))

		self.assertIsNone(find_conflict(candidate, []))
		self.assertIsNone(find_conflict(candidate, [busy(datetime(2026, 1, 19, 11, 0), datetime(2026, 1, 19, 12, 0))]))


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
