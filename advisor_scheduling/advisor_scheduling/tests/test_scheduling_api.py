"""
Tests for api/scheduling_api.py

Tests the whitelisted availability and booking endpoints against a
bench site (bench run-tests --app advisor_scheduling).
"""

import importlib.util
import unittest

if importlib.util.find_spec("frappe") is None:
	raise unittest.SkipTest("frappe is not installed")

import frappe
from frappe.tests.utils import FrappeTestCase

if not getattr(frappe.local, "site", None):
	raise unittest.SkipTest("no Frappe site initialized (use bench run-tests)")

from advisor_scheduling.api.scheduling_api import (
	add_availability_window,
	check_availability_window,
	delete_availability_window,
	get_available_slots,
	get_my_availability,
	prepare_booking,
	suggest_availability_window,
	update_availability_window,
)
from advisor_scheduling.advisor_scheduling.config import get_scheduling_settings
from advisor_scheduling.api.shared import check_rate_limit, reset_rate_limit


TEST_ADVISOR = "scheduling-advisor@example.com"


class SchedulingAPITestCase(FrappeTestCase):
	"""Base con un advisor de prueba sin ventanas."""

	def setUp(self):
		if not frappe.db.exists("User", TEST_ADVISOR):
			frappe.get_doc({
				"doctype": "User",
				"email": TEST_ADVISOR,
				"first_name": "Scheduling Advisor",
				"send_welcome_email": 0
			}).insert(ignore_permissions=True)

		for name in frappe.get_all("Availability Window", filters={"advisor": TEST_ADVISOR}, pluck="name"):
			frappe.delete_doc("Availability Window", name, ignore_permissions=True)

		for action in ("get_available_slots", "prepare_booking"):
			reset_rate_limit(action)

		frappe.set_user(TEST_ADVISOR)

	def tearDown(self):
		"""Clean up after tests."""
		frappe.set_user("Administrator")
		frappe.db.rollback()


class TestAvailabilityEndpoints(SchedulingAPITestCase):
	"""Tests for the advisor availability endpoints."""

	def test_add_and_list_windows(self):
		created = add_availability_window("monday", "09:00", "12:00")

		self.assertEqual(created["weekday"], "monday")
		self.assertEqual(created["start_time"], "09:00")
		self.assertEqual([w["id"] for w in get_my_availability()], [created["id"]])

	def test_add_overlapping_window_fails(self):
		add_availability_window("monday", "09:00", "12:00")

		with self.assertRaises(frappe.ValidationError):
			add_availability_window("Monday", "11:00", "13:00")

	def test_check_availability_window(self):
		existing = add_availability_window("tuesday", "10:00", "12:00")

		result = check_availability_window("tuesday", "11:00", "13:00")
		self.assertFalse(result["valid"])
		self.assertEqual(result["conflicting_window"]["id"], existing["id"])

		self.assertTrue(check_availability_window("tuesday", "12:00", "13:00")["valid"])
		self.assertTrue(check_availability_window("tuesday", "10:00", "13:00", name=existing["id"])["valid"])

	def test_update_window(self):
		window = add_availability_window("wednesday", "09:00", "10:00")

		updated = update_availability_window(window["id"], end_time="11:30")

		self.assertEqual(updated["end_time"], "11:30")

	def test_delete_window(self):
		window = add_availability_window("thursday", "09:00", "10:00")

		result = delete_availability_window(window["id"])

		self.assertTrue(result["success"])
		self.assertFalse(frappe.db.exists("Availability Window", window["id"]))

	def test_suggest_window(self):
		add_availability_window("monday", "09:00", "17:00")

		suggestion = suggest_availability_window()

		self.assertEqual(suggestion["weekday"], "tuesday")

	def test_guest_cannot_manage_windows(self):
		frappe.set_user("Guest")

		with self.assertRaises(frappe.PermissionError):
			get_my_availability()


class TestBookingEndpoints(SchedulingAPITestCase):
	"""Tests for the public slot and booking endpoints."""

	def setUp(self):
		super().setUp()

		for weekday in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"):
			add_availability_window(weekday, "00:00", "23:30")

		self.link = frappe.get_doc({
			"doctype": "Scheduling Link",
			"title": "Intro call",
			"advisor": TEST_ADVISOR,
			"meeting_length": 30,
			"max_days_in_advance": 2,
			"custom_questions": [{"question": "Company?"}]
		}).insert(ignore_permissions=True)

	def test_get_available_slots_structure(self):
		result = get_available_slots(self.link.name)

		for key in ("slots", "days", "no_availability", "skipped", "timezone", "meeting_length", "questions"):
			self.assertIn(key, result)

		self.assertFalse(result["no_availability"])
		self.assertEqual(result["meeting_length"], 30)
		self.assertEqual(result["questions"][0]["question"], "Company?")

		starts = [slot["start"] for slot in result["slots"]]
		self.assertEqual(starts, sorted(starts))

	def test_scheduled_meeting_blocks_slot(self):
		first = get_available_slots(self.link.name)["slots"][0]

		frappe.get_doc({
			"doctype": "Scheduled Meeting",
			"advisor": TEST_ADVISOR,
			"scheduling_link": self.link.name,
			"status": "Scheduled",
			"scheduled_for": first["start"],
			"duration_minutes": 30,
			"email": "visitor@example.com",
			"linkedin": "linkedin.com/in/visitor"
		}).insert(ignore_permissions=True)

		starts = [slot["start"] for slot in get_available_slots(self.link.name)["slots"]]
		self.assertNotIn(first["start"], starts)

	def test_prepare_booking(self):
		result = get_available_slots(self.link.name)
		slot = result["slots"][0]
		question_id = result["questions"][0]["question_id"]

		payload = prepare_booking(
			self.link.name,
			slot["start"],
			"Visitor@Example.com",
			"linkedin.com/in/visitor",
			answers={question_id: "Acme"}
		)

		self.assertEqual(payload["scheduled_for"], slot["start"].replace(" ", "T"))
		self.assertEqual(payload["advisor"], TEST_ADVISOR)
		self.assertEqual(payload["email"], "visitor@example.com")
		self.assertEqual(payload["answers"][0]["answer"], "Acme")

	def test_prepare_booking_requires_answers(self):
		slot = get_available_slots(self.link.name)["slots"][0]

		with self.assertRaises(frappe.ValidationError):
			prepare_booking(self.link.name, slot["start"], "visitor@example.com", "linkedin.com/in/visitor")

	def test_prepare_booking_rejects_unavailable_slot(self):
		with self.assertRaises(frappe.ValidationError):
			prepare_booking(
				self.link.name,
				"2000-01-03 09:00:00",
				"visitor@example.com",
				"linkedin.com/in/visitor",
				answers={}
			)

	def test_honeypot(self):
		slot = get_available_slots(self.link.name)["slots"][0]

		with self.assertRaises(frappe.ValidationError):
			prepare_booking(
				self.link.name,
				slot["start"],
				"visitor@example.com",
				"linkedin.com/in/visitor",
				honeypot="http://spam.example.com"
			)

	def test_unknown_link(self):
		with self.assertRaises(frappe.DoesNotExistError):
			get_available_slots("missing-link")

	def test_prepare_booking_logs_unexpected_errors(self):
		slot = get_available_slots(self.link.name)["slots"][0]
		logged = frappe.db.count("Error Log", {"method": "API Error"})

		with self.assertRaises(frappe.ValidationError):
			prepare_booking(
				self.link.name,
				slot["start"],
				"visitor@example.com",
				"linkedin.com/in/visitor",
				answers="{not json"
			)

		self.assertEqual(frappe.db.count("Error Log", {"method": "API Error"}), logged + 1)

	def test_zero_horizon_link_has_no_availability(self):
		self.link.max_days_in_advance = 0
		self.link.save(ignore_permissions=True)

		result = get_available_slots(self.link.name)

		self.assertTrue(result["no_availability"])
		self.assertEqual(result["slots"], [])


class TestSchedulingLinkDefaults(SchedulingAPITestCase):
	"""Tests for the booking horizon default of new links."""

	def test_blank_horizon_takes_settings_default(self):
		link = frappe.get_doc({
			"doctype": "Scheduling Link",
			"advisor": TEST_ADVISOR,
			"meeting_length": 30
		}).insert(ignore_permissions=True)

		default = get_scheduling_settings().default_max_days_in_advance
		self.assertEqual(frappe.db.get_value("Scheduling Link", link.name, "max_days_in_advance"), default)

	def test_explicit_zero_horizon_is_kept(self):
		link = frappe.get_doc({
			"doctype": "Scheduling Link",
			"advisor": TEST_ADVISOR,
			"meeting_length": 30,
			"max_days_in_advance": 0
		}).insert(ignore_permissions=True)

		self.assertEqual(frappe.db.get_value("Scheduling Link", link.name, "max_days_in_advance"), 0)


class TestRateLimit(SchedulingAPITestCase):
	"""Tests for the guest endpoint rate limiter."""

	def test_limit_and_reset(self):
		reset_rate_limit("test_action")

		check_rate_limit("test_action", limit=2, seconds=60)
		check_rate_limit("test_action", limit=2, seconds=60)
		with self.assertRaises(frappe.TooManyRequestsError):
			check_rate_limit("test_action", limit=2, seconds=60)

		reset_rate_limit("test_action")
		check_rate_limit("test_action", limit=2, seconds=60)
		reset_rate_limit("test_action")
