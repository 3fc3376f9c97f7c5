"""Tests for the activity/user models and the model-backed record store."""
from datetime import date

from django.core.exceptions import ValidationError
from django.test import TestCase

from ActivityEngine.activity_reports.models import Activity, PlatformUser
from ActivityEngine.activity_reports.records import ModelRecordStore

from .sample_data import ACTIVITIES, USERS


class ActivityModelTests(TestCase):
    def setUp(self):
        for data in USERS:
            PlatformUser.from_dict(data)
        for data in ACTIVITIES:
            Activity.from_dict(data)

    def test_from_dict_maps_camel_case_fields(self):
        activity = Activity.objects.get(activity_id="1")
        self.assertEqual(activity.student_id, "1")
        self.assertEqual(activity.activity_type, "academic")
        self.assertEqual(activity.date, date(2024, 1, 15))
        self.assertEqual(activity.reviewed_by, "Dr. Sarah Wilson")
        self.assertIsNotNone(activity.reviewed_at)

    def test_from_dict_updates_existing_rows(self):
        Activity.from_dict(dict(ACTIVITIES[1], title="Hackathon Runner-up"))
        self.assertEqual(Activity.objects.count(), 3)
        self.assertEqual(Activity.objects.get(activity_id="2").title, "Hackathon Runner-up")

    def test_reviewer_fields_invariant(self):
        for activity in Activity.objects.all():
            activity.full_clean()

        pending = Activity.objects.get(activity_id="2")
        pending.reviewed_by = "Dr. Sarah Wilson"
        with self.assertRaises(ValidationError):
            pending.full_clean()

        approved = Activity.objects.get(activity_id="1")
        approved.reviewed_at = None
        with self.assertRaises(ValidationError):
            approved.full_clean()

    def test_mark_reviewed(self):
        activity = Activity.objects.get(activity_id="2")
        activity.mark_reviewed("rejected", "Dr. Sarah Wilson", "Please attach a certificate")
        activity.refresh_from_db()
        self.assertEqual(activity.status, "rejected")
        self.assertEqual(activity.feedback, "Please attach a certificate")
        self.assertIsNotNone(activity.reviewed_at)
        activity.full_clean()

    def test_mark_reviewed_rejects_bad_input(self):
        activity = Activity.objects.get(activity_id="2")
        with self.assertRaises(ValueError):
            activity.mark_reviewed("pending", "Dr. Sarah Wilson")
        with self.assertRaises(ValueError):
            activity.mark_reviewed("approved", "")

    def test_model_record_store_snapshot(self):
        snapshot = ModelRecordStore().snapshot()
        self.assertEqual(len(snapshot.activities), 3)
        self.assertEqual(len(snapshot.users), 3)
        self.assertEqual([s.name for s in snapshot.students], ["Alice Johnson", "Bob Smith"])
        first = snapshot.activities[0]
        self.assertEqual(first.id, "1")
        self.assertEqual(first.date, date(2024, 1, 15))
        self.assertEqual(snapshot.users[2].department_or_course, "Computer Science")
