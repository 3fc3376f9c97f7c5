"""Tests for report aggregation."""
from datetime import date

from django.test import SimpleTestCase
from django.utils import timezone

from ActivityEngine.activity_reports.analytics import (
    build_report_data,
    generate_report_data,
    monthly_trends,
    percentage,
)
from ActivityEngine.activity_reports.filters import ReportFilter
from ActivityEngine.activity_reports.records import ActivityRecord, RecordSnapshot

from .sample_data import TWO_ACTIVITIES, make_store

TODAY = date(2024, 6, 15)


class ScenarioTests(SimpleTestCase):
    def setUp(self):
        self.snapshot = make_store(activities=TWO_ACTIVITIES).snapshot()

    def test_unfiltered(self):
        data = generate_report_data(self.snapshot, ReportFilter(), today=TODAY)
        self.assertEqual(data.summary.total_activities, 2)
        self.assertEqual(data.summary.approval_rate, 50)
        self.assertEqual(data.summary.activities_by_type, {"academic": 1, "extracurricular": 1})

    def test_academic_only(self):
        data = generate_report_data(self.snapshot, ReportFilter.build(activity_types=["academic"]), today=TODAY)
        self.assertEqual(len(data.activities), 1)
        self.assertEqual(data.summary.total_activities, 1)
        self.assertEqual(data.summary.approval_rate, 100)

    def test_year_without_matches(self):
        data = generate_report_data(self.snapshot, ReportFilter.build(years=[2023]), today=TODAY)
        self.assertEqual(data.activities, ())
        self.assertEqual(data.summary.approval_rate, 0)
        self.assertEqual(data.summary.activities_by_type, {})
        self.assertEqual(data.summary.activities_by_department, {})


class AggregationTests(SimpleTestCase):
    def setUp(self):
        self.snapshot = make_store().snapshot()

    def test_type_counts_sum_to_total(self):
        for report_filter in (ReportFilter(), ReportFilter.build(years=[2024]),
                              ReportFilter.build(departments=["Computer Science"])):
            data = generate_report_data(self.snapshot, report_filter, today=TODAY)
            self.assertEqual(sum(data.summary.activities_by_type.values()), data.summary.total_activities)
            self.assertTrue(0 <= data.summary.approval_rate <= 100)

    def test_totals_and_departments(self):
        data = generate_report_data(self.snapshot, today=TODAY)
        self.assertEqual(data.summary.total_students, 2)
        self.assertEqual(data.summary.approval_rate, 67)
        self.assertEqual(
            data.summary.activities_by_department,
            {"Computer Science": 2, "Electrical Engineering": 1},
        )

    def test_missing_student_resolves_to_unknown(self):
        orphan = ActivityRecord.from_dict({"id": "o", "studentId": "999", "type": "academic", "date": "2024-05-01"})
        data = build_report_data([orphan], [], self.snapshot.users, today=TODAY)
        self.assertEqual(data.summary.activities_by_department, {"Unknown": 1})

    def test_departments_resolve_against_unfiltered_users(self):
        # The department table looks owners up in the full user list even when
        # the student list passed in has been narrowed (or is empty).
        data = build_report_data(self.snapshot.activities, [], self.snapshot.users, today=TODAY)
        self.assertEqual(data.summary.total_students, 0)
        self.assertEqual(
            data.summary.activities_by_department,
            {"Computer Science": 2, "Electrical Engineering": 1},
        )

    def test_department_filter_keeps_independent_lookup(self):
        data = generate_report_data(
            self.snapshot, ReportFilter.build(departments=["Electrical Engineering"]), today=TODAY
        )
        self.assertEqual(data.summary.activities_by_department, {"Electrical Engineering": 1})
        self.assertEqual([s.name for s in data.students], ["Bob Smith"])

    def test_percentage_rounds_half_up(self):
        self.assertEqual(percentage(1, 8), 13)
        self.assertEqual(percentage(1, 3), 33)
        self.assertEqual(percentage(2, 3), 67)
        self.assertEqual(percentage(5, 0), 0)

    def test_to_dict(self):
        data = generate_report_data(self.snapshot, today=TODAY).to_dict()
        self.assertEqual(data["summary"]["total_activities"], 3)
        self.assertEqual(len(data["summary"]["monthly_trends"]), 12)
        self.assertEqual(data["activities"][0]["date"], "2024-01-15")
        self.assertEqual(len(data["students"]), 2)


class MonthlyTrendTests(SimpleTestCase):
    def test_window_is_twelve_months_ending_this_month(self):
        activities = make_store().snapshot().activities
        trends = monthly_trends(activities, today=TODAY)
        self.assertEqual(len(trends), 12)
        self.assertEqual(trends[0].month, "Jul 2023")
        self.assertEqual(trends[-1].month, "Jun 2024")
        counts = {t.month: t.count for t in trends}
        self.assertEqual(counts["Jan 2024"], 2)
        self.assertEqual(counts["Feb 2024"], 1)
        self.assertEqual(sum(counts.values()), 3)

    def test_activities_outside_window_are_not_counted(self):
        activities = make_store().snapshot().activities
        trends = monthly_trends(activities, today=date(2026, 1, 1))
        self.assertEqual(trends[0].month, "Feb 2025")
        self.assertTrue(all(t.count == 0 for t in trends))

    def test_defaults_to_current_month(self):
        trends = generate_report_data(RecordSnapshot()).summary.monthly_trends
        self.assertEqual(len(trends), 12)
        self.assertEqual(trends[-1].month, timezone.localdate().strftime("%b %Y"))
        self.assertTrue(all(t.count == 0 for t in trends))
