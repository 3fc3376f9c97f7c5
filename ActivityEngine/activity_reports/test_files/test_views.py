"""Tests for the analytics and export endpoints."""
from io import StringIO
from unittest import mock

from django.conf import settings
from django.core.management import call_command
from django.test import Client, TestCase, override_settings

from ActivityEngine.activity_reports import exporters
from ActivityEngine.activity_reports.exporters import OutputKind


class ReportViewTests(TestCase):
    def setUp(self):
        call_command("seed_activities", stdout=StringIO())
        self.client = Client()

    def test_analytics_summary(self):
        response = self.client.get("/reports/")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        summary = payload["summary"]
        self.assertEqual(summary["total_activities"], 3)
        self.assertEqual(summary["total_students"], 2)
        self.assertEqual(summary["approval_rate"], 67)
        self.assertEqual(
            summary["activities_by_type"],
            {"academic": 1, "extracurricular": 1, "volunteering": 1},
        )
        self.assertEqual(len(summary["monthly_trends"]), 12)
        self.assertEqual(payload["filter_summary"], "No filters applied")
        self.assertEqual(payload["filter_options"]["templates"], ["NAAC", "AICTE", "NIRF", "Internal"])
        self.assertEqual(len(payload["filter_options"]["years"]), 5)

    def test_analytics_with_filters(self):
        response = self.client.get("/reports/", {"activity_type": "academic"})
        summary = response.json()["summary"]
        self.assertEqual(summary["total_activities"], 1)
        self.assertEqual(summary["approval_rate"], 100)

        response = self.client.get("/reports/", {"year": ["2023"]})
        summary = response.json()["summary"]
        self.assertEqual(summary["total_activities"], 0)
        self.assertEqual(summary["approval_rate"], 0)
        self.assertEqual(summary["activities_by_type"], {})

    def test_analytics_ignores_malformed_filters(self):
        response = self.client.get("/reports/", {"year": "soon", "start_date": "2024-01-01"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["summary"]["total_activities"], 3)

    def test_activity_list(self):
        response = self.client.get("/reports/activities/", {"department": "Electrical Engineering"})
        payload = response.json()
        self.assertTrue(payload["success"])
        self.assertEqual(payload["count"], 1)
        self.assertEqual(payload["data"][0]["title"], "Community Tech Support")

    def test_export_excel_download(self):
        response = self.client.get("/reports/export/", {"format": "Excel", "template": "NAAC"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response["Content-Type"],
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        self.assertRegex(
            response["Content-Disposition"],
            r'^attachment; filename="NAAC_Activity_Report_\d{4}-\d{2}-\d{2}\.xlsx"$',
        )
        self.assertTrue(response.content.startswith(b"PK"))

    def test_export_pdf_download(self):
        response = self.client.get("/reports/export/", {"format": "PDF", "template": "NIRF", "year": "2023"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_export_rejects_unknown_format(self):
        response = self.client.get("/reports/export/", {"format": "Word", "template": "NAAC"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Unsupported report format", response.json()["error"])

    def test_export_failure_returns_generic_error(self):
        def broken(*args, **kwargs):
            raise AttributeError("'NoneType' object has no attribute 'strftime'")

        failing = OutputKind("pdf", "application/pdf", broken)
        with mock.patch.dict(exporters.RENDERERS, {"PDF": failing}):
            with self.assertLogs("ActivityEngine.activity_reports.views", level="ERROR"):
                response = self.client.get("/reports/export/", {"format": "PDF", "template": "NAAC"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Error generating report. Please try again."})

    def test_export_requires_get(self):
        response = self.client.post("/reports/export/", {"format": "PDF", "template": "NAAC"})
        self.assertEqual(response.status_code, 405)

    def test_filter_options_departments_come_from_settings(self):
        response = self.client.get("/reports/")
        self.assertEqual(
            response.json()["filter_options"]["departments"],
            settings.ACTIVITY_REPORTS["DEPARTMENTS"],
        )
        reports_settings = {k: v for k, v in settings.ACTIVITY_REPORTS.items() if k != "DEPARTMENTS"}
        with override_settings(ACTIVITY_REPORTS=reports_settings):
            response = self.client.get("/reports/")
        self.assertEqual(response.json()["filter_options"]["departments"], [])
