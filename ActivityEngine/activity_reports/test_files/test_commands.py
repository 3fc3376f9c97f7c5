"""Tests for the seed and export management commands."""
import tempfile
from io import StringIO
from pathlib import Path
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from ActivityEngine.activity_reports import exporters
from ActivityEngine.activity_reports.exporters import OutputKind
from ActivityEngine.activity_reports.models import Activity, PlatformUser


class SeedActivitiesCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_activities", stdout=StringIO())
        call_command("seed_activities", stdout=StringIO())
        self.assertEqual(PlatformUser.objects.count(), 4)
        self.assertEqual(Activity.objects.count(), 3)
        self.assertEqual(Activity.objects.filter(status="approved").count(), 2)


class ExportActivityReportCommandTests(TestCase):
    def setUp(self):
        call_command("seed_activities", stdout=StringIO())

    def test_writes_report_file(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            out = StringIO()
            call_command(
                "export_activity_report",
                "--format", "Excel",
                "--template", "NIRF",
                "--type", "academic",
                "--output-dir", tmp_dir,
                stdout=out,
            )
            files = list(Path(tmp_dir).iterdir())
            self.assertEqual(len(files), 1)
            self.assertRegex(files[0].name, r"^NIRF_Activity_Report_\d{4}-\d{2}-\d{2}\.xlsx$")
            self.assertIn("Types: academic", out.getvalue())
            self.assertIn("1 activities", out.getvalue())

    def test_unknown_template_is_rejected(self):
        with self.assertRaises(CommandError):
            call_command("export_activity_report", "--template", "UGC", stdout=StringIO())

    def test_missing_output_dir_is_rejected(self):
        with self.assertRaises(CommandError):
            call_command(
                "export_activity_report", "--output-dir", "/nonexistent/reports", stdout=StringIO()
            )

    def test_render_failure_is_logged_and_reported(self):
        def broken(*args, **kwargs):
            raise TypeError("unexpected null field")

        failing = OutputKind("xlsx", "application/octet-stream", broken)
        with tempfile.TemporaryDirectory() as tmp_dir:
            with mock.patch.dict(exporters.RENDERERS, {"Excel": failing}):
                with self.assertLogs(
                    "ActivityEngine.activity_reports.management.commands.export_activity_report",
                    level="ERROR",
                ) as logs:
                    with self.assertRaisesMessage(CommandError, "Error generating report. Please try again."):
                        call_command(
                            "export_activity_report", "--format", "Excel", "--output-dir", tmp_dir,
                            stdout=StringIO(),
                        )
            self.assertEqual(list(Path(tmp_dir).iterdir()), [])
        record = logs.records[0]
        self.assertEqual(record.msg, "Report export failed: %s")
        self.assertIn("unexpected null field", record.getMessage())
