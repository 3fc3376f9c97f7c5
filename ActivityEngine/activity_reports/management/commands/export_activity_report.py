"""
Django management command to render an accreditation report to a file.

Usage:
    python manage.py export_activity_report --format PDF --template NAAC [options]
"""

from django.core.management.base import BaseCommand, CommandError
from pathlib import Path
import logging

from ActivityEngine.activity_reports.exporters import ReportFormat, ReportGenerationError
from ActivityEngine.activity_reports.filters import ReportFilter
from ActivityEngine.activity_reports.views import ReportEngine

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Render a NAAC/AICTE/NIRF/Internal activity report as PDF or Excel'

    def add_arguments(self, parser):
        parser.add_argument(
            '--format',
            default='PDF',
            help='Output format: PDF or Excel (default: PDF)',
        )
        parser.add_argument(
            '--template',
            default='Internal',
            help='Report template: NAAC, AICTE, NIRF or Internal (default: Internal)',
        )
        parser.add_argument(
            '--year',
            action='append',
            default=[],
            help='Restrict to activities dated in this year (repeatable)',
        )
        parser.add_argument(
            '--department',
            action='append',
            default=[],
            help='Restrict to students of this department or course (repeatable)',
        )
        parser.add_argument(
            '--type',
            dest='activity_types',
            action='append',
            default=[],
            help='Restrict to this activity type (repeatable)',
        )
        parser.add_argument('--start-date', help='Inclusive start date (YYYY-MM-DD)')
        parser.add_argument('--end-date', help='Inclusive end date (YYYY-MM-DD)')
        parser.add_argument(
            '--output-dir',
            default='.',
            help='Directory to write the report into (default: current directory)',
        )

    def handle(self, *args, **options):
        try:
            report_format = ReportFormat.parse(options['format'], options['template'])
        except ValueError as e:
            raise CommandError(str(e))

        report_filter = ReportFilter.build(
            years=options['year'],
            departments=options['department'],
            activity_types=options['activity_types'],
            start_date=options['start_date'],
            end_date=options['end_date'],
        )
        output_dir = Path(options['output_dir'])
        if not output_dir.is_dir():
            raise CommandError(f'Output directory does not exist: {output_dir}')

        self.stdout.write(f'Filters: {report_filter.describe()}')

        engine = ReportEngine()
        report_data = engine.load_report_data(report_filter)
        try:
            rendered = engine.export_report(report_data, report_format, report_filter)
        except ReportGenerationError as e:
            logger.error('Report export failed: %s', e, exc_info=True)
            raise CommandError('Error generating report. Please try again.')

        path = output_dir / rendered.filename
        path.write_bytes(rendered.content)

        self.stdout.write(self.style.SUCCESS(
            f'Wrote {path} ({report_data.summary.total_activities} activities, '
            f'approval rate {report_data.summary.approval_rate}%)'
        ))
