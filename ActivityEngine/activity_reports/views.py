from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET
from typing import Any, Dict, Optional
from datetime import date
import logging

from .analytics import ReportData, generate_report_data
from .exporters import (
    RenderedReport,
    ReportFormat,
    ReportGenerationError,
    TEMPLATE_LAYOUTS,
    RENDERERS,
    render_report,
    report_setting,
)
from .filters import ReportFilter, apply_filters
from .records import ACTIVITY_TYPES, ModelRecordStore, RecordStore

logger = logging.getLogger(__name__)

GENERIC_EXPORT_ERROR = "Error generating report. Please try again."


class ReportEngine:
    """Loads a record snapshot, aggregates it and renders accreditation reports."""

    def __init__(self, store: Optional[RecordStore] = None):
        self.store = store or ModelRecordStore()

    def load_report_data(
        self, report_filter: Optional[ReportFilter] = None, today: Optional[date] = None
    ) -> ReportData:
        """Recompute report data from a fresh snapshot of the record store."""
        return generate_report_data(self.store.snapshot(), report_filter, today=today)

    def export_report(
        self,
        report_data: ReportData,
        report_format: ReportFormat,
        report_filter: Optional[ReportFilter] = None,
    ) -> RenderedReport:
        """Render report_data as a downloadable document.

        Args:
            report_data (ReportData): Aggregates and filtered records to render
            report_format (ReportFormat): Output kind and template
            report_filter (ReportFilter, optional): Filters summarised in the header

        Returns:
            RenderedReport: filename, content type and document bytes

        Raises:
            ReportGenerationError: If the document could not be built
        """
        return render_report(report_data, report_format, report_filter)

    def filter_options(self, today: Optional[date] = None) -> Dict[str, Any]:
        """Values offered by the analytics filter panel."""
        current_year = (today or timezone.localdate()).year
        return {
            "years": [current_year - i for i in range(5)],
            "departments": list(report_setting("DEPARTMENTS")),
            "activity_types": list(ACTIVITY_TYPES),
            "formats": list(RENDERERS),
            "templates": list(TEMPLATE_LAYOUTS),
        }


@require_GET
def analytics_dashboard(request):
    """Summary statistics for the current filter selection."""
    engine = ReportEngine()
    report_filter = ReportFilter.from_query(request.GET)
    logger.debug("Analytics request with filters: %s", report_filter.describe())

    report_data = engine.load_report_data(report_filter)
    return JsonResponse({
        "filters": report_filter.to_dict(),
        "filter_summary": report_filter.describe(),
        "summary": report_data.to_dict(include_records=False)["summary"],
        "filter_options": engine.filter_options(),
    })


@require_GET
def activity_list(request):
    """Filtered activity records as JSON."""
    store = ModelRecordStore()
    snapshot = store.snapshot()
    report_filter = ReportFilter.from_query(request.GET)
    activities, _ = apply_filters(snapshot.activities, snapshot.users, report_filter)
    return JsonResponse({
        "success": True,
        "count": len(activities),
        "data": [a.to_dict() for a in activities],
        "timestamp": timezone.now().isoformat(),
    })


@require_GET
def export_report(request):
    """Render the filtered report in the requested format and send it as a download."""
    try:
        report_format = ReportFormat.parse(
            request.GET.get("format", "PDF"), request.GET.get("template", "Internal")
        )
    except ValueError as e:
        logger.warning("Rejected export request: %s", e)
        return JsonResponse({"error": str(e)}, status=400)

    engine = ReportEngine()
    report_filter = ReportFilter.from_query(request.GET)

    try:
        report_data = engine.load_report_data(report_filter)
        rendered = engine.export_report(report_data, report_format, report_filter)
    except ReportGenerationError as e:
        logger.error("Report export failed: %s", e, exc_info=True)
        return JsonResponse({"error": GENERIC_EXPORT_ERROR}, status=500)

    response = HttpResponse(rendered.content, content_type=rendered.content_type)
    response["Content-Disposition"] = f'attachment; filename="{rendered.filename}"'
    return response
