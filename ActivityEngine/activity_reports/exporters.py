"""Accreditation report rendering (PDF via reportlab, Excel via openpyxl).

Each output kind is a pure function from ``ReportData`` to bytes. Templates
only differ in which sections they contribute, listed in ``TEMPLATE_LAYOUTS``;
adding a template means registering a layout, not touching the shared
header/summary code.
"""

from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple
from xml.sax.saxutils import escape
import io
import logging

from django.conf import settings
from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfgen import canvas
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .analytics import ReportData, percentage
from .filters import ReportFilter
from .records import format_display_date

logger = logging.getLogger(__name__)

DEFAULT_REPORT_SETTINGS = {
    "PLATFORM_NAME": "Student Activity Platform",
    "REPORT_TITLE": "Student Activity Report",
    "DETAIL_ROW_LIMIT": 100,
    "DETAIL_TABLE_THRESHOLD": 100,
    "DEPARTMENTS": [],
}

TYPE_LABELS = (
    ("academic", "Academic"),
    ("extracurricular", "Extra-curricular"),
    ("volunteering", "Volunteering"),
)

HEADER_BLUE = "4472C4"


def report_setting(key: str):
    return getattr(settings, "ACTIVITY_REPORTS", {}).get(key, DEFAULT_REPORT_SETTINGS[key])


class ReportGenerationError(Exception):
    """Raised when a report document could not be produced."""


@dataclass(frozen=True)
class TemplateLayout:
    # Section keys into PDF_SECTIONS / WORKBOOK_SHEETS, in output order
    pdf_sections: Tuple[str, ...] = ()
    workbook_sheets: Tuple[str, ...] = ()


TEMPLATE_LAYOUTS: Dict[str, TemplateLayout] = {
    "NAAC": TemplateLayout(
        pdf_sections=("department_distribution",),
        workbook_sheets=("criteria",),
    ),
    "AICTE": TemplateLayout(
        pdf_sections=("department_distribution",),
        workbook_sheets=("criteria",),
    ),
    "NIRF": TemplateLayout(
        pdf_sections=("monthly_trends",),
        workbook_sheets=("monthly_trends",),
    ),
    "Internal": TemplateLayout(
        pdf_sections=("activity_detail",),
        workbook_sheets=("monthly_trends",),
    ),
}


@dataclass(frozen=True)
class RenderedReport:
    filename: str
    content_type: str
    content: bytes


def footer_text(page: int, page_count: int, template: str) -> str:
    return f"Page {page} of {page_count} | {report_setting('PLATFORM_NAME')} | {template} Report"


def report_title(template: str) -> str:
    return f"{template} {report_setting('REPORT_TITLE')}"


def report_filename(template: str, extension: str, generated_at: Optional[datetime] = None) -> str:
    generated_at = generated_at or timezone.localtime()
    return f"{template}_Activity_Report_{generated_at.date().isoformat()}.{extension}"


def _executive_summary_rows(data: ReportData) -> List[list]:
    summary = data.summary
    rows = [
        ["Total Activities", summary.total_activities],
        ["Active Students", summary.total_students],
        ["Approval Rate", f"{summary.approval_rate}%"],
    ]
    for activity_type, label in TYPE_LABELS:
        rows.append([f"{label} Activities", summary.type_count(activity_type)])
    return rows


def _department_rows(data: ReportData) -> List[list]:
    total = data.summary.total_activities
    return [
        [dept, count, f"{percentage(count, total)}%"]
        for dept, count in data.summary.activities_by_department.items()
    ]


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

class NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output so every footer can show the page total."""

    def __init__(self, *args, template: str = "", **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []
        self._template = template

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for page_number, state in enumerate(self._saved_page_states, 1):
            self.__dict__.update(state)
            self._draw_footer(page_number, page_count)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)

    def _draw_footer(self, page_number: int, page_count: int):
        width, _ = self._pagesize
        self.saveState()
        self.setFont("Helvetica", 9)
        self.setFillColor(colors.grey)
        self.drawCentredString(width / 2, 20, footer_text(page_number, page_count, self._template))
        self.restoreState()


def _pdf_styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name='CenterTitle',
        parent=styles['Title'],
        alignment=TA_CENTER,
    ))
    styles.add(ParagraphStyle(
        name='SectionHeader',
        parent=styles['Heading2'],
        textColor=colors.HexColor('#1F4788'),
        spaceAfter=12,
    ))
    styles.add(ParagraphStyle(
        name='CellText',
        parent=styles['Normal'],
        fontSize=8,
        leading=10,
    ))
    return styles


def _pdf_table(rows: List[list], col_widths: List[int], font_size: int = 10) -> Table:
    t = Table(rows, colWidths=col_widths, repeatRows=1)
    t.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor('#' + HEADER_BLUE)),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), font_size),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.lightgrey]),
            ]
        )
    )
    return t


def _pdf_department_section(data: ReportData, template: str, styles) -> list:
    rows = [["Department", "Activities", "Percentage"]]
    rows.extend([dept, str(count), pct] for dept, count, pct in _department_rows(data))
    return [
        Paragraph("Department-wise Activity Distribution", styles["SectionHeader"]),
        _pdf_table(rows, [260, 110, 110]),
        Spacer(1, 20),
    ]


def _pdf_trends_section(data: ReportData, template: str, styles) -> list:
    rows = [["Month", "Activities"]]
    rows.extend([t.month, str(t.count)] for t in data.summary.monthly_trends)
    return [
        Paragraph("Monthly Activity Trends", styles["SectionHeader"]),
        _pdf_table(rows, [260, 220]),
        Spacer(1, 20),
    ]


def _pdf_detail_section(data: ReportData, template: str, styles) -> list:
    cell = styles["CellText"]
    rows = [["Student", "Activity", "Type", "Date", "Status"]]
    for activity in data.activities[:report_setting("DETAIL_ROW_LIMIT")]:
        rows.append([
            Paragraph(escape(activity.student_name or ""), cell),
            Paragraph(escape(activity.title or ""), cell),
            activity.activity_type,
            format_display_date(activity.date),
            activity.status,
        ])
    return [
        PageBreak(),
        Paragraph("Detailed Activity List", styles["SectionHeader"]),
        _pdf_table(rows, [100, 190, 80, 70, 60], font_size=8),
    ]


PDF_SECTIONS: Dict[str, Callable[[ReportData, str, object], list]] = {
    "department_distribution": _pdf_department_section,
    "monthly_trends": _pdf_trends_section,
    "activity_detail": _pdf_detail_section,
}


def _pdf_section_keys(data: ReportData, layout: TemplateLayout) -> List[str]:
    keys = list(layout.pdf_sections)
    if "activity_detail" not in keys and len(data.activities) <= report_setting("DETAIL_TABLE_THRESHOLD"):
        keys.append("activity_detail")
    return keys


def render_pdf_report(
    data: ReportData,
    template: str,
    report_filter: ReportFilter,
    generated_at: Optional[datetime] = None,
) -> bytes:
    """Render a paginated PDF report and return its bytes."""
    generated_at = generated_at or timezone.localtime()
    layout = TEMPLATE_LAYOUTS[template]
    styles = _pdf_styles()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        title=report_title(template),
        bottomMargin=50,
    )

    story = [
        Paragraph(escape(report_title(template)), styles["CenterTitle"]),
        Paragraph(f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}", styles["Normal"]),
        Paragraph(f"Report Filters: {escape(report_filter.describe())}", styles["Normal"]),
        Spacer(1, 20),
        Paragraph("Executive Summary", styles["SectionHeader"]),
    ]
    summary_rows = [["Metric", "Value"]]
    summary_rows.extend([label, str(value)] for label, value in _executive_summary_rows(data))
    story.append(_pdf_table(summary_rows, [260, 220]))
    story.append(Spacer(1, 20))

    for key in _pdf_section_keys(data, layout):
        story.extend(PDF_SECTIONS[key](data, template, styles))

    doc.build(story, canvasmaker=partial(NumberedCanvas, template=template))
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Excel
# ---------------------------------------------------------------------------

def _format_header(ws, row=1):
    """Apply header formatting to a row."""
    for cell in ws[row]:
        if cell.value is None:
            continue
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = PatternFill(start_color=HEADER_BLUE, end_color=HEADER_BLUE, fill_type="solid")
        cell.alignment = Alignment(horizontal="center", vertical="center")


def _auto_size_columns(ws):
    """Auto-size columns based on content."""
    for column in ws.columns:
        max_length = 0
        column_letter = get_column_letter(column[0].column)
        for cell in column:
            if cell.value is not None:
                max_length = max(max_length, len(str(cell.value)))
        ws.column_dimensions[column_letter].width = min(max_length + 2, 50)


def _summary_sheet(ws, data: ReportData, template: str, report_filter: ReportFilter, generated_at: datetime):
    ws.title = "Summary"
    ws.append([f"{report_setting('REPORT_TITLE')} - {template}"])
    ws['A1'].font = Font(bold=True, size=14)
    ws.append(["Generated on:", generated_at.strftime('%Y-%m-%d %H:%M:%S')])
    ws.append(["Report Filters:", report_filter.describe()])
    ws.append([])

    ws.append(["Executive Summary"])
    ws['A{}'.format(ws.max_row)].font = Font(bold=True)
    ws.append(["Metric", "Value"])
    _format_header(ws, row=ws.max_row)
    for row in _executive_summary_rows(data):
        ws.append(row)
    ws.append([])

    ws.append(["Department-wise Distribution"])
    ws['A{}'.format(ws.max_row)].font = Font(bold=True)
    ws.append(["Department", "Activities", "Percentage"])
    _format_header(ws, row=ws.max_row)
    for row in _department_rows(data):
        ws.append(row)
    _auto_size_columns(ws)


def _activities_sheet(wb, data: ReportData):
    ws = wb.create_sheet("Activities")
    ws.append([
        "Student Name",
        "Activity Title",
        "Activity Type",
        "Date",
        "Status",
        "Description",
        "Reviewed By",
        "Feedback",
    ])
    _format_header(ws)
    for activity in data.activities:
        ws.append([
            activity.student_name,
            activity.title,
            activity.activity_type,
            format_display_date(activity.date),
            activity.status,
            activity.description,
            activity.reviewed_by or "",
            activity.feedback or "",
        ])
    _auto_size_columns(ws)


def _students_sheet(wb, data: ReportData):
    ws = wb.create_sheet("Students")
    ws.append([
        "Student Name",
        "Email",
        "Course/Department",
        "Year",
        "Total Activities",
        "Approved Activities",
    ])
    _format_header(ws)
    for student in data.students:
        student_activities = [a for a in data.activities if a.student_id == student.id]
        approved = [a for a in student_activities if a.status == "approved"]
        ws.append([
            student.name,
            student.email,
            student.course or student.department or "",
            student.year if student.year is not None else "",
            len(student_activities),
            len(approved),
        ])
    _auto_size_columns(ws)


def _trends_sheet(wb, data: ReportData, template: str):
    ws = wb.create_sheet("Monthly Trends")
    ws.append(["Month", "Activity Count"])
    _format_header(ws)
    for trend in data.summary.monthly_trends:
        ws.append([trend.month, trend.count])
    _auto_size_columns(ws)


def _criteria_sheet(wb, data: ReportData, template: str):
    summary = data.summary
    ws = wb.create_sheet(f"{template} Criteria")
    ws.append(["Criteria"] + [label for _, label in TYPE_LABELS] + ["Total"])
    _format_header(ws)
    ws.append(
        ["Student Participation"]
        + [summary.type_count(t) for t, _ in TYPE_LABELS]
        + [summary.total_activities]
    )
    rates = []
    for activity_type, _ in TYPE_LABELS:
        approved = sum(
            1 for a in data.activities
            if a.activity_type == activity_type and a.status == "approved"
        )
        # Empty categories divide by 1 so the rate reads 0%
        rates.append(f"{percentage(approved, summary.type_count(activity_type) or 1)}%")
    ws.append(["Approval Rate"] + rates + [f"{summary.approval_rate}%"])
    _auto_size_columns(ws)


WORKBOOK_SHEETS: Dict[str, Callable[[Workbook, ReportData, str], None]] = {
    "monthly_trends": _trends_sheet,
    "criteria": _criteria_sheet,
}


def render_excel_report(
    data: ReportData,
    template: str,
    report_filter: ReportFilter,
    generated_at: Optional[datetime] = None,
) -> bytes:
    """Render a multi-sheet Excel workbook and return its bytes."""
    generated_at = generated_at or timezone.localtime()
    layout = TEMPLATE_LAYOUTS[template]

    wb = Workbook()
    _summary_sheet(wb.active, data, template, report_filter, generated_at)
    _activities_sheet(wb, data)
    _students_sheet(wb, data)
    for key in layout.workbook_sheets:
        WORKBOOK_SHEETS[key](wb, data, template)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OutputKind:
    extension: str
    content_type: str
    render: Callable[..., bytes]


RENDERERS: Dict[str, OutputKind] = {
    "PDF": OutputKind("pdf", "application/pdf", render_pdf_report),
    "Excel": OutputKind(
        "xlsx",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        render_excel_report,
    ),
}


def _match_name(value: str, names, label: str) -> str:
    lookup = {name.lower(): name for name in names}
    try:
        return lookup[str(value or "").strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported report {label} '{value}'. Choose one of: {', '.join(names)}"
        )


@dataclass(frozen=True)
class ReportFormat:
    """Output kind (PDF/Excel) and template (NAAC/AICTE/NIRF/Internal)."""
    kind: str
    template: str

    @classmethod
    def parse(cls, kind: str, template: str) -> "ReportFormat":
        """Validate user-supplied names (case-insensitive); raises ValueError."""
        if str(kind or "").strip().lower() == "xlsx":
            kind = "Excel"
        return cls(
            kind=_match_name(kind, list(RENDERERS), "format"),
            template=_match_name(template, list(TEMPLATE_LAYOUTS), "template"),
        )


def render_report(
    data: ReportData,
    report_format: ReportFormat,
    report_filter: Optional[ReportFilter] = None,
    generated_at: Optional[datetime] = None,
) -> RenderedReport:
    """Render ``data`` in the requested format.

    Raises:
        ReportGenerationError: if document construction fails. No partial
            output is returned in that case.
    """
    report_filter = report_filter or ReportFilter()
    generated_at = generated_at or timezone.localtime()
    output = RENDERERS[report_format.kind]
    try:
        content = output.render(data, report_format.template, report_filter, generated_at)
    except Exception as exc:
        raise ReportGenerationError(
            f"Failed to render {report_format.template} {report_format.kind} report: {exc}"
        ) from exc

    filename = report_filename(report_format.template, output.extension, generated_at)
    logger.info(
        "Rendered %s (%d bytes, %d activities)",
        filename,
        len(content),
        data.summary.total_activities,
    )
    return RenderedReport(filename=filename, content_type=output.content_type, content=content)
