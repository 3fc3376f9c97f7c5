"""Report filters and the filter engine.

A ``ReportFilter`` has exactly four optional dimensions. Values inside a
dimension are OR-ed, dimensions are AND-ed, and an absent or malformed
dimension places no constraint on the result.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple
import logging

from .records import ActivityRecord, UserRecord, format_display_date, parse_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def contains(self, value: Optional[date]) -> bool:
        return value is not None and self.start <= value <= self.end


def _as_list(value) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _clean_years(values) -> Optional[FrozenSet[int]]:
    years = set()
    for v in _as_list(values):
        try:
            years.add(int(v))
        except (TypeError, ValueError):
            logger.debug("Ignoring malformed year filter value %r", v)
    return frozenset(years) or None


def _clean_strings(values) -> Optional[FrozenSet[str]]:
    cleaned = {str(v).strip() for v in _as_list(values) if v is not None and str(v).strip()}
    return frozenset(cleaned) or None


def _clean_date_range(start, end) -> Optional[DateRange]:
    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date is None or end_date is None:
        if start or end:
            logger.debug("Ignoring incomplete date range %r - %r", start, end)
        return None
    return DateRange(start=start_date, end=end_date)


@dataclass(frozen=True)
class ReportFilter:
    """Predicate bag selecting which activities feed a report."""
    years: Optional[FrozenSet[int]] = None
    departments: Optional[FrozenSet[str]] = None
    activity_types: Optional[FrozenSet[str]] = None
    date_range: Optional[DateRange] = None

    @classmethod
    def build(
        cls,
        years: Iterable = None,
        departments: Iterable = None,
        activity_types: Iterable = None,
        start_date=None,
        end_date=None,
    ) -> "ReportFilter":
        return cls(
            years=_clean_years(years),
            departments=_clean_strings(departments),
            activity_types=_clean_strings(activity_types),
            date_range=_clean_date_range(start_date, end_date),
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ReportFilter":
        """Build a filter from a JSON-shaped dict; unknown keys are ignored.

        Both the platform's camelCase keys (``year``, ``department``,
        ``activityType``, ``dateRange``) and snake_case keys are recognised.
        """
        data = data or {}
        date_range = data.get("dateRange") or data.get("date_range") or {}
        if not isinstance(date_range, dict):
            date_range = {}
        return cls.build(
            years=data.get("year") or data.get("years"),
            departments=data.get("department") or data.get("departments"),
            activity_types=(
                data.get("activityType")
                or data.get("activity_type")
                or data.get("activity_types")
            ),
            start_date=date_range.get("start"),
            end_date=date_range.get("end"),
        )

    @classmethod
    def from_query(cls, query) -> "ReportFilter":
        """Build a filter from a Django QueryDict (repeated keys for multi-values)."""
        return cls.build(
            years=query.getlist("year"),
            departments=query.getlist("department"),
            activity_types=query.getlist("activity_type"),
            start_date=query.get("start_date"),
            end_date=query.get("end_date"),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.years or self.departments or self.activity_types or self.date_range)

    def describe(self) -> str:
        """Human readable summary used in report headers."""
        parts = []
        if self.years:
            parts.append("Years: " + ", ".join(str(y) for y in sorted(self.years, reverse=True)))
        if self.departments:
            parts.append("Departments: " + ", ".join(sorted(self.departments)))
        if self.activity_types:
            parts.append("Types: " + ", ".join(sorted(self.activity_types)))
        if self.date_range:
            parts.append(
                f"Date Range: {format_display_date(self.date_range.start)} - "
                f"{format_display_date(self.date_range.end)}"
            )
        return " | ".join(parts) if parts else "No filters applied"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "years": sorted(self.years) if self.years else [],
            "departments": sorted(self.departments) if self.departments else [],
            "activity_types": sorted(self.activity_types) if self.activity_types else [],
            "date_range": {
                "start": self.date_range.start.isoformat(),
                "end": self.date_range.end.isoformat(),
            } if self.date_range else None,
        }


def apply_filters(
    activities: Sequence[ActivityRecord],
    users: Sequence[UserRecord],
    report_filter: Optional[ReportFilter] = None,
) -> Tuple[List[ActivityRecord], List[UserRecord]]:
    """Narrow the activity list and derive the matching student list.

    Predicates are applied in the order year, department, type, date range;
    each narrows the result of the previous one.
    """
    report_filter = report_filter or ReportFilter()
    filtered_activities = list(activities)
    filtered_students = [u for u in users if u.role == "student"]

    if report_filter.years:
        filtered_activities = [
            a for a in filtered_activities
            if a.date is not None and a.date.year in report_filter.years
        ]

    if report_filter.departments:
        filtered_students = [
            s for s in filtered_students
            if (s.department_or_course or "") in report_filter.departments
        ]
        student_ids = {s.id for s in filtered_students}
        filtered_activities = [a for a in filtered_activities if a.student_id in student_ids]

    if report_filter.activity_types:
        filtered_activities = [
            a for a in filtered_activities if a.activity_type in report_filter.activity_types
        ]

    if report_filter.date_range:
        filtered_activities = [
            a for a in filtered_activities if report_filter.date_range.contains(a.date)
        ]

    logger.debug(
        "Filter [%s] kept %d of %d activities, %d students",
        report_filter.describe(),
        len(filtered_activities),
        len(activities),
        len(filtered_students),
    )
    return filtered_activities, filtered_students
