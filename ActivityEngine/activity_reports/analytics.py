"""Summary statistics over a filtered activity set."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging
import math

import pandas as pd
from django.utils import timezone

from .filters import ReportFilter, apply_filters
from .records import ActivityRecord, RecordSnapshot, UserRecord

logger = logging.getLogger(__name__)

UNKNOWN_DEPARTMENT = "Unknown"
TREND_WINDOW_MONTHS = 12


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def percentage(part: int, total: int) -> int:
    """Whole-number percentage of part in total; 0 when total is 0."""
    if not total:
        return 0
    return round_half_up(part / total * 100)


@dataclass(frozen=True)
class MonthlyTrend:
    month: str
    count: int


@dataclass(frozen=True)
class ReportSummary:
    total_activities: int
    total_students: int
    approval_rate: int
    activities_by_type: Dict[str, int]
    activities_by_department: Dict[str, int]
    monthly_trends: Tuple[MonthlyTrend, ...]

    def type_count(self, activity_type: str) -> int:
        return self.activities_by_type.get(activity_type, 0)


@dataclass(frozen=True)
class ReportData:
    """Aggregates plus the filtered records that produced them."""
    summary: ReportSummary
    activities: Tuple[ActivityRecord, ...] = field(default_factory=tuple)
    students: Tuple[UserRecord, ...] = field(default_factory=tuple)

    def to_dict(self, include_records: bool = True) -> Dict[str, Any]:
        summary = self.summary
        data: Dict[str, Any] = {
            "summary": {
                "total_activities": summary.total_activities,
                "total_students": summary.total_students,
                "approval_rate": summary.approval_rate,
                "activities_by_type": dict(summary.activities_by_type),
                "activities_by_department": dict(summary.activities_by_department),
                "monthly_trends": [
                    {"month": t.month, "count": t.count} for t in summary.monthly_trends
                ],
            }
        }
        if include_records:
            data["activities"] = [a.to_dict() for a in self.activities]
            data["students"] = [s.to_dict() for s in self.students]
        return data


def resolve_department(student_id: str, users_by_id: Dict[str, UserRecord]) -> str:
    student = users_by_id.get(student_id)
    if student is None:
        return UNKNOWN_DEPARTMENT
    return student.department_or_course or UNKNOWN_DEPARTMENT


def monthly_trends(
    activities: Sequence[ActivityRecord], today: Optional[date] = None
) -> List[MonthlyTrend]:
    """Activity counts for the 12 calendar months ending at the current month."""
    today = today or timezone.localdate()
    window = pd.period_range(
        end=pd.Period(year=today.year, month=today.month, freq="M"),
        periods=TREND_WINDOW_MONTHS,
        freq="M",
    )
    counts = Counter(
        pd.Period(year=a.date.year, month=a.date.month, freq="M")
        for a in activities
        if a.date is not None
    )
    return [MonthlyTrend(month=p.strftime("%b %Y"), count=counts.get(p, 0)) for p in window]


def build_report_data(
    activities: Sequence[ActivityRecord],
    students: Sequence[UserRecord],
    all_users: Sequence[UserRecord],
    today: Optional[date] = None,
) -> ReportData:
    """Aggregate a filtered activity/student set into ReportData.

    Departments are resolved against ``all_users`` (the unfiltered list), not
    the filtered student list.
    """
    users_by_id = {u.id: u for u in all_users}

    by_type: Dict[str, int] = {}
    by_department: Dict[str, int] = {}
    approved = 0
    for activity in activities:
        by_type[activity.activity_type] = by_type.get(activity.activity_type, 0) + 1
        dept = resolve_department(activity.student_id, users_by_id)
        by_department[dept] = by_department.get(dept, 0) + 1
        if activity.status == "approved":
            approved += 1

    summary = ReportSummary(
        total_activities=len(activities),
        total_students=len(students),
        approval_rate=percentage(approved, len(activities)),
        activities_by_type=by_type,
        activities_by_department=by_department,
        monthly_trends=tuple(monthly_trends(activities, today)),
    )
    logger.debug(
        "Aggregated %d activities: approval rate %d%%, types %s",
        summary.total_activities,
        summary.approval_rate,
        by_type,
    )
    return ReportData(summary=summary, activities=tuple(activities), students=tuple(students))


def generate_report_data(
    snapshot: RecordSnapshot,
    report_filter: Optional[ReportFilter] = None,
    today: Optional[date] = None,
) -> ReportData:
    """Filter a snapshot and aggregate the result."""
    activities, students = apply_filters(snapshot.activities, snapshot.users, report_filter)
    return build_report_data(activities, students, snapshot.users, today=today)
