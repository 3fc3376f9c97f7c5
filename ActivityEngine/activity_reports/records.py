"""Read-only record snapshots consumed by the report engine.

The filter engine and aggregator never talk to storage directly. Callers take a
``RecordSnapshot`` from a ``RecordStore`` and hand it to the engine, so the
same code path serves the Django tables, seed fixtures and test data.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Tuple
import logging

import pandas as pd

logger = logging.getLogger(__name__)

ACTIVITY_TYPES = ("academic", "extracurricular", "volunteering")
ACTIVITY_STATUSES = ("pending", "approved", "rejected")


def parse_date(value) -> Optional[date]:
    """Parse an activity date, returning None for missing or malformed values."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    # ISO 8601 only; day/month order is never guessed
    parsed = pd.to_datetime(value.strip(), errors="coerce", format="ISO8601")
    if pd.isna(parsed):
        return None
    return parsed.date()


def format_display_date(value) -> str:
    """Format a date the way reports print it, e.g. ``15 Jan 2024``."""
    parsed = parse_date(value)
    if parsed is None:
        return str(value) if value else ""
    return f"{parsed.day} {parsed.strftime('%b %Y')}"


def _pick(data: Dict[str, Any], *keys, default=None):
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class ActivityRecord:
    id: str
    student_id: str
    student_name: str
    activity_type: str
    title: str
    description: str = ""
    date: Optional[date] = None
    status: str = "pending"
    feedback: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[str] = None
    created_at: Optional[str] = None
    file_name: Optional[str] = None
    file_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivityRecord":
        """Build a record from the platform JSON shape (camelCase) or snake_case keys."""
        return cls(
            id=str(_pick(data, "id", "activity_id", default="")),
            student_id=str(_pick(data, "student_id", "studentId", default="")),
            student_name=_pick(data, "student_name", "studentName", default=""),
            activity_type=_pick(data, "activity_type", "type", default=""),
            title=_pick(data, "title", default=""),
            description=_pick(data, "description", default=""),
            date=parse_date(data.get("date")),
            status=_pick(data, "status", default="pending"),
            feedback=_pick(data, "feedback"),
            reviewed_by=_pick(data, "reviewed_by", "reviewedBy"),
            reviewed_at=_pick(data, "reviewed_at", "reviewedAt"),
            created_at=_pick(data, "created_at", "createdAt"),
            file_name=_pick(data, "file_name", "fileName"),
            file_url=_pick(data, "file_url", "fileUrl"),
        )

    @classmethod
    def from_model(cls, activity) -> "ActivityRecord":
        return cls(
            id=activity.activity_id,
            student_id=activity.student_id,
            student_name=activity.student_name,
            activity_type=activity.activity_type,
            title=activity.title,
            description=activity.description or "",
            date=activity.date,
            status=activity.status,
            feedback=activity.feedback,
            reviewed_by=activity.reviewed_by,
            reviewed_at=activity.reviewed_at.isoformat() if activity.reviewed_at else None,
            created_at=activity.created_at.isoformat() if activity.created_at else None,
            file_name=activity.file_name,
            file_url=activity.file_url,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "activity_type": self.activity_type,
            "title": self.title,
            "description": self.description,
            "date": self.date.isoformat() if self.date else None,
            "status": self.status,
            "feedback": self.feedback,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class UserRecord:
    id: str
    email: str
    name: str
    role: str = "student"
    course: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[int] = None
    department: Optional[str] = None

    @property
    def department_or_course(self) -> Optional[str]:
        return self.department or self.course

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserRecord":
        return cls(
            id=str(_pick(data, "id", "user_id", default="")),
            email=_pick(data, "email", default=""),
            name=_pick(data, "name", default=""),
            role=_pick(data, "role", default="student"),
            course=data.get("course"),
            branch=data.get("branch"),
            year=data.get("year"),
            department=data.get("department"),
        )

    @classmethod
    def from_model(cls, user) -> "UserRecord":
        return cls(
            id=user.user_id,
            email=user.email,
            name=user.name,
            role=user.role,
            course=user.course,
            branch=user.branch,
            year=user.year,
            department=user.department,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "course": self.course,
            "branch": self.branch,
            "year": self.year,
            "department": self.department,
        }


@dataclass(frozen=True)
class RecordSnapshot:
    """Frozen view of the full activity and user collections."""
    activities: Tuple[ActivityRecord, ...] = field(default_factory=tuple)
    users: Tuple[UserRecord, ...] = field(default_factory=tuple)

    @property
    def students(self) -> Tuple[UserRecord, ...]:
        return tuple(u for u in self.users if u.role == "student")


class RecordStore(ABC):
    """Source of activity and user records for the report engine."""

    @abstractmethod
    def snapshot(self) -> RecordSnapshot:
        """Return the current full working set."""


class InMemoryRecordStore(RecordStore):
    """Record store backed by plain sequences (records or JSON-shaped dicts)."""

    def __init__(self, activities: Iterable = (), users: Iterable = ()):
        self._activities = tuple(
            a if isinstance(a, ActivityRecord) else ActivityRecord.from_dict(a)
            for a in activities
        )
        self._users = tuple(
            u if isinstance(u, UserRecord) else UserRecord.from_dict(u)
            for u in users
        )

    def snapshot(self) -> RecordSnapshot:
        return RecordSnapshot(activities=self._activities, users=self._users)


class ModelRecordStore(RecordStore):
    """Record store reading the Activity and PlatformUser tables with a full scan."""

    def snapshot(self) -> RecordSnapshot:
        from .models import Activity, PlatformUser

        activities = tuple(ActivityRecord.from_model(a) for a in Activity.objects.all())
        users = tuple(UserRecord.from_model(u) for u in PlatformUser.objects.all())
        logger.debug(
            "Loaded snapshot with %d activities and %d users", len(activities), len(users)
        )
        return RecordSnapshot(activities=activities, users=users)
