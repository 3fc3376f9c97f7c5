from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from datetime import date, datetime


ACTIVITY_TYPE_CHOICES = [
    ('academic', 'Academic'),
    ('extracurricular', 'Extra-curricular'),
    ('volunteering', 'Volunteering'),
]

ACTIVITY_STATUS_CHOICES = [
    ('pending', 'Pending'),
    ('approved', 'Approved'),
    ('rejected', 'Rejected'),
]


class PlatformUser(models.Model):
    """A student or faculty member known to the activity platform.

    Students carry course/branch/year, faculty carry a department. The report
    engine only uses these rows as a lookup table.
    """
    user_id = models.CharField(max_length=64, unique=True)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=[
        ('student', 'Student'),
        ('faculty', 'Faculty'),
    ], default='student')

    # Student specific fields
    course = models.CharField(max_length=255, null=True, blank=True)
    branch = models.CharField(max_length=255, null=True, blank=True)
    year = models.PositiveSmallIntegerField(null=True, blank=True)
    # Faculty specific fields
    department = models.CharField(max_length=255, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']
        verbose_name = 'Platform User'
        verbose_name_plural = 'Platform Users'

    def __str__(self):
        return f"{self.name} ({self.role})"

    @classmethod
    def from_dict(cls, data: dict):
        """Create or update a user from the seed/JSON shape (camelCase or snake_case keys)."""
        user_id = str(data.get('user_id') or data['id'])
        obj, _ = cls.objects.update_or_create(
            user_id=user_id,
            defaults={
                'email': data['email'],
                'name': data.get('name', ''),
                'role': data.get('role', 'student'),
                'course': data.get('course'),
                'branch': data.get('branch'),
                'year': data.get('year'),
                'department': data.get('department'),
            }
        )
        return obj


class Activity(models.Model):
    """A student-submitted activity awaiting or having received faculty review.

    Reviewer fields (feedback, reviewed_by, reviewed_at) are populated only once
    the activity has been approved or rejected.
    """
    activity_id = models.CharField(max_length=64, unique=True)
    # Owner reference is kept as a plain id so activities of removed students survive
    student_id = models.CharField(max_length=64, db_index=True)
    student_name = models.CharField(max_length=255)
    activity_type = models.CharField(max_length=20, choices=ACTIVITY_TYPE_CHOICES)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    date = models.DateField()
    file_name = models.CharField(max_length=255, null=True, blank=True)
    file_url = models.CharField(max_length=500, null=True, blank=True)
    status = models.CharField(max_length=20, choices=ACTIVITY_STATUS_CHOICES, default='pending')

    feedback = models.TextField(null=True, blank=True)
    reviewed_by = models.CharField(max_length=255, null=True, blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['created_at', 'id']
        verbose_name = 'Activity'
        verbose_name_plural = 'Activities'

    def __str__(self):
        return f"{self.title} - {self.student_name} ({self.status})"

    def clean(self):
        is_reviewed = bool(self.reviewed_by and self.reviewed_at)
        if self.status == 'pending' and (self.reviewed_by or self.reviewed_at or self.feedback):
            raise ValidationError("Pending activities cannot carry reviewer details.")
        if self.status != 'pending' and not is_reviewed:
            raise ValidationError(
                f"A {self.status} activity must record who reviewed it and when."
            )

    def mark_reviewed(self, status: str, reviewer: str, feedback: str = None):
        """Approve or reject the activity, stamping the reviewer fields."""
        if status not in ('approved', 'rejected'):
            raise ValueError(f"Cannot review an activity as '{status}'")
        if not reviewer:
            raise ValueError("reviewer is required")
        self.status = status
        self.reviewed_by = reviewer
        self.reviewed_at = timezone.now()
        self.feedback = feedback or None
        self.save()

    @staticmethod
    def _coerce_date(value):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        return date.fromisoformat(str(value)[:10])

    @staticmethod
    def _coerce_datetime(value):
        if value is None or value == '':
            return None
        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, date):
            dt = datetime(value.year, value.month, value.day)
        else:
            dt = datetime.fromisoformat(str(value))
        if timezone.is_naive(dt):
            dt = timezone.make_aware(dt)
        return dt

    @classmethod
    def from_dict(cls, data: dict):
        """Create or update an activity from the seed/JSON shape.

        Accepts the camelCase keys of the platform's JSON payloads
        (studentId, reviewedBy, ...) as well as the model's field names.
        """
        def pick(*keys, default=None):
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return default

        activity_id = str(pick('activity_id', 'id'))
        created_at = cls._coerce_datetime(pick('created_at', 'createdAt')) or timezone.now()
        obj, _ = cls.objects.update_or_create(
            activity_id=activity_id,
            defaults={
                'student_id': str(pick('student_id', 'studentId')),
                'student_name': pick('student_name', 'studentName', default=''),
                'activity_type': pick('activity_type', 'type'),
                'title': pick('title', default=''),
                'description': pick('description', default=''),
                'date': cls._coerce_date(pick('date')),
                'file_name': pick('file_name', 'fileName'),
                'file_url': pick('file_url', 'fileUrl'),
                'status': pick('status', default='pending'),
                'feedback': pick('feedback'),
                'reviewed_by': pick('reviewed_by', 'reviewedBy'),
                'reviewed_at': cls._coerce_datetime(pick('reviewed_at', 'reviewedAt')),
                'created_at': created_at,
            }
        )
        return obj
