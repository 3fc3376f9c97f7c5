"""Shared records for report engine tests."""

from ActivityEngine.activity_reports.records import InMemoryRecordStore

USERS = [
    {
        "id": "1",
        "email": "student1@university.edu",
        "role": "student",
        "name": "Alice Johnson",
        "course": "Computer Science",
        "year": 3,
    },
    {
        "id": "2",
        "email": "student2@university.edu",
        "role": "student",
        "name": "Bob Smith",
        "course": "Electrical Engineering",
        "year": 2,
    },
    {
        "id": "3",
        "email": "faculty1@university.edu",
        "role": "faculty",
        "name": "Dr. Sarah Wilson",
        "department": "Computer Science",
    },
]

ACTIVITIES = [
    {
        "id": "1",
        "studentId": "1",
        "studentName": "Alice Johnson",
        "type": "academic",
        "title": "Research Paper on Machine Learning",
        "description": "Published research paper",
        "date": "2024-01-15",
        "status": "approved",
        "feedback": "Excellent research work",
        "reviewedBy": "Dr. Sarah Wilson",
        "reviewedAt": "2024-01-20",
        "createdAt": "2024-01-15",
    },
    {
        "id": "2",
        "studentId": "1",
        "studentName": "Alice Johnson",
        "type": "extracurricular",
        "title": "Hackathon Winner",
        "description": "Won first place in university-wide hackathon",
        "date": "2024-02-10",
        "status": "pending",
        "createdAt": "2024-02-10",
    },
    {
        "id": "3",
        "studentId": "2",
        "studentName": "Bob Smith",
        "type": "volunteering",
        "title": "Community Tech Support",
        "description": "Tech support for elderly community members",
        "date": "2024-01-25",
        "status": "approved",
        "feedback": "Great community service initiative",
        "reviewedBy": "Dr. Sarah Wilson",
        "reviewedAt": "2024-01-30",
        "createdAt": "2024-01-25",
    },
]


def make_store(activities=None, users=None):
    return InMemoryRecordStore(
        ACTIVITIES if activities is None else activities,
        USERS if users is None else users,
    )


def bulk_activities(count, student_id="1", activity_type="academic"):
    """Generate ``count`` approved activities for one student."""
    return [
        {
            "id": f"bulk-{i}",
            "studentId": student_id,
            "studentName": "Alice Johnson",
            "type": activity_type,
            "title": f"Workshop {i}",
            "date": "2024-03-01",
            "status": "approved",
            "reviewedBy": "Dr. Sarah Wilson",
            "reviewedAt": "2024-03-05",
        }
        for i in range(count)
    ]

TWO_ACTIVITIES = [
    {"id": "a", "studentId": "1", "type": "academic", "date": "2024-01-15", "status": "approved",
     "reviewedBy": "Dr. Sarah Wilson", "reviewedAt": "2024-01-20"},
    {"id": "b", "studentId": "1", "type": "extracurricular", "date": "2024-02-10", "status": "pending"},
]
