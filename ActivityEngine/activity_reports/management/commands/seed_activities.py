from django.core.management.base import BaseCommand
from django.db import transaction

from ActivityEngine.activity_reports.models import Activity, PlatformUser

SEED_USERS = [
    {
        'id': '1',
        'email': 'student1@university.edu',
        'role': 'student',
        'name': 'Alice Johnson',
        'course': 'Computer Science',
        'branch': 'Software Engineering',
        'year': 3,
    },
    {
        'id': '2',
        'email': 'student2@university.edu',
        'role': 'student',
        'name': 'Bob Smith',
        'course': 'Electrical Engineering',
        'branch': 'Electronics',
        'year': 2,
    },
    {
        'id': '3',
        'email': 'faculty1@university.edu',
        'role': 'faculty',
        'name': 'Dr. Sarah Wilson',
        'department': 'Computer Science',
    },
    {
        'id': '4',
        'email': 'faculty2@university.edu',
        'role': 'faculty',
        'name': 'Prof. Michael Brown',
        'department': 'Electrical Engineering',
    },
]

SEED_ACTIVITIES = [
    {
        'id': '1',
        'studentId': '1',
        'studentName': 'Alice Johnson',
        'type': 'academic',
        'title': 'Research Paper on Machine Learning',
        'description': 'Published research paper on deep learning algorithms in IEEE conference',
        'date': '2024-01-15',
        'status': 'approved',
        'feedback': 'Excellent research work with significant contributions',
        'reviewedBy': 'Dr. Sarah Wilson',
        'reviewedAt': '2024-01-20',
        'createdAt': '2024-01-15',
    },
    {
        'id': '2',
        'studentId': '1',
        'studentName': 'Alice Johnson',
        'type': 'extracurricular',
        'title': 'Hackathon Winner',
        'description': 'Won first place in university-wide hackathon with innovative mobile app',
        'date': '2024-02-10',
        'status': 'pending',
        'createdAt': '2024-02-10',
    },
    {
        'id': '3',
        'studentId': '2',
        'studentName': 'Bob Smith',
        'type': 'volunteering',
        'title': 'Community Tech Support',
        'description': 'Volunteered to provide tech support for elderly community members',
        'date': '2024-01-25',
        'status': 'approved',
        'feedback': 'Great community service initiative',
        'reviewedBy': 'Prof. Michael Brown',
        'reviewedAt': '2024-01-30',
        'createdAt': '2024-01-25',
    },
]


class Command(BaseCommand):
    help = 'Seed the database with sample students, faculty and activities'

    @transaction.atomic
    def handle(self, *args, **kwargs):
        for data in SEED_USERS:
            user = PlatformUser.from_dict(data)
            self.stdout.write(f'User ready: {user}')

        for data in SEED_ACTIVITIES:
            activity = Activity.from_dict(data)
            activity.full_clean()
            self.stdout.write(f'Activity ready: {activity}')

        self.stdout.write(self.style.SUCCESS(
            f'Seeded {len(SEED_USERS)} users and {len(SEED_ACTIVITIES)} activities'
        ))
