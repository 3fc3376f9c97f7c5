from django.apps import AppConfig


class ActivityReportsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ActivityEngine.activity_reports"
    label = "activity_reports"
    verbose_name = "Student Activity Reports"
