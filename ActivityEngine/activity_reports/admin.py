from django.contrib import admin
from .models import Activity, PlatformUser


@admin.register(PlatformUser)
class PlatformUserAdmin(admin.ModelAdmin):
	list_display = ('name', 'user_id', 'email', 'role', 'course', 'year', 'department')
	search_fields = ('name', 'user_id', 'email', 'course', 'department')
	list_filter = ('role', 'course', 'department', 'year')
	ordering = ('name',)


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
	list_display = ('title', 'student_name', 'activity_type', 'date', 'status', 'reviewed_by')
	search_fields = ('title', 'student_name', 'student_id', 'description')
	list_filter = ('status', 'activity_type', 'date')
	readonly_fields = ('created_at', 'reviewed_at')
	ordering = ('-date',)

	fieldsets = (
		('Activity Information', {
			'fields': ('activity_id', 'student_id', 'student_name', 'activity_type', 'title', 'description', 'date')
		}),
		('Attachment', {
			'fields': ('file_name', 'file_url'),
			'classes': ('collapse',)
		}),
		('Review', {
			'fields': ('status', 'reviewed_by', 'reviewed_at', 'feedback')
		}),
		('Audit Trail', {
			'fields': ('created_at',),
			'classes': ('collapse',)
		}),
	)
