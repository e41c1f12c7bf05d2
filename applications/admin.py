from django.contrib import admin
from .models import Application


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ['student_index_number', 'user', 'room', 'average_grade', 'is_active', 'deactivation_reason', 'created_at']
    list_filter = ['is_active', 'deactivation_reason', 'room__dormitory']
    search_fields = ['student_index_number', 'user__username', 'room__number']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Applicant', {
            'fields': ('user', 'student_index_number', 'average_grade')
        }),
        ('Room', {
            'fields': ('room',)
        }),
        ('Status', {
            'fields': ('is_active', 'deactivation_reason', 'created_at', 'updated_at')
        }),
    )
